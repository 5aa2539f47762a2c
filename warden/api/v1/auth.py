"""Register, login and profile endpoints."""

from fastapi import APIRouter, status

from warden.api.deps import AuthServiceDep, CurrentClaims
from warden.api.errors import unwrap_or_raise
from warden.schemas.auth import AuthResult, LoginRequest, RegisterRequest, UserView
from warden.schemas.envelope import ApiResponse

router = APIRouter()


@router.post(
    "/register",
    response_model=ApiResponse[AuthResult],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Invalid input"}, 409: {"description": "Username or email already exists"}},
)
def register(body: RegisterRequest, service: AuthServiceDep) -> ApiResponse[AuthResult]:
    """Create a user account with role 'user' and return it with a session token."""
    result = unwrap_or_raise(service.register(body.username, body.email, body.password))
    return ApiResponse[AuthResult](message="User registered successfully", data=result)


@router.post(
    "/login",
    response_model=ApiResponse[AuthResult],
    responses={400: {"description": "Missing fields"}, 401: {"description": "Invalid credentials"}},
)
def login(body: LoginRequest, service: AuthServiceDep) -> ApiResponse[AuthResult]:
    """
    Authenticate with username (or email) and password; returns a JWT.
    Include the token in the Authorization header as: Bearer <token>
    """
    result = unwrap_or_raise(service.login(body.username, body.password))
    return ApiResponse[AuthResult](message="Login successful", data=result)


@router.get(
    "/profile",
    response_model=ApiResponse[UserView],
    responses={401: {"description": "No token, invalid or expired token"}, 404: {"description": "User not found"}},
)
def get_profile(claims: CurrentClaims, service: AuthServiceDep) -> ApiResponse[UserView]:
    """Return the authenticated user's profile."""
    user = unwrap_or_raise(service.get_profile(claims.userId))
    return ApiResponse[UserView](message="Profile retrieved successfully", data=user)
