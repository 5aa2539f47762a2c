"""Admin-only endpoints."""

from fastapi import APIRouter

from warden.api.deps import AdminClaims
from warden.schemas.auth import AdminCheck
from warden.schemas.envelope import ApiResponse

router = APIRouter()


@router.get(
    "/test",
    response_model=ApiResponse[AdminCheck],
    responses={401: {"description": "No token or invalid token"}, 403: {"description": "Admin access required"}},
)
def admin_test(claims: AdminClaims) -> ApiResponse[AdminCheck]:
    """Admin-only endpoint that exercises the role gate."""
    return ApiResponse[AdminCheck](
        message="Admin access granted",
        data=AdminCheck(message="This is an admin-only endpoint", user=claims.username),
    )
