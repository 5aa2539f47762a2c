"""Request dependencies: container access, auth service, and the two-stage access gate."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from warden.api.errors import ApiError
from warden.container import Container
from warden.core.database import get_db
from warden.core.errors import ErrorKind
from warden.core.tokens import InvalidTokenError, TokenClaims
from warden.services.auth_service import AuthService

NO_TOKEN = "No token provided"
INVALID_TOKEN = "Invalid token"
ADMIN_REQUIRED = "Admin access required"

# auto_error=False: missing and malformed headers get distinct messages below.
bearer_scheme = HTTPBearer(auto_error=False, bearerFormat="JWT")


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    container: Annotated[Container, Depends(get_container)],
) -> AuthService:
    return container.auth_service(db)


def get_current_claims(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    container: Annotated[Container, Depends(get_container)],
) -> TokenClaims:
    """
    Authentication check: require 'Authorization: Bearer <token>' with a valid token.
    Stores the verified claims on request.state.user and returns them.
    """
    if not request.headers.get("Authorization"):
        raise ApiError.of(ErrorKind.UNAUTHORIZED, NO_TOKEN)
    if credentials is None:
        # Header present but not a bearer credential.
        raise ApiError.of(ErrorKind.UNAUTHORIZED, INVALID_TOKEN)
    try:
        claims = container.tokens.verify(credentials.credentials)
    except InvalidTokenError:
        raise ApiError.of(ErrorKind.UNAUTHORIZED, INVALID_TOKEN)
    request.state.user = claims
    return claims


def check_admin(claims: TokenClaims | None) -> TokenClaims:
    """Role gate over already-verified claims; never re-verifies the token."""
    if claims is None or claims.role != "admin":
        raise ApiError.of(ErrorKind.FORBIDDEN, ADMIN_REQUIRED)
    return claims


def require_admin(
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
) -> TokenClaims:
    """Dependency: require authenticated claims with role 'admin'. Raises 403 for non-admin."""
    return check_admin(claims)


CurrentClaims = Annotated[TokenClaims, Depends(get_current_claims)]
AdminClaims = Annotated[TokenClaims, Depends(require_admin)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
