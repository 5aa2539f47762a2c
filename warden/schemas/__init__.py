"""Pydantic request/response schemas."""

from warden.schemas.auth import (
    AdminCheck,
    AuthResult,
    LoginRequest,
    RegisterRequest,
    UserView,
)
from warden.schemas.envelope import ApiResponse, ErrorResponse
from warden.schemas.health import HealthResponse, PingResponse

__all__ = [
    "AdminCheck",
    "ApiResponse",
    "AuthResult",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "PingResponse",
    "RegisterRequest",
    "UserView",
]
