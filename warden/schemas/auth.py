"""Request/response schemas for auth endpoints."""

from datetime import datetime
from typing import Literal

from email_validator import EmailNotValidError, validate_email
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from warden.core.security import PASSWORD_MIN_LEN, USERNAME_MAX_LEN, USERNAME_MIN_LEN
from warden.models.user import User


class RegisterRequest(BaseModel):
    """New account details."""

    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        description="Username (3-50 characters)",
    )
    email: str = Field(..., description="Email address")
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, description="Password (at least 6 characters)")

    @field_validator("email")
    @classmethod
    def validate_email_syntax(cls, v: str) -> str:
        # Syntax check only; the address is stored exactly as submitted so login can match it.
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(str(e)) from e
        return v


class LoginRequest(BaseModel):
    """Credentials for login; username accepts either the username or the email."""

    username: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1, description="Password")


class UserView(BaseModel):
    """User record safe for external exposure (no password)."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    username: str
    email: str
    role: Literal["user", "admin"]
    created_at: datetime | None = Field(
        default=None,
        serialization_alias="createdAt",
        validation_alias=AliasChoices("created_at", "createdAt"),
    )
    updated_at: datetime | None = Field(
        default=None,
        serialization_alias="updatedAt",
        validation_alias=AliasChoices("updated_at", "updatedAt"),
    )

    @classmethod
    def from_user(cls, user: User) -> "UserView":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthResult(BaseModel):
    """Token plus user view returned by register and login."""

    user: UserView
    token: str = Field(..., description="JWT access token; send as Authorization: Bearer <token>")


class AdminCheck(BaseModel):
    """Payload of the admin-only check endpoint."""

    message: str
    user: str
