"""SQLAlchemy ORM models."""

from warden.models.base import Base
from warden.models.user import USER_ROLES, User

__all__ = ["Base", "USER_ROLES", "User"]
