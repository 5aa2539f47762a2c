"""User directory: keyed lookup, insert and update of user records."""

import logging
from typing import Any, Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from warden.models.user import User

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"username", "email", "password_hash", "role"})


class UserAlreadyExistsError(Exception):
    """Raised when an insert or update violates the username/email unique constraints."""

    def __init__(self, message: str = "User already exists") -> None:
        self.message = message
        super().__init__(message)


class UserNotFoundError(Exception):
    """Raised when updating a user id that does not exist."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        self.message = f"User {user_id} not found"
        super().__init__(self.message)


class UserDirectory(Protocol):
    """Storage collaborator consumed by the auth service."""

    def find_by_username(self, username: str) -> User | None: ...

    def find_by_email(self, email: str) -> User | None: ...

    def find_by_id(self, user_id: int) -> User | None: ...

    def create(self, username: str, email: str, password_hash: str, role: str = "user") -> User: ...

    def update(self, user_id: int, **fields: Any) -> User: ...


class SqlUserDirectory:
    """UserDirectory backed by the users table; uniqueness is enforced by the database."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_username(self, username: str) -> User | None:
        return self.db.query(User).filter(User.username == username).first()

    def find_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def find_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def create(self, username: str, email: str, password_hash: str, role: str = "user") -> User:
        user = User(username=username, email=email, password_hash=password_hash, role=role)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise UserAlreadyExistsError() from e
        self.db.refresh(user)
        return user

    def update(self, user_id: int, **fields: Any) -> User:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        user = self.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        for name, value in fields.items():
            setattr(user, name, value)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise UserAlreadyExistsError() from e
        self.db.refresh(user)
        return user
