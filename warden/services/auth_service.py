"""Registration, login and profile lookup over the user directory."""

import logging
from typing import Any

from pydantic import ValidationError

from warden.core.errors import ErrorKind, Outcome
from warden.core.security import PasswordHasher
from warden.core.tokens import TokenService
from warden.core.validation import format_validation_errors
from warden.models.user import User
from warden.schemas.auth import AuthResult, LoginRequest, RegisterRequest, UserView
from warden.services.directory import UserAlreadyExistsError, UserDirectory

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
USERNAME_TAKEN = "Username already exists"
EMAIL_TAKEN = "Email already exists"
USER_NOT_FOUND = "User not found"


class AuthService:
    """
    Orchestrates the auth flows. Domain failures are returned as Outcome
    values carrying an ErrorKind; nothing here raises for a rejected request.

    The username/email pre-checks are not atomic with the insert. A racing
    duplicate is rejected by the directory's unique constraints and reported
    as the same Conflict.
    """

    def __init__(self, directory: UserDirectory, hasher: PasswordHasher, tokens: TokenService) -> None:
        self.directory = directory
        self.hasher = hasher
        self.tokens = tokens

    def register(self, username: Any, email: Any, password: Any) -> Outcome[AuthResult]:
        try:
            body = RegisterRequest.model_validate(
                {"username": username, "email": email, "password": password}
            )
        except ValidationError as e:
            return Outcome.failure(ErrorKind.INVALID_INPUT, format_validation_errors(e.errors()))

        conflict = self._conflict_message(body.username, body.email)
        if conflict:
            logger.info("Registration rejected: %s", conflict)
            return Outcome.failure(ErrorKind.CONFLICT, conflict)

        password_hash = self.hasher.hash(body.password)
        try:
            user = self.directory.create(
                username=body.username,
                email=body.email,
                password_hash=password_hash,
                role="user",
            )
        except UserAlreadyExistsError:
            # Lost a race with a concurrent registration; report which field collided.
            conflict = self._conflict_message(body.username, body.email) or USERNAME_TAKEN
            logger.info("Registration rejected at insert: %s", conflict)
            return Outcome.failure(ErrorKind.CONFLICT, conflict)

        logger.info("User registered: user_id=%s username=%s", user.id, user.username)
        return Outcome.success(self._auth_result(user))

    def login(self, identifier: Any, password: Any) -> Outcome[AuthResult]:
        try:
            body = LoginRequest.model_validate({"username": identifier, "password": password})
        except ValidationError as e:
            return Outcome.failure(ErrorKind.INVALID_INPUT, format_validation_errors(e.errors()))

        # The identifier may be either a username or an email.
        user = self.directory.find_by_username(body.username)
        if user is None:
            user = self.directory.find_by_email(body.username)

        if user is None or not self.hasher.verify(body.password, user.password_hash):
            logger.info("Login failed")
            return Outcome.failure(ErrorKind.UNAUTHORIZED, INVALID_CREDENTIALS)

        logger.info("Login succeeded: user_id=%s username=%s", user.id, user.username)
        return Outcome.success(self._auth_result(user))

    def get_profile(self, user_id: int) -> Outcome[UserView]:
        user = self.directory.find_by_id(user_id)
        if user is None:
            return Outcome.failure(ErrorKind.NOT_FOUND, USER_NOT_FOUND)
        return Outcome.success(UserView.from_user(user))

    def _conflict_message(self, username: str, email: str) -> str | None:
        if self.directory.find_by_username(username) is not None:
            return USERNAME_TAKEN
        if self.directory.find_by_email(email) is not None:
            return EMAIL_TAKEN
        return None

    def _auth_result(self, user: User) -> AuthResult:
        token = self.tokens.issue(user_id=user.id, username=user.username, role=user.role)
        return AuthResult(user=UserView.from_user(user), token=token)
