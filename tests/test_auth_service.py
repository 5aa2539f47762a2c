"""Unit tests for warden.services.auth_service with a mocked user directory."""

import unittest
from datetime import UTC, datetime
from unittest.mock import MagicMock

from warden.core.errors import ErrorKind
from warden.core.security import PasswordHasher
from warden.core.tokens import TokenConfig, TokenService
from warden.models.user import User
from warden.services.auth_service import AuthService
from warden.services.directory import UserAlreadyExistsError

SECRET = "unit-test-secret-key-that-is-32-bytes-or-more"
HASHER = PasswordHasher(rounds=4)


def _user(
    user_id: int = 1,
    username: str = "alice",
    email: str = "a@x.com",
    password: str = "secret1",
    role: str = "user",
) -> User:
    now = datetime(2026, 1, 1, tzinfo=UTC)
    return User(
        id=user_id,
        username=username,
        email=email,
        password_hash=HASHER.hash(password),
        role=role,
        created_at=now,
        updated_at=now,
    )


def _empty_directory() -> MagicMock:
    directory = MagicMock()
    directory.find_by_username.return_value = None
    directory.find_by_email.return_value = None
    directory.find_by_id.return_value = None
    return directory


class AuthServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.directory = _empty_directory()
        self.tokens = TokenService(TokenConfig(secret=SECRET))
        self.service = AuthService(self.directory, HASHER, self.tokens)


class TestRegister(AuthServiceTestCase):
    """register validates, checks uniqueness, hashes and issues a token."""

    def test_success_returns_token_and_user_view(self) -> None:
        self.directory.create.side_effect = lambda **kw: _user(
            user_id=5, username=kw["username"], email=kw["email"], role=kw["role"]
        )
        outcome = self.service.register("alice", "a@x.com", "secret1")

        self.assertTrue(outcome.ok)
        result = outcome.unwrap()
        self.assertEqual(result.user.id, 5)
        self.assertEqual(result.user.role, "user")
        self.assertNotIn("password", result.user.model_dump())
        self.assertNotIn("password_hash", result.user.model_dump())
        claims = self.tokens.verify(result.token)
        self.assertEqual((claims.userId, claims.username, claims.role), (5, "alice", "user"))

    def test_password_is_hashed_before_insert(self) -> None:
        self.directory.create.side_effect = lambda **kw: _user()
        self.service.register("alice", "a@x.com", "secret1")

        kwargs = self.directory.create.call_args.kwargs
        self.assertNotEqual(kwargs["password_hash"], "secret1")
        self.assertTrue(HASHER.verify("secret1", kwargs["password_hash"]))
        self.assertEqual(kwargs["role"], "user")

    def test_invalid_input_does_not_touch_directory(self) -> None:
        outcome = self.service.register("al", "bad", "123")

        self.assertEqual(outcome.error.kind, ErrorKind.INVALID_INPUT)
        self.assertEqual(outcome.error.status_code, 400)
        self.assertIn('"username"', outcome.error.message)
        self.assertIn('"email"', outcome.error.message)
        self.assertIn('"password"', outcome.error.message)
        self.directory.find_by_username.assert_not_called()
        self.directory.create.assert_not_called()

    def test_username_conflict(self) -> None:
        self.directory.find_by_username.return_value = _user()
        outcome = self.service.register("alice", "other@x.com", "secret1")

        self.assertEqual(outcome.error.kind, ErrorKind.CONFLICT)
        self.assertEqual(outcome.error.message, "Username already exists")
        self.directory.create.assert_not_called()

    def test_username_checked_before_email(self) -> None:
        self.directory.find_by_username.return_value = _user()
        self.directory.find_by_email.return_value = _user()
        outcome = self.service.register("alice", "a@x.com", "secret1")

        self.assertEqual(outcome.error.message, "Username already exists")

    def test_email_conflict(self) -> None:
        self.directory.find_by_email.return_value = _user()
        outcome = self.service.register("bob", "a@x.com", "secret1")

        self.assertEqual(outcome.error.kind, ErrorKind.CONFLICT)
        self.assertEqual(outcome.error.message, "Email already exists")
        self.directory.create.assert_not_called()

    def test_racing_duplicate_insert_is_conflict(self) -> None:
        # Pre-check passes, then a concurrent registration takes the email first.
        self.directory.find_by_email.side_effect = [None, _user(user_id=9, username="mallory")]
        self.directory.create.side_effect = UserAlreadyExistsError()
        outcome = self.service.register("bob", "a@x.com", "secret1")

        self.assertEqual(outcome.error.kind, ErrorKind.CONFLICT)
        self.assertEqual(outcome.error.status_code, 409)
        self.assertEqual(outcome.error.message, "Email already exists")

    def test_registration_log_names_the_user(self) -> None:
        self.directory.create.side_effect = lambda **kw: _user(
            user_id=5, username=kw["username"], email=kw["email"], role=kw["role"]
        )
        with self.assertLogs("warden.services.auth_service", level="INFO") as logs:
            self.service.register("alice", "a@x.com", "secret1")
        self.assertIn("user_id=5 username=alice", "\n".join(logs.output))
        self.assertNotIn("secret1", "\n".join(logs.output))


class TestLogin(AuthServiceTestCase):
    """login accepts username or email and never reveals which part was wrong."""

    def test_login_by_username(self) -> None:
        self.directory.find_by_username.return_value = _user(user_id=3)
        outcome = self.service.login("alice", "secret1")

        self.assertEqual(outcome.unwrap().user.id, 3)
        self.directory.find_by_email.assert_not_called()

    def test_login_by_email(self) -> None:
        self.directory.find_by_email.return_value = _user(user_id=3)
        outcome = self.service.login("a@x.com", "secret1")

        self.assertEqual(outcome.unwrap().user.id, 3)
        self.directory.find_by_username.assert_called_once_with("a@x.com")
        self.directory.find_by_email.assert_called_once_with("a@x.com")

    def test_wrong_password_and_unknown_user_are_identical(self) -> None:
        self.directory.find_by_username.side_effect = lambda name: _user() if name == "alice" else None
        wrong_password = self.service.login("alice", "nope-nope")
        unknown_user = self.service.login("nobody", "secret1")

        self.assertEqual(wrong_password.error, unknown_user.error)
        self.assertEqual(wrong_password.error.kind, ErrorKind.UNAUTHORIZED)
        self.assertEqual(wrong_password.error.message, "Invalid credentials")

    def test_corrupt_stored_hash_fails_closed(self) -> None:
        user = _user()
        user.password_hash = "garbage"
        self.directory.find_by_username.return_value = user
        outcome = self.service.login("alice", "secret1")

        self.assertEqual(outcome.error.message, "Invalid credentials")

    def test_missing_fields(self) -> None:
        outcome = self.service.login("alice", None)

        self.assertEqual(outcome.error.kind, ErrorKind.INVALID_INPUT)
        self.assertEqual(outcome.error.message, '"password" must be a string')
        self.directory.find_by_username.assert_not_called()


class TestGetProfile(AuthServiceTestCase):
    """get_profile returns the user view or NotFound."""

    def test_found(self) -> None:
        self.directory.find_by_id.return_value = _user(user_id=4)
        view = self.service.get_profile(4).unwrap()

        self.assertEqual(view.id, 4)
        self.assertEqual(
            set(view.model_dump(by_alias=True)),
            {"id", "username", "email", "role", "createdAt", "updatedAt"},
        )

    def test_not_found(self) -> None:
        outcome = self.service.get_profile(99)

        self.assertEqual(outcome.error.kind, ErrorKind.NOT_FOUND)
        self.assertEqual(outcome.error.status_code, 404)
        self.assertEqual(outcome.error.message, "User not found")
        with self.assertRaises(RuntimeError):
            outcome.unwrap()


if __name__ == "__main__":
    unittest.main()
