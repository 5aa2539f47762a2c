"""Unit tests for warden.core.tokens: duration parsing, issuance, verification and expiry."""

import base64
import unittest
from datetime import UTC, datetime, timedelta

import jwt

from warden.core.tokens import InvalidTokenError, TokenConfig, TokenService, parse_duration

SECRET = "unit-test-secret-key-that-is-32-bytes-or-more"
T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)


class FakeClock:
    """Settable clock for driving expiry checks."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now = self.now + timedelta(seconds=seconds)


def _service(clock: FakeClock, ttl: int = 3600, secret: str = SECRET) -> TokenService:
    return TokenService(TokenConfig(secret=secret, ttl_seconds=ttl), clock=clock)


def _flip_signature_byte(token: str, index: int = 5) -> str:
    header, payload, signature = token.split(".")
    raw = bytearray(base64.urlsafe_b64decode(signature + "=" * (-len(signature) % 4)))
    raw[index] ^= 0x01
    tampered = base64.urlsafe_b64encode(bytes(raw)).rstrip(b"=").decode("ascii")
    return f"{header}.{payload}.{tampered}"


class TestParseDuration(unittest.TestCase):
    """parse_duration accepts '<n>[smhd]' and bare seconds."""

    def test_units(self) -> None:
        self.assertEqual(parse_duration("45s"), 45)
        self.assertEqual(parse_duration("30m"), 1800)
        self.assertEqual(parse_duration("72h"), 259200)
        self.assertEqual(parse_duration("7d"), 604800)

    def test_bare_number_is_seconds(self) -> None:
        self.assertEqual(parse_duration("3600"), 3600)
        self.assertEqual(parse_duration(90), 90)

    def test_case_and_whitespace(self) -> None:
        self.assertEqual(parse_duration(" 2H "), 7200)

    def test_invalid(self) -> None:
        for value in ("", "h", "1w", "1.5h", "-1h", "ten minutes"):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    parse_duration(value)


class TestIssueAndVerify(unittest.TestCase):
    """Tokens carry identity claims and verify with the same secret."""

    def setUp(self) -> None:
        self.clock = FakeClock(T0)
        self.service = _service(self.clock)

    def test_claims_round_trip(self) -> None:
        token = self.service.issue(user_id=7, username="alice", role="user")
        claims = self.service.verify(token)
        self.assertEqual(claims.userId, 7)
        self.assertEqual(claims.username, "alice")
        self.assertEqual(claims.role, "user")
        self.assertEqual(claims.iat, int(T0.timestamp()))
        self.assertEqual(claims.exp, int(T0.timestamp()) + 3600)

    def test_default_ttl_from_config(self) -> None:
        service = TokenService(TokenConfig(secret=SECRET), clock=self.clock)
        claims = service.verify(service.issue(1, "a", "admin"))
        self.assertEqual(claims.exp - claims.iat, 72 * 3600)

    def test_ttl_override(self) -> None:
        claims = self.service.verify(self.service.issue(1, "a", "user", ttl_seconds=60))
        self.assertEqual(claims.exp - claims.iat, 60)

    def test_non_positive_ttl_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.service.issue(1, "a", "user", ttl_seconds=0)

    def test_secret_not_in_config_repr(self) -> None:
        self.assertNotIn(SECRET, repr(TokenConfig(secret=SECRET)))


class TestExpiryBoundary(unittest.TestCase):
    """A token issued at T with ttl D is valid at T+D-1 and rejected from T+D on."""

    def setUp(self) -> None:
        self.clock = FakeClock(T0)
        self.service = _service(self.clock, ttl=600)
        self.token = self.service.issue(user_id=1, username="bob", role="user")

    def test_valid_one_second_before_expiry(self) -> None:
        self.clock.advance(599)
        self.assertEqual(self.service.verify(self.token).username, "bob")

    def test_rejected_at_expiry(self) -> None:
        self.clock.advance(600)
        with self.assertRaises(InvalidTokenError):
            self.service.verify(self.token)

    def test_rejected_one_second_after_expiry(self) -> None:
        self.clock.advance(601)
        with self.assertRaises(InvalidTokenError) as ctx:
            self.service.verify(self.token)
        self.assertEqual(ctx.exception.message, "Invalid token")


class TestRejections(unittest.TestCase):
    """Every rejection raises InvalidTokenError with the same message."""

    def setUp(self) -> None:
        self.clock = FakeClock(T0)
        self.service = _service(self.clock)
        self.token = self.service.issue(user_id=3, username="carol", role="admin")

    def _assert_invalid(self, token: str) -> None:
        with self.assertRaises(InvalidTokenError) as ctx:
            self.service.verify(token)
        self.assertEqual(ctx.exception.message, "Invalid token")

    def test_tampered_signature_byte(self) -> None:
        for index in (0, 5, 16, 31):
            with self.subTest(index=index):
                self._assert_invalid(_flip_signature_byte(self.token, index))

    def test_tampered_payload(self) -> None:
        forged = jwt.encode(
            {"userId": 3, "username": "carol", "role": "admin", "iat": 0, "exp": 2**40},
            "some-other-secret-that-is-also-long-enough",
            algorithm="HS256",
        )
        header, _, signature = self.token.split(".")
        self._assert_invalid(f"{header}.{forged.split('.')[1]}.{signature}")

    def test_rotated_secret_invalidates_tokens(self) -> None:
        rotated = _service(self.clock, secret=SECRET + "-rotated")
        with self.assertRaises(InvalidTokenError):
            rotated.verify(self.token)

    def test_malformed(self) -> None:
        for token in ("", "abc", "a.b.c", "Bearer x"):
            with self.subTest(token=token):
                self._assert_invalid(token)

    def test_missing_claims(self) -> None:
        now = int(T0.timestamp())
        token = jwt.encode({"userId": 3, "iat": now, "exp": now + 60}, SECRET, algorithm="HS256")
        self._assert_invalid(token)

    def test_unknown_role(self) -> None:
        now = int(T0.timestamp())
        token = jwt.encode(
            {"userId": 3, "username": "x", "role": "root", "iat": now, "exp": now + 60},
            SECRET,
            algorithm="HS256",
        )
        self._assert_invalid(token)

    def test_unsigned_token(self) -> None:
        now = int(T0.timestamp())
        token = jwt.encode(
            {"userId": 3, "username": "x", "role": "admin", "iat": now, "exp": now + 60},
            None,
            algorithm="none",
        )
        self._assert_invalid(token)


if __name__ == "__main__":
    unittest.main()
