"""Signed session tokens: issue and verify HS* JWTs carrying identity claims."""

import re
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, Literal

import jwt
from pydantic import BaseModel, ConfigDict, Field

# "72h", "30m", "45s", "7d" or a bare number of seconds.
_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_UNIT_SECONDS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}

REQUIRED_CLAIMS = ("userId", "username", "role", "iat", "exp")

Clock = Callable[[], datetime]


def parse_duration(value: str | int) -> int:
    """Convert a duration string such as '72h' into whole seconds."""
    if isinstance(value, int):
        return value
    match = _DURATION_RE.match(value or "")
    if match is None:
        raise ValueError(f"Invalid duration {value!r}; expected e.g. 3600, 45s, 30m, 72h, 7d")
    amount, unit = match.groups()
    return int(amount) * _UNIT_SECONDS[unit.lower()]


def utc_now() -> datetime:
    return datetime.now(UTC)


class InvalidTokenError(Exception):
    """Raised for any token that fails verification (malformed, bad signature, expired)."""

    def __init__(self, message: str = "Invalid token") -> None:
        self.message = message
        super().__init__(message)


class TokenConfig(BaseModel):
    """Immutable signing configuration, built once at startup."""

    model_config = ConfigDict(frozen=True)

    secret: str = Field(..., min_length=1, repr=False)
    algorithm: str = "HS256"
    ttl_seconds: int = Field(default=72 * 3600, ge=1)


class TokenClaims(BaseModel):
    """Identity claims carried by a verified session token."""

    model_config = ConfigDict(frozen=True)

    userId: int
    username: str
    role: Literal["user", "admin"]
    iat: int
    exp: int


class TokenService:
    """
    Issue and verify session tokens.

    Expiry is checked against this service's clock at verification time: a
    token with expiry E is valid while now < E. Clock skew between the issuing
    and verifying processes is not compensated for.
    """

    def __init__(self, config: TokenConfig, clock: Clock = utc_now) -> None:
        self._config = config
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return self._config.ttl_seconds

    def issue(
        self,
        user_id: int,
        username: str,
        role: str,
        ttl_seconds: int | None = None,
    ) -> str:
        """Create a signed token for the given identity, expiring after ttl seconds."""
        ttl = self._config.ttl_seconds if ttl_seconds is None else ttl_seconds
        if ttl < 1:
            raise ValueError("Token ttl must be at least one second")
        issued_at = int(self._clock().timestamp())
        payload: dict[str, Any] = {
            "userId": user_id,
            "username": username,
            "role": role,
            "iat": issued_at,
            "exp": issued_at + ttl,
        }
        return jwt.encode(payload, self._config.secret, algorithm=self._config.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Return the claims of a valid token.
        Raises InvalidTokenError for malformed, tampered, incomplete or expired tokens.
        """
        if not token or not isinstance(token, str):
            raise InvalidTokenError()
        try:
            # Time-based claims are checked below against the injected clock.
            payload = jwt.decode(
                token,
                self._config.secret,
                algorithms=[self._config.algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": list(REQUIRED_CLAIMS),
                },
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError() from e
        try:
            claims = TokenClaims.model_validate(payload)
        except ValueError as e:
            raise InvalidTokenError() from e
        if int(self._clock().timestamp()) >= claims.exp:
            raise InvalidTokenError()
        return claims
