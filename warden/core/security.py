"""Password hashing and verification, plus the fixed credential length rules."""

import bcrypt

# Bcrypt cost (rounds); 10 matches the default work factor of common bcrypt libraries.
BCRYPT_ROUNDS = 10

# bcrypt only reads the first 72 bytes of its input.
BCRYPT_MAX_INPUT_BYTES = 72

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 50
PASSWORD_MIN_LEN = 6


def _to_bytes(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_INPUT_BYTES]


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    return bcrypt.hashpw(_to_bytes(plain_password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Malformed hashes never match."""
    if not isinstance(plain_password, str) or not isinstance(hashed, str) or not hashed:
        return False
    try:
        return bcrypt.checkpw(_to_bytes(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class PasswordHasher:
    """bcrypt hasher bound to a cost factor, shared by the service and the seed scripts."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS) -> None:
        self.rounds = rounds

    def hash(self, plain_password: str) -> str:
        return hash_password(plain_password, rounds=self.rounds)

    def verify(self, plain_password: str, hashed: str) -> bool:
        return verify_password(plain_password, hashed)
