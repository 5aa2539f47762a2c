"""One-time bootstrap of the default administrator account."""

import logging

from warden.core.security import PasswordHasher
from warden.models.user import User
from warden.services.directory import UserAlreadyExistsError, UserDirectory

logger = logging.getLogger(__name__)


def seed_admin(
    directory: UserDirectory,
    hasher: PasswordHasher,
    username: str,
    email: str,
    password: str,
) -> User | None:
    """
    Create the administrator if no user with this username exists.
    Returns the created user, or None when it was already present.
    """
    if directory.find_by_username(username) is not None:
        logger.debug("Admin seed skipped; user %s exists", username)
        return None
    try:
        user = directory.create(
            username=username,
            email=email,
            password_hash=hasher.hash(password),
            role="admin",
        )
    except UserAlreadyExistsError:
        # Another process seeded concurrently, or the email belongs to an existing account.
        logger.warning("Admin seed skipped for %s; username or email already taken", username)
        return None
    logger.info("Default admin user created: user_id=%s username=%s", user.id, user.username)
    return user
