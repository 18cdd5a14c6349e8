"""Username/password verification."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from forum_api.models.user import User
from forum_api.utils.security import generate_salt, hash_password, verify_password

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 6

# Hashed against when the username is unknown, so both failure paths cost one bcrypt round
_DUMMY_SALT = generate_salt()
_DUMMY_HASH = hash_password("not-a-real-password", _DUMMY_SALT)


class CredentialVerifier:
    """Validates a username/password pair against the stored salted hashes.

    An unknown username and a wrong password are indistinguishable to the
    caller: both return None. Surrounding whitespace is trimmed from both
    fields before the length checks and the hash.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def verify(self, username: str, password: str) -> User | None:
        """Return the matching user, or None if the credentials are wrong."""
        username = username.strip()
        password = password.strip()
        if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
            return None
        if len(password) < PASSWORD_MIN_LENGTH:
            return None

        result = await self.db.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()

        if user is None:
            verify_password(password, _DUMMY_SALT, _DUMMY_HASH)
            logger.info("Failed login for unknown username %r", username)
            return None

        if not verify_password(password, user.salt, user.hashed_password):
            logger.info("Failed login for user %r", username)
            return None

        return user
