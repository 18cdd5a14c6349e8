"""Security utilities for password hashing and session token signing."""

import hmac

import bcrypt
from jose import JWTError, jwt

from forum_api.config import get_settings

# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


def generate_salt() -> str:
    """Generate a fresh bcrypt salt using the configured work factor."""
    return bcrypt.gensalt(rounds=get_settings().bcrypt_rounds).decode("utf-8")


def hash_password(password: str, salt: str) -> str:
    """Hash a plain text password with the given bcrypt salt."""
    password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    hashed = bcrypt.hashpw(password_bytes, salt.encode("utf-8"))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, salt: str, hashed_password: str) -> bool:
    """Verify a plain text password against a stored salt and hash.

    The comparison is constant-time so the position of the first differing
    byte does not leak through timing.
    """
    candidate = hash_password(plain_password, salt)
    return hmac.compare_digest(candidate.encode("utf-8"), hashed_password.encode("utf-8"))


def sign_session_id(session_id: str) -> str:
    """Wrap a session id into a signed token suitable for a cookie value."""
    settings = get_settings()
    return jwt.encode(
        {"sid": session_id},
        settings.secret_key,
        algorithm=settings.session_signing_algorithm,
    )


def unsign_session_id(token: str) -> str | None:
    """Extract the session id from a signed token.

    Returns:
        The session id if the signature is valid, None if the token is
        malformed or was not signed with our key
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.session_signing_algorithm],
        )
    except JWTError:
        return None

    session_id = payload.get("sid")
    if not isinstance(session_id, str) or not session_id:
        return None
    return session_id
