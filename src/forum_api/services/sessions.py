"""Session repository and the two-stage authentication state machine.

A session starts in the PASSWORD stage after a successful username/password
login and may advance once to SECOND_FACTOR when an admin with a configured
secret submits a valid TOTP code. No session at all means Anonymous.
"""

import logging
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from enum import StrEnum

from forum_api.models.user import User
from forum_api.services.errors import AuthenticationError, AuthorizationError
from forum_api.services.totp import SecondFactorVerifier
from forum_api.utils.security import sign_session_id, unsign_session_id

logger = logging.getLogger(__name__)


class AuthStage(StrEnum):
    """How far a session has progressed through authentication."""

    PASSWORD = "password"
    SECOND_FACTOR = "second_factor"


class Privilege(StrEnum):
    """Effective privilege used by the authorization policy."""

    STANDARD = "standard"
    ELEVATED = "elevated"


@dataclass(frozen=True)
class Session:
    """Server-side session record. Bound to one user for its whole life."""

    id: str
    user_id: int
    stage: AuthStage
    created_at: datetime

    @property
    def second_factor_completed(self) -> bool:
        return self.stage is AuthStage.SECOND_FACTOR


class SessionStore(ABC):
    """Storage for session records, keyed by session id."""

    @abstractmethod
    async def get(self, session_id: str) -> Session | None:
        """Return the session, or None if it does not exist."""
        ...

    @abstractmethod
    async def put(self, session: Session) -> None:
        """Insert or replace a session."""
        ...

    @abstractmethod
    async def replace(self, session: Session) -> bool:
        """Overwrite an existing session. Never inserts.

        Returns:
            False if no session with that id exists any more
        """
        ...

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Remove a session. Deleting an unknown id is not an error."""
        ...


class InMemorySessionStore(SessionStore):
    """Process-local session store for single-instance deployments."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    async def get(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    async def put(self, session: Session) -> None:
        self._sessions[session.id] = session

    async def replace(self, session: Session) -> bool:
        if session.id not in self._sessions:
            return False
        self._sessions[session.id] = session
        return True

    async def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)


def privilege_for(session: Session | None, user: User | None) -> Privilege:
    """Derive the effective privilege of a requester.

    Elevated only when the session completed the second factor and the user
    is (still) an admin. Anonymous and password-only sessions are standard.
    """
    if session is None or user is None:
        return Privilege.STANDARD
    if session.second_factor_completed and user.is_admin:
        return Privilege.ELEVATED
    return Privilege.STANDARD


class SessionManager:
    """Drives session transitions on top of a SessionStore."""

    def __init__(
        self,
        store: SessionStore,
        verifier: SecondFactorVerifier,
        ttl: timedelta | None = None,
    ) -> None:
        self.store = store
        self.verifier = verifier
        self.ttl = ttl

    async def login(self, user: User, previous: Session | None = None) -> tuple[Session, str]:
        """Open a password-authenticated session for a verified user.

        Any session the client already held is destroyed first, so a session
        never changes owner.

        Returns:
            The new session and the signed token to hand to the client
        """
        if previous is not None:
            await self.store.delete(previous.id)

        session = Session(
            id=secrets.token_urlsafe(32),
            user_id=user.id,
            stage=AuthStage.PASSWORD,
            created_at=datetime.now(UTC),
        )
        await self.store.put(session)
        logger.info("User %r logged in", user.username)
        return session, sign_session_id(session.id)

    async def resolve(self, token: str | None) -> Session | None:
        """Turn a client token into a live session, or None for Anonymous."""
        if not token:
            return None

        session_id = unsign_session_id(token)
        if session_id is None:
            return None

        session = await self.store.get(session_id)
        if session is None:
            return None

        if self.ttl is not None and datetime.now(UTC) - session.created_at > self.ttl:
            await self.store.delete(session.id)
            logger.info("Session for user id %s expired", session.user_id)
            return None

        return session

    async def complete_second_factor(self, session: Session, user: User, code: str) -> Session:
        """Advance a password-authenticated session to the second-factor stage.

        Raises:
            AuthorizationError: If the user is not an admin or has no secret
            AuthenticationError: If the code does not verify or the session
                was closed in the meantime
        """
        if not user.is_admin:
            raise AuthorizationError("Only admin can use 2FA login")
        if not user.has_second_factor:
            raise AuthorizationError("2FA not enabled for this user")

        if not self.verifier.verify(user.totp_secret, code):
            logger.warning("Invalid TOTP code submitted by user %r", user.username)
            raise AuthenticationError("Invalid TOTP code")

        elevated = replace(session, stage=AuthStage.SECOND_FACTOR)
        # Logout or re-login may have destroyed the session meanwhile
        if not await self.store.replace(elevated):
            logger.warning("Second factor for user %r on a closed session", user.username)
            raise AuthenticationError("Not authenticated")
        logger.info("User %r completed second factor", user.username)
        return elevated

    async def logout(self, session: Session) -> None:
        """Destroy a session."""
        await self.store.delete(session.id)
        logger.info("Session for user id %s closed", session.user_id)
