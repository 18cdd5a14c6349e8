"""FastAPI dependencies resolving the requester from the session cookie."""

import logging
from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from forum_api.config import get_settings
from forum_api.database import get_db
from forum_api.models.user import User
from forum_api.services.errors import NotFoundError
from forum_api.services.policy import ANONYMOUS, Requester, require_session
from forum_api.services.sessions import InMemorySessionStore, SessionManager, SessionStore
from forum_api.services.totp import SecondFactorVerifier

logger = logging.getLogger(__name__)


@lru_cache
def get_session_store() -> SessionStore:
    """Process-wide session store. Override this dependency to plug in another backend."""
    return InMemorySessionStore()


def get_session_manager(
    store: SessionStore = Depends(get_session_store),
) -> SessionManager:
    """Build the session state machine from settings."""
    settings = get_settings()
    ttl = (
        timedelta(minutes=settings.session_ttl_minutes)
        if settings.session_ttl_minutes is not None
        else None
    )
    verifier = SecondFactorVerifier(
        interval=settings.totp_interval,
        valid_window=settings.totp_valid_window,
    )
    return SessionManager(store, verifier, ttl=ttl)


async def get_requester(
    request: Request,
    db: AsyncSession = Depends(get_db),
    manager: SessionManager = Depends(get_session_manager),
) -> Requester:
    """Resolve the session cookie into a Requester.

    Returns ANONYMOUS when there is no valid session. When the session's user
    no longer exists the Requester keeps the session but has no user, so it
    counts as unauthenticated.
    """
    token = request.cookies.get(get_settings().session_cookie_name)
    session = await manager.resolve(token)
    if session is None:
        return ANONYMOUS

    user = await db.get(User, session.user_id)
    if user is None:
        logger.warning("Session refers to missing user id %s", session.user_id)
    return Requester(user=user, session=session)


async def get_authenticated_requester(
    requester: Annotated[Requester, Depends(get_requester)],
) -> Requester:
    """Require a session whose user still exists.

    Raises:
        AuthenticationError: If there is no session
        NotFoundError: If the session's user has been removed
    """
    if requester.session is not None and requester.user is None:
        raise NotFoundError("User not found")
    require_session(requester)
    return requester


# Type aliases for use in route dependencies
CurrentRequester = Annotated[Requester, Depends(get_requester)]
AuthenticatedRequester = Annotated[Requester, Depends(get_authenticated_requester)]
