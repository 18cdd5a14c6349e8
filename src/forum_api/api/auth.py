"""Session (login, second factor, logout) API endpoints."""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from forum_api.api.deps import AuthenticatedRequester, CurrentRequester, get_session_manager
from forum_api.config import get_settings
from forum_api.database import get_db
from forum_api.models.user import User
from forum_api.schemas.common import SuccessResponse
from forum_api.schemas.user import LoginRequest, SessionInfo, TotpRequest, TotpResponse
from forum_api.services.credentials import CredentialVerifier
from forum_api.services.errors import AuthenticationError
from forum_api.services.policy import require_session
from forum_api.services.sessions import Session, SessionManager

router = APIRouter(tags=["sessions"])


def session_info(user: User, session: Session) -> SessionInfo:
    """Describe a session to its holder."""
    return SessionInfo(
        user_id=user.id,
        username=user.username,
        is_admin=user.is_admin,
        second_factor_available=user.has_second_factor,
        second_factor_completed=session.second_factor_completed,
    )


@router.post("/sessions", response_model=SessionInfo)
async def login(
    credentials: LoginRequest,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
    manager: SessionManager = Depends(get_session_manager),
) -> SessionInfo:
    """Authenticate with username and password.

    Opens a new password-authenticated session and sets the session cookie.
    Any session the client already held is closed.

    Raises:
        AuthenticationError 401: If the credentials are invalid (unknown
            username and wrong password are not distinguished)
    """
    user = await CredentialVerifier(db).verify(credentials.username, credentials.password)
    if user is None:
        raise AuthenticationError("Incorrect username or password.")

    settings = get_settings()
    previous = await manager.resolve(request.cookies.get(settings.session_cookie_name))
    session, token = await manager.login(user, previous=previous)

    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
        max_age=settings.session_ttl_minutes * 60 if settings.session_ttl_minutes else None,
    )
    return session_info(user, session)


@router.post("/login-totp", response_model=TotpResponse)
async def login_totp(
    requester: AuthenticatedRequester,
    body: TotpRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> TotpResponse:
    """Complete the second factor for the current session.

    Requires a password-authenticated session.

    Raises:
        AuthenticationError 401: If there is no session or the code is wrong
        AuthorizationError 403: If the user is not an admin or has no TOTP secret
    """
    await manager.complete_second_factor(requester.session, requester.user, body.code)
    return TotpResponse()


@router.get("/sessions/current", response_model=SessionInfo)
async def current_session(requester: CurrentRequester) -> SessionInfo:
    """Return information about the current session.

    A session whose user no longer exists counts as no session (401).
    """
    require_session(requester)
    return session_info(requester.user, requester.session)


@router.delete("/sessions/current", response_model=SuccessResponse)
async def logout(
    requester: CurrentRequester,
    response: Response,
    manager: SessionManager = Depends(get_session_manager),
) -> SuccessResponse:
    """Destroy the current session and clear the cookie."""
    if requester.session is None:
        raise AuthenticationError("Not authenticated")

    await manager.logout(requester.session)
    response.delete_cookie(get_settings().session_cookie_name)
    return SuccessResponse()
