"""Authorization policy: the single place that decides who may do what."""

import logging
from dataclasses import dataclass
from enum import StrEnum

from forum_api.models.user import User
from forum_api.services.errors import AuthenticationError, AuthorizationError
from forum_api.services.sessions import Privilege, Session, privilege_for

logger = logging.getLogger(__name__)


class Action(StrEnum):
    READ_POSTS = "read_posts"
    READ_COMMENTS = "read_comments"
    CREATE_POST = "create_post"
    CREATE_COMMENT = "create_comment"
    EDIT = "edit"
    DELETE = "delete"
    TOGGLE_FLAG = "toggle_flag"


class Reason(StrEnum):
    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    ELEVATED = "elevated"
    OWNER = "owner"
    AUTHENTICATION_REQUIRED = "authentication_required"
    NOT_OWNER = "not_owner"


@dataclass(frozen=True)
class Requester:
    """Identity of whoever issued a request. Both fields are None for Anonymous."""

    user: User | None = None
    session: Session | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.session is not None

    @property
    def user_id(self) -> int | None:
        return self.user.id if self.is_authenticated else None

    @property
    def privilege(self) -> Privilege:
        return privilege_for(self.session, self.user)

    @property
    def is_elevated(self) -> bool:
        return self.privilege is Privilege.ELEVATED


ANONYMOUS = Requester()


@dataclass(frozen=True)
class Decision:
    permitted: bool
    reason: Reason


def authorize(action: Action, requester: Requester, owner_id: int | None = None) -> Decision:
    """Decide whether the requester may perform an action.

    Args:
        action: The requested action
        requester: Who is asking
        owner_id: Owning user id of the target resource, for EDIT and DELETE.
            None means the resource is anonymous.

    Returns:
        The decision with a reason tag
    """
    if action in (Action.READ_POSTS, Action.READ_COMMENTS, Action.CREATE_COMMENT):
        # Comment visibility is narrowed by the visibility filter, not here
        return Decision(True, Reason.PUBLIC)

    if not requester.is_authenticated:
        return Decision(False, Reason.AUTHENTICATION_REQUIRED)

    if action in (Action.CREATE_POST, Action.TOGGLE_FLAG):
        return Decision(True, Reason.AUTHENTICATED)

    # EDIT / DELETE
    if requester.is_elevated:
        return Decision(True, Reason.ELEVATED)
    if owner_id is not None and owner_id == requester.user_id:
        return Decision(True, Reason.OWNER)
    return Decision(False, Reason.NOT_OWNER)


def require_session(requester: Requester) -> None:
    """Raise AuthenticationError unless the requester holds a session."""
    if not requester.is_authenticated:
        raise AuthenticationError("Not authenticated")


def enforce(
    action: Action,
    requester: Requester,
    owner_id: int | None = None,
    denied_message: str = "Not allowed",
) -> Decision:
    """Authorize an action, raising if it is denied.

    Raises:
        AuthenticationError: If the action needs a session and there is none
        AuthorizationError: If the session is valid but the action is denied
    """
    decision = authorize(action, requester, owner_id)
    if decision.permitted:
        return decision

    if decision.reason is Reason.AUTHENTICATION_REQUIRED:
        raise AuthenticationError("Not authenticated")

    logger.warning(
        "Denied %s for user id %s (reason: %s)", action, requester.user_id, decision.reason
    )
    raise AuthorizationError(denied_message)
