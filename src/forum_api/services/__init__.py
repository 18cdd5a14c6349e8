"""Authentication, authorization and content services."""

from forum_api.services.comments import CommentService, CommentView, visible_comments
from forum_api.services.credentials import CredentialVerifier
from forum_api.services.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ForumError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from forum_api.services.flags import FlagLedger, MarkResult, UnmarkResult
from forum_api.services.policy import ANONYMOUS, Action, Decision, Requester, authorize, enforce
from forum_api.services.posts import PostService, PostView
from forum_api.services.sessions import (
    AuthStage,
    InMemorySessionStore,
    Privilege,
    Session,
    SessionManager,
    SessionStore,
)
from forum_api.services.totp import SecondFactorVerifier

__all__ = [
    # Errors
    "ForumError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "StorageError",
    # Authentication
    "CredentialVerifier",
    "SecondFactorVerifier",
    "AuthStage",
    "Privilege",
    "Session",
    "SessionStore",
    "InMemorySessionStore",
    "SessionManager",
    # Authorization
    "ANONYMOUS",
    "Action",
    "Decision",
    "Requester",
    "authorize",
    "enforce",
    # Content
    "PostService",
    "PostView",
    "CommentService",
    "CommentView",
    "visible_comments",
    "FlagLedger",
    "MarkResult",
    "UnmarkResult",
]
