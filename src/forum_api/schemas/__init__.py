"""Pydantic schemas for request/response validation."""

from forum_api.schemas.comment import CommentResponse, CommentText
from forum_api.schemas.common import CamelModel, SuccessResponse, format_timestamp
from forum_api.schemas.post import PostCreate, PostResponse
from forum_api.schemas.user import LoginRequest, SessionInfo, TotpRequest, TotpResponse

__all__ = [
    # Shared
    "CamelModel",
    "SuccessResponse",
    "format_timestamp",
    # Post schemas
    "PostCreate",
    "PostResponse",
    # Comment schemas
    "CommentText",
    "CommentResponse",
    # Session schemas
    "LoginRequest",
    "SessionInfo",
    "TotpRequest",
    "TotpResponse",
]
