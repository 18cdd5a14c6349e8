"""SQLAlchemy ORM models."""

from forum_api.models.comment import Comment
from forum_api.models.flag import InterestingFlag
from forum_api.models.post import Post
from forum_api.models.user import User

__all__ = [
    "Comment",
    "InterestingFlag",
    "Post",
    "User",
]
