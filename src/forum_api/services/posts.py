"""Post listing, creation and deletion."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from forum_api.models.comment import Comment
from forum_api.models.post import Post
from forum_api.models.user import User
from forum_api.services.errors import ConflictError, NotFoundError, ValidationError
from forum_api.services.policy import Action, Requester, enforce, require_session

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 100


@dataclass(frozen=True)
class PostView:
    """A post joined with its author's username and current comment count."""

    id: int
    title: str
    text: str
    max_comments: int | None
    user_id: int
    username: str
    created_at: datetime
    comment_count: int


def _post_view_query() -> Select:
    return (
        select(
            Post.id,
            Post.title,
            Post.text,
            Post.max_comments,
            Post.user_id,
            User.username,
            Post.created_at,
            func.count(Comment.id).label("comment_count"),
        )
        .join(User, Post.user_id == User.id)
        .outerjoin(Comment, Comment.post_id == Post.id)
        .group_by(Post.id, User.username)
    )


class PostService:
    """Reads and writes posts on behalf of a requester."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_posts(self) -> list[PostView]:
        """All posts, newest first."""
        query = _post_view_query().order_by(Post.created_at.desc(), Post.id.desc())
        result = await self.db.execute(query)
        return [PostView(**row._mapping) for row in result.all()]

    async def get_post(self, post_id: int) -> PostView:
        """Fetch a single post.

        Raises:
            NotFoundError: If the post does not exist
        """
        result = await self.db.execute(_post_view_query().where(Post.id == post_id))
        row = result.one_or_none()
        if row is None:
            raise NotFoundError("Post not found")
        return PostView(**row._mapping)

    async def create_post(
        self,
        requester: Requester,
        title: str,
        text: str,
        max_comments: int | None,
    ) -> PostView:
        """Create a post owned by the requester.

        Title uniqueness is enforced by the database constraint.

        Raises:
            AuthenticationError: If the requester has no session
            ValidationError: If the title or text is blank, the title too long or
                max_comments negative
            ConflictError: If the title is already used
        """
        enforce(Action.CREATE_POST, requester)

        title = title.strip()
        if not title or len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(f"Title must be 1-{TITLE_MAX_LENGTH} visible characters")
        if not text.strip():
            raise ValidationError("Text must contain visible content")
        if max_comments is not None and max_comments < 0:
            raise ValidationError("maxComments must be null or a non-negative integer")

        post = Post(
            title=title,
            text=text,
            max_comments=max_comments,
            user_id=requester.user_id,
            created_at=datetime.now(UTC),
        )
        try:
            async with self.db.begin_nested():
                self.db.add(post)
        except IntegrityError:
            raise ConflictError("Title already used") from None

        logger.info("User %r created post %s", requester.user.username, post.id)
        return PostView(
            id=post.id,
            title=post.title,
            text=post.text,
            max_comments=post.max_comments,
            user_id=post.user_id,
            username=requester.user.username,
            created_at=post.created_at,
            comment_count=0,
        )

    async def delete_post(self, requester: Requester, post_id: int) -> None:
        """Delete a post together with its comments and their flags.

        Raises:
            AuthenticationError: If the requester has no session
            NotFoundError: If the post does not exist
            AuthorizationError: If the requester is neither the author nor elevated
        """
        require_session(requester)

        post = await self.db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Post not found")

        enforce(
            Action.DELETE,
            requester,
            owner_id=post.user_id,
            denied_message="Only the author or an elevated admin can delete this post",
        )

        await self.db.delete(post)
        await self.db.flush()
        logger.info("User %r deleted post %s", requester.user.username, post_id)
