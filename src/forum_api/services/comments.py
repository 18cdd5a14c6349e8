"""Comment visibility, ordering and the per-post comment ceiling."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import exists, false, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from forum_api.models.comment import Comment
from forum_api.models.flag import InterestingFlag
from forum_api.models.post import Post
from forum_api.models.user import User
from forum_api.services.errors import AuthorizationError, NotFoundError, ValidationError
from forum_api.services.policy import Action, Requester, enforce, require_session

logger = logging.getLogger(__name__)

COMMENT_LIMIT_MESSAGE = "Maximum number of comments reached for this post"


def _check_text(text: str) -> None:
    if not text.strip():
        raise ValidationError("Comment must contain visible content")


@dataclass(frozen=True)
class CommentView:
    """A comment annotated for a particular requester."""

    id: int
    text: str
    user_id: int | None
    username: str | None
    created_at: datetime
    interesting_count: int
    marked_by_me: bool


def visible_comments(comments: Iterable[CommentView], requester: Requester) -> list[CommentView]:
    """Filter and order comments for a requester.

    Anonymous requesters only see anonymous comments; any session sees all of
    them. Newest first; the sort is stable, so comments sharing a timestamp
    keep the order they came in (insertion order when fed by id).
    """
    if requester.is_authenticated:
        pool = list(comments)
    else:
        pool = [comment for comment in comments if comment.user_id is None]
    return sorted(pool, key=lambda comment: comment.created_at, reverse=True)


class CommentService:
    """Reads and writes comments on behalf of a requester."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_comments(self, requester: Requester, post_id: int) -> list[CommentView]:
        """Comments of a post as the requester is allowed to see them.

        Raises:
            NotFoundError: If the post does not exist
        """
        enforce(Action.READ_COMMENTS, requester)
        if await self.db.get(Post, post_id) is None:
            raise NotFoundError("Post not found")

        interesting_count = (
            select(func.count())
            .where(InterestingFlag.comment_id == Comment.id)
            .correlate(Comment)
            .scalar_subquery()
        )
        if requester.is_authenticated:
            marked_by_me = exists().where(
                InterestingFlag.comment_id == Comment.id,
                InterestingFlag.user_id == requester.user_id,
            )
        else:
            marked_by_me = false()

        query = (
            select(
                Comment.id,
                Comment.text,
                Comment.user_id,
                User.username,
                Comment.created_at,
                interesting_count.label("interesting_count"),
                marked_by_me.label("marked_by_me"),
            )
            .outerjoin(User, Comment.user_id == User.id)
            .where(Comment.post_id == post_id)
            .order_by(Comment.id)
        )
        result = await self.db.execute(query)
        comments = [
            CommentView(
                id=row.id,
                text=row.text,
                user_id=row.user_id,
                username=row.username,
                created_at=row.created_at,
                interesting_count=row.interesting_count or 0,
                marked_by_me=bool(row.marked_by_me),
            )
            for row in result.all()
        ]
        return visible_comments(comments, requester)

    async def create_comment(self, requester: Requester, post_id: int, text: str) -> CommentView:
        """Add a comment to a post, respecting the post's comment ceiling.

        The post row is locked for the rest of the transaction so concurrent
        submissions cannot both pass the count check. SQLite ignores FOR
        UPDATE but only ever lets one writer commit.

        Raises:
            NotFoundError: If the post does not exist
            ValidationError: If the text is blank
            AuthorizationError: If the post already holds its maximum of comments
        """
        enforce(Action.CREATE_COMMENT, requester)
        _check_text(text)

        result = await self.db.execute(select(Post).where(Post.id == post_id).with_for_update())
        post = result.scalar_one_or_none()
        if post is None:
            raise NotFoundError("Post not found")

        if post.max_comments is not None:
            count_result = await self.db.execute(
                select(func.count()).select_from(Comment).where(Comment.post_id == post_id)
            )
            if count_result.scalar_one() >= post.max_comments:
                logger.info("Comment rejected: post %s reached its limit", post_id)
                raise AuthorizationError(COMMENT_LIMIT_MESSAGE)

        comment = Comment(
            text=text,
            user_id=requester.user_id,
            post_id=post_id,
            created_at=datetime.now(UTC),
        )
        self.db.add(comment)
        await self.db.flush()

        return CommentView(
            id=comment.id,
            text=comment.text,
            user_id=comment.user_id,
            username=requester.user.username if requester.is_authenticated else None,
            created_at=comment.created_at,
            interesting_count=0,
            marked_by_me=False,
        )

    async def _get_owned_comment(self, requester: Requester, comment_id: int, action: Action):
        require_session(requester)

        comment = await self.db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")

        verb = "edit" if action is Action.EDIT else "delete"
        enforce(
            action,
            requester,
            owner_id=comment.user_id,
            denied_message=f"Only the author or an elevated admin can {verb} this comment",
        )
        return comment

    async def edit_comment(self, requester: Requester, comment_id: int, text: str) -> None:
        """Replace a comment's text.

        Raises:
            AuthenticationError: If the requester has no session
            NotFoundError: If the comment does not exist
            AuthorizationError: If the requester is neither the author nor elevated
            ValidationError: If the text is blank
        """
        comment = await self._get_owned_comment(requester, comment_id, Action.EDIT)
        _check_text(text)
        comment.text = text
        await self.db.flush()
        logger.info("User %r edited comment %s", requester.user.username, comment_id)

    async def delete_comment(self, requester: Requester, comment_id: int) -> None:
        """Delete a comment and, through the foreign key cascade, its flags.

        Raises:
            AuthenticationError: If the requester has no session
            NotFoundError: If the comment does not exist
            AuthorizationError: If the requester is neither the author nor elevated
        """
        comment = await self._get_owned_comment(requester, comment_id, Action.DELETE)
        await self.db.delete(comment)
        await self.db.flush()
        logger.info("User %r deleted comment %s", requester.user.username, comment_id)
