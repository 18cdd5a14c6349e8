"""Comment and interesting-flag API endpoints."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from forum_api.api.deps import AuthenticatedRequester
from forum_api.database import get_db
from forum_api.models.comment import Comment
from forum_api.schemas.comment import CommentText
from forum_api.schemas.common import MAX_INTEGER, SuccessResponse
from forum_api.services.comments import CommentService
from forum_api.services.errors import ConflictError, NotFoundError
from forum_api.services.flags import FlagLedger, MarkResult
from forum_api.services.policy import Action, enforce

router = APIRouter(prefix="/comments", tags=["comments"])


@router.put("/{comment_id}", response_model=SuccessResponse)
async def edit_comment(
    requester: AuthenticatedRequester,
    comment_data: CommentText,
    comment_id: int = Path(ge=1, le=MAX_INTEGER, description="Comment ID"),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """Replace the text of a comment.

    Only the author or an admin who completed the second factor may edit.
    """
    await CommentService(db).edit_comment(requester, comment_id, comment_data.text)
    return SuccessResponse()


@router.delete("/{comment_id}", response_model=SuccessResponse)
async def delete_comment(
    requester: AuthenticatedRequester,
    comment_id: int = Path(ge=1, le=MAX_INTEGER, description="Comment ID"),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """Delete a comment.

    Only the author or an admin who completed the second factor may delete.
    """
    await CommentService(db).delete_comment(requester, comment_id)
    return SuccessResponse()


@router.post("/{comment_id}/interesting", response_model=SuccessResponse)
async def mark_interesting(
    requester: AuthenticatedRequester,
    comment_id: int = Path(ge=1, le=MAX_INTEGER, description="Comment ID"),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """Flag a comment as interesting for the current user.

    Raises:
        HTTP 404: If the comment does not exist
        HTTP 409: If the user already flagged this comment
    """
    enforce(Action.TOGGLE_FLAG, requester)
    if await db.get(Comment, comment_id) is None:
        raise NotFoundError("Comment not found")

    result = await FlagLedger(db).mark(requester.user_id, comment_id)
    if result is MarkResult.ALREADY_MARKED:
        raise ConflictError("Comment already marked as interesting by this user")
    return SuccessResponse()


@router.delete("/{comment_id}/interesting", response_model=SuccessResponse)
async def unmark_interesting(
    requester: AuthenticatedRequester,
    comment_id: int = Path(ge=1, le=MAX_INTEGER, description="Comment ID"),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """Remove the current user's interesting flag. Succeeds if there was none."""
    enforce(Action.TOGGLE_FLAG, requester)
    if await db.get(Comment, comment_id) is None:
        raise NotFoundError("Comment not found")

    await FlagLedger(db).unmark(requester.user_id, comment_id)
    return SuccessResponse()
