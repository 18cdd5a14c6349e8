"""Post API endpoints."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from forum_api.api.deps import AuthenticatedRequester, CurrentRequester
from forum_api.database import get_db
from forum_api.schemas.comment import CommentResponse, CommentText
from forum_api.schemas.common import MAX_INTEGER, SuccessResponse
from forum_api.schemas.post import PostCreate, PostResponse
from forum_api.services.comments import CommentService
from forum_api.services.posts import PostService

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=list[PostResponse])
async def list_posts(db: AsyncSession = Depends(get_db)) -> list[PostResponse]:
    """List all posts, newest first. No authentication required."""
    posts = await PostService(db).list_posts()
    return [PostResponse.from_view(post) for post in posts]


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int = Path(ge=1, le=MAX_INTEGER, description="Post ID"),
    db: AsyncSession = Depends(get_db),
) -> PostResponse:
    """Get a single post. No authentication required."""
    post = await PostService(db).get_post(post_id)
    return PostResponse.from_view(post)


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    requester: CurrentRequester,
    post_id: int = Path(ge=1, le=MAX_INTEGER, description="Post ID"),
    db: AsyncSession = Depends(get_db),
) -> list[CommentResponse]:
    """List the comments of a post, newest first.

    Anonymous requesters only see anonymous comments; logged-in users see all.
    """
    comments = await CommentService(db).list_comments(requester, post_id)
    return [CommentResponse.from_view(comment) for comment in comments]


@router.post("", response_model=PostResponse, status_code=201)
async def create_post(
    requester: AuthenticatedRequester,
    post_data: PostCreate,
    db: AsyncSession = Depends(get_db),
) -> PostResponse:
    """Create a post owned by the current user.

    Raises:
        HTTP 409: If the title is already used
    """
    post = await PostService(db).create_post(
        requester,
        title=post_data.title,
        text=post_data.text,
        max_comments=post_data.max_comments,
    )
    return PostResponse.from_view(post)


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=201)
async def create_comment(
    requester: CurrentRequester,
    comment_data: CommentText,
    post_id: int = Path(ge=1, le=MAX_INTEGER, description="Post ID"),
    db: AsyncSession = Depends(get_db),
) -> CommentResponse:
    """Add a comment to a post.

    Logged-in users become the author; otherwise the comment is anonymous.

    Raises:
        HTTP 403: If the post already holds its maximum number of comments
        HTTP 404: If the post does not exist
    """
    comment = await CommentService(db).create_comment(requester, post_id, comment_data.text)
    return CommentResponse.from_view(comment)


@router.delete("/{post_id}", response_model=SuccessResponse)
async def delete_post(
    requester: AuthenticatedRequester,
    post_id: int = Path(ge=1, le=MAX_INTEGER, description="Post ID"),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """Delete a post with all its comments and their flags.

    Only the author or an admin who completed the second factor may delete.
    """
    await PostService(db).delete_post(requester, post_id)
    return SuccessResponse()
