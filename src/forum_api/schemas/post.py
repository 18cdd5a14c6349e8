"""Pydantic schemas for post API endpoints."""

from pydantic import Field, field_validator

from forum_api.schemas.common import MAX_INTEGER, CamelModel, format_timestamp
from forum_api.services.posts import PostView


class PostCreate(CamelModel):
    """Schema for creating a post."""

    title: str = Field(min_length=1, max_length=100, description="Unique title (1-100 characters)")
    text: str = Field(min_length=1, description="Body text")
    max_comments: int | None = Field(
        default=None,
        ge=0,
        le=MAX_INTEGER,
        description="Maximum number of comments, null for unbounded",
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Trim the title and require visible content."""
        v = v.strip()
        if not v:
            raise ValueError("Title must contain visible content")
        return v

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Text must contain visible content")
        return v


class PostResponse(CamelModel):
    """Response schema for a post."""

    id: int = Field(description="Post ID")
    title: str = Field(description="Title")
    text: str = Field(description="Body text")
    max_comments: int | None = Field(description="Comment ceiling, null for unbounded")
    username: str = Field(description="Author's username")
    date: str = Field(description="Creation time (YYYY-MM-DD HH:MM:SS)")
    comment_count: int = Field(description="Number of comments on the post")

    @classmethod
    def from_view(cls, post: PostView) -> "PostResponse":
        return cls(
            id=post.id,
            title=post.title,
            text=post.text,
            max_comments=post.max_comments,
            username=post.username,
            date=format_timestamp(post.created_at),
            comment_count=post.comment_count,
        )
