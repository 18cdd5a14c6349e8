"""Pydantic schemas for comment API endpoints."""

from pydantic import Field, field_validator

from forum_api.schemas.common import CamelModel, format_timestamp
from forum_api.services.comments import CommentView


class CommentText(CamelModel):
    """Schema for creating or editing a comment."""

    text: str = Field(min_length=1, description="Comment text")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Comment must contain visible content")
        return v


class CommentResponse(CamelModel):
    """Response schema for a comment, annotated for the requester."""

    id: int = Field(description="Comment ID")
    text: str = Field(description="Comment text")
    username: str | None = Field(description="Author's username, null for anonymous comments")
    date: str = Field(description="Creation time (YYYY-MM-DD HH:MM:SS)")
    interesting_count: int = Field(description="Number of users who flagged it interesting")
    marked_by_me: bool = Field(description="Whether the requester flagged it interesting")

    @classmethod
    def from_view(cls, comment: CommentView) -> "CommentResponse":
        return cls(
            id=comment.id,
            text=comment.text,
            username=comment.username,
            date=format_timestamp(comment.created_at),
            interesting_count=comment.interesting_count,
            marked_by_me=comment.marked_by_me,
        )
