"""Post ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forum_api.database import Base

if TYPE_CHECKING:
    from forum_api.models.comment import Comment
    from forum_api.models.user import User


class Post(Base):
    """Forum thread with an optional ceiling on the number of comments."""

    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint(
            "max_comments IS NULL OR max_comments >= 0", name="ck_post_max_comments_valid"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(100), unique=True)
    text: Mapped[str] = mapped_column(Text)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    max_comments: Mapped[int | None] = mapped_column(nullable=True)  # None = unbounded
    created_at: Mapped[datetime] = mapped_column()

    # Relationships
    author: Mapped[User] = relationship(back_populates="posts")
    comments: Mapped[list[Comment]] = relationship(
        back_populates="post", cascade="all, delete-orphan", passive_deletes=True
    )
