"""Comment ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forum_api.database import Base

if TYPE_CHECKING:
    from forum_api.models.flag import InterestingFlag
    from forum_api.models.post import Post
    from forum_api.models.user import User


class Comment(Base):
    """Comment on a post. A null user_id marks an anonymous comment."""

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(primary_key=True)
    text: Mapped[str] = mapped_column(Text)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)
    post_id: Mapped[int] = mapped_column(ForeignKey("posts.id", ondelete="CASCADE"), index=True)
    created_at: Mapped[datetime] = mapped_column()

    # Relationships
    author: Mapped[User | None] = relationship(back_populates="comments")
    post: Mapped[Post] = relationship(back_populates="comments")
    flags: Mapped[list[InterestingFlag]] = relationship(
        back_populates="comment", cascade="all, delete-orphan", passive_deletes=True
    )
