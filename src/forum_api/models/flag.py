"""Interesting flag ORM model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forum_api.database import Base

if TYPE_CHECKING:
    from forum_api.models.comment import Comment


class InterestingFlag(Base):
    """A user's "interesting" mark on a comment.

    The composite primary key is what guarantees one mark per user per
    comment; the flag ledger relies on it instead of checking first.
    """

    __tablename__ = "interesting_flags"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), primary_key=True)
    comment_id: Mapped[int] = mapped_column(
        ForeignKey("comments.id", ondelete="CASCADE"), primary_key=True, index=True
    )

    # Relationships
    comment: Mapped[Comment] = relationship(back_populates="flags")
