"""User ORM model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forum_api.database import Base

if TYPE_CHECKING:
    from forum_api.models.comment import Comment
    from forum_api.models.post import Post


class User(Base):
    """Forum account. Users are seeded out-of-band and never modified by the API."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    salt: Mapped[str] = mapped_column(String(64))
    hashed_password: Mapped[str] = mapped_column(String(255))
    totp_secret: Mapped[str | None] = mapped_column(String(64), nullable=True)
    is_admin: Mapped[bool] = mapped_column(default=False)

    # Relationships
    posts: Mapped[list[Post]] = relationship(back_populates="author")
    comments: Mapped[list[Comment]] = relationship(back_populates="author")

    @property
    def has_second_factor(self) -> bool:
        """Whether a TOTP secret is configured (empty string counts as absent)."""
        return bool(self.totp_secret)
