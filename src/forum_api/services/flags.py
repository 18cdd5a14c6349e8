"""Ledger of "interesting" marks, one per user per comment."""

import logging
from enum import StrEnum

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from forum_api.models.flag import InterestingFlag

logger = logging.getLogger(__name__)


class MarkResult(StrEnum):
    CREATED = "created"
    ALREADY_MARKED = "already_marked"


class UnmarkResult(StrEnum):
    REMOVED = "removed"
    NOOP = "noop"


class FlagLedger:
    """Creates and removes interesting flags.

    Duplicate marks are detected by the composite primary key, not by a
    prior lookup, so two racing requests cannot both insert. Callers must
    make sure the comment exists; a missing comment would also surface as an
    integrity failure.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def mark(self, user_id: int, comment_id: int) -> MarkResult:
        """Flag a comment as interesting for a user."""
        try:
            async with self.db.begin_nested():
                self.db.add(InterestingFlag(user_id=user_id, comment_id=comment_id))
        except IntegrityError:
            return MarkResult.ALREADY_MARKED
        logger.debug("User id %s marked comment %s", user_id, comment_id)
        return MarkResult.CREATED

    async def unmark(self, user_id: int, comment_id: int) -> UnmarkResult:
        """Remove a user's flag. Removing a flag that is not there is a no-op."""
        result = await self.db.execute(
            delete(InterestingFlag).where(
                InterestingFlag.user_id == user_id,
                InterestingFlag.comment_id == comment_id,
            )
        )
        if result.rowcount:
            logger.debug("User id %s unmarked comment %s", user_id, comment_id)
            return UnmarkResult.REMOVED
        return UnmarkResult.NOOP
