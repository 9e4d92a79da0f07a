"""Activity Service - the per-user audit trail.

Hey future me - activity lines are written AFTER the real change has been committed,
in their own small transaction. If the insert fails we log a warning and move on: a user
who just liked a track must never see a 500 because the audit line didn't make it.
That's the ONE place in this codebase where a database error is swallowed.
"""

import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mlms.domain.exceptions import ValidationError
from mlms.infrastructure.persistence.models import UserActivityModel
from mlms.infrastructure.persistence.repositories import ActivityRepository

logger = logging.getLogger(__name__)

MAX_ACTIVITY_LENGTH = 255


def track_label(title: str | None, track_id: int) -> str:
    """Name used for a track in activity lines ("ID <n>" when the title is unknown)."""
    return title if title else f"ID {track_id}"


class ActivityLogger:
    """Writes and reads user_activity rows."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize activity logger.

        Args:
            session: Database session (shared with the calling service)
        """
        self._session = session
        self._repo = ActivityRepository(session)

    async def record(self, user_id: int, activity: str) -> None:
        """Best-effort append of one activity line. Call only after the primary commit."""
        try:
            await self._repo.add(user_id, activity[:MAX_ACTIVITY_LENGTH])
            await self._session.commit()
        except SQLAlchemyError:
            await self._session.rollback()
            logger.warning(
                "Failed to record user activity",
                extra={"user_id": user_id, "activity": activity},
                exc_info=True,
            )

    async def record_manual(self, user_id: int, activity: str | None) -> None:
        """Append an activity line sent by the client. Unlike record(), errors propagate."""
        activity = (activity or "").strip()
        if not activity:
            raise ValidationError("Activity text is required")
        await self._repo.add(user_id, activity[:MAX_ACTIVITY_LENGTH])
        await self._session.commit()

    async def recent(self, user_id: int, limit: int = 10) -> Sequence[UserActivityModel]:
        return await self._repo.recent_for_user(user_id, limit)
