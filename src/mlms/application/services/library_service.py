"""Library Service - a user's likes, listening history, downloads, subscription and profile."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mlms.application.services.activity_service import ActivityLogger, track_label
from mlms.application.services.auth_service import validated_email
from mlms.config import SecuritySettings
from mlms.domain.dtos import HistoryEntry, TrackDetails
from mlms.domain.exceptions import (
    DuplicateEntityException,
    EntityNotFoundException,
    ValidationError,
)
from mlms.infrastructure.persistence.models import TrackModel, UserActivityModel
from mlms.infrastructure.persistence.repositories import (
    HistoryRepository,
    LikedTrackRepository,
    SubscriptionRepository,
    TrackRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

FREE_PLAN = "Free"
HISTORY_LIMIT = 50


@dataclass
class ProfileView:
    """What GET /profile shows about the caller."""

    id: int
    name: str
    email: str
    role: str
    created_at: datetime
    last_login_at: datetime | None


@dataclass
class SubscriptionView:
    plan: str
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool = False


class LibraryService:
    """Per-user library operations. Every method is scoped to the given user_id."""

    def __init__(self, session: AsyncSession, settings: SecuritySettings) -> None:
        """Initialize library service.

        Args:
            session: Database session
            settings: Security settings (email TLD allow-list for profile updates)
        """
        self._session = session
        self._settings = settings
        self._users = UserRepository(session)
        self._subscriptions = SubscriptionRepository(session)
        self._tracks = TrackRepository(session)
        self._likes = LikedTrackRepository(session)
        self._history = HistoryRepository(session)
        self._activity = ActivityLogger(session)

    async def _track(self, track_id: int) -> TrackModel:
        track = await self._tracks.get_by_id(track_id)
        if track is None:
            raise EntityNotFoundException("Track", track_id, "Track not found")
        return track

    # =========================================================================
    # LIKES
    # =========================================================================

    # Hey future me - like/unlike are idempotent on purpose. Liking twice is a no-op (the unique
    # constraint on (user_id, track_id) catches the concurrent double-click), unliking something
    # you never liked is a no-op too. Activity is only written when something changed.
    async def like(self, user_id: int, track_id: int) -> bool:
        """Like a track. Returns False when it was already liked."""
        track = await self._track(track_id)
        if await self._likes.exists(user_id, track_id):
            return False
        title = track_label(track.title, track_id)
        try:
            await self._likes.add(user_id, track_id)
            await self._session.commit()
        except IntegrityError:
            # Lost the race against a concurrent like of the same track - already liked.
            await self._session.rollback()
            return False

        await self._activity.record(user_id, f'Liked "{title}"')
        return True

    async def unlike(self, user_id: int, track_id: int) -> bool:
        """Remove a like. Returns False when there was nothing to remove."""
        removed = await self._likes.remove(user_id, track_id)
        await self._session.commit()

        if removed:
            track = await self._tracks.get_by_id(track_id)
            title = track_label(track.title if track else None, track_id)
            await self._activity.record(user_id, f'Unliked "{title}"')
        return removed

    async def liked_track_ids(self, user_id: int) -> list[int]:
        return await self._likes.track_ids(user_id)

    async def liked_tracks(self, user_id: int) -> list[TrackDetails]:
        return await self._likes.track_details(user_id)

    # =========================================================================
    # PLAYBACK & DOWNLOADS
    # =========================================================================

    async def record_playback(self, user_id: int, track_id: int) -> None:
        track = await self._track(track_id)
        title = track_label(track.title, track_id)
        await self._history.add_playback(user_id, track_id)
        await self._session.commit()

        await self._activity.record(user_id, f'Played "{title}"')

    async def now_playing(self, user_id: int) -> HistoryEntry | None:
        """The caller's most recent playback, or None if they never played anything."""
        latest = await self._history.playbacks(user_id, limit=1)
        return latest[0] if latest else None

    async def playback_history(
        self, user_id: int, limit: int = HISTORY_LIMIT
    ) -> list[HistoryEntry]:
        return await self._history.playbacks(user_id, limit)

    async def record_download(self, user_id: int, track_id: int) -> None:
        track = await self._track(track_id)
        title = track_label(track.title, track_id)
        await self._history.add_download(user_id, track_id)
        await self._session.commit()

        await self._activity.record(user_id, f'Downloaded "{title}"')

    async def download_history(
        self, user_id: int, limit: int = HISTORY_LIMIT
    ) -> list[HistoryEntry]:
        return await self._history.downloads(user_id, limit)

    # =========================================================================
    # SUBSCRIPTION
    # =========================================================================

    async def get_subscription(self, user_id: int) -> SubscriptionView:
        subscription = await self._subscriptions.get_for_user(user_id)
        if subscription is None:
            return SubscriptionView(plan=FREE_PLAN)
        return SubscriptionView(
            plan=subscription.subscription_type,
            start_date=subscription.start_date,
            end_date=subscription.end_date,
            is_active=subscription.is_active,
        )

    # Listen up - update-or-insert in ONE transaction. Two concurrent first-time PUTs can both see
    # "no row"; the UNIQUE user_id constraint makes the loser's commit fail (IntegrityError → 409)
    # instead of leaving the user with two subscriptions.
    async def set_subscription(self, user_id: int, plan: str | None) -> None:
        plan = (plan or "").strip()
        if not plan:
            raise ValidationError("Subscription plan is required")

        subscription = await self._subscriptions.get_for_user(user_id)
        if subscription is None:
            await self._subscriptions.add(
                user_id=user_id, subscription_type=plan, start_date=date.today()
            )
        else:
            subscription.subscription_type = plan
            subscription.is_active = True
        await self._session.commit()

        await self._activity.record(user_id, f"Changed subscription to {plan}")

    # =========================================================================
    # PROFILE & DASHBOARD
    # =========================================================================

    async def get_profile(self, user_id: int) -> ProfileView:
        user = await self._users.get_by_id(user_id)
        if user is None:
            raise EntityNotFoundException("User", user_id, "User not found")
        return ProfileView(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )

    async def update_profile(
        self, user_id: int, name: str | None = None, email: str | None = None
    ) -> None:
        """Change name and/or email. Omitted fields are left alone.

        Raises:
            ValidationError: blank name or invalid email
            DuplicateEntityException: email belongs to another account
            EntityNotFoundException: the user row is gone
        """
        user = await self._users.get_by_id(user_id)
        if user is None:
            raise EntityNotFoundException("User", user_id, "User not found")

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Name cannot be empty")
            user.name = name

        if email is not None:
            normalized = validated_email(email, self._settings.allowed_email_tlds)
            if await self._users.email_taken_by_other(normalized, user_id):
                raise DuplicateEntityException("User", normalized, "Email already registered")
            user.email = normalized

        await self._session.commit()
        await self._activity.record(user_id, "Updated profile")

    async def recent_activity(self, user_id: int) -> Sequence[UserActivityModel]:
        return await self._activity.recent(user_id)

    async def log_activity(self, user_id: int, activity: str | None) -> None:
        await self._activity.record_manual(user_id, activity)
