"""Stats Service - dashboard counts and the admin activity feed.

Hey future me - routers never run count queries themselves, they ask this service.
Both dashboards (admin catalog summary, per-user library summary) live here.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from mlms.domain.dtos import ActivityFeedItem, CatalogSummary, LibrarySummary
from mlms.infrastructure.persistence.models import ensure_utc_aware
from mlms.infrastructure.persistence.repositories import (
    ActivityRepository,
    AlbumRepository,
    ArtistRepository,
    HistoryRepository,
    LikedTrackRepository,
    PlaylistRepository,
    TrackRepository,
    UserRepository,
)

RECENT_ACTIVITY_LIMIT = 10


def format_timestamp(value: datetime) -> str:
    """Human-readable UTC timestamp for activity feeds."""
    return ensure_utc_aware(value).strftime("%Y-%m-%d %H:%M:%S UTC")


class StatsService:
    """Service for library statistics and counts."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize stats service.

        Args:
            session: Database session
        """
        self._session = session

    async def get_catalog_summary(self) -> CatalogSummary:
        """Admin dashboard: counts of users, artists, albums, tracks and playlists."""
        return CatalogSummary(
            users=await UserRepository(self._session).count(),
            artists=await ArtistRepository(self._session).count(),
            albums=await AlbumRepository(self._session).count(),
            tracks=await TrackRepository(self._session).count(),
            playlists=await PlaylistRepository(self._session).count(),
        )

    async def get_library_summary(self, user_id: int) -> LibrarySummary:
        """User dashboard: liked tracks, own playlists, plays, and the catalog size."""
        return LibrarySummary(
            liked_tracks=await LikedTrackRepository(self._session).count(user_id),
            playlists=await PlaylistRepository(self._session).count(user_id),
            recently_played=await HistoryRepository(self._session).count_playbacks(user_id),
            total_tracks=await TrackRepository(self._session).count(),
        )

    async def get_recent_catalog_activity(
        self, limit: int = RECENT_ACTIVITY_LIMIT
    ) -> list[ActivityFeedItem]:
        """Newest tracks, albums, artists ("Added") and playlists ("Created"), newest first."""
        rows = await ActivityRepository(self._session).catalog_feed(limit)
        return [
            ActivityFeedItem(
                activity=f"{action} {kind}: {name}",
                timestamp=format_timestamp(ts),
            )
            for action, kind, name, ts in rows
        ]
