"""Playlist service for playlist operations.

Hey future me - every playlist operation is scoped to the caller. The lookup is
"playlist X owned by user Y" and when it comes back empty we answer 403, whether the
playlist belongs to someone else or doesn't exist at all. Don't "improve" that into a
404 - it would tell people which playlist ids exist.

track_order is 1-based and contiguous. Appends go to max + 1, removals renumber the rest,
reorder rewrites everything. Admin-owned playlists double as public playlists that anyone
can browse and copy into their own library.
"""

import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from mlms.application.services.activity_service import ActivityLogger, track_label
from mlms.domain.dtos import PlaylistSummary, PlaylistWithTracks, TrackDetails
from mlms.domain.exceptions import (
    AuthorizationError,
    DuplicateEntityException,
    EntityNotFoundException,
    ValidationError,
)
from mlms.infrastructure.observability.logger_template import log_operation
from mlms.infrastructure.persistence.models import PlaylistModel, TrackModel
from mlms.infrastructure.persistence.repositories import (
    PlaylistRepository,
    TrackRepository,
)

logger = logging.getLogger(__name__)

FAVORITES_PLAYLIST_NAME = "Favorites"


def _playlist_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Playlist name is required")
    return name


def _summary(playlist: PlaylistModel) -> PlaylistSummary:
    return PlaylistSummary(
        playlist_id=playlist.id, name=playlist.name, created_at=playlist.created_at
    )


def _unique_ids(track_ids: Sequence[int]) -> list[int]:
    """Drop repeated ids, keeping first-seen order."""
    return list(dict.fromkeys(track_ids))


class PlaylistService:
    """Service for playlist management operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize playlist service.

        Args:
            session: Database session
        """
        self._session = session
        self._playlists = PlaylistRepository(session)
        self._tracks = TrackRepository(session)
        self._activity = ActivityLogger(session)

    async def _owned(
        self, user_id: int, playlist_id: int, for_update: bool = False
    ) -> PlaylistModel:
        playlist = await self._playlists.get_owned(playlist_id, user_id, for_update=for_update)
        if playlist is None:
            raise AuthorizationError("Playlist not found or access denied")
        return playlist

    async def _track(self, track_id: int) -> TrackModel:
        track = await self._tracks.get_by_id(track_id)
        if track is None:
            raise EntityNotFoundException("Track", track_id, "Track not found")
        return track

    async def _require_tracks_exist(self, track_ids: Sequence[int]) -> None:
        found = await self._tracks.existing_ids(track_ids)
        missing = sorted(set(track_ids) - found)
        if missing:
            raise EntityNotFoundException(
                "Track", missing, f"Tracks not found: {', '.join(map(str, missing))}"
            )

    # =========================================================================
    # READS
    # =========================================================================

    async def list_playlists(self, user_id: int) -> list[PlaylistSummary]:
        """The caller's playlists, newest first."""
        return [_summary(p) for p in await self._playlists.list_for_user(user_id)]

    async def list_playlists_with_tracks(self, user_id: int) -> list[PlaylistWithTracks]:
        playlists = await self._playlists.list_for_user(user_id)
        return await self._playlists.with_tracks(playlists)

    async def get_tracks(self, user_id: int, playlist_id: int) -> list[TrackDetails]:
        """Tracks of an owned playlist in playlist order."""
        await self._owned(user_id, playlist_id)
        return await self._playlists.track_details(playlist_id)

    async def list_public(self) -> list[PlaylistWithTracks]:
        """Every admin-owned playlist with its tracks."""
        playlists = await self._playlists.list_admin_owned()
        return await self._playlists.with_tracks(playlists)

    # =========================================================================
    # PLAYLIST LIFECYCLE
    # =========================================================================

    async def create_playlist(
        self,
        user_id: int,
        name: str | None,
        track_ids: Sequence[int] | None = None,
        require_tracks: bool = False,
    ) -> PlaylistSummary:
        """Create a playlist, optionally seeded with tracks in the given order.

        Raises:
            ValidationError: blank name, or no tracks when require_tracks is set
            EntityNotFoundException: one of the track ids doesn't exist
        """
        name = _playlist_name(name)
        ids = _unique_ids(track_ids or [])
        if require_tracks and not ids:
            raise ValidationError("Playlist name and track IDs are required")
        await self._require_tracks_exist(ids)

        playlist = await self._playlists.add(user_id, name)
        for position, track_id in enumerate(ids, start=1):
            await self._playlists.append(playlist.id, track_id, position)
        await self._session.commit()
        summary = _summary(playlist)

        await self._activity.record(user_id, f"Created new playlist: {name}")
        return summary

    async def rename_playlist(self, user_id: int, playlist_id: int, name: str | None) -> None:
        new_name = _playlist_name(name)
        playlist = await self._owned(user_id, playlist_id)
        old_name = playlist.name
        playlist.name = new_name
        await self._session.commit()

        await self._activity.record(user_id, f'Renamed playlist "{old_name}" to "{new_name}"')

    async def delete_playlist(self, user_id: int, playlist_id: int) -> None:
        playlist = await self._owned(user_id, playlist_id)
        name = playlist.name
        await self._playlists.delete(playlist_id)
        await self._session.commit()

        await self._activity.record(user_id, f'Deleted playlist "{name}"')

    # =========================================================================
    # TRACK MEMBERSHIP
    # =========================================================================

    async def add_track(self, user_id: int, playlist_id: int, track_id: int) -> None:
        """Append a track to an owned playlist.

        Raises:
            AuthorizationError: playlist not owned by the caller
            EntityNotFoundException: track doesn't exist
            DuplicateEntityException: track already in the playlist
        """
        playlist = await self._owned(user_id, playlist_id)
        track = await self._track(track_id)
        if await self._playlists.contains(playlist_id, track_id):
            raise DuplicateEntityException(
                "Playlist track", track_id, "Track already in playlist"
            )

        next_order = await self._playlists.max_order(playlist_id) + 1
        await self._playlists.append(playlist_id, track_id, next_order)
        playlist_name = playlist.name
        await self._session.commit()

        await self._activity.record(
            user_id, f'Added "{track_label(track.title, track_id)}" to playlist "{playlist_name}"'
        )

    async def add_tracks(self, user_id: int, playlist_id: int, track_ids: Sequence[int]) -> int:
        """Append several tracks at once, skipping ones already present.

        Returns:
            Number of tracks actually added
        """
        playlist = await self._owned(user_id, playlist_id)
        ids = _unique_ids(track_ids)
        if not ids:
            raise ValidationError("At least one track id is required")
        await self._require_tracks_exist(ids)

        present = set(await self._playlists.track_ids(playlist_id))
        to_add = [track_id for track_id in ids if track_id not in present]
        next_order = await self._playlists.max_order(playlist_id) + 1
        for offset, track_id in enumerate(to_add):
            await self._playlists.append(playlist_id, track_id, next_order + offset)
        playlist_name = playlist.name
        await self._session.commit()

        if to_add:
            await self._activity.record(
                user_id, f'Added {len(to_add)} tracks to playlist "{playlist_name}"'
            )
        return len(to_add)

    async def remove_track(self, user_id: int, playlist_id: int, track_id: int) -> None:
        """Remove a track (no error if it isn't there) and close the gap in track_order."""
        playlist = await self._owned(user_id, playlist_id)
        removed = await self._playlists.remove_track(playlist_id, track_id)
        if removed:
            await self._playlists.renumber(playlist_id)
        playlist_name = playlist.name
        await self._session.commit()

        if removed:
            track = await self._tracks.get_by_id(track_id)
            title = track_label(track.title if track else None, track_id)
            await self._activity.record(
                user_id, f'Removed "{title}" from playlist "{playlist_name}"'
            )

    # Hey future me - reorder takes the playlist row FOR UPDATE first, so two concurrent reorders
    # of the same playlist queue up instead of interleaving their position writes.
    async def reorder(self, user_id: int, playlist_id: int, track_ids: Sequence[int]) -> None:
        """Rewrite track_order so track_ids[i] gets position i + 1.

        Raises:
            ValidationError: track_ids isn't exactly a permutation of the playlist's tracks
        """
        playlist = await self._owned(user_id, playlist_id, for_update=True)
        current = await self._playlists.track_ids(playlist_id)
        requested = list(track_ids)
        if (
            len(requested) != len(current)
            or len(set(requested)) != len(requested)
            or set(requested) != set(current)
        ):
            raise ValidationError("Track list must contain exactly the playlist's tracks")

        await self._playlists.set_order(playlist_id, requested)
        playlist_name = playlist.name
        await self._session.commit()

        await self._activity.record(user_id, f'Reordered playlist "{playlist_name}"')

    async def add_to_favorites(self, user_id: int, track_id: int) -> PlaylistSummary:
        """Put a track into the caller's "Favorites" playlist, creating it on first use."""
        track = await self._track(track_id)
        playlist = await self._playlists.get_by_name_for_user(user_id, FAVORITES_PLAYLIST_NAME)
        if playlist is None:
            playlist = await self._playlists.add(user_id, FAVORITES_PLAYLIST_NAME)

        added = False
        if not await self._playlists.contains(playlist.id, track_id):
            next_order = await self._playlists.max_order(playlist.id) + 1
            await self._playlists.append(playlist.id, track_id, next_order)
            added = True
        await self._session.commit()
        summary = _summary(playlist)

        if added:
            await self._activity.record(
                user_id,
                f'Added "{track_label(track.title, track_id)}" to playlist '
                f'"{FAVORITES_PLAYLIST_NAME}"',
            )
        return summary

    # =========================================================================
    # PUBLIC PLAYLISTS
    # =========================================================================

    async def save_public(self, user_id: int, source_id: int) -> PlaylistSummary:
        """Copy an admin-owned playlist into the caller's library, keeping track order.

        Raises:
            EntityNotFoundException: no admin-owned playlist with that id
        """
        source = await self._playlists.get_admin_owned(source_id)
        if source is None:
            raise EntityNotFoundException("Playlist", source_id, "Public playlist not found")
        name = source.name

        async with log_operation(logger, "playlist_fork", source_id=source_id, user_id=user_id):
            copy = await self._playlists.add(user_id, name)
            await self._playlists.copy_tracks(source_id, copy.id)
            await self._session.commit()
        summary = _summary(copy)

        await self._activity.record(user_id, f'Saved public playlist "{name}"')
        return summary
