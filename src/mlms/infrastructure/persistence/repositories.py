"""Repository implementations for the music library tables."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Any

from sqlalchemy import Select, delete, func, literal, select, union_all, update
from sqlalchemy.ext.asyncio import AsyncSession

from mlms.domain.dtos import (
    AlbumDetails,
    HistoryEntry,
    PlaylistTrackEntry,
    PlaylistWithTracks,
    TrackDetails,
)

from .models import (
    TRACK_DEPENDENT_MODELS,
    AlbumModel,
    ArtistModel,
    DownloadHistoryModel,
    GenreModel,
    LikedTrackModel,
    PlaybackHistoryModel,
    PlaylistModel,
    PlaylistTrackModel,
    SubscriptionModel,
    TrackModel,
    UserActivityModel,
    UserModel,
)


# Hey future me - every "denormalized track row" in the API comes out of this one select.
# Joins go through the track's OWN artist_id/genre_id columns (not album.artist_id), which is
# why CatalogAdminService refuses tracks whose artist/genre disagree with their album.
def _track_details_select(*extra: Any) -> Select[Any]:
    return (
        select(
            TrackModel,
            AlbumModel.title,
            AlbumModel.release_year,
            ArtistModel.name,
            GenreModel.name,
            *extra,
        )
        .join(AlbumModel, TrackModel.album_id == AlbumModel.id)
        .join(ArtistModel, TrackModel.artist_id == ArtistModel.id)
        .join(GenreModel, TrackModel.genre_id == GenreModel.id)
    )


def _to_track_details(row: Any, track_order: int | None = None) -> TrackDetails:
    track, album_title, release_year, artist_name, genre_name = row[:5]
    return TrackDetails(
        track_id=track.id,
        title=track.title,
        duration_seconds=track.duration_seconds,
        file_path=track.file_path,
        album_id=track.album_id,
        album_title=album_title,
        release_year=release_year,
        artist_id=track.artist_id,
        artist_name=artist_name,
        genre_id=track.genre_id,
        genre_name=genre_name,
        track_order=track_order,
    )


async def _count(session: AsyncSession, stmt: Select[Any]) -> int:
    result = await session.execute(stmt)
    return result.scalar() or 0


class UserRepository:
    """Repository for user accounts."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    async def get_by_id(self, user_id: int) -> UserModel | None:
        return await self.session.get(UserModel, user_id)

    async def get_by_email(self, email: str) -> UserModel | None:
        """Look up a user by an already-normalized email."""
        stmt = select(UserModel).where(UserModel.email == email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def email_taken_by_other(self, email: str, user_id: int) -> bool:
        stmt = select(UserModel.id).where(UserModel.email == email, UserModel.id != user_id)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def add(self, name: str, email: str, password_hash: str, role: str) -> UserModel:
        """Insert a user and flush so the generated id is available."""
        model = UserModel(name=name, email=email, password_hash=password_hash, role=role)
        self.session.add(model)
        await self.session.flush()
        return model

    async def count(self) -> int:
        return await _count(self.session, select(func.count(UserModel.id)))


class SubscriptionRepository:
    """Repository for the one-per-user subscription row."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    async def get_for_user(self, user_id: int) -> SubscriptionModel | None:
        stmt = select(SubscriptionModel).where(SubscriptionModel.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add(
        self,
        user_id: int,
        subscription_type: str,
        start_date: date,
        end_date: date | None = None,
        is_active: bool = True,
    ) -> SubscriptionModel:
        model = SubscriptionModel(
            user_id=user_id,
            subscription_type=subscription_type,
            start_date=start_date,
            end_date=end_date,
            is_active=is_active,
        )
        self.session.add(model)
        await self.session.flush()
        return model


class ArtistRepository:
    """Repository for artists."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    async def get_by_id(self, artist_id: int) -> ArtistModel | None:
        return await self.session.get(ArtistModel, artist_id)

    async def get_by_name(self, name: str) -> ArtistModel | None:
        stmt = select(ArtistModel).where(ArtistModel.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add(self, name: str, biography: str | None = None) -> ArtistModel:
        model = ArtistModel(name=name, biography=biography)
        self.session.add(model)
        await self.session.flush()
        return model

    async def delete(self, artist_id: int) -> None:
        await self.session.execute(delete(ArtistModel).where(ArtistModel.id == artist_id))

    async def list_all(self) -> Sequence[ArtistModel]:
        result = await self.session.execute(select(ArtistModel).order_by(ArtistModel.id))
        return result.scalars().all()

    async def count(self) -> int:
        return await _count(self.session, select(func.count(ArtistModel.id)))


class GenreRepository:
    """Repository for genres."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    async def get_by_id(self, genre_id: int) -> GenreModel | None:
        return await self.session.get(GenreModel, genre_id)

    async def get_by_name(self, name: str) -> GenreModel | None:
        stmt = select(GenreModel).where(GenreModel.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add(self, name: str, description: str | None = None) -> GenreModel:
        model = GenreModel(name=name, description=description)
        self.session.add(model)
        await self.session.flush()
        return model

    async def is_referenced(self, genre_id: int) -> bool:
        """True while any album or track still points at this genre."""
        for model in (AlbumModel, TrackModel):
            stmt = select(model.id).where(model.genre_id == genre_id).limit(1)
            result = await self.session.execute(stmt)
            if result.first() is not None:
                return True
        return False

    async def delete(self, genre_id: int) -> None:
        await self.session.execute(delete(GenreModel).where(GenreModel.id == genre_id))

    async def list_all(self) -> Sequence[GenreModel]:
        result = await self.session.execute(select(GenreModel).order_by(GenreModel.id))
        return result.scalars().all()


class AlbumRepository:
    """Repository for albums."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    async def get_by_id(self, album_id: int) -> AlbumModel | None:
        return await self.session.get(AlbumModel, album_id)

    async def find_by_artist_and_title(
        self, artist_id: int, title: str, exclude_id: int | None = None
    ) -> AlbumModel | None:
        """Case-insensitive title lookup within one artist's albums."""
        stmt = select(AlbumModel).where(
            AlbumModel.artist_id == artist_id,
            func.lower(AlbumModel.title) == title.lower(),
        )
        if exclude_id is not None:
            stmt = stmt.where(AlbumModel.id != exclude_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def add(
        self, title: str, artist_id: int, genre_id: int, release_year: int | None = None
    ) -> AlbumModel:
        model = AlbumModel(
            title=title, artist_id=artist_id, genre_id=genre_id, release_year=release_year
        )
        self.session.add(model)
        await self.session.flush()
        return model

    async def ids_for_artist(self, artist_id: int) -> list[int]:
        stmt = select(AlbumModel.id).where(AlbumModel.artist_id == artist_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_many(self, album_ids: Iterable[int]) -> None:
        album_ids = list(album_ids)
        if not album_ids:
            return
        await self.session.execute(delete(AlbumModel).where(AlbumModel.id.in_(album_ids)))

    async def list_details(self) -> list[AlbumDetails]:
        """All albums with artist and genre names, in id order."""
        stmt = (
            select(AlbumModel, ArtistModel.name, GenreModel.name)
            .join(ArtistModel, AlbumModel.artist_id == ArtistModel.id)
            .join(GenreModel, AlbumModel.genre_id == GenreModel.id)
            .order_by(AlbumModel.id)
        )
        result = await self.session.execute(stmt)
        return [
            AlbumDetails(
                album_id=album.id,
                title=album.title,
                release_year=album.release_year,
                artist_id=album.artist_id,
                artist_name=artist_name,
                genre_id=album.genre_id,
                genre_name=genre_name,
                created_at=album.created_at,
            )
            for album, artist_name, genre_name in result.all()
        ]

    async def count(self) -> int:
        return await _count(self.session, select(func.count(AlbumModel.id)))


class TrackRepository:
    """Repository for tracks and their dependent rows."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    async def get_by_id(self, track_id: int) -> TrackModel | None:
        return await self.session.get(TrackModel, track_id)

    async def add(
        self,
        title: str,
        duration_seconds: int,
        album_id: int,
        artist_id: int,
        genre_id: int,
        file_path: str | None = None,
    ) -> TrackModel:
        model = TrackModel(
            title=title,
            duration_seconds=duration_seconds,
            album_id=album_id,
            artist_id=artist_id,
            genre_id=genre_id,
            file_path=file_path,
        )
        self.session.add(model)
        await self.session.flush()
        return model

    async def existing_ids(self, track_ids: Iterable[int]) -> set[int]:
        """Subset of the given ids that exist in the tracks table."""
        track_ids = set(track_ids)
        if not track_ids:
            return set()
        stmt = select(TrackModel.id).where(TrackModel.id.in_(track_ids))
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def ids_for_album(self, album_id: int) -> list[int]:
        stmt = select(TrackModel.id).where(TrackModel.album_id == album_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def ids_for_artist(self, artist_id: int) -> list[int]:
        """Tracks credited to the artist directly or sitting on one of their albums."""
        album_ids = select(AlbumModel.id).where(AlbumModel.artist_id == artist_id)
        stmt = select(TrackModel.id).where(
            (TrackModel.artist_id == artist_id) | TrackModel.album_id.in_(album_ids)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def sync_album_links(self, album_id: int, artist_id: int, genre_id: int) -> None:
        """Point every track of an album at the album's (possibly new) artist and genre."""
        await self.session.execute(
            update(TrackModel)
            .where(TrackModel.album_id == album_id)
            .values(artist_id=artist_id, genre_id=genre_id)
        )

    # Listen up - this is the ONLY place tracks get deleted. Dependent rows go first, in the
    # fixed order of TRACK_DEPENDENT_MODELS, so the FK checks never see an orphan.
    async def delete_with_dependents(self, track_ids: Iterable[int]) -> None:
        """Delete tracks plus every row that references them."""
        track_ids = list(track_ids)
        if not track_ids:
            return
        for model in TRACK_DEPENDENT_MODELS:
            await self.session.execute(
                delete(model).where(model.track_id.in_(track_ids))  # type: ignore[attr-defined]
            )
        await self.session.execute(delete(TrackModel).where(TrackModel.id.in_(track_ids)))

    async def get_details(self, track_id: int) -> TrackDetails | None:
        stmt = _track_details_select().where(TrackModel.id == track_id)
        result = await self.session.execute(stmt)
        row = result.first()
        return _to_track_details(row) if row else None

    async def list_details(self) -> list[TrackDetails]:
        stmt = _track_details_select().order_by(TrackModel.id)
        result = await self.session.execute(stmt)
        return [_to_track_details(row) for row in result.all()]

    async def count(self) -> int:
        return await _count(self.session, select(func.count(TrackModel.id)))


class PlaylistRepository:
    """Repository for playlists and their ordered track entries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    # Hey future me - ownership IS the lookup! There's no "get by id, then compare user_id"
    # anywhere; a playlist you don't own simply doesn't come back. for_update=True locks the row
    # on PostgreSQL (SQLite ignores FOR UPDATE and serializes writers on its own).
    async def get_owned(
        self, playlist_id: int, user_id: int, for_update: bool = False
    ) -> PlaylistModel | None:
        """Get a playlist only if it belongs to the given user."""
        stmt = select(PlaylistModel).where(
            PlaylistModel.id == playlist_id, PlaylistModel.user_id == user_id
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_admin_owned(self, playlist_id: int) -> PlaylistModel | None:
        """Get a playlist only if its owner is an admin (a "public" playlist)."""
        stmt = (
            select(PlaylistModel)
            .join(UserModel, PlaylistModel.user_id == UserModel.id)
            .where(PlaylistModel.id == playlist_id, UserModel.role == "admin")
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_name_for_user(self, user_id: int, name: str) -> PlaylistModel | None:
        stmt = (
            select(PlaylistModel)
            .where(PlaylistModel.user_id == user_id, PlaylistModel.name == name)
            .order_by(PlaylistModel.id)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def add(self, user_id: int, name: str) -> PlaylistModel:
        model = PlaylistModel(user_id=user_id, name=name)
        self.session.add(model)
        await self.session.flush()
        return model

    async def delete(self, playlist_id: int) -> None:
        """Delete a playlist and its track entries."""
        await self.session.execute(
            delete(PlaylistTrackModel).where(PlaylistTrackModel.playlist_id == playlist_id)
        )
        await self.session.execute(delete(PlaylistModel).where(PlaylistModel.id == playlist_id))

    async def list_for_user(self, user_id: int) -> Sequence[PlaylistModel]:
        """A user's playlists, newest first."""
        stmt = (
            select(PlaylistModel)
            .where(PlaylistModel.user_id == user_id)
            .order_by(PlaylistModel.created_at.desc(), PlaylistModel.id.desc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_admin_owned(self) -> Sequence[PlaylistModel]:
        stmt = (
            select(PlaylistModel)
            .join(UserModel, PlaylistModel.user_id == UserModel.id)
            .where(UserModel.role == "admin")
            .order_by(PlaylistModel.id)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def with_tracks(self, playlists: Sequence[PlaylistModel]) -> list[PlaylistWithTracks]:
        """Attach ordered track entries to each playlist in one query."""
        playlist_ids = [p.id for p in playlists]
        entries: dict[int, list[PlaylistTrackEntry]] = {pid: [] for pid in playlist_ids}
        if playlist_ids:
            stmt = (
                select(
                    PlaylistTrackModel.playlist_id,
                    PlaylistTrackModel.track_order,
                    TrackModel.id,
                    TrackModel.title,
                    TrackModel.duration_seconds,
                )
                .join(TrackModel, PlaylistTrackModel.track_id == TrackModel.id)
                .where(PlaylistTrackModel.playlist_id.in_(playlist_ids))
                .order_by(PlaylistTrackModel.playlist_id, PlaylistTrackModel.track_order)
            )
            result = await self.session.execute(stmt)
            for playlist_id, track_order, track_id, title, duration in result.all():
                entries[playlist_id].append(
                    PlaylistTrackEntry(
                        track_id=track_id,
                        title=title,
                        duration_seconds=duration,
                        track_order=track_order,
                    )
                )
        return [
            PlaylistWithTracks(
                playlist_id=p.id,
                name=p.name,
                owner_id=p.user_id,
                created_at=p.created_at,
                tracks=entries[p.id],
            )
            for p in playlists
        ]

    async def track_details(self, playlist_id: int) -> list[TrackDetails]:
        stmt = (
            _track_details_select(PlaylistTrackModel.track_order)
            .join(PlaylistTrackModel, PlaylistTrackModel.track_id == TrackModel.id)
            .where(PlaylistTrackModel.playlist_id == playlist_id)
            .order_by(PlaylistTrackModel.track_order)
        )
        result = await self.session.execute(stmt)
        return [_to_track_details(row, track_order=row[5]) for row in result.all()]

    async def track_ids(self, playlist_id: int) -> list[int]:
        """Track ids in playlist order."""
        stmt = (
            select(PlaylistTrackModel.track_id)
            .where(PlaylistTrackModel.playlist_id == playlist_id)
            .order_by(PlaylistTrackModel.track_order)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def contains(self, playlist_id: int, track_id: int) -> bool:
        stmt = select(PlaylistTrackModel.id).where(
            PlaylistTrackModel.playlist_id == playlist_id,
            PlaylistTrackModel.track_id == track_id,
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def max_order(self, playlist_id: int) -> int:
        stmt = select(func.max(PlaylistTrackModel.track_order)).where(
            PlaylistTrackModel.playlist_id == playlist_id
        )
        return await _count(self.session, stmt)

    async def append(self, playlist_id: int, track_id: int, track_order: int) -> None:
        self.session.add(
            PlaylistTrackModel(playlist_id=playlist_id, track_id=track_id, track_order=track_order)
        )
        await self.session.flush()

    async def remove_track(self, playlist_id: int, track_id: int) -> bool:
        """Delete one entry. Returns False when the track wasn't in the playlist."""
        result = await self.session.execute(
            delete(PlaylistTrackModel).where(
                PlaylistTrackModel.playlist_id == playlist_id,
                PlaylistTrackModel.track_id == track_id,
            )
        )
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def renumber(self, playlist_id: int) -> None:
        """Rewrite track_order as 1..n keeping the current relative order."""
        stmt = (
            select(PlaylistTrackModel)
            .where(PlaylistTrackModel.playlist_id == playlist_id)
            .order_by(PlaylistTrackModel.track_order, PlaylistTrackModel.id)
        )
        result = await self.session.execute(stmt)
        for position, entry in enumerate(result.scalars().all(), start=1):
            entry.track_order = position
        await self.session.flush()

    async def set_order(self, playlist_id: int, ordered_track_ids: Sequence[int]) -> None:
        """Give each track its 1-based position in ordered_track_ids."""
        for position, track_id in enumerate(ordered_track_ids, start=1):
            await self.session.execute(
                update(PlaylistTrackModel)
                .where(
                    PlaylistTrackModel.playlist_id == playlist_id,
                    PlaylistTrackModel.track_id == track_id,
                )
                .values(track_order=position)
            )

    async def copy_tracks(self, source_id: int, target_id: int) -> None:
        """Copy every entry of source into target, keeping track_order."""
        stmt = (
            select(PlaylistTrackModel.track_id, PlaylistTrackModel.track_order)
            .where(PlaylistTrackModel.playlist_id == source_id)
            .order_by(PlaylistTrackModel.track_order)
        )
        result = await self.session.execute(stmt)
        for track_id, track_order in result.all():
            self.session.add(
                PlaylistTrackModel(
                    playlist_id=target_id, track_id=track_id, track_order=track_order
                )
            )
        await self.session.flush()

    async def count(self, user_id: int | None = None) -> int:
        stmt = select(func.count(PlaylistModel.id))
        if user_id is not None:
            stmt = stmt.where(PlaylistModel.user_id == user_id)
        return await _count(self.session, stmt)


class LikedTrackRepository:
    """Repository for liked tracks."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    async def exists(self, user_id: int, track_id: int) -> bool:
        stmt = select(LikedTrackModel.id).where(
            LikedTrackModel.user_id == user_id, LikedTrackModel.track_id == track_id
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def add(self, user_id: int, track_id: int) -> None:
        self.session.add(LikedTrackModel(user_id=user_id, track_id=track_id))
        await self.session.flush()

    async def remove(self, user_id: int, track_id: int) -> bool:
        result = await self.session.execute(
            delete(LikedTrackModel).where(
                LikedTrackModel.user_id == user_id, LikedTrackModel.track_id == track_id
            )
        )
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def track_ids(self, user_id: int) -> list[int]:
        stmt = (
            select(LikedTrackModel.track_id)
            .where(LikedTrackModel.user_id == user_id)
            .order_by(LikedTrackModel.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def track_details(self, user_id: int) -> list[TrackDetails]:
        stmt = (
            _track_details_select()
            .join(LikedTrackModel, LikedTrackModel.track_id == TrackModel.id)
            .where(LikedTrackModel.user_id == user_id)
            .order_by(LikedTrackModel.id)
        )
        result = await self.session.execute(stmt)
        return [_to_track_details(row) for row in result.all()]

    async def count(self, user_id: int) -> int:
        stmt = select(func.count(LikedTrackModel.id)).where(LikedTrackModel.user_id == user_id)
        return await _count(self.session, stmt)


class HistoryRepository:
    """Repository for the append-only playback and download tables."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    async def add_playback(self, user_id: int, track_id: int) -> PlaybackHistoryModel:
        model = PlaybackHistoryModel(user_id=user_id, track_id=track_id)
        self.session.add(model)
        await self.session.flush()
        return model

    async def add_download(self, user_id: int, track_id: int) -> DownloadHistoryModel:
        model = DownloadHistoryModel(user_id=user_id, track_id=track_id)
        self.session.add(model)
        await self.session.flush()
        return model

    async def playbacks(self, user_id: int, limit: int) -> list[HistoryEntry]:
        """Latest playbacks first."""
        stmt = (
            _track_details_select(PlaybackHistoryModel.played_at)
            .join(PlaybackHistoryModel, PlaybackHistoryModel.track_id == TrackModel.id)
            .where(PlaybackHistoryModel.user_id == user_id)
            .order_by(PlaybackHistoryModel.played_at.desc(), PlaybackHistoryModel.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [HistoryEntry(_to_track_details(row), row[5]) for row in result.all()]

    async def downloads(self, user_id: int, limit: int) -> list[HistoryEntry]:
        """Latest downloads first."""
        stmt = (
            _track_details_select(DownloadHistoryModel.downloaded_at)
            .join(DownloadHistoryModel, DownloadHistoryModel.track_id == TrackModel.id)
            .where(DownloadHistoryModel.user_id == user_id)
            .order_by(DownloadHistoryModel.downloaded_at.desc(), DownloadHistoryModel.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [HistoryEntry(_to_track_details(row), row[5]) for row in result.all()]

    async def count_playbacks(self, user_id: int) -> int:
        stmt = select(func.count(PlaybackHistoryModel.id)).where(
            PlaybackHistoryModel.user_id == user_id
        )
        return await _count(self.session, stmt)


class ActivityRepository:
    """Repository for user activity lines and the admin catalog feed."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    async def add(self, user_id: int, activity: str) -> UserActivityModel:
        model = UserActivityModel(user_id=user_id, activity=activity)
        self.session.add(model)
        await self.session.flush()
        return model

    async def recent_for_user(self, user_id: int, limit: int = 10) -> Sequence[UserActivityModel]:
        stmt = (
            select(UserActivityModel)
            .where(UserActivityModel.user_id == user_id)
            .order_by(UserActivityModel.timestamp.desc(), UserActivityModel.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def catalog_feed(self, limit: int = 10) -> list[tuple[str, str, str, datetime]]:
        """Newest catalog additions and playlists as (action, kind, name, timestamp) rows."""
        sources = (
            ("Added", "Track", TrackModel.title, TrackModel.created_at),
            ("Added", "Album", AlbumModel.title, AlbumModel.created_at),
            ("Added", "Artist", ArtistModel.name, ArtistModel.created_at),
            ("Created", "Playlist", PlaylistModel.name, PlaylistModel.created_at),
        )
        feed = union_all(
            *(
                select(
                    literal(action).label("action"),
                    literal(kind).label("kind"),
                    name_col.label("name"),
                    ts_col.label("ts"),
                )
                for action, kind, name_col, ts_col in sources
            )
        ).subquery()
        stmt = select(feed.c.action, feed.c.kind, feed.c.name, feed.c.ts).order_by(
            feed.c.ts.desc()
        ).limit(limit)
        result = await self.session.execute(stmt)
        return [tuple(row) for row in result.all()]  # type: ignore[misc]
