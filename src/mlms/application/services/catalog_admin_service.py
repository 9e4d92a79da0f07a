"""Catalog Admin Service - create, update and delete artists, albums, tracks and genres.

Hey future me - there are NO cascading foreign keys in the schema. Every delete here
removes dependent rows itself, children first:

    liked_tracks / playlist_tracks / playback_history / download_history
      -> tracks -> albums -> artist

and commits once at the end, so a failure halfway leaves nothing behind.

Tracks also carry their own artist_id/genre_id (copied from the album). We keep those
in sync here: omitted values are taken from the album, contradicting values are refused,
and moving an album to another artist/genre drags its tracks along.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from mlms.domain.exceptions import (
    DuplicateEntityException,
    EntityNotFoundException,
    InvalidStateException,
    ValidationError,
)
from mlms.infrastructure.observability.logger_template import log_operation
from mlms.infrastructure.persistence.models import (
    AlbumModel,
    ArtistModel,
    GenreModel,
    TrackModel,
)
from mlms.infrastructure.persistence.repositories import (
    AlbumRepository,
    ArtistRepository,
    GenreRepository,
    TrackRepository,
)

logger = logging.getLogger(__name__)


def _required(value: str | None, field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{field} is required")
    return value


class CatalogAdminService:
    """Admin-only writes to the catalog."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize catalog admin service.

        Args:
            session: Database session
        """
        self._session = session
        self._artists = ArtistRepository(session)
        self._genres = GenreRepository(session)
        self._albums = AlbumRepository(session)
        self._tracks = TrackRepository(session)

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    async def _artist(self, artist_id: int) -> ArtistModel:
        artist = await self._artists.get_by_id(artist_id)
        if artist is None:
            raise EntityNotFoundException("Artist", artist_id, "Artist not found")
        return artist

    async def _genre(self, genre_id: int) -> GenreModel:
        genre = await self._genres.get_by_id(genre_id)
        if genre is None:
            raise EntityNotFoundException("Genre", genre_id, "Genre not found")
        return genre

    async def _album(self, album_id: int) -> AlbumModel:
        album = await self._albums.get_by_id(album_id)
        if album is None:
            raise EntityNotFoundException("Album", album_id, "Album not found")
        return album

    async def _track(self, track_id: int) -> TrackModel:
        track = await self._tracks.get_by_id(track_id)
        if track is None:
            raise EntityNotFoundException("Track", track_id, "Track not found")
        return track

    async def _track_links(
        self, album_id: int, artist_id: int | None, genre_id: int | None
    ) -> tuple[int, int]:
        """Artist and genre a track on this album must carry."""
        album = await self._album(album_id)
        if artist_id is not None and artist_id != album.artist_id:
            raise ValidationError("Track artist must match the album's artist")
        if genre_id is not None and genre_id != album.genre_id:
            raise ValidationError("Track genre must match the album's genre")
        return album.artist_id, album.genre_id

    # =========================================================================
    # ARTISTS
    # =========================================================================

    async def create_artist(self, name: str | None, biography: str | None = None) -> ArtistModel:
        name = _required(name, "Artist name")
        if await self._artists.get_by_name(name) is not None:
            raise DuplicateEntityException("Artist", name)
        artist = await self._artists.add(name, biography)
        await self._session.commit()
        return artist

    async def update_artist(
        self, artist_id: int, name: str | None, biography: str | None = None
    ) -> ArtistModel:
        artist = await self._artist(artist_id)
        name = _required(name, "Artist name")
        existing = await self._artists.get_by_name(name)
        if existing is not None and existing.id != artist.id:
            raise DuplicateEntityException("Artist", name)
        artist.name = name
        artist.biography = biography
        await self._session.commit()
        return artist

    async def delete_artist(self, artist_id: int) -> str:
        """Delete an artist with all their albums and tracks. Returns the artist name."""
        artist = await self._artist(artist_id)
        name = artist.name

        async with log_operation(logger, "artist_delete", artist_id=artist_id):
            track_ids = await self._tracks.ids_for_artist(artist_id)
            album_ids = await self._albums.ids_for_artist(artist_id)
            await self._tracks.delete_with_dependents(track_ids)
            await self._albums.delete_many(album_ids)
            await self._artists.delete(artist_id)
            await self._session.commit()
        return name

    # =========================================================================
    # ALBUMS
    # =========================================================================

    async def _check_album_title(
        self, artist_id: int, title: str, exclude_id: int | None = None
    ) -> None:
        duplicate = await self._albums.find_by_artist_and_title(artist_id, title, exclude_id)
        if duplicate is not None:
            raise DuplicateEntityException(
                "Album", title, "An album with this title already exists for this artist"
            )

    async def create_album(
        self,
        title: str | None,
        artist_id: int,
        genre_id: int,
        release_year: int | None = None,
    ) -> AlbumModel:
        title = _required(title, "Album title")
        await self._artist(artist_id)
        await self._genre(genre_id)
        await self._check_album_title(artist_id, title)
        album = await self._albums.add(title, artist_id, genre_id, release_year)
        await self._session.commit()
        return album

    async def update_album(
        self,
        album_id: int,
        title: str | None,
        artist_id: int,
        genre_id: int,
        release_year: int | None = None,
    ) -> AlbumModel:
        album = await self._album(album_id)
        title = _required(title, "Album title")
        await self._artist(artist_id)
        await self._genre(genre_id)
        await self._check_album_title(artist_id, title, exclude_id=album.id)

        album.title = title
        album.artist_id = artist_id
        album.genre_id = genre_id
        album.release_year = release_year
        await self._session.flush()
        await self._tracks.sync_album_links(album.id, artist_id, genre_id)
        await self._session.commit()
        return album

    async def delete_album(self, album_id: int) -> str:
        """Delete an album and its tracks. Returns the album title."""
        album = await self._album(album_id)
        title = album.title

        async with log_operation(logger, "album_delete", album_id=album_id):
            track_ids = await self._tracks.ids_for_album(album_id)
            await self._tracks.delete_with_dependents(track_ids)
            await self._albums.delete_many([album_id])
            await self._session.commit()
        return title

    # =========================================================================
    # TRACKS
    # =========================================================================

    async def create_track(
        self,
        title: str | None,
        duration_seconds: int,
        album_id: int,
        artist_id: int | None = None,
        genre_id: int | None = None,
        file_path: str | None = None,
    ) -> TrackModel:
        title = _required(title, "Track title")
        artist_id, genre_id = await self._track_links(album_id, artist_id, genre_id)
        track = await self._tracks.add(
            title=title,
            duration_seconds=duration_seconds,
            album_id=album_id,
            artist_id=artist_id,
            genre_id=genre_id,
            file_path=file_path,
        )
        await self._session.commit()
        return track

    async def update_track(
        self,
        track_id: int,
        title: str | None,
        duration_seconds: int,
        album_id: int,
        artist_id: int | None = None,
        genre_id: int | None = None,
        file_path: str | None = None,
    ) -> TrackModel:
        track = await self._track(track_id)
        title = _required(title, "Track title")
        artist_id, genre_id = await self._track_links(album_id, artist_id, genre_id)

        track.title = title
        track.duration_seconds = duration_seconds
        track.album_id = album_id
        track.artist_id = artist_id
        track.genre_id = genre_id
        track.file_path = file_path
        await self._session.commit()
        return track

    async def delete_track(self, track_id: int) -> str:
        """Delete a track and every row that references it. Returns the track title."""
        track = await self._track(track_id)
        title = track.title
        await self._tracks.delete_with_dependents([track_id])
        await self._session.commit()
        logger.info("Track deleted", extra={"track_id": track_id})
        return title

    # =========================================================================
    # GENRES
    # =========================================================================

    async def create_genre(self, name: str | None, description: str | None = None) -> GenreModel:
        name = _required(name, "Genre name")
        if await self._genres.get_by_name(name) is not None:
            raise DuplicateEntityException("Genre", name)
        genre = await self._genres.add(name, description)
        await self._session.commit()
        return genre

    async def update_genre(
        self, genre_id: int, name: str | None, description: str | None = None
    ) -> GenreModel:
        genre = await self._genre(genre_id)
        name = _required(name, "Genre name")
        existing = await self._genres.get_by_name(name)
        if existing is not None and existing.id != genre.id:
            raise DuplicateEntityException("Genre", name)
        genre.name = name
        genre.description = description
        await self._session.commit()
        return genre

    async def delete_genre(self, genre_id: int) -> str:
        """Delete an unused genre. Returns the genre name.

        Raises:
            InvalidStateException: albums or tracks still reference the genre
        """
        genre = await self._genre(genre_id)
        name = genre.name
        if await self._genres.is_referenced(genre_id):
            raise InvalidStateException("Genre is still used by albums or tracks")
        await self._genres.delete(genre_id)
        await self._session.commit()
        return name
