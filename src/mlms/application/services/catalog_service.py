"""Catalog Service - public, read-only browsing of the music catalog."""

from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from mlms.domain.dtos import AlbumDetails, TrackDetails
from mlms.infrastructure.persistence.models import ArtistModel, GenreModel
from mlms.infrastructure.persistence.repositories import (
    AlbumRepository,
    ArtistRepository,
    GenreRepository,
    TrackRepository,
)


class CatalogService:
    """Lists artists, genres, albums and tracks in id order. No paging."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize catalog service.

        Args:
            session: Database session
        """
        self._artists = ArtistRepository(session)
        self._genres = GenreRepository(session)
        self._albums = AlbumRepository(session)
        self._tracks = TrackRepository(session)

    async def list_artists(self) -> Sequence[ArtistModel]:
        return await self._artists.list_all()

    async def list_genres(self) -> Sequence[GenreModel]:
        return await self._genres.list_all()

    async def list_albums(self) -> list[AlbumDetails]:
        return await self._albums.list_details()

    async def list_tracks(self) -> list[TrackDetails]:
        """Every track as a denormalized Track x Album x Artist x Genre row."""
        return await self._tracks.list_details()
