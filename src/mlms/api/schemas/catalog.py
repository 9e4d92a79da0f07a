"""API schemas for the music catalog (artists, genres, albums, tracks)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from mlms.infrastructure.persistence.models import ArtistModel, GenreModel


class ArtistRequest(BaseModel):
    """Create/replace an artist."""

    name: str | None = Field(default=None, description="Unique artist name")
    biography: str | None = None


class GenreRequest(BaseModel):
    """Create/replace a genre."""

    name: str | None = Field(default=None, description="Unique genre name")
    description: str | None = None


class AlbumRequest(BaseModel):
    """Create/replace an album. Title is unique per artist, ignoring case."""

    title: str | None = None
    artist_id: int
    genre_id: int
    release_year: int | None = Field(default=None, ge=0)


class TrackRequest(BaseModel):
    """Create/replace a track.

    artist_id and genre_id may be omitted; they are taken from the album. When given
    they must match the album's.
    """

    title: str | None = None
    duration_seconds: int = Field(..., ge=0)
    album_id: int
    artist_id: int | None = None
    genre_id: int | None = None
    file_path: str | None = None


class ArtistResponse(BaseModel):
    artist_id: int
    name: str
    biography: str | None = None

    @classmethod
    def from_model(cls, model: ArtistModel) -> "ArtistResponse":
        return cls(artist_id=model.id, name=model.name, biography=model.biography)


class GenreResponse(BaseModel):
    genre_id: int
    name: str
    description: str | None = None

    @classmethod
    def from_model(cls, model: GenreModel) -> "GenreResponse":
        return cls(genre_id=model.id, name=model.name, description=model.description)


class AlbumResponse(BaseModel):
    """Album joined with its artist and genre names."""

    model_config = ConfigDict(from_attributes=True)

    album_id: int
    title: str
    release_year: int | None = None
    artist_id: int
    artist_name: str
    genre_id: int
    genre_name: str
    created_at: datetime


class TrackResponse(BaseModel):
    """Denormalized track row: Track x Album x Artist x Genre."""

    model_config = ConfigDict(from_attributes=True)

    track_id: int
    title: str
    duration_seconds: int
    file_path: str | None = None
    album_id: int
    album_title: str
    release_year: int | None = None
    artist_id: int
    artist_name: str
    genre_id: int
    genre_name: str
    track_order: int | None = Field(default=None, description="Only set inside a playlist")
