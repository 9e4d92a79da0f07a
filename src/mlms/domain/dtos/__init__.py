"""Data transfer objects returned by application services.

Services return these plain dataclasses instead of ORM models for anything
that is a join across tables. Routers turn them into response schemas.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class TrackDetails:
    """Denormalized Track x Album x Artist x Genre row."""

    track_id: int
    title: str
    duration_seconds: int
    file_path: str | None
    album_id: int
    album_title: str
    release_year: int | None
    artist_id: int
    artist_name: str
    genre_id: int
    genre_name: str
    track_order: int | None = None


@dataclass
class AlbumDetails:
    """Album row with its artist and genre names."""

    album_id: int
    title: str
    release_year: int | None
    artist_id: int
    artist_name: str
    genre_id: int
    genre_name: str
    created_at: datetime


@dataclass
class PlaylistTrackEntry:
    """Lightweight track entry inside a playlist listing."""

    track_id: int
    title: str
    duration_seconds: int
    track_order: int


@dataclass
class PlaylistSummary:
    """Playlist header without tracks."""

    playlist_id: int
    name: str
    created_at: datetime


@dataclass
class PlaylistWithTracks:
    """Playlist header plus its tracks in playlist order."""

    playlist_id: int
    name: str
    owner_id: int
    created_at: datetime
    tracks: list[PlaylistTrackEntry] = field(default_factory=list)


@dataclass
class HistoryEntry:
    """A playback or download event with the track it refers to."""

    track: TrackDetails
    occurred_at: datetime


@dataclass
class ActivityFeedItem:
    """One line of the admin recent-activity feed."""

    activity: str
    timestamp: str


@dataclass
class CatalogSummary:
    """Admin dashboard counts."""

    users: int
    artists: int
    albums: int
    tracks: int
    playlists: int


@dataclass
class LibrarySummary:
    """User dashboard counts."""

    liked_tracks: int
    playlists: int
    recently_played: int
    total_tracks: int


__all__ = [
    "ActivityFeedItem",
    "AlbumDetails",
    "CatalogSummary",
    "HistoryEntry",
    "LibrarySummary",
    "PlaylistSummary",
    "PlaylistTrackEntry",
    "PlaylistWithTracks",
    "TrackDetails",
]
