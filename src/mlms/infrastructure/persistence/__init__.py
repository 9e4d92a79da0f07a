"""Infrastructure persistence layer."""

from .database import Database
from .models import (
    TRACK_DEPENDENT_MODELS,
    AlbumModel,
    ArtistModel,
    Base,
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
from .repositories import (
    ActivityRepository,
    AlbumRepository,
    ArtistRepository,
    GenreRepository,
    HistoryRepository,
    LikedTrackRepository,
    PlaylistRepository,
    SubscriptionRepository,
    TrackRepository,
    UserRepository,
)

__all__ = [
    "TRACK_DEPENDENT_MODELS",
    "ActivityRepository",
    "AlbumModel",
    "AlbumRepository",
    "ArtistModel",
    "ArtistRepository",
    "Base",
    "Database",
    "DownloadHistoryModel",
    "GenreModel",
    "GenreRepository",
    "HistoryRepository",
    "LikedTrackModel",
    "LikedTrackRepository",
    "PlaybackHistoryModel",
    "PlaylistModel",
    "PlaylistRepository",
    "PlaylistTrackModel",
    "SubscriptionModel",
    "SubscriptionRepository",
    "TrackModel",
    "TrackRepository",
    "UserActivityModel",
    "UserModel",
    "UserRepository",
]
