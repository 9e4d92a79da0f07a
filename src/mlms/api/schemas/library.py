"""API schemas for a user's library: playlists, likes, history, subscription, profile."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from mlms.api.schemas.catalog import TrackResponse
from mlms.domain.dtos import HistoryEntry


class TrackIdRequest(BaseModel):
    track_id: int


class TrackIdsRequest(BaseModel):
    track_ids: list[int] = Field(default_factory=list)


class PlaylistCreateRequest(BaseModel):
    """Create a playlist. Admin playlists must come with at least one track."""

    name: str | None = None
    track_ids: list[int] = Field(default_factory=list)


class PlaylistRenameRequest(BaseModel):
    name: str | None = None


class ReorderRequest(BaseModel):
    """New order for a playlist: every current track id exactly once."""

    track_ids: list[int] = Field(..., description="Track ids in their new order")


class PlaylistSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    playlist_id: int
    name: str
    created_at: datetime


class PlaylistCreatedResponse(BaseModel):
    message: str
    playlist_id: int


class PlaylistSavedResponse(BaseModel):
    message: str
    playlist: PlaylistSummaryResponse


class PlaylistTrackEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    track_id: int
    title: str
    duration_seconds: int
    track_order: int


class PlaylistWithTracksResponse(BaseModel):
    """Playlist header with its tracks in playlist order."""

    model_config = ConfigDict(from_attributes=True)

    playlist_id: int
    name: str
    owner_id: int
    created_at: datetime
    tracks: list[PlaylistTrackEntryResponse]


class HistoryEntryResponse(TrackResponse):
    """A played or downloaded track and when it happened."""

    occurred_at: datetime

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> "HistoryEntryResponse":
        track = TrackResponse.model_validate(entry.track)
        return cls(**track.model_dump(), occurred_at=entry.occurred_at)


class SubscriptionRequest(BaseModel):
    plan: str | None = None


class SubscriptionResponse(BaseModel):
    """Current plan ("Free" when the user never subscribed)."""

    model_config = ConfigDict(from_attributes=True)

    plan: str
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool = False


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    created_at: datetime
    last_login_at: datetime | None = None


class ProfileUpdateRequest(BaseModel):
    """Omitted fields stay as they are."""

    name: str | None = None
    email: str | None = None


class ActivityRequest(BaseModel):
    activity: str | None = None


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    activity: str
    timestamp: datetime


class LibrarySummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    liked_tracks: int
    playlists: int
    recently_played: int
    total_tracks: int
