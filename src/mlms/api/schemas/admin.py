"""API schemas for the admin dashboard."""

from pydantic import BaseModel, ConfigDict, Field


class CatalogSummaryResponse(BaseModel):
    """Row counts for the admin dashboard."""

    model_config = ConfigDict(from_attributes=True)

    users: int
    artists: int
    albums: int
    tracks: int
    playlists: int


class ActivityFeedItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    activity: str = Field(..., description='e.g. "Added Track: Blue in Green"')
    timestamp: str = Field(..., description="Human-readable UTC timestamp")
