"""User endpoints: library, playlists, likes, history, profile, and public browsing.

Hey future me - most routes here need a bearer token (require_user) and only ever touch
the caller's own rows. The exceptions are the catalog listings (/artists, /genres,
/albums, /tracks) and /public-playlists, which are open to anonymous clients.
"""

import logging

from fastapi import APIRouter, Depends, status

from mlms.api.dependencies import (
    get_auth_service,
    get_catalog_service,
    get_library_service,
    get_playlist_service,
    get_stats_service,
    require_user,
)
from mlms.api.schemas.auth import ChangePasswordRequest
from mlms.api.schemas.catalog import (
    AlbumResponse,
    ArtistResponse,
    GenreResponse,
    TrackResponse,
)
from mlms.api.schemas.common import MessageResponse
from mlms.api.schemas.library import (
    ActivityRequest,
    ActivityResponse,
    HistoryEntryResponse,
    LibrarySummaryResponse,
    PlaylistCreatedResponse,
    PlaylistCreateRequest,
    PlaylistRenameRequest,
    PlaylistSavedResponse,
    PlaylistSummaryResponse,
    PlaylistWithTracksResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    ReorderRequest,
    SubscriptionRequest,
    SubscriptionResponse,
    TrackIdRequest,
    TrackIdsRequest,
)
from mlms.application.services import (
    AuthService,
    CatalogService,
    LibraryService,
    PlaylistService,
    StatsService,
)
from mlms.domain.entities import Identity

logger = logging.getLogger(__name__)

router = APIRouter()


# =========================================================================
# DASHBOARD & ACTIVITY
# =========================================================================


@router.get("/summary", response_model=LibrarySummaryResponse)
async def get_summary(
    identity: Identity = Depends(require_user),
    stats: StatsService = Depends(get_stats_service),
) -> LibrarySummaryResponse:
    summary = await stats.get_library_summary(identity.user_id)
    return LibrarySummaryResponse.model_validate(summary)


@router.get("/recent-activity", response_model=list[ActivityResponse])
async def get_recent_activity(
    identity: Identity = Depends(require_user),
    library: LibraryService = Depends(get_library_service),
) -> list[ActivityResponse]:
    """The caller's last ten activity lines, newest first."""
    rows = await library.recent_activity(identity.user_id)
    return [ActivityResponse.model_validate(row) for row in rows]


@router.post("/recent-activity", response_model=MessageResponse)
async def log_activity(
    body: ActivityRequest,
    identity: Identity = Depends(require_user),
    library: LibraryService = Depends(get_library_service),
) -> MessageResponse:
    await library.log_activity(identity.user_id, body.activity)
    return MessageResponse(message="Activity logged")


# =========================================================================
# PROFILE, PASSWORD, SUBSCRIPTION
# =========================================================================


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    identity: Identity = Depends(require_user),
    library: LibraryService = Depends(get_library_service),
) -> ProfileResponse:
    profile = await library.get_profile(identity.user_id)
    return ProfileResponse.model_validate(profile)


@router.put("/profile", response_model=MessageResponse)
async def update_profile(
    body: ProfileUpdateRequest,
    identity: Identity = Depends(require_user),
    library: LibraryService = Depends(get_library_service),
) -> MessageResponse:
    await library.update_profile(identity.user_id, name=body.name, email=body.email)
    return MessageResponse(message="Profile updated")


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    identity: Identity = Depends(require_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.change_password(identity.user_id, body.old_password, body.new_password)
    return MessageResponse(message="Password changed successfully")


@router.get("/subscription", response_model=SubscriptionResponse)
async def get_subscription(
    identity: Identity = Depends(require_user),
    library: LibraryService = Depends(get_library_service),
) -> SubscriptionResponse:
    subscription = await library.get_subscription(identity.user_id)
    return SubscriptionResponse.model_validate(subscription)


@router.put("/subscription", response_model=MessageResponse)
async def update_subscription(
    body: SubscriptionRequest,
    identity: Identity = Depends(require_user),
    library: LibraryService = Depends(get_library_service),
) -> MessageResponse:
    await library.set_subscription(identity.user_id, body.plan)
    return MessageResponse(message="Subscription updated")


# =========================================================================
# LIKES
# =========================================================================


@router.post("/like", response_model=MessageResponse)
async def like_track(
    body: TrackIdRequest,
    identity: Identity = Depends(require_user),
    library: LibraryService = Depends(get_library_service),
) -> MessageResponse:
    """Like a track. Liking it again is a no-op."""
    created = await library.like(identity.user_id, body.track_id)
    return MessageResponse(message="Track liked" if created else "Track already liked")


@router.delete("/like/{track_id}", response_model=MessageResponse)
async def unlike_track(
    track_id: int,
    identity: Identity = Depends(require_user),
    library: LibraryService = Depends(get_library_service),
) -> MessageResponse:
    await library.unlike(identity.user_id, track_id)
    return MessageResponse(message="Track unliked")


@router.get("/liked-tracks", response_model=list[int])
async def liked_track_ids(
    identity: Identity = Depends(require_user),
    library: LibraryService = Depends(get_library_service),
) -> list[int]:
    return await library.liked_track_ids(identity.user_id)


@router.get("/liked-tracks-detailed", response_model=list[TrackResponse])
async def liked_tracks_detailed(
    identity: Identity = Depends(require_user),
    library: LibraryService = Depends(get_library_service),
) -> list[TrackResponse]:
    tracks = await library.liked_tracks(identity.user_id)
    return [TrackResponse.model_validate(t) for t in tracks]


# =========================================================================
# PLAYLISTS
# =========================================================================


@router.get("/playlists", response_model=list[PlaylistSummaryResponse])
async def list_playlists(
    identity: Identity = Depends(require_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> list[PlaylistSummaryResponse]:
    """The caller's playlists, newest first."""
    playlists = await service.list_playlists(identity.user_id)
    return [PlaylistSummaryResponse.model_validate(p) for p in playlists]


@router.post(
    "/playlists", response_model=PlaylistCreatedResponse, status_code=status.HTTP_201_CREATED
)
async def create_playlist(
    body: PlaylistCreateRequest,
    identity: Identity = Depends(require_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistCreatedResponse:
    playlist = await service.create_playlist(identity.user_id, body.name, body.track_ids)
    return PlaylistCreatedResponse(
        message="Playlist created successfully", playlist_id=playlist.playlist_id
    )


# Declared before /playlists/{playlist_id}/... so the literal path never gets parsed as an id.
@router.post("/playlists/add-track-to-favorites", response_model=MessageResponse)
async def add_track_to_favorites(
    body: TrackIdRequest,
    identity: Identity = Depends(require_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> MessageResponse:
    await service.add_to_favorites(identity.user_id, body.track_id)
    return MessageResponse(message="Track added to Favorites")


@router.put("/playlists/{playlist_id}", response_model=MessageResponse)
async def rename_playlist(
    playlist_id: int,
    body: PlaylistRenameRequest,
    identity: Identity = Depends(require_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> MessageResponse:
    await service.rename_playlist(identity.user_id, playlist_id, body.name)
    return MessageResponse(message="Playlist renamed")


@router.delete("/playlists/{playlist_id}", response_model=MessageResponse)
async def delete_playlist(
    playlist_id: int,
    identity: Identity = Depends(require_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> MessageResponse:
    await service.delete_playlist(identity.user_id, playlist_id)
    return MessageResponse(message="Playlist deleted")


@router.get("/playlists/{playlist_id}/tracks", response_model=list[TrackResponse])
async def get_playlist_tracks(
    playlist_id: int,
    identity: Identity = Depends(require_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> list[TrackResponse]:
    tracks = await service.get_tracks(identity.user_id, playlist_id)
    return [TrackResponse.model_validate(t) for t in tracks]


@router.post("/playlists/{playlist_id}/tracks", response_model=MessageResponse)
async def add_tracks(
    playlist_id: int,
    body: TrackIdsRequest,
    identity: Identity = Depends(require_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> MessageResponse:
    """Add several tracks at once; ones already in the playlist are skipped."""
    added = await service.add_tracks(identity.user_id, playlist_id, body.track_ids)
    return MessageResponse(message=f"{added} tracks added to playlist")


@router.put("/playlists/{playlist_id}/reorder", response_model=MessageResponse)
async def reorder_playlist(
    playlist_id: int,
    body: ReorderRequest,
    identity: Identity = Depends(require_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> MessageResponse:
    await service.reorder(identity.user_id, playlist_id, body.track_ids)
    return MessageResponse(message="Playlist reordered")


@router.post("/playlists/{playlist_id}/add-track", response_model=MessageResponse)
async def add_track(
    playlist_id: int,
    body: TrackIdRequest,
    identity: Identity = Depends(require_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> MessageResponse:
    await service.add_track(identity.user_id, playlist_id, body.track_id)
    return MessageResponse(message="Track added to playlist")


@router.delete(
    "/playlists/{playlist_id}/remove-track/{track_id}", response_model=MessageResponse
)
async def remove_track(
    playlist_id: int,
    track_id: int,
    identity: Identity = Depends(require_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> MessageResponse:
    await service.remove_track(identity.user_id, playlist_id, track_id)
    return MessageResponse(message="Track removed from playlist")


# =========================================================================
# PUBLIC (ADMIN-CURATED) PLAYLISTS
# =========================================================================


@router.get("/public-playlists", response_model=list[PlaylistWithTracksResponse])
async def list_public_playlists(
    service: PlaylistService = Depends(get_playlist_service),
) -> list[PlaylistWithTracksResponse]:
    """Every admin-owned playlist with its tracks. No token needed."""
    playlists = await service.list_public()
    return [PlaylistWithTracksResponse.model_validate(p) for p in playlists]


@router.post(
    "/save-playlist/{playlist_id}",
    response_model=PlaylistSavedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def save_public_playlist(
    playlist_id: int,
    identity: Identity = Depends(require_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistSavedResponse:
    """Copy a public playlist into the caller's library. 404 unless an admin owns it."""
    playlist = await service.save_public(identity.user_id, playlist_id)
    return PlaylistSavedResponse(
        message="Playlist saved to your library",
        playlist=PlaylistSummaryResponse.model_validate(playlist),
    )


# =========================================================================
# PLAYBACK & DOWNLOADS
# =========================================================================


@router.get("/now-playing", response_model=HistoryEntryResponse | None)
async def now_playing(
    identity: Identity = Depends(require_user),
    library: LibraryService = Depends(get_library_service),
) -> HistoryEntryResponse | None:
    """Most recently played track with full metadata, or null."""
    entry = await library.now_playing(identity.user_id)
    return HistoryEntryResponse.from_entry(entry) if entry else None


@router.post("/playback", response_model=MessageResponse)
async def log_playback(
    body: TrackIdRequest,
    identity: Identity = Depends(require_user),
    library: LibraryService = Depends(get_library_service),
) -> MessageResponse:
    await library.record_playback(identity.user_id, body.track_id)
    return MessageResponse(message="Playback logged")


@router.get("/playback-history", response_model=list[HistoryEntryResponse])
async def playback_history(
    identity: Identity = Depends(require_user),
    library: LibraryService = Depends(get_library_service),
) -> list[HistoryEntryResponse]:
    entries = await library.playback_history(identity.user_id)
    return [HistoryEntryResponse.from_entry(e) for e in entries]


@router.post("/downloads", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def log_download(
    body: TrackIdRequest,
    identity: Identity = Depends(require_user),
    library: LibraryService = Depends(get_library_service),
) -> MessageResponse:
    await library.record_download(identity.user_id, body.track_id)
    return MessageResponse(message="Download logged")


@router.get("/downloads", response_model=list[HistoryEntryResponse])
async def download_history(
    identity: Identity = Depends(require_user),
    library: LibraryService = Depends(get_library_service),
) -> list[HistoryEntryResponse]:
    entries = await library.download_history(identity.user_id)
    return [HistoryEntryResponse.from_entry(e) for e in entries]


# =========================================================================
# CATALOG BROWSING (public)
# =========================================================================


@router.get("/artists", response_model=list[ArtistResponse])
async def list_artists(
    catalog: CatalogService = Depends(get_catalog_service),
) -> list[ArtistResponse]:
    return [ArtistResponse.from_model(a) for a in await catalog.list_artists()]


@router.get("/genres", response_model=list[GenreResponse])
async def list_genres(
    catalog: CatalogService = Depends(get_catalog_service),
) -> list[GenreResponse]:
    return [GenreResponse.from_model(g) for g in await catalog.list_genres()]


@router.get("/albums", response_model=list[AlbumResponse])
async def list_albums(
    catalog: CatalogService = Depends(get_catalog_service),
) -> list[AlbumResponse]:
    return [AlbumResponse.model_validate(a) for a in await catalog.list_albums()]


@router.get("/tracks", response_model=list[TrackResponse])
async def list_tracks(
    catalog: CatalogService = Depends(get_catalog_service),
) -> list[TrackResponse]:
    """Every track joined with its album, artist and genre."""
    return [TrackResponse.model_validate(t) for t in await catalog.list_tracks()]
