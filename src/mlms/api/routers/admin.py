"""Admin endpoints: catalog CRUD, dashboard, and the admin's own (public) playlists.

Every route here sits behind require_admin (set on the router itself), so a regular
user's token gets a 403 before any handler runs.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, status

from mlms.api.dependencies import (
    get_auth_service,
    get_catalog_admin_service,
    get_playlist_service,
    get_stats_service,
    require_admin,
)
from mlms.api.schemas.admin import ActivityFeedItemResponse, CatalogSummaryResponse
from mlms.api.schemas.auth import ChangePasswordRequest
from mlms.api.schemas.catalog import (
    AlbumRequest,
    ArtistRequest,
    ArtistResponse,
    GenreRequest,
    GenreResponse,
    TrackRequest,
)
from mlms.api.schemas.common import MessageResponse
from mlms.api.schemas.library import (
    PlaylistCreatedResponse,
    PlaylistCreateRequest,
    PlaylistRenameRequest,
    PlaylistWithTracksResponse,
    ReorderRequest,
    TrackIdRequest,
)
from mlms.application.services import (
    AuthService,
    CatalogAdminService,
    PlaylistService,
    StatsService,
)
from mlms.domain.entities import Identity

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


# =========================================================================
# ARTISTS
# =========================================================================


@router.post("/artists", status_code=status.HTTP_201_CREATED)
async def create_artist(
    body: ArtistRequest,
    service: CatalogAdminService = Depends(get_catalog_admin_service),
) -> dict[str, Any]:
    artist = await service.create_artist(body.name, body.biography)
    return {"message": "Artist added", "artist": ArtistResponse.from_model(artist)}


@router.put("/artists/{artist_id}")
async def update_artist(
    artist_id: int,
    body: ArtistRequest,
    service: CatalogAdminService = Depends(get_catalog_admin_service),
) -> dict[str, Any]:
    artist = await service.update_artist(artist_id, body.name, body.biography)
    return {"message": "Artist updated", "artist": ArtistResponse.from_model(artist)}


@router.delete("/artists/{artist_id}", response_model=MessageResponse)
async def delete_artist(
    artist_id: int,
    service: CatalogAdminService = Depends(get_catalog_admin_service),
) -> MessageResponse:
    """Delete an artist together with their albums, tracks and everything pointing at them."""
    name = await service.delete_artist(artist_id)
    return MessageResponse(message=f'Artist "{name}" and all related data deleted')


# =========================================================================
# ALBUMS
# =========================================================================


@router.post("/albums", status_code=status.HTTP_201_CREATED)
async def create_album(
    body: AlbumRequest,
    service: CatalogAdminService = Depends(get_catalog_admin_service),
) -> dict[str, Any]:
    album = await service.create_album(
        body.title, body.artist_id, body.genre_id, body.release_year
    )
    return {"message": "Album added", "album_id": album.id}


@router.put("/albums/{album_id}", response_model=MessageResponse)
async def update_album(
    album_id: int,
    body: AlbumRequest,
    service: CatalogAdminService = Depends(get_catalog_admin_service),
) -> MessageResponse:
    await service.update_album(
        album_id, body.title, body.artist_id, body.genre_id, body.release_year
    )
    return MessageResponse(message="Album updated")


@router.delete("/albums/{album_id}", response_model=MessageResponse)
async def delete_album(
    album_id: int,
    service: CatalogAdminService = Depends(get_catalog_admin_service),
) -> MessageResponse:
    title = await service.delete_album(album_id)
    return MessageResponse(message=f'Album "{title}" and its tracks deleted')


# =========================================================================
# TRACKS
# =========================================================================


@router.post("/tracks", status_code=status.HTTP_201_CREATED)
async def create_track(
    body: TrackRequest,
    service: CatalogAdminService = Depends(get_catalog_admin_service),
) -> dict[str, Any]:
    track = await service.create_track(
        title=body.title,
        duration_seconds=body.duration_seconds,
        album_id=body.album_id,
        artist_id=body.artist_id,
        genre_id=body.genre_id,
        file_path=body.file_path,
    )
    return {"message": "Track added", "track_id": track.id}


@router.put("/tracks/{track_id}", response_model=MessageResponse)
async def update_track(
    track_id: int,
    body: TrackRequest,
    service: CatalogAdminService = Depends(get_catalog_admin_service),
) -> MessageResponse:
    await service.update_track(
        track_id,
        title=body.title,
        duration_seconds=body.duration_seconds,
        album_id=body.album_id,
        artist_id=body.artist_id,
        genre_id=body.genre_id,
        file_path=body.file_path,
    )
    return MessageResponse(message="Track updated")


@router.delete("/tracks/{track_id}", response_model=MessageResponse)
async def delete_track(
    track_id: int,
    service: CatalogAdminService = Depends(get_catalog_admin_service),
) -> MessageResponse:
    title = await service.delete_track(track_id)
    return MessageResponse(message=f'Track "{title}" deleted successfully')


# =========================================================================
# GENRES
# =========================================================================


@router.post("/genres", status_code=status.HTTP_201_CREATED)
async def create_genre(
    body: GenreRequest,
    service: CatalogAdminService = Depends(get_catalog_admin_service),
) -> dict[str, Any]:
    genre = await service.create_genre(body.name, body.description)
    return {"message": "Genre added", "genre": GenreResponse.from_model(genre)}


@router.put("/genres/{genre_id}")
async def update_genre(
    genre_id: int,
    body: GenreRequest,
    service: CatalogAdminService = Depends(get_catalog_admin_service),
) -> dict[str, Any]:
    genre = await service.update_genre(genre_id, body.name, body.description)
    return {"message": "Genre updated", "genre": GenreResponse.from_model(genre)}


@router.delete("/genres/{genre_id}", response_model=MessageResponse)
async def delete_genre(
    genre_id: int,
    service: CatalogAdminService = Depends(get_catalog_admin_service),
) -> MessageResponse:
    """Delete a genre. 409 while albums or tracks still use it."""
    name = await service.delete_genre(genre_id)
    return MessageResponse(message=f'Genre "{name}" deleted')


# =========================================================================
# DASHBOARD
# =========================================================================


@router.get("/summary", response_model=CatalogSummaryResponse)
async def get_summary(
    stats: StatsService = Depends(get_stats_service),
) -> CatalogSummaryResponse:
    summary = await stats.get_catalog_summary()
    return CatalogSummaryResponse.model_validate(summary)


@router.get("/recent-activity", response_model=list[ActivityFeedItemResponse])
async def get_recent_activity(
    stats: StatsService = Depends(get_stats_service),
) -> list[ActivityFeedItemResponse]:
    """Ten newest catalog additions and playlists."""
    items = await stats.get_recent_catalog_activity()
    return [ActivityFeedItemResponse.model_validate(item) for item in items]


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    identity: Identity = Depends(require_admin),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.change_password(identity.user_id, body.old_password, body.new_password)
    return MessageResponse(message="Password updated")


# =========================================================================
# PLAYLISTS
# =========================================================================


@router.get("/playlists", response_model=list[PlaylistWithTracksResponse])
async def list_playlists(
    identity: Identity = Depends(require_admin),
    service: PlaylistService = Depends(get_playlist_service),
) -> list[PlaylistWithTracksResponse]:
    """The admin's own playlists with their tracks (these are the public playlists)."""
    playlists = await service.list_playlists_with_tracks(identity.user_id)
    return [PlaylistWithTracksResponse.model_validate(p) for p in playlists]


@router.post(
    "/playlists", response_model=PlaylistCreatedResponse, status_code=status.HTTP_201_CREATED
)
async def create_playlist(
    body: PlaylistCreateRequest,
    identity: Identity = Depends(require_admin),
    service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistCreatedResponse:
    playlist = await service.create_playlist(
        identity.user_id, body.name, body.track_ids, require_tracks=True
    )
    return PlaylistCreatedResponse(
        message="Playlist created successfully", playlist_id=playlist.playlist_id
    )


@router.put("/playlists/{playlist_id}", response_model=MessageResponse)
async def rename_playlist(
    playlist_id: int,
    body: PlaylistRenameRequest,
    identity: Identity = Depends(require_admin),
    service: PlaylistService = Depends(get_playlist_service),
) -> MessageResponse:
    await service.rename_playlist(identity.user_id, playlist_id, body.name)
    return MessageResponse(message="Playlist updated")


@router.delete("/playlists/{playlist_id}", response_model=MessageResponse)
async def delete_playlist(
    playlist_id: int,
    identity: Identity = Depends(require_admin),
    service: PlaylistService = Depends(get_playlist_service),
) -> MessageResponse:
    await service.delete_playlist(identity.user_id, playlist_id)
    return MessageResponse(message="Playlist deleted successfully")


@router.put("/playlists/{playlist_id}/reorder", response_model=MessageResponse)
async def reorder_playlist(
    playlist_id: int,
    body: ReorderRequest,
    identity: Identity = Depends(require_admin),
    service: PlaylistService = Depends(get_playlist_service),
) -> MessageResponse:
    await service.reorder(identity.user_id, playlist_id, body.track_ids)
    return MessageResponse(message="Playlist reordered")


@router.post("/playlists/{playlist_id}/add-track", response_model=MessageResponse)
async def add_track(
    playlist_id: int,
    body: TrackIdRequest,
    identity: Identity = Depends(require_admin),
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
    identity: Identity = Depends(require_admin),
    service: PlaylistService = Depends(get_playlist_service),
) -> MessageResponse:
    await service.remove_track(identity.user_id, playlist_id, track_id)
    return MessageResponse(message="Track removed from playlist")
