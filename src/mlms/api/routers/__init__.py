"""API router initialization."""

# Hey future me, this is the API router aggregator! main.py mounts api_router under settings.api_prefix
# ("/api"), so endpoints become /api/auth/login, /api/admin/artists, /api/user/playlists, ...
# The health router is NOT in here - it's mounted at the root (/health) so probes don't need the prefix.

from fastapi import APIRouter

from mlms.api.routers import admin, auth, health, user
from mlms.api.schemas.common import ERROR_RESPONSES

api_router = APIRouter(responses=ERROR_RESPONSES)

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(user.router, prefix="/user", tags=["User"])

__all__ = [
    "admin",
    "api_router",
    "auth",
    "health",
    "user",
]
