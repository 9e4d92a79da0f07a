"""Application services - business logic between the API routers and the repositories."""

from mlms.application.services.activity_service import ActivityLogger
from mlms.application.services.auth_service import AuthService
from mlms.application.services.catalog_admin_service import CatalogAdminService
from mlms.application.services.catalog_service import CatalogService

# Hey future me - LibraryService and PlaylistService both write activity lines through
# ActivityLogger AFTER their own commit. See activity_service.py for why that's best-effort.
from mlms.application.services.library_service import LibraryService
from mlms.application.services.playlist_service import PlaylistService
from mlms.application.services.stats_service import StatsService

__all__ = [
    "ActivityLogger",
    "AuthService",
    "CatalogAdminService",
    "CatalogService",
    "LibraryService",
    "PlaylistService",
    "StatsService",
]
