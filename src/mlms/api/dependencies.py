"""Dependency injection for FastAPI routes.

Hey future me - everything a route needs comes through Depends():
    request -> app.state.db -> AsyncSession -> Service(session, ...)
and the caller's identity comes from require_user / require_admin.
Nothing here caches state between requests.
"""

from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from mlms.application.services import (
    AuthService,
    CatalogAdminService,
    CatalogService,
    LibraryService,
    PlaylistService,
    StatsService,
)
from mlms.config import Settings
from mlms.domain.entities import Identity
from mlms.domain.exceptions import AuthenticationError, AuthorizationError, InternalError
from mlms.infrastructure.persistence.database import Database
from mlms.infrastructure.security import PasswordHasher, TokenService

# auto_error=False so a missing header reaches require_user and becomes our 401 body,
# instead of FastAPI's own 403 "Not authenticated".
bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with (tests inject their own)."""
    settings: Settings = request.app.state.settings
    return settings


# Hey future me - session_scope() is an async context manager that commits on clean exit and
# rolls back if the route raises. Use this in endpoint params like:
# "session: AsyncSession = Depends(get_db_session)"
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session from app state."""
    db: Database | None = getattr(request.app.state, "db", None)
    if db is None:
        # The lifespan never ran (app served without startup)
        raise InternalError("Database is not initialized")
    async with db.session_scope() as session:
        yield session


def get_token_service(settings: Settings = Depends(get_app_settings)) -> TokenService:
    return TokenService(settings.security)


def get_password_hasher(settings: Settings = Depends(get_app_settings)) -> PasswordHasher:
    return PasswordHasher(rounds=settings.security.bcrypt_rounds)


# Listen up - two different failures, two different status codes:
#   no bearer token at all          -> AuthenticationError -> 401
#   token present but doesn't check -> TokenRejectedError  -> 403 (raised by TokenService.decode)
async def require_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """Authenticate the caller from the Authorization header."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("No token provided")
    return tokens.decode(credentials.credentials)


async def require_admin(identity: Identity = Depends(require_user)) -> Identity:
    """Authenticate the caller and insist on the admin role."""
    if not identity.is_admin:
        raise AuthorizationError("Admins only")
    return identity


async def get_auth_service(
    session: AsyncSession = Depends(get_db_session),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_app_settings),
) -> AuthService:
    return AuthService(session, hasher, tokens, settings.security)


async def get_catalog_service(
    session: AsyncSession = Depends(get_db_session),
) -> CatalogService:
    return CatalogService(session)


async def get_catalog_admin_service(
    session: AsyncSession = Depends(get_db_session),
) -> CatalogAdminService:
    return CatalogAdminService(session)


async def get_stats_service(
    session: AsyncSession = Depends(get_db_session),
) -> StatsService:
    return StatsService(session)


async def get_playlist_service(
    session: AsyncSession = Depends(get_db_session),
) -> PlaylistService:
    return PlaylistService(session)


async def get_library_service(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> LibraryService:
    return LibraryService(session, settings.security)
