"""Seed data for service tests (real SQLite session, no HTTP)."""

from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from mlms.application.services import CatalogAdminService
from mlms.infrastructure.persistence import UserRepository


@pytest.fixture
async def seeded(session: AsyncSession) -> dict[str, Any]:
    """Two regular users, one admin, and a small catalog: one album with tracks A, B, C."""
    users = UserRepository(session)
    admin = await users.add("Admin", "admin@example.com", "x", "admin")
    alice = await users.add("Alice", "alice@example.com", "x", "regular_user")
    bob = await users.add("Bob", "bob@example.com", "x", "regular_user")
    await session.commit()

    catalog = CatalogAdminService(session)
    artist = await catalog.create_artist("John Coltrane")
    genre = await catalog.create_genre("Jazz")
    album = await catalog.create_album("Giant Steps", artist.id, genre.id, 1960)
    tracks = [
        await catalog.create_track(title=title, duration_seconds=300, album_id=album.id)
        for title in ("Giant Steps", "Cousin Mary", "Naima")
    ]

    return {
        "admin_id": admin.id,
        "alice_id": alice.id,
        "bob_id": bob.id,
        "artist_id": artist.id,
        "genre_id": genre.id,
        "album_id": album.id,
        "track_ids": [t.id for t in tracks],
    }
