"""Shared fixtures.

Hey future me - every test gets its own SQLite file under tmp_path, so nothing leaks between
tests and there's nothing to clean up. bcrypt_rounds is cranked down to 4, otherwise each
register/login burns ~100ms and the API suite crawls.
"""

from collections.abc import AsyncIterator, Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from mlms.config import DatabaseSettings, LoggingSettings, SecuritySettings, Settings
from mlms.infrastructure.persistence import Database
from mlms.main import create_app

TEST_PASSWORD = "s3cret-pass"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite database."""
    return Settings(
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"),
        security=SecuritySettings(jwt_secret="test-secret", bcrypt_rounds=4),
        logging=LoggingSettings(level="WARNING"),
    )


@pytest.fixture
async def database(settings: Settings) -> AsyncIterator[Database]:
    """Database with all tables created, for service/repository tests."""
    db = Database(settings)
    await db.create_tables()
    yield db
    await db.close()


@pytest.fixture
async def session(database: Database) -> AsyncIterator[AsyncSession]:
    async with database.session_scope() as session:
        yield session


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    # Context manager so the lifespan runs (creates tables, sets app.state.db).
    with TestClient(app) as test_client:
        yield test_client


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register_and_login(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Factory: register an account, log in, return {"user_id", "token", "headers"}."""

    def _register_and_login(
        email: str, role: str | None = None, name: str = "Test User"
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": name, "email": email, "password": TEST_PASSWORD}
        if role:
            payload["role"] = role
        registered = client.post("/api/auth/register", json=payload)
        assert registered.status_code == 201, registered.text

        login = client.post(
            "/api/auth/login", json={"email": email, "password": TEST_PASSWORD}
        )
        assert login.status_code == 200, login.text
        token = login.json()["token"]
        return {
            "user_id": registered.json()["user_id"],
            "token": token,
            "headers": auth_header(token),
        }

    return _register_and_login


@pytest.fixture
def admin(register_and_login: Callable[..., dict[str, Any]]) -> dict[str, Any]:
    return register_and_login("admin@example.com", role="admin", name="Admin")


@pytest.fixture
def user(register_and_login: Callable[..., dict[str, Any]]) -> dict[str, Any]:
    return register_and_login("alice@example.com", name="Alice")


@pytest.fixture
def other_user(register_and_login: Callable[..., dict[str, Any]]) -> dict[str, Any]:
    return register_and_login("bob@example.org", name="Bob")


@pytest.fixture
def catalog(client: TestClient, admin: dict[str, Any]) -> dict[str, Any]:
    """Seed one artist, one genre, one album and three tracks (A, B, C) through the admin API."""
    headers = admin["headers"]

    artist = client.post(
        "/api/admin/artists", json={"name": "Miles Davis"}, headers=headers
    ).json()["artist"]
    genre = client.post("/api/admin/genres", json={"name": "Jazz"}, headers=headers).json()[
        "genre"
    ]
    album_id = client.post(
        "/api/admin/albums",
        json={
            "title": "Kind of Blue",
            "artist_id": artist["artist_id"],
            "genre_id": genre["genre_id"],
            "release_year": 1959,
        },
        headers=headers,
    ).json()["album_id"]

    track_ids = []
    for title, duration in (("So What", 562), ("Freddie Freeloader", 586), ("Blue in Green", 337)):
        response = client.post(
            "/api/admin/tracks",
            json={"title": title, "duration_seconds": duration, "album_id": album_id},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        track_ids.append(response.json()["track_id"])

    return {
        "artist_id": artist["artist_id"],
        "genre_id": genre["genre_id"],
        "album_id": album_id,
        "track_ids": track_ids,
    }
