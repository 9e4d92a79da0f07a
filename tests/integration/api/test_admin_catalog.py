"""Integration tests for admin catalog management and the admin dashboard."""

from typing import Any

from fastapi.testclient import TestClient


def test_create_artist_returns_artist(client: TestClient, admin: dict[str, Any]) -> None:
    response = client.post(
        "/api/admin/artists",
        json={"name": "Nina Simone", "biography": "High Priestess of Soul"},
        headers=admin["headers"],
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Artist added"
    assert body["artist"]["name"] == "Nina Simone"
    assert body["artist"]["biography"] == "High Priestess of Soul"


def test_duplicate_artist_is_409(client: TestClient, admin: dict[str, Any]) -> None:
    client.post("/api/admin/artists", json={"name": "Nina Simone"}, headers=admin["headers"])

    again = client.post(
        "/api/admin/artists", json={"name": "Nina Simone"}, headers=admin["headers"]
    )

    assert again.status_code == 409


def test_artist_name_required(client: TestClient, admin: dict[str, Any]) -> None:
    response = client.post("/api/admin/artists", json={}, headers=admin["headers"])

    assert response.status_code == 400
    assert response.json()["message"] == "Artist name is required"


def test_negative_duration_is_400(
    client: TestClient, admin: dict[str, Any], catalog: dict[str, Any]
) -> None:
    response = client.post(
        "/api/admin/tracks",
        json={"title": "Backwards", "duration_seconds": -1, "album_id": catalog["album_id"]},
        headers=admin["headers"],
    )

    assert response.status_code == 400


def test_album_title_unique_per_artist(
    client: TestClient, admin: dict[str, Any], catalog: dict[str, Any]
) -> None:
    response = client.post(
        "/api/admin/albums",
        json={
            "title": "kind of blue",
            "artist_id": catalog["artist_id"],
            "genre_id": catalog["genre_id"],
        },
        headers=admin["headers"],
    )

    assert response.status_code == 409


def test_track_on_missing_album_is_404(client: TestClient, admin: dict[str, Any]) -> None:
    response = client.post(
        "/api/admin/tracks",
        json={"title": "Nowhere", "duration_seconds": 10, "album_id": 999},
        headers=admin["headers"],
    )

    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"


def test_update_track_is_full_replacement(
    client: TestClient, admin: dict[str, Any], catalog: dict[str, Any]
) -> None:
    track_id = catalog["track_ids"][0]

    response = client.put(
        f"/api/admin/tracks/{track_id}",
        json={
            "title": "So What (Take 2)",
            "duration_seconds": 600,
            "album_id": catalog["album_id"],
        },
        headers=admin["headers"],
    )

    assert response.status_code == 200
    tracks = {t["track_id"]: t for t in client.get("/api/user/tracks").json()}
    assert tracks[track_id]["title"] == "So What (Take 2)"
    assert tracks[track_id]["duration_seconds"] == 600
    assert tracks[track_id]["file_path"] is None


def test_update_missing_album_is_404(
    client: TestClient, admin: dict[str, Any], catalog: dict[str, Any]
) -> None:
    response = client.put(
        "/api/admin/albums/999",
        json={"title": "X", "artist_id": catalog["artist_id"], "genre_id": catalog["genre_id"]},
        headers=admin["headers"],
    )

    assert response.status_code == 404


# Hey future me - this is THE cascade test. After deleting the artist, nothing that pointed at
# their tracks may survive anywhere, and the user-facing listings must come back empty.
def test_delete_artist_cascades_through_everything(
    client: TestClient,
    admin: dict[str, Any],
    user: dict[str, Any],
    catalog: dict[str, Any],
) -> None:
    headers = user["headers"]
    a, b, c = catalog["track_ids"]
    client.post("/api/user/like", json={"track_id": a}, headers=headers)
    client.post("/api/user/playback", json={"track_id": b}, headers=headers)
    client.post("/api/user/downloads", json={"track_id": c}, headers=headers)
    playlist_id = client.post(
        "/api/user/playlists", json={"name": "Mine", "track_ids": [a, b, c]}, headers=headers
    ).json()["playlist_id"]

    response = client.delete(f"/api/admin/artists/{catalog['artist_id']}", headers=admin["headers"])

    assert response.status_code == 200
    assert response.json()["message"] == 'Artist "Miles Davis" and all related data deleted'
    assert client.get("/api/user/artists").json() == []
    assert client.get("/api/user/albums").json() == []
    assert client.get("/api/user/tracks").json() == []
    assert client.get("/api/user/liked-tracks", headers=headers).json() == []
    assert client.get("/api/user/playback-history", headers=headers).json() == []
    assert client.get("/api/user/downloads", headers=headers).json() == []
    assert client.get(f"/api/user/playlists/{playlist_id}/tracks", headers=headers).json() == []

    summary = client.get("/api/admin/summary", headers=admin["headers"]).json()
    assert summary["artists"] == summary["albums"] == summary["tracks"] == 0


def test_delete_track_message(
    client: TestClient, admin: dict[str, Any], catalog: dict[str, Any]
) -> None:
    response = client.delete(
        f"/api/admin/tracks/{catalog['track_ids'][2]}", headers=admin["headers"]
    )

    assert response.status_code == 200
    assert response.json()["message"] == 'Track "Blue in Green" deleted successfully'
    assert len(client.get("/api/user/tracks").json()) == 2


def test_delete_genre_in_use_is_409(
    client: TestClient, admin: dict[str, Any], catalog: dict[str, Any]
) -> None:
    response = client.delete(f"/api/admin/genres/{catalog['genre_id']}", headers=admin["headers"])

    assert response.status_code == 409


def test_admin_summary_counts(
    client: TestClient, admin: dict[str, Any], user: dict[str, Any], catalog: dict[str, Any]
) -> None:
    response = client.get("/api/admin/summary", headers=admin["headers"])

    assert response.status_code == 200
    assert response.json() == {
        "users": 2,
        "artists": 1,
        "albums": 1,
        "tracks": 3,
        "playlists": 0,
    }


def test_admin_recent_activity_feed(
    client: TestClient, admin: dict[str, Any], catalog: dict[str, Any]
) -> None:
    response = client.get("/api/admin/recent-activity", headers=admin["headers"])

    assert response.status_code == 200
    feed = response.json()
    assert len(feed) == 5
    activities = {item["activity"] for item in feed}
    assert "Added Artist: Miles Davis" in activities
    assert "Added Album: Kind of Blue" in activities
    assert "Added Track: So What" in activities
    assert all(item["timestamp"].endswith(" UTC") for item in feed)
