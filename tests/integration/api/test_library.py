"""Integration tests for likes, history, subscription, profile and the user dashboard."""

from typing import Any

from fastapi.testclient import TestClient


def test_like_is_idempotent(client: TestClient, user: dict[str, Any], catalog: dict[str, Any]):
    track_id = catalog["track_ids"][0]

    first = client.post("/api/user/like", json={"track_id": track_id}, headers=user["headers"])
    second = client.post("/api/user/like", json={"track_id": track_id}, headers=user["headers"])

    assert first.status_code == second.status_code == 200
    assert first.json()["message"] == "Track liked"
    assert second.json()["message"] == "Track already liked"
    assert client.get("/api/user/liked-tracks", headers=user["headers"]).json() == [track_id]


def test_like_unknown_track_is_404(client: TestClient, user: dict[str, Any]):
    response = client.post("/api/user/like", json={"track_id": 999}, headers=user["headers"])
    assert response.status_code == 404


def test_unlike(client: TestClient, user: dict[str, Any], catalog: dict[str, Any]):
    track_id = catalog["track_ids"][1]
    client.post("/api/user/like", json={"track_id": track_id}, headers=user["headers"])

    response = client.delete(f"/api/user/like/{track_id}", headers=user["headers"])

    assert response.status_code == 200
    assert client.get("/api/user/liked-tracks", headers=user["headers"]).json() == []


def test_liked_tracks_detailed(client: TestClient, user: dict[str, Any], catalog: dict[str, Any]):
    track_id = catalog["track_ids"][2]
    client.post("/api/user/like", json={"track_id": track_id}, headers=user["headers"])

    detailed = client.get("/api/user/liked-tracks-detailed", headers=user["headers"]).json()

    assert len(detailed) == 1
    assert detailed[0]["title"] == "Blue in Green"
    assert detailed[0]["artist_name"] == "Miles Davis"
    assert detailed[0]["release_year"] == 1959


def test_now_playing_null_then_latest(
    client: TestClient, user: dict[str, Any], catalog: dict[str, Any]
):
    a, b, _ = catalog["track_ids"]
    empty = client.get("/api/user/now-playing", headers=user["headers"])
    assert empty.status_code == 200
    assert empty.json() is None

    client.post("/api/user/playback", json={"track_id": a}, headers=user["headers"])
    client.post("/api/user/playback", json={"track_id": b}, headers=user["headers"])

    now = client.get("/api/user/now-playing", headers=user["headers"]).json()
    assert now["track_id"] == b
    assert now["title"] == "Freddie Freeloader"
    assert "occurred_at" in now

    history = client.get("/api/user/playback-history", headers=user["headers"]).json()
    assert [h["track_id"] for h in history] == [b, a]


def test_downloads(client: TestClient, user: dict[str, Any], catalog: dict[str, Any]):
    track_id = catalog["track_ids"][0]

    logged = client.post("/api/user/downloads", json={"track_id": track_id}, headers=user["headers"])

    assert logged.status_code == 201
    downloads = client.get("/api/user/downloads", headers=user["headers"]).json()
    assert [d["track_id"] for d in downloads] == [track_id]


def test_history_is_private(
    client: TestClient,
    user: dict[str, Any],
    other_user: dict[str, Any],
    catalog: dict[str, Any],
):
    client.post(
        "/api/user/playback", json={"track_id": catalog["track_ids"][0]}, headers=user["headers"]
    )

    assert client.get("/api/user/playback-history", headers=other_user["headers"]).json() == []


def test_subscription_default_and_update(client: TestClient, user: dict[str, Any]):
    default = client.get("/api/user/subscription", headers=user["headers"]).json()
    assert default["plan"] == "Free"

    updated = client.put(
        "/api/user/subscription", json={"plan": "Premium"}, headers=user["headers"]
    )
    assert updated.status_code == 200

    current = client.get("/api/user/subscription", headers=user["headers"]).json()
    assert current["plan"] == "Premium"
    assert current["is_active"] is True

    activity = client.get("/api/user/recent-activity", headers=user["headers"]).json()
    assert activity[0]["activity"] == "Changed subscription to Premium"


def test_register_with_plan_has_thirty_day_subscription(client: TestClient):
    client.post(
        "/api/auth/register",
        json={
            "name": "Carol",
            "email": "carol@example.net",
            "password": "s3cret-pass",
            "subscription_plan": "Student",
        },
    )
    token = client.post(
        "/api/auth/login", json={"email": "carol@example.net", "password": "s3cret-pass"}
    ).json()["token"]

    subscription = client.get(
        "/api/user/subscription", headers={"Authorization": f"Bearer {token}"}
    ).json()

    assert subscription["plan"] == "Student"
    assert subscription["end_date"] is not None


def test_profile_get_and_update(
    client: TestClient, user: dict[str, Any], other_user: dict[str, Any]
):
    profile = client.get("/api/user/profile", headers=user["headers"]).json()
    assert profile["email"] == "alice@example.com"
    assert profile["role"] == "regular_user"
    assert profile["last_login_at"] is not None

    taken = client.put(
        "/api/user/profile", json={"email": "bob@example.org"}, headers=user["headers"]
    )
    assert taken.status_code == 409

    updated = client.put("/api/user/profile", json={"name": "Alice B"}, headers=user["headers"])
    assert updated.status_code == 200
    assert client.get("/api/user/profile", headers=user["headers"]).json()["name"] == "Alice B"


def test_manual_activity(client: TestClient, user: dict[str, Any]):
    blank = client.post("/api/user/recent-activity", json={"activity": ""}, headers=user["headers"])
    assert blank.status_code == 400

    logged = client.post(
        "/api/user/recent-activity", json={"activity": "Shared a playlist"}, headers=user["headers"]
    )
    assert logged.status_code == 200

    activity = client.get("/api/user/recent-activity", headers=user["headers"]).json()
    assert activity[0]["activity"] == "Shared a playlist"


def test_user_summary(client: TestClient, user: dict[str, Any], catalog: dict[str, Any]):
    a, b, _ = catalog["track_ids"]
    client.post("/api/user/like", json={"track_id": a}, headers=user["headers"])
    client.post("/api/user/playback", json={"track_id": b}, headers=user["headers"])
    client.post("/api/user/playlists", json={"name": "One"}, headers=user["headers"])

    summary = client.get("/api/user/summary", headers=user["headers"]).json()

    assert summary == {"liked_tracks": 1, "playlists": 1, "recently_played": 1, "total_tracks": 3}
