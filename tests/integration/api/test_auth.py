"""Integration tests for registration, login and token handling."""

from typing import Any

from fastapi.testclient import TestClient
from jose import jwt

# Must match the password the register_and_login fixture uses.
TEST_PASSWORD = "s3cret-pass"


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_register_returns_201_with_user_id(client: TestClient) -> None:
    response = client.post(
        "/api/auth/register",
        json={"name": "Alice", "email": "alice@example.com", "password": TEST_PASSWORD},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User registered successfully"
    assert isinstance(body["user_id"], int)


def test_register_same_email_twice_is_409(client: TestClient) -> None:
    payload = {"name": "Alice", "email": "alice@example.com", "password": TEST_PASSWORD}
    assert client.post("/api/auth/register", json=payload).status_code == 201

    again = client.post("/api/auth/register", json={**payload, "email": "ALICE@example.com"})

    assert again.status_code == 409
    assert again.json() == {"message": "Email already registered", "kind": "conflict"}


def test_register_rejects_disallowed_tld(client: TestClient) -> None:
    response = client.post(
        "/api/auth/register",
        json={"name": "Alice", "email": "alice@example.io", "password": TEST_PASSWORD},
    )

    assert response.status_code == 400
    assert response.json()["kind"] == "validation"


def test_register_missing_fields_is_400(client: TestClient) -> None:
    response = client.post("/api/auth/register", json={"email": "alice@example.com"})

    assert response.status_code == 400
    assert response.json()["message"] == "Name, email and password are required"


def test_register_malformed_json_is_400(client: TestClient) -> None:
    response = client.post(
        "/api/auth/register",
        content=b"{oops",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400


# Hey future me - same message for wrong password and unknown email. Don't "fix" this.
def test_login_failures_are_indistinguishable(client: TestClient, user: dict[str, Any]) -> None:
    wrong_password = client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "nope"}
    )
    unknown = client.post(
        "/api/auth/login", json={"email": "ghost@example.com", "password": TEST_PASSWORD}
    )

    assert wrong_password.status_code == unknown.status_code == 401
    assert wrong_password.json() == unknown.json()


def test_login_returns_token_and_user(client: TestClient, user: dict[str, Any]) -> None:
    response = client.post(
        "/api/auth/login", json={"email": "Alice@Example.com", "password": TEST_PASSWORD}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["user"] == {
        "id": user["user_id"],
        "name": "Alice",
        "email": "alice@example.com",
        "role": "regular_user",
    }
    claims = jwt.get_unverified_claims(body["token"])
    assert claims["id"] == user["user_id"]
    assert claims["role"] == "regular_user"


def test_role_other_than_admin_becomes_regular_user(client: TestClient) -> None:
    client.post(
        "/api/auth/register",
        json={
            "name": "Eve",
            "email": "eve@example.com",
            "password": TEST_PASSWORD,
            "role": "superuser",
        },
    )
    login = client.post(
        "/api/auth/login", json={"email": "eve@example.com", "password": TEST_PASSWORD}
    )

    assert login.json()["user"]["role"] == "regular_user"


def test_missing_token_is_401(client: TestClient) -> None:
    response = client.get("/api/user/playlists")

    assert response.status_code == 401
    assert response.json() == {"message": "No token provided", "kind": "authentication"}


def test_bad_token_is_403(client: TestClient) -> None:
    response = client.get("/api/user/playlists", headers=auth_header("not-a-real-token"))

    assert response.status_code == 403
    assert response.json()["message"] == "Invalid or expired token"


def test_token_signed_with_other_secret_is_403(client: TestClient, user: dict[str, Any]) -> None:
    forged = jwt.encode({"id": user["user_id"], "role": "admin"}, "guess", algorithm="HS256")

    response = client.get("/api/admin/summary", headers=auth_header(forged))

    assert response.status_code == 403


def test_regular_user_cannot_reach_admin_routes(
    client: TestClient, user: dict[str, Any]
) -> None:
    response = client.get("/api/admin/summary", headers=user["headers"])

    assert response.status_code == 403
    assert response.json() == {"message": "Admins only", "kind": "authorization"}


def test_change_password_flow(client: TestClient, user: dict[str, Any]) -> None:
    wrong = client.post(
        "/api/user/change-password",
        json={"old_password": "nope", "new_password": "brand-new"},
        headers=user["headers"],
    )
    assert wrong.status_code == 401

    ok = client.post(
        "/api/user/change-password",
        json={"old_password": TEST_PASSWORD, "new_password": "brand-new"},
        headers=user["headers"],
    )
    assert ok.status_code == 200

    login = client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "brand-new"}
    )
    assert login.status_code == 200
