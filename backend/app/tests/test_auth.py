"""
Tests for authentication endpoints.
"""
from datetime import timedelta

from app.core.security import create_access_token, create_refresh_token, decode_token, REFRESH_TOKEN_TYPE


def register(client, **overrides):
    payload = {
        "username": "testuser",
        "email": "Test@Example.com",
        "password": "testpassword123",
        "first_name": "Test",
        "last_name": "User",
    }
    payload.update(overrides)
    return client.post("/api/auth/register", json=payload)


def test_register(client):
    """Test user registration."""
    response = register(client)
    assert response.status_code == 201
    body = response.json()
    assert body["user"]["username"] == "testuser"
    assert body["user"]["email"] == "test@example.com"
    assert body["token_type"] == "bearer"
    assert "access_token" in body and "refresh_token" in body


def test_register_duplicate_username(client):
    register(client)
    response = register(client, email="other@example.com")
    assert response.status_code == 409
    assert response.json()["detail"] == "Username already exists"


def test_register_duplicate_email(client):
    register(client)
    response = register(client, username="otheruser", email="TEST@example.com")
    assert response.status_code == 409


def test_register_short_password(client):
    response = register(client, password="12345")
    assert response.status_code == 422


def test_login_with_username_and_email(client):
    """Test user login."""
    register(client)
    for identifier in ("testuser", "TEST@example.com"):
        response = client.post(
            "/api/auth/login",
            json={"identifier": identifier, "password": "testpassword123"}
        )
        assert response.status_code == 200
        assert "access_token" in response.json()
        assert response.json()["user"]["last_login"] is not None


def test_login_invalid_credentials(client):
    """Test login with invalid credentials."""
    register(client)
    response = client.post(
        "/api/auth/login",
        json={"identifier": "testuser", "password": "wrongpassword"}
    )
    assert response.status_code == 401

    response = client.post(
        "/api/auth/login",
        json={"identifier": "nonexistent", "password": "wrongpassword"}
    )
    assert response.status_code == 401


def test_login_inactive_account(client, make_user):
    user = make_user(username="leaving")
    client.delete("/api/users/profile", headers=user["headers"])
    response = client.post(
        "/api/auth/login",
        json={"identifier": "leaving", "password": "secret123"}
    )
    assert response.status_code == 403


def test_me_requires_token(client, make_user):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401

    user = make_user()
    response = client.get("/api/auth/me", headers=user["headers"])
    assert response.status_code == 200
    assert response.json()["id"] == user["id"]


def test_refresh_token(client, make_user):
    user = make_user()
    response = client.post("/api/auth/refresh", json={"refresh_token": user["refresh_token"]})
    assert response.status_code == 200
    assert decode_token(response.json()["access_token"]) == user["id"]


def test_refresh_rejects_access_token(client, make_user):
    user = make_user()
    access = create_access_token(user["id"])
    response = client.post("/api/auth/refresh", json={"refresh_token": access})
    assert response.status_code == 401


def test_token_types_are_not_interchangeable():
    refresh = create_refresh_token(7)
    assert decode_token(refresh) is None
    assert decode_token(refresh, expected_type=REFRESH_TOKEN_TYPE) == 7


def test_expired_token_is_rejected(client, make_user):
    user = make_user()
    expired = create_access_token(user["id"], expires_delta=timedelta(seconds=-1))
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401


def test_logout(client, auth_headers):
    response = client.post("/api/auth/logout", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"
