# tests/v1/test_auth.py
"""Tests for session endpoints."""

from fastapi import status

from reeltalk.core.security import create_access_token


def test_me_returns_current_user(client, auth_token, test_user) -> None:
    response = client.get("/api/v1/auth/me", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == test_user.id
    assert response.json()["display_name"] == "Alice"
    assert "email" not in response.json()


def test_me_without_token(client) -> None:
    response = client.get("/api/v1/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_me_with_garbage_token(client) -> None:
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_for_unknown_session(client) -> None:
    token = create_access_token("no-such-session")
    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_logout_revokes_session(client, auth_token) -> None:
    response = client.post("/api/v1/auth/logout", headers=auth_token)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    after = client.get("/api/v1/auth/me", headers=auth_token)
    assert after.status_code == status.HTTP_401_UNAUTHORIZED
