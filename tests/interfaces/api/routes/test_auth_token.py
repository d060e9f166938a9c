"""Tests for the authentication token endpoint."""

from __future__ import annotations


def test_login_returns_bearer_token(client, make_user, password):
    user = make_user("dealer", email="dealer@example.com")

    response = client.post("/auth/token", data={"username": user.email, "password": password})

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["role"] == "dealer"
    me = client.get(
        "/notifications/me", headers={"Authorization": f"Bearer {body['access_token']}"}
    )
    assert me.status_code == 200


def test_login_rejects_wrong_password(client, make_user):
    user = make_user("dealer")

    response = client.post("/auth/token", data={"username": user.email, "password": "nope"})

    assert response.status_code == 401


def test_inactive_user_cannot_login(client, make_user, password):
    user = make_user("individual", is_active=False)

    response = client.post("/auth/token", data={"username": user.email, "password": password})

    assert response.status_code == 403


def test_garbage_token_is_unauthorized(client):
    response = client.get("/notifications/me", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 401
