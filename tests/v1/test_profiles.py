# tests/v1/test_profiles.py
"""Tests for profile endpoints."""

from fastapi import status

from tests.conftest import PARTITION


def test_get_me(client, auth_token, alice) -> None:
    response = client.get("/api/v1/profiles/me", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["username"] == "alice"


def test_rename_updates_messages(client, store, auth_token, alice) -> None:
    store.post("hello", PARTITION, alice.id)
    response = client.put(
        "/api/v1/profiles/me/username",
        json={"username": "alice.w"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["username"] == "alice.w"

    messages = client.get(f"/api/v1/profiles/{alice.id}/messages", headers=auth_token).json()
    assert [m["author_label"] for m in messages] == ["@alice.w"]


def test_rename_to_taken_name_conflicts(client, auth_token, bob) -> None:
    response = client.put(
        "/api/v1/profiles/me/username",
        json={"username": "BOB"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_rename_to_invalid_name(client, auth_token) -> None:
    response = client.put(
        "/api/v1/profiles/me/username",
        json={"username": "x"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_username_availability(client, auth_token, bob) -> None:
    def check(name: str) -> dict:
        return client.get(
            "/api/v1/profiles/username-availability",
            params={"username": name},
            headers=auth_token,
        ).json()

    taken = check("bob")
    assert taken["valid"] is True
    assert taken["available"] is False
    assert taken["helper_text"]
    assert check("alice")["available"] is True
    assert check("carol")["available"] is True
    assert check("no")["valid"] is False


def test_delete_account(client, store, auth_token, alice) -> None:
    store.post("one", PARTITION, alice.id)
    response = client.delete("/api/v1/profiles/me", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"deleted_messages": 1}

    response = client.get("/api/v1/profiles/me", headers=auth_token)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
