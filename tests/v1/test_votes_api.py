# tests/v1/test_votes_api.py
"""Tests for reaction endpoints."""

import pytest
from fastapi import status

from gridchat.api.v1.dependencies import get_store
from gridchat.services.discussion import DiscussionStore
from tests.conftest import PARTITION


@pytest.fixture()
def message(store, bob):
    return store.post("vote on me", PARTITION, bob.id)


def test_upvote_then_switch(client, auth_token, message) -> None:
    url = f"/api/v1/messages/{message.id}/vote"
    response = client.put(url, json={"value": 1}, headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["upvote_count"] == 1
    assert response.json()["viewer_vote"] == 1

    data = client.put(url, json={"value": -1}, headers=auth_token).json()
    assert (data["upvote_count"], data["downvote_count"], data["score"]) == (0, 1, -1)

    data = client.put(url, json={"value": None}, headers=auth_token).json()
    assert data["viewer_vote"] is None
    assert data["score"] == 0


def test_toggle_clears_repeated_vote(client, auth_token, message) -> None:
    url = f"/api/v1/messages/{message.id}/vote"
    client.put(url, json={"value": 1, "toggle": True}, headers=auth_token)
    data = client.put(url, json={"value": 1, "toggle": True}, headers=auth_token).json()
    assert data["viewer_vote"] is None
    assert data["upvote_count"] == 0


def test_vote_invalid_value(client, auth_token, message) -> None:
    response = client.put(
        f"/api/v1/messages/{message.id}/vote", json={"value": 2}, headers=auth_token
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_vote_missing_message(client, auth_token) -> None:
    response = client.put("/api/v1/messages/999/vote", json={"value": 1}, headers=auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_like_on_vote_store_conflicts(client, auth_token, message) -> None:
    response = client.post(f"/api/v1/messages/{message.id}/like", headers=auth_token)
    assert response.status_code == status.HTTP_409_CONFLICT


def test_like_store(app, client, session_factory, clock, auth_token, message) -> None:
    app.dependency_overrides[get_store] = lambda: DiscussionStore(
        session_factory, reaction_model="like", clock=clock
    )
    url = f"/api/v1/messages/{message.id}/like"
    client.post(url, headers=auth_token)
    response = client.post(url, headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["like_count"] == 1
    assert data["viewer_has_liked"] is True
    assert data["score"] == 1

    response = client.put(
        f"/api/v1/messages/{message.id}/vote", json={"value": 1}, headers=auth_token
    )
    assert response.status_code == status.HTTP_409_CONFLICT
