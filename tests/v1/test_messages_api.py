# tests/v1/test_messages_api.py
"""Tests for message endpoints."""

from fastapi import status

from gridchat.services.grid import cell_id_for
from tests.conftest import PARTITION


def _post(client, headers, **payload):
    return client.post("/api/v1/messages", json=payload, headers=headers)


def test_post_with_coordinate(client, auth_token) -> None:
    response = _post(client, auth_token, text="hi", latitude=40.7484, longitude=-73.9857)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["cell_id"] == cell_id_for((40.7484, -73.9857))
    assert data["partition_key"].startswith(f"{data['cell_id']}_")
    assert data["author_label"] == "@alice"
    assert data["score"] == 0


def test_post_requires_location(client, auth_token) -> None:
    response = _post(client, auth_token, text="hi")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_post_blank_text(client, auth_token) -> None:
    response = _post(client, auth_token, text="   ", partition_key=PARTITION)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_post_nan_coordinate(client, auth_token) -> None:
    response = client.post(
        "/api/v1/messages",
        content='{"text": "hi", "latitude": NaN, "longitude": 0}',
        headers={**auth_token, "Content-Type": "application/json"},
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_reply_to_missing_parent(client, auth_token) -> None:
    response = _post(client, auth_token, text="reply", partition_key=PARTITION, parent_id=999)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_list_partition_top_level(client, auth_token) -> None:
    first = _post(client, auth_token, text="first", partition_key=PARTITION).json()
    second = _post(client, auth_token, text="second", partition_key=PARTITION).json()
    _post(client, auth_token, text="reply", partition_key=PARTITION, parent_id=first["id"])

    response = client.get(
        "/api/v1/messages",
        params={"partition_key": PARTITION, "sort": "newest"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert [m["id"] for m in response.json()] == [second["id"], first["id"]]

    everything = client.get(
        "/api/v1/messages",
        params={"partition_key": PARTITION, "sort": "oldest", "include_replies": True},
        headers=auth_token,
    ).json()
    assert len(everything) == 3


def test_list_malformed_partition(client, auth_token) -> None:
    response = client.get("/api/v1/messages", params={"partition_key": "nope"}, headers=auth_token)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_thread_is_nested_and_paged(client, auth_token) -> None:
    root = _post(client, auth_token, text="root", partition_key=PARTITION).json()
    replies = [
        _post(client, auth_token, text=f"r{i}", partition_key=PARTITION, parent_id=root["id"]).json()
        for i in range(3)
    ]
    _post(client, auth_token, text="deep", partition_key=PARTITION, parent_id=replies[0]["id"])

    response = client.get(
        f"/api/v1/messages/{root['id']}/thread",
        params={"sort": "oldest", "page_size": 2},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    thread = response.json()
    assert thread["root"]["id"] == root["id"]
    assert thread["reply_count"] == 4
    assert thread["hidden_reply_count"] == 1
    assert [node["message"]["id"] for node in thread["replies"]] == [
        replies[0]["id"],
        replies[1]["id"],
    ]
    assert thread["replies"][0]["children"][0]["message"]["text"] == "deep"
    assert thread["replies"][0]["children"][0]["depth"] == 2


def test_thread_for_missing_message(client, auth_token) -> None:
    response = client.get("/api/v1/messages/999/thread", headers=auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_delete_cascades(client, auth_token) -> None:
    root = _post(client, auth_token, text="root", partition_key=PARTITION).json()
    _post(client, auth_token, text="reply", partition_key=PARTITION, parent_id=root["id"])

    response = client.delete(f"/api/v1/messages/{root['id']}", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"deleted": 2}


def test_delete_by_someone_else_is_a_no_op(client, auth_token, other_auth_token) -> None:
    message = _post(client, auth_token, text="mine", partition_key=PARTITION).json()

    response = client.delete(f"/api/v1/messages/{message['id']}", headers=other_auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"deleted": 0}

    listed = client.get(
        "/api/v1/messages", params={"partition_key": PARTITION}, headers=auth_token
    ).json()
    assert [m["id"] for m in listed] == [message["id"]]


def test_post_text_over_the_length_limit(client, auth_token) -> None:
    response = _post(client, auth_token, text="x" * 501, partition_key=PARTITION)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    response = _post(client, auth_token, text="x" * 500, partition_key=PARTITION)
    assert response.status_code == status.HTTP_201_CREATED


def test_thread_hidden_counts_per_level(client, auth_token) -> None:
    root = _post(client, auth_token, text="root", partition_key=PARTITION).json()
    child = _post(
        client, auth_token, text="child", partition_key=PARTITION, parent_id=root["id"]
    ).json()
    for i in range(3):
        _post(client, auth_token, text=f"g{i}", partition_key=PARTITION, parent_id=child["id"])

    thread = client.get(
        f"/api/v1/messages/{root['id']}/thread",
        params={"sort": "oldest", "page_size": 1},
        headers=auth_token,
    ).json()
    assert thread["hidden_reply_count"] == 0
    (child_node,) = thread["replies"]
    assert child_node["hidden_reply_count"] == 2
    assert [node["message"]["text"] for node in child_node["children"]] == ["g0"]
