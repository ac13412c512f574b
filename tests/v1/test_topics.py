# tests/v1/test_topics.py
"""Tests for topic and reply endpoints."""

from fastapi import status


def _create_topic(client, headers, prompt: str = "Was the top still spinning?") -> dict:
    response = client.post(
        "/api/v1/titles/movie/27205/topics",
        json={"title": "Inception", "prompt": prompt},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def _reply(client, headers, topic_id: int, body: str, parent_post_id: int | None = None) -> dict:
    response = client.post(
        f"/api/v1/topics/{topic_id}/posts",
        json={"body": body, "parent_post_id": parent_post_id},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def test_create_topic_requires_auth(client) -> None:
    response = client.post(
        "/api/v1/titles/movie/27205/topics",
        json={"title": "Inception", "prompt": "Was the top still spinning?"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_create_and_list_topics(client, auth_token, test_user) -> None:
    topic = _create_topic(client, auth_token)
    assert topic["created_by"] == test_user.id
    assert topic["media_kind"] == "movie"

    response = client.get("/api/v1/titles/movie/27205/topics")
    assert response.status_code == status.HTTP_200_OK
    assert [t["id"] for t in response.json()] == [topic["id"]]
    assert client.get("/api/v1/titles/tv/27205/topics").json() == []


def test_create_topic_short_prompt(client, auth_token) -> None:
    response = client.post(
        "/api/v1/titles/movie/27205/topics",
        json={"title": "Inception", "prompt": "Why"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_get_topic(client, auth_token) -> None:
    topic = _create_topic(client, auth_token)
    response = client.get(f"/api/v1/topics/{topic['id']}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["prompt"] == "Was the top still spinning?"


def test_get_missing_topic(client) -> None:
    response = client.get("/api/v1/topics/999")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Topic not found"


def test_reply_to_nested_post_is_reattached(client, auth_token, other_auth_token) -> None:
    topic = _create_topic(client, auth_token)
    root = _reply(client, auth_token, topic["id"], "It fell.")["post"]
    nested = _reply(client, other_auth_token, topic["id"], "It wobbled.", root["id"])
    assert nested["post"]["depth"] == 1
    assert nested["notice"] is None

    deep = _reply(client, auth_token, topic["id"], "Watch again.", nested["post"]["id"])
    assert deep["post"]["depth"] == 1
    assert deep["post"]["parent_post_id"] == root["id"]
    assert deep["reattached_to_post_id"] == root["id"]
    assert "Alice's thread" in deep["notice"]


def test_reply_with_unknown_parent(client, auth_token) -> None:
    topic = _create_topic(client, auth_token)
    response = client.post(
        f"/api/v1/topics/{topic['id']}/posts",
        json={"body": "Orphan", "parent_post_id": 12345},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_list_posts_marks_callers_votes(client, auth_token, other_auth_token) -> None:
    topic = _create_topic(client, auth_token)
    first = _reply(client, auth_token, topic["id"], "First")["post"]
    second = _reply(client, other_auth_token, topic["id"], "Second")["post"]
    client.post(f"/api/v1/posts/{second['id']}/vote", headers=auth_token)

    mine = client.get(f"/api/v1/topics/{topic['id']}/posts", headers=auth_token).json()
    assert [(p["id"], p["voted"], p["vote_count"]) for p in mine] == [
        (first["id"], False, 0),
        (second["id"], True, 1),
    ]
    assert [p["author_name"] for p in mine] == ["Alice", "Bob"]

    anonymous = client.get(f"/api/v1/topics/{topic['id']}/posts").json()
    assert [p["voted"] for p in anonymous] == [False, False]
    assert anonymous[1]["vote_count"] == 1
