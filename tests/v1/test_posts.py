# tests/v1/test_posts.py
"""Tests for post edit, delete and vote endpoints."""

from fastapi import status


def test_toggle_vote_round_trip(client, auth_token, root_post) -> None:
    first = client.post(f"/api/v1/posts/{root_post.id}/vote", headers=auth_token)
    assert first.status_code == status.HTTP_200_OK
    assert first.json() == {"post_id": root_post.id, "voted": True, "vote_count": 1}

    second = client.post(f"/api/v1/posts/{root_post.id}/vote", headers=auth_token)
    assert second.json() == {"post_id": root_post.id, "voted": False, "vote_count": 0}


def test_vote_requires_auth(client, root_post) -> None:
    response = client.post(f"/api/v1/posts/{root_post.id}/vote")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_vote_on_missing_post(client, auth_token) -> None:
    response = client.post("/api/v1/posts/999/vote", headers=auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_edit_own_post(client, auth_token, root_post) -> None:
    response = client.patch(
        f"/api/v1/posts/{root_post.id}",
        json={"body": "Changed my mind."},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["body"] == "Changed my mind."
    assert response.json()["edited_at"] is not None


def test_edit_someone_elses_post(client, other_auth_token, root_post) -> None:
    response = client.patch(
        f"/api/v1/posts/{root_post.id}",
        json={"body": "Not mine."},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_edit_with_empty_body(client, auth_token, root_post) -> None:
    response = client.patch(
        f"/api/v1/posts/{root_post.id}",
        json={"body": ""},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_delete_post_leaves_tombstone(client, auth_token, root_post, topic) -> None:
    response = client.delete(f"/api/v1/posts/{root_post.id}", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "deleted"
    assert response.json()["body"] == "[deleted]"

    listed = client.get(f"/api/v1/topics/{topic.id}/posts").json()
    assert listed[0]["status"] == "deleted"

    again = client.delete(f"/api/v1/posts/{root_post.id}", headers=auth_token)
    assert again.status_code == status.HTTP_404_NOT_FOUND
