# tests/v1/test_titles.py
"""Tests for title search, detail and insight endpoints."""

import pytest
from fastapi import status

from reeltalk.core.errors import UpstreamError

pytestmark = pytest.mark.usefixtures("provider_overrides")


def test_search_titles(client, tmdb_routes) -> None:
    tmdb_routes.add(
        "/search/multi",
        {"results": [{"id": 27205, "media_type": "movie", "title": "Inception", "release_date": "2010-07-15"}]},
    )
    response = client.get("/api/v1/titles/search", params={"q": "inception"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()[0]["title"] == "Inception"
    assert response.json()[0]["type"] == "Movie"


def test_search_without_query_is_bad_request(client) -> None:
    response = client.get("/api/v1/titles/search")
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_get_title_view(client) -> None:
    response = client.get("/api/v1/titles/movie/27205")
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["director"]["name"] == "Christopher Nolan"
    assert body["budget"]["verdict"] == "Blockbuster"
    assert body["deep_dive"] == []


def test_get_title_unknown_media_kind(client) -> None:
    response = client.get("/api/v1/titles/book/27205")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_get_title_upstream_failure(client, tmdb_routes) -> None:
    tmdb_routes.add("/tv/1396", {}, status_code=500)
    response = client.get("/api/v1/titles/tv/1396")
    assert response.status_code == status.HTTP_502_BAD_GATEWAY


def test_generate_insights_reports_remaining_quota(client, auth_token, fake_provider) -> None:
    response = client.post(
        "/api/v1/titles/movie/27205/insights",
        json={"title": "Inception", "synopsis": "Dreams."},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert len(response.json()["insights"]) == 4
    assert response.json()["quota_remaining"] == 4

    cached = client.post(
        "/api/v1/titles/movie/27205/insights",
        json={"title": "Inception"},
        headers=auth_token,
    )
    assert cached.json()["quota_remaining"] == 4
    assert len(fake_provider.prompts) == 1


def test_generate_insights_anonymous(client) -> None:
    response = client.post("/api/v1/titles/movie/27205/insights", json={"title": "Inception"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["quota_remaining"] is None


def test_generate_insights_rate_limited(client, auth_token) -> None:
    for subject_id in range(1, 6):
        response = client.post(
            f"/api/v1/titles/movie/{subject_id}/insights",
            json={"title": f"Movie {subject_id}"},
            headers=auth_token,
        )
        assert response.status_code == status.HTTP_200_OK

    blocked = client.post(
        "/api/v1/titles/movie/6/insights",
        json={"title": "Movie 6"},
        headers=auth_token,
    )
    assert blocked.status_code == status.HTTP_429_TOO_MANY_REQUESTS


def test_generate_insights_provider_failure(client, fake_provider) -> None:
    fake_provider.error = UpstreamError("Insight generation failed")
    response = client.post("/api/v1/titles/movie/27205/insights", json={"title": "Inception"})
    assert response.status_code == status.HTTP_502_BAD_GATEWAY
    assert response.json()["detail"] == "Insight generation failed"


def test_title_view_shows_generated_insights(client) -> None:
    client.post("/api/v1/titles/movie/27205/insights", json={"title": "Inception"})
    response = client.get("/api/v1/titles/movie/27205")
    assert len(response.json()["deep_dive"]) == 4
