"""HTTP client for the TMDB metadata provider."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from reeltalk.core.errors import UpstreamError
from reeltalk.core.settings import settings

logger = logging.getLogger(__name__)

PLACEHOLDER_IMAGE_URL = (
    "https://images.unsplash.com/photo-1626814026160-2237a95fc5a0"
    "?q=80&w=1000&auto=format&fit=crop"
)


def image_url(path: str | None, size: str = "w500") -> str:
    """Return a full image URL for a provider image path."""
    if not path:
        return PLACEHOLDER_IMAGE_URL
    return f"{settings.tmdb_image_base_url}/{size}{path}"


class TMDBClient:
    """Async wrapper around the TMDB v3 REST API.

    Every failure (transport error, timeout, non-2xx status, unreadable
    body) is raised as UpstreamError. Nothing is retried.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.tmdb_api_key
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.tmdb_base_url,
            timeout=timeout if timeout is not None else settings.provider_timeout_seconds,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        if not self.api_key:
            raise UpstreamError("TMDB_API_KEY is not configured")
        query = {**(params or {}), "api_key": self.api_key}
        try:
            response = await self._client.get(path, params=query)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as exc:
            logger.warning("TMDB request to %s timed out", path)
            raise UpstreamError("Metadata provider timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning("TMDB request to %s failed with %s", path, exc.response.status_code)
            raise UpstreamError(
                f"Metadata provider returned {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("TMDB request to %s failed: %s", path, exc)
            raise UpstreamError("Metadata provider request failed") from exc
        except ValueError as exc:
            raise UpstreamError("Metadata provider returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise UpstreamError("Metadata provider returned an unexpected body")
        return data

    # ----- public helpers -----
    async def search_multi(self, query: str, page: int = 1) -> dict[str, Any]:
        return await self._get(
            "/search/multi",
            {"query": query, "page": page, "include_adult": "false"},
        )

    async def title_details(self, media_kind: str, subject_id: int) -> dict[str, Any]:
        return await self._get(f"/{media_kind}/{subject_id}", {"append_to_response": "credits"})

    async def person_combined_credits(self, person_id: int) -> dict[str, Any]:
        return await self._get(f"/person/{person_id}/combined_credits")


_client: TMDBClient | None = None


def get_tmdb_client() -> TMDBClient:
    """Return the shared TMDB client, creating it on first use."""
    global _client
    if _client is None:
        _client = TMDBClient()
    return _client


async def close_tmdb_client() -> None:
    global _client
    if _client is not None:
        await _client.close()
        _client = None
