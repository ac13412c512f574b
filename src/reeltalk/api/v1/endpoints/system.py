"""System and transparency endpoints for the Reeltalk API."""

from __future__ import annotations

from fastapi import APIRouter

from reeltalk.core.settings import settings
from reeltalk.schemas.user import PresenceResponse

from ..dependencies import SessionServiceDep

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/config")
async def get_public_config() -> dict[str, object]:
    """Return a sanitized snapshot of public runtime configuration.

    Excludes secrets and connection strings.
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
            "debug": settings.debug,
        },
        "discussion": {
            "max_reply_depth": 1,
            "topic_prompt_length": [
                settings.topic_prompt_min_length,
                settings.topic_prompt_max_length,
            ],
            "post_body_max_length": settings.post_body_max_length,
        },
        "insights": {
            "daily_limit": settings.insight_daily_limit,
            "window_hours": settings.quota_window_hours,
            "cache_ttl_days": settings.insight_cache_ttl_days,
        },
        "metadata": {
            "cache_ttl_days": settings.metadata_cache_ttl_days,
        },
    }


@router.get("/presence", response_model=PresenceResponse)
async def get_presence(sessions: SessionServiceDep) -> PresenceResponse:
    """Count users active within the presence window."""
    return PresenceResponse(
        active_users=sessions.count_active_users(),
        window_seconds=settings.presence_window_seconds,
    )
