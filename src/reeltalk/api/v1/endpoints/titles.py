# src/reeltalk/api/v1/endpoints/titles.py
"""Title search, detail pages, insights and per-title topics."""

from typing import Literal

from fastapi import APIRouter, Query, status

from reeltalk.models import Topic
from reeltalk.schemas.title import InsightRequest, InsightResponse, TitleSummary, TitleView
from reeltalk.schemas.topic import TopicCreate, TopicResponse

from ..dependencies import CurrentUserDep, GatewayDep, OptionalUserDep, ThreadServiceDep

router = APIRouter(prefix="/titles", tags=["titles"])

MediaKindPath = Literal["movie", "tv"]


@router.get("/search", response_model=list[TitleSummary])
async def search_titles(
    gateway: GatewayDep,
    q: str = Query("", description="Free-text title query"),
) -> list[TitleSummary]:
    """Search movies and shows by title."""
    return await gateway.search_titles(q)


@router.get("/{media_kind}/{subject_id}", response_model=TitleView)
async def get_title(
    media_kind: MediaKindPath,
    subject_id: int,
    gateway: GatewayDep,
) -> TitleView:
    """Return the detail page for a title.

    Metadata comes from the cache when fresh. Insights are included only if
    they were generated earlier.
    """
    return await gateway.build_title_view(subject_id, media_kind)


@router.post("/{media_kind}/{subject_id}/insights", response_model=InsightResponse)
async def generate_insights(
    media_kind: MediaKindPath,
    subject_id: int,
    request: InsightRequest,
    gateway: GatewayDep,
    current_user: OptionalUserDep,
) -> InsightResponse:
    """Return insights for a title, generating them when none are cached.

    Signed-in users are charged one generation per cache miss; anonymous
    requests are not metered.
    """
    user_id = current_user.id if current_user is not None else None
    insights = await gateway.generate_insights(
        subject_id,
        media_kind,
        request.title,
        request.synopsis,
        user_id=user_id,
    )
    remaining = gateway.quota.remaining(user_id) if user_id is not None else None
    return InsightResponse(insights=insights, quota_remaining=remaining)


@router.get("/{media_kind}/{subject_id}/topics", response_model=list[TopicResponse])
async def list_topics(
    media_kind: MediaKindPath,
    subject_id: int,
    threads: ThreadServiceDep,
) -> list[Topic]:
    """List a title's topics, most recently active first."""
    return threads.list_topics(subject_id, media_kind)


@router.post(
    "/{media_kind}/{subject_id}/topics",
    response_model=TopicResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_topic(
    media_kind: MediaKindPath,
    subject_id: int,
    topic_data: TopicCreate,
    current_user: CurrentUserDep,
    threads: ThreadServiceDep,
) -> Topic:
    """Open a new discussion topic on a title."""
    return threads.create_topic(
        subject_id,
        media_kind,
        topic_data.title,
        topic_data.prompt,
        current_user.id,
    )
