"""Cache-first access to the metadata and text-generation providers."""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any

from pydantic import ValidationError as PayloadValidationError
from sqlalchemy.orm import Session

from reeltalk.core.errors import RateLimitError, UpstreamError, ValidationError
from reeltalk.db.time import Clock, utcnow
from reeltalk.models.topic import MEDIA_KINDS
from reeltalk.schemas.cache import InsightsPayload, TitleDetailsPayload
from reeltalk.schemas.insight import Insight
from reeltalk.schemas.title import (
    BudgetView,
    CastView,
    DirectorInfo,
    TitleDetails,
    TitleSummary,
    TitleView,
)
from reeltalk.services.cache import CacheStore, insight_cache, metadata_cache
from reeltalk.services.insights import InsightProvider, build_insight_prompt, parse_insights
from reeltalk.services.quota import QuotaStore
from reeltalk.services.tmdb import TMDBClient, image_url

logger = logging.getLogger(__name__)

SEARCH_RESULT_LIMIT = 20
TOP_CAST_COUNT = 5
RECENT_WORK_LIMIT = 3
RECENT_WORK_YEARS = 2
UNDATED_SENTINEL = date(9999, 1, 1)

# Revenue-to-budget ratio thresholds, highest first.
VERDICT_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (5.0, "Blockbuster"),
    (3.0, "Super Hit"),
    (2.0, "Hit"),
    (1.2, "Average"),
    (0.8, "Flop"),
    (0.5, "Super Flop"),
)


def determine_verdict(budget: int, revenue: int) -> str:
    """Classify box office performance from revenue relative to budget."""
    if budget <= 0:
        return "N/A"
    ratio = revenue / budget
    for threshold, verdict in VERDICT_THRESHOLDS:
        if ratio >= threshold:
            return verdict
    return "Disaster"


def format_money(amount: int) -> str:
    return f"${amount / 1_000_000:.1f}M" if amount > 0 else "N/A"


def _parse_date(value: str | None) -> date | None:
    try:
        return date.fromisoformat(value) if value else None
    except ValueError:
        return None


def _years_before(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year - years)
    except ValueError:  # Feb 29 in a non-leap target year
        return day.replace(year=day.year - years, day=28)


def select_recent_work(credits: list[dict[str, Any]], today: date) -> list[str]:
    """Pick the most recent titles from a person's combined credits.

    Items dated within the trailing two years are kept, as are undated
    (usually upcoming) items. Undated items sort as the far-future sentinel,
    so they lead the descending order.
    """
    cutoff = _years_before(today, RECENT_WORK_YEARS)
    candidates: list[tuple[date, str]] = []
    for item in credits:
        raw = item.get("release_date") or item.get("first_air_date")
        label = item.get("title") or item.get("name") or "Untitled"
        if not raw:
            candidates.append((UNDATED_SENTINEL, label))
            continue
        released = _parse_date(raw)
        if released is not None and released >= cutoff:
            candidates.append((released, label))
    candidates.sort(key=lambda pair: pair[0], reverse=True)
    return [label for _, label in candidates[:RECENT_WORK_LIMIT]]


def _media_label(media_kind: str) -> str:
    return "Movie" if media_kind == "movie" else "Show"


class TitleGateway:
    """Fetch-or-cache wrapper around TMDB and the insight provider.

    Insight requests move from uncached to generating to cached; a cached
    result is served without touching the quota.
    """

    def __init__(
        self,
        db: Session,
        *,
        tmdb: TMDBClient,
        insight_provider: InsightProvider,
        metadata_store: CacheStore | None = None,
        insight_store: CacheStore | None = None,
        quota: QuotaStore | None = None,
        now: Clock = utcnow,
    ) -> None:
        self.tmdb = tmdb
        self.insight_provider = insight_provider
        self.metadata_store = metadata_store or metadata_cache(db, now=now)
        self.insight_store = insight_store or insight_cache(db, now=now)
        self.quota = quota or QuotaStore(db, now=now)
        self._now = now

    async def search_titles(self, query: str) -> list[TitleSummary]:
        """Search movies and shows by free text."""
        query = (query or "").strip()
        if not query:
            raise ValidationError("Query parameter 'q' is required")
        data = await self.tmdb.search_multi(query)
        summaries: list[TitleSummary] = []
        for item in data.get("results") or []:
            media_type = item.get("media_type")
            if media_type not in MEDIA_KINDS:
                continue
            released = item.get("release_date") or item.get("first_air_date") or ""
            summaries.append(
                TitleSummary(
                    id=item["id"],
                    title=item.get("title") or item.get("name") or "",
                    type=_media_label(media_type),
                    year=released.split("-")[0],
                    synopsis=item.get("overview") or "",
                    poster_url=image_url(item.get("poster_path")),
                    backdrop_url=image_url(item.get("backdrop_path"), "original"),
                )
            )
            if len(summaries) >= SEARCH_RESULT_LIMIT:
                break
        return summaries

    async def fetch_title_details(self, subject_id: int, media_kind: str) -> TitleDetails:
        """Return provider details for a title, from cache when possible.

        Raises:
            UpstreamError: If the cache misses and the provider call fails.
        """
        cached = self.metadata_store.get(subject_id, media_kind)
        if isinstance(cached, TitleDetailsPayload):
            return cached.details

        data = await self.tmdb.title_details(media_kind, subject_id)
        try:
            details = TitleDetails.model_validate(data)
        except PayloadValidationError as exc:
            raise UpstreamError("Metadata provider returned an unexpected record") from exc

        self.metadata_store.put(subject_id, media_kind, TitleDetailsPayload(details=details))
        return details

    async def fetch_actor_recent_work(self, actor_id: int) -> list[str]:
        """Return up to three recent titles for an actor; [] on any failure."""
        try:
            data = await self.tmdb.person_combined_credits(actor_id)
            credits = [item for item in data.get("cast") or [] if isinstance(item, dict)]
            return select_recent_work(credits, self._now().date())
        except Exception:  # best-effort enrichment
            logger.warning("Recent work lookup failed for person %s", actor_id, exc_info=True)
            return []

    def cached_insights(self, subject_id: int, media_kind: str) -> list[Insight]:
        cached = self.insight_store.get(subject_id, media_kind)
        if isinstance(cached, InsightsPayload):
            return cached.insights
        return []

    async def generate_insights(
        self,
        subject_id: int,
        media_kind: str,
        title: str,
        synopsis: str | None = None,
        user_id: str | None = None,
    ) -> list[Insight]:
        """Return insights for a title, generating them on a cache miss.

        Only a generation is charged against the user's quota; cached reads
        are free. An empty parse result is returned as-is, neither cached
        nor charged.

        Raises:
            ValidationError: If the title is blank.
            RateLimitError: If a known user has exhausted their quota.
            UpstreamError: If the provider call fails.
        """
        if not title or not title.strip():
            raise ValidationError("Title is required")

        cached = self.insight_store.get(subject_id, media_kind)
        if isinstance(cached, InsightsPayload):
            return cached.insights

        if user_id is not None and not self.quota.check_quota(user_id):
            raise RateLimitError("Daily insight generation limit reached")

        content = await self.insight_provider.complete(build_insight_prompt(title, synopsis))
        insights = parse_insights(content)
        if not insights:
            logger.warning("No usable insights for %s/%s", media_kind, subject_id)
            return []

        self.insight_store.put(subject_id, media_kind, InsightsPayload(insights=insights))
        if user_id is not None:
            self.quota.increment_quota(user_id)
        return insights

    async def build_title_view(self, subject_id: int, media_kind: str) -> TitleView:
        """Assemble the detail page for a title.

        Only already-cached insights are included; viewing a page never
        triggers a generation.
        """
        details = await self.fetch_title_details(subject_id, media_kind)
        crew = details.credits.crew
        director = next((c for c in crew if c.job == "Director"), None) or next(
            (c for c in crew if c.job == "Executive Producer"), None
        )

        top_cast = details.credits.cast[:TOP_CAST_COUNT]
        projects = await asyncio.gather(
            *(self.fetch_actor_recent_work(actor.id) for actor in top_cast)
        )
        budget = details.budget or 0
        revenue = details.revenue or 0
        cast = [
            CastView(
                id=str(actor.id),
                name=actor.name,
                role=actor.character,
                image_url=image_url(actor.profile_path),
                current_projects=recent,
            )
            for actor, recent in zip(top_cast, projects)
        ]

        return TitleView(
            id=str(details.id),
            title=details.display_title,
            type=_media_label(media_kind),
            year=details.year,
            synopsis=details.overview or "",
            poster_url=image_url(details.poster_path),
            backdrop_url=image_url(details.backdrop_path, "original"),
            director=DirectorInfo(name=director.name if director else "Unknown"),
            cast=cast,
            budget=BudgetView(
                production=format_money(budget),
                box_office=format_money(revenue),
                verdict=determine_verdict(budget, revenue),
            ),
            deep_dive=self.cached_insights(subject_id, media_kind),
        )
