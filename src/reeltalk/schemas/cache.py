# src/reeltalk/schemas/cache.py
"""Kind-tagged payloads stored in the response caches.

Cached blobs are decoded into one of these models as soon as they leave
the database, so nothing downstream handles raw JSON.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter

from .insight import Insight
from .title import TitleDetails


class TitleDetailsPayload(BaseModel):
    """Metadata cache flavor."""

    kind: Literal["title_details"] = "title_details"
    details: TitleDetails


class InsightsPayload(BaseModel):
    """Insight cache flavor."""

    kind: Literal["insights"] = "insights"
    insights: list[Insight]


CachePayload = Annotated[
    TitleDetailsPayload | InsightsPayload,
    Field(discriminator="kind"),
]

CACHE_PAYLOAD_ADAPTER: TypeAdapter[TitleDetailsPayload | InsightsPayload] = TypeAdapter(
    CachePayload
)
