# src/reeltalk/schemas/title.py
"""Schemas for metadata provider responses and the title pages built from them."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .insight import Insight

MediaKind = Literal["movie", "tv"]


class CastMember(BaseModel):
    """Actor credit as returned by the provider."""

    id: int
    name: str = ""
    character: str | None = None
    profile_path: str | None = None

    model_config = ConfigDict(extra="ignore")


class CrewMember(BaseModel):
    """Crew credit as returned by the provider."""

    id: int
    name: str = ""
    job: str = ""

    model_config = ConfigDict(extra="ignore")


class Credits(BaseModel):
    cast: list[CastMember] = Field(default_factory=list)
    crew: list[CrewMember] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class TitleDetails(BaseModel):
    """Movie or show detail record with credits appended.

    Movies carry `title`/`release_date`; shows carry `name`/`first_air_date`.
    """

    id: int
    title: str | None = None
    name: str | None = None
    overview: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    release_date: str | None = None
    first_air_date: str | None = None
    budget: int | None = None
    revenue: int | None = None
    credits: Credits = Field(default_factory=Credits)

    model_config = ConfigDict(extra="ignore")

    @property
    def display_title(self) -> str:
        return self.title or self.name or ""

    @property
    def year(self) -> str:
        return (self.release_date or self.first_air_date or "").split("-")[0]


class TitleSummary(BaseModel):
    """Search result entry."""

    id: int
    title: str
    type: Literal["Movie", "Show"]
    year: str
    synopsis: str
    poster_url: str
    backdrop_url: str


class DirectorInfo(BaseModel):
    name: str
    fee: str = "Undisclosed"


class CastView(BaseModel):
    """Cast member enriched with their most recent work."""

    id: str
    name: str
    role: str | None
    image_url: str
    fee: str = "Undisclosed"
    current_projects: list[str] = Field(default_factory=list)


class BudgetView(BaseModel):
    production: str
    box_office: str
    verdict: str


class TitleView(BaseModel):
    """Everything the detail page renders for one title."""

    id: str
    title: str
    type: Literal["Movie", "Show"]
    year: str
    synopsis: str
    poster_url: str
    backdrop_url: str
    director: DirectorInfo
    cast: list[CastView]
    budget: BudgetView
    deep_dive: list[Insight]


class InsightRequest(BaseModel):
    """Body of an insight generation request."""

    title: str = Field(..., min_length=1, max_length=500)
    synopsis: str | None = Field(None, max_length=5000)


class InsightResponse(BaseModel):
    insights: list[Insight]
    quota_remaining: int | None = None
