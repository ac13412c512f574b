# src/reeltalk/schemas/insight.py
"""Insight schemas."""

from typing import Literal

from pydantic import BaseModel

InsightType = Literal["dialogue", "metaphor", "easter-egg"]
INSIGHT_TYPES: tuple[str, ...] = ("dialogue", "metaphor", "easter-egg")


class Insight(BaseModel):
    """A short AI-generated observation about a title."""

    id: str
    type: InsightType = "metaphor"
    title: str = "Insight"
    description: str = ""
