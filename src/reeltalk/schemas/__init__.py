# src/reeltalk/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .cache import CACHE_PAYLOAD_ADAPTER, InsightsPayload, TitleDetailsPayload
from .insight import Insight
from .post import (
    PostCreate,
    PostCreatedResponse,
    PostResponse,
    PostUpdate,
    ThreadPostResponse,
)
from .title import InsightRequest, InsightResponse, TitleDetails, TitleSummary, TitleView
from .topic import TopicCreate, TopicResponse
from .user import PresenceResponse, UserResponse
from .vote import VoteToggleResponse

__all__ = [
    "CACHE_PAYLOAD_ADAPTER", "InsightsPayload", "TitleDetailsPayload",
    "Insight",
    "PostCreate", "PostCreatedResponse", "PostResponse", "PostUpdate", "ThreadPostResponse",
    "InsightRequest", "InsightResponse", "TitleDetails", "TitleSummary", "TitleView",
    "TopicCreate", "TopicResponse",
    "PresenceResponse", "UserResponse",
    "VoteToggleResponse",
]
