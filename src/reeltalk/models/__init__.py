# src/reeltalk/models/__init__.py
"""SQLAlchemy models for the Reeltalk application."""

from .cache import InsightCacheEntry, InsightQuota, MetadataCacheEntry
from .post import Post
from .topic import Topic
from .user import User, UserSession
from .vote import PostVote

__all__ = [
    "InsightCacheEntry", "InsightQuota", "MetadataCacheEntry",
    "Post",
    "Topic",
    "User", "UserSession",
    "PostVote",
]
