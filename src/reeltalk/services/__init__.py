# src/reeltalk/services/__init__.py
"""Business logic services for the Reeltalk application."""

from .cache import CacheStore, insight_cache, metadata_cache
from .gateway import TitleGateway
from .quota import QuotaStore
from .sessions import SessionService
from .threads import ThreadService

__all__ = [
    "CacheStore", "insight_cache", "metadata_cache",
    "TitleGateway",
    "QuotaStore",
    "SessionService",
    "ThreadService",
]
