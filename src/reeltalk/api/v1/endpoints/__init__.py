# src/reeltalk/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .posts import router as posts_router
from .system import router as system_router
from .titles import router as titles_router
from .topics import router as topics_router

__all__ = [
    "auth_router",
    "titles_router",
    "topics_router",
    "posts_router",
    "system_router",
]
