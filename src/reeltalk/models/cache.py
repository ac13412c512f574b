# src/reeltalk/models/cache.py
"""Persisted response caches and the insight generation quota."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from reeltalk.db.session import Base
from reeltalk.db.time import utcnow


def _new_id() -> str:
    return str(uuid.uuid4())


class MetadataCacheEntry(Base):
    """Cached metadata provider response for one title."""

    __tablename__ = "metadata_cache"
    __table_args__ = (
        UniqueConstraint("subject_id", "media_kind", name="uq_metadata_cache_subject"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    subject_id: Mapped[int] = mapped_column(Integer, nullable=False)
    media_kind: Mapped[str] = mapped_column(String(8), nullable=False)
    # Serialized, kind-tagged JSON payload.
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class InsightCacheEntry(Base):
    """Cached AI-generated insights for one title."""

    __tablename__ = "insight_cache"
    __table_args__ = (
        UniqueConstraint("subject_id", "media_kind", name="uq_insight_cache_subject"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    subject_id: Mapped[int] = mapped_column(Integer, nullable=False)
    media_kind: Mapped[str] = mapped_column(String(8), nullable=False)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class InsightQuota(Base):
    """Per-user counter of insight generations in the current rolling window."""

    __tablename__ = "insight_quota"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("app_user.id", ondelete="CASCADE"),
        primary_key=True,
    )
    count_today: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    window_start: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    daily_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
