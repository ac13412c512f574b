# src/reeltalk/models/topic.py
"""SQLAlchemy model for discussion topics attached to a title."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from reeltalk.db.session import Base
from reeltalk.db.time import utcnow

MEDIA_KINDS = ("movie", "tv")


class Topic(Base):
    """A discussion thread scoped to one movie or show.

    Topics are never deleted; the only mutation is the activity bump that
    happens whenever a post is added.
    """

    __tablename__ = "discussion_topic"
    __table_args__ = (
        Index("ix_discussion_topic_subject", "subject_id", "media_kind", "last_activity_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # TMDB identifier of the movie or show under discussion.
    subject_id: Mapped[int] = mapped_column(Integer, nullable=False)
    media_kind: Mapped[str] = mapped_column(String(8), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    created_by: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("app_user.id"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    last_activity_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
