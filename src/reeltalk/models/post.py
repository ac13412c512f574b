# src/reeltalk/models/post.py
"""SQLAlchemy models for discussion posts."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from reeltalk.db.session import Base
from reeltalk.db.time import utcnow

POST_STATUS_ACTIVE = "active"
POST_STATUS_DELETED = "deleted"

DELETED_BODY_PLACEHOLDER = "[deleted]"

MAX_REPLY_DEPTH = 1


class Post(Base):
    """A single reply inside a topic.

    Top-level replies have depth 0 and no parent. Nested replies have
    depth 1 and point at a depth-0 post of the same topic.
    """

    __tablename__ = "discussion_post"
    __table_args__ = (
        CheckConstraint("depth >= 0 AND depth <= 1", name="ck_discussion_post_depth"),
        Index("ix_discussion_post_topic_created", "topic_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    topic_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("discussion_topic.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Top-level replies have parent_post_id = NULL.
    parent_post_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("discussion_post.id"),
        nullable=True,
    )
    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("app_user.id"),
        nullable=False,
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)
    depth: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Tombstoned posts keep their row so replies stay attached.
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=POST_STATUS_ACTIVE)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    edited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def deleted(self) -> bool:
        """Return True when the post has been tombstoned."""
        return self.status == POST_STATUS_DELETED
