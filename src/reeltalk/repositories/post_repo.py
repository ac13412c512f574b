"""Data access helpers for topics, posts and votes."""
from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from reeltalk.models import Post, PostVote, Topic, User

__all__ = ["ThreadRepository", "PostRow"]

PostRow = tuple[Post, str | None, int]


class ThreadRepository:
    """Thin wrapper around database access for discussion entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    # --- Topics ---------------------------------------------------------------------
    def get_topic(self, topic_id: int) -> Topic | None:
        """Return a topic by identifier."""
        return self.session.get(Topic, topic_id)

    def list_topics(self, subject_id: int, media_kind: str) -> list[Topic]:
        """Return the topics of a title, most recently active first."""
        result = self.session.execute(
            select(Topic)
            .where(Topic.subject_id == subject_id, Topic.media_kind == media_kind)
            .order_by(Topic.last_activity_at.desc(), Topic.id.desc())
        )
        return list(result.scalars())

    def add_topic(self, topic: Topic) -> Topic:
        self.session.add(topic)
        self.session.flush()
        return topic

    def touch_topic(self, topic_id: int, when: datetime) -> None:
        """Bump a topic's last activity timestamp."""
        self.session.execute(
            update(Topic).where(Topic.id == topic_id).values(last_activity_at=when)
        )

    # --- Posts ----------------------------------------------------------------------
    def get_post(self, post_id: int) -> Post | None:
        """Return a post by identifier."""
        return self.session.get(Post, post_id)

    def add_post(self, post: Post) -> Post:
        self.session.add(post)
        self.session.flush()
        return post

    def list_posts_with_tallies(self, topic_id: int) -> list[PostRow]:
        """Return every post of a topic with its author name and vote total.

        Rows are ordered chronologically; the id breaks ties between posts
        created within the same timestamp.
        """
        vote_total = func.coalesce(func.sum(PostVote.value), 0)
        result = self.session.execute(
            select(Post, User.display_name, vote_total)
            .outerjoin(User, User.id == Post.author_id)
            .outerjoin(PostVote, PostVote.post_id == Post.id)
            .where(Post.topic_id == topic_id)
            .group_by(Post.id, User.display_name)
            .order_by(Post.created_at.asc(), Post.id.asc())
        )
        return [(post, name, int(total)) for post, name, total in result.all()]

    def get_author_name(self, user_id: str) -> str | None:
        return self.session.execute(
            select(User.display_name).where(User.id == user_id)
        ).scalar_one_or_none()

    # --- Votes ----------------------------------------------------------------------
    def get_vote(self, post_id: int, user_id: str) -> PostVote | None:
        return self.session.get(PostVote, (post_id, user_id))

    def vote_total(self, post_id: int) -> int:
        """Return the sum of vote values recorded for a post."""
        total = self.session.execute(
            select(func.coalesce(func.sum(PostVote.value), 0)).where(PostVote.post_id == post_id)
        ).scalar_one()
        return int(total)

    def voted_post_ids(self, user_id: str, post_ids: Iterable[int]) -> set[int]:
        """Return the subset of `post_ids` the user currently has a vote on."""
        ids = list(post_ids)
        if not ids:
            return set()
        result = self.session.execute(
            select(PostVote.post_id).where(
                PostVote.user_id == user_id,
                PostVote.post_id.in_(ids),
            )
        )
        return set(result.scalars())
