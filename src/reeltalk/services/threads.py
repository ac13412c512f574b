"""Discussion topics, replies and votes."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from reeltalk.core.errors import (
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    ValidationError,
)
from reeltalk.core.settings import settings
from reeltalk.db.time import Clock, utcnow
from reeltalk.models import Post, PostVote, Topic
from reeltalk.models.post import DELETED_BODY_PLACEHOLDER, POST_STATUS_DELETED
from reeltalk.models.topic import MEDIA_KINDS
from reeltalk.repositories.post_repo import ThreadRepository
from reeltalk.services.flattening import place_reply, reattachment_notice

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown"


@dataclass(frozen=True)
class CreatedPost:
    """A freshly stored reply and the optional reattachment notice."""

    post: Post
    notice: str | None = None
    reattached_to_post_id: int | None = None


@dataclass(frozen=True)
class ThreadPost:
    """A post as listed in its topic."""

    post: Post
    author_name: str
    vote_count: int


@dataclass(frozen=True)
class VoteResult:
    voted: bool
    vote_count: int


class ThreadService:
    """Store for topics, posts and votes.

    Every write commits on success. A failing commit is rolled back and
    surfaces as StorageError; user content is never dropped silently.
    """

    def __init__(self, db: Session, *, now: Clock = utcnow) -> None:
        self.db = db
        self.repo = ThreadRepository(db)
        self._now = now

    # --- Topics ---------------------------------------------------------------------
    def create_topic(
        self,
        subject_id: int,
        media_kind: str,
        title: str,
        prompt: str,
        creator_id: str,
    ) -> Topic:
        """Open a discussion topic on a title.

        Raises:
            ValidationError: If the prompt length is outside the allowed range,
                the title is blank, or the media kind is unknown.
        """
        if media_kind not in MEDIA_KINDS:
            raise ValidationError(f"Unknown media kind: {media_kind}")
        if not title or not title.strip():
            raise ValidationError("Title is required")
        prompt = (prompt or "").strip()
        low, high = settings.topic_prompt_min_length, settings.topic_prompt_max_length
        if not low <= len(prompt) <= high:
            raise ValidationError(f"Prompt must be between {low} and {high} characters")

        now = self._now()
        topic = Topic(
            subject_id=subject_id,
            media_kind=media_kind,
            title=title.strip(),
            prompt=prompt,
            created_by=creator_id,
            created_at=now,
            last_activity_at=now,
        )
        self.repo.add_topic(topic)
        self._commit("create topic")
        self.db.refresh(topic)
        return topic

    def list_topics(self, subject_id: int, media_kind: str) -> list[Topic]:
        return self.repo.list_topics(subject_id, media_kind)

    def get_topic(self, topic_id: int) -> Topic:
        topic = self.repo.get_topic(topic_id)
        if topic is None:
            raise NotFoundError("Topic not found")
        return topic

    # --- Posts ----------------------------------------------------------------------
    def create_post(
        self,
        topic_id: int,
        author_id: str,
        body: str,
        parent_post_id: int | None = None,
    ) -> CreatedPost:
        """Store a reply, flattening it onto a depth-0 post when needed.

        Raises:
            NotFoundError: If the topic or the requested parent does not exist
                within the topic, or the reply would attach to a deleted post.
            ValidationError: If the trimmed body is empty or too long.
        """
        body = self._validate_body(body)
        topic = self.get_topic(topic_id)

        parent: Post | None = None
        if parent_post_id is not None:
            parent = self.repo.get_post(parent_post_id)
            if parent is None or parent.topic_id != topic.id or parent.deleted:
                raise NotFoundError("Parent post not found")

        placement = place_reply(parent, self.repo.get_post)
        if placement.thread_owner is not None and placement.thread_owner.deleted:
            raise NotFoundError("Parent post not found")

        now = self._now()
        post = Post(
            topic_id=topic.id,
            parent_post_id=placement.parent_post_id,
            author_id=author_id,
            body=body,
            depth=placement.depth,
            created_at=now,
        )
        self.repo.add_post(post)
        self.repo.touch_topic(topic.id, now)
        self._commit("create post")
        self.db.refresh(post)

        if not placement.reattached:
            return CreatedPost(post=post)

        owner = placement.thread_owner
        owner_name = self.repo.get_author_name(owner.author_id) or UNKNOWN_AUTHOR
        logger.debug(
            "Reply to post %s reattached to thread owner %s", parent_post_id, owner.id
        )
        return CreatedPost(
            post=post,
            notice=reattachment_notice(owner_name),
            reattached_to_post_id=owner.id,
        )

    def list_posts(self, topic_id: int) -> list[ThreadPost]:
        """Return every post of a topic in chronological order with vote totals."""
        self.get_topic(topic_id)
        return [
            ThreadPost(post=post, author_name=name or UNKNOWN_AUTHOR, vote_count=total)
            for post, name, total in self.repo.list_posts_with_tallies(topic_id)
        ]

    def edit_post(self, post_id: int, user_id: str, body: str) -> Post:
        """Replace the body of the caller's own post; depth and parent never change."""
        body = self._validate_body(body)
        post = self._get_live_post(post_id)
        if post.author_id != user_id:
            raise PermissionDeniedError("Only the author can edit this post")
        post.body = body
        post.edited_at = self._now()
        self._commit("edit post")
        self.db.refresh(post)
        return post

    def delete_post(self, post_id: int, user_id: str) -> Post:
        """Tombstone the caller's own post; replies stay attached to it."""
        post = self._get_live_post(post_id)
        if post.author_id != user_id:
            raise PermissionDeniedError("Only the author can delete this post")
        post.status = POST_STATUS_DELETED
        post.body = DELETED_BODY_PLACEHOLDER
        self._commit("delete post")
        self.db.refresh(post)
        return post

    # --- Votes ----------------------------------------------------------------------
    def toggle_vote(self, post_id: int, user_id: str) -> VoteResult:
        """Add the caller's vote if absent, remove it if present."""
        self._get_live_post(post_id)

        existing = self.repo.get_vote(post_id, user_id)
        if existing is not None:
            self.db.delete(existing)
            self._commit("remove vote")
            voted = False
        else:
            self.db.add(PostVote(post_id=post_id, user_id=user_id, value=1, created_at=self._now()))
            try:
                self.db.commit()
            except IntegrityError as exc:
                self.db.rollback()
                # Only a concurrent toggle that inserted the same row first counts as voted.
                if self.repo.get_vote(post_id, user_id) is None:
                    logger.exception("Failed to record vote on post %s", post_id)
                    raise StorageError("Could not record vote") from exc
                logger.info("Vote on post %s by %s already recorded", post_id, user_id)
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.exception("Failed to record vote on post %s", post_id)
                raise StorageError("Could not record vote") from exc
            voted = True

        return VoteResult(voted=voted, vote_count=self.repo.vote_total(post_id))

    def get_user_voted_set(self, user_id: str, post_ids: Iterable[int]) -> set[int]:
        return self.repo.voted_post_ids(user_id, post_ids)

    # --- Helpers --------------------------------------------------------------------
    def _get_live_post(self, post_id: int) -> Post:
        post = self.repo.get_post(post_id)
        if post is None or post.deleted:
            raise NotFoundError("Post not found")
        return post

    @staticmethod
    def _validate_body(body: str) -> str:
        """Return the trimmed body if its length is within bounds."""
        body = (body or "").strip()
        limit = settings.post_body_max_length
        if not 1 <= len(body) <= limit:
            raise ValidationError(f"Post body must be between 1 and {limit} characters")
        return body

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to %s", action)
            raise StorageError(f"Could not {action}") from exc
