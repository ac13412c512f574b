"""Reply placement policy for discussion threads.

Threads show at most two levels: top-level replies (depth 0) and replies to
them (depth 1). A reply aimed at a depth-1 post is reattached to that post's
depth-0 ancestor and becomes a sibling of the post it answered.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from reeltalk.core.errors import NotFoundError
from reeltalk.models.post import MAX_REPLY_DEPTH, Post

PostLookup = Callable[[int], Post | None]


@dataclass(frozen=True)
class ReplyPlacement:
    """Where a new reply is stored.

    Attributes:
        parent_post_id: Effective parent, or None for a top-level reply.
        depth: Stored depth of the new reply.
        thread_owner: The depth-0 post the reply was reattached to when
            flattening happened; None when the requested parent was used.
    """

    parent_post_id: int | None
    depth: int
    thread_owner: Post | None = None

    @property
    def reattached(self) -> bool:
        return self.thread_owner is not None


def place_reply(parent: Post | None, lookup: PostLookup) -> ReplyPlacement:
    """Compute the effective parent and depth for a reply to `parent`.

    Args:
        parent: The post the client replied to, already resolved, or None.
        lookup: Resolves a post id to a post; used to climb to the
            depth-0 ancestor.

    Raises:
        NotFoundError: If an ancestor referenced by the parent chain is missing.
    """
    if parent is None:
        return ReplyPlacement(parent_post_id=None, depth=0)

    anchor = parent
    while anchor.depth >= MAX_REPLY_DEPTH:
        if anchor.parent_post_id is None:
            raise NotFoundError(f"Post {anchor.id} has depth {anchor.depth} but no parent")
        ancestor = lookup(anchor.parent_post_id)
        if ancestor is None:
            raise NotFoundError(f"Parent post {anchor.parent_post_id} not found")
        anchor = ancestor

    owner = anchor if anchor is not parent else None
    return ReplyPlacement(parent_post_id=anchor.id, depth=anchor.depth + 1, thread_owner=owner)


def reattachment_notice(owner_name: str) -> str:
    """Message shown when a reply is moved up to the thread owner's post."""
    return (
        "Replies are limited to two levels, so your reply was added to "
        f"{owner_name}'s thread."
    )
