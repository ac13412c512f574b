# src/reeltalk/api/v1/endpoints/posts.py
"""Post edit, delete and vote endpoints."""

from fastapi import APIRouter

from reeltalk.models import Post
from reeltalk.schemas.post import PostResponse, PostUpdate
from reeltalk.schemas.vote import VoteToggleResponse

from ..dependencies import CurrentUserDep, ThreadServiceDep

router = APIRouter(prefix="/posts", tags=["posts"])


@router.patch("/{post_id}", response_model=PostResponse)
async def edit_post(
    post_id: int,
    post_data: PostUpdate,
    current_user: CurrentUserDep,
    threads: ThreadServiceDep,
) -> Post:
    """Edit the text of one of the caller's posts."""
    return threads.edit_post(post_id, current_user.id, post_data.body)


@router.delete("/{post_id}", response_model=PostResponse)
async def delete_post(
    post_id: int,
    current_user: CurrentUserDep,
    threads: ThreadServiceDep,
) -> Post:
    """Tombstone one of the caller's posts; its replies remain visible."""
    return threads.delete_post(post_id, current_user.id)


@router.post("/{post_id}/vote", response_model=VoteToggleResponse)
async def toggle_vote(
    post_id: int,
    current_user: CurrentUserDep,
    threads: ThreadServiceDep,
) -> VoteToggleResponse:
    """Toggle the caller's vote on a post."""
    result = threads.toggle_vote(post_id, current_user.id)
    return VoteToggleResponse(post_id=post_id, voted=result.voted, vote_count=result.vote_count)
