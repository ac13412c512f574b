# src/reeltalk/api/v1/endpoints/topics.py
"""Topic and reply endpoints.

Clients refresh threads by polling the list endpoint; it has no side
effects beyond touching the caller's session.
"""

from fastapi import APIRouter, status

from reeltalk.models import Topic
from reeltalk.schemas.post import PostCreate, PostCreatedResponse, PostResponse, ThreadPostResponse
from reeltalk.schemas.topic import TopicResponse

from ..dependencies import CurrentUserDep, OptionalUserDep, ThreadServiceDep

router = APIRouter(prefix="/topics", tags=["topics"])


@router.get("/{topic_id}", response_model=TopicResponse)
async def get_topic(topic_id: int, threads: ThreadServiceDep) -> Topic:
    """Get a specific topic by ID."""
    return threads.get_topic(topic_id)


@router.get("/{topic_id}/posts", response_model=list[ThreadPostResponse])
async def list_posts(
    topic_id: int,
    threads: ThreadServiceDep,
    current_user: OptionalUserDep,
) -> list[ThreadPostResponse]:
    """List every post of a topic in chronological order.

    Each post carries its author name and vote total; for signed-in callers
    `voted` marks the posts they have voted on.
    """
    thread = threads.list_posts(topic_id)
    voted: set[int] = set()
    if current_user is not None:
        voted = threads.get_user_voted_set(current_user.id, [item.post.id for item in thread])

    return [
        ThreadPostResponse(
            **PostResponse.model_validate(item.post).model_dump(),
            author_name=item.author_name,
            vote_count=item.vote_count,
            voted=item.post.id in voted,
        )
        for item in thread
    ]


@router.post(
    "/{topic_id}/posts",
    response_model=PostCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_post(
    topic_id: int,
    post_data: PostCreate,
    current_user: CurrentUserDep,
    threads: ThreadServiceDep,
) -> PostCreatedResponse:
    """Reply in a topic.

    Replies aimed at a nested reply are moved up to its thread owner; the
    response then carries a notice naming that owner.
    """
    created = threads.create_post(
        topic_id,
        current_user.id,
        post_data.body,
        post_data.parent_post_id,
    )
    return PostCreatedResponse(
        post=PostResponse.model_validate(created.post),
        notice=created.notice,
        reattached_to_post_id=created.reattached_to_post_id,
    )
