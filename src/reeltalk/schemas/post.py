# src/reeltalk/schemas/post.py
"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Schema for creating a new reply in a topic."""

    body: str = Field(..., description="Reply text")
    parent_post_id: int | None = Field(None, description="Post being replied to")


class PostUpdate(BaseModel):
    """Schema for editing the text of an existing reply."""

    body: str = Field(..., description="Replacement reply text")


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    topic_id: int
    parent_post_id: int | None
    author_id: str
    body: str
    depth: int
    status: str
    created_at: datetime
    edited_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class ThreadPostResponse(PostResponse):
    """Post as listed inside a topic, with author and vote tallies."""

    author_name: str
    vote_count: int
    voted: bool = False


class PostCreatedResponse(BaseModel):
    """Result of a reply creation, including any reattachment notice."""

    post: PostResponse
    notice: str | None = None
    reattached_to_post_id: int | None = None
