# src/reeltalk/schemas/vote.py
"""Vote-related Pydantic schemas."""

from pydantic import BaseModel, Field


class VoteToggleResponse(BaseModel):
    """Outcome of toggling the caller's vote on a post."""

    post_id: int
    voted: bool = Field(..., description="Whether the caller now has an active vote")
    vote_count: int = Field(..., description="Sum of vote values for the post")
