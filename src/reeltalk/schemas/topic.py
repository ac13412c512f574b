# src/reeltalk/schemas/topic.py
"""Topic-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TopicCreate(BaseModel):
    """Schema for opening a new discussion topic on a title."""

    title: str = Field(..., description="Title of the movie or show")
    prompt: str = Field(..., description="Question that starts the discussion")


class TopicResponse(BaseModel):
    """Schema for topic information returned by the API."""

    id: int
    subject_id: int
    media_kind: str
    title: str
    prompt: str
    created_by: str
    created_at: datetime
    last_activity_at: datetime

    model_config = ConfigDict(from_attributes=True)
