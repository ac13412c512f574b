# src/reeltalk/schemas/user.py
"""User and presence schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    """Public view of the authenticated user."""

    id: str
    display_name: str
    created_at: datetime
    last_seen: datetime

    model_config = ConfigDict(from_attributes=True)


class PresenceResponse(BaseModel):
    active_users: int
    window_seconds: int
