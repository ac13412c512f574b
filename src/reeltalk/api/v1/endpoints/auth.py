# src/reeltalk/api/v1/endpoints/auth.py
"""Session endpoints for the signed-in user.

Logging in is handled outside this service; it issues tokens with
`reeltalk.core.security.create_access_token`.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from reeltalk.models import User
from reeltalk.schemas.user import UserResponse

from ..dependencies import CurrentUserDep, SessionServiceDep, get_session_id

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: CurrentUserDep) -> User:
    """Return the authenticated user."""
    return current_user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    current_user: CurrentUserDep,
    session_id: Annotated[str | None, Depends(get_session_id)],
    sessions: SessionServiceDep,
) -> None:
    """Revoke the session behind the caller's token."""
    if session_id is not None:
        sessions.revoke_session(session_id)
