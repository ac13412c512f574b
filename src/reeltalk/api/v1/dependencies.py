"""Shared API dependencies for authentication and service wiring."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from reeltalk.core.security import decode_session_id
from reeltalk.db.session import get_db
from reeltalk.models import User
from reeltalk.services.gateway import TitleGateway
from reeltalk.services.insights import InsightProvider, get_insight_provider
from reeltalk.services.sessions import SessionService
from reeltalk.services.threads import ThreadService
from reeltalk.services.tmdb import TMDBClient, get_tmdb_client

# HTTP Bearer scheme; missing credentials are handled per endpoint.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def _resolve_user(credentials: HTTPAuthorizationCredentials | None, db: Session) -> User | None:
    """Return the user behind a bearer token, touching their session.

    Raises:
        HTTPException: If a token is present but invalid, revoked or orphaned.
    """
    if credentials is None:
        return None

    session_id = decode_session_id(credentials.credentials)
    if session_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )

    sessions = SessionService(db)
    session = sessions.get_active_session(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired or revoked",
        )

    user = sessions.get_user(session.user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    sessions.touch(session)
    return user


def get_current_user(credentials: CredentialsDep, db: SessionDep) -> User:
    """Get the authenticated user; the request is rejected without one."""
    user = _resolve_user(credentials, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_optional_user(credentials: CredentialsDep, db: SessionDep) -> User | None:
    """Get the authenticated user if the request carries a token."""
    return _resolve_user(credentials, db)


def get_session_id(credentials: CredentialsDep) -> str | None:
    if credentials is None:
        return None
    return decode_session_id(credentials.credentials)


def get_tmdb_client_dep() -> TMDBClient:
    """Return the shared metadata provider client."""
    return get_tmdb_client()


def get_insight_provider_dep() -> InsightProvider:
    """Return the shared text-generation provider."""
    return get_insight_provider()


def get_thread_service(db: SessionDep) -> ThreadService:
    return ThreadService(db)


def get_session_service(db: SessionDep) -> SessionService:
    return SessionService(db)


def get_title_gateway(
    db: SessionDep,
    tmdb: Annotated[TMDBClient, Depends(get_tmdb_client_dep)],
    provider: Annotated[InsightProvider, Depends(get_insight_provider_dep)],
) -> TitleGateway:
    return TitleGateway(db, tmdb=tmdb, insight_provider=provider)


CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
ThreadServiceDep = Annotated[ThreadService, Depends(get_thread_service)]
SessionServiceDep = Annotated[SessionService, Depends(get_session_service)]
GatewayDep = Annotated[TitleGateway, Depends(get_title_gateway)]
