"""Bearer token helpers.

Tokens are signed JWTs whose subject is a login session id; revoking the
session invalidates the token.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from reeltalk.core.settings import settings


def create_access_token(session_id: str, extra_claims: dict[str, str] | None = None) -> str:
    """Create a JWT access token bound to a session."""
    to_encode: dict[str, object] = {"sub": session_id}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_session_id(token: str) -> str | None:
    """Return the session id carried by a token, or None if it is invalid."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    subject = payload.get("sub")
    return subject if isinstance(subject, str) else None
