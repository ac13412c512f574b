"""User accounts, login sessions and presence counting."""

from __future__ import annotations

from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from reeltalk.core.errors import NotFoundError, ValidationError
from reeltalk.core.settings import settings
from reeltalk.db.time import Clock, utcnow
from reeltalk.models import User, UserSession


class SessionService:
    """Service handling users and the sessions they authenticate with."""

    def __init__(self, db: Session, *, now: Clock = utcnow) -> None:
        self.db = db
        self._now = now

    # --- Users ----------------------------------------------------------------------
    def get_user(self, user_id: str) -> User | None:
        return self.db.get(User, user_id)

    def get_user_by_email(self, email: str) -> User | None:
        return self.db.execute(
            select(User).where(User.email == email.strip().lower())
        ).scalars().first()

    def get_or_create_user(self, email: str, display_name: str) -> User:
        """Return the account for `email`, creating it on first use."""
        if not email or "@" not in email:
            raise ValidationError("A valid email address is required")
        if not display_name or not display_name.strip():
            raise ValidationError("Display name is required")

        user = self.get_user_by_email(email)
        if user is None:
            now = self._now()
            user = User(
                email=email.strip().lower(),
                display_name=display_name.strip(),
                created_at=now,
                last_seen=now,
            )
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        return user

    # --- Sessions -------------------------------------------------------------------
    def create_session(self, user_id: str) -> UserSession:
        if self.get_user(user_id) is None:
            raise NotFoundError("User not found")
        now = self._now()
        session = UserSession(user_id=user_id, created_at=now, last_active=now)
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def get_active_session(self, session_id: str) -> UserSession | None:
        """Return the session unless it is unknown or revoked."""
        return self.db.execute(
            select(UserSession).where(
                UserSession.id == session_id,
                UserSession.revoked_at.is_(None),
            )
        ).scalars().first()

    def touch(self, session: UserSession) -> None:
        """Record activity on a session and its user."""
        now = self._now()
        session.last_active = now
        user = self.get_user(session.user_id)
        if user is not None:
            user.last_seen = now
        self.db.commit()

    def revoke_session(self, session_id: str) -> None:
        session = self.db.get(UserSession, session_id)
        if session is None or session.revoked_at is not None:
            return
        session.revoked_at = self._now()
        self.db.commit()

    def count_active_users(self, window_seconds: int | None = None) -> int:
        """Count distinct users with an unrevoked session active in the window."""
        window = window_seconds if window_seconds is not None else settings.presence_window_seconds
        cutoff = self._now() - timedelta(seconds=window)
        count = self.db.execute(
            select(func.count(func.distinct(UserSession.user_id))).where(
                UserSession.last_active > cutoff,
                UserSession.revoked_at.is_(None),
            )
        ).scalar_one()
        return int(count)
