"""Per-user quota on insight generations.

The window is rolling: it restarts once `quota_window` has elapsed since the
stored window start, not at a calendar boundary. Storage trouble never blocks
a user; checks fail open.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from reeltalk.core.settings import settings
from reeltalk.db.time import Clock, as_utc, utcnow
from reeltalk.models import InsightQuota

logger = logging.getLogger(__name__)


class QuotaStore:
    """Counter-based limiter backed by the `insight_quota` table."""

    def __init__(
        self,
        db: Session,
        *,
        daily_limit: int | None = None,
        window: timedelta | None = None,
        now: Clock = utcnow,
    ) -> None:
        self.db = db
        self.daily_limit = daily_limit if daily_limit is not None else settings.insight_daily_limit
        self.window = window if window is not None else settings.quota_window
        self._now = now

    def check_quota(self, user_id: str) -> bool:
        """Return True if the user may trigger another generation."""
        try:
            quota = self.db.get(InsightQuota, user_id)
            now = self._now()
            if quota is None:
                self.db.add(
                    InsightQuota(
                        user_id=user_id,
                        count_today=0,
                        window_start=now,
                        daily_limit=self.daily_limit,
                    )
                )
                self.db.commit()
                return True

            if now - as_utc(quota.window_start) >= self.window:
                quota.count_today = 0
                quota.window_start = now
                self.db.commit()
                return True

            return quota.count_today < quota.daily_limit
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning("Quota check failed for %s; allowing", user_id, exc_info=True)
            return True

    def increment_quota(self, user_id: str) -> None:
        """Charge one generation to the user.

        Call only after a generation succeeded.
        """
        try:
            result = self.db.execute(
                update(InsightQuota)
                .where(InsightQuota.user_id == user_id)
                .values(count_today=InsightQuota.count_today + 1)
            )
            if result.rowcount == 0:
                self.db.add(
                    InsightQuota(
                        user_id=user_id,
                        count_today=1,
                        window_start=self._now(),
                        daily_limit=self.daily_limit,
                    )
                )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to increment insight quota for %s", user_id)

    def remaining(self, user_id: str) -> int:
        """Return how many generations the user has left in the current window."""
        try:
            quota = self.db.get(InsightQuota, user_id)
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning("Quota lookup failed for %s", user_id, exc_info=True)
            return self.daily_limit
        if quota is None or self._now() - as_utc(quota.window_start) >= self.window:
            return self.daily_limit
        return max(0, quota.daily_limit - quota.count_today)
