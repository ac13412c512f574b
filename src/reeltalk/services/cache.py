"""Persisted TTL caches for provider responses.

Two flavors share one implementation: the metadata cache (provider detail
records) and the insight cache (generated insights). An in-process layer may
sit in front of the database; it mirrors the persisted expiry and is never
the system of record.

Caching is best effort: read failures are treated as misses and write
failures are logged and swallowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from threading import Lock
from typing import Final

from pydantic import ValidationError as PayloadValidationError
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from reeltalk.core.settings import settings
from reeltalk.db.time import Clock, as_utc, utcnow
from reeltalk.models import InsightCacheEntry, MetadataCacheEntry
from reeltalk.schemas.cache import CACHE_PAYLOAD_ADAPTER, InsightsPayload, TitleDetailsPayload

logger = logging.getLogger(__name__)

CacheEntryModel = type[MetadataCacheEntry] | type[InsightCacheEntry]
Payload = TitleDetailsPayload | InsightsPayload
CacheKey = tuple[str, int, str]


class MemoryCache:
    """Process-local map of decoded payloads with absolute expiry times."""

    def __init__(self) -> None:
        self._entries: dict[CacheKey, tuple[datetime, Payload]] = {}
        self._lock = Lock()

    def get(self, key: CacheKey, now: datetime) -> Payload | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, payload = entry
            if expires_at <= now:
                self._entries.pop(key, None)
                return None
            return payload

    def set(self, key: CacheKey, payload: Payload, expires_at: datetime) -> None:
        with self._lock:
            self._entries[key] = (expires_at, payload)

    def discard(self, key: CacheKey) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


_MEMORY_CACHE: Final[MemoryCache] = MemoryCache()


def clear_memory_cache() -> None:
    """Drop every in-process cache entry."""
    _MEMORY_CACHE.clear()


class CacheStore:
    """Cache-first storage for one payload flavor."""

    def __init__(
        self,
        db: Session,
        model: CacheEntryModel,
        payload_type: type[Payload],
        default_ttl: timedelta,
        *,
        now: Clock = utcnow,
        memory: MemoryCache | None = None,
    ) -> None:
        self.db = db
        self.model = model
        self.payload_type = payload_type
        self.default_ttl = default_ttl
        self._now = now
        self._memory = memory

    def _key(self, subject_id: int, kind: str) -> CacheKey:
        return (self.model.__tablename__, subject_id, kind)

    def get(self, subject_id: int, kind: str) -> Payload | None:
        """Return the cached payload if present and unexpired, else None."""
        now = self._now()
        key = self._key(subject_id, kind)
        if self._memory is not None:
            payload = self._memory.get(key, now)
            if payload is not None:
                logger.debug("[cache hit:memory] %s %s/%s", key[0], kind, subject_id)
                return payload

        try:
            entry = self.db.execute(
                select(self.model).where(
                    self.model.subject_id == subject_id,
                    self.model.media_kind == kind,
                )
            ).scalars().first()
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning("Cache read failed for %s %s/%s", key[0], kind, subject_id, exc_info=True)
            return None

        if entry is None:
            logger.debug("[cache miss] %s %s/%s", key[0], kind, subject_id)
            return None
        expires_at = as_utc(entry.expires_at)
        if expires_at <= now:
            logger.debug("[cache expired] %s %s/%s", key[0], kind, subject_id)
            return None

        payload = self._decode(entry.payload)
        if payload is None:
            logger.warning("Discarding undecodable cache entry %s %s/%s", key[0], kind, subject_id)
            return None

        logger.debug("[cache hit] %s %s/%s", key[0], kind, subject_id)
        if self._memory is not None:
            self._memory.set(key, payload, expires_at)
        return payload

    def put(
        self,
        subject_id: int,
        kind: str,
        payload: Payload,
        ttl: timedelta | None = None,
    ) -> None:
        """Upsert a payload, expiring `ttl` (or the flavor default) from now."""
        key = self._key(subject_id, kind)
        expires_at = self._now() + (ttl if ttl is not None else self.default_ttl)
        blob = payload.model_dump_json()

        try:
            self._upsert(subject_id, kind, blob, expires_at)
        except SQLAlchemyError:
            self.db.rollback()
            if self._memory is not None:
                self._memory.discard(key)
            logger.exception("Cache write failed for %s %s/%s", key[0], kind, subject_id)
            return

        logger.debug("[cached] %s %s/%s until %s", key[0], kind, subject_id, expires_at)
        if self._memory is not None:
            self._memory.set(key, payload, expires_at)

    def _upsert(self, subject_id: int, kind: str, blob: str, expires_at: datetime) -> None:
        entry = self.db.execute(
            select(self.model).where(
                self.model.subject_id == subject_id,
                self.model.media_kind == kind,
            )
        ).scalars().first()
        if entry is not None:
            entry.payload = blob
            entry.expires_at = expires_at
            self.db.commit()
            return

        self.db.add(
            self.model(
                subject_id=subject_id,
                media_kind=kind,
                payload=blob,
                created_at=self._now(),
                expires_at=expires_at,
            )
        )
        try:
            self.db.commit()
        except IntegrityError:
            # Another writer inserted the same key first; overwrite its row.
            self.db.rollback()
            self.db.execute(
                update(self.model)
                .where(self.model.subject_id == subject_id, self.model.media_kind == kind)
                .values(payload=blob, expires_at=expires_at)
            )
            self.db.commit()

    def _decode(self, blob: str) -> Payload | None:
        try:
            payload = CACHE_PAYLOAD_ADAPTER.validate_json(blob)
        except PayloadValidationError:
            return None
        if not isinstance(payload, self.payload_type):
            return None
        return payload


def _memory_layer() -> MemoryCache | None:
    return _MEMORY_CACHE if settings.memory_cache_enabled else None


def metadata_cache(db: Session, *, now: Clock = utcnow) -> CacheStore:
    """Cache for metadata provider detail records."""
    return CacheStore(
        db,
        MetadataCacheEntry,
        TitleDetailsPayload,
        settings.metadata_cache_ttl,
        now=now,
        memory=_memory_layer(),
    )


def insight_cache(db: Session, *, now: Clock = utcnow) -> CacheStore:
    """Cache for generated insights."""
    return CacheStore(
        db,
        InsightCacheEntry,
        InsightsPayload,
        settings.insight_cache_ttl,
        now=now,
        memory=_memory_layer(),
    )
