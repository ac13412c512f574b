# tests/services/test_cache.py
"""Tests for the persisted TTL caches."""

from datetime import timedelta

import pytest
from sqlalchemy import delete, func, select
from sqlalchemy.exc import OperationalError

from reeltalk.models import InsightCacheEntry, MetadataCacheEntry
from reeltalk.schemas.cache import InsightsPayload, TitleDetailsPayload
from reeltalk.schemas.insight import Insight
from reeltalk.schemas.title import TitleDetails
from reeltalk.services.cache import CacheStore, insight_cache, metadata_cache


def _details(title: str = "Inception") -> TitleDetailsPayload:
    return TitleDetailsPayload(details=TitleDetails(id=27205, title=title, budget=160_000_000))


@pytest.fixture()
def store(db_session, clock) -> CacheStore:
    return metadata_cache(db_session, now=clock)


def test_get_returns_stored_payload(store) -> None:
    store.put(27205, "movie", _details())
    cached = store.get(27205, "movie")
    assert isinstance(cached, TitleDetailsPayload)
    assert cached.details.title == "Inception"


def test_miss_for_unknown_key_and_other_kind(store) -> None:
    store.put(27205, "movie", _details())
    assert store.get(1, "movie") is None
    assert store.get(27205, "tv") is None


def test_entry_expires_after_ttl(store, clock) -> None:
    store.put(27205, "movie", _details())
    clock.advance(days=29)
    assert store.get(27205, "movie") is not None
    clock.advance(days=1)
    assert store.get(27205, "movie") is None


def test_custom_ttl_overrides_default(store, clock) -> None:
    store.put(27205, "movie", _details(), ttl=timedelta(hours=1))
    clock.advance(minutes=59)
    assert store.get(27205, "movie") is not None
    clock.advance(minutes=1)
    assert store.get(27205, "movie") is None


def test_put_upserts_single_row(store, db_session, clock) -> None:
    store.put(27205, "movie", _details("Old"))
    clock.advance(days=10)
    store.put(27205, "movie", _details("New"))

    rows = db_session.execute(select(func.count()).select_from(MetadataCacheEntry)).scalar_one()
    assert rows == 1
    assert store.get(27205, "movie").details.title == "New"

    # The rewrite refreshed the expiry.
    clock.advance(days=25)
    assert store.get(27205, "movie") is not None


def test_undecodable_entry_reads_as_miss(store, db_session, clock) -> None:
    db_session.add(
        MetadataCacheEntry(
            subject_id=27205,
            media_kind="movie",
            payload="{not json",
            created_at=clock(),
            expires_at=clock() + timedelta(days=1),
        )
    )
    db_session.commit()
    assert store.get(27205, "movie") is None


def test_wrong_flavor_reads_as_miss(db_session, clock) -> None:
    db_session.add(
        InsightCacheEntry(
            subject_id=27205,
            media_kind="movie",
            payload=_details().model_dump_json(),
            created_at=clock(),
            expires_at=clock() + timedelta(days=1),
        )
    )
    db_session.commit()
    assert insight_cache(db_session, now=clock).get(27205, "movie") is None


def test_memory_layer_serves_after_first_read(store, db_session) -> None:
    store.put(27205, "movie", _details())
    db_session.execute(delete(MetadataCacheEntry))
    db_session.commit()
    assert store.get(27205, "movie") is not None


def test_flavors_do_not_share_entries(db_session, clock) -> None:
    insights = insight_cache(db_session, now=clock)
    insights.put(27205, "movie", InsightsPayload(insights=[Insight(id="ai-0", title="Top")]))
    assert metadata_cache(db_session, now=clock).get(27205, "movie") is None
    assert insights.get(27205, "movie").insights[0].title == "Top"


def test_write_failure_is_swallowed(store, db_session, mocker) -> None:
    mocker.patch.object(
        db_session, "commit", side_effect=OperationalError("INSERT", {}, Exception("locked"))
    )
    store.put(27205, "movie", _details())
    assert store.get(27205, "movie") is None


def test_read_failure_is_a_miss(store, db_session, mocker) -> None:
    store.put(27205, "movie", _details())
    store._memory = None
    mocker.patch.object(
        db_session, "execute", side_effect=OperationalError("SELECT", {}, Exception("gone"))
    )
    assert store.get(27205, "movie") is None
