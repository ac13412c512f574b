# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from reeltalk.api.v1.dependencies import get_insight_provider_dep, get_tmdb_client_dep
from reeltalk.core.security import create_access_token
from reeltalk.db.session import Base
from reeltalk.db.session import get_db as app_get_session
from reeltalk.main import app as fastapi_app
from reeltalk.models import Post, Topic, User
from reeltalk.services.cache import clear_memory_cache
from reeltalk.services.sessions import SessionService
from reeltalk.services.threads import ThreadService
from reeltalk.services.tmdb import TMDBClient

TEST_DB_URL = "sqlite://"
TMDB_TEST_BASE_URL = "https://tmdb.test"

INCEPTION_DETAILS: dict[str, Any] = {
    "id": 27205,
    "title": "Inception",
    "overview": "A thief who steals corporate secrets through dream-sharing technology.",
    "poster_path": "/inception.jpg",
    "backdrop_path": "/inception-bg.jpg",
    "release_date": "2010-07-15",
    "budget": 160_000_000,
    "revenue": 836_800_000,
    "credits": {
        "cast": [
            {"id": 6193, "name": "Leonardo DiCaprio", "character": "Cobb", "profile_path": "/leo.jpg"},
            {"id": 24045, "name": "Joseph Gordon-Levitt", "character": "Arthur", "profile_path": None},
        ],
        "crew": [
            {"id": 525, "name": "Christopher Nolan", "job": "Director"},
            {"id": 556, "name": "Emma Thomas", "job": "Producer"},
        ],
    },
}

INSIGHTS_JSON = (
    '{"insights": ['
    '{"type": "dialogue", "title": "You mustn\'t be afraid to dream", "description": "On ambition."},'
    '{"type": "metaphor", "title": "The spinning top", "description": "Doubt about reality."},'
    '{"type": "easter-egg", "title": "Non, je ne regrette rien", "description": "The kick song."},'
    '{"type": "metaphor", "title": "The maze", "description": "Architecture of the mind."}'
    "]}"
)


class FakeClock:
    """Controllable clock for time-dependent services."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 3, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current = self.current + timedelta(**kwargs)


class FakeInsightProvider:
    """Records prompts and answers with a canned response."""

    def __init__(self, response: str | None = INSIGHTS_JSON) -> None:
        self.response = response
        self.error: Exception | None = None
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str | None:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


class TMDBRoutes:
    """Path-to-response table served through an httpx mock transport."""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, payload: Any, status_code: int = 200) -> None:
        self.routes[path] = (status_code, payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status_code, payload = self.routes.get(request.url.path, (404, {"status_message": "missing"}))
        return httpx.Response(status_code, json=payload)

    def count(self, path: str) -> int:
        return sum(1 for request in self.requests if request.url.path == path)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Services commit, so every test starts from empty tables.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(autouse=True)
def reset_memory_cache() -> Iterator[None]:
    clear_memory_cache()
    yield
    clear_memory_cache()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def insights_json() -> str:
    return INSIGHTS_JSON


@pytest.fixture()
def fake_provider() -> FakeInsightProvider:
    return FakeInsightProvider()


@pytest.fixture()
def tmdb_routes() -> TMDBRoutes:
    routes = TMDBRoutes()
    routes.add("/movie/27205", INCEPTION_DETAILS)
    routes.add(
        "/person/6193/combined_credits",
        {
            "cast": [
                {"title": "Killers of the Flower Moon", "release_date": "2025-10-20"},
                {"title": "Titanic", "release_date": "1997-12-19"},
            ]
        },
    )
    routes.add("/person/24045/combined_credits", {"cast": []})
    return routes


@pytest.fixture()
def tmdb_client(tmdb_routes: TMDBRoutes) -> TMDBClient:
    return TMDBClient(
        api_key="test-key",
        base_url=TMDB_TEST_BASE_URL,
        transport=httpx.MockTransport(tmdb_routes.handler),
    )


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def provider_overrides(
    app: FastAPI,
    tmdb_client: TMDBClient,
    fake_provider: FakeInsightProvider,
) -> Iterator[None]:
    """Route the API's provider dependencies to the test doubles."""
    overrides: dict[Callable[..., Any], Callable[[], Any]] = {
        get_tmdb_client_dep: lambda: tmdb_client,
        get_insight_provider_dep: lambda: fake_provider,
    }
    for dependency, override in overrides.items():
        app.dependency_overrides[dependency] = override

    try:
        yield
    finally:
        for dependency in list(overrides):
            app.dependency_overrides.pop(dependency, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create and return a persisted test user."""
    return SessionService(db_session).get_or_create_user("alice@example.com", "Alice")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create and return a second persisted user."""
    return SessionService(db_session).get_or_create_user("bob@example.com", "Bob")


def _auth_headers(db_session: Session, user: User) -> dict[str, str]:
    session = SessionService(db_session).create_session(user.id)
    return {"Authorization": f"Bearer {create_access_token(session.id)}"}


@pytest.fixture()
def auth_token(db_session: Session, test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return _auth_headers(db_session, test_user)


@pytest.fixture()
def other_auth_token(db_session: Session, other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return _auth_headers(db_session, other_user)


@pytest.fixture()
def threads(db_session: Session, clock: FakeClock) -> ThreadService:
    return ThreadService(db_session, now=clock)


@pytest.fixture()
def topic(threads: ThreadService, test_user: User) -> Topic:
    """Create a baseline topic on Inception."""
    return threads.create_topic(
        27205, "movie", "Inception", "Was the top still spinning?", test_user.id
    )


@pytest.fixture()
def root_post(threads: ThreadService, topic: Topic, test_user: User, clock: FakeClock) -> Post:
    """Create a depth-0 post in the baseline topic."""
    clock.advance(minutes=1)
    return threads.create_post(topic.id, test_user.id, "It fell, the ring says so.").post
