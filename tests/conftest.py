"""
Pytest configuration and fixtures for My List tests
"""
import os
from datetime import datetime, timedelta
from typing import AsyncGenerator

import pytest


# Set test environment variables BEFORE any imports
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///:memory:'
os.environ['REDIS_URL'] = 'redis://localhost:6379/0'
os.environ['JWT_SECRET'] = 'test-secret-key-for-testing-only-32chars'
os.environ['DB_CREATE_TABLES'] = 'false'
os.environ['CACHE_FAIL_OPEN'] = 'true'
os.environ['CACHE_USE_KEY_INDEX'] = 'false'


TEST_USER_ID = "user_12345"
OTHER_USER_ID = "user_67890"

MOVIE_IDS = [f"movie-00{i}" for i in range(1, 7)]
TVSHOW_IDS = ["tvshow-001", "tvshow-002"]


@pytest.fixture
async def engine(tmp_path):
    """
    File-backed SQLite engine, one database per test

    A file (not :memory:) so that concurrent sessions see the same data.
    """
    from sqlalchemy.ext.asyncio import create_async_engine
    from app.database.models import Base

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'mylist.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator:
    """
    Async session on the test database

    Yields:
        AsyncSession: SQLAlchemy async session
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
async def fake_redis():
    """In-memory Redis (fakeredis) with the redis.asyncio API"""
    import fakeredis

    redis = fakeredis.FakeAsyncRedis(decode_responses=True)
    yield redis
    await redis.flushall()
    await redis.aclose()


@pytest.fixture
def cache_service(fake_redis):
    from app.cache.cache_service import CacheService

    return CacheService(client=fake_redis)


@pytest.fixture
def list_cache(cache_service):
    from app.cache.cache_service import ListCache

    return ListCache(cache_service, first_page_ttl=60, page_ttl=30, use_key_index=False)


@pytest.fixture
async def seeded_content(test_db):
    """Six movies and two TV shows"""
    from app.database.models import Movie, TVShow

    for i, content_id in enumerate(MOVIE_IDS, start=1):
        test_db.add(Movie(
            content_id=content_id,
            title=f"Movie {i}",
            description=f"Description of movie {i}",
            genres=["Action", "Drama"],
            release_date=datetime(2020, 1, i),
            director=f"Director {i}",
            actors=[f"Actor {i}A", f"Actor {i}B"],
        ))
    for i, content_id in enumerate(TVSHOW_IDS, start=1):
        test_db.add(TVShow(
            content_id=content_id,
            title=f"Show {i}",
            description=f"Description of show {i}",
            genres=["Comedy"],
            episodes=[
                {"episodeNumber": 1, "seasonNumber": 1, "releaseDate": "2021-01-01T00:00:00",
                 "director": "Ep Director", "actors": ["Lead"]},
                {"episodeNumber": 2, "seasonNumber": 1, "releaseDate": "2021-01-08T00:00:00",
                 "director": "Ep Director", "actors": ["Lead"]},
            ],
        ))
    await test_db.commit()
    return {"movies": MOVIE_IDS, "tvshows": TVSHOW_IDS}


@pytest.fixture
def make_list_items(test_db):
    """Insert membership rows with strictly increasing added_at"""
    from app.database.repositories.list_repository import MyListRepository

    async def _make(user_id, content_ids, content_type="movie"):
        repo = MyListRepository(test_db)
        base = datetime(2024, 1, 1, 12, 0, 0)
        items = []
        for i, content_id in enumerate(content_ids):
            items.append(await repo.create(
                user_id=user_id,
                content_id=content_id,
                content_type=content_type,
                added_at=base + timedelta(minutes=i),
            ))
        await test_db.commit()
        return items

    return _make


@pytest.fixture
def auth_token():
    """Valid bearer token for the test user"""
    from app.auth.dependencies import jwt_service

    return jwt_service.create_access_token(TEST_USER_ID, expires_delta=timedelta(minutes=30))


@pytest.fixture
def other_auth_token():
    from app.auth.dependencies import jwt_service

    return jwt_service.create_access_token(OTHER_USER_ID, expires_delta=timedelta(minutes=30))


@pytest.fixture
async def client(session_factory, cache_service):
    """
    Async HTTP client against the app

    Database sessions, the content session factory and the cache backend
    are replaced with the per-test SQLite database and fakeredis.
    """
    from httpx import AsyncClient, ASGITransport
    from app.main import app
    from app.api.dependencies import get_cache_service
    from app.database.connection import get_db, get_session_factory

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_cache_service] = lambda: cache_service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def authorized_client(client, auth_token):
    """Client with the test user's Authorization header"""
    from httpx import AsyncClient, ASGITransport
    from app.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {auth_token}"},
    ) as ac:
        yield ac


@pytest.fixture
async def other_client(client, other_auth_token):
    """Client authenticated as a second user"""
    from httpx import AsyncClient, ASGITransport
    from app.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {other_auth_token}"},
    ) as ac:
        yield ac
