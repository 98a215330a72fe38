"""Test fixtures and configuration."""

import os

os.environ.setdefault("TOPICSYNC_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from topicsync.core.config import Settings
from topicsync.database.meta_repository import PostMetaRepository
from topicsync.database.repository import BaseRepository
from topicsync.models.base import Base
from topicsync.models.post import Post
from topicsync.services.hooks import HookRegistry

WEBHOOK_SECRET = "discourse-test-secret"


@pytest.fixture(scope="session")
def test_settings():
    """Override settings for testing."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        webhook_secret=WEBHOOK_SECRET,
        webhook_match_old_topics=False,
    )


@pytest_asyncio.fixture
async def db_session(test_settings):
    """Create test database session."""
    engine = create_async_engine(
        test_settings.database_url,
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    AsyncSessionLocal = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with AsyncSessionLocal() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def hooks():
    """Fresh hook registry per test."""
    return HookRegistry()


@pytest_asyncio.fixture
async def meta_repo(db_session):
    """Get post metadata repository instance."""
    return PostMetaRepository(db_session)


@pytest_asyncio.fixture
async def topic_sync_service(db_session, hooks):
    """Get topic sync service instance."""
    from topicsync.services.topic_sync_service import TopicSyncService
    return TopicSyncService(db_session, hooks=hooks)


@pytest_asyncio.fixture
async def make_post(db_session):
    """Factory creating posts, optionally with metadata."""
    repo = BaseRepository(Post, db_session)
    meta_repo = PostMetaRepository(db_session)

    async def _make_post(title="Foo", post_type="post", meta=None):
        post = await repo.create(title=title, post_type=post_type)
        for key, value in (meta or {}).items():
            await meta_repo.create(post_id=post.id, meta_key=key, meta_value=str(value))
        return post

    return _make_post

