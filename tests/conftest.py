"""
Pytest configuration and shared fixtures for the tracks test suite.
"""

import os

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment before importing app
os.environ["AMC_ENVIRONMENT"] = "test"
os.environ["AMC_DB_URL"] = "sqlite+aiosqlite:///:memory:"
# Disable rate limiting for tests
os.environ["AMC_RATE_LIMIT_REQUESTS"] = "999999"

from amc.db.base import Base  # noqa: E402
from amc.db.models import Track, TrackItem  # noqa: E402
from amc.models import Article, Lesson, Tool  # noqa: E402


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        os.environ["AMC_DB_URL"], echo=False, poolclass=StaticPool
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine):
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def content(db_session):
    """One article, one lesson and one tool in the content stores."""
    article = Article(
        title="Attachment Placement Basics",
        slug="attachment-placement-basics",
        category="Clinical",
        file_url="/uploads/articles/attachments.pdf",
        published=True,
    )
    lesson = Lesson(title="Case Selection", duration="18 min", module="Foundations")
    tool = Tool(
        title="Consultation Checklist",
        category="Templates",
        file_url="/uploads/tools/checklist.pdf",
    )
    db_session.add_all([article, lesson, tool])
    await db_session.commit()
    return {"article": article, "lesson": lesson, "tool": tool}


@pytest_asyncio.fixture
async def track_with_items(db_session, content):
    """A published track: article -> lesson -> tool."""
    track = Track(title="Aligner Onboarding", published=True)
    db_session.add(track)
    await db_session.flush()
    for order, (kind, row) in enumerate(
        [("article", content["article"]), ("lesson", content["lesson"]), ("tool", content["tool"])]
    ):
        db_session.add(
            TrackItem(track_id=track.id, type=kind, item_id=row.id, order=order)
        )
    await db_session.commit()
    return track


@pytest.fixture
def test_user_id():
    """Test user ID."""
    return 42


@pytest.fixture
def app():
    """Create test app instance."""
    from amc.server import create_app

    return create_app()


@pytest.fixture
def client(app):
    """Create a test client for the FastAPI app."""
    # Entering the client runs the lifespan, which builds a fresh database
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_track_data():
    """Sample track payload without content rows behind it."""
    return {
        "title": "Digital Workflow",
        "description": "From scan to first tray",
        "published": True,
        "items": [
            {"type": "article", "item_id": 1},
            {"type": "lesson", "item_id": 1},
            {"type": "tool", "item_id": 1},
        ],
    }
