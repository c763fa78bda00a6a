"""Shared test fixtures"""
import os

# Symmetric signing key so tokens can be minted locally
os.environ.setdefault("JWT_SECRET", "blueprint-test-signing-key-0123456789abcdef")
os.environ.setdefault("AUTH_AUDIENCE", "blueprint-api")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from blueprint.core.config import config
from blueprint.db.database import enable_sqlite_foreign_keys
from blueprint.db.seed import seed_categories
from blueprint.dependencies.auth import get_current_user
from blueprint.dependencies.item import get_event_publisher
from blueprint.events.publisher import IEventPublisher
from blueprint.main import app
from blueprint.models import Base, User


class RecordingEventPublisher(IEventPublisher):
    """In-memory publisher that keeps every event it is given"""

    def __init__(self):
        self.events = []
        self.fail = False

    async def publish(self, event):
        if self.fail:
            raise RuntimeError("broker unavailable")
        self.events.append(event)


@pytest.fixture
def test_user():
    """Authenticated caller with an email claim"""
    return User(id="user-123", email="tester@example.com", roles=["user"])


@pytest.fixture
def recording_publisher():
    return RecordingEventPublisher()


@pytest.fixture
def client(tmp_path, monkeypatch, recording_publisher, test_user):
    """TestClient backed by a throwaway SQLite database"""
    monkeypatch.setattr(config, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'blueprint.db'}")

    app.dependency_overrides[get_event_publisher] = lambda: recording_publisher
    app.dependency_overrides[get_current_user] = lambda: test_user

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def category_id(client):
    """ID of the seeded 'General' category"""
    categories = client.get("/categories").json()
    return next(c["id"] for c in categories if c["name"] == "General")


@pytest.fixture
def item_payload(category_id):
    return {
        "name": "Potion",
        "categoryId": category_id,
        "price": 19.5,
        "releaseDate": "2024-03-15",
        "description": "Restores a small amount of HP",
    }


@pytest_asyncio.fixture
async def session(tmp_path):
    """Async session on a fresh SQLite database with seeded categories"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'repository.db'}")
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as db_session:
        await seed_categories(db_session)
        yield db_session

    await engine.dispose()
