"""
Shared fixtures: a throwaway SQLite database per test, a tmp_path blob store,
an httpx client bound to the FastAPI app, and user/board builders.
"""

import os
import tempfile

# Configure before the app modules read their settings
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="kanban-uploads-"))

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.main import app
from app.core.security import hash_password
from app.core.storage import BlobStore, get_blob_store
from app.db.base import Base
from app.db.models import User
from app.db.session import get_db


class FakeRedis:
    """Stands in for the arq pool; records enqueued jobs."""

    def __init__(self):
        self.jobs = []

    async def enqueue_job(self, name, *args, **kwargs):
        self.jobs.append((name, args, kwargs))


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def blobs(tmp_path):
    return BlobStore(str(tmp_path / "blobs"))


@pytest.fixture
async def client(session_factory, blobs):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blobs
    app.state.redis = None

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
    app.state.redis = None


@pytest.fixture
def fake_redis():
    redis = FakeRedis()
    app.state.redis = redis
    return redis


@pytest.fixture
async def user(db):
    user = User(email="owner@example.com", name="Owner", password_hash=hash_password("secret1"))
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
def register(client):
    """Register a user through the API and return (auth headers, user json)."""

    async def _register(email, name="Tester", password="secret123"):
        res = await client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "name": name},
        )
        assert res.status_code == 201, res.text
        body = res.json()
        return {"Authorization": f"Bearer {body['token']}"}, body["user"]

    return _register



@pytest.fixture
def create_board(client):
    """Create a board through the API and return its json."""

    async def _create_board(headers, title="Roadmap", **fields):
        res = await client.post("/api/boards", json={"title": title, **fields}, headers=headers)
        assert res.status_code == 201, res.text
        return res.json()["board"]

    return _create_board


@pytest.fixture
def add_member(client):
    """Add ``email`` to a board with ``role`` and return the member json."""

    async def _add_member(headers, board_id, email, role="EDITOR"):
        res = await client.post(
            f"/api/boards/{board_id}/members",
            json={"email": email, "role": role},
            headers=headers,
        )
        assert res.status_code == 201, res.text
        return res.json()["member"]

    return _add_member
