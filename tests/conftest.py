"""
Shared fixtures: an in-memory SQLite store standing in for PostgreSQL,
seeded users, and an HTTP client bound to the FastAPI app.
"""

import os
from datetime import datetime
import tempfile

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "friendship-api-test-logs"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from config.settings import settings
from src.core.database import Base, get_session
from src.core.models import Friendship, User
from src.main import app


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def users(session_factory):
    """Three active users and one soft-deleted user, keyed by name."""
    async with session_factory() as db:
        seeded = {
            "alice": User(nickname="alice"),
            "bob": User(nickname="bob", avatar="bob.png"),
            "carol": User(nickname="carol"),
            "ghost": User(nickname="ghost", is_deleted=True),
        }
        db.add_all(seeded.values())
        await db.commit()
    return {name: user.id for name, user in seeded.items()}


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_session():
        session = session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def make(user_id):
        token = jwt.encode({"sub": str(user_id)}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
        return {"Authorization": f"Bearer {token}"}
    return make


@pytest.fixture
def fetch_records(session_factory):
    """Return every friendship row as a list of (user_id, friend_user_id, status)."""
    async def fetch():
        async with session_factory() as db:
            result = await db.execute(select(Friendship))
            return [
                (row.user_id, row.friend_user_id, row.status)
                for row in result.scalars().all()
            ]
    return fetch


@pytest.fixture
def insert_record(session_factory):
    """Commit a friendship row from a separate session, like a concurrent request would."""
    async def insert(user_id, friend_user_id, status):
        async with session_factory() as db:
            db.add(Friendship(
                user_id=user_id,
                friend_user_id=friend_user_id,
                status=status,
                create_time=datetime.now(),
                update_time=datetime.now(),
            ))
            await db.commit()
    return insert
