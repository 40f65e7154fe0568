import os

# Must be set before the application settings are first imported
os.environ["ENVIRONMENT"] = "testing"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import uuid
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from microfeed.config import settings
from microfeed.db.session import build_engine, get_db
from microfeed.main import app
from microfeed.models import Base
from microfeed.schemas.profile_schema import ProfileCreate
from microfeed.services.auth_service import create_access_token
from microfeed.services.enrichment_service import drain_enrichment
from microfeed.services.profile_service import ProfileService


@pytest.fixture
async def engine(tmp_path):
    """A fresh SQLite file database per test.

    A file rather than ``:memory:`` so the concurrent sessions used by
    enrichment and feed hydration all see the same data.
    """
    test_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await drain_enrichment()
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Test database session"""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to the app in-process, on the test database"""
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    directory = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(directory))
    return directory


@pytest.fixture
def make_profile(db):
    """Factory for profiles owned by fresh identities"""
    async def _make_profile(handle: str, name: str = None, is_admin: bool = False):
        profile = await ProfileService(db).create_profile(
            uuid.uuid4(),
            ProfileCreate(handle=handle, name=name or handle.title())
        )
        if is_admin:
            profile.is_admin = True
            await db.commit()
        return profile

    return _make_profile


@pytest.fixture
def auth_headers():
    def _auth_headers(identity_id: uuid.UUID) -> dict:
        return {"Authorization": f"Bearer {create_access_token(identity_id)}"}

    return _auth_headers
