# tests/conftest.py
import os

# Must be set before shop_service is imported: settings are read once at import
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-the-shop-service-suite")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shop_service.db import models  # noqa: F401  registers tables on Base
from shop_service.db.database import Base, get_db
from shop_service.main import app
from shop_service.media import ImageKitUploader, get_media_uploader

from tests.helpers import FAKE_IMAGE_URL


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def mock_uploader():
    """Media uploader stand-in; no request ever leaves the process."""
    uploader = MagicMock(spec=ImageKitUploader)
    uploader.upload = AsyncMock(return_value=FAKE_IMAGE_URL)
    return uploader


@pytest_asyncio.fixture
async def client(session_factory, mock_uploader):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_media_uploader] = lambda: mock_uploader

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_media_uploader, None)
