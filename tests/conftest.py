import asyncio
import os

import pytest

# Keep the app's own engine off PostgreSQL during tests
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENV_MODE", "development")

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from pizzabox.client import BrowserLocation, LocalStorage
from pizzabox.database import Base, get_db
from pizzabox.main import app
from pizzabox.models import RestaurantSettings
from pizzabox.services.fallback import reset_masked_failures


class UnreachableDatabase:
    """Session stand-in whose every query fails like a dropped connection."""

    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT settings", {}, ConnectionRefusedError("connection refused"))

    async def close(self):
        pass


@pytest.fixture(autouse=True)
def _reset_counters():
    reset_masked_failures()
    yield
    reset_masked_failures()


@pytest.fixture
def session_factory(tmp_path):
    """Session factory bound to a fresh SQLite database with all tables."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'pizzabox.db'}", poolclass=NullPool)

    async def create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_tables())
    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def seed_settings(session_factory):
    """Insert one settings row."""
    def _seed(**fields):
        async def _insert():
            async with session_factory() as session:
                session.add(RestaurantSettings(**fields))
                await session.commit()

        asyncio.run(_insert())

    return _seed


@pytest.fixture
def client(session_factory):
    """TestClient whose requests use the per-test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_db_client():
    """TestClient whose database reads always fail."""
    async def override_get_db():
        yield UnreachableDatabase()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(tmp_path / "local_storage.json", lock_timeout=2)


@pytest.fixture
def location() -> BrowserLocation:
    return BrowserLocation("/orders")
