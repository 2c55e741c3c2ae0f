import asyncio
import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///" + os.path.join(tempfile.gettempdir(), "payouts_test.db"),
)

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import NullPool

from payout_service.db.base import Base
from payout_service.db.session import AsyncSessionLocal, engine
from payout_service.main import app

if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


@pytest.fixture(scope="session", autouse=True)
def configure_db_for_tests():
    engine.pool = NullPool(engine.pool._creator)
    yield


@pytest_asyncio.fixture(scope="function", autouse=True)
async def reset_schema_between_tests() -> AsyncGenerator[None, None]:
    """Ensure test isolation by recreating the schema from model metadata."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield


@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session
        await session.rollback()


@pytest.fixture
def sample_restaurant_id() -> str:
    return "res_test_001"


@pytest.fixture
def sample_restaurant_data(sample_restaurant_id: str) -> dict:
    return {
        "id": sample_restaurant_id,
        "name": "Test Kitchen",
        "commission_type": "percentage",
        "commission_rate": "15",
        "payout_frequency": "monthly",
    }


@pytest.fixture
def period_start() -> datetime:
    return datetime(2026, 9, 1, tzinfo=timezone.utc)


@pytest.fixture
def period_end() -> datetime:
    return datetime(2026, 9, 30, 23, 59, 59, 999999, tzinfo=timezone.utc)


@pytest.fixture
def in_period(period_start: datetime) -> datetime:
    return period_start + timedelta(days=10)
