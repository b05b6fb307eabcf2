"""Root conftest — shared test configuration and database fixtures.

Invariants:
    - Tests never use a real signing secret or a real database
    - Every test gets a fresh in-memory SQLite database (StaticPool: one connection,
      so every session sees the same tables)
"""

import os

from tests.fakes import TEST_SECRET, FAST_HASH_ROUNDS, FakeClock

os.environ.setdefault("JWT_SECRET", TEST_SECRET)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.config import AuthConfig  # noqa: E402
from app.core.tokens import TokenService  # noqa: E402
from app.db.base import Base  # noqa: E402
import app.models  # noqa: E402,F401


@pytest.fixture
def auth_config() -> AuthConfig:
    return AuthConfig(
        jwt_secret=TEST_SECRET,
        jwt_algorithm="HS256",
        token_ttl_hours=24,
        password_hash_rounds=FAST_HASH_ROUNDS,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token_service(auth_config, clock) -> TokenService:
    return TokenService(auth_config, clock=clock)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session
