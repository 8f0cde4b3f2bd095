"""Database fixtures for infrastructure tests."""

import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from core.infrastructure.database.config import create_session_factory, init_database
from core.infrastructure.database.models import Base
from core.infrastructure.database.repositories.sqlalchemy_order_gateway import (
    SQLAlchemyOrderGateway,
)


# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    await init_database(engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def sql_gateway(test_engine) -> SQLAlchemyOrderGateway:
    return SQLAlchemyOrderGateway(create_session_factory(test_engine))
