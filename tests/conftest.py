"""Shared fixtures for the test suite."""

import os

# Must be set before the application settings are imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncGenerator, Callable
from decimal import Decimal
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shopcatalog.catalog.inputs import ProductCreate
from shopcatalog.catalog.repository import ProductRepository
from shopcatalog.catalog.service import CatalogService
from shopcatalog.infrastructure.database import Base

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def make_test_engine() -> AsyncEngine:
    """Create an in-memory engine whose single connection is shared."""
    return create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory database with the catalog tables."""
    engine = make_test_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Open a session on the test database."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def repository(session: AsyncSession) -> ProductRepository:
    """Create repository on the test session."""
    return ProductRepository(session)


@pytest.fixture
def service(repository: ProductRepository) -> CatalogService:
    """Create catalog service on the test repository."""
    return CatalogService(repository)


@pytest.fixture
def make_input() -> Callable[..., ProductCreate]:
    """Build valid mushroom product inputs, with overrides."""

    def _make(**overrides: Any) -> ProductCreate:
        data: dict[str, Any] = {
            "product_name": "Shiitake",
            "product_price": Decimal("50000"),
            "product_quantity": 20,
            "product_type": "Mushroom",
            "product_attributes": {"weight": 2.5, "origin": "Dalat"},
        }
        data.update(overrides)
        return ProductCreate(**data)

    return _make
