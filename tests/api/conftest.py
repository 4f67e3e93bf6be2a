"""Shared fixtures for API tests."""

from collections.abc import AsyncGenerator, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shopcatalog.infrastructure.config import settings
from shopcatalog.infrastructure.database import Base, get_session
from shopcatalog.main import app

SHOP = "shop-dalat"
OTHER_SHOP = "shop-hanoi"


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create test client backed by a fresh in-memory database."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    tables_ready = False

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        nonlocal tables_ready
        if not tables_ready:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            tables_ready = True
        async with factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    with TestClient(app) as client:
        yield client
        client.portal.call(engine.dispose)
    app.dependency_overrides.clear()


@pytest.fixture
def shop_headers() -> dict[str, str]:
    """Get identity headers for the owning shop."""
    return {settings.shop_id_header: SHOP}


@pytest.fixture
def other_shop_headers() -> dict[str, str]:
    """Get identity headers for a shop that owns nothing."""
    return {settings.shop_id_header: OTHER_SHOP}


@pytest.fixture
def mushroom_payload() -> dict:
    """Get a valid create payload."""
    return {
        "product_name": "Shiitake",
        "product_price": 50000,
        "product_description": "Fresh from Dalat.\nPicked daily.",
        "product_quantity": 20,
        "product_type": "Mushroom",
        "product_attributes": {"weight": 2.5, "origin": "Dalat"},
    }
