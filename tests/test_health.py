"""Tests for health check endpoints."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from shopcatalog.main import app


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create test client running the app lifespan."""
    with TestClient(app) as client:
        yield client


def test_health_check(client: TestClient) -> None:
    """Test health endpoint returns healthy status."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "shop-catalog"
    assert "version" in data


def test_readiness_check(client: TestClient) -> None:
    """Test readiness endpoint returns ready status."""
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "ready"
