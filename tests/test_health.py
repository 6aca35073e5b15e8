"""Tests for health check endpoints."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from marketplace.main import app


@pytest.fixture
def client() -> Iterator[TestClient]:
    """Create test client."""
    with TestClient(app) as client:
        yield client


def test_health_check(client: TestClient) -> None:
    """Test health endpoint returns healthy status."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "marketplace-catalog"
    assert "version" in data


def test_readiness_check(client: TestClient) -> None:
    """Test readiness endpoint reports the cache state."""
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready", "cache": "ok"}
