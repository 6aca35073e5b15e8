"""Shared fixtures for API tests."""

from collections.abc import Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from marketplace.catalog.memory import reset_memory_database
from marketplace.main import app


@pytest.fixture(autouse=True)
def fresh_database() -> None:
    """Start every API test from empty in-memory tables."""
    reset_memory_database()


@pytest.fixture
def client() -> Iterator[TestClient]:
    """Create test client with the application lifespan running."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def category_id(client: TestClient) -> str:
    """ID of a stored category."""
    response = client.post("/categories", json={"name": "Kitchen"})
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
def product_payload(category_id: str) -> dict[str, Any]:
    """Valid product creation body."""
    return {
        "name": "Chef Knife",
        "description": "8 inch stainless steel chef knife",
        "category_id": category_id,
        "brand": "Edge",
        "sku": "EDGE-CK-8",
        "images": ["knife.jpg"],
    }


@pytest.fixture
def product_id(client: TestClient, product_payload: dict[str, Any]) -> str:
    """ID of a stored product."""
    response = client.post("/products", json=product_payload)
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
def seller_id() -> str:
    return "9b1f3c52-7a4e-4d0e-9a55-0c6b9f1d2e31"


@pytest.fixture
def variant_id(client: TestClient, product_id: str, seller_id: str) -> str:
    """ID of a stored variant priced 40.00 with 6 units."""
    response = client.post(
        "/products/variants",
        json={
            "product_id": product_id,
            "seller_id": seller_id,
            "price": "40.00",
            "stock": 6,
            "attributes": {"blade": "8in"},
        },
    )
    assert response.status_code == 201
    return response.json()["id"]
