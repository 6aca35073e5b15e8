"""Tests for API middleware and error bodies."""

import pytest
from fastapi.testclient import TestClient

from marketplace.api.dependencies import get_catalog_service
from marketplace.api.errors import status_for
from marketplace.domain.exceptions import (
    DiscountNotBelowPriceError,
    DuplicateSkuError,
    InternalError,
    NotFoundError,
)
from marketplace.main import app


class BrokenService:
    """Service stand-in whose category listing fails unexpectedly."""

    async def list_categories(self) -> list:
        raise RuntimeError("driver exploded")


@pytest.fixture
def broken_client(client: TestClient):
    """Client whose catalog service raises a non-domain exception."""
    app.dependency_overrides[get_catalog_service] = BrokenService
    yield client
    app.dependency_overrides.pop(get_catalog_service, None)


class TestRequestContextMiddleware:
    """Tests for request ID correlation and the catch-all error body."""

    def test_generates_request_id_if_not_provided(self, client: TestClient) -> None:
        """Should generate request ID if not in request headers."""
        response = client.get("/health")
        assert response.status_code == 200
        # UUID format
        assert len(response.headers["X-Request-ID"]) == 36

    def test_uses_provided_request_id(self, client: TestClient) -> None:
        """Should use request ID from request headers."""
        response = client.get("/health", headers={"X-Request-ID": "custom-request-id-12345"})
        assert response.headers["X-Request-ID"] == "custom-request-id-12345"

    def test_request_id_in_domain_error_body(self, client: TestClient) -> None:
        """Domain error responses carry the request ID."""
        response = client.get(
            "/categories/00000000-0000-0000-0000-000000000000",
            headers={"X-Request-ID": "trace-me"},
        )
        assert response.status_code == 404
        assert response.json()["request_id"] == "trace-me"

    def test_unexpected_exception_uses_standard_body(self, broken_client: TestClient) -> None:
        """Non-domain failures become an opaque 500 in the same shape."""
        response = broken_client.get("/categories", headers={"X-Request-ID": "trace-500"})

        assert response.status_code == 500
        assert response.headers["X-Request-ID"] == "trace-500"
        assert response.json() == {
            "error_code": "INTERNAL_ERROR",
            "message": "An internal error occurred",
            "details": {},
            "request_id": "trace-500",
        }


class TestStatusMapping:
    """Tests for domain error to HTTP status mapping."""

    @pytest.mark.parametrize(
        ("exc", "expected"),
        [
            (DiscountNotBelowPriceError("10", "12"), 400),
            (NotFoundError("product", "p-1"), 404),
            (DuplicateSkuError("SKU-1"), 409),
            (InternalError("boom"), 500),
        ],
    )
    def test_status_for(self, exc, expected: int) -> None:
        """Subclasses map through their nearest registered base."""
        assert status_for(exc) == expected
