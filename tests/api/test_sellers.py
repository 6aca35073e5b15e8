"""Tests for seller and category endpoints."""

from uuid import uuid4

from fastapi.testclient import TestClient


class TestSellerVariants:
    """Tests for GET /sellers/{id}/variants."""

    def test_lists_seller_variants(
        self, client: TestClient, product_id: str, seller_id: str, variant_id: str
    ) -> None:
        """Should list only the seller's variants."""
        client.post(
            "/products/variants",
            json={"product_id": product_id, "seller_id": str(uuid4()), "price": "12.00"},
        )

        response = client.get(f"/sellers/{seller_id}/variants")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["id"] == variant_id

    def test_price_and_stock_filters(
        self, client: TestClient, product_id: str, seller_id: str, variant_id: str
    ) -> None:
        """Should apply price range and in-stock filters."""
        client.post(
            "/products/variants",
            json={"product_id": product_id, "seller_id": seller_id, "price": "15.00", "stock": 0},
        )

        cheap = client.get(f"/sellers/{seller_id}/variants", params={"max_price": "20"}).json()
        assert cheap["total"] == 1

        stocked = client.get(f"/sellers/{seller_id}/variants", params={"in_stock": True}).json()
        assert [v["id"] for v in stocked["items"]] == [variant_id]


class TestCategories:
    """Tests for category endpoints."""

    def test_create_and_get(self, client: TestClient) -> None:
        """Should create and fetch a category."""
        response = client.post("/categories", json={"name": "Garden"})
        assert response.status_code == 201
        category_id = response.json()["id"]

        response = client.get(f"/categories/{category_id}")
        assert response.status_code == 200
        assert response.json()["name"] == "Garden"

    def test_list_active(self, client: TestClient) -> None:
        """Should list active categories by name."""
        client.post("/categories", json={"name": "Tools"})
        client.post("/categories", json={"name": "Bath"})
        client.post("/categories", json={"name": "Old", "is_active": False})

        names = [c["name"] for c in client.get("/categories").json()]
        assert names == ["Bath", "Tools"]

    def test_unknown_category(self, client: TestClient) -> None:
        """Should return 404 for an unknown category."""
        response = client.get(f"/categories/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"
