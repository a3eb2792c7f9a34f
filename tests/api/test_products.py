"""Tests for product API endpoints."""

import pytest
from httpx import AsyncClient

MISSING_ID = "00000000-0000-4000-8000-000000000000"


class TestListProducts:
    """Tests for GET /api/products."""

    @pytest.mark.asyncio
    async def test_category_sorted_by_price(self, client: AsyncClient, catalog) -> None:
        response = await client.get(
            "/api/products",
            params={"category": "cricket", "sort": "price_asc", "limit": 2, "page": 1},
        )

        assert response.status_code == 200
        data = response.json()
        assert [p["shop_price"] for p in data["products"]] == [450, 1500]
        assert data["total"] == 5
        assert data["totalPages"] == 3
        assert data["page"] == 1
        assert data["limit"] == 2

    @pytest.mark.asyncio
    async def test_default_limit(self, client: AsyncClient, catalog) -> None:
        response = await client.get("/api/products")
        data = response.json()
        assert data["limit"] == 100
        assert data["total"] == 7
        assert data["totalPages"] == 1

    @pytest.mark.asyncio
    async def test_search(self, client: AsyncClient, catalog) -> None:
        response = await client.get("/api/products", params={"search": "CARBON"})
        skus = sorted(p["sku"] for p in response.json()["products"])
        assert skus == ["KB-BAT-1", "KB-GLV-1", "YX-CARBON-88"]

    @pytest.mark.asyncio
    async def test_hidden_quotes(self, client: AsyncClient, catalog) -> None:
        hidden = await client.get("/api/products", params={"category": "football"})
        shown = await client.get(
            "/api/products", params={"category": "football", "showHiddenQuotes": "true"}
        )

        assert all(p["is_quote_hidden"] is not True for p in hidden.json()["products"])
        assert any(p["is_quote_hidden"] is True for p in shown.json()["products"])

    @pytest.mark.asyncio
    async def test_joined_names_in_response(self, client: AsyncClient, catalog) -> None:
        response = await client.get("/api/products", params={"brand": "yonex"})
        (product,) = response.json()["products"]
        assert product["brand_name"] == "Yonex"
        assert product["category_name"] == "Badminton"
        assert product["sub_category_name"] == "Racquets"

    @pytest.mark.asyncio
    async def test_bad_values_never_fail_the_listing(self, client: AsyncClient, catalog) -> None:
        response = await client.get(
            "/api/products",
            params={
                "category": "no-such-category",
                "sub_category": "abc",
                "price_min": "cheap",
                "tag": "not-an-id",
                "sort": "random",
            },
        )
        assert response.status_code == 200
        assert response.json()["total"] == 7

    @pytest.mark.asyncio
    @pytest.mark.parametrize("sub_category", ["\u00b2", "\u2460,abc", "-1"])
    async def test_stray_sub_category_tokens_are_ignored(
        self, client: AsyncClient, catalog, sub_category: str
    ) -> None:
        response = await client.get("/api/products", params={"sub_category": sub_category})
        assert response.status_code == 200
        assert response.json()["total"] == 7

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"page": "x"}])
    async def test_invalid_paging_is_400(self, client: AsyncClient, params: dict) -> None:
        response = await client.get("/api/products", params=params)
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestGetProduct:
    """Tests for GET /api/products/{slug}."""

    @pytest.mark.asyncio
    async def test_get_by_slug(self, client: AsyncClient, catalog) -> None:
        response = await client.get("/api/products/sg-test-bat")
        assert response.status_code == 200
        data = response.json()
        assert data["sku"] == "SG-BAT-1"
        assert data["brand_name"] == "SG"

    @pytest.mark.asyncio
    async def test_not_found(self, client: AsyncClient, catalog) -> None:
        response = await client.get("/api/products/sg-retired-bat")
        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "Product not found"
        assert data["error_code"] == "PRODUCT_NOT_FOUND"
        assert data["request_id"]


class TestCreateProduct:
    """Tests for POST /api/products."""

    @pytest.mark.asyncio
    async def test_create_accepts_camel_case(self, client: AsyncClient, catalog) -> None:
        response = await client.post(
            "/api/products",
            json={
                "name": "Nivia Pro Shin Guard",
                "sku": "NV-SG-1",
                "mrpPrice": 899,
                "dealerPrice": 600,
                "categoryId": catalog.categories["football"],
                "brandId": catalog.brands["nivia"],
                "isFeatured": True,
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["slug"] == "nivia-pro-shin-guard"
        assert data["shop_price"] == 899
        assert data["is_featured"] is True

        listed = await client.get("/api/products", params={"search": "NV-SG-1"})
        assert listed.json()["total"] == 1

    @pytest.mark.asyncio
    async def test_create_accepts_snake_case(self, client: AsyncClient, catalog) -> None:
        response = await client.post(
            "/api/products",
            json={"name": "Cone Set", "sku": "CONE-1", "mrp_price": 299, "dealer_price": 150},
        )
        assert response.status_code == 201
        assert response.json()["dealer_price"] == 150

    @pytest.mark.asyncio
    async def test_missing_required_fields(self, client: AsyncClient, catalog) -> None:
        response = await client.post("/api/products", json={"name": "Nameless", "sku": "X-1"})
        assert response.status_code == 400
        assert response.json()["error"] == "Name, SKU, MRP, and Dealer Price are required"

    @pytest.mark.asyncio
    async def test_duplicate_sku(self, client: AsyncClient, catalog) -> None:
        response = await client.post(
            "/api/products",
            json={"name": "Copy", "sku": "SG-BAT-1", "mrpPrice": 100, "dealerPrice": 50},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "SKU already exists"

        listed = await client.get("/api/products", params={"search": "SG-BAT-1"})
        assert listed.json()["total"] == 1


class TestUpdateAndDeleteProduct:
    """Tests for PUT/DELETE /api/products/{product_id}."""

    @pytest.mark.asyncio
    async def test_update(self, client: AsyncClient, catalog) -> None:
        product_id = catalog.products["SG-BAT-1"]
        response = await client.put(
            f"/api/products/{product_id}", json={"shopPrice": 1399, "isFeatured": False}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["shop_price"] == 1399
        assert data["is_featured"] is False
        assert data["name"] == "SG Test Bat"

    @pytest.mark.asyncio
    async def test_update_unknown(self, client: AsyncClient, catalog) -> None:
        response = await client.put(f"/api/products/{MISSING_ID}", json={"name": "Ghost"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete(self, client: AsyncClient, catalog) -> None:
        product_id = catalog.products["KB-GLV-1"]

        response = await client.delete(f"/api/products/{product_id}")
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Product deleted"}

        again = await client.delete(f"/api/products/{product_id}")
        assert again.status_code == 404


class TestBulkUpload:
    """Tests for POST /api/products/bulk."""

    @pytest.mark.asyncio
    async def test_duplicate_sku_in_batch(self, client: AsyncClient, catalog) -> None:
        response = await client.post(
            "/api/products/bulk",
            json=[
                {"name": "Bat A", "sku": "SKU1", "mrp_price": 1000, "category": "Cricket"},
                {"name": "Bat B", "sku": "SKU1", "mrp_price": 1200, "category": "Cricket"},
            ],
        )

        assert response.status_code == 200
        assert response.json() == {"created": 1, "updated": 1, "errors": []}

        listed = await client.get("/api/products", params={"search": "SKU1"})
        (product,) = listed.json()["products"]
        assert product["name"] == "Bat B"
        assert product["mrp_price"] == 1200

    @pytest.mark.asyncio
    async def test_partial_failure_persists_valid_rows(self, client: AsyncClient, catalog) -> None:
        response = await client.post(
            "/api/products/bulk",
            json=[
                {"name": "Good One", "sku": "G-1", "mrp_price": 100, "category": "Cricket"},
                {"name": "Bad Two", "sku": "B-2", "mrp_price": 100, "category": "Chess"},
                {"name": "Good Three", "sku": "G-3", "mrp_price": 100, "brand": "SG"},
            ],
        )

        data = response.json()
        assert data["created"] + data["updated"] == 2
        assert data["errors"] == ['Row 2: Category "Chess" not found']

        listed = await client.get("/api/products", params={"search": "Good"})
        assert listed.json()["total"] == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{"name": "x"}, "rows", 42])
    async def test_body_must_be_array(self, client: AsyncClient, catalog, body) -> None:
        response = await client.post("/api/products/bulk", json=body)
        assert response.status_code == 400
        assert response.json()["error"] == "Data must be an array"


class TestAdminProducts:
    """Tests for GET /api/admin/products."""

    @pytest.mark.asyncio
    async def test_includes_hidden_quotes_with_admin_page_size(
        self, client: AsyncClient, catalog
    ) -> None:
        response = await client.get("/api/admin/products", params={"category": "football"})

        data = response.json()
        assert data["limit"] == 20
        assert sorted(p["sku"] for p in data["products"]) == ["NV-FB-1", "NV-FB-2"]
