"""Tests for catalog service product operations."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sportsmart.catalog.models import Product
from sportsmart.catalog.service import CatalogService
from sportsmart.domain.exceptions import (
    DuplicateSkuError,
    ProductNotFoundError,
    ValidationError,
)

MISSING_ID = "00000000-0000-4000-8000-000000000000"


@pytest.fixture
def new_product(catalog) -> dict:
    return {
        "name": "SS Ton Reserve Edition",
        "sku": "SS-BAT-1",
        "mrp_price": 25000,
        "dealer_price": 17500,
        "category_id": catalog.categories["cricket"],
        "sub_category_id": catalog.sub_categories["cricket/bats"],
        "images": ["https://cdn.example/ss-ton.jpg"],
    }


class TestCreateProduct:
    """Tests for CatalogService.create_product."""

    @pytest.mark.asyncio
    async def test_create_applies_defaults(self, session: AsyncSession, new_product: dict) -> None:
        service = CatalogService(session)
        product = await service.create_product(new_product)

        assert product["slug"] == "ss-ton-reserve-edition"
        assert product["shop_price"] == 25000
        assert product["counter_price"] == 0
        assert product["gst_percentage"] == 18
        assert product["unit"] == "1"
        assert product["is_active"] is True
        assert product["is_featured"] is False
        assert product["images"] == ["https://cdn.example/ss-ton.jpg"]
        assert product["videos"] == []

    @pytest.mark.asyncio
    async def test_explicit_slug_and_shop_price(self, session: AsyncSession, new_product: dict) -> None:
        service = CatalogService(session)
        product = await service.create_product(
            {**new_product, "slug": "ss-ton", "shop_price": 21999}
        )
        assert product["slug"] == "ss-ton"
        assert product["shop_price"] == 21999

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["name", "sku", "mrp_price", "dealer_price"])
    async def test_required_fields(
        self, session: AsyncSession, new_product: dict, missing: str
    ) -> None:
        service = CatalogService(session)
        with pytest.raises(ValidationError) as exc_info:
            await service.create_product({**new_product, missing: None})
        assert exc_info.value.message == "Name, SKU, MRP, and Dealer Price are required"

    @pytest.mark.asyncio
    async def test_duplicate_sku_is_rejected(self, session: AsyncSession, new_product: dict) -> None:
        service = CatalogService(session)
        with pytest.raises(DuplicateSkuError) as exc_info:
            await service.create_product({**new_product, "sku": "SG-BAT-1"})
        assert exc_info.value.message == "SKU already exists"

        count = (
            await session.execute(select(func.count()).where(Product.sku == "SG-BAT-1"))
        ).scalar_one()
        assert count == 1


class TestUpdateProduct:
    """Tests for CatalogService.update_product."""

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, session: AsyncSession, catalog) -> None:
        service = CatalogService(session)
        product_id = catalog.products["SG-BALL-1"]

        product = await service.update_product(
            product_id, {"shop_price": 499, "description": None, "variants": [{"size": "4.75oz"}]}
        )

        assert product["shop_price"] == 499
        assert product["description"] == "Leather ball for club cricket"
        assert product["name"] == "SG Club Ball"
        assert product["variants"] == [{"size": "4.75oz"}]

    @pytest.mark.asyncio
    async def test_can_deactivate(self, session: AsyncSession, catalog) -> None:
        service = CatalogService(session)
        product = await service.update_product(catalog.products["SG-BAT-1"], {"is_active": False})
        assert product["is_active"] is False

    @pytest.mark.asyncio
    async def test_sku_taken_by_other_product(self, session: AsyncSession, catalog) -> None:
        service = CatalogService(session)
        with pytest.raises(DuplicateSkuError):
            await service.update_product(catalog.products["SG-BALL-1"], {"sku": "SG-BAT-1"})

    @pytest.mark.asyncio
    async def test_same_sku_is_allowed(self, session: AsyncSession, catalog) -> None:
        service = CatalogService(session)
        product = await service.update_product(
            catalog.products["SG-BALL-1"], {"sku": "SG-BALL-1", "name": "SG Club Ball Pro"}
        )
        assert product["name"] == "SG Club Ball Pro"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("product_id", [MISSING_ID, "not-a-uuid"])
    async def test_unknown_product(self, session: AsyncSession, catalog, product_id: str) -> None:
        service = CatalogService(session)
        with pytest.raises(ProductNotFoundError):
            await service.update_product(product_id, {"name": "Ghost"})


class TestGetAndDeleteProduct:
    """Tests for get_product and delete_product."""

    @pytest.mark.asyncio
    async def test_get_product_by_slug(self, session: AsyncSession, catalog) -> None:
        service = CatalogService(session)
        product = await service.get_product("kookaburra-carbon-bat")
        assert product["sku"] == "KB-BAT-1"
        assert product["tag_name"] == "Bestseller"

    @pytest.mark.asyncio
    async def test_inactive_product_is_not_found(self, session: AsyncSession, catalog) -> None:
        service = CatalogService(session)
        with pytest.raises(ProductNotFoundError):
            await service.get_product("sg-retired-bat")

    @pytest.mark.asyncio
    async def test_delete(self, session: AsyncSession, catalog) -> None:
        service = CatalogService(session)
        product_id = catalog.products["YX-CARBON-88"]

        await service.delete_product(product_id)

        with pytest.raises(ProductNotFoundError):
            await service.delete_product(product_id)

    @pytest.mark.asyncio
    async def test_list_requires_session_factory(self, session: AsyncSession) -> None:
        with pytest.raises(RuntimeError):
            await CatalogService(session).list_products({})
