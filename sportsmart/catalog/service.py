"""Catalog service for product operations.

High-level service that combines repository operations with
business rules for listing, creating, updating and importing products.
"""

import json
from collections.abc import Mapping
from typing import Any

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sportsmart.catalog.bulk import BulkUploadPipeline, BulkUploadResult
from sportsmart.catalog.filters import ProductFilter, SortOption, build_filter_clause
from sportsmart.catalog.identifiers import IdentifierResolver, is_uuid, slugify
from sportsmart.catalog.models import Brand, Category, Product
from sportsmart.catalog.repository import CatalogPage, CatalogQueryExecutor, ProductRepository
from sportsmart.domain.exceptions import (
    DuplicateSkuError,
    ProductNotFoundError,
    ValidationError,
)

logger = structlog.get_logger()

# Fields a client may set on create/update
PRODUCT_FIELDS = (
    "name",
    "slug",
    "description",
    "short_description",
    "sku",
    "mrp_price",
    "dealer_price",
    "counter_price",
    "recommended_price",
    "shop_price",
    "category_id",
    "sub_category_id",
    "brand_id",
    "tag_id",
    "images",
    "videos",
    "variants",
    "is_featured",
    "is_active",
    "a_plus_content",
    "is_discontinued",
    "is_quote_hidden",
    "buy_url",
    "gst_percentage",
    "hsn_code",
    "unit",
)


class CatalogService:
    """Service for catalog operations.

    Example usage:
        async with async_session_factory() as session:
            service = CatalogService(session, async_session_factory)
            page = await service.list_products({"category": "cricket", "sort": "price_asc"})
    """

    def __init__(
        self,
        session: AsyncSession,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> None:
        """Initialize service.

        Args:
            session: Async SQLAlchemy session for lookups and writes.
            session_factory: Factory for the concurrent listing queries.
                Only needed for ``list_products``.
        """
        self.session = session
        self.session_factory = session_factory
        self.repository = ProductRepository(session)
        self.resolver = IdentifierResolver(session)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def list_products(
        self,
        params: Mapping[str, str],
        page: int = 1,
        limit: int = 100,
        show_hidden_quotes: bool | None = None,
    ) -> CatalogPage:
        """List products matching storefront query parameters.

        Args:
            params: Raw query parameters (category, brand, price_min, ...).
            page: Page number (1-indexed).
            limit: Page size.
            show_hidden_quotes: Override the ``showHiddenQuotes`` parameter.

        Returns:
            One page of products.
        """
        if self.session_factory is None:
            raise RuntimeError("CatalogService.list_products needs a session factory")

        category_ids = await self.resolver.resolve(Category, params.get("category"))
        brand_ids = await self.resolver.resolve(Brand, params.get("brand"))

        filters = ProductFilter.from_query(params, category_ids=category_ids, brand_ids=brand_ids)
        if show_hidden_quotes is not None:
            filters.show_hidden_quotes = show_hidden_quotes

        clause = build_filter_clause(filters)
        executor = CatalogQueryExecutor(self.session_factory)
        return await executor.find_page(
            clause,
            sort=SortOption.parse(params.get("sort")),
            page=page,
            limit=limit,
        )

    # ------------------------------------------------------------------
    # Single product
    # ------------------------------------------------------------------

    async def get_product(self, slug: str) -> dict[str, Any]:
        """Get an active product by slug.

        Args:
            slug: Product slug.

        Returns:
            Product dict with brand/category/sub-category names.

        Raises:
            ProductNotFoundError: If no active product has this slug.
        """
        product = await self.repository.get_active_by_slug(slug)
        if product is None:
            raise ProductNotFoundError(slug)
        return product

    async def create_product(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Create a product.

        Args:
            data: Product fields (snake_case).

        Returns:
            Created product dict.

        Raises:
            ValidationError: If required fields are missing.
            DuplicateSkuError: If the SKU is taken.
        """
        fields = {key: data.get(key) for key in PRODUCT_FIELDS}

        if not fields["name"] or not fields["sku"] or not fields["mrp_price"] or not fields["dealer_price"]:
            raise ValidationError("Name, SKU, MRP, and Dealer Price are required")

        if await self.repository.get_by_sku(fields["sku"]) is not None:
            raise DuplicateSkuError(fields["sku"])

        product = Product(
            name=fields["name"],
            slug=fields["slug"] or slugify(fields["name"]),
            description=fields["description"],
            short_description=fields["short_description"],
            sku=fields["sku"],
            mrp_price=fields["mrp_price"],
            dealer_price=fields["dealer_price"],
            counter_price=fields["counter_price"] or 0,
            recommended_price=fields["recommended_price"] or 0,
            shop_price=fields["shop_price"] or fields["mrp_price"],
            category_id=fields["category_id"],
            sub_category_id=fields["sub_category_id"],
            brand_id=fields["brand_id"],
            tag_id=fields["tag_id"] or None,
            images=json.dumps(fields["images"] or []),
            videos=json.dumps(fields["videos"] or []),
            variants=json.dumps(fields["variants"] or []),
            is_featured=bool(fields["is_featured"]),
            is_active=True,
            a_plus_content=fields["a_plus_content"] or "",
            is_discontinued=bool(fields["is_discontinued"]),
            is_quote_hidden=bool(fields["is_quote_hidden"]),
            buy_url=fields["buy_url"] or "",
            gst_percentage=fields["gst_percentage"] or 18,
            hsn_code=fields["hsn_code"] or "",
            unit=fields["unit"] or "1",
        )

        await self._save(product)
        logger.info("Product created", product_id=product.id, sku=product.sku)
        return product.to_dict()

    async def update_product(self, product_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """Update a product, keeping every field that isn't supplied.

        Args:
            product_id: Product ID.
            data: Fields to change; ``None`` values are ignored.

        Returns:
            Updated product dict.

        Raises:
            ProductNotFoundError: If the product doesn't exist.
            DuplicateSkuError: If the new SKU belongs to another product.
        """
        product = await self._get_by_id(product_id)

        changes = {
            key: value
            for key, value in data.items()
            if key in PRODUCT_FIELDS and value is not None
        }

        new_sku = changes.get("sku")
        if new_sku and new_sku != product.sku:
            owner = await self.repository.get_by_sku(new_sku)
            if owner is not None and owner.id != product.id:
                raise DuplicateSkuError(new_sku)

        for key, value in changes.items():
            if key in Product.LIST_FIELDS:
                value = json.dumps(value)
            setattr(product, key, value)

        await self._save(product)
        logger.info("Product updated", product_id=product.id, fields=sorted(changes))
        return product.to_dict()

    async def delete_product(self, product_id: str) -> None:
        """Delete a product.

        Args:
            product_id: Product ID.

        Raises:
            ProductNotFoundError: If the product doesn't exist.
        """
        product = await self._get_by_id(product_id)
        await self.repository.delete(product)
        logger.info("Product deleted", product_id=product_id)

    # ------------------------------------------------------------------
    # Bulk import
    # ------------------------------------------------------------------

    async def bulk_upload(self, rows: list[Any]) -> BulkUploadResult:
        """Create or update products from imported rows.

        Args:
            rows: Raw rows naming category/sub-category/brand by name.

        Returns:
            Upload summary.
        """
        return await BulkUploadPipeline(self.session).run(rows)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get_by_id(self, product_id: str) -> Product:
        product = await self.repository.get_by_id(product_id) if is_uuid(product_id) else None
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def _save(self, product: Product) -> None:
        try:
            async with self.session.begin_nested():
                await self.repository.save(product)
        except IntegrityError as e:
            logger.warning("Product save rejected", sku=product.sku, error=str(e.orig))
            raise ValidationError(
                "Product could not be saved: SKU already exists or a referenced "
                "category, sub-category, brand or tag does not exist"
            ) from e
