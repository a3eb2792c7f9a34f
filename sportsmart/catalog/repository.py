"""Product repository for database operations.

Provides the paginated catalog listing and CRUD operations for products.
"""

import asyncio
import math
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Row, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sportsmart.catalog.filters import FilterClause, SortOption, catalog_join
from sportsmart.catalog.models import Brand, Category, Product, ProductTag, SubCategory


def _row_to_dict(row: Row[Any]) -> dict[str, Any]:
    """Convert a (Product, joined names...) row to a response dict."""
    product, *_ = row
    joined = {key: value for key, value in row._mapping.items() if key != "Product"}
    return product.to_dict(**joined)


def _listing_select() -> Select[Any]:
    """Select products with their brand, category, sub-category and tag names."""
    return select(
        Product,
        Brand.name.label("brand_name"),
        Category.name.label("category_name"),
        SubCategory.name.label("sub_category_name"),
        ProductTag.name.label("tag_name"),
    ).select_from(catalog_join())


@dataclass
class CatalogPage:
    """One page of a product listing.

    Attributes:
        products: Product dicts with joined names.
        total: Number of products matching the filters.
        page: Current page (1-indexed).
        limit: Page size.
    """

    products: list[dict[str, Any]]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        """Calculate total pages."""
        return math.ceil(self.total / self.limit) if self.limit else 0


class CatalogQueryExecutor:
    """Runs the catalog listing query and its count.

    The page and the count are independent reads, so they run
    concurrently on two sessions. No transaction spans them; under
    concurrent writes the two may disagree slightly.

    Example usage:
        executor = CatalogQueryExecutor(async_session_factory)
        page = await executor.find_page(clause, SortOption.PRICE_ASC, page=1, limit=20)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize executor with a session factory.

        Args:
            session_factory: Factory used to open one session per query.
        """
        self.session_factory = session_factory

    async def find_page(
        self,
        clause: FilterClause,
        sort: SortOption = SortOption.FEATURED,
        page: int = 1,
        limit: int = 100,
    ) -> CatalogPage:
        """Fetch one page of products matching a filter clause.

        Args:
            clause: Filter clause shared by the page and count queries.
            sort: Ordering.
            page: Page number (1-indexed).
            limit: Page size.

        Returns:
            The requested page with total count.
        """
        offset = (page - 1) * limit

        data_query = (
            _listing_select()
            .where(clause.where)
            .order_by(*sort.order_by(), Product.id)
            .limit(limit)
            .offset(offset)
        )
        count_query = (
            select(func.count())
            .select_from(catalog_join())
            .where(clause.where)
        )

        products, total = await asyncio.gather(
            self._fetch_rows(data_query),
            self._fetch_count(count_query),
        )

        return CatalogPage(products=products, total=total, page=page, limit=limit)

    async def _fetch_rows(self, query: Select[Any]) -> list[dict[str, Any]]:
        async with self.session_factory() as session:
            result = await session.execute(query)
            return [_row_to_dict(row) for row in result.all()]

    async def _fetch_count(self, query: Select[Any]) -> int:
        async with self.session_factory() as session:
            result = await session.execute(query)
            return int(result.scalar_one())


class ProductRepository:
    """Repository for Product database operations.

    Example usage:
        async with async_session_factory() as session:
            repo = ProductRepository(session)
            product = await repo.get_by_sku("SG-BAT-001")
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def save(self, product: Product) -> Product:
        """Save a product to database.

        Args:
            product: Product to save.

        Returns:
            Saved product, refreshed from the database.
        """
        self.session.add(product)
        await self.session.flush()
        await self.session.refresh(product)
        return product

    async def get_by_id(self, product_id: str) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID.

        Returns:
            Product if found, None otherwise.
        """
        result = await self.session.execute(
            select(Product).where(Product.id == product_id)
        )
        return result.scalar_one_or_none()

    async def get_by_sku(self, sku: str) -> Product | None:
        """Get product by SKU.

        Args:
            sku: Product SKU.

        Returns:
            Product if found, None otherwise.
        """
        result = await self.session.execute(
            select(Product).where(Product.sku == sku)
        )
        return result.scalar_one_or_none()

    async def get_active_by_slug(self, slug: str) -> dict[str, Any] | None:
        """Get an active product by slug, with brand/category/sub-category names.

        Args:
            slug: Product slug.

        Returns:
            Product dict if found, None otherwise.
        """
        query = (
            _listing_select()
            .where(Product.slug == slug, Product.is_active.is_(True))
            .order_by(Product.created_at)
            .limit(1)
        )
        result = await self.session.execute(query)
        row = result.first()
        return _row_to_dict(row) if row is not None else None

    async def delete(self, product: Product) -> None:
        """Delete a product.

        Args:
            product: Product to delete.
        """
        await self.session.delete(product)
        await self.session.flush()
