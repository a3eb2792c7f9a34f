"""Taxonomy repository.

Read access to collections, categories, sub-categories and brands:
storefront menus, filter option lists and the admin inventory tree.
"""

from typing import Any

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from sportsmart.catalog.models import Brand, Category, Collection, Product, SubCategory


class TaxonomyRepository:
    """Repository for catalog taxonomy lookups.

    Example usage:
        async with async_session_factory() as session:
            repo = TaxonomyRepository(session)
            brands = await repo.list_brands(category_id=cricket_id)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def all_categories(self) -> list[Category]:
        """Get every category, active or not."""
        result = await self.session.execute(select(Category))
        return list(result.scalars().all())

    async def all_sub_categories(self) -> list[SubCategory]:
        """Get every sub-category, active or not."""
        result = await self.session.execute(select(SubCategory))
        return list(result.scalars().all())

    async def all_brands(self) -> list[Brand]:
        """Get every brand, active or not."""
        result = await self.session.execute(select(Brand))
        return list(result.scalars().all())

    async def list_categories(self) -> list[dict[str, Any]]:
        """Get categories with their active sub-category counts.

        Returns:
            Category dicts ordered by display order, then name.
        """
        sub_count = (
            select(func.count(SubCategory.id))
            .where(
                SubCategory.category_id == Category.id,
                SubCategory.is_active.is_(True),
            )
            .correlate(Category)
            .scalar_subquery()
        )
        query = (
            select(Category, sub_count.label("sub_category_count"))
            .order_by(Category.display_order.asc(), Category.name.asc())
        )
        result = await self.session.execute(query)
        return [
            {**category.to_dict(), "sub_category_count": count}
            for category, count in result.all()
        ]

    async def list_sub_categories(self, category_id: str | None = None) -> list[dict[str, Any]]:
        """Get active sub-categories with the number of brands stocked in each.

        Args:
            category_id: Optional parent category filter.

        Returns:
            Sub-category dicts ordered by display order, then name.
        """
        brand_count = (
            select(func.count(distinct(Product.brand_id)))
            .where(
                Product.sub_category_id == SubCategory.id,
                Product.is_active.is_(True),
            )
            .correlate(SubCategory)
            .scalar_subquery()
        )
        query = (
            select(SubCategory, brand_count.label("brand_count"))
            .where(SubCategory.is_active.is_(True))
            .order_by(SubCategory.display_order.asc(), SubCategory.name.asc())
        )
        if category_id is not None:
            query = query.where(SubCategory.category_id == category_id)

        result = await self.session.execute(query)
        return [
            {**sub_category.to_dict(), "brand_count": count}
            for sub_category, count in result.all()
        ]

    async def list_brands(
        self,
        category_id: str | None = None,
        sub_category_id: int | None = None,
    ) -> list[dict[str, Any]]:
        """Get active brands with product counts.

        When a category or sub-category is given, only brands that have
        products there are returned and the counts are scoped to it.

        Args:
            category_id: Optional category filter.
            sub_category_id: Optional sub-category filter.

        Returns:
            Brand dicts ordered by name.
        """
        if category_id is None and sub_category_id is None:
            product_count = (
                select(func.count(Product.id))
                .where(Product.brand_id == Brand.id, Product.is_active.is_(True))
                .correlate(Brand)
                .scalar_subquery()
            )
            query = select(Brand, product_count.label("product_count"))
        else:
            query = (
                select(Brand, func.count(Product.id).label("product_count"))
                .join(Product, Product.brand_id == Brand.id)
                .group_by(Brand.id)
            )
            if category_id is not None:
                query = query.where(Product.category_id == category_id)
            if sub_category_id is not None:
                query = query.where(Product.sub_category_id == sub_category_id)

        query = query.where(Brand.is_active.is_(True)).order_by(Brand.name)

        result = await self.session.execute(query)
        return [
            {**brand.to_dict(), "product_count": count}
            for brand, count in result.all()
        ]

    async def list_collections(self) -> list[dict[str, Any]]:
        """Get active collections with their active categories.

        Returns:
            Collection dicts ordered by display order, then name.
        """
        query = (
            select(Collection)
            .where(Collection.is_active.is_(True))
            .options(selectinload(Collection.categories))
            .order_by(Collection.display_order.asc(), Collection.name.asc())
        )
        result = await self.session.execute(query)
        return [
            {
                **collection.to_dict(),
                "categories": [
                    category.to_dict()
                    for category in sorted(
                        collection.categories,
                        key=lambda c: (c.display_order, c.name),
                    )
                    if category.is_active
                ],
            }
            for collection in result.scalars().all()
        ]

    async def inventory_hierarchy(self) -> list[dict[str, Any]]:
        """Build the category -> sub-category -> brand product count tree.

        Only active categories, sub-categories, products and brands count.

        Returns:
            One node per category with its sub-categories and brand counts.
        """
        categories = (
            await self.session.execute(
                select(Category.id, Category.name)
                .where(Category.is_active.is_(True))
                .order_by(Category.name)
            )
        ).all()
        sub_categories = (
            await self.session.execute(
                select(SubCategory.id, SubCategory.name, SubCategory.category_id)
                .where(SubCategory.is_active.is_(True))
                .order_by(SubCategory.name)
            )
        ).all()
        counts = (
            await self.session.execute(
                select(
                    Product.sub_category_id,
                    Product.brand_id,
                    Brand.name.label("brand_name"),
                    func.count(Product.id).label("count"),
                )
                .join(Brand, Product.brand_id == Brand.id)
                .where(Product.is_active.is_(True), Brand.is_active.is_(True))
                .group_by(Product.sub_category_id, Product.brand_id, Brand.name)
                .order_by(Brand.name)
            )
        ).all()

        brands_by_sub: dict[int, list[dict[str, Any]]] = {}
        for row in counts:
            brands_by_sub.setdefault(row.sub_category_id, []).append(
                {"id": row.brand_id, "name": row.brand_name, "count": int(row.count)}
            )

        hierarchy = []
        for category in categories:
            subs = [
                {
                    "id": sub.id,
                    "name": sub.name,
                    "brands": brands_by_sub.get(sub.id, []),
                }
                for sub in sub_categories
                if sub.category_id == category.id
            ]
            hierarchy.append(
                {
                    "id": category.id,
                    "name": category.name,
                    "subCategories": subs,
                    "totalProducts": sum(
                        brand["count"] for sub in subs for brand in sub["brands"]
                    ),
                }
            )
        return hierarchy
