"""Product filter clause builder.

Turns the storefront's optional facets into one conjunctive WHERE
clause over the fixed catalog join. Every facet is optional and an
absent facet never narrows the result set.

The clause is built once and shared by the page query and the count
query, so both always bind the same parameters.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sqlalchemy import String, and_, bindparam, or_
from sqlalchemy.dialects import postgresql
from sqlalchemy.engine import Dialect
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.selectable import Join

from sportsmart.catalog.identifiers import is_uuid, parse_int_ids
from sportsmart.catalog.models import Brand, Category, Product, ProductTag, SubCategory


# ============================================================================
# Sorting
# ============================================================================


class SortOption(str, Enum):
    """Supported product orderings."""

    FEATURED = "featured"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NEWEST = "newest"
    NAME_ASC = "name_asc"

    @classmethod
    def parse(cls, value: str | None) -> "SortOption":
        """Parse a sort key, falling back to ``featured`` for unknown input."""
        try:
            return cls(value)
        except ValueError:
            return cls.FEATURED

    def order_by(self) -> list[ColumnElement[Any]]:
        """Get ORDER BY expressions for this sort option."""
        return list(_ORDER_BY[self])


_ORDER_BY: dict[SortOption, tuple[ColumnElement[Any], ...]] = {
    SortOption.FEATURED: (Product.is_featured.desc(), Product.created_at.desc()),
    SortOption.PRICE_ASC: (Product.shop_price.asc(),),
    SortOption.PRICE_DESC: (Product.shop_price.desc(),),
    SortOption.NEWEST: (Product.created_at.desc(),),
    SortOption.NAME_ASC: (Product.name.asc(),),
}


# ============================================================================
# Filter Parameters
# ============================================================================


def _first_present(params: Mapping[str, str], *names: str) -> str | None:
    """Return the first non-empty value among alias parameter names."""
    for name in names:
        value = params.get(name)
        if value:
            return value
    return None


def _parse_price(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        price = float(value)
    except ValueError:
        return None
    return price if math.isfinite(price) else None


@dataclass
class ProductFilter:
    """Filter parameters for product listing.

    Attributes:
        category_ids: Category ids (already resolved from slugs).
        sub_category_ids: Integer sub-category ids.
        brand_ids: Brand ids (already resolved from slugs).
        collection_id: Parent collection of the product's category.
        price_min: Inclusive lower bound on shop price.
        price_max: Inclusive upper bound on shop price.
        is_featured: Featured flag to match.
        search: Case-insensitive text matched against name, description and SKU.
        tag_id: Tag id to match.
        show_hidden_quotes: Include quote-hidden products (admin views).
    """

    category_ids: list[str] = field(default_factory=list)
    sub_category_ids: list[int] = field(default_factory=list)
    brand_ids: list[str] = field(default_factory=list)
    collection_id: str | None = None
    price_min: float | None = None
    price_max: float | None = None
    is_featured: bool | None = None
    search: str | None = None
    tag_id: str | None = None
    show_hidden_quotes: bool = False

    @classmethod
    def from_query(
        cls,
        params: Mapping[str, str],
        category_ids: list[str] | None = None,
        brand_ids: list[str] | None = None,
    ) -> "ProductFilter":
        """Build filters from raw query parameters.

        Category and brand values need a database lookup, so they are
        resolved by the caller and passed in.

        Args:
            params: Raw query parameters.
            category_ids: Resolved category ids.
            brand_ids: Resolved brand ids.

        Returns:
            Filter parameters.
        """
        is_featured = params.get("is_featured")
        tag = params.get("tag")
        collection_id = params.get("collection_id")

        return cls(
            category_ids=list(category_ids or []),
            sub_category_ids=parse_int_ids(params.get("sub_category")),
            brand_ids=list(brand_ids or []),
            collection_id=collection_id.lower() if is_uuid(collection_id) else None,
            price_min=_parse_price(_first_present(params, "price_min", "min_price")),
            price_max=_parse_price(_first_present(params, "price_max", "max_price")),
            is_featured=(is_featured == "true") if is_featured else None,
            search=params.get("search") or None,
            tag_id=tag.lower() if is_uuid(tag) else None,
            show_hidden_quotes=params.get("showHiddenQuotes") == "true",
        )


# ============================================================================
# Filter Clause
# ============================================================================


def catalog_join() -> Join:
    """Get the fixed join every catalog listing query selects from."""
    return (
        Product.__table__
        .outerjoin(Brand.__table__, Product.brand_id == Brand.id)
        .outerjoin(Category.__table__, Product.category_id == Category.id)
        .outerjoin(SubCategory.__table__, Product.sub_category_id == SubCategory.id)
        .outerjoin(ProductTag.__table__, Product.tag_id == ProductTag.id)
    )


@dataclass
class FilterClause:
    """Accumulated filter predicates.

    Attributes:
        conditions: Predicates to AND together, in the order added.
    """

    conditions: list[ColumnElement[bool]] = field(default_factory=list)

    def add(self, predicate: ColumnElement[bool]) -> None:
        """Append a predicate."""
        self.conditions.append(predicate)

    @property
    def where(self) -> ColumnElement[bool]:
        """Get the conjoined WHERE clause."""
        return and_(*self.conditions)

    def compile(self, dialect: Dialect | None = None) -> tuple[str, dict[str, Any]]:
        """Render the clause as SQL text plus bound parameters.

        Args:
            dialect: Dialect to render for (PostgreSQL by default).

        Returns:
            Tuple of (SQL text, parameters by bind name).
        """
        compiled = self.where.compile(
            dialect=dialect or postgresql.dialect(),
            compile_kwargs={"render_postcompile": True},
        )
        return str(compiled), dict(compiled.params)


def build_filter_clause(filters: ProductFilter) -> FilterClause:
    """Build the WHERE clause for a product listing.

    Always restricts to active products, and hides quote-hidden
    products unless the caller opts in.

    Args:
        filters: Filter parameters.

    Returns:
        Filter clause.
    """
    clause = FilterClause()
    clause.add(Product.is_active.is_(True))

    if not filters.show_hidden_quotes:
        clause.add(
            or_(
                Product.is_quote_hidden.is_(None),
                Product.is_quote_hidden.is_(False),
            )
        )

    if filters.category_ids:
        clause.add(Product.category_id.in_(filters.category_ids))

    if filters.sub_category_ids:
        clause.add(Product.sub_category_id.in_(filters.sub_category_ids))

    if filters.brand_ids:
        clause.add(Product.brand_id.in_(filters.brand_ids))

    if filters.collection_id is not None:
        clause.add(Category.parent_collection_id == filters.collection_id)

    if filters.price_min is not None:
        clause.add(Product.shop_price >= filters.price_min)

    if filters.price_max is not None:
        clause.add(Product.shop_price <= filters.price_max)

    if filters.is_featured is not None:
        clause.add(Product.is_featured == filters.is_featured)

    if filters.search:
        # One bound pattern shared by all three columns
        pattern = bindparam("search", f"%{filters.search}%", type_=String)
        clause.add(
            or_(
                Product.name.ilike(pattern),
                Product.description.ilike(pattern),
                Product.sku.ilike(pattern),
            )
        )

    if filters.tag_id is not None:
        clause.add(Product.tag_id == filters.tag_id)

    return clause
