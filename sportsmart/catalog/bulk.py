"""Bulk product import.

Creates or updates products from spreadsheet rows that name their
category, sub-category and brand rather than referencing ids. Rows are
processed one at a time inside their own savepoint; a bad row is
reported and skipped, never failing the batch.
"""

from dataclasses import dataclass, field
from typing import Any

import pydantic
import structlog
from pydantic import BaseModel, ConfigDict, field_validator
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sportsmart.catalog.identifiers import slugify
from sportsmart.catalog.models import Product
from sportsmart.catalog.taxonomy import TaxonomyRepository
from sportsmart.domain.exceptions import BulkRowError, UnresolvedReferenceError

logger = structlog.get_logger()


# ============================================================================
# Row Schema
# ============================================================================


class BulkProductRow(BaseModel):
    """One imported product row.

    Every field is optional at the schema level; required fields are
    checked afterwards so the error message names them together.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: str | None = None
    sku: str | None = None
    mrp_price: float | None = None
    dealer_price: float | None = None
    counter_price: float | None = None
    recommended_price: float | None = None
    shop_price: float | None = None
    category: str | None = None
    sub_category: str | None = None
    brand: str | None = None
    description: str | None = None
    short_description: str | None = None
    hsn_code: str | None = None
    tax_class: str | None = None
    buy_url: str | None = None
    is_featured: bool | None = None
    is_active: bool | None = None
    unit: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        """Treat empty spreadsheet cells as missing."""
        if isinstance(value, str) and not value.strip():
            return None
        return value


# ============================================================================
# Result & Lookups
# ============================================================================


@dataclass
class BulkUploadResult:
    """Summary of a bulk upload.

    Attributes:
        created: Number of products inserted.
        updated: Number of existing products updated.
        errors: One human-readable message per failed row.
    """

    created: int = 0
    updated: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"created": self.created, "updated": self.updated, "errors": list(self.errors)}


def _key(name: str) -> str:
    return name.strip().lower()


@dataclass
class TaxonomyLookup:
    """Name-to-id maps built once per upload.

    Sub-categories are keyed by ``"{category_id}_{name}"`` because the
    same sub-category name can exist under several categories.
    """

    categories: dict[str, str] = field(default_factory=dict)
    brands: dict[str, str] = field(default_factory=dict)
    sub_categories: dict[str, int] = field(default_factory=dict)

    @classmethod
    async def load(cls, taxonomy: TaxonomyRepository) -> "TaxonomyLookup":
        """Load all categories, sub-categories and brands.

        Args:
            taxonomy: Taxonomy repository.

        Returns:
            Populated lookup maps.
        """
        categories = await taxonomy.all_categories()
        sub_categories = await taxonomy.all_sub_categories()
        brands = await taxonomy.all_brands()

        return cls(
            categories={_key(c.name): c.id for c in categories},
            brands={_key(b.name): b.id for b in brands},
            sub_categories={
                f"{sc.category_id}_{_key(sc.name)}": sc.id for sc in sub_categories
            },
        )

    def category_id(self, name: str) -> str | None:
        """Look up a category id by name."""
        return self.categories.get(_key(name))

    def brand_id(self, name: str) -> str | None:
        """Look up a brand id by name."""
        return self.brands.get(_key(name))

    def sub_category_id(self, category_id: str, name: str) -> int | None:
        """Look up a sub-category id by name within a category."""
        return self.sub_categories.get(f"{category_id}_{_key(name)}")


# ============================================================================
# Pipeline
# ============================================================================


class BulkUploadPipeline:
    """Imports product rows, creating or updating by SKU.

    Example usage:
        async with async_session_factory() as session:
            pipeline = BulkUploadPipeline(session)
            result = await pipeline.run(rows)
            await session.commit()
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize pipeline with database session.

        Args:
            session: Async SQLAlchemy session. The caller commits.
        """
        self.session = session
        self.taxonomy = TaxonomyRepository(session)

    async def run(self, rows: list[Any]) -> BulkUploadResult:
        """Import a batch of rows.

        Args:
            rows: Raw row objects, usually dicts parsed from a spreadsheet.

        Returns:
            Counts of created/updated products and per-row errors.
        """
        lookup = await TaxonomyLookup.load(self.taxonomy)
        result = BulkUploadResult()

        for row_number, raw in enumerate(rows, start=1):
            try:
                async with self.session.begin_nested():
                    created = await self._import_row(row_number, raw, lookup)
            except BulkRowError as e:
                result.errors.append(e.message)
                continue
            except SQLAlchemyError as e:
                logger.warning(
                    "Bulk upload row failed",
                    row=row_number,
                    error=str(e),
                )
                result.errors.append(f"Row {row_number}: Database error while saving product")
                continue

            if created:
                result.created += 1
            else:
                result.updated += 1

        logger.info(
            "Bulk upload complete",
            rows=len(rows),
            created=result.created,
            updated=result.updated,
            failed=len(result.errors),
        )
        return result

    async def _import_row(self, row_number: int, raw: Any, lookup: TaxonomyLookup) -> bool:
        """Validate, resolve and upsert one row.

        Args:
            row_number: 1-based row number for error messages.
            raw: Raw row object.
            lookup: Taxonomy name maps.

        Returns:
            True if a product was created, False if one was updated.

        Raises:
            BulkRowError: If the row is invalid or can't be saved.
        """
        try:
            row = BulkProductRow.model_validate(raw)
        except pydantic.ValidationError as e:
            errors = e.errors()
            location = errors[0]["loc"] if errors else ()
            if location:
                raise BulkRowError(row_number, f"Invalid value for '{location[0]}'") from e
            raise BulkRowError(row_number, "Row must be an object") from e

        if not row.name or not row.sku or not row.mrp_price:
            raise BulkRowError(row_number, "Name, SKU, and MRP Price are required")

        category_id = lookup.category_id(row.category) if row.category else None
        if row.category and category_id is None:
            raise UnresolvedReferenceError(row_number, "Category", row.category)

        brand_id = lookup.brand_id(row.brand) if row.brand else None
        if row.brand and brand_id is None:
            raise UnresolvedReferenceError(row_number, "Brand", row.brand)

        sub_category_id = None
        if row.sub_category and category_id is not None:
            sub_category_id = lookup.sub_category_id(category_id, row.sub_category)
            if sub_category_id is None:
                raise UnresolvedReferenceError(
                    row_number, "Sub-category", row.sub_category, scope=row.category
                )

        existing = (
            await self.session.execute(select(Product).where(Product.sku == row.sku))
        ).scalar_one_or_none()

        if existing is not None:
            self._apply_update(existing, row, category_id, sub_category_id, brand_id)
        else:
            self.session.add(self._new_product(row, category_id, sub_category_id, brand_id))

        try:
            await self.session.flush()
        except IntegrityError as e:
            raise BulkRowError(
                row_number, f'Product with SKU "{row.sku}" could not be saved'
            ) from e

        return existing is None

    @staticmethod
    def _apply_update(
        product: Product,
        row: BulkProductRow,
        category_id: str | None,
        sub_category_id: int | None,
        brand_id: str | None,
    ) -> None:
        product.name = row.name
        product.mrp_price = row.mrp_price
        product.dealer_price = row.dealer_price or 0
        product.counter_price = row.counter_price or 0
        product.recommended_price = row.recommended_price or 0
        product.shop_price = row.shop_price or row.mrp_price
        product.category_id = category_id
        product.sub_category_id = sub_category_id
        product.brand_id = brand_id
        product.hsn_code = row.hsn_code
        product.tax_class = row.tax_class
        product.buy_url = row.buy_url
        product.is_featured = row.is_featured if row.is_featured is not None else False
        product.is_active = row.is_active if row.is_active is not None else True

        # Optional text keeps its current value when the row leaves it blank
        if row.description is not None:
            product.description = row.description
        if row.short_description is not None:
            product.short_description = row.short_description
        if row.unit is not None:
            product.unit = row.unit

    @staticmethod
    def _new_product(
        row: BulkProductRow,
        category_id: str | None,
        sub_category_id: int | None,
        brand_id: str | None,
    ) -> Product:
        return Product(
            name=row.name,
            slug=slugify(row.name),
            sku=row.sku,
            description=row.description or "",
            short_description=row.short_description or "",
            mrp_price=row.mrp_price,
            dealer_price=row.dealer_price or 0,
            counter_price=row.counter_price or 0,
            recommended_price=row.recommended_price or 0,
            shop_price=row.shop_price or row.mrp_price,
            category_id=category_id,
            sub_category_id=sub_category_id,
            brand_id=brand_id,
            is_featured=row.is_featured if row.is_featured is not None else False,
            is_active=True,
            hsn_code=row.hsn_code or "",
            tax_class=row.tax_class or "",
            buy_url=row.buy_url or "",
            images="[]",
            videos="[]",
            variants="[]",
            a_plus_content="",
            is_discontinued=False,
            is_quote_hidden=False,
            unit=row.unit or "1",
        )
