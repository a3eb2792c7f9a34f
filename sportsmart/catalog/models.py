"""SQLAlchemy models for the product catalog.

Defines the product table and the taxonomy it is classified by:
collections, categories, sub-categories, brands and tags.
"""

import json
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sportsmart.infrastructure.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


# Native UUID on PostgreSQL, dashed text on SQLite; always a str in Python
UUIDString = Uuid(as_uuid=False).with_variant(String(36), "sqlite")

# Prices are stored as NUMERIC but handled as floats throughout the API
Price = Numeric(12, 2, asdecimal=False)


class Collection(Base):
    """Top-level storefront grouping that categories may attach to."""

    __tablename__ = "collections"

    id: Mapped[str] = mapped_column(UUIDString, primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    categories: Mapped[list["Category"]] = relationship(
        "Category", back_populates="collection"
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Collection(id={self.id}, slug={self.slug})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "image_url": self.image_url,
            "display_order": self.display_order,
            "is_active": self.is_active,
        }


class Category(Base):
    """Product category (e.g. Cricket, Football).

    Attributes:
        id: Unique category identifier (UUID).
        name: Display name.
        slug: URL-safe identifier used by storefront filters.
        parent_collection_id: Optional collection this category belongs to.
        display_order: Sort position in menus.
        is_active: Whether the category is shown on the storefront.
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(UUIDString, primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    parent_collection_id: Mapped[str | None] = mapped_column(
        UUIDString,
        ForeignKey("collections.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    collection: Mapped["Collection | None"] = relationship(
        "Collection", back_populates="categories"
    )
    sub_categories: Mapped[list["SubCategory"]] = relationship(
        "SubCategory", back_populates="category", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Category(id={self.id}, slug={self.slug})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "image_url": self.image_url,
            "parent_collection_id": self.parent_collection_id,
            "display_order": self.display_order,
            "is_active": self.is_active,
        }


class SubCategory(Base):
    """Sub-category within a category.

    Names are only unique within the parent category: "Bats" can exist
    under both Cricket and Baseball.
    """

    __tablename__ = "sub_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category_id: Mapped[str] = mapped_column(
        UUIDString,
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    category: Mapped["Category"] = relationship("Category", back_populates="sub_categories")

    def __repr__(self) -> str:
        """String representation."""
        return f"<SubCategory(id={self.id}, name={self.name})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "category_id": self.category_id,
            "image_url": self.image_url,
            "display_order": self.display_order,
            "is_active": self.is_active,
        }


class Brand(Base):
    """Equipment brand (e.g. SG, Kookaburra)."""

    __tablename__ = "brands"

    id: Mapped[str] = mapped_column(UUIDString, primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    logo_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Brand(id={self.id}, slug={self.slug})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "logo_url": self.logo_url,
            "is_active": self.is_active,
        }


class ProductTag(Base):
    """Merchandising tag, optionally scoped to a category, sub-category or brand."""

    __tablename__ = "product_tags"

    id: Mapped[str] = mapped_column(UUIDString, primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category_id: Mapped[str | None] = mapped_column(
        UUIDString, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )
    sub_category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("sub_categories.id", ondelete="SET NULL"), nullable=True
    )
    brand_id: Mapped[str | None] = mapped_column(
        UUIDString, ForeignKey("brands.id", ondelete="SET NULL"), nullable=True
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductTag(id={self.id}, name={self.name})>"


class Product(Base):
    """Product in the catalog.

    Attributes:
        id: Unique product identifier (UUID).
        sku: Stock Keeping Unit, globally unique.
        slug: URL identifier, derived from the name when not given.
        name: Product name.
        images: JSON-encoded list of image URLs.
        videos: JSON-encoded list of video URLs.
        variants: JSON-encoded list of variant descriptors.
        category_id: Optional category.
        sub_category_id: Optional sub-category (integer id).
        brand_id: Optional brand.
        tag_id: Optional merchandising tag.
        mrp_price: Maximum retail price.
        dealer_price: B2B dealer price.
        counter_price: Over-the-counter price.
        recommended_price: Recommended selling price.
        shop_price: Price shown and filtered on in the storefront.
        is_active: Whether the product is listed at all.
        is_featured: Featured products sort first by default.
        is_discontinued: Product is no longer made.
        is_quote_hidden: Hidden from the storefront, visible to admins.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(UUIDString, primary_key=True, default=_new_id)
    sku: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    slug: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    short_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    a_plus_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    images: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    videos: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    variants: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    category_id: Mapped[str | None] = mapped_column(
        UUIDString, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    sub_category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("sub_categories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    brand_id: Mapped[str | None] = mapped_column(
        UUIDString, ForeignKey("brands.id", ondelete="SET NULL"), nullable=True, index=True
    )
    tag_id: Mapped[str | None] = mapped_column(
        UUIDString, ForeignKey("product_tags.id", ondelete="SET NULL"), nullable=True
    )

    mrp_price: Mapped[float] = mapped_column(Price, nullable=False)
    dealer_price: Mapped[float] = mapped_column(Price, nullable=False, default=0)
    counter_price: Mapped[float] = mapped_column(Price, nullable=False, default=0)
    recommended_price: Mapped[float] = mapped_column(Price, nullable=False, default=0)
    shop_price: Mapped[float] = mapped_column(Price, nullable=False, default=0, index=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_discontinued: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_quote_hidden: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=False)

    gst_percentage: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=False, default=18)
    hsn_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    tax_class: Mapped[str | None] = mapped_column(String(50), nullable=True)
    buy_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    unit: Mapped[str] = mapped_column(String(50), nullable=False, default="1")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    # JSON-encoded list columns
    LIST_FIELDS = ("images", "videos", "variants")

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, sku={self.sku}, name={self.name[:30]}...)>"

    def to_dict(self, **joined: Any) -> dict[str, Any]:
        """Convert to dictionary.

        Args:
            joined: Extra columns from joined tables (brand_name, ...).

        Returns:
            Dictionary representation with list fields decoded.
        """
        data = {
            column.key: getattr(self, column.key)
            for column in self.__table__.columns
        }
        for field in self.LIST_FIELDS:
            data[field] = json.loads(data[field] or "[]")
        data.update(joined)
        return data
