"""API schemas for the catalog API.

Pydantic models for request/response validation and serialization.
Product write bodies accept both camelCase and snake_case keys.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error: str = Field(..., description="Human-readable error message")
    error_code: str = Field(default="ERROR", description="Machine-readable error code")
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class DeleteResponse(BaseModel):
    """Response for a successful delete."""

    success: bool = True
    message: str


# ============================================================================
# Product Schemas
# ============================================================================


class ProductResponse(BaseModel):
    """Product as returned by the API, with joined taxonomy names."""

    id: str
    sku: str
    slug: str
    name: str
    description: str | None = None
    short_description: str | None = None
    a_plus_content: str | None = None
    images: list[Any] = Field(default_factory=list)
    videos: list[Any] = Field(default_factory=list)
    variants: list[Any] = Field(default_factory=list)

    category_id: str | None = None
    sub_category_id: int | None = None
    brand_id: str | None = None
    tag_id: str | None = None

    mrp_price: float
    dealer_price: float
    counter_price: float
    recommended_price: float
    shop_price: float

    is_active: bool
    is_featured: bool
    is_discontinued: bool
    is_quote_hidden: bool | None = None

    gst_percentage: float
    hsn_code: str | None = None
    tax_class: str | None = None
    buy_url: str | None = None
    unit: str

    created_at: datetime
    updated_at: datetime

    brand_name: str | None = None
    category_name: str | None = None
    sub_category_name: str | None = None
    tag_name: str | None = None


class ProductListResponse(BaseModel):
    """One page of products."""

    model_config = ConfigDict(populate_by_name=True)

    products: list[ProductResponse] = Field(..., description="Products on this page")
    total: int = Field(..., description="Total number of matching products")
    page: int = Field(..., description="Current page number")
    limit: int = Field(..., description="Page size")
    total_pages: int = Field(..., alias="totalPages", description="Number of pages")


class ProductWriteRequest(BaseModel):
    """Writable product fields, shared by create and update."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str | None = None
    slug: str | None = None
    description: str | None = None
    short_description: str | None = None
    sku: str | None = None
    mrp_price: float | None = None
    dealer_price: float | None = None
    counter_price: float | None = None
    recommended_price: float | None = None
    shop_price: float | None = None
    category_id: str | None = None
    sub_category_id: int | None = None
    brand_id: str | None = None
    tag_id: str | None = None
    images: list[Any] | None = None
    videos: list[Any] | None = None
    variants: list[Any] | None = None
    is_featured: bool | None = None
    a_plus_content: str | None = None
    is_discontinued: bool | None = None
    is_quote_hidden: bool | None = None
    buy_url: str | None = None
    gst_percentage: float | None = None
    hsn_code: str | None = None
    unit: str | None = None


class ProductCreateRequest(ProductWriteRequest):
    """Request to create a product.

    ``name``, ``sku``, ``mrp_price`` and ``dealer_price`` are required;
    they are checked by the service so the error names all of them.
    """


class ProductUpdateRequest(ProductWriteRequest):
    """Partial update; omitted or null fields keep their current value."""

    is_active: bool | None = None


class BulkUploadResponse(BaseModel):
    """Summary of a bulk upload."""

    created: int = Field(..., description="Products inserted")
    updated: int = Field(..., description="Existing products updated")
    errors: list[str] = Field(default_factory=list, description="One message per failed row")


# ============================================================================
# Taxonomy Schemas
# ============================================================================


class CategoryResponse(BaseModel):
    """Category with its active sub-category count."""

    id: str
    name: str
    slug: str
    image_url: str | None = None
    parent_collection_id: str | None = None
    display_order: int
    is_active: bool
    sub_category_count: int = 0


class SubCategoryResponse(BaseModel):
    """Sub-category with the number of brands stocked in it."""

    id: int
    name: str
    category_id: str
    image_url: str | None = None
    display_order: int
    is_active: bool
    brand_count: int = 0


class BrandResponse(BaseModel):
    """Brand with its product count."""

    id: str
    name: str
    slug: str
    logo_url: str | None = None
    is_active: bool
    product_count: int = 0


class CollectionCategory(BaseModel):
    """Category summary nested in a collection."""

    id: str
    name: str
    slug: str
    image_url: str | None = None


class CollectionResponse(BaseModel):
    """Collection with its categories."""

    id: str
    name: str
    slug: str
    image_url: str | None = None
    display_order: int
    categories: list[CollectionCategory] = Field(default_factory=list)


class HierarchyBrand(BaseModel):
    """Brand product count within a sub-category."""

    id: str
    name: str
    count: int


class HierarchySubCategory(BaseModel):
    """Sub-category node of the inventory tree."""

    id: int
    name: str
    brands: list[HierarchyBrand] = Field(default_factory=list)


class HierarchyCategory(BaseModel):
    """Category node of the inventory tree."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    sub_categories: list[HierarchySubCategory] = Field(
        default_factory=list, alias="subCategories"
    )
    total_products: int = Field(default=0, alias="totalProducts")
