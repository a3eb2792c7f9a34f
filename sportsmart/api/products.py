"""Product API endpoints.

Provides the storefront catalog listing, product detail, admin CRUD
and spreadsheet bulk upload.
"""

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sportsmart.api.schemas import (
    BulkUploadResponse,
    DeleteResponse,
    ErrorResponse,
    ProductCreateRequest,
    ProductListResponse,
    ProductResponse,
    ProductUpdateRequest,
)
from sportsmart.catalog.repository import CatalogPage
from sportsmart.catalog.service import CatalogService
from sportsmart.domain.exceptions import DomainError, ProductNotFoundError
from sportsmart.infrastructure.config import settings
from sportsmart.infrastructure.database import get_session, get_session_factory

logger = structlog.get_logger()

router = APIRouter(prefix="/api/products", tags=["Products"])
admin_router = APIRouter(prefix="/api/admin", tags=["Admin"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(
    session: Annotated[AsyncSession, Depends(get_session)],
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> CatalogService:
    """Get catalog service bound to the request session."""
    return CatalogService(session, session_factory)


ServiceDep = Annotated[CatalogService, Depends(get_service)]


def listing_params(
    category: str | None = Query(None, description="Category slugs or ids, comma-separated"),
    sub_category: str | None = Query(None, description="Sub-category ids, comma-separated"),
    brand: str | None = Query(None, description="Brand slugs or ids, comma-separated"),
    collection_id: str | None = Query(None, description="Collection id"),
    price_min: str | None = Query(None, description="Minimum shop price"),
    min_price: str | None = Query(None, description="Alias of price_min"),
    price_max: str | None = Query(None, description="Maximum shop price"),
    max_price: str | None = Query(None, description="Alias of price_max"),
    is_featured: str | None = Query(None, description="'true' for featured products only"),
    search: str | None = Query(None, description="Substring of name, description or SKU"),
    sort: str | None = Query(None, description="featured, price_asc, price_desc, newest, name_asc"),
    tag: str | None = Query(None, description="Tag id"),
    show_hidden_quotes: str | None = Query(
        None, alias="showHiddenQuotes", description="'true' to include quote-hidden products"
    ),
) -> dict[str, str]:
    """Collect the listing filters that were supplied, under their wire names."""
    params = {
        "category": category,
        "sub_category": sub_category,
        "brand": brand,
        "collection_id": collection_id,
        "price_min": price_min,
        "min_price": min_price,
        "price_max": price_max,
        "max_price": max_price,
        "is_featured": is_featured,
        "search": search,
        "sort": sort,
        "tag": tag,
        "showHiddenQuotes": show_hidden_quotes,
    }
    return {key: value for key, value in params.items() if value is not None}


# ============================================================================
# Converters
# ============================================================================


def page_to_response(page: CatalogPage) -> ProductListResponse:
    """Convert a catalog page to response schema."""
    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in page.products],
        total=page.total,
        page=page.page,
        limit=page.limit,
        total_pages=page.total_pages,
    )


def domain_error_to_http(error: DomainError) -> HTTPException:
    """Map a domain error to an HTTP error with the standard detail shape."""
    status_code = (
        status.HTTP_404_NOT_FOUND
        if isinstance(error, ProductNotFoundError)
        else status.HTTP_400_BAD_REQUEST
    )
    return HTTPException(
        status_code=status_code,
        detail={"error_code": error.error_code, "message": error.message},
    )


async def _list(
    service: CatalogService,
    params: dict[str, str],
    page: int,
    limit: int,
    show_hidden_quotes: bool | None = None,
) -> ProductListResponse:
    try:
        result = await service.list_products(
            params, page=page, limit=limit, show_hidden_quotes=show_hidden_quotes
        )
    except SQLAlchemyError as e:
        logger.exception("Error fetching products", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error_code": "CATALOG_QUERY_FAILED", "message": "Failed to fetch products"},
        ) from e
    return page_to_response(result)


# ============================================================================
# Storefront Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ProductListResponse,
    responses={500: {"model": ErrorResponse}},
    summary="List products",
    description="Filtered, sorted and paginated product listing.",
)
async def list_products(
    service: ServiceDep,
    params: Annotated[dict[str, str], Depends(listing_params)],
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int | None = Query(None, ge=1, description="Page size"),
) -> ProductListResponse:
    """List active products for the storefront."""
    return await _list(service, params, page, limit or settings.default_page_limit)


@router.get(
    "/{slug}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get product",
    description="Get an active product by its slug.",
)
async def get_product(slug: str, service: ServiceDep) -> ProductResponse:
    """Get product details with brand, category and sub-category names."""
    try:
        product = await service.get_product(slug)
    except DomainError as e:
        raise domain_error_to_http(e) from e
    return ProductResponse.model_validate(product)


# ============================================================================
# Admin Endpoints
# ============================================================================


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Create product",
)
async def create_product(body: ProductCreateRequest, service: ServiceDep) -> ProductResponse:
    """Create a product."""
    try:
        product = await service.create_product(body.model_dump())
    except DomainError as e:
        raise domain_error_to_http(e) from e
    return ProductResponse.model_validate(product)


@router.post(
    "/bulk",
    response_model=BulkUploadResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Bulk upload products",
    description="Create or update products by SKU from spreadsheet rows. "
    "Rows that fail are reported and skipped.",
)
async def bulk_upload(
    service: ServiceDep,
    rows: Annotated[Any, Body(description="Array of product rows")] = None,
) -> BulkUploadResponse:
    """Import a batch of product rows."""
    if not isinstance(rows, list):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error_code": "VALIDATION_ERROR", "message": "Data must be an array"},
        )

    try:
        result = await service.bulk_upload(rows)
    except SQLAlchemyError as e:
        logger.exception("Bulk upload failed", rows=len(rows), error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error_code": "BULK_UPLOAD_FAILED", "message": "Failed to process bulk upload"},
        ) from e
    return BulkUploadResponse(**result.to_dict())


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Update product",
)
async def update_product(
    product_id: str, body: ProductUpdateRequest, service: ServiceDep
) -> ProductResponse:
    """Update a product; omitted fields are left unchanged."""
    try:
        product = await service.update_product(product_id, body.model_dump(exclude_none=True))
    except DomainError as e:
        raise domain_error_to_http(e) from e
    return ProductResponse.model_validate(product)


@router.delete(
    "/{product_id}",
    response_model=DeleteResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Delete product",
)
async def delete_product(product_id: str, service: ServiceDep) -> DeleteResponse:
    """Delete a product."""
    try:
        await service.delete_product(product_id)
    except DomainError as e:
        raise domain_error_to_http(e) from e
    return DeleteResponse(success=True, message="Product deleted")


@admin_router.get(
    "/products",
    response_model=ProductListResponse,
    responses={500: {"model": ErrorResponse}},
    summary="List products (admin)",
    description="Same filters as the storefront listing, including quote-hidden products.",
)
async def list_admin_products(
    service: ServiceDep,
    params: Annotated[dict[str, str], Depends(listing_params)],
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int | None = Query(None, ge=1, description="Page size"),
) -> ProductListResponse:
    """List products for the admin panel."""
    return await _list(
        service,
        params,
        page,
        limit or settings.admin_page_limit,
        show_hidden_quotes=True,
    )
