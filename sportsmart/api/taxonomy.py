"""Taxonomy API endpoints.

Read-only lists behind the storefront menus and filter panel, plus the
admin inventory tree.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sportsmart.api.schemas import (
    BrandResponse,
    CategoryResponse,
    CollectionResponse,
    HierarchyCategory,
    SubCategoryResponse,
)
from sportsmart.catalog.identifiers import is_uuid
from sportsmart.catalog.taxonomy import TaxonomyRepository
from sportsmart.infrastructure.database import get_session

router = APIRouter(prefix="/api", tags=["Taxonomy"])


def get_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> TaxonomyRepository:
    """Get taxonomy repository bound to the request session."""
    return TaxonomyRepository(session)


RepositoryDep = Annotated[TaxonomyRepository, Depends(get_repository)]


@router.get("/categories", response_model=list[CategoryResponse], summary="List categories")
async def list_categories(repository: RepositoryDep) -> list[CategoryResponse]:
    """List categories with their active sub-category counts."""
    categories = await repository.list_categories()
    return [CategoryResponse.model_validate(c) for c in categories]


@router.get(
    "/sub-categories", response_model=list[SubCategoryResponse], summary="List sub-categories"
)
async def list_sub_categories(
    repository: RepositoryDep,
    category_id: str | None = Query(None, description="Parent category id"),
) -> list[SubCategoryResponse]:
    """List active sub-categories with brand counts."""
    if category_id is not None and not is_uuid(category_id):
        # Malformed ids match nothing
        return []
    sub_categories = await repository.list_sub_categories(category_id and category_id.lower())
    return [SubCategoryResponse.model_validate(s) for s in sub_categories]


@router.get("/brands", response_model=list[BrandResponse], summary="List brands")
async def list_brands(
    repository: RepositoryDep,
    category_id: str | None = Query(None, description="Only brands stocked in this category"),
    sub_category_id: int | None = Query(
        None, description="Only brands stocked in this sub-category"
    ),
) -> list[BrandResponse]:
    """List active brands with product counts."""
    if category_id is not None and not is_uuid(category_id):
        return []
    brands = await repository.list_brands(
        category_id=category_id and category_id.lower(),
        sub_category_id=sub_category_id,
    )
    return [BrandResponse.model_validate(b) for b in brands]


@router.get("/collections", response_model=list[CollectionResponse], summary="List collections")
async def list_collections(repository: RepositoryDep) -> list[CollectionResponse]:
    """List active collections with their categories."""
    collections = await repository.list_collections()
    return [CollectionResponse.model_validate(c) for c in collections]


@router.get(
    "/admin/inventory-hierarchy",
    response_model=list[HierarchyCategory],
    response_model_by_alias=True,
    tags=["Admin"],
    summary="Inventory hierarchy",
)
async def inventory_hierarchy(repository: RepositoryDep) -> list[HierarchyCategory]:
    """Product counts per category, sub-category and brand."""
    hierarchy = await repository.inventory_hierarchy()
    return [HierarchyCategory.model_validate(node) for node in hierarchy]
