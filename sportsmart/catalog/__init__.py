"""Product Catalog.

Provides the storefront's faceted product listing, product CRUD,
bulk import and the URL-backed filter state of the filter panel.
"""

from sportsmart.catalog.bulk import BulkUploadPipeline, BulkUploadResult, TaxonomyLookup
from sportsmart.catalog.filters import (
    FilterClause,
    ProductFilter,
    SortOption,
    build_filter_clause,
    catalog_join,
)
from sportsmart.catalog.identifiers import IdentifierResolver, is_uuid, slugify, split_tokens
from sportsmart.catalog.models import Brand, Category, Collection, Product, ProductTag, SubCategory
from sportsmart.catalog.repository import CatalogPage, CatalogQueryExecutor, ProductRepository
from sportsmart.catalog.service import CatalogService
from sportsmart.catalog.taxonomy import TaxonomyRepository
from sportsmart.catalog.url_state import FilterState, FilterStateSync, build_filter_url

__all__ = [
    # Models
    "Brand",
    "Category",
    "Collection",
    "Product",
    "ProductTag",
    "SubCategory",
    # Identifiers
    "IdentifierResolver",
    "is_uuid",
    "slugify",
    "split_tokens",
    # Filters
    "FilterClause",
    "ProductFilter",
    "SortOption",
    "build_filter_clause",
    "catalog_join",
    # Repositories
    "CatalogPage",
    "CatalogQueryExecutor",
    "ProductRepository",
    "TaxonomyRepository",
    # Bulk import
    "BulkUploadPipeline",
    "BulkUploadResult",
    "TaxonomyLookup",
    # Service
    "CatalogService",
    # URL state
    "FilterState",
    "FilterStateSync",
    "build_filter_url",
]
