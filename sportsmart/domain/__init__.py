"""Domain layer module.

Contains the catalog's business errors.
"""

from sportsmart.domain.exceptions import (
    BulkRowError,
    DomainError,
    DuplicateSkuError,
    ProductNotFoundError,
    UnresolvedReferenceError,
    ValidationError,
)

__all__ = [
    "BulkRowError",
    "DomainError",
    "DuplicateSkuError",
    "ProductNotFoundError",
    "UnresolvedReferenceError",
    "ValidationError",
]
