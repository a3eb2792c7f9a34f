"""Domain exceptions.

All catalog-level errors that represent business rule violations.
Routers translate these into HTTP responses; the bulk upload pipeline
records them per row instead of failing the whole batch.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the API layer.
    """

    error_code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationError(DomainError):
    """Raised when input is missing required fields or is malformed."""

    error_code = "VALIDATION_ERROR"


class DuplicateSkuError(ValidationError):
    """Raised when a SKU is already taken by another product."""

    error_code = "DUPLICATE_SKU"

    def __init__(self, sku: str) -> None:
        """Initialize duplicate SKU error.

        Args:
            sku: The conflicting SKU.
        """
        super().__init__("SKU already exists", details={"sku": sku})


# ============================================================================
# Lookup Errors
# ============================================================================


class ProductNotFoundError(DomainError):
    """Raised when a product lookup by id or slug finds nothing."""

    error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, key: str) -> None:
        """Initialize product not found error.

        Args:
            key: The id or slug that was looked up.
        """
        super().__init__("Product not found", details={"key": key})


# ============================================================================
# Bulk Upload Errors
# ============================================================================


class BulkRowError(DomainError):
    """Base class for errors scoped to a single bulk upload row.

    The message is prefixed with the 1-based row number so it can be
    shown to an admin as-is.
    """

    error_code = "BULK_ROW_ERROR"

    def __init__(self, row_number: int, message: str) -> None:
        """Initialize bulk row error.

        Args:
            row_number: 1-based position of the row in the upload.
            message: Description of the problem.
        """
        super().__init__(f"Row {row_number}: {message}", details={"row": row_number})
        self.row_number = row_number


class UnresolvedReferenceError(BulkRowError):
    """Raised when a row names a category, sub-category or brand that doesn't exist."""

    error_code = "UNRESOLVED_REFERENCE"

    def __init__(self, row_number: int, kind: str, name: str, scope: str | None = None) -> None:
        """Initialize unresolved reference error.

        Args:
            row_number: 1-based position of the row.
            kind: Human label for the reference ("Category", "Brand", ...).
            name: The name given in the row.
            scope: Optional parent name the lookup was scoped to.
        """
        message = f'{kind} "{name}" not found'
        if scope is not None:
            message += f' in category "{scope}"'
        super().__init__(row_number, message)
        self.kind = kind
        self.name = name
