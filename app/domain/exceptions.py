"""Domain exceptions.

All domain-level errors raised by the catalog. The API layer maps each
one to an HTTP status and a machine-readable error code; nothing inside
the catalog retries or recovers from them.
"""

from enum import Enum
from typing import Any


class EntityKind(str, Enum):
    """Kinds of entity an identifier can refer to."""

    USER = "User"
    PRODUCT = "Product"
    SELLER = "Seller"


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
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
# Lookup Errors
# ============================================================================


class EntityNotFoundError(DomainError):
    """Raised when a referenced user, product or seller does not exist."""

    def __init__(self, kind: EntityKind, entity_id: str) -> None:
        """Initialize entity not found error.

        Args:
            kind: Kind of the missing entity.
            entity_id: Identifier that was looked up.
        """
        self.kind = EntityKind(kind)
        self.entity_id = entity_id
        super().__init__(
            f"{self.kind.value} not found: {entity_id}",
            details={"kind": self.kind.value, "id": entity_id},
        )

    @property
    def error_code(self) -> str:  # type: ignore[override]
        """Error code derived from the entity kind, e.g. ``USER_NOT_FOUND``."""
        return f"{self.kind.value.upper()}_NOT_FOUND"


class NoMatchingProductsError(DomainError):
    """Raised when a filter request yields an empty page."""

    error_code = "NO_MATCHING_PRODUCTS"

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        """Initialize no matching products error.

        Args:
            details: Filter and pagination values of the failed request.
        """
        super().__init__("No products found for the given filter", details=details)


# ============================================================================
# Consistency Errors
# ============================================================================


class ProductAlreadyExistsError(DomainError):
    """Raised when a name/brand/category triple is already taken."""

    error_code = "PRODUCT_ALREADY_EXISTS"

    def __init__(self, conflicting_id: str) -> None:
        """Initialize product already exists error.

        Args:
            conflicting_id: ID of the product holding the triple.
        """
        self.conflicting_id = conflicting_id
        super().__init__(
            f"Product already exists: {conflicting_id}",
            details={"kind": EntityKind.PRODUCT.value, "conflicting_id": conflicting_id},
        )


# ============================================================================
# Request Errors
# ============================================================================


class InvalidPaginationError(DomainError):
    """Raised when a page index or page size is out of range."""

    error_code = "INVALID_PAGINATION"

    def __init__(self, page: int, size: int, reason: str) -> None:
        """Initialize invalid pagination error.

        Args:
            page: Requested page index.
            size: Requested page size.
            reason: Explanation of what is wrong.
        """
        super().__init__(
            f"Invalid pagination (page={page}, size={size}): {reason}",
            details={"page": page, "size": size, "reason": reason},
        )
