"""Domain layer for the catalog service.

Holds the error taxonomy shared by the catalog and API layers.
"""

from app.domain.exceptions import (
    DomainError,
    EntityKind,
    EntityNotFoundError,
    InvalidPaginationError,
    NoMatchingProductsError,
    ProductAlreadyExistsError,
)

__all__ = [
    "DomainError",
    "EntityKind",
    "EntityNotFoundError",
    "InvalidPaginationError",
    "NoMatchingProductsError",
    "ProductAlreadyExistsError",
]
