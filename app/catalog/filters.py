"""Product query and filter engine.

Builds the SQL predicates used to decide which products are visible and
which match a filter request, and the pagination types shared by every
listing. Predicates are plain SQLAlchemy expressions so the repository
can reuse them for both the page query and the count query.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import and_, exists, select
from sqlalchemy.sql.elements import ColumnElement

from app.catalog.models import Product, seller_products, user_blacklisted_sellers
from app.domain.exceptions import InvalidPaginationError

T = TypeVar("T")

# Largest row offset the database drivers accept (signed 64-bit)
MAX_OFFSET = 2**63 - 1


# ============================================================================
# Filter Request
# ============================================================================


def _normalize(values: Iterable[str] | None) -> frozenset[str] | None:
    """Collapse an absent or empty set into "no constraint"."""
    if not values:
        return None
    cleaned = frozenset(v for v in values if v is not None)
    return cleaned or None


@dataclass(frozen=True)
class ProductFilter:
    """Filter parameters for product browsing.

    Each field is an optional set of accepted values. ``None`` and an
    empty set both mean the field is unconstrained; a non-empty set
    matches any of its members. Fields combine with AND.

    Attributes:
        names: Accepted product names.
        categories: Accepted categories.
        brands: Accepted brands.
    """

    names: frozenset[str] | None = None
    categories: frozenset[str] | None = None
    brands: frozenset[str] | None = None

    @classmethod
    def of(
        cls,
        names: Iterable[str] | None = None,
        categories: Iterable[str] | None = None,
        brands: Iterable[str] | None = None,
    ) -> "ProductFilter":
        """Build a filter, normalizing empty inputs to unconstrained.

        Args:
            names: Product names.
            categories: Categories.
            brands: Brands.

        Returns:
            Normalized filter.
        """
        return cls(
            names=_normalize(names),
            categories=_normalize(categories),
            brands=_normalize(brands),
        )

    @property
    def is_unconstrained(self) -> bool:
        """Check whether no field restricts the result."""
        return self.names is None and self.categories is None and self.brands is None

    def conditions(self) -> list[ColumnElement[bool]]:
        """Get SQL conditions for the constrained fields.

        Returns:
            One ``IN`` condition per constrained field.
        """
        conditions: list[ColumnElement[bool]] = []

        if self.names is not None:
            conditions.append(Product.name.in_(sorted(self.names)))

        if self.categories is not None:
            conditions.append(Product.category.in_(sorted(self.categories)))

        if self.brands is not None:
            conditions.append(Product.brand.in_(sorted(self.brands)))

        return conditions

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging and error details."""
        return {
            "names": sorted(self.names) if self.names else [],
            "categories": sorted(self.categories) if self.categories else [],
            "brands": sorted(self.brands) if self.brands else [],
        }


# ============================================================================
# Visibility Predicates
# ============================================================================


def available_to_user(user_id: str) -> ColumnElement[bool]:
    """Products listed by at least one seller the user has not blacklisted.

    A product sold by both blacklisted and acceptable sellers stays
    visible. With an empty blacklist every product that has at least one
    seller matches; products without sellers never match.

    Args:
        user_id: User whose blacklist applies.

    Returns:
        SQL predicate over ``Product``.
    """
    blacklisted = select(user_blacklisted_sellers.c.seller_id).where(
        user_blacklisted_sellers.c.user_id == user_id
    )
    return exists().where(
        and_(
            seller_products.c.product_id == Product.id,
            seller_products.c.seller_id.not_in(blacklisted),
        )
    )


def product_ordering() -> tuple[Any, ...]:
    """Deterministic ordering so pages are stable between calls."""
    return (Product.name.asc(), Product.brand.asc(), Product.category.asc(), Product.id.asc())


# ============================================================================
# Pagination
# ============================================================================


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page cursor.

    Attributes:
        page: Page index, starting at 0.
        size: Items per page.
    """

    page: int = 0
    size: int = 10

    def __post_init__(self) -> None:
        """Reject negative pages, non-positive sizes and unreachable offsets."""
        if self.page < 0:
            raise InvalidPaginationError(self.page, self.size, "page must be >= 0")
        if self.size < 1:
            raise InvalidPaginationError(self.page, self.size, "size must be >= 1")
        if self.page * self.size > MAX_OFFSET:
            raise InvalidPaginationError(self.page, self.size, "offset out of range")

    @property
    def offset(self) -> int:
        """Calculate offset from page index."""
        return self.page * self.size

    @property
    def limit(self) -> int:
        """Get limit (alias for size)."""
        return self.size


def count_pages(total: int, size: int) -> int:
    """Number of pages needed for ``total`` items, i.e. ceil(total / size)."""
    return (total + size - 1) // size


@dataclass
class PaginatedResult(Generic[T]):
    """Paginated result container.

    Attributes:
        items: Items on the requested page.
        total: Total matching items across all pages.
        page: Requested page index (zero-based).
        size: Requested page size.
    """

    items: list[T]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        """Calculate total pages."""
        return count_pages(self.total, self.size)

    @property
    def is_empty(self) -> bool:
        """Check if the requested page holds no items."""
        return not self.items

    def map(self, fn: Any) -> "PaginatedResult[Any]":
        """Apply ``fn`` to every item, keeping pagination metadata."""
        return PaginatedResult(
            items=[fn(item) for item in self.items],
            total=self.total,
            page=self.page,
            size=self.size,
        )
