"""Consistency rules for product mutations.

Keeps the (name, brand, category) triple unique, merges partial
updates and removes a product together with every association row
that references it. All writes go through the caller's session, so
they commit or roll back as one unit with the rest of the request.
"""

from dataclasses import dataclass

import structlog
from sqlalchemy.exc import IntegrityError

from app.catalog.models import Product
from app.catalog.repository import ProductRepository
from app.domain.exceptions import ProductAlreadyExistsError

logger = structlog.get_logger()

# Fields an update may overwrite
MERGEABLE_FIELDS = ("name", "category", "brand", "image_url")


def is_blank(value: str | None) -> bool:
    """Check whether a value is absent, empty or whitespace-only."""
    return value is None or not value.strip()


def merge_value(current: str, incoming: str | None) -> str:
    """Keep ``current`` unless ``incoming`` is present and non-blank."""
    if incoming is None or is_blank(incoming):
        return current
    return incoming


@dataclass(frozen=True)
class ProductChanges:
    """Incoming values for a partial product update.

    ``None`` and blank strings leave the stored value untouched.
    """

    name: str | None = None
    brand: str | None = None
    category: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class CascadeResult:
    """Rows removed by a cascade delete."""

    product_id: str
    seller_links_removed: int
    favorite_links_removed: int


class ConsistencyGuard:
    """Enforces catalog invariants around product writes.

    The application-level uniqueness check gives a precise error with
    the conflicting id; the unique constraint on ``products`` catches
    writers that race past it.
    """

    def __init__(self, repository: ProductRepository) -> None:
        """Initialize guard.

        Args:
            repository: Product repository bound to the request session.
        """
        self.repository = repository

    async def validate_unique_on_create(self, name: str, brand: str, category: str) -> None:
        """Fail if any product already holds the triple.

        Raises:
            ProductAlreadyExistsError: With the existing product's id.
        """
        existing = await self.repository.find_by_composite_key(name, brand, category)
        if existing is not None:
            logger.warning(
                "Duplicate product rejected",
                name=name,
                brand=brand,
                category=category,
                conflicting_id=existing.id,
            )
            raise ProductAlreadyExistsError(existing.id)

    async def validate_unique_on_update(
        self,
        name: str,
        brand: str,
        category: str,
        exclude_id: str,
    ) -> None:
        """Fail if a product other than ``exclude_id`` holds the triple.

        Raises:
            ProductAlreadyExistsError: With the other product's id.
        """
        existing = await self.repository.find_by_composite_key(
            name, brand, category, exclude_id=exclude_id
        )
        if existing is not None:
            logger.warning(
                "Conflicting product update rejected",
                product_id=exclude_id,
                conflicting_id=existing.id,
            )
            raise ProductAlreadyExistsError(existing.id)

    @staticmethod
    def merged_key(product: Product, changes: ProductChanges) -> tuple[str, str, str]:
        """Get the (name, brand, category) the product would have after merging."""
        return (
            merge_value(product.name, changes.name),
            merge_value(product.brand, changes.brand),
            merge_value(product.category, changes.category),
        )

    @staticmethod
    def apply_partial_update(product: Product, changes: ProductChanges) -> list[str]:
        """Overwrite the fields that arrive present and non-blank.

        Args:
            product: Product to modify in place.
            changes: Incoming values.

        Returns:
            Names of the fields that were overwritten.
        """
        updated = []
        for field_name in MERGEABLE_FIELDS:
            value = getattr(changes, field_name)
            if not is_blank(value):
                setattr(product, field_name, value)
                updated.append(field_name)
        return updated

    async def insert(self, product: Product) -> Product:
        """Insert a product, translating a constraint race into a conflict.

        Raises:
            ProductAlreadyExistsError: When another writer took the triple.
        """
        name, brand, category = product.composite_key
        try:
            return await self.repository.save(product)
        except IntegrityError:
            await self.repository.session.rollback()
            await self._raise_conflict(name, brand, category, None)
            raise

    async def save_update(self, product: Product) -> Product:
        """Flush an updated product, translating a constraint race into a conflict.

        Raises:
            ProductAlreadyExistsError: When another writer took the triple.
        """
        product_id = product.id
        name, brand, category = product.composite_key
        try:
            return await self.repository.save(product)
        except IntegrityError:
            await self.repository.session.rollback()
            await self._raise_conflict(name, brand, category, product_id)
            raise

    async def cascade_delete(self, product: Product) -> CascadeResult:
        """Remove a product together with its seller listings and favorites.

        Args:
            product: Product to delete.

        Returns:
            Counts of association rows removed.
        """
        product_id = product.id
        seller_links, favorite_links = await self.repository.delete_associations(product_id)
        await self.repository.delete(product)

        return CascadeResult(
            product_id=product_id,
            seller_links_removed=seller_links,
            favorite_links_removed=favorite_links,
        )

    async def _raise_conflict(
        self,
        name: str,
        brand: str,
        category: str,
        exclude_id: str | None,
    ) -> None:
        """Raise ``ProductAlreadyExistsError`` for the current holder of the triple."""
        existing = await self.repository.find_by_composite_key(
            name, brand, category, exclude_id=exclude_id
        )
        if existing is not None:
            logger.warning(
                "Uniqueness constraint violated by concurrent write",
                conflicting_id=existing.id,
            )
            raise ProductAlreadyExistsError(existing.id)
