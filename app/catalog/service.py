"""Product service for catalog operations.

High-level service that combines the repositories, the filter engine
and the consistency guard into the operations exposed by the API:
listing (all, available to a user, by seller, filtered), lookup,
create, partial update and cascading delete.
"""

from dataclasses import dataclass
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.catalog.filters import PageRequest, PaginatedResult, ProductFilter
from app.catalog.guard import ConsistencyGuard, ProductChanges
from app.catalog.models import Product, Seller
from app.catalog.repository import ProductRepository, SellerRepository, UserRepository
from app.domain.exceptions import (
    EntityKind,
    EntityNotFoundError,
    NoMatchingProductsError,
)

logger = structlog.get_logger()


# ============================================================================
# Data Transfer Objects
# ============================================================================


@dataclass
class ProductDTO:
    """Product data transfer object."""

    id: str
    name: str
    brand: str
    category: str
    image_url: str | None = None

    @classmethod
    def from_model(cls, product: Product) -> "ProductDTO":
        """Build from an ORM product."""
        return cls(
            id=product.id,
            name=product.name,
            brand=product.brand,
            category=product.category,
            image_url=product.image_url,
        )


@dataclass
class SellerDTO:
    """Seller data transfer object."""

    id: str
    name: str

    @classmethod
    def from_model(cls, seller: Seller) -> "SellerDTO":
        """Build from an ORM seller."""
        return cls(id=seller.id, name=seller.name)


def parse_id(kind: EntityKind, raw_id: str) -> str:
    """Normalize an identifier to canonical UUID text.

    A value that is not a UUID cannot name an existing entity.

    Raises:
        EntityNotFoundError: If ``raw_id`` is not a valid UUID.
    """
    try:
        return str(UUID(str(raw_id)))
    except ValueError:
        raise EntityNotFoundError(kind, str(raw_id)) from None


# ============================================================================
# Product Service
# ============================================================================


class ProductService:
    """Service for product catalog operations.

    Holds no state between calls; every operation reads the store
    through the session it was created with, and mutations become
    visible when that session commits.

    Example usage:
        async with async_session_factory() as session:
            service = ProductService(session)
            page = await service.get_available_for_user(user_id, PageRequest(0, 20))
            await session.commit()
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.products = ProductRepository(session)
        self.sellers = SellerRepository(session)
        self.users = UserRepository(session)
        self.guard = ConsistencyGuard(self.products)

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def get_available_for_user(
        self,
        user_id: str,
        page: PageRequest,
    ) -> PaginatedResult[ProductDTO]:
        """List products a user can see.

        Products only sold by sellers on the user's blacklist are hidden,
        and products without any seller are never listed.

        Args:
            user_id: User ID.
            page: Page cursor.

        Returns:
            Page of products.

        Raises:
            EntityNotFoundError: If the user does not exist.
        """
        user_id = await self._require_user(user_id)
        result = await self.products.find_available_for_user(user_id, page)
        return result.map(ProductDTO.from_model)

    async def get_all(self, page: PageRequest) -> PaginatedResult[ProductDTO]:
        """List every product, including those without sellers."""
        result = await self.products.find_all(page)
        return result.map(ProductDTO.from_model)

    async def get_products_by_seller_id(
        self,
        seller_id: str,
        page: PageRequest,
    ) -> PaginatedResult[ProductDTO]:
        """List products a seller lists.

        Raises:
            EntityNotFoundError: If the seller does not exist.
        """
        seller_id = parse_id(EntityKind.SELLER, seller_id)
        if await self.sellers.get_by_id(seller_id) is None:
            raise EntityNotFoundError(EntityKind.SELLER, seller_id)

        result = await self.products.find_by_seller(seller_id, page)
        return result.map(ProductDTO.from_model)

    async def get_sellers_by_product_id(
        self,
        product_id: str,
        page: PageRequest,
    ) -> PaginatedResult[SellerDTO]:
        """List sellers that list a product.

        Raises:
            EntityNotFoundError: If the product does not exist.
        """
        product = await self._require_product(product_id)
        result = await self.sellers.find_by_product(product.id, page)
        return result.map(SellerDTO.from_model)

    async def filter_for_user(
        self,
        user_id: str,
        filters: ProductFilter,
        page: PageRequest,
    ) -> PaginatedResult[ProductDTO]:
        """Filter the products a user can see.

        Args:
            user_id: User ID.
            filters: Name/category/brand filter.
            page: Page cursor.

        Returns:
            Non-empty page of products.

        Raises:
            EntityNotFoundError: If the user does not exist.
            NoMatchingProductsError: If the page is empty.
        """
        user_id = await self._require_user(user_id)
        result = await self.products.find_filtered(filters, page, user_id=user_id)
        return self._non_empty(result, filters, page, user_id=user_id)

    async def filter_global(
        self,
        filters: ProductFilter,
        page: PageRequest,
    ) -> PaginatedResult[ProductDTO]:
        """Filter all products regardless of sellers.

        Raises:
            NoMatchingProductsError: If the page is empty.
        """
        result = await self.products.find_filtered(filters, page)
        return self._non_empty(result, filters, page)

    # ------------------------------------------------------------------
    # Single product
    # ------------------------------------------------------------------

    async def get_by_id(self, product_id: str) -> ProductDTO:
        """Get a product.

        Raises:
            EntityNotFoundError: If the product does not exist.
        """
        product = await self._require_product(product_id)
        return ProductDTO.from_model(product)

    async def create(
        self,
        name: str,
        brand: str,
        category: str,
        image_url: str | None = None,
    ) -> ProductDTO:
        """Create a product with a fresh id.

        Raises:
            ProductAlreadyExistsError: If the name/brand/category triple is taken.
        """
        await self.guard.validate_unique_on_create(name, brand, category)

        product = Product(
            id=str(uuid4()),
            name=name,
            brand=brand,
            category=category,
            image_url=image_url,
        )
        product = await self.guard.insert(product)

        logger.info(
            "Product created",
            product_id=product.id,
            name=name,
            brand=brand,
            category=category,
        )
        return ProductDTO.from_model(product)

    async def update(self, product_id: str, changes: ProductChanges) -> ProductDTO:
        """Merge non-blank incoming fields into a product.

        The uniqueness check runs against the merged triple, excluding
        the product itself, so re-submitting current values succeeds.

        Raises:
            EntityNotFoundError: If the product does not exist.
            ProductAlreadyExistsError: If another product holds the merged triple.
        """
        product = await self._require_product(product_id)

        name, brand, category = self.guard.merged_key(product, changes)
        await self.guard.validate_unique_on_update(name, brand, category, exclude_id=product.id)

        updated_fields = self.guard.apply_partial_update(product, changes)
        product = await self.guard.save_update(product)

        logger.info(
            "Product updated",
            product_id=product.id,
            updated_fields=updated_fields,
        )
        return ProductDTO.from_model(product)

    async def delete_by_id(self, product_id: str) -> ProductDTO:
        """Delete a product and every association that references it.

        Returns:
            The deleted product.

        Raises:
            EntityNotFoundError: If the product does not exist.
        """
        product = await self._require_product(product_id)
        deleted = ProductDTO.from_model(product)

        result = await self.guard.cascade_delete(product)

        logger.info(
            "Product deleted",
            product_id=result.product_id,
            seller_links_removed=result.seller_links_removed,
            favorite_links_removed=result.favorite_links_removed,
        )
        return deleted

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _require_user(self, user_id: str) -> str:
        """Resolve a user id, failing if the user does not exist."""
        user_id = parse_id(EntityKind.USER, user_id)
        if await self.users.get_by_id(user_id) is None:
            raise EntityNotFoundError(EntityKind.USER, user_id)
        return user_id

    async def _require_product(self, product_id: str) -> Product:
        """Load a product, failing if it does not exist."""
        product_id = parse_id(EntityKind.PRODUCT, product_id)
        product = await self.products.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(EntityKind.PRODUCT, product_id)
        return product

    @staticmethod
    def _non_empty(
        result: PaginatedResult[Product],
        filters: ProductFilter,
        page: PageRequest,
        user_id: str | None = None,
    ) -> PaginatedResult[ProductDTO]:
        """Map a filter result, treating an empty page as an error."""
        if result.is_empty:
            details = {**filters.to_dict(), "page": page.page, "size": page.size}
            if user_id is not None:
                details["user_id"] = user_id
            logger.info("No products matched filter", **details)
            raise NoMatchingProductsError(details)
        return result.map(ProductDTO.from_model)


def get_product_service(session: AsyncSession) -> ProductService:
    """Get product service instance.

    Args:
        session: Session scoped to the current request.

    Returns:
        ProductService instance.
    """
    return ProductService(session)
