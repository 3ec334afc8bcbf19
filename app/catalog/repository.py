"""Repositories for catalog database operations.

Provides lookups, paginated scans and writes for products, sellers and
users. Every listing returns a ``PaginatedResult`` built from one page
query and one count query sharing the same conditions.
"""

from collections.abc import Sequence

from sqlalchemy import and_, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from app.catalog.filters import (
    PageRequest,
    PaginatedResult,
    ProductFilter,
    available_to_user,
    product_ordering,
)
from app.catalog.models import (
    Product,
    Seller,
    User,
    seller_products,
    user_favorite_products,
)


class ProductRepository:
    """Repository for Product database operations.

    Handles all database interactions for products including
    visibility filtering, composite-key lookups and pagination.

    Example usage:
        async with async_session_factory() as session:
            repo = ProductRepository(session)
            page = await repo.find_filtered(
                ProductFilter.of(categories=["Toys"]),
                PageRequest(page=0, size=20),
                user_id=user.id,
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def save(self, product: Product) -> Product:
        """Save a product to database.

        Flushes immediately so constraint violations surface here.

        Args:
            product: Product to save.

        Returns:
            Saved product.
        """
        self.session.add(product)
        await self.session.flush()
        return product

    async def get_by_id(self, product_id: str) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID.

        Returns:
            Product if found, None otherwise.
        """
        result = await self.session.execute(select(Product).where(Product.id == product_id))
        return result.scalar_one_or_none()

    async def find_by_composite_key(
        self,
        name: str,
        brand: str,
        category: str,
        exclude_id: str | None = None,
    ) -> Product | None:
        """Find the product holding a (name, brand, category) triple.

        Args:
            name: Product name.
            brand: Brand name.
            category: Category.
            exclude_id: Product to leave out of the match set.

        Returns:
            Matching product if any.
        """
        conditions = [
            Product.name == name,
            Product.brand == brand,
            Product.category == category,
        ]
        if exclude_id is not None:
            conditions.append(Product.id != exclude_id)

        result = await self.session.execute(select(Product).where(and_(*conditions)))
        return result.scalars().first()

    async def find_all(self, page: PageRequest) -> PaginatedResult[Product]:
        """Every product, unfiltered.

        Args:
            page: Page cursor.

        Returns:
            Page of products.
        """
        return await self._find_page([], page)

    async def find_available_for_user(
        self,
        user_id: str,
        page: PageRequest,
    ) -> PaginatedResult[Product]:
        """Products listed by at least one seller the user has not blacklisted.

        Args:
            user_id: User whose blacklist applies.
            page: Page cursor.

        Returns:
            Page of products.
        """
        return await self._find_page([available_to_user(user_id)], page)

    async def find_filtered(
        self,
        filters: ProductFilter,
        page: PageRequest,
        user_id: str | None = None,
    ) -> PaginatedResult[Product]:
        """Products matching a filter, optionally restricted to a user's view.

        Args:
            filters: Name/category/brand filter.
            page: Page cursor.
            user_id: When set, apply the user's seller blacklist.

        Returns:
            Page of products.
        """
        conditions = filters.conditions()
        if user_id is not None:
            conditions.append(available_to_user(user_id))
        return await self._find_page(conditions, page)

    async def find_by_seller(
        self,
        seller_id: str,
        page: PageRequest,
    ) -> PaginatedResult[Product]:
        """Products listed by a seller.

        Args:
            seller_id: Seller ID.
            page: Page cursor.

        Returns:
            Page of products.
        """
        listed = select(seller_products.c.product_id).where(
            seller_products.c.seller_id == seller_id
        )
        return await self._find_page([Product.id.in_(listed)], page)

    async def is_empty(self) -> bool:
        """Check whether the product table has no rows."""
        result = await self.session.execute(select(Product.id).limit(1))
        return result.first() is None

    async def delete_associations(self, product_id: str) -> tuple[int, int]:
        """Delete every seller listing and user favorite of a product.

        Args:
            product_id: Product ID.

        Returns:
            Tuple of (seller listings removed, favorites removed).
        """
        listings = await self.session.execute(
            delete(seller_products).where(seller_products.c.product_id == product_id)
        )
        favorites = await self.session.execute(
            delete(user_favorite_products).where(
                user_favorite_products.c.product_id == product_id
            )
        )
        return listings.rowcount, favorites.rowcount

    async def delete(self, product: Product) -> None:
        """Delete a product row.

        Args:
            product: Product to delete.
        """
        await self.session.delete(product)
        await self.session.flush()

    async def _find_page(
        self,
        conditions: Sequence[ColumnElement[bool]],
        page: PageRequest,
    ) -> PaginatedResult[Product]:
        """Run the page query and the count query for ``conditions``.

        Args:
            conditions: Conditions combined with AND; empty means all rows.
            page: Page cursor.

        Returns:
            Page of products with the total match count.
        """
        query = select(Product)
        count_query = select(func.count(Product.id))

        if conditions:
            query = query.where(and_(*conditions))
            count_query = count_query.where(and_(*conditions))

        query = query.order_by(*product_ordering()).limit(page.limit).offset(page.offset)

        result = await self.session.execute(query)
        total = await self.session.execute(count_query)

        return PaginatedResult(
            items=list(result.scalars().all()),
            total=total.scalar_one(),
            page=page.page,
            size=page.size,
        )


class SellerRepository:
    """Repository for Seller database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def get_by_id(self, seller_id: str) -> Seller | None:
        """Get seller by ID.

        Args:
            seller_id: Seller ID.

        Returns:
            Seller if found, None otherwise.
        """
        result = await self.session.execute(select(Seller).where(Seller.id == seller_id))
        return result.scalar_one_or_none()

    async def find_by_product(
        self,
        product_id: str,
        page: PageRequest,
    ) -> PaginatedResult[Seller]:
        """Sellers listing a product, ordered by name.

        Args:
            product_id: Product ID.
            page: Page cursor.

        Returns:
            Page of sellers.
        """
        listing = select(seller_products.c.seller_id).where(
            seller_products.c.product_id == product_id
        )
        condition = Seller.id.in_(listing)

        query = (
            select(Seller)
            .where(condition)
            .order_by(Seller.name.asc(), Seller.id.asc())
            .limit(page.limit)
            .offset(page.offset)
        )
        result = await self.session.execute(query)
        total = await self.session.execute(select(func.count(Seller.id)).where(condition))

        return PaginatedResult(
            items=list(result.scalars().all()),
            total=total.scalar_one(),
            page=page.page,
            size=page.size,
        )

    async def is_empty(self) -> bool:
        """Check whether the seller table has no rows."""
        result = await self.session.execute(select(Seller.id).limit(1))
        return result.first() is None


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, user_id: str) -> User | None:
        """Get user by ID, or None."""
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()
