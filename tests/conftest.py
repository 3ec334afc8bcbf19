"""Shared fixtures for catalog tests.

Every test gets a fresh in-memory SQLite database and a builder for
arranging sellers, products, users and the rows linking them.
"""

import os

# Settings are read on first import of the app package
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SEED_ON_STARTUP", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from collections.abc import AsyncGenerator, Iterable
from uuid import uuid4

import pytest_asyncio
from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.catalog.models import (
    Product,
    Seller,
    User,
    seller_products,
    user_blacklisted_sellers,
    user_favorite_products,
)
from app.infrastructure.database import Base


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory database with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test database."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging and asserting state."""
    async with session_factory() as session:
        yield session


# ============================================================================
# Catalog Builder
# ============================================================================


class CatalogBuilder:
    """Inserts catalog rows directly, bypassing the service under test."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def seller(self, name: str) -> Seller:
        """Insert a seller."""
        seller = Seller(id=str(uuid4()), name=name)
        self.session.add(seller)
        await self.session.flush()
        return seller

    async def product(
        self,
        name: str,
        brand: str = "Acme",
        category: str = "Toys",
        sellers: Iterable[Seller] = (),
        image_url: str | None = None,
    ) -> Product:
        """Insert a product listed by ``sellers``."""
        product = Product(
            id=str(uuid4()),
            name=name,
            brand=brand,
            category=category,
            image_url=image_url,
        )
        self.session.add(product)
        await self.session.flush()
        for seller in sellers:
            await self.session.execute(
                insert(seller_products).values(seller_id=seller.id, product_id=product.id)
            )
        return product

    async def user(
        self,
        username: str,
        blacklist: Iterable[Seller] = (),
        favorites: Iterable[Product] = (),
    ) -> User:
        """Insert a user with a blacklist and favorites."""
        user = User(id=str(uuid4()), username=username)
        self.session.add(user)
        await self.session.flush()
        for seller in blacklist:
            await self.session.execute(
                insert(user_blacklisted_sellers).values(user_id=user.id, seller_id=seller.id)
            )
        for product in favorites:
            await self.session.execute(
                insert(user_favorite_products).values(user_id=user.id, product_id=product.id)
            )
        return user

    async def commit(self) -> None:
        """Commit everything arranged so far."""
        await self.session.commit()

    async def seller_product_ids(self, seller: Seller) -> set[str]:
        """Product ids currently listed by a seller."""
        result = await self.session.execute(
            select(seller_products.c.product_id).where(seller_products.c.seller_id == seller.id)
        )
        return set(result.scalars().all())

    async def favorite_product_ids(self, user: User) -> set[str]:
        """Product ids currently favorited by a user."""
        result = await self.session.execute(
            select(user_favorite_products.c.product_id).where(
                user_favorite_products.c.user_id == user.id
            )
        )
        return set(result.scalars().all())


@pytest_asyncio.fixture
async def catalog(session: AsyncSession) -> CatalogBuilder:
    """Builder for arranging catalog state."""
    return CatalogBuilder(session)
