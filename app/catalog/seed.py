"""Bootstrap dataset for an empty catalog.

Loads a fixed set of sellers, products and users, together with the
listings, favorites and blacklists linking them. Identifiers are
derived deterministically so repeated loads into fresh databases
produce the same ids.
"""

import uuid
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.catalog.models import Product, Seller, User
from app.catalog.repository import ProductRepository, SellerRepository

logger = structlog.get_logger()


# ============================================================================
# Constants
# ============================================================================

SEED_NAMESPACE = uuid.UUID("6f1c2a4e-3b7d-4e59-9a0c-1d2e3f405162")

SELLERS = [
    "Acme Outlet",
    "Northwind Traders",
    "Globex Retail",
    "Contoso Market",
]

# (name, brand, category, sellers)
PRODUCTS: list[tuple[str, str, str, list[str]]] = [
    ("Galaxy Phone 12", "Globex", "Electronics", ["Globex Retail", "Contoso Market"]),
    ("Noise Cancelling Headphones", "Acme", "Electronics", ["Acme Outlet"]),
    ("Smart Watch Pro", "Contoso", "Electronics", ["Contoso Market"]),
    ("Building Blocks Set", "Acme", "Toys", ["Acme Outlet", "Northwind Traders"]),
    ("Remote Control Car", "Northwind", "Toys", ["Northwind Traders"]),
    ("Plush Bear", "Globex", "Toys", ["Globex Retail"]),
    ("Running Shoes", "Northwind", "Clothing", ["Northwind Traders", "Acme Outlet"]),
    ("Cotton T-Shirt", "Acme", "Clothing", ["Acme Outlet"]),
    ("Winter Jacket", "Contoso", "Clothing", ["Contoso Market"]),
    ("Espresso Machine", "Globex", "Home", ["Globex Retail"]),
    ("Cast Iron Skillet", "Northwind", "Home", ["Northwind Traders", "Contoso Market"]),
    ("Desk Lamp", "Contoso", "Home", []),
]

# (username, blacklisted sellers, favorite products)
USERS: list[tuple[str, list[str], list[str]]] = [
    ("alice", [], ["Plush Bear", "Desk Lamp"]),
    ("bob", ["Acme Outlet"], ["Running Shoes"]),
    ("carol", ["Northwind Traders", "Globex Retail"], ["Galaxy Phone 12"]),
]


def seed_id(kind: str, key: str) -> str:
    """Derive a stable UUID for a seed record.

    Args:
        kind: Record kind (seller, product, user).
        key: Natural key within the kind.

    Returns:
        UUID string.
    """
    return str(uuid.uuid5(SEED_NAMESPACE, f"{kind}:{key}"))


def _image_url(product_id: str) -> str:
    """Placeholder image URL for a seed product."""
    return f"https://picsum.photos/seed/{product_id[:8]}/400/400"


def build_seed_records() -> tuple[list[Seller], list[Product], list[User]]:
    """Build the seed entities with their associations attached.

    Returns:
        Tuple of (sellers, products, users).
    """
    sellers = {name: Seller(id=seed_id("seller", name), name=name) for name in SELLERS}

    products: dict[str, Product] = {}
    for name, brand, category, listed_by in PRODUCTS:
        product_id = seed_id("product", f"{name}|{brand}|{category}")
        product = Product(
            id=product_id,
            name=name,
            brand=brand,
            category=category,
            image_url=_image_url(product_id),
        )
        products[name] = product
        for seller_name in listed_by:
            sellers[seller_name].products.append(product)

    users = []
    for username, blacklist, favorites in USERS:
        user = User(id=seed_id("user", username), username=username)
        user.blacklisted_sellers.extend(sellers[s] for s in blacklist)
        user.favorite_products.extend(products[p] for p in favorites)
        users.append(user)

    return list(sellers.values()), list(products.values()), users


async def load_seed_data(session: AsyncSession) -> dict[str, Any]:
    """Load the seed dataset when both sellers and products are empty.

    Args:
        session: Async SQLAlchemy session; committed on success.

    Returns:
        Loading result with counts; ``loaded`` is False when skipped.
    """
    sellers_empty = await SellerRepository(session).is_empty()
    products_empty = await ProductRepository(session).is_empty()

    if not (sellers_empty and products_empty):
        logger.info("Catalog already populated, skipping seed data")
        return {"loaded": False, "sellers": 0, "products": 0, "users": 0}

    sellers, products, users = build_seed_records()
    session.add_all([*sellers, *products, *users])
    await session.commit()

    logger.info(
        "Seed data loaded",
        sellers=len(sellers),
        products=len(products),
        users=len(users),
    )
    return {
        "loaded": True,
        "sellers": len(sellers),
        "products": len(products),
        "users": len(users),
    }
