"""SQLAlchemy models for the product catalog.

Defines Product, Seller and User tables plus the association tables
linking them. Relationships are stored only as association rows keyed
by id pairs; products hold no back-pointers to sellers or users.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    String,
    Table,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.infrastructure.database import Base

# ============================================================================
# Association Tables
# ============================================================================

seller_products = Table(
    "seller_products",
    Base.metadata,
    Column(
        "seller_id",
        Uuid(as_uuid=False),
        ForeignKey("sellers.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "product_id",
        Uuid(as_uuid=False),
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)

user_favorite_products = Table(
    "user_favorite_products",
    Base.metadata,
    Column(
        "user_id",
        Uuid(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "product_id",
        Uuid(as_uuid=False),
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)

user_blacklisted_sellers = Table(
    "user_blacklisted_sellers",
    Base.metadata,
    Column(
        "user_id",
        Uuid(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "seller_id",
        Uuid(as_uuid=False),
        ForeignKey("sellers.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


# ============================================================================
# Entities
# ============================================================================


class Product(Base):
    """Product entity in the catalog.

    Attributes:
        id: Unique product identifier (UUID).
        name: Product name.
        brand: Brand name.
        category: Category label (e.g. "Toys").
        image_url: Product image URL.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    brand: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Composite uniqueness key, enforced by the store as well as the guard
    __table_args__ = (
        UniqueConstraint("name", "brand", "category", name="uq_products_name_brand_category"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, name={self.name[:30]}, brand={self.brand})>"

    @property
    def composite_key(self) -> tuple[str, str, str]:
        """Get the (name, brand, category) uniqueness key."""
        return (self.name, self.brand, self.category)


class Seller(Base):
    """Seller entity.

    A seller owns its associations to products, not the products
    themselves; many sellers may list the same product.

    Attributes:
        id: Unique seller identifier (UUID).
        name: Seller display name.
        products: Products this seller lists.
    """

    __tablename__ = "sellers"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    products: Mapped[list["Product"]] = relationship(
        "Product",
        secondary=seller_products,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Seller(id={self.id}, name={self.name})>"


class User(Base):
    """User entity.

    Blacklist and favorites are maintained outside the catalog but are
    read here to decide which products a user may see.

    Attributes:
        id: Unique user identifier (UUID).
        username: Login name.
        blacklisted_sellers: Sellers whose inventory is hidden from this user.
        favorite_products: Products this user marked as favorite.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    blacklisted_sellers: Mapped[list["Seller"]] = relationship(
        "Seller",
        secondary=user_blacklisted_sellers,
    )
    favorite_products: Mapped[list["Product"]] = relationship(
        "Product",
        secondary=user_favorite_products,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<User(id={self.id}, username={self.username})>"
