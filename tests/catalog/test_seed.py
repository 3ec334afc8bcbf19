"""Tests for the bootstrap dataset loader."""

import pytest
from sqlalchemy import func, select

from app.catalog.filters import PageRequest
from app.catalog.models import Product, Seller, User
from app.catalog.seed import PRODUCTS, SELLERS, USERS, build_seed_records, load_seed_data, seed_id
from app.catalog.service import ProductService


class TestSeedRecords:
    """Tests for building seed entities."""

    def test_ids_are_deterministic(self) -> None:
        """The same key always yields the same id."""
        assert seed_id("seller", "Acme Outlet") == seed_id("seller", "Acme Outlet")
        assert seed_id("seller", "Acme Outlet") != seed_id("user", "Acme Outlet")

    def test_build_counts(self) -> None:
        """Every configured record is built."""
        sellers, products, users = build_seed_records()
        assert len(sellers) == len(SELLERS)
        assert len(products) == len(PRODUCTS)
        assert len(users) == len(USERS)

    def test_composite_keys_unique(self) -> None:
        """Seed products respect the uniqueness rule."""
        _, products, _ = build_seed_records()
        keys = [p.composite_key for p in products]
        assert len(keys) == len(set(keys))


class TestLoadSeedData:
    """Tests for loading the dataset."""

    @pytest.mark.asyncio
    async def test_loads_into_empty_catalog(self, session) -> None:
        """An empty catalog receives the full dataset."""
        result = await load_seed_data(session)

        assert result == {
            "loaded": True,
            "sellers": len(SELLERS),
            "products": len(PRODUCTS),
            "users": len(USERS),
        }
        for model, expected in ((Seller, SELLERS), (Product, PRODUCTS), (User, USERS)):
            count = await session.execute(select(func.count()).select_from(model))
            assert count.scalar_one() == len(expected)

    @pytest.mark.asyncio
    async def test_skips_populated_catalog(self, session, catalog) -> None:
        """Existing sellers prevent loading."""
        await catalog.seller("Existing")
        await catalog.commit()

        result = await load_seed_data(session)

        assert result["loaded"] is False
        count = await session.execute(select(func.count()).select_from(Product))
        assert count.scalar_one() == 0

    @pytest.mark.asyncio
    async def test_seeded_blacklist_applies(self, session) -> None:
        """Seeded associations drive visibility."""
        await load_seed_data(session)
        service = ProductService(session)

        bob = seed_id("user", "bob")
        result = await service.get_available_for_user(bob, PageRequest(0, 50))
        visible = {p.name for p in result.items}

        # Only listed by the seller bob blacklisted
        assert "Cotton T-Shirt" not in visible
        assert "Noise Cancelling Headphones" not in visible
        # Also listed by a seller bob accepts
        assert "Building Blocks Set" in visible
        # Never listed by anyone
        assert "Desk Lamp" not in visible
