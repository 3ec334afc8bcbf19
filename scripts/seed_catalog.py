#!/usr/bin/env python3
"""Seed catalog script.

Creates the database tables and loads the bootstrap dataset when the
seller and product tables are both empty.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --database-url sqlite+aiosqlite:///./catalog.db
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


async def run() -> dict:
    """Create tables and load seed data.

    Returns:
        Loading result.
    """
    from app.catalog.seed import load_seed_data
    from app.infrastructure.database import async_session_factory, create_tables

    await create_tables()

    async with async_session_factory() as session:
        return await load_seed_data(session)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Load the bootstrap catalog dataset into an empty database",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="Database URL (default: DATABASE_URL from the environment)",
    )
    args = parser.parse_args()

    # Settings are read on first import, so the override must come first
    if args.database_url:
        os.environ["DATABASE_URL"] = args.database_url

    print("=" * 60)
    print("Catalog Seeder")
    print("=" * 60)

    result = asyncio.run(run())

    if result["loaded"]:
        print(f"  ✓ Sellers: {result['sellers']}")
        print(f"  ✓ Products: {result['products']}")
        print(f"  ✓ Users: {result['users']}")
    else:
        print("  - Catalog already populated, nothing loaded")

    print("=" * 60)


if __name__ == "__main__":
    main()
