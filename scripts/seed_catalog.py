#!/usr/bin/env python3
"""Seed product catalog script.

Creates the demo taxonomy (collections, categories, sub-categories,
brands) and imports generated products through the bulk upload
pipeline, the same path an admin spreadsheet upload takes.

Usage:
    python scripts/seed_catalog.py --mode small
    python scripts/seed_catalog.py --mode full --seed 7
    python scripts/seed_catalog.py --products-only
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sportsmart.catalog.bulk import BulkUploadPipeline
from sportsmart.catalog.seed import CatalogGenerator, SeedConfig, seed_taxonomy
from sportsmart.infrastructure.config import settings
from sportsmart.infrastructure.database import async_session_factory, create_tables
from sportsmart.infrastructure.logging import configure_logging


async def seed(config: SeedConfig, products_only: bool = False) -> dict:
    """Seed taxonomy and products in one transaction.

    Args:
        config: Generator configuration.
        products_only: Skip the taxonomy (it already exists).

    Returns:
        Seeding result.
    """
    generator = CatalogGenerator(config)

    async with async_session_factory() as session:
        taxonomy = {} if products_only else await seed_taxonomy(session)
        upload = await BulkUploadPipeline(session).run(generator.generate_list())
        await session.commit()

    return {"taxonomy": taxonomy, "upload": upload}


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the sports catalog with demo data",
    )
    parser.add_argument(
        "--mode",
        choices=["small", "full"],
        default="small",
        help="Catalog size: small (3 per sub-category) or full (12 per sub-category)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: 42)",
    )
    parser.add_argument(
        "--products-only",
        action="store_true",
        help="Only upsert products; the taxonomy already exists",
    )

    args = parser.parse_args()
    configure_logging(settings)

    config = SeedConfig.small() if args.mode == "small" else SeedConfig.full()
    if args.seed is not None:
        config.seed = args.seed

    print("=" * 60)
    print("SportsMart Catalog Seeder")
    print("=" * 60)
    print(f"Mode: {args.mode}")
    print(f"Seed: {config.seed}")
    print()

    print("Creating database tables...")
    await create_tables()
    print("Tables ready.")
    print()

    result = await seed(config, products_only=args.products_only)

    for table, count in result["taxonomy"].items():
        print(f"  ✓ {table}: {count}")
    upload = result["upload"]
    print(f"  ✓ Products created: {upload.created}")
    print(f"  ✓ Products updated: {upload.updated}")
    for error in upload.errors:
        print(f"  ✗ {error}")

    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
