#!/usr/bin/env python3
"""Seed demo marketplace script.

Creates the tables and fills them with a deterministic demo marketplace:
members, categories, products for sale, reserved and sold.

Usage:
    python scripts/seed_catalog.py --mode small
    python scripts/seed_catalog.py --mode full --seed 7
    python scripts/seed_catalog.py --mode small --reset
"""

import argparse
import asyncio

import structlog

from brocante.catalog.generator import GeneratorConfig, MarketplaceGenerator
from brocante.infrastructure.config import settings
from brocante.infrastructure.database import Base, async_session_factory, engine
from brocante.infrastructure.logging import configure_logging

logger = structlog.get_logger()


async def create_tables(reset: bool = False) -> None:
    """Create database tables, dropping them first when asked."""
    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def seed(config: GeneratorConfig) -> dict[str, int]:
    """Insert a generated marketplace.

    Args:
        config: Generator configuration.

    Returns:
        Counts of inserted objects.
    """
    marketplace = MarketplaceGenerator(config).generate()

    async with async_session_factory() as session:
        session.add_all(marketplace.all_objects())
        await session.commit()

    return {
        "users": len(marketplace.users),
        "categories": len(marketplace.categories),
        "carts": len(marketplace.carts),
        "products": len(marketplace.products),
    }


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed the demo marketplace")
    parser.add_argument(
        "--mode",
        choices=["small", "full"],
        default="small",
        help="Marketplace size: small (~30 products) or full (~120 products)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Override the random seed")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop existing tables before seeding",
    )
    args = parser.parse_args()

    configure_logging(settings.log_level)

    config = GeneratorConfig.full() if args.mode == "full" else GeneratorConfig.small()
    if args.seed is not None:
        config.seed = args.seed

    logger.info("Creating database tables", reset=args.reset)
    await create_tables(reset=args.reset)

    counts = await seed(config)
    logger.info("Seeding complete", mode=args.mode, seed=config.seed, **counts)

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
