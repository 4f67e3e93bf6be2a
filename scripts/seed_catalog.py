#!/usr/bin/env python3
"""Seed product catalog script.

Creates the catalog tables and adds a handful of demo products for a
shop through the catalog service, so every product gets its variant and
inventory rows.

Usage:
    python scripts/seed_catalog.py --shop shop-dalat
    python scripts/seed_catalog.py --shop shop-dalat --publish
"""

import argparse
import asyncio
from decimal import Decimal

from shopcatalog.catalog.inputs import ProductCreate
from shopcatalog.catalog.repository import ProductRepository
from shopcatalog.catalog.service import CatalogService
from shopcatalog.infrastructure.database import Base, async_session_factory, engine

DEMO_PRODUCTS = [
    ProductCreate(
        product_name="Shiitake Mushroom",
        product_price=Decimal("50000"),
        product_discounted_price=Decimal("45000"),
        product_description="Fresh shiitake.\nHarvested every morning.",
        product_quantity=40,
        product_type="Mushroom",
        sub_product_type="Shiitake",
        product_attributes={"weight": 0.5, "origin": "Dalat", "freshness": "fresh"},
    ),
    ProductCreate(
        product_name="Oyster Mushroom",
        product_price=Decimal("35000"),
        product_quantity=60,
        product_type="Mushroom",
        product_attributes={"weight": 1.0, "origin": "Lam Dong", "package_type": "tray"},
    ),
    ProductCreate(
        product_name="Baby Carrot",
        product_price=Decimal("25000"),
        product_discounted_price=Decimal("20000"),
        product_quantity=100,
        product_type="Vegetable",
        sub_product_type="Root",
        product_attributes={"weight": 1.0, "origin": "Dalat", "freshness": "fresh"},
    ),
    ProductCreate(
        product_name="Juniper Bonsai",
        product_price=Decimal("1500000"),
        product_description="Ten year old juniper.\nShipped in a ceramic pot.",
        product_quantity=3,
        product_type="Bonsai",
        product_attributes={
            "age": 10,
            "height": 45,
            "style": "Moyogi",
            "species": "Juniperus procumbens",
            "pot_type": "ceramic",
        },
    ),
]


async def create_tables() -> None:
    """Create database tables if they don't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_shop(shop_id: str, publish: bool) -> int:
    """Create the demo products for one shop.

    Args:
        shop_id: Owning shop.
        publish: Whether to publish each product after creating it.

    Returns:
        Number of products created.
    """
    async with async_session_factory() as session:
        service = CatalogService(ProductRepository(session))
        for data in DEMO_PRODUCTS:
            detail = await service.create_product(data, shop_id)
            if publish:
                await service.publish_product(detail.product.id, shop_id)
            print(f"  ✓ {detail.product.product_type}: {detail.product.product_name}")
    return len(DEMO_PRODUCTS)


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed demo products for a shop",
    )
    parser.add_argument(
        "--shop",
        default="shop-demo",
        help="Shop ID to own the products (default: shop-demo)",
    )
    parser.add_argument(
        "--publish",
        action="store_true",
        help="Publish the products after creating them",
    )

    args = parser.parse_args()

    print("=" * 60)
    print("Shop Catalog Seeder")
    print("=" * 60)

    print("Creating database tables...")
    await create_tables()
    print("Tables ready.")
    print()

    print(f"Seeding catalog for {args.shop}...")
    created = await seed_shop(args.shop, args.publish)
    print(f"  Created: {created} products")

    await engine.dispose()
    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
