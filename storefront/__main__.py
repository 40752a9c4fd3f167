"""Command line access to the catalog and cart, mainly for smoke checks.

Usage:
    python -m storefront products [--category NAME]
    python -m storefront product ID
    python -m storefront add ID
    python -m storefront cart
    python -m storefront clear-cache
"""
from __future__ import annotations

import argparse
import asyncio
import sys

from storefront.core.bootstrap import Storefront, build_storefront
from storefront.core.config import load_settings
from storefront.core.logging_config import setup_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="storefront", description="Catalog and cart data access")
    sub = parser.add_subparsers(dest="command", required=True)

    products = sub.add_parser("products", help="List products (API first, local cache fallback)")
    products.add_argument("--category", help="Only products of this category")

    product = sub.add_parser("product", help="Show one product")
    product.add_argument("product_id", type=int)

    add = sub.add_parser("add", help="Add one unit of a product to the cart")
    add.add_argument("product_id", type=int)

    sub.add_parser("cart", help="Show cart lines and total")
    sub.add_parser("clear-cache", help="Delete every locally cached product")
    return parser


async def _run(args: argparse.Namespace, storefront: Storefront) -> int:
    if args.command == "products":
        if args.category:
            products = await storefront.catalog.products_by_category(args.category)
        else:
            products = await storefront.catalog.list_products()
        for p in products:
            print(f"{p.id:>5}  {p.name:<45} {p.price:>12}  stock={p.stock}  [{p.category}]")
        return 0

    if args.command == "product":
        found = await storefront.catalog.get_product(args.product_id)
        if found is None:
            print(f"Product {args.product_id} not found", file=sys.stderr)
            return 1
        print(found.model_dump_json(indent=2))
        return 0

    if args.command == "add":
        found = await storefront.catalog.get_product(args.product_id)
        if found is None:
            print(f"Product {args.product_id} not found", file=sys.stderr)
            return 1
        line = await storefront.cart.add_product(found)
        if line is None:
            print(f"Product {args.product_id} is out of stock", file=sys.stderr)
            return 1
        print(f"{found.name}: quantity {line.quantity}")
        return 0

    if args.command == "cart":
        items = await storefront.cart.get_cart()
        for item in items:
            print(f"{item.product.name:<45} x{item.quantity:<4} {item.subtotal:>12}")
        print(f"Total: {await storefront.cart.get_total()}")
        return 0

    removed = await storefront.catalog.clear_local_cache()
    print(f"Removed {removed} cached products")
    return 0


async def _main(args: argparse.Namespace) -> int:
    settings = load_settings()
    setup_logging(settings.log_level)
    storefront = await build_storefront(settings)
    try:
        return await _run(args, storefront)
    finally:
        await storefront.close()


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    return asyncio.run(_main(args))


if __name__ == "__main__":
    sys.exit(main())
