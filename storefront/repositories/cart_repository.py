"""Cart repository: local-only cart with quantity merge."""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import aclosing
from decimal import Decimal

from storefront.core.async_db import AsyncStoreProxy
from storefront.domain import CartItem, CartLine, Product, cart_total
from storefront.storage.database import PRODUCTS_TABLE

from .base import BaseRepository
from .catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)


class CartRepository(BaseRepository):
    """Cart stored in the local database, priced from the catalog replica.

    There is no remote cart: storage errors surface as
    ``LocalStoreUnavailable`` because there is nothing to fall back to.
    """

    def __init__(self, store: AsyncStoreProxy, catalog: CatalogRepository) -> None:
        super().__init__(store)
        self.catalog = catalog

    async def add_product(self, product: Product) -> CartLine | None:
        """Add one unit of product to the cart.

        Returns:
            The resulting line, or None if the product is out of stock
        """
        if not product.is_available:
            logger.info("Rejected add_product: product %s is out of stock", product.id)
            return None

        # Lines are priced from the local replica, so it must know the product
        await self.catalog.remember_product(product)
        line = await self._local("add_product", "add_one", product)
        logger.debug("Cart line %s now has quantity %s", line.product_id, line.quantity)
        return line

    async def set_quantity(self, product_id: int, quantity: int) -> bool:
        """Set exact quantity; zero or less removes the line."""
        changed = await self._local("set_quantity", "set_quantity", product_id, quantity)
        if not changed:
            logger.debug("set_quantity: product %s is not in the cart", product_id)
        return changed

    async def remove_product(self, product_id: int) -> bool:
        return await self._local("remove_product", "delete", product_id)

    async def clear_cart(self) -> int:
        count = await self._local("clear_cart", "delete_all")
        logger.info("Cart cleared (%d lines)", count)
        return count

    async def get_cart(self) -> list[CartItem]:
        """Current cart lines joined with their products.

        A line whose product is no longer in the local catalog is priced from
        the snapshot stored with the line.
        """
        lines = await self._local("get_cart", "get_lines")
        if not lines:
            return []

        products = await self.catalog.cached_products(line.product_id for line in lines)
        items = []
        for line in lines:
            product = products.get(line.product_id)
            if product is None:
                logger.debug("Cart line %s has no cached product, using snapshot", line.product_id)
                product = line.snapshot
            items.append(CartItem(product=product, quantity=line.quantity))
        return items

    async def get_total(self) -> Decimal:
        return cart_total(await self.get_cart())

    async def count_items(self) -> int:
        """Total number of units across all lines."""
        return sum(item.quantity for item in await self.get_cart())

    async def observe_cart(self) -> AsyncIterator[list[CartItem]]:
        """Emit the cart now and again after every cart or product change."""
        watcher = self.store.changes.watch((self.store.table, PRODUCTS_TABLE))
        async with aclosing(watcher):
            async for _ in watcher:
                yield await self.get_cart()

    async def observe_total(self) -> AsyncIterator[Decimal]:
        """Emit the cart total alongside every cart emission."""
        async with aclosing(self.observe_cart()) as carts:
            async for items in carts:
                yield cart_total(items)
