"""Catalog repository: remote-first reads, write-through to the local replica."""
from __future__ import annotations

import logging
from collections.abc import Iterable

from storefront.core.async_db import AsyncStoreProxy
from storefront.domain import Product
from storefront.integrations.catalog_api import CatalogApiClient, RemoteResult

from .base import BaseRepository

logger = logging.getLogger(__name__)


class CatalogRepository(BaseRepository):
    """Product catalog backed by the remote API with a local fallback.

    Reads ask the remote API first and answer from the local replica when
    the API fails or returns nothing. Writes always land in the local
    replica; the remote call is attempted first and its failure is only
    logged.
    """

    def __init__(
        self,
        client: CatalogApiClient,
        store: AsyncStoreProxy,
        *,
        refresh_local_on_remote_success: bool = False,
    ) -> None:
        super().__init__(store)
        self.client = client
        self.refresh_local_on_remote_success = refresh_local_on_remote_success

    # ----- reads -----

    async def list_products(self) -> list[Product]:
        """Get every product, from the API when possible.

        Returns:
            Remote products, or the local replica when the API fails or
            returns an empty list; ``[]`` only when both are empty
        """
        result = await self.client.list_all()
        return await self._remote_or_local(result, "list_products", "get_all")

    async def products_by_category(self, category: str) -> list[Product]:
        """Get products of one category with the same fallback policy."""
        result = await self.client.list_by_category(category)
        return await self._remote_or_local(result, "products_by_category", "get_by_category", category)

    async def _remote_or_local(
        self, result: RemoteResult[list[Product]], operation: str, local_method: str, *args
    ) -> list[Product]:
        if result.ok and result.payload:
            products = result.payload
            logger.info("%s: %d products from catalog API", operation, len(products))
            if self.refresh_local_on_remote_success:
                await self.save_products(products)
            return products

        if result.ok:
            logger.warning("%s: catalog API returned no products, using local cache", operation)
        else:
            logger.warning("%s: catalog API failed (%s), using local cache", operation, result.describe())

        products = await self._local(operation, local_method, *args)
        if products:
            logger.info("%s: %d products from local cache", operation, len(products))
        else:
            logger.warning("%s: local cache is empty", operation)
        return products

    async def get_product(self, product_id: int) -> Product | None:
        """Get product by ID, or None when neither source knows it."""
        result = await self.client.get_by_id(product_id)
        if result.ok and result.payload is not None:
            logger.debug("Product %s found in catalog API", product_id)
            return result.payload

        if result.not_found:
            logger.info("Product %s not found in catalog API, checking local cache", product_id)
        else:
            logger.warning(
                "Catalog API lookup of product %s failed (%s), checking local cache",
                product_id,
                result.describe(),
            )
        return await self._local("get_product", "get_by_id", product_id)

    async def cached_products(self, product_ids: Iterable[int]) -> dict[int, Product]:
        """Read products from the local replica only, keyed by id."""
        return await self._local("cached_products", "get_by_ids", list(product_ids))

    # ----- writes -----

    async def create_product(self, product: Product) -> int:
        """Create product remotely (best effort) and locally (always).

        Returns:
            ID of the product in the local store
        """
        result = await self.client.create(product)
        if result.ok and result.payload is not None:
            logger.info("Product '%s' created in catalog API", product.name)
            to_store = result.payload
        else:
            if not result.ok:
                logger.warning(
                    "Catalog API create of '%s' failed (%s), saving locally only",
                    product.name,
                    result.describe(),
                )
            to_store = product

        product_id = await self._local("create_product", "insert", to_store)
        logger.info("Product '%s' saved in local cache with ID %s", to_store.name, product_id)
        return product_id

    async def update_product(self, product: Product) -> None:
        """Update product remotely (best effort) and locally (always)."""
        result = await self.client.update(product.id, product)
        if result.ok:
            logger.info("Product %s updated in catalog API", product.id)
        else:
            logger.warning("Catalog API update of product %s failed (%s)", product.id, result.describe())

        await self._local("update_product", "update", product)
        logger.debug("Product %s updated in local cache", product.id)

    async def delete_product(self, product: Product) -> None:
        """Delete product remotely (best effort) and locally (always)."""
        result = await self.client.delete(product.id)
        if result.ok:
            logger.info("Product %s deleted from catalog API", product.id)
        else:
            logger.warning("Catalog API delete of product %s failed (%s)", product.id, result.describe())

        await self._local("delete_product", "delete", product.id)
        logger.debug("Product %s deleted from local cache", product.id)

    async def save_products(self, products: Iterable[Product]) -> int:
        """Upsert products into the local replica without touching the API."""
        count = await self._local("save_products", "insert_many", list(products))
        logger.debug("%d products saved in local cache", count)
        return count

    async def remember_product(self, product: Product) -> bool:
        """Store product locally unless the replica already has it."""
        return await self._local("remember_product", "insert_if_absent", product)

    async def clear_local_cache(self) -> int:
        """Delete every locally cached product; the API is not touched."""
        count = await self._local("clear_local_cache", "delete_all")
        logger.info("Local product cache cleared (%d products)", count)
        return count
