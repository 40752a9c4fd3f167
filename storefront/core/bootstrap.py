"""Application bootstrap wiring the database, API client and repositories."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from storefront.integrations.catalog_api import CatalogApiClient
from storefront.repositories import CartRepository, CatalogRepository
from storefront.seed import seed_catalog
from storefront.storage import CartStore, LocalDatabase, ProductStore

from .async_db import AsyncStoreProxy
from .config import Settings, load_settings

logger = logging.getLogger(__name__)


@dataclass
class Storefront:
    """Runtime components; both repositories share one local database."""

    settings: Settings
    database: LocalDatabase
    client: CatalogApiClient
    catalog: CatalogRepository
    cart: CartRepository

    async def close(self) -> None:
        await self.client.close()
        self.database.close()


async def build_storefront(settings: Settings | None = None) -> Storefront:
    """Create storefront components from configuration."""
    settings = settings or load_settings()

    database = LocalDatabase(settings.database_path)
    client = CatalogApiClient(
        settings.catalog_api.base_url,
        timeout=settings.catalog_api.timeout_seconds,
    )

    catalog = CatalogRepository(
        client,
        AsyncStoreProxy(ProductStore(database), database.changes),
        refresh_local_on_remote_success=settings.refresh_local_on_remote_success,
    )
    cart = CartRepository(AsyncStoreProxy(CartStore(database), database.changes), catalog)

    if settings.seed_local_catalog:
        await seed_catalog(catalog)

    logger.info(
        "Storefront ready (catalog API %s, local db %s)",
        settings.catalog_api.base_url,
        settings.database_path,
    )
    return Storefront(settings, database, client, catalog, cart)
