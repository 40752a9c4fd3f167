"""Shared pytest fixtures for storefront tests."""
from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Any

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from storefront.core.async_db import AsyncStoreProxy
from storefront.domain import Product
from storefront.integrations.catalog_api import CatalogApiClient, RemoteErrorKind, RemoteResult
from storefront.repositories import CartRepository, CatalogRepository
from storefront.storage import CartStore, LocalDatabase, ProductStore


def make_product(product_id: int = 1, **overrides: Any) -> Product:
    data = {
        "id": product_id,
        "name": f"Product {product_id}",
        "description": "Test product",
        "price": Decimal("1000"),
        "image_ref": f"img{product_id}",
        "category": "Accesorios",
        "stock": 10,
    }
    data.update(overrides)
    return Product(**data)


def wire_record(product_id: int = 1, **overrides: Any) -> dict[str, Any]:
    data = {
        "id": product_id,
        "nombre": f"Remote {product_id}",
        "descripcion": "From API",
        "precio": "1500.50",
        "imagen": f"https://img.example/{product_id}.png",
        "categoria": "Consolas",
        "stock": 4,
    }
    data.update(overrides)
    return data


# ============= Catalog API doubles =============


class StubCatalogClient:
    """In-process stand-in for CatalogApiClient with canned results."""

    def __init__(self, default: RemoteResult | None = None):
        self.default = default or RemoteResult.failure(RemoteErrorKind.NETWORK_UNREACHABLE)
        self.responses: dict[str, RemoteResult] = {}
        self.calls: list[tuple] = []

    def fail_with(self, kind: RemoteErrorKind, status: int | None = None) -> None:
        self.responses.clear()
        self.default = RemoteResult.failure(kind, status=status)

    def _respond(self, name: str, *args: Any) -> RemoteResult:
        self.calls.append((name, *args))
        return self.responses.get(name, self.default)

    async def list_all(self) -> RemoteResult:
        return self._respond("list_all")

    async def list_by_category(self, category: str) -> RemoteResult:
        return self._respond("list_by_category", category)

    async def get_by_id(self, product_id: int) -> RemoteResult:
        return self._respond("get_by_id", product_id)

    async def create(self, product: Product) -> RemoteResult:
        return self._respond("create", product)

    async def update(self, product_id: int, product: Product) -> RemoteResult:
        return self._respond("update", product_id, product)

    async def delete(self, product_id: int) -> RemoteResult:
        return self._respond("delete", product_id)

    async def close(self) -> None:
        pass


class FakeCatalogApi:
    """aiohttp application imitating the remote product API."""

    def __init__(self) -> None:
        self.products: dict[int, dict[str, Any]] = {}
        self.fail_status: int | None = None
        self.raw_body: str | None = None
        self.delay = 0.0
        self.redirect_loop = False
        self.requests: list[tuple[str, str, Any]] = []
        self.base_url = ""

        self.app = web.Application()
        self.app.router.add_get("/api/productos", self.list_products)
        self.app.router.add_post("/api/productos", self.create_product)
        self.app.router.add_get("/api/productos/{id}", self.get_product)
        self.app.router.add_put("/api/productos/{id}", self.update_product)
        self.app.router.add_delete("/api/productos/{id}", self.delete_product)

    async def _intercept(self, request: web.Request, body: Any = None) -> web.Response | None:
        self.requests.append((request.method, request.path_qs, body))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.redirect_loop:
            raise web.HTTPFound(request.path_qs)
        if self.fail_status is not None:
            return web.Response(status=self.fail_status, text="catalog unavailable")
        if self.raw_body is not None:
            return web.Response(text=self.raw_body, content_type="application/json")
        return None

    async def list_products(self, request: web.Request) -> web.Response:
        if (override := await self._intercept(request)) is not None:
            return override
        records = list(self.products.values())
        category = request.query.get("categoria_nombre")
        if category:
            records = [r for r in records if r.get("categoria") == category]
        return web.json_response(records)

    async def get_product(self, request: web.Request) -> web.Response:
        if (override := await self._intercept(request)) is not None:
            return override
        record = self.products.get(int(request.match_info["id"]))
        if record is None:
            return web.json_response({"detail": "not found"}, status=404)
        return web.json_response(record)

    async def create_product(self, request: web.Request) -> web.Response:
        body = await request.json()
        if (override := await self._intercept(request, body)) is not None:
            return override
        new_id = max(self.products, default=100) + 1
        record = {**body, "id": new_id}
        self.products[new_id] = record
        return web.json_response(record, status=201)

    async def update_product(self, request: web.Request) -> web.Response:
        body = await request.json()
        if (override := await self._intercept(request, body)) is not None:
            return override
        product_id = int(request.match_info["id"])
        if product_id not in self.products:
            return web.json_response({"detail": "not found"}, status=404)
        self.products[product_id] = {**body, "id": product_id}
        return web.json_response(self.products[product_id])

    async def delete_product(self, request: web.Request) -> web.Response:
        if (override := await self._intercept(request)) is not None:
            return override
        self.products.pop(int(request.match_info["id"]), None)
        return web.Response(status=204)


# ============= Fixtures =============


@pytest.fixture
def database(tmp_path) -> LocalDatabase:
    """Function-scoped SQLite database in a temp directory."""
    db = LocalDatabase(str(tmp_path / "storefront.db"))
    yield db
    db.close()


@pytest.fixture
def product_store(database: LocalDatabase) -> ProductStore:
    return ProductStore(database)


@pytest.fixture
def cart_store(database: LocalDatabase) -> CartStore:
    return CartStore(database)


@pytest.fixture
def api_stub() -> StubCatalogClient:
    """Catalog API that is unreachable unless a test says otherwise."""
    return StubCatalogClient()


@pytest.fixture
def catalog(api_stub: StubCatalogClient, product_store: ProductStore) -> CatalogRepository:
    return CatalogRepository(api_stub, AsyncStoreProxy(product_store))


@pytest.fixture
def cart(cart_store: CartStore, catalog: CatalogRepository) -> CartRepository:
    return CartRepository(AsyncStoreProxy(cart_store), catalog)


@pytest_asyncio.fixture
async def catalog_api() -> FakeCatalogApi:
    """Fake product API served on a local port."""
    api = FakeCatalogApi()
    server = TestServer(api.app)
    await server.start_server()
    api.base_url = str(server.make_url("/"))
    try:
        yield api
    finally:
        await server.close()


@pytest_asyncio.fixture
async def api_client(catalog_api: FakeCatalogApi) -> CatalogApiClient:
    client = CatalogApiClient(catalog_api.base_url, timeout=2)
    try:
        yield client
    finally:
        await client.close()
