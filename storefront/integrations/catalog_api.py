"""
Remote catalog client - HTTP access to the product API.

Endpoints (relative to the configured base URL):
- GET    api/productos            list every product
- GET    api/productos/{id}       one product, 404 when unknown
- POST   api/productos            create
- PUT    api/productos/{id}       update
- DELETE api/productos/{id}       delete

Every call returns a :class:`RemoteResult` instead of raising, so callers
branch on ``result.ok``. The client does not retry and does not cache.
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Generic, TypeVar
from urllib.parse import urljoin

import aiohttp

from storefront.domain import DEFAULT_CATEGORY, Product

logger = logging.getLogger(__name__)

T = TypeVar("T")

PRODUCTS_PATH = "api/productos"
DEFAULT_TIMEOUT_SECONDS = 30.0


class RemoteErrorKind(str, Enum):
    """Why a remote call did not produce a payload."""

    NETWORK_UNREACHABLE = "network_unreachable"
    TIMEOUT = "timeout"
    REMOTE_REJECTED = "remote_rejected"
    MALFORMED_PAYLOAD = "malformed_payload"
    NOT_FOUND = "not_found"


class MalformedPayload(ValueError):
    """Payload does not have the expected product shape."""


@dataclass
class RemoteResult(Generic[T]):
    ok: bool
    payload: T | None = None
    error: RemoteErrorKind | None = None
    status: int | None = None
    detail: str | None = None

    @classmethod
    def success(cls, payload: T | None, status: int) -> RemoteResult[T]:
        return cls(True, payload=payload, status=status)

    @classmethod
    def failure(
        cls, error: RemoteErrorKind, *, status: int | None = None, detail: str | None = None
    ) -> RemoteResult[T]:
        return cls(False, error=error, status=status, detail=detail)

    @property
    def not_found(self) -> bool:
        return self.error is RemoteErrorKind.NOT_FOUND

    def describe(self) -> str:
        if self.ok:
            return f"HTTP {self.status}"
        parts = [self.error.value if self.error else "unknown"]
        if self.status is not None:
            parts.append(f"HTTP {self.status}")
        if self.detail:
            parts.append(self.detail[:200])
        return ": ".join(parts)


# ============= Wire format =============


def parse_price(value: Any) -> Decimal:
    """Parse the textual price; anything unusable becomes 0."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not price.is_finite() or price < 0:
        return Decimal("0")
    return price


def _parse_stock(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float) and math.isfinite(value):
        return max(int(value), 0)
    if isinstance(value, str):
        try:
            return max(int(value.strip()), 0)
        except ValueError:
            return 0
    return 0


def decode_product(data: Any) -> Product:
    """Map one wire record to a Product.

    Only a missing id or name rejects the record; every other field falls
    back to a default.

    Raises:
        MalformedPayload: If the record cannot identify a product
    """
    if not isinstance(data, dict):
        raise MalformedPayload(f"expected product object, got {type(data).__name__}")

    product_id = data.get("id")
    if isinstance(product_id, bool) or not isinstance(product_id, int) or product_id < 0:
        raise MalformedPayload(f"invalid product id: {product_id!r}")

    name = data.get("nombre")
    if not isinstance(name, str):
        raise MalformedPayload(f"product {product_id} has no name")

    category = data.get("categoria")
    if category is None:
        category = data.get("categoria_nombre")

    return Product(
        id=product_id,
        name=name,
        description=str(data.get("descripcion") or ""),
        price=parse_price(data.get("precio")),
        image_ref=str(data.get("imagen") or ""),
        category=str(category) if category else DEFAULT_CATEGORY,
        stock=_parse_stock(data.get("stock")),
    )


def decode_product_list(data: Any) -> list[Product]:
    if not isinstance(data, list):
        raise MalformedPayload(f"expected product array, got {type(data).__name__}")
    return [decode_product(item) for item in data]


def encode_product(product: Product) -> dict[str, Any]:
    """Map a Product to the wire record; price travels as text."""
    return {
        "id": product.id,
        "nombre": product.name,
        "descripcion": product.description,
        "precio": str(product.price),
        "imagen": product.image_ref,
        "categoria": product.category,
        "stock": product.stock,
    }


# ============= Client =============


class CatalogApiClient:
    """
    Async client for the remote product API.

    Example:
    ```python
    async with CatalogApiClient("http://catalog.local/") as client:
        result = await client.list_all()
        if result.ok:
            print(len(result.payload or []))
    ```
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: aiohttp.ClientSession | None = None,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> CatalogApiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    def _url(self, product_id: int | None = None) -> str:
        path = PRODUCTS_PATH if product_id is None else f"{PRODUCTS_PATH}/{int(product_id)}"
        return urljoin(self.base_url, path)

    async def _request(
        self,
        method: str,
        url: str,
        decode: Callable[[Any], T] | None,
        *,
        body: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> RemoteResult[T]:
        try:
            session = await self._get_session()
            async with session.request(method, url, json=body, params=params) as response:
                status = response.status
                text = await response.text()
        except asyncio.TimeoutError:
            logger.warning("Catalog API %s %s timed out after %ss", method, url, self.timeout)
            return RemoteResult.failure(RemoteErrorKind.TIMEOUT, detail=f"timeout after {self.timeout}s")
        except aiohttp.ClientResponseError as e:
            # Redirect loops and handshake refusals
            logger.warning("Catalog API %s %s refused: %s", method, url, e)
            return RemoteResult.failure(
                RemoteErrorKind.REMOTE_REJECTED, status=e.status or None, detail=str(e)
            )
        except UnicodeDecodeError as e:
            logger.warning("Catalog API %s %s returned undecodable body: %s", method, url, e)
            return RemoteResult.failure(RemoteErrorKind.MALFORMED_PAYLOAD, detail=str(e))
        except (aiohttp.ClientError, OSError) as e:
            logger.warning("Catalog API %s %s unreachable: %s", method, url, e)
            return RemoteResult.failure(RemoteErrorKind.NETWORK_UNREACHABLE, detail=str(e))

        if status == 404:
            logger.debug("Catalog API %s %s -> 404", method, url)
            return RemoteResult.failure(RemoteErrorKind.NOT_FOUND, status=status, detail=text or None)
        if not 200 <= status < 300:
            logger.warning("Catalog API %s %s rejected with HTTP %s", method, url, status)
            return RemoteResult.failure(RemoteErrorKind.REMOTE_REJECTED, status=status, detail=text or None)

        if decode is None or not text.strip():
            return RemoteResult.success(None, status)

        try:
            raw = json.loads(text)
            payload = None if raw is None else decode(raw)
        except (ValueError, RecursionError, MalformedPayload) as e:
            logger.warning("Catalog API %s %s returned malformed payload: %s", method, url, e)
            return RemoteResult.failure(RemoteErrorKind.MALFORMED_PAYLOAD, status=status, detail=str(e))

        return RemoteResult.success(payload, status)

    async def list_all(self) -> RemoteResult[list[Product]]:
        return await self._request("GET", self._url(), decode_product_list)

    async def list_by_category(self, category: str) -> RemoteResult[list[Product]]:
        return await self._request(
            "GET", self._url(), decode_product_list, params={"categoria_nombre": category}
        )

    async def get_by_id(self, product_id: int) -> RemoteResult[Product]:
        return await self._request("GET", self._url(product_id), decode_product)

    async def create(self, product: Product) -> RemoteResult[Product]:
        return await self._request("POST", self._url(), decode_product, body=encode_product(product))

    async def update(self, product_id: int, product: Product) -> RemoteResult[Product]:
        return await self._request(
            "PUT", self._url(product_id), decode_product, body=encode_product(product)
        )

    async def delete(self, product_id: int) -> RemoteResult[None]:
        return await self._request("DELETE", self._url(product_id), None)
