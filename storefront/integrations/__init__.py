"""Integrations package - external systems the storefront talks to."""

from storefront.integrations.catalog_api import (
    CatalogApiClient,
    MalformedPayload,
    RemoteErrorKind,
    RemoteResult,
    decode_product,
    encode_product,
)

__all__ = [
    "CatalogApiClient",
    "MalformedPayload",
    "RemoteErrorKind",
    "RemoteResult",
    "decode_product",
    "encode_product",
]
