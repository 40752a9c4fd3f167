"""Catalog and cart data-access layer for the storefront client."""

__version__ = "0.1.0"
