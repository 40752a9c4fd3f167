"""Repository layer for catalog and cart access."""
from __future__ import annotations

from .base import BaseRepository
from .cart_repository import CartRepository
from .catalog_repository import CatalogRepository

__all__ = [
    "BaseRepository",
    "CatalogRepository",
    "CartRepository",
]
