"""Local SQLite storage for the catalog replica and the cart."""

from .cart_store import CartStore
from .changes import ChangeFeed
from .database import CART_TABLE, PRODUCTS_TABLE, LocalDatabase
from .product_store import ProductStore

__all__ = [
    "LocalDatabase",
    "ChangeFeed",
    "ProductStore",
    "CartStore",
    "PRODUCTS_TABLE",
    "CART_TABLE",
]
