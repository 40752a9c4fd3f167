"""Domain entities package."""

from .cart import CartItem, CartLine, cart_total
from .product import DEFAULT_CATEGORY, Product

__all__ = [
    "Product",
    "CartLine",
    "CartItem",
    "cart_total",
    "DEFAULT_CATEGORY",
]
