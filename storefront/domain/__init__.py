"""Domain package."""

from .entities import DEFAULT_CATEGORY, CartItem, CartLine, Product, cart_total

__all__ = [
    "Product",
    "CartLine",
    "CartItem",
    "cart_total",
    "DEFAULT_CATEGORY",
]
