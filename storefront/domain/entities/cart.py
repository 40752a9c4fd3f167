"""Cart line models."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable

from .product import Product


@dataclass(frozen=True)
class CartLine:
    """One stored cart row: a product id and how many units of it.

    ``snapshot`` is the product as it was when the line was last added to;
    it prices the line once the product has left the local catalog.
    """

    product_id: int
    quantity: int
    snapshot: Product | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_db_row(cls, row: Any) -> CartLine:
        data = dict(row)
        snapshot = None
        if data.get("name") is not None:
            snapshot = Product.from_db_row({**data, "id": data["product_id"]})
        return cls(
            product_id=int(data["product_id"]),
            quantity=int(data["quantity"]),
            snapshot=snapshot,
        )


@dataclass(frozen=True)
class CartItem:
    """Cart line joined with the current product details."""

    product: Product
    quantity: int

    @property
    def product_id(self) -> int:
        return self.product.id

    @property
    def subtotal(self) -> Decimal:
        return self.product.price * self.quantity


def cart_total(items: Iterable[CartItem]) -> Decimal:
    """Sum of subtotals; ``Decimal("0")`` for an empty cart."""
    return sum((item.subtotal for item in items), Decimal("0"))
