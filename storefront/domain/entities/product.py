"""Product entity model."""
from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_CATEGORY = "General"


class Product(BaseModel):
    """Catalog product shared by the remote and local representations."""

    id: int = Field(0, ge=0, description="Product ID (0 until assigned)")
    name: str = Field(..., description="Product name")
    description: str = Field("", description="Product description")
    price: Decimal = Field(Decimal("0"), ge=0, description="Unit price")
    image_ref: str = Field("", description="Image URL or bundled asset name")
    category: str = Field(DEFAULT_CATEGORY, description="Product category")
    stock: int = Field(0, ge=0, description="Units in stock")

    model_config = {"from_attributes": True}

    @property
    def is_available(self) -> bool:
        """Check if product can be added to a cart (has stock)."""
        return self.stock > 0

    def to_db_params(self) -> tuple:
        """Positional parameters in the products table column order."""
        return (
            self.id,
            self.name,
            self.description,
            str(self.price),
            self.image_ref,
            self.category,
            self.stock,
        )

    @classmethod
    def from_db_row(cls, row: Any) -> Product:
        """Create Product from a database row (mapping or tuple).

        Args:
            row: ``sqlite3.Row``, dict or tuple in table column order

        Returns:
            Product instance
        """
        if not isinstance(row, (tuple, list)):
            row = dict(row)
            return cls(
                id=row["id"],
                name=row["name"],
                description=row.get("description") or "",
                price=Decimal(str(row.get("price") or "0")),
                image_ref=row.get("image_ref") or "",
                category=row.get("category") or DEFAULT_CATEGORY,
                stock=row.get("stock") or 0,
            )

        # Tuple format: (id, name, description, price, image_ref, category, stock)
        return cls(
            id=row[0],
            name=row[1],
            description=row[2] or "",
            price=Decimal(str(row[3] or "0")),
            image_ref=row[4] or "",
            category=row[5] or DEFAULT_CATEGORY,
            stock=row[6] or 0,
        )
