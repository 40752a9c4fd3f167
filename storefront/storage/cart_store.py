"""Local cart_lines table: the only record of cart contents."""
from __future__ import annotations

from storefront.domain import CartLine, Product

from .database import CART_TABLE, LocalDatabase


_LINE_COLUMNS = "product_id, quantity, name, description, price, image_ref, category, stock"


class CartStore:
    """Synchronous data access for the cart_lines table."""

    table = CART_TABLE
    WRITES = frozenset({"add_one", "set_quantity", "delete", "delete_all"})

    def __init__(self, db: LocalDatabase) -> None:
        self.db = db

    def get_lines(self) -> list[CartLine]:
        with self.db.connection() as conn:
            rows = conn.execute(
                f"SELECT {_LINE_COLUMNS} FROM {CART_TABLE} ORDER BY position"
            ).fetchall()
        return [CartLine.from_db_row(row) for row in rows]

    def get_line(self, product_id: int) -> CartLine | None:
        with self.db.connection() as conn:
            row = conn.execute(
                f"SELECT {_LINE_COLUMNS} FROM {CART_TABLE} WHERE product_id = ?",
                (product_id,),
            ).fetchone()
        return CartLine.from_db_row(row) if row else None

    def add_one(self, product: Product) -> CartLine:
        """Create the line with quantity 1 or add one unit to it.

        The existence check and the increment are a single statement, so
        two concurrent adds of the same product cannot produce two lines.
        The stored product snapshot is refreshed on every add.
        """
        product_id, *snapshot = product.to_db_params()
        with self.db.transaction() as conn:
            conn.execute(
                f"INSERT INTO {CART_TABLE} (product_id, quantity, position, name, description, "
                "price, image_ref, category, stock) "
                f"VALUES (?, 1, (SELECT COALESCE(MAX(position), 0) + 1 FROM {CART_TABLE}), "
                "?, ?, ?, ?, ?, ?) "
                "ON CONFLICT(product_id) DO UPDATE SET quantity = quantity + 1, "
                "name = excluded.name, description = excluded.description, "
                "price = excluded.price, image_ref = excluded.image_ref, "
                "category = excluded.category, stock = excluded.stock",
                (product_id, *snapshot),
            )
            row = conn.execute(
                f"SELECT {_LINE_COLUMNS} FROM {CART_TABLE} WHERE product_id = ?",
                (product_id,),
            ).fetchone()
        return CartLine.from_db_row(row)

    def set_quantity(self, product_id: int, quantity: int) -> bool:
        """Set an exact quantity; zero or less removes the line.

        Returns:
            True if a line was changed or removed
        """
        with self.db.transaction() as conn:
            if quantity <= 0:
                cursor = conn.execute(f"DELETE FROM {CART_TABLE} WHERE product_id = ?", (product_id,))
            else:
                cursor = conn.execute(
                    f"UPDATE {CART_TABLE} SET quantity = ? WHERE product_id = ?",
                    (quantity, product_id),
                )
            return cursor.rowcount > 0

    def delete(self, product_id: int) -> bool:
        with self.db.transaction() as conn:
            cursor = conn.execute(f"DELETE FROM {CART_TABLE} WHERE product_id = ?", (product_id,))
            return cursor.rowcount > 0

    def delete_all(self) -> int:
        with self.db.transaction() as conn:
            cursor = conn.execute(f"DELETE FROM {CART_TABLE}")
            return cursor.rowcount
