"""Local products table: the last-known-good catalog replica."""
from __future__ import annotations

from collections.abc import Iterable

from storefront.domain import Product

from .database import PRODUCTS_TABLE, LocalDatabase

_COLUMNS = "id, name, description, price, image_ref, category, stock"

# id 0 lets SQLite assign the next rowid
_UPSERT_SQL = (
    f"INSERT OR REPLACE INTO {PRODUCTS_TABLE} ({_COLUMNS}) "
    "VALUES (NULLIF(?, 0), ?, ?, ?, ?, ?, ?)"
)


class ProductStore:
    """Synchronous data access for the products table."""

    table = PRODUCTS_TABLE
    WRITES = frozenset({"insert", "insert_many", "insert_if_absent", "update", "delete", "delete_all"})

    def __init__(self, db: LocalDatabase) -> None:
        self.db = db

    def get_all(self) -> list[Product]:
        with self.db.connection() as conn:
            rows = conn.execute(f"SELECT {_COLUMNS} FROM {PRODUCTS_TABLE} ORDER BY id").fetchall()
        return [Product.from_db_row(row) for row in rows]

    def get_by_id(self, product_id: int) -> Product | None:
        with self.db.connection() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM {PRODUCTS_TABLE} WHERE id = ?", (product_id,)
            ).fetchone()
        return Product.from_db_row(row) if row else None

    def get_by_ids(self, product_ids: Iterable[int]) -> dict[int, Product]:
        ids = sorted({int(pid) for pid in product_ids})
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        with self.db.connection() as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM {PRODUCTS_TABLE} WHERE id IN ({placeholders})", ids
            ).fetchall()
        products = [Product.from_db_row(row) for row in rows]
        return {product.id: product for product in products}

    def get_by_category(self, category: str) -> list[Product]:
        with self.db.connection() as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM {PRODUCTS_TABLE} WHERE category = ? ORDER BY id",
                (category,),
            ).fetchall()
        return [Product.from_db_row(row) for row in rows]

    def count(self) -> int:
        with self.db.connection() as conn:
            return int(conn.execute(f"SELECT COUNT(*) FROM {PRODUCTS_TABLE}").fetchone()[0])

    def insert(self, product: Product) -> int:
        """Insert or replace a product and return its row id."""
        with self.db.transaction() as conn:
            cursor = conn.execute(_UPSERT_SQL, product.to_db_params())
            return int(cursor.lastrowid)

    def insert_many(self, products: Iterable[Product]) -> int:
        params = [product.to_db_params() for product in products]
        if not params:
            return 0
        with self.db.transaction() as conn:
            conn.executemany(_UPSERT_SQL, params)
        return len(params)

    def insert_if_absent(self, product: Product) -> bool:
        """Insert a product unless a row with its id already exists."""
        with self.db.transaction() as conn:
            cursor = conn.execute(
                f"INSERT OR IGNORE INTO {PRODUCTS_TABLE} ({_COLUMNS}) "
                "VALUES (NULLIF(?, 0), ?, ?, ?, ?, ?, ?)",
                product.to_db_params(),
            )
            return cursor.rowcount == 1

    def update(self, product: Product) -> bool:
        """Apply product fields; insert the row when it does not exist yet.

        Returns:
            True if an existing row was updated, False if it was inserted
        """
        _, *fields = product.to_db_params()
        with self.db.transaction() as conn:
            cursor = conn.execute(
                f"UPDATE {PRODUCTS_TABLE} SET name = ?, description = ?, price = ?, "
                "image_ref = ?, category = ?, stock = ? WHERE id = ?",
                (*fields, product.id),
            )
            if cursor.rowcount:
                return True
            conn.execute(_UPSERT_SQL, product.to_db_params())
            return False

    def delete(self, product_id: int) -> bool:
        with self.db.transaction() as conn:
            cursor = conn.execute(f"DELETE FROM {PRODUCTS_TABLE} WHERE id = ?", (product_id,))
            return cursor.rowcount > 0

    def delete_all(self) -> int:
        with self.db.transaction() as conn:
            cursor = conn.execute(f"DELETE FROM {PRODUCTS_TABLE}")
            return cursor.rowcount
