"""SQLite database backing the local catalog and cart stores."""
from __future__ import annotations

import logging
import queue
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from .changes import ChangeFeed

logger = logging.getLogger(__name__)

PRODUCTS_TABLE = "products"
CART_TABLE = "cart_lines"

SCHEMA = (
    f"""
    CREATE TABLE IF NOT EXISTS {PRODUCTS_TABLE} (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        price TEXT NOT NULL DEFAULT '0',
        image_ref TEXT NOT NULL DEFAULT '',
        category TEXT NOT NULL DEFAULT 'General',
        stock INTEGER NOT NULL DEFAULT 0 CHECK (stock >= 0)
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {CART_TABLE} (
        product_id INTEGER PRIMARY KEY,
        quantity INTEGER NOT NULL CHECK (quantity >= 1),
        position INTEGER NOT NULL,
        name TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        price TEXT NOT NULL DEFAULT '0',
        image_ref TEXT NOT NULL DEFAULT '',
        category TEXT NOT NULL DEFAULT 'General',
        stock INTEGER NOT NULL DEFAULT 0
    )
    """,
    f"CREATE INDEX IF NOT EXISTS idx_{PRODUCTS_TABLE}_category ON {PRODUCTS_TABLE} (category)",
)


class LocalDatabase:
    """A small pooled SQLite database with serialized writers.

    Connections are created with ``check_same_thread=False`` and WAL mode so
    readers in worker threads do not block each other. Writes go through
    :meth:`transaction`, which holds the database-wide write lock for the
    duration of a single commit.

    ``":memory:"`` is accepted for throwaway use; it is backed by a single
    shared connection since every in-memory connection is its own database.
    """

    def __init__(self, db_path: str, maxsize: int = 5, timeout: float = 5.0):
        self.db_path = db_path
        self.in_memory = db_path == ":memory:"
        self.maxsize = 1 if self.in_memory else max(1, maxsize)
        self.timeout = timeout
        self.changes = ChangeFeed()

        self._pool: queue.LifoQueue[sqlite3.Connection] = queue.LifoQueue(self.maxsize)
        self._created = 0
        self._closed = False
        self._pool_lock = threading.Lock()
        self._write_lock = threading.Lock()

        # Pre-create one connection so a bad path fails at startup
        self._pool.put(self._create_connection())
        self._ensure_schema()
        logger.info("Local database ready at %s", db_path)

    def _create_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, check_same_thread=False, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        if not self.in_memory:
            conn.execute("PRAGMA journal_mode=WAL")
        self._created += 1
        return conn

    def _ensure_schema(self) -> None:
        with self.transaction() as conn:
            for statement in SCHEMA:
                conn.execute(statement)

    def _acquire(self) -> sqlite3.Connection:
        if self._closed:
            raise sqlite3.ProgrammingError("Local database is closed")
        try:
            return self._pool.get_nowait()
        except queue.Empty:
            pass

        with self._pool_lock:
            if self._created < self.maxsize:
                return self._create_connection()

        try:
            return self._pool.get(block=True, timeout=self.timeout)
        except queue.Empty:
            raise sqlite3.OperationalError("Local database connection pool exhausted") from None

    def _release(self, conn: sqlite3.Connection) -> None:
        if self._closed:
            conn.close()
            return
        try:
            self._pool.put_nowait(conn)
        except queue.Full:
            conn.close()

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Borrow a pooled connection for reads."""
        conn = self._acquire()
        try:
            yield conn
        finally:
            self._release(conn)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Borrow a connection under the write lock; commit or roll back."""
        with self._write_lock:
            with self.connection() as conn:
                try:
                    yield conn
                    conn.commit()
                except BaseException:
                    conn.rollback()
                    raise

    def close(self) -> None:
        """Close every pooled connection."""
        self._closed = True
        while True:
            try:
                conn = self._pool.get_nowait()
            except queue.Empty:
                break
            conn.close()
        logger.debug("Local database at %s closed", self.db_path)
