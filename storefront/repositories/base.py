"""Base repository with common local store handling."""
from __future__ import annotations

import sqlite3
from typing import Any, NoReturn

from storefront.core.async_db import AsyncStoreProxy
from storefront.core.exceptions import LocalStoreUnavailable


class BaseRepository:
    """Base repository class owning one local store."""

    def __init__(self, store: AsyncStoreProxy) -> None:
        """Initialize repository with its store.

        Args:
            store: Async proxy over the sync store this repository owns
        """
        self.store = store

    def _handle_db_error(self, operation: str, error: Exception) -> NoReturn:
        """Handle local store errors consistently.

        Args:
            operation: Name of the operation that failed
            error: Original exception

        Raises:
            LocalStoreUnavailable: Wrapped storage error
        """
        raise LocalStoreUnavailable(operation, str(error)) from error

    async def _local(self, operation: str, method: str, *args: Any) -> Any:
        """Call a store method, mapping storage failures to LocalStoreUnavailable."""
        try:
            return await getattr(self.store, method)(*args)
        except (sqlite3.Error, OSError) as e:
            self._handle_db_error(operation, e)
