"""Async helper wrapper for the sync local stores."""
from __future__ import annotations

from typing import Any, Callable, TypeVar

import anyio

from storefront.storage.changes import ChangeFeed

T = TypeVar("T")


class AsyncStoreProxy:
    """Proxy that runs sync store calls in a worker thread.

    Methods listed in the store's ``WRITES`` publish the store's table on the
    change feed once the call has committed.
    """

    def __init__(self, store: Any, changes: ChangeFeed | None = None):
        self._store = store
        self._changes = changes if changes is not None else store.db.changes

    @property
    def sync(self) -> Any:
        """Expose underlying sync store (use sparingly)."""
        return self._store

    @property
    def changes(self) -> ChangeFeed:
        return self._changes

    @property
    def table(self) -> str:
        return self._store.table

    async def run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run a sync callable in a worker thread."""
        return await anyio.to_thread.run_sync(lambda: func(*args, **kwargs))

    def __getattr__(self, name: str):
        attr = getattr(self._store, name)
        if not callable(attr):
            return attr

        publishes = name in getattr(self._store, "WRITES", ())

        async def _call(*args: Any, **kwargs: Any):
            result = await anyio.to_thread.run_sync(lambda: attr(*args, **kwargs))
            if publishes:
                await self._changes.publish(self._store.table)
            return result

        return _call
