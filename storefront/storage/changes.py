"""Change notifications for local tables."""
from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator, Iterable


class ChangeFeed:
    """Per-table version counters with push notification to watchers.

    Writers call :meth:`publish` after a commit. Watchers wake up on the
    next change of any table they follow; several commits that land while a
    watcher is busy collapse into a single wake-up.
    """

    def __init__(self) -> None:
        self._versions: defaultdict[str, int] = defaultdict(int)
        self._condition = asyncio.Condition()

    def version(self, table: str) -> int:
        return self._versions[table]

    def _snapshot(self, tables: tuple[str, ...]) -> tuple[int, ...]:
        return tuple(self._versions[table] for table in tables)

    async def publish(self, table: str) -> None:
        """Record a committed write to ``table`` and wake every watcher."""
        self._versions[table] += 1
        async with self._condition:
            self._condition.notify_all()

    async def watch(self, tables: Iterable[str]) -> AsyncIterator[None]:
        """Yield once immediately, then once per observed change."""
        followed = tuple(sorted(set(tables)))
        seen = self._snapshot(followed)
        yield

        while True:
            async with self._condition:
                await self._condition.wait_for(lambda: self._snapshot(followed) != seen)
                seen = self._snapshot(followed)
            yield
