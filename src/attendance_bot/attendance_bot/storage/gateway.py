from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Sequence

from ..core.exceptions import ExternalIOError
from .store import DurableStore, Table

logger = logging.getLogger(__name__)


class PersistenceGateway:
    """Async front of the durable store.

    Store calls run in a worker thread with a timeout; a failed call is retried
    ``retries`` times before ``ExternalIOError`` is raised, so a hung store can
    never stall the event loop indefinitely.
    """

    def __init__(self, store: DurableStore, *, retries: int = 1, timeout: float = 10.0):
        self._store = store
        self._retries = max(0, int(retries))
        self._timeout = float(timeout)

    async def append(self, table: Table, record: dict) -> None:
        await self._call(f"append {Table(table).value}", self._store.append, table, record)

    async def read(self, table: Table) -> Sequence[dict]:
        return await self._call(f"read {Table(table).value}", self._store.read, table)

    async def _call(self, what: str, fn: Callable[..., Any], *args: Any) -> Any:
        attempts = self._retries + 1
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                return await asyncio.wait_for(asyncio.to_thread(fn, *args), timeout=self._timeout)
            except Exception as exc:
                last_error = exc
                logger.warning("store %s failed (attempt %d/%d): %r", what, attempt, attempts, exc)
        raise ExternalIOError(f"store {what} failed after {attempts} attempts") from last_error
