from __future__ import annotations

import asyncio
import threading
from typing import Any, Coroutine, Optional


class EventLoopThread:
    """One asyncio loop on a background thread.

    Flask views are synchronous; they hand coroutines to this loop so every
    command and hook runs on the same loop, one event at a time.
    """

    def __init__(self, *, timeout: Optional[float] = 60.0):
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name="attendance-bot-loop", daemon=True)
        self._timeout = timeout

    def _run(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    def start(self) -> "EventLoopThread":
        if not self._thread.is_alive():
            self._thread.start()
        return self

    def run(self, coro: Coroutine[Any, Any, Any]) -> Any:
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result(timeout=self._timeout)

    def stop(self) -> None:
        if self._thread.is_alive():
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join(timeout=5)
        self._loop.close()
