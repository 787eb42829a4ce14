"""Event loop for synchronous command functions.

ReplKit2 calls commands synchronously, from the REPL thread or from inside
the MCP server's running event loop. asyncio.run() fails in the latter, so
commands submit their coroutines to one long-lived loop on a daemon thread.

PUBLIC API:
  - LoopRunner: Background event loop shared by all commands
"""

import asyncio
import logging
import threading
from collections.abc import Coroutine
from typing import Any, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoopRunner:
    """Background event loop shared by all commands.

    The loop thread starts on first use. Endpoint cache access from this
    thread and the caller's is safe since the cache guards its slot with a
    threading.Lock.
    """

    def __init__(self, name: str = "kittytap-loop"):
        self.name = name
        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None:
                loop = asyncio.new_event_loop()
                thread = threading.Thread(target=loop.run_forever, name=self.name, daemon=True)
                thread.start()
                self._loop, self._thread = loop, thread
                logger.debug(f"Started event loop thread {self.name}")
            return self._loop

    def run(self, coro: Coroutine[Any, Any, T], timeout: Optional[float] = None) -> T:
        """Run a coroutine on the background loop and wait for its result.

        Exceptions raised by the coroutine propagate to the caller.
        """
        future = asyncio.run_coroutine_threadsafe(coro, self._ensure_loop())
        return future.result(timeout)

    def close(self) -> None:
        """Stop the loop thread; a later run() starts a new one."""
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = self._thread = None

        if loop is None or thread is None:
            return

        loop.call_soon_threadsafe(loop.stop)
        thread.join()
        loop.close()
