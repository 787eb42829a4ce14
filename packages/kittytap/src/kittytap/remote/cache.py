"""TTL-bounded cache of the last validated endpoint.

PUBLIC API:
  - EndpointCache: Thread-safe single-slot endpoint store
"""

import logging
import threading
import time
from collections.abc import Awaitable, Callable

from .endpoint import DiscoveredEndpoint

logger = logging.getLogger(__name__)

type Validator = Callable[[DiscoveredEndpoint], Awaitable[bool]]

DEFAULT_TTL = 600.0


class EndpointCache:
    """Thread-safe single-slot endpoint store.

    The lock guards only the slot itself. Re-validation in get() runs
    outside it, so a slow /proc read never blocks set() or invalidate().
    Entries are never written to disk.

    Attributes:
        ttl: Seconds an entry stays usable after set().
    """

    def __init__(
        self,
        validator: Validator,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize an empty cache.

        Args:
            validator: Async re-validation applied on every get()
            ttl: Staleness threshold in seconds
            clock: Monotonic time source
        """
        self.ttl = ttl
        self._validator = validator
        self._clock = clock
        self._lock = threading.Lock()
        self._entry: DiscoveredEndpoint | None = None

    def peek(self) -> DiscoveredEndpoint | None:
        """Current entry without expiry or validation checks."""
        with self._lock:
            return self._entry

    def set(self, endpoint: DiscoveredEndpoint) -> DiscoveredEndpoint:
        """Store an endpoint, stamped with the current time.

        Returns:
            The stored (restamped) endpoint.
        """
        stamped = DiscoveredEndpoint(
            pid=endpoint.pid,
            socket_path=endpoint.socket_path,
            validated_at=self._clock(),
        )
        with self._lock:
            self._entry = stamped
        logger.debug(f"Cached endpoint PID {stamped.pid} at {stamped.socket_path}")
        return stamped

    def invalidate(self, expected: DiscoveredEndpoint | None = None) -> None:
        """Clear the cache.

        Args:
            expected: Only clear if the slot still holds this entry; an
                endpoint stored meanwhile by set() is kept.
        """
        with self._lock:
            if expected is None or self._entry is expected:
                self._entry = None

    async def get(self) -> DiscoveredEndpoint | None:
        """Return the cached endpoint if fresh and still valid.

        Expired or invalid entries are cleared.
        """
        with self._lock:
            entry = self._entry

        if entry is None:
            return None

        if entry.age(self._clock()) >= self.ttl:
            logger.debug(f"Cached endpoint PID {entry.pid} expired")
            self.invalidate(expected=entry)
            return None

        if not await self._validator(entry):
            logger.warning(f"Cached endpoint PID {entry.pid} failed re-validation")
            self.invalidate(expected=entry)
            return None

        return entry
