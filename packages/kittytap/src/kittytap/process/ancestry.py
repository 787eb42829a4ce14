"""Ancestor walk over the live process tree.

PUBLIC API:
  - find_ancestor: First ancestor (inclusive) matching a predicate
"""

import logging
from collections.abc import Awaitable, Callable

from ..types import ProcessId
from .introspect import get_parent_pid

logger = logging.getLogger(__name__)

type PidPredicate = Callable[[ProcessId], Awaitable[bool]]

DEFAULT_MAX_HOPS = 20


async def find_ancestor(
    start_pid: ProcessId,
    predicate: PidPredicate,
    max_hops: int = DEFAULT_MAX_HOPS,
    parent_of: Callable[[ProcessId], Awaitable[ProcessId | None]] = get_parent_pid,
) -> ProcessId | None:
    """Walk up the process tree looking for a matching process.

    The start PID itself is checked first. Each hop re-reads live metadata,
    so a parent that exited ends the walk instead of raising.

    Args:
        start_pid: PID to start from.
        predicate: Async check applied to each PID.
        max_hops: Maximum number of processes to inspect.
        parent_of: Parent lookup, defaults to /proc.

    Returns:
        First matching PID, or None when the ancestry runs out, a cycle is
        detected, or the hop bound is reached.
    """
    current: ProcessId | None = start_pid
    visited: set[ProcessId] = set()

    for _ in range(max_hops):
        if current is None:
            return None

        if current in visited:
            logger.warning(f"Process tree cycle detected at PID {current}")
            return None
        visited.add(current)

        if await predicate(current):
            return current

        current = await parent_of(current)

    logger.debug(f"No match within {max_hops} hops of PID {start_pid}")
    return None
