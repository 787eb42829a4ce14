"""Helpers shared by command modules."""

from collections.abc import Coroutine
from typing import Any, TypeVar

T = TypeVar("T")


def run(state, coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine on the state's event loop, in REPL and MCP mode alike."""
    return state.runner.run(coro)
