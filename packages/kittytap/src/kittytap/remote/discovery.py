"""Kitty endpoint discovery.

Strategies run in order and stop at the first candidate that validates:

1. env_hint: the PID in $KITTY_PID, if it really is kitty
2. tmux_ancestry: walk up from the tmux client attached to our session
3. global_scan: any kitty process that has children

PUBLIC API:
  - EndpointDiscoverer: Ordered discovery with validation
"""

import logging
import os
from collections.abc import Awaitable, Callable, Mapping

from ..config import RemoteSettings
from ..process import find_ancestor, has_children, is_target_process, matches_signature, scan_processes
from ..tmux import resolve_client_pid
from ..tmux.core import TMUX_ENV
from ..types import ProcessId
from .endpoint import DiscoveredEndpoint
from .validate import validate_endpoint

__all__ = ["EndpointDiscoverer"]

logger = logging.getLogger(__name__)

type Strategy = Callable[[], Awaitable[list[ProcessId]]]


class EndpointDiscoverer:
    """Ordered endpoint discovery with validation.

    Attributes:
        settings: Discovery policy.
        strategies: (name, strategy) pairs in the order they run.
    """

    def __init__(
        self,
        settings: RemoteSettings,
        environ: Mapping[str, str] | None = None,
        validator: Callable[[DiscoveredEndpoint], Awaitable[bool]] | None = None,
    ):
        self.settings = settings
        self._environ = os.environ if environ is None else environ
        self._validator = validator
        self.strategies: list[tuple[str, Strategy]] = [
            ("env_hint", self._from_env_hint),
            ("tmux_ancestry", self._from_tmux_ancestry),
            ("global_scan", self._from_global_scan),
        ]

    async def _is_kitty(self, pid: ProcessId) -> bool:
        return await is_target_process(pid, self.settings.signature, self.settings.self_name)

    async def _validate(self, endpoint: DiscoveredEndpoint) -> bool:
        if self._validator is not None:
            return await self._validator(endpoint)
        return await validate_endpoint(endpoint, self.settings)

    async def _from_env_hint(self) -> list[ProcessId]:
        hint = self._environ.get(self.settings.pid_env)
        if not hint:
            return []

        try:
            pid = int(hint.strip())
        except ValueError:
            logger.warning(f"Ignoring non-numeric {self.settings.pid_env}={hint!r}")
            return []

        if pid > 0 and await self._is_kitty(pid):
            logger.info(f"Environment {self.settings.pid_env} {pid} verified as kitty process")
            return [pid]

        logger.warning(f"Environment {self.settings.pid_env} {pid} is not a valid kitty process")
        return []

    async def _from_tmux_ancestry(self) -> list[ProcessId]:
        descriptor = self._environ.get(TMUX_ENV)
        if not descriptor:
            return []

        client_pid = await resolve_client_pid(descriptor)
        if client_pid is None:
            logger.warning("Could not find tmux client PID")
            return []

        logger.debug(f"Found tmux client PID: {client_pid}")
        kitty_pid = await find_ancestor(client_pid, self._is_kitty, max_hops=self.settings.max_ancestor_hops)
        if kitty_pid is None:
            logger.warning(f"No kitty found in process tree from tmux client {client_pid}")
            return []
        return [kitty_pid]

    async def _from_global_scan(self) -> list[ProcessId]:
        processes = await scan_processes()
        candidates = []
        for pid in sorted(processes):
            record = processes[pid]
            if not matches_signature(record.cmdline, self.settings.signature, self.settings.self_name):
                continue
            # A kitty with no children is unlikely to be hosting our session
            if has_children(pid, processes):
                candidates.append(pid)
            else:
                logger.debug(f"Skipping childless kitty PID {pid}")
        return candidates

    async def discover(self) -> DiscoveredEndpoint | None:
        """Run the strategies in order.

        Returns:
            First validated endpoint, or None when every strategy fails.
        """
        for name, strategy in self.strategies:
            try:
                candidates = await strategy()
            except OSError as e:
                logger.warning(f"Discovery strategy {name} failed: {e}")
                continue

            for pid in candidates:
                endpoint = DiscoveredEndpoint.for_pid(pid, self.settings.socket_template)
                if await self._validate(endpoint):
                    logger.info(f"Discovered kitty PID {pid} via {name}, socket {endpoint.socket_path}")
                    return endpoint
                logger.warning(f"Candidate kitty PID {pid} from {name} failed validation")

        logger.warning("No suitable kitty process found")
        return None
