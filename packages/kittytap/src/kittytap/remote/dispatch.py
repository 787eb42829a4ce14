"""Dispatch remote-control commands with re-discovery and fallback.

Order within one dispatch is strictly sequential:
cache read -> discovery -> primary attempt -> one re-discovery and one
retry -> escape-sequence fallback (background requests only).

PUBLIC API:
  - RemoteDispatcher: Cache-aware command dispatcher
"""

import logging
import os
from collections.abc import Mapping, Sequence

from ..config import RemoteSettings
from ..tmux import in_tmux
from ..types import CommandRequest
from .cache import EndpointCache
from .discovery import EndpointDiscoverer
from .endpoint import (
    DirectEscapeSequence,
    DiscoveredEndpoint,
    DispatchOutcome,
    MultiplexerPassthrough,
    PrimarySocket,
)
from .exceptions import EndpointNotFoundError, TransportError
from .transport import encode_payload, send_escape, send_passthrough, send_primary

__all__ = ["RemoteDispatcher"]

logger = logging.getLogger(__name__)


class RemoteDispatcher:
    """Cache-aware command dispatcher.

    Attributes:
        cache: Shared endpoint cache.
        discoverer: Endpoint discovery.
        settings: Remote-control policy.
    """

    def __init__(
        self,
        cache: EndpointCache,
        discoverer: EndpointDiscoverer,
        settings: RemoteSettings,
        environ: Mapping[str, str] | None = None,
    ):
        self.cache = cache
        self.discoverer = discoverer
        self.settings = settings
        self._environ = os.environ if environ is None else environ

    async def discover(self) -> DiscoveredEndpoint | None:
        """Run discovery and cache the result."""
        endpoint = await self.discoverer.discover()
        if endpoint is None:
            return None
        return self.cache.set(endpoint)

    async def resolve_endpoint(self) -> DiscoveredEndpoint | None:
        """Return the cached endpoint, discovering one if needed."""
        endpoint = await self.cache.get()
        if endpoint is not None:
            return endpoint
        return await self.discover()

    def fallback_transport(self) -> MultiplexerPassthrough | DirectEscapeSequence:
        """Escape-sequence transport for the current environment."""
        if in_tmux(self._environ):
            return MultiplexerPassthrough()
        return DirectEscapeSequence()

    async def _send_primary(self, endpoint: DiscoveredEndpoint, request: CommandRequest) -> DispatchOutcome:
        transport = PrimarySocket(endpoint.socket_path)
        outcome = await send_primary(transport.address, request, self.settings)
        return DispatchOutcome(transport=outcome.transport, output=outcome.output, endpoint=endpoint)

    async def _send_fallback(self, request: CommandRequest, primary_error: TransportError | None) -> DispatchOutcome:
        transport = self.fallback_transport()
        if not transport.supports(request):
            if primary_error is not None:
                raise primary_error
            raise EndpointNotFoundError(f"No kitty endpoint found for '{request[0]}'")

        logger.info(f"Falling back to {transport.kind.value}")
        payload = await encode_payload(request, transport.kind)
        try:
            if isinstance(transport, MultiplexerPassthrough):
                return await send_passthrough(payload)
            return await send_escape(payload, self.settings.tty_path)
        except TransportError as e:
            logger.warning(f"Fallback failed: {e}")
            raise e from primary_error

    async def dispatch(self, request: Sequence[str]) -> DispatchOutcome:
        """Send a remote-control command.

        A failed primary attempt invalidates the cache and triggers exactly
        one re-discovery and one retry before falling back.

        Args:
            request: Remote-control verb and arguments, e.g. ["ls"].

        Returns:
            DispatchOutcome of whichever transport succeeded.

        Raises:
            EndpointNotFoundError: No endpoint and no fallback for this request.
            TransportError: Every applicable transport failed.
        """
        request = tuple(request)
        if not request:
            raise ValueError("Empty remote-control request")

        primary_error: TransportError | None = None

        endpoint = await self.resolve_endpoint()
        if endpoint is not None:
            try:
                return await self._send_primary(endpoint, request)
            except TransportError as e:
                logger.warning(f"Remote control via PID {endpoint.pid} failed: {e.diagnostic}")
                primary_error = e
                self.cache.invalidate(expected=endpoint)

            endpoint = await self.discover()
            if endpoint is not None:
                try:
                    return await self._send_primary(endpoint, request)
                except TransportError as e:
                    logger.warning(f"Retry via PID {endpoint.pid} failed: {e.diagnostic}")
                    primary_error = e
                    self.cache.invalidate(expected=endpoint)

        return await self._send_fallback(request, primary_error)
