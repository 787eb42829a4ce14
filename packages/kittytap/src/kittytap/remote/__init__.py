"""Kitty remote-control discovery, caching and dispatch.

PUBLIC API:
  - DiscoveredEndpoint: Validated (pid, socket address) pair
  - DispatchOutcome: Result of a successful dispatch
  - EndpointCache: TTL-bounded endpoint store
  - EndpointDiscoverer: Ordered discovery strategies
  - RemoteDispatcher: Dispatch with re-discovery and fallback
  - validate_endpoint: Endpoint validation
  - set_background_request / clear_background_request: Request builders
  - RemoteError, EndpointNotFoundError, TransportError, MalformedResponseError
"""

from .cache import EndpointCache
from .discovery import EndpointDiscoverer
from .dispatch import RemoteDispatcher
from .endpoint import (
    DirectEscapeSequence,
    DiscoveredEndpoint,
    DispatchOutcome,
    MultiplexerPassthrough,
    PrimarySocket,
    clear_background_request,
    set_background_request,
)
from .exceptions import EndpointNotFoundError, MalformedResponseError, RemoteError, TransportError
from .validate import validate_endpoint

__all__ = [
    "DiscoveredEndpoint",
    "DispatchOutcome",
    "PrimarySocket",
    "MultiplexerPassthrough",
    "DirectEscapeSequence",
    "EndpointCache",
    "EndpointDiscoverer",
    "RemoteDispatcher",
    "validate_endpoint",
    "set_background_request",
    "clear_background_request",
    "RemoteError",
    "EndpointNotFoundError",
    "TransportError",
    "MalformedResponseError",
]
