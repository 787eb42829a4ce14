"""Endpoint, transport and request types for kitty remote control.

PUBLIC API:
  - DiscoveredEndpoint: Validated (pid, socket address) pair
  - PrimarySocket / MultiplexerPassthrough / DirectEscapeSequence: Transports
  - Transport: Union of the transport variants
  - DispatchOutcome: Result of a successful dispatch
  - set_background_request / clear_background_request: Request builders
  - is_fallback_capable: Check if a request has a pre-agreed encoding
"""

import time
from dataclasses import dataclass, field

from ..types import (
    CLEAR_BACKGROUND_ARG,
    SET_BACKGROUND_VERB,
    CommandRequest,
    ProcessId,
    SocketAddress,
    TransportKind,
)

SOCKET_SCHEME = "unix:"


@dataclass(frozen=True)
class DiscoveredEndpoint:
    """Validated kitty remote-control endpoint.

    Attributes:
        pid: Kitty process ID.
        socket_path: Socket address derived from pid.
        validated_at: Monotonic timestamp of the last validation.
    """

    pid: ProcessId
    socket_path: SocketAddress
    validated_at: float = field(default_factory=time.monotonic, compare=False)

    @classmethod
    def for_pid(cls, pid: ProcessId, template: str, now: float | None = None) -> "DiscoveredEndpoint":
        """Derive the endpoint of a kitty process."""
        return cls(
            pid=pid,
            socket_path=template.format(pid=pid),
            validated_at=time.monotonic() if now is None else now,
        )

    @property
    def socket_file(self) -> str:
        """Filesystem path of the socket, scheme stripped."""
        return self.socket_path.removeprefix(SOCKET_SCHEME)

    def age(self, now: float | None = None) -> float:
        """Seconds since validation."""
        return (time.monotonic() if now is None else now) - self.validated_at


@dataclass(frozen=True)
class PrimarySocket:
    """kitten @ over the kitty control socket. Accepts any request."""

    address: SocketAddress
    kind: TransportKind = field(default=TransportKind.PRIMARY_SOCKET, init=False)

    def supports(self, request: CommandRequest) -> bool:
        return True


@dataclass(frozen=True)
class MultiplexerPassthrough:
    """OSC 20 wrapped in tmux DCS passthrough, sent via run-shell."""

    kind: TransportKind = field(default=TransportKind.MULTIPLEXER_PASSTHROUGH, init=False)

    def supports(self, request: CommandRequest) -> bool:
        return is_fallback_capable(request)


@dataclass(frozen=True)
class DirectEscapeSequence:
    """OSC 20 written straight to the controlling terminal."""

    kind: TransportKind = field(default=TransportKind.DIRECT_ESCAPE_SEQUENCE, init=False)

    def supports(self, request: CommandRequest) -> bool:
        return is_fallback_capable(request)


type Transport = PrimarySocket | MultiplexerPassthrough | DirectEscapeSequence


@dataclass(frozen=True)
class DispatchOutcome:
    """Result of a successful dispatch.

    Attributes:
        transport: Transport kind that delivered the command.
        output: Raw stdout of the command (empty for escape transports).
        endpoint: Endpoint used, None for fallback transports.
    """

    transport: TransportKind
    output: bytes = b""
    endpoint: DiscoveredEndpoint | None = None

    @property
    def text(self) -> str:
        return self.output.decode("utf-8", "replace")


def set_background_request(image_path: str) -> CommandRequest:
    """Request that sets kitty's background image."""
    return (SET_BACKGROUND_VERB, image_path)


def clear_background_request() -> CommandRequest:
    """Request that clears kitty's background image."""
    return (SET_BACKGROUND_VERB, CLEAR_BACKGROUND_ARG)


def is_fallback_capable(request: CommandRequest) -> bool:
    """Check if a request can travel over an escape-sequence transport."""
    return len(request) == 2 and request[0] == SET_BACKGROUND_VERB and bool(request[1])


def is_clear_request(request: CommandRequest) -> bool:
    return is_fallback_capable(request) and request[1] == CLEAR_BACKGROUND_ARG
