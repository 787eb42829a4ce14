"""Type definitions for kittytap.

Process identifiers, command requests and transport kinds shared by the
discovery and dispatch layers.
"""

from enum import Enum


type ProcessId = int  # OS pid, reused after exit - always re-validate
type SocketAddress = str  # e.g., "unix:/tmp/kitty-1234"
type CommandRequest = tuple[str, ...]  # remote-control verb plus its arguments

# Verb used by the only fallback-capable requests
SET_BACKGROUND_VERB = "set-background-image"
CLEAR_BACKGROUND_ARG = "none"


class TransportKind(str, Enum):
    """Channel used to deliver a command."""

    PRIMARY_SOCKET = "primary_socket"
    MULTIPLEXER_PASSTHROUGH = "multiplexer_passthrough"
    DIRECT_ESCAPE_SEQUENCE = "direct_escape_sequence"
