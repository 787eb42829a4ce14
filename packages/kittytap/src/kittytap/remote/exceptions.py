"""Remote-control exceptions.

PUBLIC API:
  - RemoteError: Base exception for remote-control operations
  - EndpointNotFoundError: Every discovery strategy came up empty
  - TransportError: A transport failed to deliver a command
  - MalformedResponseError: Kitty answered with unparsable output
"""

from ..errors import KittyTapError
from ..types import TransportKind


class RemoteError(KittyTapError):
    """Base exception for remote-control operations."""

    pass


class EndpointNotFoundError(RemoteError):
    """Raised when no kitty endpoint exists and no fallback applies."""

    pass


class TransportError(RemoteError):
    """Raised when a transport fails.

    Attributes:
        kind: Transport that failed.
        diagnostic: Underlying error text (stderr, OS error).
    """

    def __init__(self, kind: TransportKind, diagnostic: str):
        self.kind = kind
        self.diagnostic = diagnostic
        super().__init__(f"{kind.value} failed: {diagnostic}")


class MalformedResponseError(RemoteError):
    """Raised when remote output cannot be parsed. Never retried."""

    pass
