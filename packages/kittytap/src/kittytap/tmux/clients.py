"""Resolve the tmux client attached to our session.

PUBLIC API:
  - ClientInfo: Client information named tuple
  - list_clients: Get all attached tmux clients
  - resolve_client_pid: Map a $TMUX descriptor to a client PID
"""

import logging
from typing import NamedTuple

from ..types import ProcessId
from .core import parse_format_line, parse_session_id, run_tmux

logger = logging.getLogger(__name__)

CLIENT_FORMAT = "#{client_pid} #{session_id}"


class ClientInfo(NamedTuple):
    """Client information named tuple.

    Attributes:
        pid: Client process ID.
        session_id: Session the client is attached to ("$3" style).
    """

    pid: ProcessId
    session_id: str

    @classmethod
    def from_format_line(cls, line: str) -> "ClientInfo | None":
        """Parse from tmux format string, None for unusable lines."""
        parts = parse_format_line(line)
        try:
            pid = int(parts["0"])
        except (KeyError, ValueError):
            return None
        return cls(pid=pid, session_id=parts.get("1", ""))

    def in_session(self, token: str) -> bool:
        """Check if this client is attached to the given session token."""
        return self.session_id.lstrip("$") == token.lstrip("$")


async def list_clients() -> list[ClientInfo]:
    """Get all attached tmux clients.

    Returns:
        Parsed clients, empty if the query fails.
    """
    code, stdout, stderr = await run_tmux(["list-clients", "-F", CLIENT_FORMAT])
    if code != 0:
        logger.warning(f"tmux list-clients failed: {stderr.strip()}")
        return []

    clients = []
    for line in stdout.splitlines():
        client = ClientInfo.from_format_line(line)
        if client:
            clients.append(client)
    return clients


async def resolve_client_pid(descriptor: str) -> ProcessId | None:
    """Find the PID of the tmux client attached to our session.

    Multi-client sessions make attribution best-effort: the first client in
    our session wins, otherwise any listed client is used.

    Args:
        descriptor: Value of $TMUX.

    Returns:
        Client PID, or None if no clients are listed or the query fails.
    """
    clients = await list_clients()
    if not clients:
        return None

    token = parse_session_id(descriptor)
    if token is not None:
        for client in clients:
            if client.in_session(token):
                return client.pid

    logger.debug(f"No client matched session {token!r}, using PID {clients[0].pid}")
    return clients[0].pid
