"""Pure tmux operations used by endpoint discovery and fallback transport.

PUBLIC API:
  - run_tmux: Run tmux command and return result
  - in_tmux: Check if running inside tmux
  - parse_session_id: Extract the session token from $TMUX
  - ClientInfo: Client information named tuple
  - list_clients: List attached clients
  - resolve_client_pid: Map a $TMUX descriptor to a client PID
"""

from .clients import ClientInfo, list_clients, resolve_client_pid
from .core import in_tmux, parse_session_id, run_tmux

__all__ = [
    "run_tmux",
    "in_tmux",
    "parse_session_id",
    "ClientInfo",
    "list_clients",
    "resolve_client_pid",
]
