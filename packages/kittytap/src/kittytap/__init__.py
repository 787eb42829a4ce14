"""Kitty remote control from inside tmux.

Finds the kitty process hosting the current tmux session, validates and
caches its remote-control socket, and dispatches kitten @ commands with an
escape-sequence fallback for background images. Built on ReplKit2 for dual
REPL/MCP functionality.

PUBLIC API:
  - app: ReplKit2 application instance with kittytap commands
"""

from .app import app

__version__ = "0.1.0"
__all__ = ["app"]
