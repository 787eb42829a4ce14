"""Run arbitrary kitty remote-control commands.

PUBLIC API:
  - remote: Dispatch a kitten @ command over the discovered socket
"""

import shlex

from ..app import app
from ..remote import RemoteError
from ._utils import run


@app.command(
    display="codeblock",
    fastmcp={"type": "tool", "description": "Run a kitty remote-control command"},
)
def remote(state, command: str) -> dict:
    """Run a remote-control command, e.g. "ls" or "set-font-size 14".

    Args:
        state: Application state with the shared dispatcher.
        command: Verb and arguments, shell-quoted.

    Returns dict with content and metadata.
    """
    try:
        args = shlex.split(command)
    except ValueError as e:
        return {"content": f"Error: {e}", "process": "text", "status": "error"}

    if not args:
        return {"content": "Error: empty command", "process": "text", "status": "error"}

    try:
        outcome = run(state, state.dispatcher.dispatch(args))
    except RemoteError as e:
        return {"content": f"Error: {e}", "process": "text", "status": "error", "command": command}

    return {
        "content": outcome.text,
        "process": "json" if args[0] == "ls" else "text",
        "status": "completed",
        "command": command,
        "transport": outcome.transport.value,
        "pid": outcome.endpoint.pid if outcome.endpoint else None,
    }
