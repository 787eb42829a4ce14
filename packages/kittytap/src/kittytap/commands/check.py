"""Environment inspection commands.

PUBLIC API:
  - check: Report kitty, tmux and remote-control availability
  - endpoint: Show the cached or freshly discovered kitty endpoint
  - window: Show kitty window dimensions
"""

from typing import Any

from ..app import app
from ..kitty import check_setup, window_dimensions_or_fallback
from ._utils import run


@app.command(
    display="markdown",
    fastmcp={"type": "tool", "description": "Check kitty, tmux and remote control setup"},
)
def check(state) -> dict[str, Any]:
    """Check the terminal environment.

    Args:
        state: Application state with the shared dispatcher.

    Returns:
        Markdown formatted setup report.
    """
    report = run(state, check_setup(state.dispatcher))

    elements: list[dict[str, Any]] = [
        {"type": "heading", "content": "Terminal environment", "level": 2},
        {
            "type": "list",
            "items": [
                f"kitty: {'yes' if report.in_kitty else 'no'}",
                f"tmux: {'yes' if report.in_tmux else 'no'}",
                f"{state.dispatcher.settings.pid_env}: {report.pid_hint or '-'}",
            ],
        },
    ]

    if report.endpoint:
        elements.append(
            {"type": "text", "content": f"Endpoint: PID {report.endpoint.pid}, socket {report.endpoint.socket_path}"}
        )
    else:
        elements.append({"type": "text", "content": "Could not discover kitty endpoint"})

    if report.dimensions:
        dims = report.dimensions
        source = "Remote control" if report.remote_ok else "Fallback"
        elements.append(
            {
                "type": "text",
                "content": f"{source}: {dims.width}x{dims.height} pixels "
                f"(cell {dims.cell_width:.1f}x{dims.cell_height:.1f})",
            }
        )

    if report.remote_error:
        elements.append({"type": "blockquote", "content": f"Remote control limited: {report.remote_error}"})
        if report.in_kitty:
            elements.append(
                {
                    "type": "code_block",
                    "content": "allow_remote_control yes\nlisten_on unix:/tmp/kitty",
                    "language": "conf",
                }
            )

    elements.append({"type": "heading", "content": "Background methods", "level": 3})
    elements.append(
        {
            "type": "list",
            "items": [f"{name}: {'available' if ok else 'not available'}" for name, ok in report.methods.items()],
        }
    )

    return {
        "elements": elements,
        "frontmatter": {
            "status": "ok" if report.remote_ok else "degraded",
            "in_kitty": report.in_kitty,
            "in_tmux": report.in_tmux,
        },
    }


@app.command(
    display="markdown",
    fastmcp={"type": "tool", "description": "Show the kitty remote-control endpoint"},
)
def endpoint(state, refresh: bool = False) -> dict[str, Any]:
    """Show the cached or discovered kitty endpoint.

    Args:
        state: Application state with the shared dispatcher.
        refresh: Drop the cached endpoint and rediscover.
    """
    dispatcher = state.dispatcher
    if refresh:
        dispatcher.cache.invalidate()

    found = run(state, dispatcher.resolve_endpoint())
    if found is None:
        return {
            "elements": [{"type": "text", "content": "No kitty endpoint found"}],
            "frontmatter": {"status": "not_found"},
        }

    return {
        "elements": [{"type": "text", "content": f"PID {found.pid} at {found.socket_path}"}],
        "frontmatter": {"status": "ok", "pid": found.pid, "socket": found.socket_path},
    }


@app.command(
    display="text",
    fastmcp={"type": "tool", "description": "Show kitty window dimensions"},
)
def window(state) -> str:
    """Show kitty window dimensions, estimated when remote control fails."""
    dims = run(state, window_dimensions_or_fallback(state.dispatcher))
    return f"{dims.width}x{dims.height} (cell: {dims.cell_width:.1f}x{dims.cell_height:.1f})"
