"""Background image commands.

Setting a background is non-essential: failures are reported, never raised.

PUBLIC API:
  - set_background: Set kitty's background image
  - clear_background: Clear kitty's background image
"""

from typing import Any

from ..app import app
from ..errors import KittyTapError, markdown_error_response
from ..kitty import clear_background as _clear_background
from ..kitty import set_background as _set_background
from ._utils import run


def _describe(error: KittyTapError) -> str:
    # Fallback failures carry the primary transport error as their cause
    if error.__cause__ is not None:
        return f"{error} (after {error.__cause__})"
    return str(error)


@app.command(
    display="markdown",
    fastmcp={"type": "tool", "description": "Set kitty background image"},
)
def set_background(state, image: str) -> dict[str, Any]:
    """Set kitty's background image.

    Args:
        state: Application state with the shared dispatcher.
        image: Path to the image file.
    """
    try:
        outcome = run(state, _set_background(state.dispatcher, image))
    except KittyTapError as e:
        return markdown_error_response(_describe(e), action="set_background", image=image)

    return {
        "elements": [{"type": "text", "content": f"Background set from {image}"}],
        "frontmatter": {"action": "set_background", "status": "ok", "transport": outcome.transport.value},
    }


@app.command(
    display="markdown",
    fastmcp={"type": "tool", "description": "Clear kitty background image"},
)
def clear_background(state) -> dict[str, Any]:
    """Clear kitty's background image."""
    try:
        outcome = run(state, _clear_background(state.dispatcher))
    except KittyTapError as e:
        return markdown_error_response(_describe(e), action="clear_background")

    return {
        "elements": [{"type": "text", "content": "Background cleared"}],
        "frontmatter": {"action": "clear_background", "status": "ok", "transport": outcome.transport.value},
    }
