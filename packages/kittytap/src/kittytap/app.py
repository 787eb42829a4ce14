"""kittytap ReplKit2 application.

Main application entry point providing dual REPL/MCP functionality for kitty
remote control from inside tmux.
"""

from dataclasses import dataclass, field

from replkit2 import App

from .kitty import build_dispatcher
from .remote import RemoteDispatcher
from .runner import LoopRunner


@dataclass
class KittyTapState:
    """Application state for kittytap.

    Owns the one endpoint cache shared by every command in this process,
    through the dispatcher, and the event loop commands run on.
    """

    dispatcher: RemoteDispatcher = field(default_factory=build_dispatcher)
    runner: LoopRunner = field(default_factory=LoopRunner)


# Must be created before command imports for decorator registration
app = App(
    "kittytap",
    KittyTapState,
    uri_scheme="kittytap",
    fastmcp={
        "description": "Kitty remote control from inside tmux",
        "tags": {"terminal", "kitty", "tmux"},
    },
)


# Command imports trigger @app.command decorator registration
from .commands import check  # noqa: E402, F401
from .commands import remote  # noqa: E402, F401
from .commands import background  # noqa: E402, F401
