"""kittytap entry point.

Runs the ReplKit2 app as an interactive REPL, or as an MCP server with
--mcp. --debug turns on per-PID discovery logging.
"""

import atexit
import sys
import logging

from .app import app

atexit.register(lambda: app.state.runner.close() if getattr(app, "state", None) else None)


def main():
    """Run kittytap as REPL or MCP server based on command line arguments."""
    logging.basicConfig(
        level=logging.DEBUG if "--debug" in sys.argv else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    if "--mcp" in sys.argv:
        app.mcp.run()
    else:
        app.run(title="kittytap - kitty remote control")


if __name__ == "__main__":
    main()
