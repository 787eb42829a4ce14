"""Core tmux operations - shared utilities for all tmux modules.

PUBLIC API:
  - run_tmux: Execute tmux command and return result
  - parse_format_line: Parse tmux format string output into dict
  - in_tmux: Check if we are running inside tmux
  - parse_session_id: Extract the session token from $TMUX
"""

import asyncio
import logging
import os
from collections.abc import Mapping

logger = logging.getLogger(__name__)

TMUX_ENV = "TMUX"


async def run_tmux(args: list[str]) -> tuple[int, str, str]:
    """Run tmux command, return (returncode, stdout, stderr).

    A missing tmux binary is reported as returncode 127 instead of raising.
    """
    cmd = ["tmux"] + args
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        logger.debug(f"Could not run {cmd[0]}: {e}")
        return 127, "", str(e)

    stdout, stderr = await proc.communicate()
    return proc.returncode, stdout.decode(errors="replace"), stderr.decode(errors="replace")


def parse_format_line(line: str, delimiter: str = " ") -> dict:
    """Parse tmux format string output into dict."""
    parts = line.strip().split(delimiter)
    return {str(i): part for i, part in enumerate(parts) if part}


def in_tmux(environ: Mapping[str, str] | None = None) -> bool:
    """Check if $TMUX is set."""
    env = os.environ if environ is None else environ
    return bool(env.get(TMUX_ENV))


def parse_session_id(descriptor: str) -> str | None:
    """Extract the session token from a $TMUX descriptor.

    Args:
        descriptor: Value like "/tmp/tmux-1000/default,12345,0".

    Returns:
        Session token ("0" above), or None if the descriptor is malformed.
    """
    parts = descriptor.split(",")
    if len(parts) < 3 or not parts[2].strip():
        return None
    return parts[2].strip()
