"""Transports that deliver commands to kitty.

Only the primary socket accepts arbitrary requests. The two escape-sequence
transports carry OSC 20 (background image) with a base64 payload, which
covers set-background-image and its "none" form.

PUBLIC API:
  - send_primary: Run kitten @ against a control socket
  - encode_payload: Base64 payload for a fallback-capable request
  - passthrough_sequence / escape_sequence: Escape wrappers
  - send_passthrough: Deliver OSC 20 via tmux run-shell passthrough
  - send_escape: Write OSC 20 to the controlling terminal
"""

import asyncio
import base64
import logging

import aiofiles

from ..config import RemoteSettings
from ..tmux import run_tmux
from ..types import CommandRequest, SocketAddress, TransportKind
from .endpoint import DispatchOutcome, is_clear_request, is_fallback_capable
from .exceptions import TransportError

logger = logging.getLogger(__name__)

ESC = "\x1b"
OSC_BACKGROUND = 20


async def send_primary(address: SocketAddress, request: CommandRequest, settings: RemoteSettings) -> DispatchOutcome:
    """Run a remote-control command over the kitty socket.

    Args:
        address: Socket address (e.g., "unix:/tmp/kitty-1234").
        request: Remote-control verb and arguments.
        settings: Provides the remote-control binary.

    Returns:
        DispatchOutcome with raw stdout.

    Raises:
        TransportError: If the binary is missing or exits non-zero.
    """
    cmd = [settings.remote_binary, "@", "--to", address, *request]
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise TransportError(TransportKind.PRIMARY_SOCKET, f"Failed to execute {cmd[0]}: {e}") from e

    stdout, stderr = await proc.communicate()
    if proc.returncode != 0:
        diagnostic = stderr.decode("utf-8", "replace").strip() or f"exit status {proc.returncode}"
        raise TransportError(TransportKind.PRIMARY_SOCKET, diagnostic)

    return DispatchOutcome(transport=TransportKind.PRIMARY_SOCKET, output=stdout)


async def encode_payload(request: CommandRequest, kind: TransportKind) -> str:
    """Encode the OSC 20 payload of a fallback-capable request.

    Set requests carry the base64 image bytes, clear requests an empty payload.

    Raises:
        TransportError: If the request has no escape encoding or the image
            cannot be read.
    """
    if not is_fallback_capable(request):
        raise TransportError(kind, f"{request[0] if request else 'empty request'} has no escape-sequence encoding")

    if is_clear_request(request):
        return ""

    image_path = request[1]
    try:
        async with aiofiles.open(image_path, "rb") as f:
            data = await f.read()
    except OSError as e:
        raise TransportError(kind, f"Failed to read image file: {e}") from e

    return base64.b64encode(data).decode("ascii")


def escape_sequence(payload: str) -> str:
    """OSC 20 terminated by ST."""
    return f"{ESC}]{OSC_BACKGROUND};{payload}{ESC}\\"


def passthrough_sequence(payload: str) -> str:
    """printf format for OSC 20 wrapped in tmux DCS passthrough.

    Inner ESCs are doubled as tmux requires; the result is meant for
    printf, so ESC is spelled \\033 and backslash \\\\.
    """
    return f"\\033Ptmux;\\033\\033]{OSC_BACKGROUND};{payload}\\033\\033\\\\\\033\\\\"


async def send_passthrough(payload: str) -> DispatchOutcome:
    """Deliver OSC 20 through tmux.

    Raises:
        TransportError: If tmux run-shell fails.
    """
    code, _, stderr = await run_tmux(["run-shell", f"printf '{passthrough_sequence(payload)}'"])
    if code != 0:
        raise TransportError(
            TransportKind.MULTIPLEXER_PASSTHROUGH,
            stderr.strip() or f"tmux run-shell exit status {code}",
        )
    return DispatchOutcome(transport=TransportKind.MULTIPLEXER_PASSTHROUGH)


async def send_escape(payload: str, tty_path: str) -> DispatchOutcome:
    """Write OSC 20 directly to the controlling terminal.

    Raises:
        TransportError: If the terminal device cannot be written.
    """
    try:
        async with aiofiles.open(tty_path, "wb") as tty:
            await tty.write(escape_sequence(payload).encode("ascii"))
            await tty.flush()
    except OSError as e:
        raise TransportError(TransportKind.DIRECT_ESCAPE_SEQUENCE, f"Cannot write to {tty_path}: {e}") from e
    return DispatchOutcome(transport=TransportKind.DIRECT_ESCAPE_SEQUENCE)
