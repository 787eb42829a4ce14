import base64
import shutil

import pytest

from kittytap.config import RemoteSettings
from kittytap.remote import TransportError, clear_background_request, set_background_request
from kittytap.remote import transport
from kittytap.types import TransportKind


def test_escape_sequence():
    assert transport.escape_sequence("QUJD") == "\x1b]20;QUJD\x1b\\"
    assert transport.escape_sequence("") == "\x1b]20;\x1b\\"


def test_passthrough_sequence_doubles_inner_escapes():
    assert transport.passthrough_sequence("QUJD") == r"\033Ptmux;\033\033]20;QUJD\033\033\\\033\\"


@pytest.mark.asyncio
async def test_encode_payload_set(image_file):
    payload = await transport.encode_payload(set_background_request(str(image_file)), TransportKind.DIRECT_ESCAPE_SEQUENCE)

    assert base64.b64decode(payload) == image_file.read_bytes()


@pytest.mark.asyncio
async def test_encode_payload_clear():
    assert await transport.encode_payload(clear_background_request(), TransportKind.DIRECT_ESCAPE_SEQUENCE) == ""


@pytest.mark.asyncio
async def test_encode_payload_rejects_other_verbs():
    with pytest.raises(TransportError):
        await transport.encode_payload(("ls",), TransportKind.DIRECT_ESCAPE_SEQUENCE)


@pytest.mark.asyncio
async def test_encode_payload_missing_image(tmp_path):
    with pytest.raises(TransportError) as exc_info:
        await transport.encode_payload(
            set_background_request(str(tmp_path / "missing.png")), TransportKind.MULTIPLEXER_PASSTHROUGH
        )

    assert exc_info.value.kind is TransportKind.MULTIPLEXER_PASSTHROUGH


@pytest.mark.asyncio
async def test_send_escape_writes_terminal(tmp_path):
    tty = tmp_path / "tty"
    tty.touch()

    outcome = await transport.send_escape("QUJD", str(tty))

    assert outcome.transport is TransportKind.DIRECT_ESCAPE_SEQUENCE
    assert tty.read_bytes() == b"\x1b]20;QUJD\x1b\\"


@pytest.mark.asyncio
async def test_send_escape_unwritable(tmp_path):
    with pytest.raises(TransportError):
        await transport.send_escape("QUJD", str(tmp_path / "no" / "such" / "tty"))


@pytest.mark.asyncio
async def test_send_passthrough(monkeypatch):
    calls = []

    async def fake_tmux(args):
        calls.append(args)
        return 0, "", ""

    monkeypatch.setattr(transport, "run_tmux", fake_tmux)

    outcome = await transport.send_passthrough("QUJD")

    assert outcome.transport is TransportKind.MULTIPLEXER_PASSTHROUGH
    assert calls[0][0] == "run-shell"
    assert calls[0][1].startswith("printf '\\033Ptmux;")


@pytest.mark.asyncio
async def test_send_passthrough_failure(monkeypatch):
    async def fake_tmux(args):
        return 1, "", "no server running on /tmp/tmux-1000/default"

    monkeypatch.setattr(transport, "run_tmux", fake_tmux)

    with pytest.raises(TransportError) as exc_info:
        await transport.send_passthrough("")

    assert "no server running" in exc_info.value.diagnostic


@pytest.mark.asyncio
async def test_send_primary_missing_binary():
    settings = RemoteSettings(remote_binary="kittytap-no-such-kitten")

    with pytest.raises(TransportError) as exc_info:
        await transport.send_primary("unix:/tmp/kitty-1", ("ls",), settings)

    assert exc_info.value.kind is TransportKind.PRIMARY_SOCKET


@pytest.mark.skipif(shutil.which("echo") is None, reason="echo not available")
@pytest.mark.asyncio
async def test_send_primary_builds_command_line():
    settings = RemoteSettings(remote_binary=shutil.which("echo"))

    outcome = await transport.send_primary("unix:/tmp/kitty-1", ("ls",), settings)

    assert outcome.text.strip() == "@ --to unix:/tmp/kitty-1 ls"


@pytest.mark.skipif(shutil.which("false") is None, reason="false not available")
@pytest.mark.asyncio
async def test_send_primary_nonzero_exit():
    settings = RemoteSettings(remote_binary=shutil.which("false"))

    with pytest.raises(TransportError) as exc_info:
        await transport.send_primary("unix:/tmp/kitty-1", ("ls",), settings)

    assert "exit status 1" in exc_info.value.diagnostic
