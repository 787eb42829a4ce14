"""Commands run through the ReplKit2 app with a dispatcher on fake transports."""

import pytest
from fastmcp import Client

from kittytap.app import KittyTapState, app
from kittytap.commands.background import clear_background, set_background
from kittytap.commands.check import check, endpoint, window
from kittytap.commands.remote import remote
from kittytap.remote import (
    DiscoveredEndpoint,
    DispatchOutcome,
    EndpointCache,
    RemoteDispatcher,
    TransportError,
)
from kittytap.remote import dispatch as dispatch_module
from kittytap.runner import LoopRunner
from kittytap.types import TransportKind


class FakeDiscoverer:
    def __init__(self, pid=None):
        self.pid = pid
        self.calls = 0

    async def discover(self):
        self.calls += 1
        if self.pid is None:
            return None
        return DiscoveredEndpoint.for_pid(self.pid, "unix:/tmp/kitty-{pid}")


class FakeKitten:
    """Stands in for `kitten @`; every call succeeds unless failing is set."""

    def __init__(self, monkeypatch, output=b""):
        self.output = output
        self.failing = False
        self.escape_error = None
        self.calls = []
        monkeypatch.setattr(dispatch_module, "send_primary", self.send_primary)
        monkeypatch.setattr(dispatch_module, "send_escape", self.send_escape)

    async def send_primary(self, address, request, settings):
        self.calls.append((address, request))
        if self.failing:
            raise TransportError(TransportKind.PRIMARY_SOCKET, "Connection refused")
        return DispatchOutcome(transport=TransportKind.PRIMARY_SOCKET, output=self.output)

    async def send_escape(self, payload, tty_path):
        if self.escape_error:
            raise self.escape_error
        return DispatchOutcome(transport=TransportKind.DIRECT_ESCAPE_SEQUENCE)


async def _always_valid(endpoint):
    return True


def _dispatcher(settings, pid=None):
    cache = EndpointCache(validator=_always_valid, ttl=settings.cache_ttl)
    return RemoteDispatcher(cache, FakeDiscoverer(pid), settings, environ={})


@pytest.fixture(autouse=True)
def plain_terminal(monkeypatch):
    monkeypatch.delenv("TMUX", raising=False)
    monkeypatch.delenv("KITTY_WINDOW_ID", raising=False)
    monkeypatch.delenv("KITTY_PID", raising=False)


@pytest.fixture
def make_state(settings):
    runners = []

    def _make(pid=None):
        runner = LoopRunner(name="kittytap-test-loop")
        runners.append(runner)
        return KittyTapState(dispatcher=_dispatcher(settings, pid), runner=runner)

    yield _make
    for runner in runners:
        runner.close()


def test_check_without_endpoint_reports_degraded(monkeypatch, make_state):
    FakeKitten(monkeypatch)
    state = make_state()

    result = check(state)

    assert result["frontmatter"]["status"] == "degraded"
    assert result["frontmatter"]["in_tmux"] is False
    contents = [element.get("content") for element in result["elements"]]
    assert "Could not discover kitty endpoint" in contents


def test_check_with_endpoint_reports_ok(monkeypatch, make_state):
    ls_output = b'[{"tabs": [{"windows": [{"columns": 80, "lines": 24}]}]}]'
    FakeKitten(monkeypatch, output=ls_output)
    state = make_state(pid=4321)

    result = check(state)

    assert result["frontmatter"]["status"] == "ok"
    assert "Endpoint: PID 4321, socket unix:/tmp/kitty-4321" in [e.get("content") for e in result["elements"]]


def test_endpoint_refresh_rediscovers(make_state):
    state = make_state(pid=2222)
    state.dispatcher.cache.set(DiscoveredEndpoint.for_pid(1111, "unix:/tmp/kitty-{pid}"))

    result = endpoint(state, refresh=True)

    assert result["frontmatter"] == {"status": "ok", "pid": 2222, "socket": "unix:/tmp/kitty-2222"}
    assert state.dispatcher.discoverer.calls == 1


def test_endpoint_uses_cache_without_refresh(make_state):
    state = make_state(pid=2222)
    state.dispatcher.cache.set(DiscoveredEndpoint.for_pid(1111, "unix:/tmp/kitty-{pid}"))

    result = endpoint(state)

    assert result["frontmatter"]["pid"] == 1111
    assert state.dispatcher.discoverer.calls == 0


def test_endpoint_not_found(make_state):
    result = endpoint(make_state())

    assert result["frontmatter"] == {"status": "not_found"}


def test_window_falls_back_without_endpoint(monkeypatch, make_state):
    FakeKitten(monkeypatch)

    assert window(make_state()).endswith("(cell: 10.0x20.0)")


def test_remote_without_endpoint_reports_error(monkeypatch, make_state):
    kitten = FakeKitten(monkeypatch)

    result = remote(make_state(), "set-font-size 14")

    assert result["status"] == "error"
    assert result["content"].startswith("Error:")
    assert kitten.calls == []


def test_remote_transport_failure_reports_error(monkeypatch, make_state):
    kitten = FakeKitten(monkeypatch)
    kitten.failing = True

    result = remote(make_state(pid=4321), "set-font-size 14")

    assert result["status"] == "error"
    assert "Connection refused" in result["content"]
    assert len(kitten.calls) == 2


def test_remote_runs_command(monkeypatch, make_state):
    kitten = FakeKitten(monkeypatch, output=b'[{"id": 1}]')

    result = remote(make_state(pid=4321), "ls")

    assert result["status"] == "completed"
    assert result["process"] == "json"
    assert result["content"] == '[{"id": 1}]'
    assert result["pid"] == 4321
    assert kitten.calls == [("unix:/tmp/kitty-4321", ("ls",))]


@pytest.mark.parametrize("command", ["", "'unbalanced"])
def test_remote_rejects_bad_command_line(make_state, command):
    assert remote(make_state(), command)["status"] == "error"


def test_set_background_missing_file_reports_error(make_state, tmp_path):
    missing = str(tmp_path / "missing.png")

    result = set_background(make_state(), missing)

    assert result["frontmatter"] == {"status": "error", "action": "set_background", "image": missing}


def test_set_background_without_endpoint_uses_escape(monkeypatch, make_state, image_file):
    FakeKitten(monkeypatch)

    result = set_background(make_state(), str(image_file))

    assert result["frontmatter"]["status"] == "ok"
    assert result["frontmatter"]["transport"] == TransportKind.DIRECT_ESCAPE_SEQUENCE.value


def test_clear_background_over_remote_control(monkeypatch, make_state):
    kitten = FakeKitten(monkeypatch)

    result = clear_background(make_state(pid=4321))

    assert result["frontmatter"]["transport"] == TransportKind.PRIMARY_SOCKET.value
    assert kitten.calls == [("unix:/tmp/kitty-4321", ("set-background-image", "none"))]


def test_clear_background_reports_both_diagnostics(monkeypatch, make_state):
    kitten = FakeKitten(monkeypatch)
    kitten.failing = True
    kitten.escape_error = TransportError(TransportKind.DIRECT_ESCAPE_SEQUENCE, "No such device")

    result = clear_background(make_state(pid=4321))

    assert result["frontmatter"]["status"] == "error"
    message = result["elements"][0]["content"]
    assert "No such device" in message
    assert "Connection refused" in message


@pytest.mark.asyncio
async def test_endpoint_tool_over_mcp(monkeypatch, settings):
    monkeypatch.setattr(app.state, "dispatcher", _dispatcher(settings, pid=4321))

    async with Client(app.mcp) as client:
        result = await client.call_tool("endpoint", {})

    assert not result.is_error
    assert "4321" in result.content[0].text


@pytest.mark.asyncio
async def test_remote_tool_over_mcp_reports_not_found(monkeypatch, settings):
    FakeKitten(monkeypatch)
    monkeypatch.setattr(app.state, "dispatcher", _dispatcher(settings))

    async with Client(app.mcp) as client:
        result = await client.call_tool("remote", {"command": "set-font-size 14"})

    assert not result.is_error
    assert "Error" in result.content[0].text
