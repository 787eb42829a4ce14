"""Kitty operations built on the remote-control dispatcher.

PUBLIC API:
  - WindowDimensions: Kitty window size in pixels and cells (dataclass)
  - SetupReport: Environment check result (dataclass)
  - build_dispatcher: Wire cache, discoverer and dispatcher together
  - set_background: Set kitty's background image
  - clear_background: Clear kitty's background image
  - get_window_dimensions: Query window size over remote control
  - window_dimensions_or_fallback: Window size, degrading to terminal size
  - check_setup: Report on kitty/tmux/remote-control availability
"""

import json
import logging
import os
import shutil
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

import aiofiles.os

from .config import RemoteSettings, get_settings
from .errors import KittyTapError
from .remote import (
    DiscoveredEndpoint,
    DispatchOutcome,
    EndpointCache,
    EndpointDiscoverer,
    MalformedResponseError,
    RemoteDispatcher,
    RemoteError,
    clear_background_request,
    set_background_request,
    validate_endpoint,
)
from .tmux import in_tmux

logger = logging.getLogger(__name__)

DEFAULT_CELL_WIDTH = 10.0
DEFAULT_CELL_HEIGHT = 20.0
MAX_CELL_SIZE = 50.0


@dataclass
class WindowDimensions:
    """Kitty window size.

    Attributes:
        width: Width in pixels.
        height: Height in pixels.
        cell_width: Cell width in pixels.
        cell_height: Cell height in pixels.
    """

    width: int
    height: int
    cell_width: float
    cell_height: float

    @classmethod
    def from_cells(cls, columns: int, lines: int, cell_width: float, cell_height: float) -> "WindowDimensions":
        return cls(
            width=int(columns * cell_width),
            height=int(lines * cell_height),
            cell_width=cell_width,
            cell_height=cell_height,
        )

    def char_to_pixel_x(self, char_x: int) -> int:
        return int(char_x * self.cell_width)

    def char_to_pixel_y(self, char_y: int) -> int:
        return int(char_y * self.cell_height)


@dataclass
class SetupReport:
    """Environment check result."""

    in_kitty: bool
    in_tmux: bool
    pid_hint: Optional[str]
    endpoint: Optional[DiscoveredEndpoint]
    dimensions: Optional[WindowDimensions] = None
    remote_error: Optional[str] = None
    methods: dict[str, bool] = field(default_factory=dict)

    @property
    def remote_ok(self) -> bool:
        return self.remote_error is None


def build_dispatcher(
    settings: Optional[RemoteSettings] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> RemoteDispatcher:
    """Create a dispatcher with its own cache and discoverer.

    Args:
        settings: Remote settings, defaults to kittytap.toml.
        environ: Environment, defaults to os.environ.
    """
    settings = settings or get_settings()

    async def _validate(endpoint: DiscoveredEndpoint) -> bool:
        return await validate_endpoint(endpoint, settings)

    cache = EndpointCache(validator=_validate, ttl=settings.cache_ttl)
    discoverer = EndpointDiscoverer(settings, environ=environ, validator=_validate)
    return RemoteDispatcher(cache, discoverer, settings, environ=environ)


async def set_background(dispatcher: RemoteDispatcher, image_path: str) -> DispatchOutcome:
    """Set kitty's background image.

    Raises:
        KittyTapError: If the image does not exist.
        RemoteError: If every transport failed.
    """
    if not await aiofiles.os.path.isfile(image_path):
        raise KittyTapError(f"Image file does not exist: {image_path}")

    return await dispatcher.dispatch(set_background_request(os.path.abspath(image_path)))


async def clear_background(dispatcher: RemoteDispatcher) -> DispatchOutcome:
    """Clear kitty's background image."""
    return await dispatcher.dispatch(clear_background_request())


def _cell_size(window: dict[str, Any], columns: int, lines: int) -> tuple[float, float]:
    geometry = window.get("geometry")
    if isinstance(geometry, dict):
        try:
            cell_width = float(geometry["width"]) / columns
            cell_height = float(geometry["height"]) / lines
        except (KeyError, TypeError, ValueError, ZeroDivisionError):
            pass
        else:
            if 0 < cell_width < MAX_CELL_SIZE and 0 < cell_height < MAX_CELL_SIZE:
                return cell_width, cell_height
    return DEFAULT_CELL_WIDTH, DEFAULT_CELL_HEIGHT


def parse_window_dimensions(raw: bytes | str) -> WindowDimensions:
    """Parse `kitten @ ls` output into window dimensions.

    Uses the first window of the first tab of the first OS window.

    Raises:
        MalformedResponseError: If the output is not the expected structure.
    """
    try:
        os_windows = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedResponseError(f"Failed to parse kitty window info: {e}") from e

    try:
        if not os_windows:
            raise MalformedResponseError("No kitty windows found")
        tabs = os_windows[0]["tabs"]
        if not tabs:
            raise MalformedResponseError("No tabs found in kitty window")
        windows = tabs[0]["windows"]
        if not windows:
            raise MalformedResponseError("No sub-windows found in kitty tab")
        window = windows[0]
        columns = int(window["columns"])
        lines = int(window["lines"])
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise MalformedResponseError(f"Unexpected kitty window info: {e!r}") from e

    if columns <= 0 or lines <= 0:
        raise MalformedResponseError(f"Invalid window size {columns}x{lines}")

    cell_width, cell_height = _cell_size(window, columns, lines)
    return WindowDimensions.from_cells(columns, lines, cell_width, cell_height)


async def get_window_dimensions(dispatcher: RemoteDispatcher) -> WindowDimensions:
    """Query kitty's window size over remote control.

    Raises:
        RemoteError: If kitty is unreachable or its answer is malformed.
    """
    outcome = await dispatcher.dispatch(["ls"])
    return parse_window_dimensions(outcome.output)


def fallback_dimensions() -> WindowDimensions:
    """Estimate window size from the terminal size and default cells."""
    size = shutil.get_terminal_size((80, 24))
    return WindowDimensions.from_cells(size.columns, size.lines, DEFAULT_CELL_WIDTH, DEFAULT_CELL_HEIGHT)


async def window_dimensions_or_fallback(dispatcher: RemoteDispatcher) -> WindowDimensions:
    """Window size over remote control, or the terminal-size estimate."""
    try:
        return await get_window_dimensions(dispatcher)
    except RemoteError as e:
        logger.warning(f"kitty remote control failed: {e}")
        return fallback_dimensions()


async def check_setup(dispatcher: RemoteDispatcher, environ: Optional[Mapping[str, str]] = None) -> SetupReport:
    """Check the terminal environment and remote-control availability.

    Never raises for remote-control problems; they end up in the report.
    """
    env = os.environ if environ is None else environ
    tmux = in_tmux(env)

    report = SetupReport(
        in_kitty="KITTY_WINDOW_ID" in env,
        in_tmux=tmux,
        pid_hint=env.get(dispatcher.settings.pid_env),
        endpoint=await dispatcher.resolve_endpoint(),
    )

    if report.endpoint is None:
        logger.warning("Could not discover kitty info")

    try:
        report.dimensions = await get_window_dimensions(dispatcher)
    except RemoteError as e:
        report.remote_error = str(e)
        report.dimensions = fallback_dimensions()

    report.methods = {
        "Remote control": report.endpoint is not None,
        "Tmux passthrough": tmux,
        "ANSI escape sequences": not tmux,
    }
    return report
