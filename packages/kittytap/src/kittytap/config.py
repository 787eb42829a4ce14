"""Configuration management for kittytap.

Handles remote-control discovery settings from kittytap.toml.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional
import logging
import tomllib

from .errors import KittyTapError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "kittytap.toml"


class ConfigError(KittyTapError):
    """Raised when kittytap.toml holds an unusable value."""

    pass


@dataclass(frozen=True)
class RemoteSettings:
    """Policy constants for endpoint discovery and dispatch.

    Attributes:
        max_ancestor_hops: Processes inspected by one ancestor walk.
        cache_ttl: Seconds a validated endpoint stays usable.
        signature: Command line substring identifying kitty.
        self_name: Our own binary name, never matched as kitty.
        socket_template: Socket address for a kitty PID.
        remote_binary: Executable speaking the remote-control protocol.
        pid_env: Environment variable carrying a kitty PID hint.
        tty_path: Controlling terminal for direct escape sequences.
    """

    max_ancestor_hops: int = 20
    cache_ttl: float = 600.0
    signature: str = "kitty"
    self_name: str = "kittytap"
    socket_template: str = "unix:/tmp/kitty-{pid}"
    remote_binary: str = "kitten"
    pid_env: str = "KITTY_PID"
    tty_path: str = "/dev/tty"

    def __post_init__(self):
        if self.max_ancestor_hops <= 0:
            raise ConfigError(f"max_ancestor_hops must be positive, got {self.max_ancestor_hops}")
        if self.cache_ttl <= 0:
            raise ConfigError(f"cache_ttl must be positive, got {self.cache_ttl}")
        if "{pid}" not in self.socket_template:
            raise ConfigError(f"socket_template must contain {{pid}}: {self.socket_template}")
        if not self.signature:
            raise ConfigError("signature must not be empty")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RemoteSettings":
        """Build settings from a [default] table, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")
        try:
            return cls(**{k: v for k, v in data.items() if k in known})
        except TypeError as e:
            raise ConfigError(str(e)) from e


def _find_config_file() -> Optional[Path]:
    """Find kittytap.toml in current or parent directories."""
    current = Path.cwd()

    for parent in [current] + list(current.parents):
        config_file = parent / CONFIG_FILENAME
        if config_file.exists():
            return config_file

    return None


def _load_config(path: Optional[Path] = None) -> dict:
    """Load raw configuration from file."""
    if path is None:
        path = _find_config_file()

    if path is None or not path.exists():
        return {}

    with open(path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid {path}: {e}") from e


class ConfigManager:
    """Manages configuration for kittytap."""

    def __init__(self, path: Optional[Path] = None):
        self._config_file = path or _find_config_file()
        self.data = _load_config(self._config_file)
        self._default_config = self.data.get("default", {})
        self.settings = RemoteSettings.from_dict(self._default_config)

    @property
    def config_file(self) -> Optional[Path]:
        """Path of the loaded config file, if any."""
        return self._config_file


# Global instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get or create the global config manager."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_settings() -> RemoteSettings:
    """Get remote-control settings."""
    return get_config_manager().settings
