import pytest

from kittytap.config import ConfigError, ConfigManager, RemoteSettings


def test_defaults():
    settings = RemoteSettings()

    assert settings.max_ancestor_hops == 20
    assert settings.cache_ttl == 600.0
    assert settings.socket_template.format(pid=42) == "unix:/tmp/kitty-42"


def test_loads_default_table(tmp_path):
    path = tmp_path / "kittytap.toml"
    path.write_text('[default]\nmax_ancestor_hops = 8\ncache_ttl = 30.0\nsocket_template = "unix:@kitty-{pid}"\n')

    manager = ConfigManager(path)

    assert manager.config_file == path
    assert manager.settings.max_ancestor_hops == 8
    assert manager.settings.cache_ttl == 30.0
    assert manager.settings.socket_template == "unix:@kitty-{pid}"


def test_missing_file_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert ConfigManager().settings == RemoteSettings()


def test_unknown_keys_ignored():
    assert RemoteSettings.from_dict({"nonsense": 1}) == RemoteSettings()


@pytest.mark.parametrize(
    "data",
    [
        {"max_ancestor_hops": 0},
        {"cache_ttl": -1},
        {"socket_template": "unix:/tmp/kitty"},
        {"signature": ""},
    ],
)
def test_invalid_values(data):
    with pytest.raises(ConfigError):
        RemoteSettings.from_dict(data)


def test_invalid_toml(tmp_path):
    path = tmp_path / "kittytap.toml"
    path.write_text("[default\n")

    with pytest.raises(ConfigError):
        ConfigManager(path)
