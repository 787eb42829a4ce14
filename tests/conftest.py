"""Shared fixtures: a fake /proc tree and default settings."""

from pathlib import Path

import pytest

from kittytap.config import RemoteSettings
from kittytap.process import introspect


class FakeProc:
    """Writes /proc-style cmdline and stat files under a temp directory."""

    def __init__(self, root: Path):
        self.root = root

    def add(self, pid: int, ppid: int, cmdline: str, comm: str | None = None) -> None:
        proc_dir = self.root / str(pid)
        proc_dir.mkdir(parents=True, exist_ok=True)
        (proc_dir / "cmdline").write_bytes(cmdline.replace(" ", "\x00").encode() + b"\x00")
        name = comm or cmdline.split()[0].rsplit("/", 1)[-1]
        (proc_dir / "stat").write_text(f"{pid} ({name}) S {ppid} {pid} {pid} 0 -1 4194560\n")

    def remove(self, pid: int) -> None:
        proc_dir = self.root / str(pid)
        for child in proc_dir.iterdir():
            child.unlink()
        proc_dir.rmdir()


@pytest.fixture
def fake_proc(tmp_path, monkeypatch) -> FakeProc:
    root = tmp_path / "proc"
    root.mkdir()
    (root / "self").mkdir()  # non-numeric entries must be ignored
    monkeypatch.setattr(introspect, "PROC_ROOT", str(root))
    return FakeProc(root)


@pytest.fixture
def settings() -> RemoteSettings:
    return RemoteSettings()


@pytest.fixture
def image_file(tmp_path) -> Path:
    path = tmp_path / "bg.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nfake-image")
    return path
