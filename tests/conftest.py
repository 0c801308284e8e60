"""Shared fixtures: fake external commands, repositories and sockets."""

import shutil
import socket
import subprocess
import tempfile
from pathlib import Path

import pytest

from dotlib import shell
from dotlib.config import Config
from dotlib.models import EnvContext, GitIdentity, GitSigningConfig


class FakeShell:
    """Stands in for dotlib.shell; records every command it is asked to run."""

    def __init__(self):
        self.commands: dict[str, str] = {}
        self.outputs: dict[tuple[str, ...], subprocess.CompletedProcess] = {}
        self.failing: set[tuple[str, ...]] = set()
        self.calls: list[tuple[str, ...]] = []

    def install(self, name: str, path: str | None = None) -> None:
        self.commands[name] = path or f"/opt/homebrew/bin/{name}"

    def respond(self, args: list[str], stdout: str = "", stderr: str = "", returncode: int = 0) -> None:
        self.outputs[tuple(args)] = subprocess.CompletedProcess(args, returncode, stdout, stderr)

    def which(self, name, env):
        return self.commands.get(name)

    def have_cmd(self, name, env):
        return name in self.commands

    def capture(self, args, env, timeout=None):
        self.calls.append(tuple(args))
        return self.outputs.get(tuple(args), subprocess.CompletedProcess(list(args), 1, "", ""))

    def run(self, args, env, timeout=None):
        self.calls.append(tuple(args))
        return tuple(args) not in self.failing


class FakeGit:
    """Dict-backed replacement for GitConfig."""

    def __init__(self, values: dict[str, str] | None = None, available: bool = True):
        self.values = dict(values or {})
        self.is_available = available
        self.writes: list[tuple[str, str]] = []

    def available(self) -> bool:
        return self.is_available

    def get(self, key: str) -> str:
        return self.values.get(key, "")

    def set(self, key: str, value: str) -> None:
        self.writes.append((key, value))
        self.values[key] = value

    def signing(self):
        return GitSigningConfig(self.get("gpg.format"), self.get("commit.gpgsign"), self.get("user.signingkey"))

    def identity(self):
        return GitIdentity(self.get("user.name"), self.get("user.email"))


def answers(*replies: str):
    """Build a prompt function returning replies in order."""
    queue = list(replies)

    def ask(message: str) -> str:
        return queue.pop(0)

    return ask


def make_socket(path: Path) -> Path:
    """Create a Unix domain socket file at path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.bind(str(path))
    finally:
        sock.close()
    return path


@pytest.fixture
def fake_shell(monkeypatch):
    fake = FakeShell()
    monkeypatch.setattr(shell, "which", fake.which)
    monkeypatch.setattr(shell, "have_cmd", fake.have_cmd)
    monkeypatch.setattr(shell, "capture", fake.capture)
    monkeypatch.setattr(shell, "run", fake.run)
    return fake


@pytest.fixture
def short_tmp():
    # AF_UNIX paths are limited to ~104 bytes, pytest's tmp_path can be longer
    path = Path(tempfile.mkdtemp(prefix="dk", dir="/tmp"))
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def repo(tmp_path) -> Path:
    root = tmp_path / "repo"
    (root / "vscode").mkdir(parents=True)
    (root / "vscode" / "settings.json").write_text('{"editor.formatOnSave": true}\n', encoding="utf-8")
    return root


@pytest.fixture
def home(short_tmp) -> Path:
    path = short_tmp / "home"
    path.mkdir()
    return path


@pytest.fixture
def config(repo, home) -> Config:
    return Config(repo_root=repo, home=home)


@pytest.fixture
def context(home) -> EnvContext:
    return EnvContext(
        environ={"PATH": "/opt/homebrew/bin:/usr/bin:/bin"},
        home=home,
        system="Darwin",
    )
