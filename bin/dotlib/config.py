"""Configuration management."""

# ============================================================
# Imports
# ============================================================

import os
import subprocess
import sys
from pathlib import Path
from typing import Any

# Require Python 3.11+ for tomllib
if sys.version_info < (3, 11):
    print("Error: Python 3.11 or higher is required", file=sys.stderr)
    sys.exit(1)

import tomllib

from .errors import ConfigError


# ============================================================
# Defaults
# ============================================================

DEFAULT_EDITOR_CLI = "code"
DEFAULT_EDITOR_USER_DIR = "~/Library/Application Support/Code/User"
DEFAULT_VENDOR_SOCKET_ROOT = "~/Library/Group Containers"
DEFAULT_MIN_BASH_MAJOR = 4

ROOT_ENV_VAR = "DOTFILES_ROOT"


# ============================================================
# Configuration
# ============================================================

class Config:
    """Configuration paths and tunables."""

    def __init__(self, repo_root: Path | None = None, home: Path | None = None):
        self.repo_root = repo_root or find_repo_root()
        self.home = home or Path.home()

        # Managed resources inside the repository
        self.vscode_dir = self.repo_root / "vscode"
        self.settings_json = self.vscode_dir / "settings.json"
        self.keybindings_json = self.vscode_dir / "keybindings.json"
        self.extensions_txt = self.vscode_dir / "extensions.txt"
        self.settings_toml = self.repo_root / "dotfiles.toml"

        # Optional overrides
        overrides = load_overrides(self.settings_toml)
        editor = overrides.get("editor", {})
        doctor = overrides.get("doctor", {})

        self.editor_cli: str = editor.get("cli", DEFAULT_EDITOR_CLI)
        self.editor_user_dir = self.expand(editor.get("user_dir", DEFAULT_EDITOR_USER_DIR))
        self.vendor_socket_root = self.expand(doctor.get("vendor_socket_root", DEFAULT_VENDOR_SOCKET_ROOT))
        self.min_bash_major: int = doctor.get("min_bash_major", DEFAULT_MIN_BASH_MAJOR)

    def expand(self, value: str) -> Path:
        """Expand a leading ~ against the configured home directory."""
        if value == "~" or value.startswith("~/"):
            return self.home / value[2:]
        return Path(value)


def find_repo_root() -> Path:
    """
    Resolve the repository root.

    Order: DOTFILES_ROOT, the git checkout holding this package, the git
    checkout of the working directory, then the directory above bin/.
    """
    override = os.environ.get(ROOT_ENV_VAR)
    if override:
        return Path(override).expanduser()

    for cwd in (Path(__file__).parent, Path.cwd()):
        toplevel = git_toplevel(cwd)
        if toplevel is not None:
            return toplevel

    return Path(__file__).resolve().parents[2]


def git_toplevel(cwd: Path) -> Path | None:
    """Return the top level of the git checkout containing cwd, if any."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            capture_output=True, text=True, check=True,
            cwd=cwd,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return Path(result.stdout.strip())


# ============================================================
# TOML Loading
# ============================================================

def load_toml(path: Path) -> dict[str, Any]:
    """Load and parse a TOML file."""
    with open(path, 'rb') as f:
        return tomllib.load(f)


def load_overrides(path: Path) -> dict[str, Any]:
    """
    Load dotfiles.toml overrides.

    Returns an empty dict when the file is missing.
    """
    if not path.exists():
        return {}

    try:
        data = load_toml(path)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"cannot read {path}: {e}") from e

    for table in ("editor", "doctor"):
        if not isinstance(data.get(table, {}), dict):
            raise ConfigError(f"[{table}] in {path} must be a table")

    min_bash = data.get("doctor", {}).get("min_bash_major", DEFAULT_MIN_BASH_MAJOR)
    if not isinstance(min_bash, int) or isinstance(min_bash, bool):
        raise ConfigError(f"doctor.min_bash_major in {path} must be an integer")

    return data
