"""External command helpers bound to an explicit environment."""

# ============================================================
# Imports
# ============================================================

import shutil
import subprocess
from collections.abc import Mapping, Sequence


# ============================================================
# Configuration
# ============================================================

# Seconds before an external command is abandoned; None waits forever.
DEFAULT_TIMEOUT: float | None = 120


# ============================================================
# Commands
# ============================================================

def which(name: str, env: Mapping[str, str]) -> str | None:
    """Resolve a command on the PATH of the given environment."""
    return shutil.which(name, path=env.get("PATH", ""))


def have_cmd(name: str, env: Mapping[str, str]) -> bool:
    """Check whether a command is resolvable."""
    return which(name, env) is not None


def capture(args: Sequence[str], env: Mapping[str, str], timeout: float | None = DEFAULT_TIMEOUT) -> subprocess.CompletedProcess:
    """
    Run a command to completion and capture its text output.

    Never raises for command failures: a missing executable or a timeout
    is reported as returncode 127 or 124 with the reason on stderr.
    """
    try:
        return subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            check=False,
            env=dict(env),
            timeout=timeout,
        )
    except OSError as e:
        return subprocess.CompletedProcess(list(args), 127, "", str(e))
    except subprocess.TimeoutExpired:
        return subprocess.CompletedProcess(list(args), 124, "", f"timed out after {timeout}s")


def run(args: Sequence[str], env: Mapping[str, str], timeout: float | None = DEFAULT_TIMEOUT) -> bool:
    """Run a command with its output suppressed and report success."""
    try:
        result = subprocess.run(
            list(args),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
            env=dict(env),
            timeout=timeout,
        )
    except (OSError, subprocess.TimeoutExpired):
        return False
    return result.returncode == 0
