"""SSH agent socket discovery and `ssh-add -L` classification."""

# ============================================================
# Imports
# ============================================================

import fnmatch
import os
import stat
from enum import Enum
from pathlib import Path

from .models import SocketOrigin, SSHAgentSocket


# ============================================================
# Configuration
# ============================================================

VENDOR_SOCKET_NAME = "agent.sock"
VENDOR_SOCKET_PATTERN = "*com.1password*/t/agent.sock"
SYSTEM_SOCKET_MARKER = "com.apple.launchd"

UNREACHABLE_MARKERS = ("could not open a connection", "error connecting to agent")
EMPTY_MARKERS = ("no identities", "the agent has no identities")


class AgentState(Enum):
    """Reachability of the agent behind SSH_AUTH_SOCK."""

    UNREACHABLE = "unreachable"
    EMPTY = "empty"
    LOADED = "loaded"
    UNKNOWN = "unknown"


# ============================================================
# Sockets
# ============================================================

def is_socket(path: str | Path) -> bool:
    """Check that path exists right now and is a Unix domain socket."""
    try:
        return stat.S_ISSOCK(os.stat(path).st_mode)
    except (OSError, ValueError):
        return False


def discover_vendor_socket(root: Path, max_depth: int = 4) -> Path | None:
    """
    Find the 1Password agent socket below root.

    Searches at most max_depth levels deep. With several matching sockets
    the first one in directory traversal order wins, which depends on the
    filesystem and is not stable across hosts.
    """
    if not root.is_dir():
        return None

    for dirpath, dirnames, filenames in os.walk(root):
        depth = len(Path(dirpath).relative_to(root).parts)

        # Files in dirpath sit at depth + 1
        if depth + 1 >= max_depth:
            dirnames[:] = []

        if VENDOR_SOCKET_NAME not in filenames:
            continue

        candidate = Path(dirpath) / VENDOR_SOCKET_NAME
        if fnmatch.fnmatch(str(candidate), VENDOR_SOCKET_PATTERN) and is_socket(candidate):
            return candidate

    return None


def classify_socket(path: str, vendor: Path | None) -> SSHAgentSocket:
    """Tag an SSH_AUTH_SOCK value with the agent it belongs to."""
    if vendor is not None and path == str(vendor):
        origin = SocketOrigin.VENDOR
    elif SYSTEM_SOCKET_MARKER in path:
        origin = SocketOrigin.SYSTEM
    else:
        origin = SocketOrigin.UNKNOWN
    return SSHAgentSocket(path=path, origin=origin)


# ============================================================
# Agent Listing
# ============================================================

def classify_agent_listing(output: str) -> tuple[AgentState, int]:
    """
    Classify combined stdout/stderr of `ssh-add -L`.

    Returns:
        Agent state and the number of loaded keys
    """
    lowered = output.lower()

    if any(marker in lowered for marker in UNREACHABLE_MARKERS):
        return AgentState.UNREACHABLE, 0

    if any(marker in lowered for marker in EMPTY_MARKERS):
        return AgentState.EMPTY, 0

    keys = sum(1 for line in output.splitlines() if line.startswith("ssh-"))
    if keys:
        return AgentState.LOADED, keys

    return AgentState.UNKNOWN, 0
