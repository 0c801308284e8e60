"""Formatted output utilities."""

# ============================================================
# Imports
# ============================================================

import sys


# ============================================================
# Configuration
# ============================================================

class Color:
    """ANSI color codes for terminal output."""

    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[31m'
    CYAN = '\033[36m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    GRAY = '\033[90m'


MARKERS = {
    'ok': ('✔', Color.GREEN),
    'warning': ('⚠', Color.YELLOW),
    'error': ('✖', Color.RED),
}


# ============================================================
# Output Functions
# ============================================================

def print_header(message: str) -> None:
    """Print a top-level header with bold cyan formatting."""
    print(f"{Color.BOLD}{Color.CYAN}== {message} =={Color.RESET}")


def print_section(message: str) -> None:
    """Print a section separator preceded by a blank line."""
    print()
    print(f"{Color.BOLD}---- {message} ----{Color.RESET}")


def print_info(message: str) -> None:
    """Print an informational message."""
    print(message)


def print_error(message: str) -> None:
    """Print an error message to stderr with 'Error:' prefix."""
    print(f"Error: {message}", file=sys.stderr)


def print_success(message: str) -> None:
    """Print a success message in green."""
    print(f"{Color.GREEN}{message}{Color.RESET}")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    print(f"{Color.YELLOW}{message}{Color.RESET}")


def print_key_value(key: str, value: str | None) -> None:
    """Print a key-value pair with cyan-colored key, `<unset>` for empty values."""
    print(f"{Color.CYAN}{key}:{Color.RESET} {value or '<unset>'}")


def print_finding(severity: str, message: str, hint: str | None = None) -> None:
    """
    Print a diagnostic line with its severity marker.

    Args:
        severity: One of 'ok', 'warning', 'error'
        message: Finding text
        hint: Optional remediation printed on an indented line
    """
    marker, color = MARKERS[severity]
    print(f"{color}{marker}{Color.RESET} {message}")
    if hint:
        print(f"  {Color.GRAY}{hint}{Color.RESET}")


def print_link_status(status: str, status_color: str, target_path: str, source_path: str, monochrome: bool = False) -> None:
    """
    Print a formatted symlink operation status line.

    Args:
        status: Status message (e.g., "Already linked", "Linked")
        status_color: Color constant for the status (e.g., Color.GRAY, Color.GREEN)
        target_path: Path to the symlink
        source_path: Path the symlink points to
        monochrome: If True, use status_color for the entire line
    """
    if monochrome:
        print(f"{status_color}{status}: {target_path} -> {source_path}{Color.RESET}")
    else:
        print(f"{status_color}{status}{Color.RESET}: {target_path} -> {source_path}")
