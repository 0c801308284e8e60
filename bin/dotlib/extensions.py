"""Editor extension installation from a plain-text list."""

# ============================================================
# Imports
# ============================================================

from pathlib import Path

from . import shell
from .models import EnvContext, ExtensionInstallResult
from .output import print_info, print_success, print_warning


# ============================================================
# Parsing
# ============================================================

def parse_extension_list(text: str) -> list[str]:
    """
    Extract extension identifiers from list text.

    Lines are trimmed; blank lines and lines starting with '#' are ignored.
    Order and duplicates are preserved.
    """
    identifiers: list[str] = []
    for line in text.splitlines():
        identifier = line.strip()
        if not identifier or identifier.startswith("#"):
            continue
        identifiers.append(identifier)
    return identifiers


# ============================================================
# Installation
# ============================================================

def install_extensions(list_path: Path, cli: str, context: EnvContext) -> ExtensionInstallResult | None:
    """
    Install every extension named in list_path with `<cli> --install-extension`.

    A missing list or CLI is a notice, not an error. A failing identifier
    is reported and skipped; the remaining identifiers are still installed.

    Returns:
        Result with installed/failed identifiers, or None when skipped
    """
    if not list_path.is_file():
        print_info(f"Notice: extensions list not found: {list_path}")
        print_info("Skipping VS Code extension install.")
        return None

    if not shell.have_cmd(cli, context.environ):
        print_info(f"Notice: '{cli}' CLI not found in PATH.")
        print_info("Skipping VS Code extension install.")
        print_info("Tip: VS Code -> Command Palette -> Shell Command: Install 'code' command in PATH")
        return None

    print_info(f"Installing VS Code extensions from: {list_path}")

    result = ExtensionInstallResult()
    for identifier in parse_extension_list(list_path.read_text(encoding="utf-8")):
        print_info(f"  - {identifier}")
        if shell.run([cli, "--install-extension", identifier], context.environ):
            result.installed.append(identifier)
        else:
            print_warning(f"    (warn) failed to install: {identifier}")
            result.failed.append(identifier)

    print_success(f"Extensions install step done ({len(result.installed)} installed, {len(result.failed)} failed).")
    return result
