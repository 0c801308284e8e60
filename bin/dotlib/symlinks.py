"""Symlink installation with backup of whatever was there before."""

# ============================================================
# Imports
# ============================================================

import os
import shutil
from datetime import datetime
from pathlib import Path

from .errors import MissingSourceError
from .models import LinkResult, LinkSpec, LinkStatus
from .output import Color, print_info, print_link_status


# ============================================================
# Entry Point
# ============================================================

def link_file(spec: LinkSpec, now: datetime | None = None) -> LinkResult:
    """
    Make spec.target a symlink to spec.source without losing data.

    Process:
    1. Fail if the source is missing
    2. Leave a target that already links to the source untouched
    3. Back up anything else at the target to <target>.bak.<timestamp>
    4. Atomically replace the target with the new symlink

    Args:
        spec: Link to install
        now: Timestamp used for the backup name (defaults to current time)

    Returns:
        Result with status and backup path

    Raises:
        MissingSourceError: The source does not exist
        OSError: Backup or link creation failed
    """
    # Validate source exists
    if not spec.source.exists():
        raise MissingSourceError(spec.source)

    # Already pointing at our source
    if is_linked(spec):
        result = LinkResult(spec=spec, status=LinkStatus.ALREADY_LINKED)
        print_link_result(result)
        return result

    spec.target.parent.mkdir(parents=True, exist_ok=True)

    backup = None
    if spec.target.exists() or spec.target.is_symlink():
        backup = backup_target(spec.target, now or datetime.now())

    replace_with_symlink(spec.source, spec.target)

    result = LinkResult(
        spec=spec,
        status=LinkStatus.REPLACED if backup else LinkStatus.LINKED,
        backup=backup,
    )
    print_link_result(result)
    return result


def ensure_default_file(path: Path, content: str) -> bool:
    """Create a repository resource with default content if it is absent."""
    if path.exists():
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    print_info(f"Created: {path}")
    return True


# ============================================================
# Symlinks
# ============================================================

def is_linked(spec: LinkSpec) -> bool:
    """Check whether the target is a symlink resolving to the source."""
    if not spec.target.is_symlink():
        return False

    try:
        return spec.target.resolve() == spec.source.resolve()
    except (OSError, RuntimeError):
        # Symlink loops cannot be resolved
        return False


def backup_path_for(target: Path, now: datetime) -> Path:
    """Pick an unused <target>.bak.<timestamp> name."""
    base = f"{target}.bak.{now.strftime('%Y%m%d-%H%M%S')}"
    candidate = Path(base)
    counter = 1
    while candidate.exists() or candidate.is_symlink():
        candidate = Path(f"{base}-{counter}")
        counter += 1
    return candidate


def backup_target(target: Path, now: datetime) -> Path:
    """
    Preserve the current target under a timestamped name.

    Files and symlinks are copied so the target stays in place until the
    new link replaces it; directories cannot be replaced by rename and are
    moved away instead.
    """
    backup = backup_path_for(target, now)

    if target.is_dir() and not target.is_symlink():
        target.rename(backup)
    else:
        shutil.copy2(target, backup, follow_symlinks=False)

    print_info(f"Backed up: {target} -> {backup}")
    return backup


def replace_with_symlink(source: Path, target: Path) -> None:
    """Create a sibling temporary symlink and rename it over the target."""
    temporary = target.with_name(f".{target.name}.tmp-{os.getpid()}")
    if temporary.is_symlink() or temporary.exists():
        temporary.unlink()

    temporary.symlink_to(source)
    try:
        os.replace(temporary, target)
    except OSError:
        temporary.unlink()
        raise


# ============================================================
# Supporting Code
# ============================================================

def print_link_result(result: LinkResult) -> None:
    """Print formatted result for a link operation."""
    target = str(result.target_path)
    source = str(result.spec.source)

    if result.status == LinkStatus.ALREADY_LINKED:
        print_link_status(result.status.value, Color.GRAY, target, source, monochrome=True)
    else:
        print_link_status(result.status.value, Color.GREEN, target, source)
