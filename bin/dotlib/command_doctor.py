"""Doctor command: diagnose Homebrew, PATH, SSH agent and Git signing state."""

# ============================================================
# Imports
# ============================================================

import re

from . import shell
from .config import Config
from .git_config import GitConfig
from .models import Detail, DoctorReport, EnvContext, Section, SocketOrigin
from .output import print_finding, print_header, print_info, print_key_value, print_section
from .ssh_agent import AgentState, classify_agent_listing, classify_socket, discover_vendor_socket


HOMEBREW_BIN_DIRS = ("/opt/homebrew/bin", "/usr/local/bin")
HOMEBREW_PREFIXES = ("/opt/homebrew/", "/usr/local/")
BASH_VERSION_PATTERN = re.compile(r"version (\d+)\.(\d+)(?:\.(\d+))?")


# ============================================================
# Entry Point
# ============================================================

def execute_doctor(config: Config, fix: bool = False, context: EnvContext | None = None) -> int:
    """Run the doctor, print the report and return its exit code."""
    report = run_doctor(config, context or EnvContext.from_process(), fix=fix)
    return print_report(report)


def run_doctor(config: Config, context: EnvContext, fix: bool = False) -> DoctorReport:
    """
    Evaluate every check in a fixed order.

    Checks read the environment only; the one exception is the --fix
    override of SSH_AUTH_SOCK, which is applied to the returned context
    and never to the process environment.

    Args:
        config: Configuration object
        context: Environment to diagnose
        fix: Prefer the 1Password agent socket for this run

    Returns:
        Report with sections and the possibly updated context
    """
    sections = [
        check_os(context),
        check_bash(context, config.min_bash_major),
        check_homebrew(context),
        check_path(context),
        check_python(context),
        check_editor_cli(context, config.editor_cli),
    ]

    ssh_section, context = check_ssh_agent(context, config, fix)
    sections.append(ssh_section)
    sections.append(check_git_signing(context))

    return DoctorReport(sections=sections, context=context)


def print_report(report: DoctorReport) -> int:
    """Print every section and the summary line; return the exit code."""
    print_header("Dotfiles Doctor")

    for section in report.sections:
        print_section(section.name)
        for entry in section.entries:
            if isinstance(entry, Detail):
                print_key_value(entry.key, entry.value)
            else:
                print_finding(entry.severity.value, entry.message, entry.hint)

    print_info("")
    if report.errors:
        print_header(f"Doctor completed with {report.errors} error(s), {report.warnings} warning(s)")
    else:
        print_header(f"Doctor completed with {report.warnings} warning(s)")

    return report.exit_code


# ============================================================
# Host Checks
# ============================================================

def check_os(context: EnvContext) -> Section:
    section = Section("OS")
    if context.is_macos:
        section.ok(f"macOS detected ({context.system})")
    else:
        section.warn(f"Not macOS ({context.system or 'unknown'}). Some checks may be inaccurate.")
    return section


def parse_bash_major(version_text: str) -> int | None:
    """Extract the major version from `bash --version` output."""
    match = BASH_VERSION_PATTERN.search(version_text)
    return int(match.group(1)) if match else None


def bash_version(context: EnvContext) -> tuple[int | None, str]:
    """Return (major version, first output line) of bash on PATH."""
    result = shell.capture(["bash", "--version"], context.environ)
    first_line = result.stdout.splitlines()[0] if result.stdout else ""
    return parse_bash_major(first_line), first_line


def check_bash(context: EnvContext, min_major: int) -> Section:
    # Other scripts in this environment rely on Bash 4 features (mapfile)
    section = Section("Shell / Bash")
    if not shell.have_cmd("bash", context.environ):
        section.error("bash not found in PATH")
        return section

    major, version_line = bash_version(context)
    if major is not None and major >= min_major:
        section.ok(f"Bash version: {version_line}")
    else:
        section.error(f"Bash < {min_major} detected: {version_line or 'unknown'} (fix: brew install bash)")
    return section


def brew_prefix(context: EnvContext) -> str:
    """Return `brew --prefix`, empty when brew is missing or the query fails."""
    if not shell.have_cmd("brew", context.environ):
        return ""
    result = shell.capture(["brew", "--prefix"], context.environ)
    return result.stdout.strip() if result.returncode == 0 else ""


def check_homebrew(context: EnvContext) -> Section:
    section = Section("Homebrew")
    brew_path = shell.which("brew", context.environ)
    if not brew_path:
        section.error("brew not found in PATH")
        return section

    section.ok(f"brew found: {brew_path}")
    prefix = brew_prefix(context)
    if prefix:
        section.ok(f"brew --prefix: {prefix}")
    else:
        section.warn("brew --prefix failed")
    return section


def count_path_duplicates(entries: list[str]) -> int:
    """Count entries that repeat an earlier entry."""
    seen: set[str] = set()
    duplicates = 0
    for entry in entries:
        if entry in seen:
            duplicates += 1
        seen.add(entry)
    return duplicates


def homebrew_bin_dirs(prefix: str) -> tuple[str, ...]:
    if prefix:
        return (f"{prefix.rstrip('/')}/bin", *HOMEBREW_BIN_DIRS)
    return HOMEBREW_BIN_DIRS


def check_path(context: EnvContext) -> Section:
    section = Section("PATH hygiene")
    section.detail("PATH", context.get("PATH"))

    entries = context.path_entries
    duplicates = count_path_duplicates(entries)
    if duplicates == 0:
        section.ok("No PATH duplicates detected")
    else:
        section.warn(f"PATH contains duplicate entries ({duplicates}). Not fatal, but can complicate debugging.")

    # Homebrew tools must shadow system tools
    if shell.have_cmd("brew", context.environ):
        if entries and entries[0].rstrip("/") in homebrew_bin_dirs(brew_prefix(context)):
            section.ok("Homebrew appears early in PATH")
        else:
            section.warn("Homebrew not early in PATH. You may see system tools shadowing brew tools.")
    return section


def check_python(context: EnvContext) -> Section:
    section = Section("Python")
    python_path = shell.which("python3", context.environ)
    if not python_path:
        section.warn("python3 not found (some checks may be reduced)")
        return section

    result = shell.capture(["python3", "--version"], context.environ)
    version = (result.stdout or result.stderr).strip()
    section.ok(f"python3: {version} ({python_path})")

    if shell.have_cmd("brew", context.environ):
        if python_path.startswith(HOMEBREW_PREFIXES):
            section.ok("python3 is from Homebrew")
        else:
            section.warn(f"python3 is not from Homebrew ({python_path}). If you expect brew python, check PATH ordering.")
    return section


def check_editor_cli(context: EnvContext, cli: str) -> Section:
    section = Section("VS Code CLI")
    cli_path = shell.which(cli, context.environ)
    if cli_path:
        section.ok(f"{cli} CLI available ({cli_path})")
    else:
        section.warn(
            f"'{cli}' CLI not found in PATH",
            hint="Fix: VS Code -> Command Palette -> Install 'code' command in PATH",
        )
    return section


# ============================================================
# SSH Agent
# ============================================================

def check_ssh_agent(context: EnvContext, config: Config, fix: bool) -> tuple[Section, EnvContext]:
    """
    Check which SSH agent the session uses, preferring 1Password.

    With fix and a discovered 1Password socket, SSH_AUTH_SOCK is overridden
    in the returned context regardless of its previous value.
    """
    section = Section("SSH Agent")

    vendor = discover_vendor_socket(config.vendor_socket_root)
    if vendor is not None:
        section.ok("1Password agent socket found")
        section.detail("1Password socket", str(vendor))
    else:
        section.warn("1Password agent socket not found (if you use 1Password SSH Agent, confirm it's enabled)")

    if fix and vendor is not None:
        context = context.with_env(SSH_AUTH_SOCK=str(vendor))
        section.ok("--fix applied: SSH_AUTH_SOCK set to 1Password socket (this session only)")

    active = classify_socket(context.get("SSH_AUTH_SOCK"), vendor)
    section.detail("SSH_AUTH_SOCK", active.path)

    if active.origin == SocketOrigin.SYSTEM:
        section.warn("Active SSH agent appears to be macOS launchd (not 1Password).")

    if active.is_valid:
        section.ok("SSH_AUTH_SOCK points to a valid socket")
    else:
        section.warn("SSH_AUTH_SOCK is unset or not a valid socket")

    if not fix and vendor is not None and active.path and active.origin != SocketOrigin.VENDOR:
        section.warn("This shell is NOT using 1Password SSH agent (recommended).", hint="Fix: dotfiles doctor --fix")

    check_agent_identities(section, context, vendor_available=vendor is not None)
    return section, context


def check_agent_identities(section: Section, context: EnvContext, vendor_available: bool) -> None:
    """Query the active agent for loaded keys."""
    if not shell.have_cmd("ssh-add", context.environ):
        section.warn("ssh-add not available")
        return

    result = shell.capture(["ssh-add", "-L"], context.environ)
    state, keys = classify_agent_listing(result.stdout + result.stderr)

    if state == AgentState.UNREACHABLE:
        section.warn("SSH agent not accessible from this shell")
    elif state == AgentState.EMPTY:
        if vendor_available:
            hint = "Fix: dotfiles doctor --fix (then ensure your key is enabled/authorized in 1Password SSH Agent)."
        else:
            hint = "Fix: load a key into your SSH agent (or enable 1Password SSH Agent)."
        section.warn("SSH agent reachable but has no identities loaded", hint=hint)
    elif state == AgentState.LOADED:
        section.ok(f"SSH agent reachable ({keys} key(s) loaded)")
    else:
        section.warn("Unexpected ssh-add output (agent state unclear)")


# ============================================================
# Git
# ============================================================

def check_git_signing(context: EnvContext) -> Section:
    section = Section("Git SSH signing")
    git = GitConfig(context)
    if not git.available():
        section.warn("git not found")
        return section

    signing = git.signing()
    section.detail("git gpg.format", signing.format)
    section.detail("git commit.gpgsign", signing.gpgsign)
    section.detail("git user.signingkey", signing.signingkey)

    if signing.is_complete:
        section.ok("Git SSH signing configured")
    else:
        section.warn("Git SSH signing not fully configured (expected: gpg.format=ssh, commit.gpgsign=true, user.signingkey set)")
    return section
