"""Install command: link editor config, install extensions, configure Git, run the doctor."""

# ============================================================
# Imports
# ============================================================

import subprocess

from . import shell
from .command_doctor import bash_version, print_report, run_doctor
from .config import Config
from .errors import MissingSourceError, PrerequisiteError
from .extensions import install_extensions
from .git_config import GitConfig, Prompt, configure_git_identity, configure_git_signing
from .models import DoctorReport, EnvContext, LinkSpec
from .output import print_error, print_header, print_info, print_key_value, print_section, print_warning
from .ssh_agent import discover_vendor_socket
from .symlinks import ensure_default_file, link_file


DEFAULT_KEYBINDINGS = "[]\n"


# ============================================================
# Entry Point
# ============================================================

def execute_install(config: Config, ask: Prompt = input, context: EnvContext | None = None) -> DoctorReport:
    """
    Install the dotfiles.

    Steps:
    1. Verify required repository resources and bootstrap Bash 4+
    2. Link settings.json and keybindings.json into the editor user folder
    3. Install editor extensions from extensions.txt
    4. Optionally configure Git SSH signing and identity (macOS only)
    5. Run the doctor (with --fix when the 1Password agent is present)

    Returns:
        The doctor report; its findings never change the install outcome
    """
    context = context or EnvContext.from_process()

    print_header("Dotfiles install starting")
    print_key_value("Repo root", str(config.repo_root))

    check_prerequisites(config)
    ensure_modern_bash(config, context)

    link_editor_config(config)

    print_section("VS Code extensions")
    install_extensions(config.extensions_txt, config.editor_cli, context)

    if context.is_macos:
        configure_git(context, ask)
    else:
        print_info("")
        print_info("Notice: Git setup is macOS-only in this script. Skipping.")

    report = run_post_install_doctor(config, context)

    print_info("")
    print_header("Done")
    print_info("Tip: Restart VS Code after theme/icon changes.")
    return report


# ============================================================
# Prerequisites
# ============================================================

def check_prerequisites(config: Config) -> None:
    """Abort before any change when required repository resources are missing."""
    if not config.vscode_dir.is_dir():
        raise MissingSourceError(config.vscode_dir)

    if not config.settings_json.is_file():
        print_error(f"expected file not found: {config.settings_json}")
        print_info("Tip: create vscode/settings.json inside the repository.")
        raise MissingSourceError(config.settings_json)


def ensure_modern_bash(config: Config, context: EnvContext) -> None:
    """Install Bash from Homebrew when the Bash on PATH is too old."""
    if shell.have_cmd("bash", context.environ):
        major, version_line = bash_version(context)
        if major is not None and major >= config.min_bash_major:
            return
    else:
        version_line = "not found"

    print_info(f"Bash {config.min_bash_major}+ required. Detected: {version_line or 'unknown'}. Bootstrapping...")

    if not shell.have_cmd("brew", context.environ):
        raise PrerequisiteError("Homebrew not found. Please install Homebrew first, then re-run.")

    subprocess.run(["brew", "install", "bash"], check=True, env=context.environ)


# ============================================================
# Editor
# ============================================================

def link_editor_config(config: Config) -> None:
    """Link settings and keybindings, creating default keybindings if needed."""
    print_section("VS Code settings")
    config.editor_user_dir.mkdir(parents=True, exist_ok=True)

    link_file(LinkSpec(config.settings_json, config.editor_user_dir / "settings.json"))

    ensure_default_file(config.keybindings_json, DEFAULT_KEYBINDINGS)
    link_file(LinkSpec(config.keybindings_json, config.editor_user_dir / "keybindings.json"))


# ============================================================
# Git
# ============================================================

def configure_git(context: EnvContext, ask: Prompt) -> None:
    """Run both Git setters; a failure in one does not stop the other."""
    git = GitConfig(context)

    for step in (
        lambda: configure_git_signing(git, context, ask),
        lambda: configure_git_identity(git, ask),
    ):
        try:
            step()
        except subprocess.CalledProcessError as e:
            print_error(f"git config failed (exit {e.returncode})")
        except EOFError:
            # No more input on stdin (piped or CI run)
            print_info("")
            print_warning("No answer received. Skipping.")


# ============================================================
# Doctor
# ============================================================

def run_post_install_doctor(config: Config, context: EnvContext) -> DoctorReport:
    """Run the doctor, preferring the 1Password agent when it is present."""
    print_info("")
    print_header("Post-install: dotfiles doctor")

    fix = discover_vendor_socket(config.vendor_socket_root) is not None
    if fix:
        print_info("Notice: 1Password SSH agent detected. Running doctor with --fix for this session.")

    report = run_doctor(config, context, fix=fix)
    if print_report(report) != 0:
        print_info("Notice: doctor reported issues (non-fatal).")
    return report
