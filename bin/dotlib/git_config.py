"""Optional Git global configuration: SSH commit signing and identity."""

# ============================================================
# Imports
# ============================================================

import re
import subprocess
from collections.abc import Callable

from . import shell
from .models import (
    AgentKey,
    Decision,
    DecisionAction,
    EnvContext,
    GitIdentity,
    GitSigningConfig,
)
from .output import print_error, print_info, print_key_value, print_section, print_success


SIGNING_ALGORITHM = "ssh-ed25519"

Prompt = Callable[[str], str]


# ============================================================
# Git Config Store
# ============================================================

class GitConfig:
    """Read and write keys in the global Git configuration."""

    def __init__(self, context: EnvContext):
        self.env = context.environ

    def available(self) -> bool:
        return shell.have_cmd("git", self.env)

    def get(self, key: str) -> str:
        """Return the value of key, empty string when unset."""
        result = shell.capture(["git", "config", "--global", "--get", key], self.env)
        if result.returncode != 0:
            return ""
        return result.stdout.strip()

    def set(self, key: str, value: str) -> None:
        subprocess.run(["git", "config", "--global", key, value], check=True, env=self.env)

    def signing(self) -> GitSigningConfig:
        return GitSigningConfig(
            format=self.get("gpg.format"),
            gpgsign=self.get("commit.gpgsign"),
            signingkey=self.get("user.signingkey"),
        )

    def identity(self) -> GitIdentity:
        return GitIdentity(name=self.get("user.name"), email=self.get("user.email"))


def apply_decision(git: GitConfig, decision: Decision) -> None:
    """Write the decision's values; no-op unless it is APPLY."""
    if decision.action != DecisionAction.APPLY:
        return
    for key, value in decision.values.items():
        git.set(key, value)


# ============================================================
# Decisions
# ============================================================

def parse_agent_keys(listing: str, algorithm: str = SIGNING_ALGORITHM) -> list[AgentKey]:
    """Parse `ssh-add -L` output, keeping keys of the given algorithm."""
    keys: list[AgentKey] = []
    for line in listing.splitlines():
        parts = line.split(maxsplit=2)
        if len(parts) < 2 or parts[0] != algorithm:
            continue
        comment = parts[2].strip() if len(parts) == 3 else ""
        keys.append(AgentKey(algorithm=parts[0], material=parts[1], comment=comment))
    return keys


def decide_signing(current: GitSigningConfig, confirmed: bool, keys: list[AgentKey], choice: str | None = None) -> Decision:
    """
    Decide how to bring SSH commit signing to gpg.format=ssh, commit.gpgsign=true.

    Args:
        current: Values currently in the global config
        confirmed: Whether the user agreed to configure signing
        keys: Candidate keys from the agent
        choice: 1-based index typed by the user when several keys exist

    Returns:
        NOOP when already configured, declined or cancelled; FAIL when no
        key can be selected; APPLY with all three config values otherwise
    """
    if current.is_complete:
        return Decision.noop("Already configured: gpg.format=ssh, commit.gpgsign=true.")

    if not confirmed:
        return Decision.noop("Skipped Git signing configuration.")

    if not keys:
        return Decision.fail(f"No {SIGNING_ALGORITHM} keys found in your SSH agent.")

    if len(keys) == 1:
        return signing_values(keys[0], "SSH commit signing configured (single key).")

    choice = (choice or "").strip()
    if not choice:
        return Decision.noop("Cancelled. SSH signing not configured.")

    if not re.fullmatch(r"[0-9]+", choice) or not 1 <= int(choice) <= len(keys):
        return Decision.fail("Invalid selection.")

    return signing_values(keys[int(choice) - 1], "SSH commit signing configured (selected key).")


def signing_values(key: AgentKey, reason: str) -> Decision:
    return Decision.apply(
        {
            "gpg.format": "ssh",
            "commit.gpgsign": "true",
            "user.signingkey": key.signing_value,
        },
        reason,
    )


def decide_identity(current: GitIdentity, confirmed: bool, name: str = "", email: str = "") -> Decision:
    """Decide whether to write user.name and user.email."""
    if current.is_complete:
        return Decision.noop("Already configured.")

    if not confirmed:
        return Decision.noop("Skipped Git identity configuration.")

    name, email = name.strip(), email.strip()
    if not name or not email:
        return Decision.fail("Invalid input. Aborting identity setup.")

    return Decision.apply({"user.name": name, "user.email": email}, "Git identity configured.")


def is_yes(answer: str) -> bool:
    """Only a single y or Y confirms."""
    return answer.strip() in ("y", "Y")


# ============================================================
# Interactive Steps
# ============================================================

def configure_git_signing(git: GitConfig, context: EnvContext, ask: Prompt = input) -> Decision:
    """Interactively configure Git SSH commit signing."""
    print_section("Optional: Git SSH commit signing")

    if not git.available():
        print_info("Notice: git not found. Skipping signing setup.")
        return Decision.noop("git not found")

    current = git.signing()
    if current.is_complete:
        decision = decide_signing(current, confirmed=False, keys=[])
        print_info(decision.reason)
        return decision

    print_info("This enables signed commits using your SSH agent (GitHub can show Verified).")
    confirmed = is_yes(ask("Configure now? (Y/N) "))
    if not confirmed:
        decision = decide_signing(current, confirmed=False, keys=[])
        print_info(decision.reason)
        return decision

    if not shell.have_cmd("ssh-add", context.environ):
        print_error("ssh-add not found.")
        print_info("Tip: On macOS it should exist. If not, install Xcode Command Line Tools.")
        return Decision.fail("ssh-add not found")

    listing = shell.capture(["ssh-add", "-L"], context.environ)
    keys = parse_agent_keys(listing.stdout)

    choice = None
    if len(keys) > 1:
        print_info(f"Multiple {SIGNING_ALGORITHM} keys found in your SSH agent:")
        print_info("")
        for index, key in enumerate(keys, start=1):
            print_info(f"  [{index}] {key.display()}")
        print_info("")
        choice = ask("Choose a key number to use for signing (Enter to cancel): ")

    decision = decide_signing(current, confirmed=True, keys=keys, choice=choice)
    report_decision(decision)

    if decision.action == DecisionAction.FAIL and not keys:
        print_info("Tip: If you use 1Password: enable SSH Agent and add/authorize the key.")

    apply_decision(git, decision)
    if decision.action == DecisionAction.APPLY:
        print_key_value("Signing key", git.get("user.signingkey"))

    return decision


def configure_git_identity(git: GitConfig, ask: Prompt = input) -> Decision:
    """Interactively configure Git user.name and user.email."""
    print_section("Optional: Git user identity")

    if not git.available():
        print_info("Notice: git not found. Skipping identity setup.")
        return Decision.noop("git not found")

    current = git.identity()
    if current.is_complete:
        print_info("Already configured:")
        print_info(f"  user.name  = {current.name}")
        print_info(f"  user.email = {current.email}")
        return decide_identity(current, confirmed=False)

    print_info("Git global identity is not fully configured.")
    confirmed = is_yes(ask("Configure now? (Y/N) "))

    name = email = ""
    if confirmed:
        name = ask("Enter Git user.name: ")
        email = ask("Enter Git user.email: ")

    decision = decide_identity(current, confirmed, name, email)
    report_decision(decision)
    apply_decision(git, decision)
    return decision


def report_decision(decision: Decision) -> None:
    """Print the decision's reason with a matching severity."""
    if decision.action == DecisionAction.FAIL:
        print_error(decision.reason)
    elif decision.action == DecisionAction.APPLY:
        print_success(decision.reason)
    else:
        print_info(decision.reason)
