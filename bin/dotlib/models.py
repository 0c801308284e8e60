"""Domain models for dotfiles setup and diagnostics."""

# ============================================================
# Imports
# ============================================================

import os
import platform
import stat
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path


# ============================================================
# Enums
# ============================================================

class LinkStatus(Enum):
    """Status of a symlink operation after execution."""

    ALREADY_LINKED = "Already linked"
    LINKED = "Linked"
    REPLACED = "Linked (backed up existing)"


class SocketOrigin(Enum):
    """Which agent an SSH agent socket belongs to."""

    VENDOR = "1Password"
    SYSTEM = "macOS launchd"
    UNKNOWN = "unknown"


class Severity(Enum):
    """Classification of a diagnostic finding."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


class DecisionAction(Enum):
    """Outcome of an optional configuration step."""

    NOOP = "noop"
    APPLY = "apply"
    FAIL = "fail"


# ============================================================
# Symlink Models
# ============================================================

@dataclass(frozen=True)
class LinkSpec:
    """
    A managed symlink.

    Attributes:
        source: Path inside the repository
        target: Path where the symlink should live
    """

    source: Path
    target: Path


@dataclass(frozen=True)
class LinkResult:
    """
    Result of executing a link operation.

    Attributes:
        spec: The link that was processed
        status: Status after execution
        backup: Where the previous target was moved, if anything was there
    """

    spec: LinkSpec
    status: LinkStatus
    backup: Path | None = None

    @property
    def target_path(self) -> Path:
        """Get the target path from the spec."""
        return self.spec.target


# ============================================================
# Extension Models
# ============================================================

@dataclass
class ExtensionInstallResult:
    """Identifiers passed to the editor CLI, split by outcome."""

    installed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


# ============================================================
# SSH Agent Models
# ============================================================

@dataclass(frozen=True)
class SSHAgentSocket:
    """
    A Unix domain socket offered as SSH_AUTH_SOCK.

    Validity is checked on every access; sockets can disappear at any time.
    """

    path: str
    origin: SocketOrigin

    @property
    def is_valid(self) -> bool:
        """Check that the path currently exists and is a socket."""
        if not self.path:
            return False
        try:
            return stat.S_ISSOCK(os.stat(self.path).st_mode)
        except OSError:
            return False


@dataclass(frozen=True)
class AgentKey:
    """A public key line from `ssh-add -L`."""

    algorithm: str
    material: str
    comment: str = ""

    @property
    def signing_value(self) -> str:
        """Value stored in user.signingkey (comment dropped)."""
        return f"{self.algorithm} {self.material}"

    def display(self) -> str:
        """Human-readable form used in the selection prompt."""
        if self.comment:
            return f"{self.signing_value}  ({self.comment})"
        return self.signing_value


# ============================================================
# Git Models
# ============================================================

@dataclass(frozen=True)
class GitSigningConfig:
    """Current values of the three Git SSH-signing keys."""

    format: str = ""
    gpgsign: str = ""
    signingkey: str = ""

    @property
    def is_complete(self) -> bool:
        """Check for gpg.format=ssh, commit.gpgsign=true and a signing key."""
        return self.format == "ssh" and self.gpgsign == "true" and bool(self.signingkey)


@dataclass(frozen=True)
class GitIdentity:
    """Current Git user.name / user.email."""

    name: str = ""
    email: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.name) and bool(self.email)


@dataclass(frozen=True)
class Decision:
    """
    What an optional configuration step should do.

    Attributes:
        action: NOOP, APPLY or FAIL
        values: Git config keys to write when applying
        reason: Message shown to the user
    """

    action: DecisionAction
    values: dict[str, str] = field(default_factory=dict)
    reason: str = ""

    @classmethod
    def noop(cls, reason: str) -> 'Decision':
        return cls(action=DecisionAction.NOOP, reason=reason)

    @classmethod
    def apply(cls, values: dict[str, str], reason: str) -> 'Decision':
        return cls(action=DecisionAction.APPLY, values=values, reason=reason)

    @classmethod
    def fail(cls, reason: str) -> 'Decision':
        return cls(action=DecisionAction.FAIL, reason=reason)


# ============================================================
# Environment Models
# ============================================================

@dataclass(frozen=True)
class EnvContext:
    """
    Snapshot of the process environment the commands observe.

    Overrides produce a new context; the real process environment is never
    touched. Callers decide whether to export the result.

    Attributes:
        environ: Environment variables
        home: Home directory
        system: Operating system name as reported by platform.system()
    """

    environ: dict[str, str]
    home: Path
    system: str

    @classmethod
    def from_process(cls) -> 'EnvContext':
        """Capture the current process environment."""
        return cls(environ=dict(os.environ), home=Path.home(), system=platform.system())

    def get(self, name: str) -> str:
        """Return an environment variable, empty string when unset."""
        return self.environ.get(name, "")

    def with_env(self, **overrides: str) -> 'EnvContext':
        """Return a copy with the given variables overridden."""
        return replace(self, environ={**self.environ, **overrides})

    @property
    def path_entries(self) -> list[str]:
        """PATH split into its entries, in order."""
        path = self.get("PATH")
        return path.split(":") if path else []

    @property
    def is_macos(self) -> bool:
        return self.system == "Darwin"


# ============================================================
# Diagnostic Models
# ============================================================

@dataclass(frozen=True)
class Finding:
    """One classified diagnostic result."""

    category: str
    severity: Severity
    message: str
    hint: str | None = None


@dataclass(frozen=True)
class Detail:
    """An observed value printed alongside findings."""

    key: str
    value: str


@dataclass
class Section:
    """Findings and details produced by one check, in print order."""

    name: str
    entries: list[Finding | Detail] = field(default_factory=list)

    def ok(self, message: str) -> None:
        self.entries.append(Finding(self.name, Severity.OK, message))

    def warn(self, message: str, hint: str | None = None) -> None:
        self.entries.append(Finding(self.name, Severity.WARNING, message, hint))

    def error(self, message: str, hint: str | None = None) -> None:
        self.entries.append(Finding(self.name, Severity.ERROR, message, hint))

    def detail(self, key: str, value: str) -> None:
        self.entries.append(Detail(key, value))

    @property
    def findings(self) -> list[Finding]:
        return [entry for entry in self.entries if isinstance(entry, Finding)]


@dataclass
class DoctorReport:
    """
    Outcome of a doctor run.

    Attributes:
        sections: Checks in evaluation order
        context: Environment after the run (includes any --fix override)
    """

    sections: list[Section]
    context: EnvContext

    @property
    def findings(self) -> list[Finding]:
        return [finding for section in self.sections for finding in section.findings]

    def count(self, severity: Severity) -> int:
        """Count findings with the given severity."""
        return sum(1 for finding in self.findings if finding.severity == severity)

    @property
    def errors(self) -> int:
        return self.count(Severity.ERROR)

    @property
    def warnings(self) -> int:
        return self.count(Severity.WARNING)

    @property
    def exit_code(self) -> int:
        """1 if any check was classified error, else 0."""
        return 1 if self.errors else 0
