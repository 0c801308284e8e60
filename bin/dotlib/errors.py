"""Exceptions for dotfiles commands."""

from pathlib import Path


class DotfilesError(Exception):
    """Base exception for fatal dotfiles errors."""

    pass


class ConfigError(DotfilesError):
    """Error reading the optional dotfiles.toml overrides."""

    pass


class PrerequisiteError(DotfilesError):
    """A required tool is missing and cannot be bootstrapped."""

    pass


class MissingSourceError(DotfilesError):
    """A managed resource that must exist in the repository is missing."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"source does not exist: {path}")
