"""Dotfiles setup and diagnostics library."""

from .command_doctor import execute_doctor, run_doctor
from .command_install import execute_install
from .config import Config
from .errors import ConfigError, DotfilesError, MissingSourceError, PrerequisiteError
from .models import (
    Decision,
    DoctorReport,
    EnvContext,
    Finding,
    LinkResult,
    LinkSpec,
    LinkStatus,
    Severity,
)

__all__ = [
    # Configuration
    'Config',
    'EnvContext',
    # Errors
    'ConfigError',
    'DotfilesError',
    'MissingSourceError',
    'PrerequisiteError',
    # Domain models
    'Decision',
    'DoctorReport',
    'Finding',
    'LinkResult',
    'LinkSpec',
    'LinkStatus',
    'Severity',
    # Commands
    'execute_doctor',
    'execute_install',
    'run_doctor',
]
