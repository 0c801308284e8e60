#!/usr/bin/env python3
"""Dotfiles bootstrap tool.

Links editor configuration, installs extensions, configures Git signing and
diagnoses the workstation environment.
"""

import argparse
import subprocess
import sys

from dotlib import Config, execute_doctor, execute_install
from dotlib.output import print_error, print_info


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #

def run_install(config, args):
    execute_install(config)
    return 0


def run_doctor(config, args):
    return execute_doctor(config, fix=args.fix)


COMMANDS = {
    "install": run_install,
    "doctor":  run_doctor,
}


# --------------------------------------------------------------------------- #
# Main
# --------------------------------------------------------------------------- #

def build_parser():
    """Build the argument parser.

    Commands:
      install  - Link VS Code settings, install extensions, configure Git, run doctor
      doctor   - Diagnose Homebrew, PATH, SSH agent and Git signing (exit 1 on errors)
    """
    parser = argparse.ArgumentParser(prog="dotfiles", description="Dotfiles bootstrap tool")
    subparsers = parser.add_subparsers(dest="command", required=True, metavar="command")

    subparsers.add_parser("install", help="link editor config, install extensions, configure Git")

    doctor = subparsers.add_parser("doctor", help="diagnose the workstation environment")
    doctor.add_argument("--fix", action="store_true",
                        help="prefer the 1Password SSH agent for this session")
    return parser


def main(argv=None):
    """Parse arguments and dispatch the requested command."""
    args = build_parser().parse_args(argv)

    # Dispatch command
    try:
        config = Config()
        sys.exit(COMMANDS[args.command](config, args))
    except subprocess.CalledProcessError as e:
        sys.exit(e.returncode)
    except KeyboardInterrupt:
        print_info("\nInterrupted")
        sys.exit(130)
    except Exception as e:
        print_error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
