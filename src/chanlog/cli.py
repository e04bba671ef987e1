"""Main CLI entry point for chanlog.

Implements a Docker-style two-pass argument parser:
  1. First pass: extract global flags (--verbose, --quiet, --no-color, --config)
  2. Second pass: dispatch to subcommand with shared parent args

Global flags can appear before OR after the subcommand:
  chanlog --config game.json channels list     # works
  chanlog channels list --config game.json     # also works

Subcommands self-register via register(subparsers, parents) convention.
"""

import argparse
import sys

from chanlog._version import BASE_VERSION, VERSION
from chanlog.errors import ChanlogError
from chanlog.output import print_error, set_verbosity


# ---------------------------------------------------------------------------
# Global flags (Docker-style: can precede the subcommand)
# ---------------------------------------------------------------------------
GLOBAL_FLAGS = {
    "--verbose": {"aliases": ["-v"], "action": "count", "default": 0,
                  "help": "Increase verbosity (-v, -vv)"},
    "--quiet": {"aliases": ["-Q"], "action": "count", "default": 0,
                "help": "Decrease verbosity (-Q, -QQ, -QQQ=silent)"},
    "--no-color": {"action": "store_true", "default": False,
                   "help": "Emit plain messages without color markup"},
    "--config": {"metavar": "PATH", "default": None,
                 "help": "Path to settings file (default: nearest .chanlog.json)"},
}


def _extract_global_flags(argv):
    """Two-pass parse: pull global flags from anywhere in argv.

    Returns (global_namespace, remaining_argv).
    """
    global_parser = argparse.ArgumentParser(add_help=False)
    for flag, kwargs in GLOBAL_FLAGS.items():
        kw = {k: v for k, v in kwargs.items() if k != "aliases"}
        global_parser.add_argument(flag, *kwargs.get("aliases", []), **kw)

    global_args, remaining = global_parser.parse_known_args(argv)
    return global_args, remaining


# ---------------------------------------------------------------------------
# Shared parent parser (inherited by all subcommands via parents=[])
# ---------------------------------------------------------------------------
def _build_common_parser():
    """Build the shared argument parser.

    These are inherited by every subcommand.
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--dry-run", action="store_true", default=False,
                        help="Preview changes without applying them")
    return common


# ---------------------------------------------------------------------------
# Subcommand discovery and registration
# ---------------------------------------------------------------------------
def _discover_commands():
    """Import and return all command modules.

    Each module in chanlog.commands must export:
      register(subparsers, parents): add itself to the subparser
      run(args): execute the command
    """
    from chanlog.commands import channels, emit, generate
    return [channels, emit, generate]


def _build_parser(commands, common_parser):
    """Build the main argparse parser with subcommand dispatch."""
    parser = argparse.ArgumentParser(
        prog="chanlog",
        description="chanlog: channel-based logging toolkit",
        epilog=(
            "Run 'chanlog <command> --help' for details on a specific command.\n"
            "\n"
            "Global flags (--verbose, --quiet, --no-color, --config) can appear\n"
            "before or after the subcommand."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"chanlog {BASE_VERSION} ({VERSION})",
    )

    # Add global flags to main parser too (for --help display)
    for flag, kwargs in GLOBAL_FLAGS.items():
        kw = {k: v for k, v in kwargs.items() if k != "aliases"}
        parser.add_argument(flag, *kwargs.get("aliases", []), **kw)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    for cmd_module in commands:
        cmd_module.register(subparsers, parents=[common_parser])

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main(argv=None):
    """Main entry point for chanlog CLI.

    Args:
        argv: Command-line arguments. None means sys.argv[1:].

    Returns:
        Exit code (0 = success, 1 = error, 130 = interrupted).
    """
    if argv is None:
        argv = sys.argv[1:]

    # Pass 1: extract global flags from anywhere in the arg list
    global_args, remaining = _extract_global_flags(argv)
    set_verbosity((global_args.verbose or 0) - (global_args.quiet or 0))

    # Pass 2: parse subcommand + shared/specific args
    common_parser = _build_common_parser()
    commands = _discover_commands()
    parser = _build_parser(commands, common_parser)

    if not remaining:
        parser.print_help()
        return 0

    args = parser.parse_args(remaining)

    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    # Global flags were stripped from `remaining`, so pass 1 values win
    for key, value in vars(global_args).items():
        setattr(args, key, value)

    try:
        return args.func(args) or 0
    except ChanlogError as e:
        print_error(str(e))
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
