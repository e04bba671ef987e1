"""Output formatting utilities for the chanlog CLI.

Consistent message formatting across all commands. The print_*()
functions respect a single verbosity level set once by the CLI:

    ←── quieter ─────── default ─────── louder ──→
     -3        -2        -1       0        1
    silent   errors    quiet   default  verbose

    print_ok / print_warn / print_dry / print_skip   shown at >= -1
    print_error                                      shown at >= -2
    print_verbose                                    shown at >= 1
"""

import sys

_verbosity = 0


def set_verbosity(level):
    """Set the CLI verbosity (verbose count minus quiet count)."""
    global _verbosity
    _verbosity = level


def get_verbosity():
    return _verbosity


def _should_print():
    return _verbosity >= -1


def print_ok(msg):
    """Print a success message."""
    if _should_print():
        print(f"  [OK] {msg}")


def print_dry(msg):
    """Print a dry-run message."""
    if _should_print():
        print(f"  [DRY RUN] {msg}")


def print_warn(msg):
    """Print a warning message."""
    if _should_print():
        print(f"  [WARN] {msg}")


def print_skip(msg):
    """Print a skip message."""
    if _should_print():
        print(f"  [SKIP] {msg}")


def print_verbose(msg, level=1):
    """Print a detail message shown only with -v (or -vv for level 2)."""
    if _verbosity >= level:
        print(f"  {msg}")


def print_error(msg):
    """Print an error message to stderr. Hidden only at -QQQ."""
    if _verbosity >= -2:
        print(f"  ERROR: {msg}", file=sys.stderr)
