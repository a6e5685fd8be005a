"""Output formatting utilities for the nsdebug CLI.

Consistent message formatting across all commands. User-facing results go
to stdout; warnings and errors go to stderr.

Also re-exports the filter_lib public API for convenience imports.
"""

import sys

# Re-export filter_lib public API -- one-stop import for commands
from nsdebug.lib.filter_lib import (                  # noqa: F401
    Debugger, debug, is_enabled, get_store, init_store, RuleStore,
    PrefixWriter, trace,
)


def print_ok(msg):
    """Print a result line."""
    print(f"  {msg}")


def print_header(msg):
    """Print a section header."""
    print(f"== {msg} ==")


def print_warn(msg):
    """Print a warning message to stderr."""
    print(f"  [WARN] {msg}", file=sys.stderr)


def print_error(msg):
    """Print an error message to stderr."""
    print(f"  ERROR: {msg}", file=sys.stderr)
