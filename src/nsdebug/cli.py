"""Main CLI entry point for nsdebug.

Implements a two-pass argument parser:
  1. First pass: extract global flags (--spec, --env-var, --list-channels)
  2. Second pass: dispatch to subcommand

Global flags can appear before OR after the subcommand:
  nsdebug --spec 'app:*' check app:server      # works
  nsdebug check app:server --spec 'app:*'      # also works

Subcommands self-register via register(subparsers, parents) convention.
"""

import argparse
import sys

from nsdebug._version import BASE_VERSION, VERSION
from nsdebug.config import resolve_spec
from nsdebug.lib.filter_lib import RuleStore, debug


_debug = debug("nsdebug:cli")
_debug_config = debug("nsdebug:config")


# ---------------------------------------------------------------------------
# Global flags (can precede the subcommand)
# ---------------------------------------------------------------------------
GLOBAL_FLAGS = {
    "--spec": {"aliases": ["-s"], "metavar": "SPEC", "default": None,
               "help": "Debug spec to use instead of the environment"},
    "--env-var": {"metavar": "NAME", "default": None,
                  "help": "Environment variable holding the spec (default: DEBUG)"},
    "--list-channels": {"action": "store_true", "default": False,
                        "help": "List the channels nsdebug reports on and exit"},
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
# Subcommand discovery and registration
# ---------------------------------------------------------------------------
def _discover_commands():
    """Import and return all command modules.

    Each module in nsdebug.commands must export:
      register(subparsers, parents) -- add itself to the subparser
      run(args) -- execute the command
    """
    from nsdebug.commands import check, pipe, rules
    return [check, rules, pipe]


def _build_parser(commands):
    """Build the main argparse parser with subcommand dispatch."""
    parser = argparse.ArgumentParser(
        prog="nsdebug",
        description="nsdebug -- check and explain debug channel specs",
        epilog=(
            "Run 'nsdebug <command> --help' for details on a specific command.\n"
            "\n"
            "Global flags (--spec, --env-var) can appear before or after\n"
            "the subcommand."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"nsdebug {BASE_VERSION} ({VERSION})",
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

    # Let each command register itself
    for cmd_module in commands:
        cmd_module.register(subparsers, parents=[])

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main(argv=None, environ=None):
    """Main entry point for nsdebug CLI.

    Args:
        argv: Command-line arguments. None means sys.argv[1:].
        environ: Environment mapping for spec resolution (default: os.environ)

    Returns:
        Exit code (0 = success).
    """
    if argv is None:
        argv = sys.argv[1:]

    # Pass 1: extract global flags from anywhere in the arg list
    global_args, remaining = _extract_global_flags(argv)

    if global_args.list_channels:
        from nsdebug.channels import format_channel_list
        print(format_channel_list())
        return 0

    # Pass 2: parse subcommand + specific args
    commands = _discover_commands()
    parser = _build_parser(commands)

    # If no args at all, print help
    if not remaining:
        parser.print_help()
        return 0

    args = parser.parse_args(remaining)

    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    spec, origin = resolve_spec(explicit=global_args.spec,
                                env_var=global_args.env_var,
                                environ=environ)
    _debug_config("resolved spec %r from %s", spec, origin)
    args.spec = spec
    args.origin = origin
    args.store = RuleStore(spec)

    # Dispatch
    _debug("running %s", args.command)
    try:
        return args.func(args) or 0
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
