"""nsdebug rules -- show the resolved spec and how it was parsed."""

import argparse

from nsdebug.output import print_header, print_warn


def register(subparsers, parents):
    """Register the 'rules' subcommand."""
    p = subparsers.add_parser(
        "rules",
        parents=parents,
        help="Show the resolved spec and its parsed rules",
        description=(
            "Print where the debug spec came from (cli, env, project,\n"
            "default) and the include / exclude / wildcard rules it\n"
            "parses to."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.set_defaults(func=run)


def run(args):
    """Execute the rules command."""
    rules = args.store.get()
    print_header(f"spec ({args.origin}): {args.spec!r}")
    print(rules.describe())
    if rules.is_empty:
        print_warn("spec enables no channels")
    return 0
