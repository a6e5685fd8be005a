"""nsdebug check -- show whether channels are enabled under a spec.

Prints one line per channel with the rule that decided it::

    $ DEBUG='app:*,!app:db' nsdebug check app app:server app:db
      - app  (default)
      + app:server  (prefix: app:*)
      - app:db  (negated: app:db)
"""

import argparse

from nsdebug.output import print_ok


def register(subparsers, parents):
    """Register the 'check' subcommand."""
    p = subparsers.add_parser(
        "check",
        parents=parents,
        help="Check which channels a spec enables",
        description=(
            "Match each CHANNEL against the resolved debug spec and print\n"
            "'+' (enabled) or '-' (disabled) with the deciding rule."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("channels", nargs="+", metavar="CHANNEL",
                   help="Channel name, e.g. app:server:http")
    p.add_argument("--strict", action="store_true", default=False,
                   help="Exit with status 1 if any channel is disabled")
    p.add_argument("--quiet", "-q", action="store_true", default=False,
                   help="Print nothing; only set the exit status")
    p.set_defaults(func=run)


def run(args):
    """Execute the check command."""
    all_enabled = True
    for channel in args.channels:
        decision = args.store.explain(channel)
        all_enabled = all_enabled and decision.enabled
        if not args.quiet:
            print_ok(str(decision))

    if args.strict and not all_enabled:
        return 1
    return 0
