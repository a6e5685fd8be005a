"""nsdebug pipe -- label each line of stdin and copy it to stderr.

For folding a subprocess's output into a debug log::

    $ make 2>&1 | nsdebug pipe --prefix build --ignore 'Nothing to be done'
"""

import argparse
import sys

from nsdebug.lib.filter_lib import prefix_lines


def register(subparsers, parents):
    """Register the 'pipe' subcommand."""
    p = subparsers.add_parser(
        "pipe",
        parents=parents,
        help="Prefix each line of stdin and write it to stderr",
        description=(
            "Copy stdin to stderr, writing PREFIX before every line and\n"
            "dropping lines that contain any --ignore phrase. The debug\n"
            "spec does not apply to piped lines."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--prefix", "-p", required=True, metavar="LABEL",
                   help="Label written before each line")
    p.add_argument("--ignore", "-i", action="append", default=[],
                   metavar="PHRASE",
                   help="Drop lines containing PHRASE (repeatable)")
    p.add_argument("--stdout", action="store_true", default=False,
                   help="Write to stdout instead of stderr")
    p.set_defaults(func=run)


def run(args, stdin=None):
    """Execute the pipe command."""
    source = stdin if stdin is not None else sys.stdin
    target = sys.stdout if args.stdout else sys.stderr
    for line in prefix_lines(source, args.prefix, args.ignore):
        target.write(line)
        target.flush()
    return 0
