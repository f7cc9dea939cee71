""" Command-line entry point for pipesh. """
import argparse
import sys

from constants import DEFAULT_PROMPT
from exceptions import ShellExit
from shell import Shell, run_line
from shell_state import ShellState


def build_arg_parser():
    parser = argparse.ArgumentParser(
        prog="pipesh",
        description="A small shell for pipelines and I/O redirection"
    )
    parser.add_argument(
        "-c", "--command",
        metavar="LINE",
        help="Run a single command line and exit with its status"
    )
    parser.add_argument(
        "--prompt",
        default=DEFAULT_PROMPT,
        help="Interactive prompt (default: $PIPESH_PROMPT or '%(default)s')"
    )
    parser.add_argument(
        "--no-banner",
        action="store_true",
        help="Do not print the welcome line"
    )
    parser.add_argument(
        "--show-tokens",
        action="store_true",
        help="Print the token stream of each line to stderr"
    )
    parser.add_argument(
        "--show-tree",
        action="store_true",
        help="Print the parsed pipeline of each line to stderr"
    )
    return parser


def main(argv=None):
    args = build_arg_parser().parse_args(argv)

    if args.command is not None:
        try:
            rc = run_line(args.command, ShellState(), args.show_tokens, args.show_tree)
        except ShellExit as e:
            rc = e.status
        sys.exit(rc)

    sh = Shell(
        prompt=args.prompt,
        banner=not args.no_banner,
        show_tokens=args.show_tokens,
        show_tree=args.show_tree,
    )
    sys.exit(sh.run())


if __name__ == "__main__":
    main()
