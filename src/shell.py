""" Implement the core of the shell. """
import sys

from constants import BANNER, DEFAULT_PROMPT, EXIT_SYNTAX
from exceptions import ShellError, ShellExit
from lexer import tokenize
from parser import parse
from pipeline import release
from runner import evaluate
from shell_state import ShellState


def read_command(prompt=DEFAULT_PROMPT):
    """ Read one line of input. """
    return input(prompt)


def run_line(line: str, state: ShellState, show_tokens=False, show_tree=False) -> int:
    """
    Tokenize, parse and run one line. Tokenize and parse errors are
    reported and nothing is run. ShellExit propagates to the caller.
    """
    try:
        tokens = tokenize(line)
        if show_tokens and len(tokens):
            print(tokens.describe(), file=sys.stderr)
        tree = parse(tokens)
    except ShellError as e:
        print(e, file=sys.stderr)
        return EXIT_SYNTAX

    if tree is None:
        return state.last_status
    if show_tree:
        print(tree, file=sys.stderr)

    try:
        return evaluate(tree, state)
    finally:
        release(tree)


class Shell:
    def __init__(self, prompt=DEFAULT_PROMPT, banner=True, show_tokens=False, show_tree=False):
        self.state = ShellState()
        self.prompt = prompt
        self.banner = banner
        self.show_tokens = show_tokens
        self.show_tree = show_tree

    def run(self):
        if self.banner:
            print(BANNER)
        while True:
            try:
                line = read_command(self.prompt)
                if not line.strip():
                    continue
                status = run_line(line, self.state, self.show_tokens, self.show_tree)
                self.state.set_status(status)
            except ShellExit as e:
                return e.status

            except EOFError:
                print()
                return 0

            except KeyboardInterrupt:
                print()
