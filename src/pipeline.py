""" Syntax tree for a parsed pipeline. """
from exceptions import MultipleRedirectionError


class Node:
    """ Base class for pipeline tree nodes. """


class Word(Node):
    """ A single pipeline stage: a command, its args and optional redirections. """
    def __init__(self, command: str, args=None):
        self.command = command
        self.args = list(args or [])
        self.input = None         # filename or None
        self.output = None        # filename or None

    def add_arg(self, arg: str):
        self.args.append(arg)

    def set_input(self, path: str):
        if self.input is not None:
            raise MultipleRedirectionError()
        self.input = path

    def set_output(self, path: str):
        if self.output is not None:
            raise MultipleRedirectionError()
        self.output = path

    def argv(self) -> list[str]:
        return [self.command] + self.args

    def __str__(self):
        parts = self.argv()
        if self.input is not None:
            parts.append(f"<{self.input}")
        if self.output is not None:
            parts.append(f">{self.output}")
        return " ".join(parts)

    def __repr__(self):
        return (f"Word({self.command!r}, {self.args!r}, "
                f"input={self.input!r}, output={self.output!r})")


class Pipe(Node):
    """ left | right """
    def __init__(self, left: Node, right: Node):
        self.left = left
        self.right = right

    def __str__(self):
        return f"{self.left} | {self.right}"

    def __repr__(self):
        return f"Pipe({self.left!r}, {self.right!r})"


def count(tree) -> int:
    """ Number of nodes, leaves and pipes alike. """
    if tree is None:
        return 0
    if isinstance(tree, Word):
        return 1
    return 1 + count(tree.left) + count(tree.right)


def leaf_count(tree) -> int:
    if tree is None:
        return 0
    if isinstance(tree, Word):
        return 1
    return leaf_count(tree.left) + leaf_count(tree.right)


def depth(tree) -> int:
    """ A lone Word has depth 1. """
    if tree is None:
        return 0
    if isinstance(tree, Word):
        return 1
    return 1 + max(depth(tree.left), depth(tree.right))


def release(tree):
    """ Tear the tree down children first. """
    if tree is None:
        return
    if isinstance(tree, Pipe):
        release(tree.left)
        release(tree.right)
        tree.left = tree.right = None
    else:
        tree.args.clear()
        tree.input = tree.output = None
