""" Lexical analysis for shell commands. """
import collections
import enum
import glob
import os
from typing import NamedTuple

from constants import ESCAPES, GLOB_CHARS, OPERATOR_CHARS
from exceptions import IllegalEscapeError, UnterminatedQuoteError


class TokenType(enum.Enum):
    WORD = "WORD"
    QUOTED_WORD = "QUOTED_WORD"
    LESSTHAN = "LESSTHAN"
    GREATERTHAN = "GREATERTHAN"
    PIPE = "PIPE"
    END = "(end)"

    def __str__(self):
        return self.value


class Token(NamedTuple):
    type: TokenType
    word: str | None = None

    def is_word(self) -> bool:
        return self.type in (TokenType.WORD, TokenType.QUOTED_WORD)


END_TOKEN = Token(TokenType.END)

OPERATOR_TOKENS = {
    "<": TokenType.LESSTHAN,
    ">": TokenType.GREATERTHAN,
    "|": TokenType.PIPE,
}


class TokenStream:
    """
    FIFO of tokens consumed from the head by the parser.
    Any position past either end reads as the END token.
    """
    def __init__(self, tokens=None):
        self._tokens = collections.deque(tokens or [])

    def __len__(self):
        return len(self._tokens)

    def __iter__(self):
        return iter(self._tokens)

    def __getitem__(self, pos):
        return self.nth(pos)

    def __repr__(self):
        return f"TokenStream({list(self._tokens)!r})"

    def append(self, token: Token):
        self._tokens.append(token)

    def nth(self, pos: int) -> Token:
        if -len(self._tokens) <= pos < len(self._tokens):
            return self._tokens[pos]
        return END_TOKEN

    def next(self) -> Token:
        return self.nth(0)

    def next_type(self) -> TokenType:
        return self.nth(0).type

    def next_word(self) -> str | None:
        return self.nth(0).word

    def consume(self) -> Token:
        if not self._tokens:
            return END_TOKEN
        return self._tokens.popleft()

    def join(self, other: "TokenStream"):
        """ Move every token of other onto our tail, leaving other empty. """
        while other._tokens:
            self._tokens.append(other._tokens.popleft())

    def foreach(self, callback):
        for pos, token in enumerate(self._tokens):
            callback(pos, token)

    def describe(self) -> str:
        lines = []

        def add_line(pos, token):
            if token.is_word():
                lines.append(f"Token [{pos}] type ==> {token.type}, word ==> {token.word}")
            else:
                lines.append(f"Token [{pos}] type ==> {token.type}")

        self.foreach(add_line)
        return "\n".join(lines)


def expand_glob(word: str) -> list[str]:
    """ Expand a wildcard word against the filesystem, with ~ expansion. """
    return sorted(glob.glob(os.path.expanduser(word)))


def _read_escape(line: str, i: int) -> tuple[str, int]:
    """ line[i] is a backslash; return the escaped char and the next index. """
    if i + 1 >= len(line):
        raise IllegalEscapeError("")
    char = line[i + 1]
    if char not in ESCAPES:
        raise IllegalEscapeError(char)
    return ESCAPES[char], i + 2


def _scan_quoted(line: str, i: int) -> tuple[str, int]:
    """ line[i] is the opening quote. """
    i += 1
    chars = []
    while i < len(line):
        c = line[i]
        if c == '"':
            return "".join(chars), i + 1
        if c == "\\":
            c, i = _read_escape(line, i)
        else:
            i += 1
        chars.append(c)
    raise UnterminatedQuoteError()


def _scan_plain(line: str, i: int) -> tuple[str, bool, int]:
    """ Return the word, whether it holds an unescaped glob char, and the next index. """
    chars = []
    has_glob = False
    while i < len(line):
        c = line[i]
        if c.isspace() or c == '"' or c in OPERATOR_CHARS:
            break
        if c == "\\":
            c, i = _read_escape(line, i)
        else:
            if c in GLOB_CHARS:
                has_glob = True
            i += 1
        chars.append(c)
    return "".join(chars), has_glob, i


def _word_stream(words) -> TokenStream:
    stream = TokenStream()
    for word in words:
        stream.append(Token(TokenType.WORD, word))
    return stream


def tokenize(line: str, globber=expand_glob) -> TokenStream:
    """
    Split a command line into a TokenStream.

    Raises TokenizeError on a bad escape or a missing closing quote;
    nothing is returned in that case.
    """
    tokens = TokenStream()
    i = 0
    while i < len(line):
        c = line[i]
        if c.isspace():
            i += 1
        elif c in OPERATOR_TOKENS:
            tokens.append(Token(OPERATOR_TOKENS[c]))
            i += 1
        elif c == '"':
            word, i = _scan_quoted(line, i)
            tokens.append(Token(TokenType.QUOTED_WORD, word))
        else:
            word, has_glob, i = _scan_plain(line, i)
            matches = globber(word) if has_glob and globber else []
            if matches:
                tokens.join(_word_stream(matches))
            else:
                # no matches: keep the word unchanged
                tokens.append(Token(TokenType.WORD, word))
    return tokens
