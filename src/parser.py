""" Parse a token stream into a pipeline tree.

Grammar:
    pipeline    := redirection ( PIPE pipeline )?
    redirection := primary ( (LESS|GREATER) WORD ( (LESS|GREATER) WORD )? )?
    primary     := (WORD|QUOTED_WORD)+
"""
from constants import MAX_PIPELINE_STAGES
from exceptions import (
    MissingFilenameError,
    MultipleRedirectionError,
    NoCommandError,
    PipelineTooLongError,
    UnexpectedTokenError,
)
from lexer import TokenStream, TokenType
from pipeline import Node, Pipe, Word

REDIRECTIONS = (TokenType.LESSTHAN, TokenType.GREATERTHAN)


def _is_word(tokens: TokenStream) -> bool:
    return tokens.next().is_word()


def parse_primary(tokens: TokenStream) -> Word:
    """ First word is the command, the rest are its args. """
    if not _is_word(tokens):
        raise NoCommandError()
    node = Word(tokens.consume().word)
    while _is_word(tokens):
        node.add_arg(tokens.consume().word)
    return node


def _parse_filename(tokens: TokenStream) -> str:
    tokens.consume()   # the < or >
    if not _is_word(tokens):
        raise MissingFilenameError()
    return tokens.consume().word


def _apply_redirection(node: Word, kind: TokenType, path: str):
    if kind == TokenType.LESSTHAN:
        node.set_input(path)
    else:
        node.set_output(path)


def parse_redirection(tokens: TokenStream) -> Word:
    node = parse_primary(tokens)

    first = tokens.next_type()
    if first not in REDIRECTIONS:
        return node
    _apply_redirection(node, first, _parse_filename(tokens))

    second = tokens.next_type()
    if second == first:
        raise MultipleRedirectionError()
    if second in REDIRECTIONS:
        _apply_redirection(node, second, _parse_filename(tokens))
    return node


def parse_pipeline(tokens: TokenStream, stage=1) -> Node:
    """ Right-associative: a | b | c is Pipe(a, Pipe(b, c)). """
    if stage > MAX_PIPELINE_STAGES:
        raise PipelineTooLongError()
    left = parse_redirection(tokens)
    if tokens.next_type() != TokenType.PIPE:
        return left
    tokens.consume()
    return Pipe(left, parse_pipeline(tokens, stage + 1))


def parse(tokens: TokenStream) -> Node | None:
    """
    Parse a whole command line. Returns None when there is nothing to run.
    Raises ParseError on bad input; the stream is left partly consumed.
    """
    if tokens is None or tokens.next_type() == TokenType.END:
        return None

    tree = parse_pipeline(tokens)

    if tokens.next_type() != TokenType.END:
        raise UnexpectedTokenError(tokens.next_type())
    return tree
