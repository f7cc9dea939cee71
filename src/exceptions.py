""" Exceptions raised by the shell. """
import errno
import os


class ShellExit(Exception):
    """ Raised by exit/quit to unwind back to the read loop. """
    def __init__(self, status=0):
        super().__init__(status)
        self.status = status


class ShellError(Exception):
    """ Base class for errors reported to the user. """


class TokenizeError(ShellError):
    pass


class IllegalEscapeError(TokenizeError):
    def __init__(self, char):
        super().__init__(f"Illegal escape character '{char}'")
        self.char = char


class UnterminatedQuoteError(TokenizeError):
    def __init__(self):
        super().__init__("Unterminated quote")


class ParseError(ShellError):
    pass


class NoCommandError(ParseError):
    def __init__(self):
        super().__init__("No command specified")


class MissingFilenameError(ParseError):
    def __init__(self):
        super().__init__("Expect filename after redirection")


class MultipleRedirectionError(ParseError):
    def __init__(self):
        super().__init__("Multiple redirection")


class UnexpectedTokenError(ParseError):
    def __init__(self, token_type):
        super().__init__(f"Syntax error on token {token_type}")
        self.token_type = token_type


class PipelineTooLongError(ParseError):
    def __init__(self):
        super().__init__("Pipeline too long")


class ExecutionError(ShellError):
    pass


class SpawnError(ExecutionError):
    pass


class FileOpenError(ExecutionError):
    """ A redirection target could not be opened. """
    def __init__(self, path, errno_value):
        self.path = path
        self.errno = errno_value
        self.permission_denied = errno_value in (errno.EACCES, errno.EPERM)
        if self.permission_denied:
            reason = "Permission denied"
        else:
            reason = os.strerror(errno_value)
        super().__init__(f"{path}: {reason}")
