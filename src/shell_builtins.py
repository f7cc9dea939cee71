""" Registry of builtin commands. """
import os
import pwd
import sys

from exceptions import ShellExit

BUILTINS = {}


def builtin(name):
    """Decorator to register builtins"""
    def wrapper(func):
        BUILTINS[name] = func
        return func
    return wrapper


@builtin("exit")
@builtin("quit")
def builtin_exit(args, state):
    raise ShellExit(0)


@builtin("author")
def builtin_author(args, state):
    try:
        name = pwd.getpwuid(os.getuid()).pw_name
    except KeyError:
        name = "Unknown"
    print(name)
    return 0


@builtin("cd")
def builtin_cd(args, state):
    if len(args) == 0 or args[0] == "~":
        target = state.home()
    else:
        target = args[0]

    try:
        os.chdir(target)
        return 0
    except FileNotFoundError:
        print(f"cd: no such file or directory: {target}", file=sys.stderr)
    except NotADirectoryError:
        print(f"cd: not a directory: {target}", file=sys.stderr)
    except PermissionError:
        print(f"cd: permission denied: {target}", file=sys.stderr)
    except OSError as e:
        print(f"cd: {target}: {e.strerror}", file=sys.stderr)
    return 1


@builtin("pwd")
def builtin_pwd(args, state):
    try:
        print(os.getcwd())
    except OSError as e:
        print(f"pwd: {e.strerror}", file=sys.stderr)
        return 1
    return 0
