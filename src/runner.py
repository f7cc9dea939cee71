""" Execute a pipeline tree as a set of cooperating OS processes. """
import contextlib
import os
import signal
import sys
import traceback

from constants import EXIT_CANNOT_EXEC, EXIT_NOT_FOUND
from exceptions import FileOpenError, ShellExit, SpawnError
from pipeline import Pipe, Word
from shell_builtins import BUILTINS
from shell_state import ShellState


def flush_std_streams():
    for stream in (sys.stdout, sys.stderr):
        if stream is not None:
            stream.flush()


def open_redirect(path: str, for_output: bool) -> int:
    """ Open a redirection target and return the raw descriptor. """
    if for_output:
        flags = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
    else:
        flags = os.O_RDONLY
    try:
        return os.open(path, flags, 0o666)
    except OSError as e:
        raise FileOpenError(path, e.errno) from e


def attach_stream(fd: int):
    """ Point sys.stdin or sys.stdout at the descriptor now behind fd 0 or 1. """
    if fd == 0:
        sys.stdin = open(0, "r", closefd=False)
    else:
        sys.stdout = open(1, "w", closefd=False)


@contextlib.contextmanager
def redirect_fd(path, target_fd: int):
    """
    Temporarily put the file at path behind target_fd (0 or 1) in this
    process, then put the original descriptor back.
    """
    if path is None:
        yield
        return

    fd = open_redirect(path, for_output=(target_fd == 1))
    flush_std_streams()
    saved = os.dup(target_fd)
    os.dup2(fd, target_fd)
    os.close(fd)
    old_stdin, old_stdout = sys.stdin, sys.stdout
    attach_stream(target_fd)
    try:
        yield
    finally:
        if target_fd == 1:
            sys.stdout.flush()
            sys.stdout.close()
        else:
            sys.stdin.close()
        sys.stdin, sys.stdout = old_stdin, old_stdout
        os.dup2(saved, target_fd)
        os.close(saved)


def exec_program(argv: list[str], stdin_fd=None, stdout_fd=None) -> int:
    """
    Replace the current process with argv. Only returns, with an exit
    status, if the program image could not be loaded.
    """
    if stdin_fd is not None:
        os.dup2(stdin_fd, 0)
        os.close(stdin_fd)
    if stdout_fd is not None:
        os.dup2(stdout_fd, 1)
        os.close(stdout_fd)

    # Python ignores SIGPIPE; programs we run expect the default.
    signal.signal(signal.SIGPIPE, signal.SIG_DFL)
    try:
        os.execvp(argv[0], argv)
    except FileNotFoundError:
        print(f"{argv[0]}: command not found", file=sys.stderr)
        return EXIT_NOT_FOUND
    except OSError as e:
        print(f"{argv[0]}: {e.strerror}", file=sys.stderr)
        return EXIT_CANNOT_EXEC


class ProcessSpawner:
    """ fork/exec/wait behind one seam so tests can substitute it. """

    def fork(self, child) -> int:
        """
        Run child() in a new process, which exits with its return value.
        Returns the child's pid in the parent.
        """
        flush_std_streams()
        try:
            pid = os.fork()
        except OSError as e:
            raise SpawnError(f"fork failed: {e.strerror}") from e
        if pid != 0:
            return pid

        status = 1
        try:
            status = child()
        except ShellExit as e:
            status = e.status
        except Exception:
            traceback.print_exc()
        finally:
            with contextlib.suppress(OSError):
                flush_std_streams()
            os._exit(status or 0)

    def spawn(self, argv: list[str], stdin=None, stdout=None) -> int:
        """ Start argv with stdin/stdout optionally read from / written to files. """
        in_fd = out_fd = None
        try:
            if stdin is not None:
                in_fd = open_redirect(stdin, for_output=False)
            if stdout is not None:
                out_fd = open_redirect(stdout, for_output=True)
            return self.fork(lambda: exec_program(argv, in_fd, out_fd))
        finally:
            for fd in (in_fd, out_fd):
                if fd is not None:
                    os.close(fd)

    def wait(self, pid: int) -> int:
        _, status = os.waitpid(pid, 0)
        code = os.waitstatus_to_exitcode(status)
        if code < 0:
            # killed by signal -code
            code = 128 - code
        return code


SPAWNER = ProcessSpawner()


def run_builtin(node: Word, state: ShellState) -> int:
    try:
        with redirect_fd(node.input, 0):
            with redirect_fd(node.output, 1):
                return BUILTINS[node.command](node.args, state) or 0
    except FileOpenError as e:
        print(e, file=sys.stderr)
        return 1


def exec_word(node: Word) -> int:
    """ Exec an external stage in place of the current (forked) process. """
    in_fd = out_fd = None
    try:
        if node.input is not None:
            in_fd = open_redirect(node.input, for_output=False)
        if node.output is not None:
            out_fd = open_redirect(node.output, for_output=True)
    except FileOpenError as e:
        print(e, file=sys.stderr)
        return 1
    return exec_program(node.argv(), in_fd, out_fd)


def evaluate_word(node: Word, state: ShellState, spawner, forked=False) -> int:
    if node.command in BUILTINS:
        return run_builtin(node, state)

    if forked:
        return exec_word(node)

    try:
        pid = spawner.spawn(node.argv(), stdin=node.input, stdout=node.output)
    except (FileOpenError, SpawnError) as e:
        print(e, file=sys.stderr)
        return 1

    code = spawner.wait(pid)
    if code != 0:
        print(f"{node.command}: exited with status {code}", file=sys.stderr)
    return code


def _report_stage(side, code):
    # nested pipes report their own stages
    if code != 0 and isinstance(side, Word):
        print(f"{side}: exited with status {code}", file=sys.stderr)


def evaluate_pipe(node: Pipe, state: ShellState, spawner) -> int:
    read_fd, write_fd = os.pipe()

    def run_left():
        os.close(read_fd)
        os.dup2(write_fd, 1)
        os.close(write_fd)
        attach_stream(1)
        return evaluate(node.left, state, spawner, forked=True)

    def run_right():
        os.close(write_fd)
        os.dup2(read_fd, 0)
        os.close(read_fd)
        attach_stream(0)
        return evaluate(node.right, state, spawner, forked=True)

    left_pid = None
    try:
        try:
            left_pid = spawner.fork(run_left)
            right_pid = spawner.fork(run_right)
        finally:
            os.close(read_fd)
            os.close(write_fd)
    except SpawnError as e:
        print(e, file=sys.stderr)
        if left_pid is not None:
            spawner.wait(left_pid)
        return 1

    try:
        left_code = spawner.wait(left_pid)
    finally:
        right_code = spawner.wait(right_pid)
    _report_stage(node.left, left_code)
    _report_stage(node.right, right_code)
    return right_code or left_code


def evaluate(tree, state: ShellState, spawner=None, forked=False) -> int:
    """
    Run a pipeline tree and return its exit status.

    forked is True inside a process created for one side of a pipe; there
    external commands replace the process instead of forking again.
    """
    if spawner is None:
        spawner = SPAWNER
    if isinstance(tree, Pipe):
        return evaluate_pipe(tree, state, spawner)
    return evaluate_word(tree, state, spawner, forked)
