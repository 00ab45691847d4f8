"""Running a pipeline of simple commands."""

from __future__ import annotations

import io
import os
import signal
import stat
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from minish.builtins import run_builtin
from minish.cd import change_directory
from minish.command import Command, RedirectionError, RedirectionKind, check_access
from minish.environment import Environment
from minish.errors import ErrorKind, format_error
from minish.exit_builtin import run_exit
from minish.exporting import export_listing, run_export, run_unset
from minish.heredoc import HeredocInterrupted, read_heredoc
from minish.lookup import CommandError, resolve_command

_QUIT_MESSAGE = "Quit (core dumped)\n"
_SHELL_BUILTINS = frozenset({"cd", "exit", "export", "unset"})


def decode_wait_status(status: int) -> tuple[int, int | None]:
    """Turn a raw wait status into the shell's exit status and the killing signal.

    A normal exit gives its exit code and no signal; death by a signal gives
    128 plus the signal number, and the signal.
    """
    if os.WIFSIGNALED(status):
        sig = os.WTERMSIG(status)
        return 128 + sig, sig
    if os.WIFEXITED(status):
        return os.WEXITSTATUS(status), None
    raise ValueError(f"wait status {status:#x} is not a termination")


def _write_all(fd: int, data: bytes) -> None:
    view = memoryview(data)
    while view:
        written = os.write(fd, view)
        view = view[written:]


class _FdText(io.TextIOBase):
    """A text stream that writes straight to a file descriptor."""

    def __init__(self, fd: int) -> None:
        super().__init__()
        self._fd = fd

    def writable(self) -> bool:
        return True

    def write(self, text: str) -> int:
        _write_all(self._fd, text.encode())
        return len(text)


@dataclass
class _Stage:
    """What one command of a pipeline left behind: a status or a process."""

    status: int = 0
    pid: int | None = None


class Shell:
    """Runs pipelines against one environment and keeps the last exit status.

    ``stdin_fd``, ``stdout_fd`` and ``stderr_fd`` are the descriptors the
    pipeline reads from and writes to; ``read_line`` reads here-document lines.
    """

    def __init__(self, environment: Environment) -> None:
        self.environment = environment
        self.status = 0
        self.stdin_fd = 0
        self.stdout_fd = 1
        self.stderr_fd = 2
        self.read_line: Callable[[str], str | None] | None = None
        self._feeders: list[threading.Thread] = []

    def execute(self, commands: Iterable[Command]) -> int:
        """Run the commands as one pipeline and return its exit status.

        ``exit`` on its own raises ShellExit.
        """
        commands = list(commands)
        if not commands:
            return self.status
        try:
            documents = [self._read_heredocs(command) for command in commands]
        except HeredocInterrupted as exc:
            self.status = exc.status
            return self.status
        in_pipeline = len(commands) > 1
        stages: list[_Stage] = []
        input_fd: int | None = None
        try:
            for position, (command, document) in enumerate(zip(commands, documents)):
                is_last = position == len(commands) - 1
                read_end, write_end = os.pipe()
                try:
                    stage = self._run_stage(
                        command, document, input_fd, write_end, is_last, in_pipeline
                    )
                finally:
                    os.close(write_end)
                    if input_fd is not None:
                        os.close(input_fd)
                    input_fd = read_end
                stages.append(stage)
        finally:
            if input_fd is not None:
                os.close(input_fd)
        self.status = self._wait(stages, in_pipeline)
        return self.status

    def _read_heredocs(self, command: Command) -> str | None:
        document = None
        for word in command.heredocs:
            document = read_heredoc(
                word,
                self.environment,
                self.status,
                self.read_line,
                _FdText(self.stderr_fd),
            )
        return document

    def _run_stage(
        self,
        command: Command,
        document: str | None,
        input_fd: int | None,
        write_end: int,
        is_last: bool,
        in_pipeline: bool,
    ) -> _Stage:
        err = _FdText(self.stderr_fd)
        try:
            check_access(command)
        except RedirectionError as exc:
            err.write(f"{exc}\n")
            return _Stage(status=exc.status)
        if command.args and command.args[0] in _SHELL_BUILTINS:
            status = self._run_shell_builtin(command, write_end, is_last, in_pipeline)
            return _Stage(status=status)
        return self._spawn(command, document, input_fd, write_end, is_last)

    def _run_shell_builtin(
        self, command: Command, write_end: int, is_last: bool, in_pipeline: bool
    ) -> int:
        env = self.environment
        name, args = command.args[0], command.args[1:]
        out = _FdText(self.stdout_fd)
        err = _FdText(self.stderr_fd)
        if name == "cd":
            return change_directory(env, args, in_pipeline, err)
        if name == "exit":
            return run_exit(args, in_pipeline, self.status, out, err)
        if name == "unset":
            return run_unset(env, args, in_pipeline)
        if args:
            return run_export(env, args, in_pipeline, out, err)
        return self._export_listing(command, write_end, is_last)

    def _export_listing(self, command: Command, write_end: int, is_last: bool) -> int:
        data = "".join(f"{line}\n" for line in export_listing(self.environment)).encode()
        if not is_last and not command.outfiles:
            self._feed(os.dup(write_end), data)
            return 0
        try:
            target = self._open_output(command)
        except RedirectionError as exc:
            _FdText(self.stderr_fd).write(f"{exc}\n")
            return exc.status
        if target is None:
            _write_all(self.stdout_fd, data)
        else:
            try:
                _write_all(target, data)
            finally:
                os.close(target)
        return 0

    def _open_output(self, command: Command) -> int | None:
        fd: int | None = None
        for redirection in command.redirections:
            if redirection.kind is not RedirectionKind.OUTPUT:
                continue
            flags = os.O_CREAT | os.O_WRONLY
            flags |= os.O_APPEND if redirection.append else os.O_TRUNC
            try:
                new_fd = os.open(redirection.target, flags, 0o644)
            except OSError as exc:
                if fd is not None:
                    os.close(fd)
                raise RedirectionError(redirection.target, exc.strerror or "") from exc
            if fd is not None:
                os.close(fd)
            fd = new_fd
        return fd

    def _open_input(self, command: Command) -> int | None:
        fd: int | None = None
        for target in command.infiles:
            try:
                new_fd = os.open(target, os.O_RDONLY)
            except OSError as exc:
                if fd is not None:
                    os.close(fd)
                raise RedirectionError(target, exc.strerror or "") from exc
            if fd is not None:
                os.close(fd)
            fd = new_fd
        return fd

    def _stage_input(
        self,
        command: Command,
        document: str | None,
        input_fd: int | None,
        opened: list[int],
    ) -> int:
        if document is not None:
            read_end, write_end = os.pipe()
            opened.append(read_end)
            self._feed(write_end, document.encode())
            return read_end
        infile = self._open_input(command)
        if infile is not None:
            opened.append(infile)
            return infile
        if input_fd is not None:
            return input_fd
        return self.stdin_fd

    def _spawn(
        self,
        command: Command,
        document: str | None,
        input_fd: int | None,
        write_end: int,
        is_last: bool,
    ) -> _Stage:
        opened: list[int] = []
        try:
            try:
                stdin = self._stage_input(command, document, input_fd, opened)
                stdout = self._open_output(command)
            except RedirectionError as exc:
                _FdText(self.stderr_fd).write(f"{exc}\n")
                return _Stage(status=exc.status)
            if stdout is not None:
                opened.append(stdout)
            elif not is_last:
                stdout = write_end
            else:
                stdout = self.stdout_fd
            return self._launch(command, stdin, stdout)
        finally:
            for fd in opened:
                os.close(fd)

    def _launch(self, command: Command, stdin: int, stdout: int) -> _Stage:
        args = command.args
        if not args:
            return _Stage()
        err = _FdText(self.stderr_fd)
        captured = io.StringIO()
        status = run_builtin(args, self.environment, captured, err)
        if status is not None:
            self._feed(os.dup(stdout), captured.getvalue().encode())
            return _Stage(status=status)
        try:
            path = resolve_command(args[0], self.environment)
        except CommandError as exc:
            err.write(f"{exc}\n")
            return _Stage(status=exc.status)
        if path is None:
            return _Stage()
        variables = {}
        for entry in self.environment.to_strings():
            key, sep, value = entry.partition("=")
            if sep:
                variables[key] = value
        try:
            pid = os.posix_spawn(
                path,
                list(args),
                variables,
                file_actions=[
                    (os.POSIX_SPAWN_DUP2, stdin, 0),
                    (os.POSIX_SPAWN_DUP2, stdout, 1),
                    (os.POSIX_SPAWN_DUP2, self.stderr_fd, 2),
                ],
                setsigdef=(signal.SIGQUIT, signal.SIGPIPE),
            )
        except OSError:
            return _Stage(status=self._exec_failure(path, args[0], err))
        return _Stage(pid=pid)

    @staticmethod
    def _exec_failure(path: str, name: str, err: _FdText) -> int:
        try:
            mode = os.stat(path).st_mode
        except OSError:
            err.write(format_error(name, ErrorKind.COMMAND_NOT_FOUND))
            return 127
        if stat.S_ISREG(mode) and os.access(name, os.F_OK | os.X_OK):
            return 0
        kind = ErrorKind.PERMISSION_DENIED if stat.S_ISREG(mode) else ErrorKind.IS_A_DIRECTORY
        err.write(format_error(name, kind))
        return 126

    def _feed(self, fd: int, data: bytes) -> None:
        def pump() -> None:
            try:
                _write_all(fd, data)
            except OSError:
                pass
            finally:
                os.close(fd)

        thread = threading.Thread(target=pump, daemon=True)
        thread.start()
        self._feeders.append(thread)

    def _wait(self, stages: list[_Stage], in_pipeline: bool) -> int:
        newline = False
        quit_printed = False

        def note(sig: int | None) -> None:
            nonlocal newline, quit_printed
            if sig == signal.SIGINT:
                newline = True
            elif sig == signal.SIGQUIT and not quit_printed:
                if not in_pipeline:
                    _write_all(self.stdout_fd, _QUIT_MESSAGE.encode())
                quit_printed = True

        last = stages[-1]
        status = last.status
        if last.pid is not None:
            _, raw = os.waitpid(last.pid, 0)
            status, sig = decode_wait_status(raw)
            note(sig)
        for stage in stages[:-1]:
            if stage.pid is None:
                continue
            _, raw = os.waitpid(stage.pid, 0)
            note(decode_wait_status(raw)[1])
        for thread in self._feeders:
            thread.join()
        self._feeders.clear()
        if newline:
            _write_all(self.stdout_fd, b"\n")
        return status