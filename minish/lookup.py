"""Finding the program a command name refers to."""

from __future__ import annotations

import os
import stat

from minish.environment import Environment, find_path
from minish.errors import ErrorKind, ShellError
from minish.splitting import split_keep_quotes


class CommandError(ShellError):
    """A command cannot be run; ``status`` is the exit status it leads to."""


def is_dotted_name(text: str) -> bool:
    """Return True for a name with a dot but no slash, never looked up on PATH."""
    return "." in text and "/" not in text


def has_slash(text: str) -> bool:
    """Return True if ``text`` holds a slash."""
    return "/" in text


def _directories(env: Environment) -> tuple[list[str], bool]:
    path_str = find_path(env.to_strings())
    if path_str is None:
        path_str = env.default_path
    paths = split_keep_quotes(path_str, ":")
    if paths:
        return paths, False
    try:
        cwd = os.getcwd()
    except OSError:
        return [], True
    return split_keep_quotes(cwd, ""), True


def path_directories(env: Environment) -> list[str]:
    """Return the directories to search: PATH, else the default path, else the cwd."""
    return _directories(env)[0]


def _executable(path: str) -> bool:
    return os.access(path, os.F_OK | os.X_OK)


def search_path(paths: list[str], name: str) -> str | None:
    """Return the first executable for ``name``; a name with a slash is used as is."""
    if has_slash(name):
        return name if _executable(name) else None
    for directory in paths:
        candidate = f"{directory}/{name}"
        if _executable(candidate):
            return candidate
    return None


def _check_existing(name: str) -> None:
    try:
        mode = os.stat(name).st_mode
    except OSError as exc:
        raise CommandError(name, ErrorKind.NO_SUCH_FILE, 127) from exc
    if stat.S_ISDIR(mode):
        raise CommandError(name, ErrorKind.IS_A_DIRECTORY, 126)
    if stat.S_ISREG(mode) and not os.access(name, os.X_OK):
        raise CommandError(name, ErrorKind.PERMISSION_DENIED, 126)


def resolve_command(name: str, env: Environment) -> str | None:
    """Return the path to run for ``name``.

    Raises CommandError when the command cannot be run.  None means that
    there is nothing to run and the command succeeds without doing anything.
    """
    if not name or is_dotted_name(name):
        raise CommandError(name, ErrorKind.COMMAND_NOT_FOUND, 127)
    paths, from_cwd = _directories(env)
    found = search_path(paths, name)
    if found is not None:
        return found
    if name.startswith("./") and os.path.exists(name):
        return name
    if from_cwd or has_slash(name):
        _check_existing(name)
        return None
    raise CommandError(name, ErrorKind.COMMAND_NOT_FOUND, 127)