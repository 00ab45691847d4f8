"""The ``cd`` builtin and the logical path normalisation it uses."""

from __future__ import annotations

import os
import stat
from collections.abc import Sequence
from typing import TextIO

from minish.environment import Environment
from minish.errors import ErrorKind, format_error
from minish.splitting import split_unquote

_CWD_ERROR = "cd: error retrieving current directory\n"


def normalize_path(pwd: str | None, new_path: str) -> str:
    """Resolve ``new_path`` against ``pwd`` lexically, folding ``.`` and ``..``."""
    path = new_path if new_path.startswith("/") else f"{pwd or ''}/{new_path}"
    stack: list[str] = []
    for part in split_unquote(path, "/"):
        if part in ("", "."):
            continue
        if part == "..":
            if stack:
                stack.pop()
        else:
            stack.append(part)
    return "/" + "/".join(stack)


def _update_pwd(env: Environment, old_pwd: str | None, new_pwd: str) -> None:
    if env.contains("OLDPWD"):
        env.set("OLDPWD", old_pwd)
    env.unset("PWD")
    env.set("PWD", new_pwd)


def _current_pwd(env: Environment) -> str | None:
    pwd = env.get("PWD")
    if pwd is not None:
        return pwd
    try:
        return os.getcwd()
    except OSError:
        return None


def _cd_home(env: Environment, pwd: str, in_pipeline: bool, err: TextIO) -> int:
    home = env.get("HOME")
    if home is None:
        err.write("cd: HOME not set\n")
        return 1
    if in_pipeline:
        if not os.path.exists(home):
            err.write(format_error(home, ErrorKind.NO_SUCH_FILE))
            return 1
        return 0
    try:
        os.chdir(home)
    except OSError as exc:
        err.write(f"{home}: {exc.strerror}\n")
        return 1
    _update_pwd(env, pwd, home)
    return 0


def _cd_path(
    env: Environment, pwd: str, path: str, in_pipeline: bool, err: TextIO
) -> int:
    try:
        mode = os.stat(path).st_mode
    except OSError:
        err.write(format_error(path, ErrorKind.NO_SUCH_FILE))
        return 1
    if stat.S_ISREG(mode):
        err.write(format_error(path, ErrorKind.NOT_A_DIRECTORY))
        return 1
    if not stat.S_ISDIR(mode):
        return 0
    if path == ".":
        return 0
    if not os.access(path, os.X_OK):
        err.write(format_error(path, ErrorKind.PERMISSION_DENIED))
        return 1
    new_pwd = normalize_path(pwd, path)
    if not in_pipeline:
        os.chdir(path)
    try:
        os.getcwd()
    except OSError:
        err.write(_CWD_ERROR)
    if not in_pipeline:
        _update_pwd(env, pwd, new_pwd)
    return 0


def change_directory(
    env: Environment, args: Sequence[str], in_pipeline: bool, err: TextIO
) -> int:
    """Run ``cd`` with the operands ``args`` and return its exit status.

    Inside a pipeline the directory and the environment are left unchanged.
    """
    pwd = _current_pwd(env)
    if pwd is None:
        err.write(_CWD_ERROR)
        os.chdir("/")
        return 0
    if not args:
        return _cd_home(env, pwd, in_pipeline, err)
    if len(args) > 1:
        err.write("cd: too many arguments\n")
        return 1
    return _cd_path(env, pwd, args[0], in_pipeline, err)