"""The ``echo``, ``env`` and ``pwd`` builtins."""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import TextIO

from minish.environment import Environment
from minish.errors import ErrorKind, format_error


def _is_n_option(word: str) -> bool:
    return len(word) >= 2 and word[0] == "-" and set(word[1:]) == {"n"}


def echo_option(args: Sequence[str]) -> int:
    """Return how many leading ``-n``, ``-nn``... options ``args`` starts with."""
    count = 0
    for word in args:
        if not _is_n_option(word):
            break
        count += 1
    return count


def builtin_echo(args: Sequence[str], out: TextIO) -> int:
    """Write the operands separated by spaces; ``-n`` drops the newline."""
    options = echo_option(args)
    text = " ".join(args[options:])
    out.write(text if options else text + "\n")
    return 0


def builtin_env(env: Environment, args: Sequence[str], out: TextIO, err: TextIO) -> int:
    """List the variables that have a value; an operand is reported as missing."""
    if args:
        err.write(format_error(args[0], ErrorKind.NO_SUCH_FILE))
        return 0
    for entry in env.to_strings():
        if "=" in entry:
            out.write(entry + "\n")
    return 0


def builtin_pwd(env: Environment, out: TextIO) -> int:
    """Write the working directory, falling back to PWD when it is gone."""
    try:
        cwd: str | None = os.getcwd()
    except OSError:
        cwd = env.get("PWD")
    out.write((cwd or "") + "\n")
    return 0


def run_builtin(
    args: Sequence[str], env: Environment, out: TextIO, err: TextIO
) -> int | None:
    """Run ``args`` if it names a builtin and return its status, else None."""
    if not args:
        return None
    name, operands = args[0], list(args[1:])
    if name == "env":
        return builtin_env(env, operands, out, err)
    if name == "echo":
        return builtin_echo(operands, out)
    if name == "pwd":
        return builtin_pwd(env, out)
    return None