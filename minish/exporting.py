"""The ``export`` and ``unset`` builtins."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from typing import TextIO

from minish.environment import Environment, format_export_entries


class IdentifierKind(enum.Enum):
    """How an ``export`` operand is to be treated."""

    VALID = 0
    INVALID = 1
    APPEND = 2


def _is_letter(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def _is_name_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == "_")


def check_valid_identifier(ident: str) -> IdentifierKind:
    """Classify an ``export`` operand as valid, invalid or a ``+=`` append."""
    if not ident or not (_is_letter(ident[0]) or ident[0] == "_"):
        return IdentifierKind.INVALID
    for pos, ch in enumerate(ident[1:], start=1):
        if ch == "=":
            break
        if ch == "+":
            if ident[pos + 1:pos + 2] == "=":
                return IdentifierKind.APPEND
            return IdentifierKind.INVALID
        if not _is_name_char(ch):
            return IdentifierKind.INVALID
    return IdentifierKind.VALID


def export_listing(env: Environment) -> list[str]:
    """Return the ``declare -x`` lines that ``export`` prints, without ``_``."""
    return [
        f"declare -x {entry}"
        for entry in format_export_entries(env.to_strings())
        if not entry.startswith("_=")
    ]


def _export_one(env: Environment, arg: str, kind: IdentifierKind) -> None:
    if kind is IdentifierKind.APPEND:
        key = arg[:arg.index("+")]
        value = arg[arg.index("=") + 1:]
        env.append(key, value)
    elif "=" not in arg:
        env.declare(arg)
    else:
        env.assign(arg)


def run_export(
    env: Environment,
    args: Sequence[str],
    in_pipeline: bool,
    out: TextIO,
    err: TextIO,
) -> int:
    """Run ``export`` with the given operands and return its exit status.

    With no operands the listing is written to ``out``.  Invalid names are
    reported on ``err``; inside a pipeline the environment is not changed.
    """
    if not args:
        for line in export_listing(env):
            out.write(line + "\n")
        return 0
    status = 0
    for arg in args:
        kind = check_valid_identifier(arg)
        if kind is IdentifierKind.INVALID:
            err.write(f"{arg}: not a valid identifier\n")
            status = 1
            continue
        if in_pipeline:
            continue
        _export_one(env, arg, kind)
    return status


def run_unset(env: Environment, args: Sequence[str], in_pipeline: bool) -> int:
    """Run ``unset`` with the given names; it does nothing inside a pipeline."""
    if not in_pipeline:
        for name in args:
            env.unset(name)
    return 0