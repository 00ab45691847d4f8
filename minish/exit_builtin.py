"""The ``exit`` builtin."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TextIO

from minish.errors import ErrorKind, format_error
from minish.textutil import atol, trim

_LONG_MAX_TEXT = "9223372036854775807"
_LONG_MIN_TEXT = "-9223372036854775808"
_LONG_MAX = 2**63 - 1
_LONG_MIN = -(2**63)
_WHITESPACE = " \t\n\v\f\r"


class ShellExit(Exception):
    """Raised when the shell itself is to exit with ``status``."""

    def __init__(self, status: int) -> None:
        super().__init__(f"exit {status}")
        self.status = status


def is_numeric(text: str | None) -> bool:
    """Return True for an optional sign followed by one or more digits."""
    if not text:
        return False
    digits = text[1:] if text[0] in "+-" else text
    return bool(digits) and all("0" <= ch <= "9" for ch in digits)


def overflows_long(text: str) -> bool:
    """Return True if ``text`` saturates a signed 64-bit integer without being its limit."""
    value = atol(text)
    rest = text[1:] if text.startswith("+") else text
    rest = rest.lstrip("0")
    if value == _LONG_MAX and rest != _LONG_MAX_TEXT:
        return True
    if value == _LONG_MIN and rest != _LONG_MIN_TEXT:
        return True
    return False


def run_exit(
    args: Sequence[str],
    in_pipeline: bool,
    last_status: int,
    out: TextIO,
    err: TextIO,
) -> int:
    """Run ``exit`` with operands ``args``.

    On its own it writes ``exit`` and raises ShellExit, except when there are
    too many operands.  Inside a pipeline it only returns the status.
    """
    if not in_pipeline:
        out.write("exit\n")
    if not args:
        if in_pipeline:
            return 0
        raise ShellExit(last_status)
    raw = args[0]
    arg = trim(raw, _WHITESPACE) or ""
    numeric_error = format_error(raw, ErrorKind.NUMERIC_ARGUMENT)
    if not is_numeric(arg):
        err.write(numeric_error)
        if in_pipeline:
            return 2
        raise ShellExit(2)
    overflow = overflows_long(arg)
    if len(args) > 1 and not overflow:
        err.write("exit: too many arguments\n")
        return 1
    if overflow:
        err.write(numeric_error)
        if in_pipeline:
            return 2
        raise ShellExit(2)
    status = atol(raw) & 0xFF
    if in_pipeline:
        return status
    raise ShellExit(status)