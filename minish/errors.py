"""Error kinds the shell reports, and how their messages are written."""

from __future__ import annotations

import enum
import sys
from typing import TextIO


class ErrorKind(enum.Enum):
    """A kind of shell error; the value is the text after the subject."""

    COMMAND_NOT_FOUND = "command not found"
    NO_SUCH_FILE = "No such file or directory"
    PERMISSION_DENIED = "Permission denied"
    IS_A_DIRECTORY = "Is a directory"
    NUMERIC_ARGUMENT = "numeric argument required"
    INVALID_IDENTIFIER = "not a valid identifier"
    NOT_A_DIRECTORY = "Not a directory"
    AMBIGUOUS_REDIRECT = "ambiguous redirect"

    @property
    def message(self) -> str:
        return self.value


def format_error(subject: str, kind: ErrorKind) -> str:
    """Return the line ``subject: message`` written for ``kind``."""
    return f"{subject}: {kind.message}\n"


def report(subject: str, kind: ErrorKind, stream: TextIO | None = None) -> None:
    """Write the error line for ``subject`` to ``stream`` (standard error by default)."""
    (stream if stream is not None else sys.stderr).write(format_error(subject, kind))


class ShellError(Exception):
    """An error tied to a subject, carrying the exit status it leads to."""

    def __init__(self, subject: str, kind: ErrorKind, status: int = 1) -> None:
        super().__init__(format_error(subject, kind).rstrip("\n"))
        self.subject = subject
        self.kind = kind
        self.status = status