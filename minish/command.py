"""A parsed simple command and the checks made on its redirections."""

from __future__ import annotations

import enum
import errno
import os
from dataclasses import dataclass, field


class RedirectionKind(enum.Enum):
    """Direction of a file redirection."""

    INPUT = 0
    OUTPUT = 1


@dataclass
class Redirection:
    """One ``<``, ``>`` or ``>>`` redirection.

    ``target`` is the expanded file name and ``raw`` the word as written.
    """

    kind: RedirectionKind
    target: str
    raw: str | None = None
    append: bool = False
    ambiguous: bool = False

    def __post_init__(self) -> None:
        if self.raw is None:
            self.raw = self.target


@dataclass
class Command:
    """A simple command: its words, its redirections and its here-documents."""

    args: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)
    heredocs: list[str] = field(default_factory=list)

    @property
    def infiles(self) -> list[str]:
        return [r.target for r in self.redirections if r.kind is RedirectionKind.INPUT]

    @property
    def outfiles(self) -> list[str]:
        return [r.target for r in self.redirections if r.kind is RedirectionKind.OUTPUT]


class RedirectionError(Exception):
    """A redirection could not be set up; the command fails with status 1."""

    status = 1

    def __init__(self, subject: str, reason: str) -> None:
        super().__init__(f"{subject}: {reason}")
        self.subject = subject
        self.reason = reason


def has_quotes(text: str | None) -> bool:
    """Return True if ``text`` holds a single or double quote."""
    return bool(text) and any(ch in "'\"" for ch in text)


def _check_input(path: str) -> None:
    if not os.access(path, os.F_OK):
        raise RedirectionError(path, os.strerror(errno.ENOENT))
    if not os.access(path, os.R_OK):
        raise RedirectionError(path, os.strerror(errno.EACCES))


def _check_output(redirection: Redirection) -> None:
    flags = os.O_CREAT | os.O_WRONLY
    flags |= os.O_APPEND if redirection.append else os.O_TRUNC
    try:
        fd = os.open(redirection.target, flags, 0o644)
    except OSError as exc:
        raise RedirectionError(
            redirection.target, exc.strerror or os.strerror(exc.errno or 0)
        ) from exc
    os.close(fd)


def check_access(command: Command) -> None:
    """Check the redirections in order, creating output files as they come.

    Raises RedirectionError at the first one that fails.
    """
    for redirection in command.redirections:
        raw = redirection.raw or ""
        if redirection.ambiguous and not has_quotes(raw):
            raise RedirectionError(raw, "ambiguous redirect")
        if redirection.kind is RedirectionKind.OUTPUT:
            _check_output(redirection)
        else:
            _check_input(redirection.target)