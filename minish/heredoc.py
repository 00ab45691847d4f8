"""Here-documents: delimiter unquoting, line expansion and reading the body."""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import TextIO

from minish.environment import Environment

_QUOTES = "'\""
_PROMPT = "> "
_EOF_WARNING = "warning: here-document delimited by end-of-file\n"


class HeredocInterrupted(Exception):
    """Reading a here-document was interrupted; the command line is abandoned."""

    status = 130

    def __init__(self) -> None:
        super().__init__("here-document interrupted")


def _is_name_char(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


def heredoc_delimiter(word: str) -> str:
    """Return the delimiter a here-document word stands for, with quotes removed.

    ``$$`` is kept as is, ``$'...'`` and ``$"..."`` lose the dollar and the
    quotes, and any other quoted run loses its quotes.  An unclosed quote runs
    to the end of the word.
    """
    out: list[str] = []
    length = len(word)
    i = 0
    while i < length:
        ch = word[i]
        nxt = word[i + 1] if i + 1 < length else ""
        if ch == "$" and nxt == "$":
            out.append("$$")
            i += 2
            continue
        if ch == "$" and nxt and nxt in _QUOTES:
            quote, i = nxt, i + 2
        elif ch in _QUOTES:
            quote, i = ch, i + 1
        else:
            out.append(ch)
            i += 1
            continue
        close = word.find(quote, i)
        if close == -1:
            out.append(word[i:])
            i = length
        else:
            out.append(word[i:close])
            i = close + 1
    return "".join(out)


def is_quoted_delimiter(word: str) -> bool:
    """Return True if the word holds a quote, which turns off expansion."""
    return any(ch in _QUOTES for ch in word)


def expand_heredoc_line(line: str, env: Environment, last_status: int) -> str:
    """Expand ``$NAME`` and ``$?`` in a body line and add the newline."""
    out: list[str] = []
    length = len(line)
    i = 0
    while i < length:
        ch = line[i]
        if ch != "$":
            out.append(ch)
            i += 1
            continue
        start = i
        i += 1
        nxt = line[i] if i < length else ""
        if nxt != "?" and nxt != "_" and not (nxt and _is_name_char(nxt)):
            out.append("$")
            continue
        if nxt == "?":
            out.append(str(last_status))
            i += 1
            continue
        quoted = False
        while i < length and line[i] in _QUOTES:
            quoted = True
            i += 1
        while i < length and _is_name_char(line[i]):
            i += 1
        value = env.get(line[start + 1:i]) if i > start + 1 else None
        if value:
            out.append(value)
        elif quoted:
            out.append(line[start:i])
    out.append("\n")
    return "".join(out)


def _read_input(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def read_heredoc(
    word: str,
    env: Environment,
    last_status: int = 0,
    read_line: Callable[[str], str | None] | None = None,
    err: TextIO | None = None,
) -> str:
    """Read body lines until the delimiter and return the document's text.

    ``read_line`` is given the prompt and returns a line, or None at end of
    input.  An interrupt while reading raises HeredocInterrupted.
    """
    reader = read_line if read_line is not None else _read_input
    stream = err if err is not None else sys.stderr
    delimiter = heredoc_delimiter(word)
    expand = not is_quoted_delimiter(word)
    parts: list[str] = []
    while True:
        try:
            line = reader(_PROMPT)
        except KeyboardInterrupt as exc:
            raise HeredocInterrupted() from exc
        if line is None:
            stream.write(_EOF_WARNING)
            break
        if line == delimiter:
            break
        parts.append(expand_heredoc_line(line, env, last_status) if expand else line + "\n")
    return "".join(parts)