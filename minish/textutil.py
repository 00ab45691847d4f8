"""Small text helpers: saturating integer parsing, trimming, comparison, joining."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TextIO

_LONG_MAX = 2**63 - 1
_LONG_MIN = -(2**63)
_WHITESPACE = " \t\n\v\f\r"


def atol(text: str) -> int:
    """Parse a leading signed decimal integer, saturating at the 64-bit limits.

    Leading whitespace is skipped and an optional ``+`` or ``-`` is accepted.
    Parsing stops at the first non-digit; no digits at all gives 0.  A value
    that does not fit a signed 64-bit integer gives the limit on its side.
    """
    i = 0
    length = len(text)
    while i < length and text[i] in _WHITESPACE:
        i += 1
    sign = 1
    if i < length and text[i] in "+-":
        if text[i] == "-":
            sign = -1
        i += 1
    max_div, max_digit = divmod(_LONG_MAX, 10)
    result = 0
    while i < length and "0" <= text[i] <= "9":
        digit = ord(text[i]) - ord("0")
        if result > max_div or (result == max_div and digit > max_digit):
            return _LONG_MAX if sign == 1 else _LONG_MIN
        result = result * 10 + digit
        i += 1
    return result * sign


def trim(text: str | None, chars: str | None) -> str | None:
    """Remove every character in ``chars`` from both ends of ``text``.

    ``None`` text gives ``None``; ``None`` chars gives the empty string.
    """
    if text is None:
        return None
    if chars is None:
        return ""
    return text.strip(chars)


def strcmp(a: str, b: str) -> int:
    """Compare two strings, returning the code-point difference at the first mismatch."""
    for ca, cb in zip(a, b):
        if ca != cb:
            return ord(ca) - ord(cb)
    if len(a) == len(b):
        return 0
    if len(a) > len(b):
        return ord(a[len(b)])
    return -ord(b[len(a)])


def join_words(words: Iterable[str] | None) -> str:
    """Join words with single spaces; no words gives the empty string."""
    if words is None:
        return ""
    return " ".join(words)


def write_text(stream: TextIO, text: str, newline: bool = False) -> None:
    """Write ``text`` to ``stream``, followed by a newline if asked."""
    stream.write(text)
    if newline:
        stream.write("\n")