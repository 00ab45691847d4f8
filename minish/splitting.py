"""Word splitting on separator characters, with and without quote awareness.

Every splitter skips runs of separators and never yields empty words.  The
quote-aware splitters treat a single- or double-quoted run as part of the
current word, so separators inside it do not end the word.  A quote that is
never closed extends the word to the end of the text.
"""

from __future__ import annotations

from collections.abc import Iterator

_QUOTES = "'\""


def is_separator(ch: str, separators: str) -> bool:
    """Return True if the single character ``ch`` is one of ``separators``."""
    return any(ch == sep for sep in separators)


def _quoted_spans(text: str, separators: str) -> Iterator[tuple[int, int]]:
    """Yield (start, end) of each word, keeping quoted runs inside one word."""
    length = len(text)
    i = 0
    while i < length:
        while i < length and is_separator(text[i], separators):
            i += 1
        if i >= length:
            return
        start = i
        while i < length and not is_separator(text[i], separators):
            if text[i] in _QUOTES:
                close = text.find(text[i], i + 1)
                i = length if close == -1 else close + 1
            else:
                i += 1
        yield start, i


def _plain_spans(text: str, separators: str) -> Iterator[tuple[int, int]]:
    """Yield (start, end) of each word, ignoring quotes entirely."""
    length = len(text)
    i = 0
    while i < length:
        while i < length and is_separator(text[i], separators):
            i += 1
        if i >= length:
            return
        start = i
        while i < length and not is_separator(text[i], separators):
            i += 1
        yield start, i


def _drop_toggling_quotes(word: str) -> str:
    """Remove every quote character that opens or closes a quoted run."""
    in_single = in_double = False
    out: list[str] = []
    for ch in word:
        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        else:
            out.append(ch)
    return "".join(out)


def _strip_matched_pairs(word: str) -> str:
    """Remove quote pairs that are closed; keep unmatched quotes literally."""
    out: list[str] = []
    i = 0
    while i < len(word):
        ch = word[i]
        if ch in _QUOTES:
            close = word.find(ch, i + 1)
            if close != -1:
                out.append(word[i + 1:close])
                i = close + 1
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def count_words(text: str, separators: str) -> int:
    """Count the quote-aware words in ``text``."""
    return sum(1 for _ in _quoted_spans(text, separators))


def split_unquote(text: str, separators: str) -> list[str]:
    """Split quote-aware and drop the quote characters that delimit runs.

    An unclosed quote is dropped as well; a quote of the other kind inside a
    quoted run is kept.
    """
    return [
        _drop_toggling_quotes(text[start:end])
        for start, end in _quoted_spans(text, separators)
    ]


def split_keep_quotes(text: str | None, separators: str) -> list[str]:
    """Split quote-aware, keeping each word verbatim. ``None`` gives ``[]``."""
    if text is None:
        return []
    return [text[start:end] for start, end in _quoted_spans(text, separators)]


def split_plain(text: str, separators: str) -> list[str]:
    """Split on separators with no regard for quotes."""
    return [text[start:end] for start, end in _plain_spans(text, separators)]


def split_strip_matched_quotes(text: str, separators: str) -> list[str]:
    """Split quote-aware and remove only quote pairs that are closed in the word."""
    return [
        _strip_matched_pairs(text[start:end])
        for start, end in _quoted_spans(text, separators)
    ]


def split_quoted(text: str, separators: str) -> list[str]:
    """Split quote-aware, leaving quotes in place."""
    return [text[start:end] for start, end in _quoted_spans(text, separators)]