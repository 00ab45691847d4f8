"""The shell's environment: an ordered set of variables, some without a value."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

_PROTECTED_KEY = "_"
_PATH_KEY = "PATH"


def parse_entry(text: str) -> tuple[str, str | None]:
    """Split ``KEY=VALUE`` into its key and value.

    Text without ``=`` gives a key with no value, and so does an empty value
    after ``=``.
    """
    key, sep, value = text.partition("=")
    return key, (value if sep and value else None)


def default_environ(cwd: str | None) -> list[str]:
    """Return the entries used when the shell starts with an empty environment."""
    return ["OLDPWD", f"PWD={cwd or ''}", "SHLVL=1", "_=/usr/bin/env"]


def _quote_entry(text: str) -> str:
    key, sep, value = text.partition("=")
    if not sep:
        return text
    return f'{key}="{value}"'


def format_export_entries(strings: Iterable[str]) -> list[str]:
    """Quote each value as ``KEY="VALUE"`` and sort the entries."""
    return sorted(_quote_entry(text) for text in strings)


def find_path(strings: Iterable[str]) -> str | None:
    """Return the value of the first ``PATH=`` entry, or None."""
    prefix = f"{_PATH_KEY}="
    for text in strings:
        if text.startswith(prefix):
            return text[len(prefix):]
    return None


class Environment:
    """Ordered shell variables, plus the PATH used when PATH is not set."""

    def __init__(
        self,
        entries: Iterable[tuple[str, str | None]] = (),
        default_path: str | None = None,
    ) -> None:
        self._entries: dict[str, str | None] = dict(entries)
        self.default_path = default_path

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str] | Iterable[str] | None,
        cwd: str | None = None,
    ) -> Environment:
        """Build an environment from ``KEY=VALUE`` strings or a mapping.

        An empty environment is replaced by the defaults, with PWD set to ``cwd``.
        """
        if isinstance(environ, Mapping):
            strings = [f"{key}={value}" for key, value in environ.items()]
        else:
            strings = list(environ or ())
        if not strings:
            strings = default_environ(cwd)
        return cls(parse_entry(text) for text in strings)

    def __iter__(self) -> Iterator[tuple[str, str | None]]:
        return iter(list(self._entries.items()))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def _add(self, key: str, value: str | None) -> None:
        # Nothing can be added once the environment has been emptied.
        if not self._entries:
            return
        self._entries[key] = value

    def get(self, key: str) -> str | None:
        """Return the value of ``key``, or None if unset or without a value."""
        return self._entries.get(key)

    def contains(self, key: str) -> bool:
        """Return True if ``key`` is declared, with or without a value."""
        return key in self._entries

    def set(self, key: str, value: str | None) -> None:
        """Remove ``key`` and add it again at the end with ``value``."""
        self.unset(key)
        self._add(key, value)

    def assign(self, text: str) -> None:
        """Apply an ``export KEY=VALUE`` assignment; ``_`` is left untouched."""
        key, sep, value = text.partition("=")
        if not sep:
            self.declare(text)
            return
        if key == _PROTECTED_KEY:
            return
        if self.contains(key):
            self.unset(key)
        self._add(key, value)

    def append(self, key: str, value: str | None) -> None:
        """Apply ``export KEY+=VALUE``; a new PATH starts from the default path."""
        if key == _PROTECTED_KEY:
            return
        if self.contains(key):
            self._entries[key] = (self._entries[key] or "") + (value or "")
            return
        if key == _PATH_KEY:
            new_value = (self.default_path or "") + (value or "")
        else:
            new_value = value or ""
        self._add(key, new_value)

    def declare(self, key: str) -> None:
        """Declare ``key`` without a value unless it already exists."""
        if self.contains(key):
            return
        value = self.default_path if key == _PATH_KEY else None
        self._add(key, value)

    def unset(self, key: str) -> None:
        """Remove ``key``; ``_`` is never removed. Unsetting PATH drops the default."""
        if key == _PATH_KEY:
            self.default_path = None
        if key != _PROTECTED_KEY:
            self._entries.pop(key, None)

    def to_strings(self) -> list[str]:
        """Return the entries as ``KEY=VALUE``, or ``KEY`` when there is no value."""
        return [
            key if value is None else f"{key}={value}"
            for key, value in self._entries.items()
        ]