"""Core of a small POSIX-style shell: word splitting, environment, builtins, here-documents and pipelines."""

__version__ = "0.1.0"