# minish

`minish` is the core of a small POSIX-style shell, as a Python library. It
covers what happens once a command line has been broken into commands:
running builtins, looking up programs, reading here-documents and running
pipelines of commands connected by pipes.

## Modules

- `minish.splitting` – splitting text on a set of separator characters.
  `split_plain` ignores quotes; `split_quoted` and `split_keep_quotes` keep
  quoted runs inside one word and leave the quotes in place;
  `split_unquote` drops the quotes that open and close runs;
  `split_strip_matched_quotes` removes only quote pairs that are closed.
  `count_words` and `is_separator` are the helpers behind them.
- `minish.textutil` – `atol` (leading integer, saturating at the signed 64-bit
  limits), `trim`, `strcmp` (code-point difference at the first mismatch),
  `join_words` and `write_text`.
- `minish.environment` – `Environment`, an ordered set of variables where a
  variable may be declared without a value, with `get`, `contains`, `set`,
  `assign`, `append`, `declare`, `unset` and `to_strings`.
  `Environment.from_environ` builds one from a mapping or `KEY=VALUE` strings
  and falls back to `OLDPWD`, `PWD`, `SHLVL=1` and `_=/usr/bin/env` when the
  environment is empty. `_` is never removed or overwritten by `export`.
- `minish.errors` – `ErrorKind`, `format_error`, `report` and `ShellError`,
  which carries the exit status an error leads to.
- `minish.builtins` – `echo` (with repeated `-n`, `-nn`… options), `env` and
  `pwd`, dispatched by `run_builtin`, which returns `None` for other names.
- `minish.cd` – `change_directory` and `normalize_path`, which resolves a
  path against `PWD` lexically, folding `.` and `..`. A successful `cd`
  updates `PWD` and, if it is declared, `OLDPWD`.
- `minish.exporting` – `run_export`, `run_unset`, `export_listing` (the
  sorted `declare -x` lines) and `check_valid_identifier`, which returns an
  `IdentifierKind`.
- `minish.exit_builtin` – `run_exit`; on its own it raises `ShellExit` with
  the status the shell should exit with, inside a pipeline it only returns it.
- `minish.heredoc` – `read_heredoc` reads lines until the delimiter, expanding
  `$NAME` and `$?` unless the delimiter word was quoted. An interrupt while
  reading raises `HeredocInterrupted`.
- `minish.command` – `Command`, `Redirection`, `RedirectionKind`, and
  `check_access`, which checks redirections in order, creates output files,
  and raises `RedirectionError` at the first failure.
- `minish.lookup` – `resolve_command` finds the program for a name through
  `PATH` (or the environment's default path, or the working directory) and
  raises `CommandError` with status 127 or 126 when it cannot be run.
- `minish.pipeline` – `Shell`, whose `execute` runs a list of `Command`
  objects as one pipeline and returns its exit status (also kept in
  `Shell.status`); `decode_wait_status` turns a raw wait status into an exit
  status and the killing signal.

## Examples

```python
from minish.splitting import split_unquote

split_unquote("echo 'a b' c", " ")   # ['echo', 'a b', 'c']
```

```python
from minish.textutil import atol

atol("  -42")   # -42
```

```python
from minish.cd import normalize_path

normalize_path("/home/user", "../tmp")   # '/home/tmp'
```

```python
import os
import sys

from minish.builtins import run_builtin
from minish.environment import Environment

env = Environment.from_environ(os.environ, os.getcwd())
env.set("GREETING", "hello")
run_builtin(["echo", "-n", "hi"], env, sys.stdout, sys.stderr)
```

Running `ls | wc -l > count.txt`:

```python
from minish.command import Command, Redirection, RedirectionKind
from minish.pipeline import Shell

shell = Shell(env)
status = shell.execute([
    Command(args=["ls"]),
    Command(
        args=["wc", "-l"],
        redirections=[Redirection(RedirectionKind.OUTPUT, "count.txt")],
    ),
])
```

`cd`, `exit`, `export` and `unset` run inside the shell's own process and
change its `Environment`; inside a pipeline they leave it unchanged. Running
`exit` on its own raises `minish.exit_builtin.ShellExit`.

## What it does not do

The package has no command to start and no interactive prompt loop. It does
not parse command lines: callers build `Command` objects themselves, with
words already split and expanded. Variable expansion is only done in
here-document bodies.

## Requirements

Python 3.10 or later on a POSIX system. There are no third-party runtime
dependencies; the tests use pytest (the `test` extra).