import os

import pytest

from minish.environment import Environment
from minish.errors import ErrorKind
from minish.lookup import (
    CommandError,
    has_slash,
    is_dotted_name,
    path_directories,
    resolve_command,
    search_path,
)


def _make(path, executable=True):
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755 if executable else 0o644)
    return path


def test_is_dotted_name():
    assert is_dotted_name("a.out") is True
    assert is_dotted_name("./a.out") is False
    assert is_dotted_name("ls") is False


def test_has_slash():
    assert has_slash("/bin/ls") is True
    assert has_slash("ls") is False


def test_path_directories_from_path():
    env = Environment([("PATH", "a:b::c")])
    assert path_directories(env) == ["a", "b", "c"]


def test_path_directories_default_path():
    env = Environment([("HOME", "/h")], default_path="x:y")
    assert path_directories(env) == ["x", "y"]


def test_path_directories_falls_back_to_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    env = Environment([("HOME", "/h")])
    assert path_directories(env) == [os.getcwd()]


def test_search_path_finds_first_executable(tmp_path):
    first = tmp_path / "one"
    second = tmp_path / "two"
    first.mkdir()
    second.mkdir()
    _make(first / "tool", executable=False)
    _make(second / "tool")
    found = search_path([str(first), str(second)], "tool")
    assert found == f"{second}/tool"


def test_search_path_missing(tmp_path):
    assert search_path([str(tmp_path)], "absent") is None


def test_search_path_with_slash(tmp_path):
    tool = _make(tmp_path / "tool")
    plain = _make(tmp_path / "plain", executable=False)
    assert search_path([], str(tool)) == str(tool)
    assert search_path([], str(plain)) is None


def test_resolve_on_path(tmp_path):
    _make(tmp_path / "tool")
    env = Environment([("PATH", str(tmp_path))])
    assert resolve_command("tool", env) == f"{tmp_path}/tool"


@pytest.mark.parametrize("name", ["", "script.sh"])
def test_resolve_rejects_empty_and_dotted(name, tmp_path):
    env = Environment([("PATH", str(tmp_path))])
    with pytest.raises(CommandError) as info:
        resolve_command(name, env)
    assert info.value.kind is ErrorKind.COMMAND_NOT_FOUND
    assert info.value.status == 127


def test_resolve_not_found(tmp_path):
    env = Environment([("PATH", str(tmp_path))])
    with pytest.raises(CommandError) as info:
        resolve_command("absent", env)
    assert info.value.kind is ErrorKind.COMMAND_NOT_FOUND
    assert info.value.status == 127


def test_resolve_missing_path(tmp_path):
    env = Environment([("PATH", str(tmp_path))])
    with pytest.raises(CommandError) as info:
        resolve_command(str(tmp_path / "absent"), env)
    assert info.value.kind is ErrorKind.NO_SUCH_FILE
    assert info.value.status == 127


def test_resolve_not_executable(tmp_path):
    plain = _make(tmp_path / "plain", executable=False)
    env = Environment([("PATH", str(tmp_path))])
    with pytest.raises(CommandError) as info:
        resolve_command(str(plain), env)
    assert info.value.kind is ErrorKind.PERMISSION_DENIED
    assert info.value.status == 126


def test_resolve_dot_slash_existing(tmp_path, monkeypatch):
    _make(tmp_path / "plain", executable=False)
    monkeypatch.chdir(tmp_path)
    env = Environment([("PATH", "/nonexistent")])
    assert resolve_command("./plain", env) == "./plain"


def test_resolve_in_cwd_without_path(tmp_path, monkeypatch):
    _make(tmp_path / "tool")
    monkeypatch.chdir(tmp_path)
    env = Environment([("HOME", "/h")])
    assert resolve_command("tool", env) == f"{os.getcwd()}/tool"


def test_resolve_missing_in_cwd_without_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    env = Environment([("HOME", "/h")])
    with pytest.raises(CommandError) as info:
        resolve_command("absent", env)
    assert info.value.kind is ErrorKind.NO_SUCH_FILE
    assert info.value.status == 127