import io

import pytest

from minish.environment import Environment
from minish.exporting import (
    IdentifierKind,
    check_valid_identifier,
    export_listing,
    run_export,
    run_unset,
)


@pytest.fixture
def env():
    return Environment.from_environ(["HOME=/home/user", "OLDPWD", "_=/usr/bin/env"])


@pytest.mark.parametrize(
    "ident, kind",
    [
        ("NAME", IdentifierKind.VALID),
        ("NAME=value", IdentifierKind.VALID),
        ("_hidden=1", IdentifierKind.VALID),
        ("A1=x", IdentifierKind.VALID),
        ("MY_VAR=x", IdentifierKind.VALID),
        ("NAME+=more", IdentifierKind.APPEND),
        ("NAME+x", IdentifierKind.INVALID),
        ("1ABC", IdentifierKind.INVALID),
        ("", IdentifierKind.INVALID),
        ("=value", IdentifierKind.INVALID),
        ("A-B=1", IdentifierKind.INVALID),
    ],
)
def test_check_valid_identifier(ident, kind):
    assert check_valid_identifier(ident) is kind


def test_characters_after_equals_are_not_checked():
    assert check_valid_identifier("A=!@#") is IdentifierKind.VALID


def test_export_listing_hides_underscore(env):
    lines = export_listing(env)
    assert lines == ['declare -x HOME="/home/user"', "declare -x OLDPWD"]


def test_export_without_args_prints_listing(env):
    out, err = io.StringIO(), io.StringIO()
    status = run_export(env, [], False, out, err)
    assert status == 0
    assert out.getvalue() == "".join(line + "\n" for line in export_listing(env))


def test_export_assign(env):
    status = run_export(env, ["NEW=1"], False, io.StringIO(), io.StringIO())
    assert status == 0
    assert env.get("NEW") == "1"


def test_export_append(env):
    run_export(env, ["HOME+=/sub"], False, io.StringIO(), io.StringIO())
    assert env.get("HOME") == "/home/user/sub"


def test_export_declare(env):
    run_export(env, ["FLAG"], False, io.StringIO(), io.StringIO())
    assert env.contains("FLAG")
    assert env.get("FLAG") is None


def test_export_invalid_reports_and_continues(env):
    err = io.StringIO()
    status = run_export(env, ["1bad", "GOOD=1"], False, io.StringIO(), err)
    assert status == 1
    assert err.getvalue() == "1bad: not a valid identifier\n"
    assert env.get("GOOD") == "1"


def test_export_in_pipeline_leaves_env(env):
    before = env.to_strings()
    status = run_export(env, ["NEW=1"], True, io.StringIO(), io.StringIO())
    assert status == 0
    assert env.to_strings() == before


def test_export_in_pipeline_still_reports_invalid(env):
    err = io.StringIO()
    assert run_export(env, ["+x"], True, io.StringIO(), err) == 1
    assert "not a valid identifier" in err.getvalue()


def test_unset(env):
    assert run_unset(env, ["HOME", "OLDPWD"], False) == 0
    assert env.to_strings() == ["_=/usr/bin/env"]


def test_unset_in_pipeline_does_nothing(env):
    before = env.to_strings()
    assert run_unset(env, ["HOME"], True) == 0
    assert env.to_strings() == before