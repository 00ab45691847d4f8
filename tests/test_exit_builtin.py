import io

import pytest

from minish.exit_builtin import ShellExit, is_numeric, overflows_long, run_exit


@pytest.mark.parametrize(
    "text, expected",
    [
        ("42", True),
        ("+7", True),
        ("-0", True),
        ("-", False),
        ("", False),
        (None, False),
        ("4a", False),
        ("1 2", False),
    ],
)
def test_is_numeric(text, expected):
    assert is_numeric(text) is expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("9223372036854775807", False),
        ("+0009223372036854775807", False),
        ("-9223372036854775808", False),
        ("9223372036854775808", True),
        ("-9223372036854775809", True),
        ("12", False),
    ],
)
def test_overflows_long(text, expected):
    assert overflows_long(text) is expected


def _run(args, in_pipeline=False, last_status=0):
    out, err = io.StringIO(), io.StringIO()
    return out, err, lambda: run_exit(args, in_pipeline, last_status, out, err)


def test_exit_with_status():
    out, err, call = _run(["5"])
    with pytest.raises(ShellExit) as info:
        call()
    assert info.value.status == 5
    assert out.getvalue() == "exit\n"


def test_exit_without_args_uses_last_status():
    _, _, call = _run([], last_status=7)
    with pytest.raises(ShellExit) as info:
        call()
    assert info.value.status == 7


def test_exit_non_numeric():
    _, err, call = _run(["abc"])
    with pytest.raises(ShellExit) as info:
        call()
    assert info.value.status == 2
    assert err.getvalue() == "abc: numeric argument required\n"


def test_exit_overflow():
    _, err, call = _run(["9223372036854775808"])
    with pytest.raises(ShellExit) as info:
        call()
    assert info.value.status == 2
    assert err.getvalue() == "9223372036854775808: numeric argument required\n"


def test_exit_too_many_arguments_does_not_exit():
    out, err, call = _run(["1", "2"])
    assert call() == 1
    assert err.getvalue() == "exit: too many arguments\n"
    assert out.getvalue() == "exit\n"


def test_exit_negative_wraps():
    _, _, call = _run(["-1"])
    with pytest.raises(ShellExit) as info:
        call()
    assert info.value.status == 255


def test_exit_trims_whitespace():
    _, _, call = _run([" 9 "])
    with pytest.raises(ShellExit) as info:
        call()
    assert info.value.status == 9


@pytest.mark.parametrize("value", [0, 3, 100, 255])
def test_exit_in_pipeline_returns_status(value):
    out, _, call = _run([str(value)], in_pipeline=True)
    assert call() == value
    assert out.getvalue() == ""


def test_exit_in_pipeline_no_args():
    _, _, call = _run([], in_pipeline=True, last_status=9)
    assert call() == 0


def test_exit_in_pipeline_non_numeric():
    _, err, call = _run(["x"], in_pipeline=True)
    assert call() == 2
    assert err.getvalue() == "x: numeric argument required\n"