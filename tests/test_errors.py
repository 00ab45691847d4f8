import io

import pytest

from minish.errors import ErrorKind, ShellError, format_error, report


def test_command_not_found_line():
    assert format_error("ls", ErrorKind.COMMAND_NOT_FOUND) == "ls: command not found\n"


def test_ambiguous_redirect_line():
    assert format_error("$X", ErrorKind.AMBIGUOUS_REDIRECT) == "$X: ambiguous redirect\n"


@pytest.mark.parametrize("kind", list(ErrorKind))
def test_every_kind_has_subject_and_newline(kind):
    line = format_error("thing", kind)
    assert line.startswith("thing: ")
    assert line.endswith(kind.message + "\n")
    assert line.count("\n") == 1


def test_report_writes_formatted_line():
    stream = io.StringIO()
    report("dir", ErrorKind.IS_A_DIRECTORY, stream)
    assert stream.getvalue() == format_error("dir", ErrorKind.IS_A_DIRECTORY)


def test_report_defaults_to_stderr(capsys):
    report("f", ErrorKind.PERMISSION_DENIED)
    assert capsys.readouterr().err == "f: Permission denied\n"


def test_shell_error_carries_fields():
    exc = ShellError("x", ErrorKind.NOT_A_DIRECTORY, status=126)
    assert exc.status == 126
    assert exc.kind is ErrorKind.NOT_A_DIRECTORY
    assert str(exc) == "x: Not a directory"


def test_shell_error_default_status():
    exc = ShellError("y", ErrorKind.NO_SUCH_FILE)
    assert exc.status == 1
    assert exc.kind is ErrorKind.NO_SUCH_FILE
    assert str(exc) == "y: No such file or directory"