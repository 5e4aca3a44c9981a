import os
from pathlib import Path

import pytest

from sexpreader import reader as reader
from sexpreader.exception import format_exception, print_exception


def _raise_read_error(s: str, filename: str = "<string>") -> reader.ReadError:
    with pytest.raises(reader.ReadError) as e:
        list(reader.read_str(s, filename=filename))
    return e.value


def test_format_read_error_without_source():
    e = _raise_read_error("(a]")
    assert [
        os.linesep,
        f"  exception: {reader.ParenMismatchError}{os.linesep}",
        f"    message: List delimiters don't match: '(' and ']'{os.linesep}",
        f"   location: <string>:1:3{os.linesep}",
    ] == format_exception(e)


def test_format_read_error_with_source(tmp_path: Path):
    path = tmp_path / "broken.lisp"
    path.write_text("(a)\n(b\n", encoding="utf-8")

    with pytest.raises(reader.EarlyEOFError) as e:
        list(reader.read_file(str(path)))

    lines = format_exception(e.value, disable_color=True)
    assert f"   location: {path}:3:1{os.linesep}" == lines[3]
    assert f"    context:{os.linesep}" == lines[4]
    assert [
        " 1   | (a)" + os.linesep,
        " 2   | (b" + os.linesep,
        " 3 > | " + os.linesep,
    ] == lines[6:]


def test_format_other_exception():
    try:
        raise ValueError("not a reader error")
    except ValueError as e:
        lines = format_exception(e)

    assert lines[0].startswith("Traceback")
    assert "ValueError: not a reader error\n" == lines[-1]


def test_print_exception(capsys):
    print_exception(_raise_read_error('"abc'))
    captured = capsys.readouterr()
    assert "" == captured.out
    assert "Unexpected end of file" in captured.err
    assert "<string>:1:5" in captured.err
