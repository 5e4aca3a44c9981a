import functools
import os
import sys
import traceback
from types import TracebackType
from typing import Optional

from sexpreader.reader import ReadError
from sexpreader.source import format_source_context


@functools.singledispatch
def format_exception(  # pylint: disable=unused-argument
    e: Optional[BaseException],
    tp: Optional[type[BaseException]] = None,
    tb: Optional[TracebackType] = None,
    disable_color: Optional[bool] = None,
) -> list[str]:
    """Format an exception into something readable, returning a list of newline
    terminated strings.

    For the majority of Python exceptions, this will just be the result from calling
    `traceback.format_exception`. Reader errors are formatted with their location
    and the surrounding source lines.

    If `disable_color` is True, no color formatting should be applied to the source
    code."""
    if isinstance(e, BaseException):
        if tp is None:
            tp = type(e)
        if tb is None:
            tb = e.__traceback__
    return traceback.format_exception(tp, e, tb)


@format_exception.register(ReadError)
def format_read_error(  # pylint: disable=unused-argument
    e: ReadError,
    tp: Optional[type[BaseException]] = None,
    tb: Optional[TracebackType] = None,
    disable_color: Optional[bool] = None,
) -> list[str]:
    """If `disable_color` is True, no color formatting will be applied to the source
    code."""
    # Reader locations are 0-based; people count lines and columns from 1
    line = e.loc.line + 1
    col = e.loc.col + 1

    lines = [os.linesep]
    lines.append(f"  exception: {type(e)}{os.linesep}")
    lines.append(f"    message: {e.message}{os.linesep}")
    lines.append(f"   location: {e.loc.file}:{line}:{col}{os.linesep}")

    if context_lines := format_source_context(
        e.loc.file, line, disable_color=disable_color
    ):
        lines.append(f"    context:{os.linesep}")
        lines.append(os.linesep)
        lines.extend(context_lines)

    return lines


def print_exception(
    e: Optional[BaseException],
    tp: Optional[type[BaseException]] = None,
    tb: Optional[TracebackType] = None,
) -> None:
    """Print the given exception `e` using the reader's own exception formatting.

    For the majority of exception types, this should be identical to the base Python
    traceback formatting. `sexpreader.reader.ReadError` has special handling to
    print its location and source context."""
    print("".join(format_exception(e, tp, tb)), file=sys.stderr)
