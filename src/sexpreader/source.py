import itertools
import linecache
import os
from collections.abc import Iterable
from typing import Optional

import pygments
import pygments.formatters
import pygments.lexers
import pygments.styles


def _get_formatter_name(
    disable_color: Optional[bool] = None,
) -> Optional[str]:
    """Get the Pygments formatter name for formatting the source code by
    inspecting various environment variables set by terminals.

    If `disable_color` is explicitly True or `SEXPREADER_NO_COLOR` is set
    to a truthy value, use no formatting."""
    if (disable_color is True) or os.environ.get(
        "SEXPREADER_NO_COLOR", "false"
    ).lower() in {"1", "true"}:
        return None
    elif os.environ.get("COLORTERM", "") in {"truecolor", "24bit"}:
        return "terminal16m"
    elif "256" in os.environ.get("TERM", ""):
        return "terminal256"
    else:
        return "terminal"


def _format_source(s: str, disable_color: Optional[bool] = None) -> str:
    """Format source code for terminal output.

    If `disable_color` is True, no formatting will be applied to the source code."""
    if (formatter_name := _get_formatter_name(disable_color)) is None:
        return f"{s}{os.linesep}"
    return pygments.highlight(
        s,
        lexer=pygments.lexers.get_lexer_by_name("scheme"),
        formatter=pygments.formatters.get_formatter_by_name(
            formatter_name, style=pygments.styles.get_style_by_name("emacs")
        ),
    )


def format_source_context(
    filename: str,
    line: int,
    num_context_lines: int = 5,
    disable_color: Optional[bool] = None,
) -> list[str]:
    """Format source code context with line numbers around `line`, marking that
    line as the cause.

    `line` is 1-based, as displayed to users. It may be one past the last line of
    the file, where errors at the end of input are reported. Filenames wrapped in
    angle brackets (such as `<string>`) name no real file and produce no context.

    If `disable_color` is True, no color formatting will be applied to the source code.
    """
    assert num_context_lines >= 0

    lines: list[str] = []

    if filename.startswith("<") and filename.endswith(">"):
        return lines

    linecache.checkcache(filename=filename)
    if source_lines := linecache.getlines(filename):
        selected_lines: Iterable[str]
        if line > len(source_lines):
            end = len(source_lines) + 1
            start = max(end - num_context_lines, 0)
            selected_lines = itertools.chain(
                source_lines[start:end], itertools.repeat("\n")
            )
        else:
            start = max(0, line - num_context_lines)
            end = min(line + num_context_lines, len(source_lines))
            selected_lines = source_lines[start:end]

        num_justify = max(len(str(start)), len(str(end))) + 1
        for n, source_line in zip(range(start, end), selected_lines):
            line_marker = " > " if n + 1 == line else "   "
            line_num = str(n + 1).rjust(num_justify)
            lines.append(
                f"{line_num}{line_marker}| {_format_source(source_line.rstrip(), disable_color=disable_color)}"
            )

    return lines
