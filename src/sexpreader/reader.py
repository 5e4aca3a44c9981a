import functools
import io
import logging
import re
from collections.abc import Iterable, Iterator
from typing import Optional, Union

import attr

from sexpreader import sexp
from sexpreader.logconfig import TRACE
from sexpreader.util import Maybe, timed

logger = logging.getLogger(__name__)

begin_num_chars = re.compile(r"[0-9\-]")
digit_chars = re.compile(r"[0-9]")

OPEN_PARENS = frozenset("([{")
CLOSE_PARENS = frozenset(")]}")
_MATCHING_PARENS = {"(": ")", "[": "]", "{": "}"}
_NON_WHITESPACE_SEPARATORS = frozenset("\x1c\x1d\x1e\x1f")

_STR_ESCAPE_CHARS = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

# Numeric forms which are recognized inside a number token but not decoded
_UNSUPPORTED_NUM_CHARS = {
    ".": "Float",
    "/": "Ratio",
}

UNKNOWN_FILE = "<unknown>"

CharSource = Union[io.TextIOBase, Iterable[str]]


@attr.frozen
class FileLocation:
    """The location of the next character to be read from a stream.

    Both `line` and `col` are 0-based."""

    file: str
    line: int
    col: int

    def __str__(self):
        return f"{self.file}:{self.line}:{self.col}"


@attr.define(repr=False, str=False)
class ReadError(Exception):
    message: str
    loc: FileLocation

    def __repr__(self):
        return f"sexpreader.reader.{type(self).__name__}({self.message}, {self.loc})"

    def __str__(self):
        return (
            f"{self.message} "
            f"(file: {self.loc.file}, line: {self.loc.line}, col: {self.loc.col})"
        )


class EarlyEOFError(ReadError):
    """Raised when the input ends where more characters were required.

    Interactive hosts may use this to detect an incomplete multiline form."""


class WrongCharError(ReadError):
    """Raised when the next character is not legal at this point in the grammar."""


class ParenMismatchError(ReadError):
    """Raised when a list is closed by a different bracket kind than opened it."""


class NotImplementedReadError(ReadError):
    """Raised for syntax which is recognized but which the reader cannot decode."""


def is_open_paren(c: str) -> bool:
    return c in OPEN_PARENS


def is_close_paren(c: str) -> bool:
    return c in CLOSE_PARENS


def is_matching_paren(open_char: str, close_char: str) -> bool:
    """Return True if `close_char` closes a list opened by `open_char`."""
    return _MATCHING_PARENS.get(open_char) == close_char


def is_whitespace(c: str) -> bool:
    """Return True if `c` has the Unicode White_Space property."""
    # str.isspace also accepts the \x1c-\x1f separators, which are not White_Space
    return c.isspace() and c not in _NON_WHITESPACE_SEPARATORS


def is_delimiter(c: str) -> bool:
    """Return True if `c` terminates an unquoted token."""
    return is_whitespace(c) or is_open_paren(c) or is_close_paren(c) or c == '"'


class StreamReader:
    """A character stream with a single character of lookahead.

    The stream tracks the location of the character returned by `peek`. Lines
    and columns are both counted from 0; consuming a newline moves to column 0
    of the next line."""

    __slots__ = ("_chars", "_next", "_file", "_line", "_col")

    def __init__(
        self,
        stream: CharSource,
        filename: Optional[str] = None,
        init_line: int = 0,
        init_col: int = 0,
    ) -> None:
        """`stream` may be a text stream or any iterable of characters.

        `filename` is used only to label locations; if it is not given the
        stream's `name` is used, if it has one."""
        if hasattr(stream, "read"):
            self._chars: Iterator[str] = iter(functools.partial(stream.read, 1), "")
        else:
            self._chars = iter(stream)
        self._file = Maybe(filename).or_else_get(
            Maybe(getattr(stream, "name", None)).map(str).or_else_get(UNKNOWN_FILE)
        )
        self._line = init_line
        self._col = init_col

        # Load up the lookahead character
        self._next: Optional[str] = next(self._chars, None)

    @property
    def name(self) -> str:
        return self._file

    @property
    def line(self) -> int:
        """Return the line of the character returned by `peek`."""
        return self._line

    @property
    def col(self) -> int:
        """Return the column of the character returned by `peek`."""
        return self._col

    @property
    def loc(self) -> FileLocation:
        """Return a snapshot of the location of the character returned by `peek`."""
        return FileLocation(self._file, self._line, self._col)

    def peek(self) -> Optional[str]:
        """Peek at the next character in the stream, returning None at the end of
        the stream."""
        return self._next

    def advance(self) -> Optional[str]:
        """Consume and return the next character in the stream, refilling the
        lookahead from the underlying source.

        Returns None without changing the location at the end of the stream."""
        cur = self._next
        if cur is None:
            return None

        self._next = next(self._chars, None)
        if cur == "\n":
            self._line += 1
            self._col = 0
        else:
            self._col += 1
        return cur


class ReaderContext:
    __slots__ = ("_reader",)

    def __init__(self, reader: StreamReader) -> None:
        self._reader = reader

    @property
    def reader(self) -> StreamReader:
        return self._reader

    def peek(self) -> str:
        """Peek at the next character, raising an EarlyEOFError at end of input."""
        return Maybe(self._reader.peek()).or_else_raise(self.eof_error)

    def advance(self) -> str:
        """Consume the next character, raising an EarlyEOFError at end of input."""
        return Maybe(self._reader.advance()).or_else_raise(self.eof_error)

    def eof_error(self) -> EarlyEOFError:
        return EarlyEOFError("Unexpected end of file", self._reader.loc)

    def wrong_char_error(self, c: str, expected: str) -> WrongCharError:
        return WrongCharError(
            f"Unexpected character '{c}'; expected one of '{expected}'",
            self._reader.loc,
        )

    def paren_mismatch_error(
        self, open_char: str, close_char: str
    ) -> ParenMismatchError:
        return ParenMismatchError(
            f"List delimiters don't match: '{open_char}' and '{close_char}'",
            self._reader.loc,
        )

    def not_implemented_error(self, what: str) -> NotImplementedReadError:
        return NotImplementedReadError(
            f"{what} literals are not supported", self._reader.loc
        )


def _consume_whitespace(reader: StreamReader) -> None:
    while (char := reader.peek()) is not None and is_whitespace(char):
        reader.advance()


def _read_list(ctx: ReaderContext) -> Union[sexp.Cons, sexp.Nil]:
    """Read a list from the input stream.

    Any of the bracket pairs `()`, `[]` and `{}` may delimit a list, but the
    closing bracket must be the same kind as the opening one. The closing
    bracket is consumed."""
    reader = ctx.reader
    start = ctx.peek()
    if not is_open_paren(start):
        raise ctx.wrong_char_error(start, "({[")
    reader.advance()

    items = _read_list_items(ctx)

    end = ctx.peek()
    if not is_matching_paren(start, end):
        raise ctx.paren_mismatch_error(start, end)
    reader.advance()
    return items


def _read_list_items(ctx: ReaderContext) -> Union[sexp.Cons, sexp.Nil]:
    """Read list elements up to (but not including) the next closing bracket
    and return them as a proper list."""
    items: list[sexp.SExp] = []
    while True:
        _consume_whitespace(ctx.reader)
        if is_close_paren(ctx.peek()):
            return sexp.from_iterable(items)
        items.append(_read_sexp(ctx))


def _read_symbol(ctx: ReaderContext, prefix: str = "") -> sexp.Symbol:
    """Return a symbol from the input stream.

    A symbol runs up to the next delimiter or the end of input. The delimiter
    is not consumed, so a symbol may be empty."""
    reader = ctx.reader
    chars: list[str] = list(prefix)
    while (char := reader.peek()) is not None and not is_delimiter(char):
        chars.append(char)
        reader.advance()
    return sexp.Symbol("".join(chars))


def _read_escaped_string_char(ctx: ReaderContext) -> str:
    """Read one string character, decoding a backslash escape if present.

    Unknown escape sequences produce the escaped character itself."""
    char = ctx.advance()
    if char == "\\":
        char = ctx.advance()
        return _STR_ESCAPE_CHARS.get(char, char)
    return char


def _read_string(ctx: ReaderContext) -> sexp.String:
    """Return a string from the input stream."""
    reader = ctx.reader
    char = ctx.peek()
    if char != '"':
        raise ctx.wrong_char_error(char, '"')
    reader.advance()

    s: list[str] = []
    while True:
        if ctx.peek() == '"':
            reader.advance()
            return sexp.String("".join(s))
        s.append(_read_escaped_string_char(ctx))


def _read_number(ctx: ReaderContext) -> Union[sexp.Integer, sexp.Symbol]:
    """Return an integer from the input stream.

    A leading '-' which is not followed by a digit begins a symbol instead."""
    reader = ctx.reader
    chars: list[str] = []

    if ctx.peek() == "-":
        reader.advance()
        following_char = reader.peek()
        if following_char is None or not digit_chars.match(following_char):
            return _read_symbol(ctx, prefix="-")
        chars.append("-")

    while (char := reader.peek()) is not None and not is_delimiter(char):
        if digit_chars.match(char):
            chars.append(char)
            reader.advance()
        elif char in _UNSUPPORTED_NUM_CHARS:
            raise ctx.not_implemented_error(_UNSUPPORTED_NUM_CHARS[char])
        else:
            raise ctx.wrong_char_error(char, "0123456789")

    assert chars and chars[-1] != "-", "Must have at least one digit in number"
    return sexp.Integer(int("".join(chars)))


def _read_sexp(ctx: ReaderContext) -> sexp.SExp:
    """Read the next full form from the input stream."""
    char = ctx.peek()
    if is_open_paren(char):
        return _read_list(ctx)
    elif begin_num_chars.match(char):
        return _read_number(ctx)
    elif char == '"':
        return _read_string(ctx)
    elif not is_whitespace(char):
        return _read_symbol(ctx)
    else:
        raise ctx.wrong_char_error(char, "Any")


def read_sexp(reader: StreamReader) -> sexp.SExp:
    """Read exactly one form starting at the next character of `reader`.

    The stream is left positioned at the character following the form. Leading
    whitespace is not skipped. Raises a ReadError subclass on malformed or
    truncated input; no partial form is ever returned."""
    return _read_sexp(ReaderContext(reader))


def read(stream: CharSource, filename: Optional[str] = None) -> Iterator[sexp.SExp]:
    """Read the contents of a stream as a sequence of forms.

    Whitespace between top level forms is skipped. The first error encountered
    aborts reading.

    The caller is responsible for closing the input stream."""
    reader = StreamReader(stream, filename=filename)
    ctx = ReaderContext(reader)
    while True:
        _consume_whitespace(reader)
        char = reader.peek()
        if char is None:
            return
        if is_close_paren(char):
            raise ctx.wrong_char_error(char, "Any")
        logger.log(TRACE, f"Reading form at {reader.loc}")
        yield _read_sexp(ctx)


def read_str(s: str, filename: str = "<string>") -> Iterator[sexp.SExp]:
    """Read the contents of a string as a sequence of forms."""
    with io.StringIO(s) as buf:
        yield from read(buf, filename=filename)


def read_file(filename: str) -> Iterator[sexp.SExp]:
    """Read the contents of a file as a sequence of forms."""
    with open(filename, encoding="utf-8") as f, timed(
        lambda duration: logger.debug(
            f"Read forms from '{filename}' in {duration / 1000000}ms"
        )
    ):
        logger.debug(f"Reading forms from '{filename}'")
        yield from read(f, filename=filename)
