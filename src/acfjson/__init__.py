"""
Streaming converter from Valve's ACF key-value format to JSON.

Provides a pull-based tokenizer over binary input and a recursive descent
writer that emits JSON incrementally to a binary sink, with optional
pretty-printing.
"""

import io
import os
import time
from collections.abc import Iterable
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import IO
from typing import Any
from typing import TypeAlias

from ._utf8_reader import UTF8CharReader

__version__ = "0.1.0"

# Type aliases for domain concepts
Position: TypeAlias = int
Depth: TypeAlias = int

# Profiling infrastructure - zero-cost when disabled
PROFILE_HOT_PATHS = __debug__ and "ACFJSON_PROFILE" in os.environ

# Codepoints with the Unicode White_Space property
_WHITESPACE = frozenset(
    "\t\n\x0b\x0c\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)


@dataclass
class HotPathStats:
    """Statistics for profiling hot paths during conversion."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0

    def record_call(self, duration_ns: int, chars: int = 0) -> None:
        """Records a function call with timing and character processing info."""
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """Context manager for profiling hot paths."""

        def __init__(self, func_name: str, chars: int = 0) -> None:
            self.func_name = func_name
            self.chars = chars
            self.start_time = 0

        def __enter__(self) -> "ProfileContext":
            self.start_time = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            duration = time.perf_counter_ns() - self.start_time
            if self.func_name not in _hot_path_stats:
                _hot_path_stats[self.func_name] = HotPathStats(self.func_name)
            _hot_path_stats[self.func_name].record_call(duration, self.chars)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns current profiling statistics."""
        return _hot_path_stats.copy()

    def clear_hot_path_stats() -> None:
        """Clears profiling statistics."""
        _hot_path_stats.clear()

else:
    # Zero-cost in production - only holds the character count
    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, func_name: str, chars: int = 0) -> None:
            self.chars = chars

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass


class TokenKind(Enum):
    """Lexical categories produced by the ACF tokenizer."""

    STRING = "string"
    DICT_START = "dict_start"
    DICT_END = "dict_end"


@dataclass(frozen=True)
class AcfToken:
    """
    Represents one ACF token.

    Tokens carry no position information; only string tokens have a value.
    """

    kind: TokenKind
    value: str = ""

    def __str__(self) -> str:
        if self.kind is TokenKind.DICT_START:
            return "'{'"
        if self.kind is TokenKind.DICT_END:
            return "'}'"
        return f'string "{self.value}"'


DICT_START = AcfToken(TokenKind.DICT_START)
DICT_END = AcfToken(TokenKind.DICT_END)


def string_token(value: str) -> AcfToken:
    """Builds a string token carrying the given text."""
    return AcfToken(TokenKind.STRING, value)


class ACFError(ValueError):
    """Base class for failures while converting ACF input to JSON."""


class ACFDecodeError(ACFError):
    """
    Handles tokenizer failures with precise input position information.

    Position is a byte offset into the source; line and column count
    decoded codepoints and are 1-based.
    """

    def __init__(
        self,
        msg: str,
        pos: Position = 0,
        lineno: int = 1,
        colno: int = 1,
    ) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.pos = pos
        self.lineno = lineno
        self.colno = colno

        super().__init__(
            f"{msg} at line {lineno}, column {colno} (byte {pos})"
        )


class InvalidEncodingError(ACFDecodeError):
    """Input bytes are not valid UTF-8."""


class UnexpectedCharacterError(ACFDecodeError):
    """A character other than '{', '}' or '"' starts a token."""

    def __init__(
        self, char: str, pos: Position = 0, lineno: int = 1, colno: int = 1
    ) -> None:
        self.char = char
        super().__init__(f"Unexpected character {char!r}", pos, lineno, colno)


class UnterminatedStringError(ACFDecodeError):
    """Input ends inside a quoted string literal."""


class ACFSyntaxError(ACFError):
    """Token sequence does not follow the ACF object grammar."""


class UnexpectedTokenError(ACFSyntaxError):
    """A token appears where the grammar does not allow it."""

    def __init__(self, token: AcfToken) -> None:
        self.token = token
        super().__init__(f"Unexpected token {token}")


class UnexpectedEofError(ACFSyntaxError):
    """Token sequence ends where more input is required."""


class AcfTokenizer:
    """
    Tokenizes ACF input pulled lazily from a binary stream.

    Codepoint-by-codepoint scanning that never reads ahead of the token
    being produced. Iterating yields tokens until the source is exhausted;
    the tokenizer cannot be restarted.
    """

    def __init__(self, source: IO[bytes]):
        self.reader = UTF8CharReader(source)

    def __iter__(self) -> Iterator[AcfToken]:
        return self

    def __next__(self) -> AcfToken:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    def read_char(self) -> str | None:
        """Returns the next codepoint, translating decode failures."""
        try:
            return self.reader.read_char()
        except UnicodeDecodeError as e:
            raise InvalidEncodingError(
                f"Invalid UTF-8 sequence: {e.reason}",
                self.reader.char_pos,
                self.reader.char_lineno,
                self.reader.char_colno,
            ) from e

    def skip_whitespace(self) -> str | None:
        """Skips Unicode whitespace, returning the first other codepoint."""
        with ProfileContext("skip_whitespace") as profile:
            skipped = 0
            char = self.read_char()
            while char is not None and char in _WHITESPACE:
                skipped += 1
                char = self.read_char()
            profile.chars = skipped
            return char

    def scan_string(self) -> AcfToken:
        """Scans a string literal after its opening quote was consumed."""
        reader = self.reader
        start = (reader.char_pos, reader.char_lineno, reader.char_colno)

        with ProfileContext("scan_string") as profile:
            chars: list[str] = []
            while True:
                char = self.read_char()
                if char is None:
                    raise UnterminatedStringError(
                        "Unterminated string starting at", *start
                    )
                if char == '"':
                    profile.chars = len(chars)
                    return string_token("".join(chars))
                # No escape sequences: backslashes are kept verbatim
                chars.append(char)

    def next_token(self) -> AcfToken | None:
        """Returns the next token or None if at end."""
        char = self.skip_whitespace()

        if char is None:
            return None
        elif char == "{":
            return DICT_START
        elif char == "}":
            return DICT_END
        elif char == '"':
            return self.scan_string()
        else:
            raise UnexpectedCharacterError(
                char,
                self.reader.char_pos,
                self.reader.char_lineno,
                self.reader.char_colno,
            )


@dataclass(frozen=True)
class EmitConfig:
    """
    Configures JSON output with immutable settings.

    ``strict`` controls whether a truncated object (input ends before its
    closing brace, or a stray closing brace ends the top level) is an error
    or silently accepted as complete.
    """

    compact: bool = False
    indent: int = 2
    ensure_ascii: bool = False
    strict: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.compact, bool):
            raise TypeError("compact must be a boolean")
        if isinstance(self.indent, bool) or not isinstance(self.indent, int):
            raise TypeError("indent must be an integer")
        if self.indent < 0:
            raise ValueError("indent must be non-negative")
        if not isinstance(self.ensure_ascii, bool):
            raise TypeError("ensure_ascii must be a boolean")
        if not isinstance(self.strict, bool):
            raise TypeError("strict must be a boolean")


_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _encode_string(s: str, ensure_ascii: bool) -> str:
    """Encode string with proper escape sequences."""
    ascii_limit = 127
    bmp_limit = 0xFFFF
    result = ['"']
    for char in s:
        escaped = _ESCAPES.get(char)
        code = ord(char)
        if escaped is not None:
            result.append(escaped)
        elif char < " ":
            result.append(f"\\u{code:04x}")
        elif ensure_ascii and code > bmp_limit:
            # Astral codepoints become a UTF-16 surrogate pair
            code -= 0x10000
            high = 0xD800 | (code >> 10)
            low = 0xDC00 | (code & 0x3FF)
            result.append(f"\\u{high:04x}\\u{low:04x}")
        elif ensure_ascii and code > ascii_limit:
            result.append(f"\\u{code:04x}")
        else:
            result.append(char)
    result.append('"')
    return "".join(result)


class JsonWriter:
    """
    Recursive descent writer from an ACF token stream to JSON.

    Pulls exactly as many tokens as the grammar requires and writes output
    as it goes, so a failure leaves partial JSON in the sink.
    """

    def __init__(
        self, tokens: Iterable[AcfToken], sink: IO[bytes], config: EmitConfig
    ):
        self.tokens = iter(tokens)
        self.sink = sink
        self.config = config
        self.depth: Depth = 0

    def advance_token(self) -> AcfToken | None:
        """Pulls the next token, or None once the stream is exhausted."""
        return next(self.tokens, None)

    def emit(self, text: str) -> None:
        """Writes text to the sink as UTF-8."""
        self.sink.write(text.encode("utf-8"))

    def newline(self) -> None:
        """Starts a new indented line unless output is compact."""
        if not self.config.compact:
            self.emit("\n" + " " * (self.depth * self.config.indent))

    def write_string(self, s: str) -> None:
        self.emit(_encode_string(s, self.config.ensure_ascii))

    def write_document(self) -> None:
        """
        Writes one top-level object.

        Valve files usually omit braces around the top level, so a leading
        string token starts an implicit object that runs to end of input.
        """
        token = self.advance_token()
        if token is None or token.kind is TokenKind.STRING:
            self.write_members(token, braced=False)
        elif token.kind is TokenKind.DICT_START:
            self.write_object()
        else:
            raise UnexpectedTokenError(token)

    def write_object(self) -> None:
        """Writes an object whose opening brace was already consumed."""
        self.write_members(self.advance_token(), braced=True)

    def _check_object_end(self, token: AcfToken | None, braced: bool) -> None:
        """Validates the token that terminated the current object."""
        if not self.config.strict:
            return
        if token is None and braced:
            raise UnexpectedEofError("Expecting '}' before end of input")
        if token is not None and not braced:
            raise UnexpectedTokenError(token)

    def write_members(self, token: AcfToken | None, braced: bool) -> None:
        """Writes members starting at token up to the end of the object."""
        with ProfileContext("write_object"):
            self.emit("{")
            self.depth += 1

            first = True
            while token is not None and token.kind is not TokenKind.DICT_END:
                if token.kind is not TokenKind.STRING:
                    raise UnexpectedTokenError(token)

                # Separator trails the previous member
                if not first:
                    self.emit(",")
                first = False

                self.newline()
                self.write_string(token.value)
                self.emit(":" if self.config.compact else ": ")
                self.write_value()

                token = self.advance_token()

            self._check_object_end(token, braced)

            self.depth -= 1
            self.newline()
            self.emit("}")

    def write_value(self) -> None:
        """Writes the value half of a member."""
        token = self.advance_token()
        if token is None:
            raise UnexpectedEofError("Expecting value")
        if token.kind is TokenKind.STRING:
            self.write_string(token.value)
        elif token.kind is TokenKind.DICT_START:
            self.write_object()
        else:
            raise UnexpectedTokenError(token)


def tokenize(source: IO[bytes]) -> AcfTokenizer:
    """
    Creates a lazy token stream over a binary ACF source.
    """
    if not hasattr(source, "read"):
        raise TypeError("source must have a read() method")

    return AcfTokenizer(source)


def _write_document(
    tokens: Iterable[AcfToken], sink: IO[bytes], config: EmitConfig
) -> None:
    """Runs the writer, reporting runaway nesting as a syntax error."""
    try:
        JsonWriter(tokens, sink, config).write_document()
    except RecursionError as e:
        raise ACFSyntaxError("Objects nested too deeply") from e


def write(
    tokens: Iterable[AcfToken], sink: IO[bytes], **kwargs: Any
) -> None:
    """
    Writes a token stream as JSON to a binary sink.

    Keyword arguments configure output, see EmitConfig. Only the tokens of
    the first top-level object are pulled.
    """
    if not hasattr(sink, "write"):
        raise TypeError("sink must have a write() method")

    config = EmitConfig(**kwargs)
    _write_document(tokens, sink, config)


def convert(source: IO[bytes], sink: IO[bytes], **kwargs: Any) -> None:
    """
    Converts ACF from a binary source to JSON in a binary sink.

    In strict mode the source must end after the top-level object;
    otherwise anything following it is left unread. Neither stream is
    closed; output already written stays written on error.
    """
    if not hasattr(sink, "write"):
        raise TypeError("sink must have a write() method")

    config = EmitConfig(**kwargs)
    tokens = tokenize(source)
    _write_document(tokens, sink, config)

    if config.strict:
        trailing = tokens.next_token()
        if trailing is not None:
            raise UnexpectedTokenError(trailing)


def converts(data: bytes | str, **kwargs: Any) -> str:
    """
    Converts an ACF document held in memory to a JSON string.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    elif not isinstance(data, bytes | bytearray):
        raise TypeError(
            f"the ACF document must be str or bytes, not {type(data).__name__}"
        )

    sink = io.BytesIO()
    convert(io.BytesIO(data), sink, **kwargs)
    return sink.getvalue().decode("utf-8")


__all__ = [
    "DICT_END",
    "DICT_START",
    "ACFDecodeError",
    "ACFError",
    "ACFSyntaxError",
    "AcfToken",
    "AcfTokenizer",
    "EmitConfig",
    "HotPathStats",
    "InvalidEncodingError",
    "JsonWriter",
    "TokenKind",
    "UnexpectedCharacterError",
    "UnexpectedEofError",
    "UnexpectedTokenError",
    "UnterminatedStringError",
    "clear_hot_path_stats",
    "convert",
    "converts",
    "get_hot_path_stats",
    "string_token",
    "tokenize",
    "write",
]
