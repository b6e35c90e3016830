"""Incremental UTF-8 codepoint reader with byte, line and column tracking."""

from __future__ import annotations

from typing import IO
from typing import Final

# Longest valid UTF-8 encoding of a single codepoint
MAX_SEQUENCE_LENGTH: Final = 4


class UTF8CharReader:
    """Reads one codepoint at a time from a binary stream.

    Bytes are pulled from the stream one by one until they form a complete
    UTF-8 sequence, so no byte past the returned codepoint is ever consumed.
    The reader keeps the location of the most recent codepoint so callers
    can report errors against it.
    """

    def __init__(self, stream: IO[bytes]) -> None:
        """Initialize reader over a binary stream.

        Args:
            stream: Object with a ``read(n)`` method returning bytes
        """
        self.stream: Final = stream

        # Location of the next codepoint to be read
        self.pos = 0
        self.lineno = 1
        self.colno = 1

        # Location of the codepoint (or bad sequence) most recently read
        self.char_pos = 0
        self.char_lineno = 1
        self.char_colno = 1

    def read_char(self) -> str | None:
        """Read the next codepoint.

        Returns:
            The decoded codepoint, or None once the stream is exhausted

        Raises:
            UnicodeDecodeError: If the bytes do not form valid UTF-8, or the
                stream ends in the middle of a sequence
            TypeError: If the stream was opened in text mode
        """
        self.char_pos = self.pos
        self.char_lineno = self.lineno
        self.char_colno = self.colno

        buf = bytearray()
        while True:
            byte = self.stream.read(1)
            if isinstance(byte, str):
                raise TypeError("ACF source must be opened in binary mode")
            if not byte:
                if not buf:
                    return None
                raise UnicodeDecodeError(
                    "utf-8",
                    bytes(buf),
                    0,
                    len(buf),
                    "truncated sequence at end of input",
                )

            buf += byte
            self.pos += 1

            try:
                char = buf.decode("utf-8")
            except UnicodeDecodeError as e:
                if len(buf) >= MAX_SEQUENCE_LENGTH:
                    raise UnicodeDecodeError(
                        "utf-8",
                        bytes(buf),
                        0,
                        len(buf),
                        "invalid sequence",
                    ) from e
                # Incomplete multi-byte sequence, keep reading
                continue

            self._advance(char)
            return char

    def _advance(self, char: str) -> None:
        """Move the line/column cursor past a decoded codepoint."""
        if char == "\n":
            self.lineno += 1
            self.colno = 1
        else:
            self.colno += 1
