"""Line cursor over an in-memory or memory-mapped text buffer."""

from __future__ import annotations

import mmap
from collections.abc import Iterable

Buffer = bytes | bytearray | mmap.mmap


class LineCursor:
    """
    Pull-based line reader over a UTF-8 buffer.

    Lines are separated by ``\\n``; a trailing ``\\r`` is dropped and a
    final newline does not produce an extra empty line. The cursor only
    ever reads from the buffer, so one mapped file may back several
    cursors at once. The current byte offset is exposed for indexing.

    Example:
        cursor = LineCursor(b"a\\nb\\n")
        cursor.next()  # "a"
        cursor.peek()  # "b"
    """

    __slots__ = ("_buffer", "_pos", "_end", "_peeked")

    def __init__(
        self,
        buffer: str | Buffer,
        start: int = 0,
        end: int | None = None,
    ) -> None:
        """
        Initialize line cursor.

        Args:
            buffer: Text (encoded as UTF-8) or a bytes-like buffer.
            start: Byte offset of the first line.
            end: Byte offset one past the last byte to read.
        """
        if isinstance(buffer, str):
            buffer = buffer.encode("utf-8")
        self._buffer = buffer
        self._end = len(buffer) if end is None else min(end, len(buffer))
        self._pos = start
        # (decoded line, offset after it) for a line seen by peek()
        self._peeked: tuple[str, int] | None = None

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> LineCursor:
        """Create a cursor over an explicit sequence of lines."""
        return cls("".join(f"{line}\n" for line in lines))

    @property
    def offset(self) -> int:
        """Byte offset of the next unread line."""
        return self._pos

    @property
    def buffer(self) -> Buffer:
        return self._buffer

    def at_end(self) -> bool:
        """True if no lines remain."""
        return self._pos >= self._end

    def _scan(self) -> tuple[int, int]:
        """Return (end of line content, offset of the following line)."""
        newline = self._buffer.find(b"\n", self._pos, self._end)
        if newline == -1:
            return self._end, self._end
        return newline, newline + 1

    def _decode(self, stop: int) -> str:
        raw = self._buffer[self._pos : stop]
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        return bytes(raw).decode("utf-8")

    def peek(self) -> str | None:
        """Return the next line without consuming it, or None at the end."""
        if self._peeked is not None:
            return self._peeked[0]
        if self.at_end():
            return None
        stop, following = self._scan()
        self._peeked = (self._decode(stop), following)
        return self._peeked[0]

    def next(self) -> str | None:
        """Consume and return the next line, or None at the end."""
        line = self.peek()
        if line is not None:
            self._pos = self._peeked[1]
            self._peeked = None
        return line

    def advance(self) -> bool:
        """Consume the next line without decoding it. False at the end."""
        if self._peeked is not None:
            self._pos = self._peeked[1]
            self._peeked = None
            return True
        if self.at_end():
            return False
        self._pos = self._scan()[1]
        return True

    def __iter__(self) -> LineCursor:
        return self

    def __next__(self) -> str:
        line = self.next()
        if line is None:
            raise StopIteration
        return line
