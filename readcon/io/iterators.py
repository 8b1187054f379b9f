"""Lazy frame iteration over a text buffer."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from ..errors import (
    IncompleteFrameError,
    IncompleteHeaderError,
    IncompleteVelocitySectionError,
    ParseError,
)
from ..system.frame import ConFrame
from .cursor import Buffer, LineCursor
from .parser import HEADER_SKIP_LINES, parse_count, parse_frame, parse_line_of_n

logger = logging.getLogger(__name__)


def skip_frame(lines: LineCursor) -> None:
    """
    Consume one frame while parsing only what is needed to count its lines.

    Only the type count and per-type atom counts are converted; the mass
    line and all atom lines are consumed without being decoded, and no
    atom data is created.

    Raises:
        IncompleteHeaderError, IncompleteFrameError,
        IncompleteVelocitySectionError: If the input ends early.
        InvalidVectorLengthError, InvalidNumberFormatError: On a bad
            type-count or atom-count line.
    """
    for _ in range(HEADER_SKIP_LINES):
        if not lines.advance():
            raise IncompleteHeaderError()

    line = lines.next()
    if line is None:
        raise IncompleteHeaderError()
    natm_types = parse_line_of_n(line, 1, parse_count)[0]

    line = lines.next()
    if line is None:
        raise IncompleteHeaderError()
    natms_per_type = parse_line_of_n(line, natm_types, parse_count)

    # Masses are not needed to count lines
    if not lines.advance():
        raise IncompleteHeaderError()

    # Symbol and label line per type, plus one line per atom
    block_lines = sum(natms_per_type) + 2 * natm_types

    for _ in range(block_lines):
        if not lines.advance():
            raise IncompleteFrameError()

    separator = lines.peek()
    if separator is not None and not separator.strip():
        lines.advance()
        for _ in range(block_lines):
            if not lines.advance():
                raise IncompleteVelocitySectionError()


class ConFrameIterator:
    """
    Iterator that lazily parses frames from ``.con`` / ``.convel`` content.

    Each call to :func:`next` parses one frame. A malformed frame raises
    its :class:`~readcon.errors.ParseError` without exhausting the
    iterator; the cursor is left wherever the failure occurred and is not
    resynchronized, so results after an error are unreliable.

    Example:
        for frame in ConFrameIterator(text):
            print(frame.natoms)

        it = ConFrameIterator(text)
        it.forward()        # skip the first frame cheaply
        second = next(it)
    """

    def __init__(
        self,
        contents: str | Buffer,
        start: int = 0,
        end: int | None = None,
    ) -> None:
        """
        Initialize frame iterator.

        Args:
            contents: Text of one or more frames, or a UTF-8 buffer.
            start: Byte offset to start reading at.
            end: Byte offset to stop reading at.
        """
        self._lines = LineCursor(contents, start=start, end=end)

    @property
    def offset(self) -> int:
        """Byte offset at which the next frame would start."""
        return self._lines.offset

    def __iter__(self) -> ConFrameIterator:
        return self

    def __next__(self) -> ConFrame:
        if self._lines.at_end():
            raise StopIteration
        return parse_frame(self._lines)

    def forward(self) -> bool:
        """
        Skip the next frame without materializing its atoms.

        Returns:
            True if a frame was skipped, False if no lines remain.

        Raises:
            ParseError: If the frame is malformed.
        """
        if self._lines.at_end():
            return False
        skip_frame(self._lines)
        return True

    def results(self) -> Iterator[ConFrame | ParseError]:
        """
        Yield each frame, or the parse error raised for it.

        Unlike plain iteration, an error does not end the loop. Since
        the cursor is not resynchronized, everything yielded after an
        error should be treated as unreliable.
        """
        while not self._lines.at_end():
            try:
                yield parse_frame(self._lines)
            except ParseError as e:
                yield e


def index_frames(contents: str | Buffer) -> list[tuple[int, int]]:
    """
    Find the byte range of every frame with the header-only skip path.

    Scanning stops at the first frame whose line counts cannot be
    followed (malformed or truncated header, or a section cut short).
    That frame is still reported, spanning to the end of the buffer, so
    decoding it surfaces the error instead of silently dropping it.

    Returns:
        ``(start, end)`` byte offsets, one pair per frame, in file order.
    """
    lines = LineCursor(contents)
    ranges: list[tuple[int, int]] = []

    while not lines.at_end():
        start = lines.offset
        try:
            skip_frame(lines)
        except ParseError as e:
            logger.warning(
                "Stopped indexing frames at byte %d (frame %d): %s",
                start,
                len(ranges),
                e,
            )
            ranges.append((start, len(lines.buffer)))
            break
        ranges.append((start, lines.offset))

    logger.debug("Indexed %d frame(s)", len(ranges))
    return ranges


def count_frames(contents: str | Buffer) -> int:
    """
    Count frames using the header-only skip path.

    Raises:
        ParseError: If a frame is malformed.
    """
    iterator = ConFrameIterator(contents)
    n_frames = 0
    while iterator.forward():
        n_frames += 1
    return n_frames
