"""
File content access for frame parsing.

Files smaller than :data:`MMAP_THRESHOLD` are read into memory in one
call; larger files are memory-mapped read-only, so pages are served from
the OS page cache on demand instead of being copied up front. Either way
the content is checked to be valid UTF-8 before any parsing starts, and
the parser sees the same bytes-like view.
"""

from __future__ import annotations

import codecs
import logging
import mmap
from pathlib import Path
from types import TracebackType

from ..system.frame import ConFrame
from .cursor import Buffer
from .iterators import ConFrameIterator

logger = logging.getLogger(__name__)

MMAP_THRESHOLD = 64 * 1024
_VALIDATION_CHUNK = 1 << 20


def validate_utf8(buffer: Buffer) -> None:
    """
    Check that a buffer holds valid UTF-8 without keeping a decoded copy.

    Raises:
        UnicodeDecodeError: If the buffer is not valid UTF-8.
    """
    decoder = codecs.getincrementaldecoder("utf-8")()
    for start in range(0, len(buffer), _VALIDATION_CHUNK):
        decoder.decode(buffer[start : start + _VALIDATION_CHUNK])
    decoder.decode(b"", final=True)


class FileContents:
    """
    Read-only view of a trajectory file's bytes.

    Example:
        with FileContents("trajectory.con") as contents:
            for frame in contents.frames():
                ...
    """

    def __init__(self, filename: str | Path, threshold: int = MMAP_THRESHOLD) -> None:
        """
        Initialize file contents.

        Args:
            filename: Path to the file.
            threshold: Size in bytes from which the file is memory-mapped.
        """
        self.filename = Path(filename)
        self.threshold = threshold
        self._file = None
        self._buffer: Buffer | None = None
        self._mapped = False

    def open(self) -> None:
        """Load or map the file and validate its encoding."""
        if self._buffer is not None:
            return

        size = self.filename.stat().st_size
        # mmap cannot map an empty file
        if size == 0 or size < self.threshold:
            self._buffer = self.filename.read_bytes()
            self._mapped = False
        else:
            self._file = self.filename.open("rb")
            try:
                self._buffer = mmap.mmap(
                    self._file.fileno(), 0, access=mmap.ACCESS_READ
                )
            except (OSError, ValueError):
                self._file.close()
                self._file = None
                raise
            self._mapped = True
        logger.debug(
            "Opened %s (%d bytes) via %s",
            self.filename,
            size,
            "mmap" if self._mapped else "read",
        )

        try:
            validate_utf8(self._buffer)
        except UnicodeDecodeError:
            self.close()
            raise

    def close(self) -> None:
        """Release the buffer and any mapping."""
        if self._mapped and self._buffer is not None:
            self._buffer.close()
        self._buffer = None
        self._mapped = False
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> FileContents:
        """Context manager entry."""
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit."""
        self.close()

    @property
    def data(self) -> Buffer:
        """The file's bytes."""
        if self._buffer is None:
            raise RuntimeError("File not open. Use context manager or call open().")
        return self._buffer

    @property
    def is_mapped(self) -> bool:
        """True if the file is memory-mapped rather than read."""
        return self._mapped

    def __len__(self) -> int:
        return len(self.data)

    def frames(self, start: int = 0, end: int | None = None) -> ConFrameIterator:
        """Return a frame iterator over the whole file or a byte range of it."""
        return ConFrameIterator(self.data, start=start, end=end)


def read_all_frames(
    filename: str | Path, threshold: int = MMAP_THRESHOLD
) -> list[ConFrame]:
    """
    Read every frame of a file.

    Args:
        filename: Path to a ``.con`` or ``.convel`` file.
        threshold: Size in bytes from which the file is memory-mapped.

    Returns:
        Frames in file order.

    Raises:
        ParseError: On the first malformed frame.
        UnicodeDecodeError: If the file is not valid UTF-8.
        OSError: If the file cannot be read.
    """
    with FileContents(filename, threshold=threshold) as contents:
        frames = list(contents.frames())
    logger.debug("Read %d frame(s) from %s", len(frames), filename)
    return frames


def read_first_frame(
    filename: str | Path, threshold: int = MMAP_THRESHOLD
) -> ConFrame | None:
    """
    Read only the first frame of a file.

    Returns:
        The first frame, or None if the file holds no lines.

    Raises:
        ParseError: If the first frame is malformed.
    """
    with FileContents(filename, threshold=threshold) as contents:
        return next(contents.frames(), None)


def read_con(filename: str | Path) -> list[ConFrame]:
    """Read all frames from a ``.con`` or ``.convel`` file."""
    return read_all_frames(filename)


def read_con_string(contents: str) -> list[ConFrame]:
    """Read all frames from a string of ``.con`` or ``.convel`` data."""
    return list(ConFrameIterator(contents))
