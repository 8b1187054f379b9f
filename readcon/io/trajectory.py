"""Random-access reader for ``.con`` / ``.convel`` trajectories."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import ParseError
from ..system.frame import ConFrame
from .base import TrajectoryReader
from .content import MMAP_THRESHOLD, FileContents
from .iterators import index_frames

if TYPE_CHECKING:
    from ..parallel import ParallelBackend

logger = logging.getLogger(__name__)


class ConReader(TrajectoryReader):
    """
    Indexed ``.con`` / ``.convel`` trajectory reader.

    On open, frame byte ranges are located with the header-only skip
    path; frames are then decoded on demand, in any order.

    Example:
        with ConReader("trajectory.convel") as reader:
            last = reader[len(reader) - 1]
            frames = reader.read_frames(range(0, len(reader), 10))
    """

    def __init__(self, filename: str | Path, threshold: int = MMAP_THRESHOLD) -> None:
        """
        Initialize reader.

        Args:
            filename: Input file path.
            threshold: Size in bytes from which the file is memory-mapped.
        """
        super().__init__(filename)
        self._contents = FileContents(filename, threshold=threshold)
        self._frame_ranges: list[tuple[int, int]] = []
        self._is_open = False

    def open(self) -> None:
        """Open file and index frame positions."""
        self._contents.open()
        self._frame_ranges = index_frames(self._contents.data)
        self._is_open = True
        logger.debug("Indexed %d frame(s) in %s", len(self._frame_ranges), self.filename)

    def close(self) -> None:
        """Close file."""
        self._contents.close()
        self._frame_ranges = []
        self._is_open = False

    @property
    def frame_ranges(self) -> list[tuple[int, int]]:
        """Byte range of each frame."""
        return list(self._frame_ranges)

    def _check_frame(self, index: int) -> int:
        if not self._is_open:
            raise RuntimeError("File not open.")
        n_frames = len(self._frame_ranges)
        if index < 0:
            index += n_frames
        if index < 0 or index >= n_frames:
            raise IndexError(f"Frame index {index} out of range")
        return index

    def read_frame(self, index: int) -> ConFrame:
        """
        Read a specific frame.

        Args:
            index: Frame index (0-based, negative counts from the end).

        Raises:
            IndexError: If the index is out of range.
            ParseError: If the frame is malformed.
        """
        start, end = self._frame_ranges[self._check_frame(index)]
        return next(self._contents.frames(start=start, end=end))

    def read_frames(
        self,
        indices: Iterable[int] | slice,
        backend: str | ParallelBackend | None = None,
    ) -> list[ConFrame]:
        """
        Read several frames.

        Args:
            indices: Frame indices or a slice.
            backend: Parallel backend name or instance. Frames are read
                sequentially if None.

        Raises:
            ParseError: The error of the first requested malformed frame.
        """
        if isinstance(indices, slice):
            indices = range(*indices.indices(len(self)))
        ranges = [self._frame_ranges[self._check_frame(i)] for i in indices]

        if backend is None:
            return [
                next(self._contents.frames(start=start, end=end))
                for start, end in ranges
            ]

        from ..parallel.splitter import decode_ranges

        results = decode_ranges(self._contents.data, ranges, backend=backend)
        for result in results:
            if isinstance(result, ParseError):
                raise result
        return results

    def __len__(self) -> int:
        """Return number of frames."""
        return len(self._frame_ranges)
