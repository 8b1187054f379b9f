"""Base classes for trajectory I/O."""

from __future__ import annotations

import weakref
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from ..system import ConFrame


def _finish(sink: TextIO, owned: bool) -> None:
    """Flush a sink, closing it if the writer opened it."""
    if sink.closed:
        return
    sink.flush()
    if owned:
        sink.close()


class TrajectoryWriter(ABC):
    """
    Abstract base class for trajectory writers.

    A writer owns its output sink exclusively and is not safe for
    concurrent use. Output is flushed when the writer is closed, when its
    context exits, or when it is garbage collected.

    Example:
        with ConFrameWriter.from_path("trajectory.con") as writer:
            for frame in frames:
                writer.write_frame(frame)
    """

    def __init__(self, sink: TextIO, *, owned: bool = False) -> None:
        """
        Initialize trajectory writer.

        Args:
            sink: Text stream to write to.
            owned: Whether the writer closes the sink when it closes.
        """
        self._sink = sink
        self._n_frames = 0
        self._finalizer = weakref.finalize(self, _finish, sink, owned)

    @classmethod
    def from_path(cls, filename: str | Path, **kwargs) -> TrajectoryWriter:
        """
        Create a writer that owns a newly created file.

        Args:
            filename: Output file path.
            **kwargs: Format-specific options.
        """
        sink = Path(filename).open("w", encoding="utf-8", newline="\n")
        return cls(sink, owned=True, **kwargs)

    @abstractmethod
    def write_frame(self, frame: ConFrame) -> None:
        """
        Write a single frame.

        Args:
            frame: Frame to write.
        """
        ...

    def extend(self, frames: Iterable[ConFrame]) -> None:
        """Write several frames in order."""
        for frame in frames:
            self.write_frame(frame)

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def flush(self) -> None:
        """Flush buffered output to the sink."""
        if self._finalizer.alive:
            self._sink.flush()

    def close(self) -> None:
        """Flush output and close the sink if the writer owns it."""
        self._finalizer()

    def __enter__(self) -> TrajectoryWriter:
        """Context manager entry."""
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
    def n_frames(self) -> int:
        """Number of frames written."""
        return self._n_frames


class TrajectoryReader(ABC):
    """
    Abstract base class for random-access trajectory readers.

    Example:
        with ConReader("trajectory.con") as reader:
            for frame in reader:
                analyze(frame)
    """

    def __init__(self, filename: str | Path) -> None:
        """
        Initialize trajectory reader.

        Args:
            filename: Input file path.
        """
        self.filename = Path(filename)

    @abstractmethod
    def read_frame(self, index: int) -> ConFrame:
        """
        Read a specific frame.

        Args:
            index: Frame index (0-based).

        Returns:
            The parsed frame.
        """
        ...

    @abstractmethod
    def __len__(self) -> int:
        """Return number of frames."""
        ...

    @abstractmethod
    def open(self) -> None:
        """Open file for reading."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close file."""
        ...

    def __iter__(self) -> Iterator[ConFrame]:
        """Iterate over all frames."""
        for i in range(len(self)):
            yield self.read_frame(i)

    def __getitem__(self, index: int) -> ConFrame:
        """Get frame by index."""
        return self.read_frame(index)

    def __enter__(self) -> TrajectoryReader:
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
    def n_frames(self) -> int:
        """Number of frames in trajectory."""
        return len(self)
