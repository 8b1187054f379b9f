"""Serialization of frames to the ``.con`` / ``.convel`` text format."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from ..system.frame import ConFrame
from .base import TrajectoryWriter
from .parser import COORDINATE_LABEL, VELOCITY_LABEL

logger = logging.getLogger(__name__)

DEFAULT_PRECISION = 6


class ConFrameWriter(TrajectoryWriter):
    """
    Writer for ``.con`` and ``.convel`` frames.

    Floats are written with a fixed number of digits after the decimal
    point. The default of 6 is what simulation codes usually emit. With 17
    digits, values of roughly unit magnitude (0.1 and up) read back as
    the same float64; smaller values keep fewer significant digits, and
    anything below 0.5e-17 is written as zero. Frames carrying
    velocities get a blank separator line and a velocity section.

    Each frame is rendered in full and handed to the sink in one write.
    """

    def __init__(
        self,
        sink: TextIO,
        precision: int = DEFAULT_PRECISION,
        *,
        owned: bool = False,
    ) -> None:
        """
        Initialize frame writer.

        Args:
            sink: Text stream to write to.
            precision: Digits after the decimal point for floats.
            owned: Whether the writer closes the sink when it closes.
        """
        if precision < 0:
            raise ValueError(f"precision must be non-negative, got {precision}")
        super().__init__(sink, owned=owned)
        self.precision = precision

    @classmethod
    def from_path(
        cls, filename: str | Path, precision: int = DEFAULT_PRECISION
    ) -> ConFrameWriter:
        """Create a writer that owns a newly created file."""
        logger.debug("Opening %s for writing (precision=%d)", filename, precision)
        return super().from_path(filename, precision=precision)

    def _format_floats(self, values: Iterable[float]) -> str:
        return " ".join(f"{v:.{self.precision}f}" for v in values)

    def format_frame(self, frame: ConFrame) -> str:
        """Render a frame as text."""
        header = frame.header
        lines = [
            header.prebox_header[0],
            header.prebox_header[1],
            self._format_floats(header.boxl),
            self._format_floats(header.angles),
            header.postbox_header[0],
            header.postbox_header[1],
            str(header.natm_types),
            " ".join(str(n) for n in header.natms_per_type),
            self._format_floats(header.masses_per_type),
        ]

        # Atom slices per type, in header order
        blocks = []
        start = 0
        for count in header.natms_per_type:
            blocks.append(frame.atom_data[start : start + count])
            start += count

        for index, atoms in enumerate(blocks, start=1):
            lines.append(atoms[0].symbol if atoms else "")
            lines.append(f"{COORDINATE_LABEL} {index}")
            for atom in atoms:
                lines.append(
                    f"{self._format_floats((atom.x, atom.y, atom.z))} "
                    f"{int(atom.is_fixed)} {atom.atom_id}"
                )

        if frame.has_velocities():
            lines.append("")
            for index, atoms in enumerate(blocks, start=1):
                lines.append(atoms[0].symbol if atoms else "")
                lines.append(f"{VELOCITY_LABEL} {index}")
                for atom in atoms:
                    lines.append(
                        f"{self._format_floats((atom.vx, atom.vy, atom.vz))} "
                        f"{int(atom.is_fixed)} {atom.atom_id}"
                    )

        return "\n".join(lines) + "\n"

    def write_frame(self, frame: ConFrame) -> None:
        """
        Write a single frame.

        Raises:
            RuntimeError: If the writer has been closed.
            OSError: If the sink fails.
        """
        if self.closed:
            raise RuntimeError("Writer is closed.")
        self._sink.write(self.format_frame(frame))
        self._n_frames += 1

    def close(self) -> None:
        """Flush output and close the sink if the writer owns it."""
        if not self.closed:
            logger.debug("Closing writer after %d frame(s)", self._n_frames)
        super().close()


def write_con(
    filename: str | Path,
    frames: Iterable[ConFrame],
    precision: int = DEFAULT_PRECISION,
) -> None:
    """Write frames to a ``.con`` or ``.convel`` file."""
    with ConFrameWriter.from_path(filename, precision=precision) as writer:
        writer.extend(frames)


def write_con_string(
    frames: Iterable[ConFrame],
    precision: int = DEFAULT_PRECISION,
) -> str:
    """Write frames to a string in ``.con`` / ``.convel`` format."""
    buffer = io.StringIO()
    with ConFrameWriter(buffer, precision=precision) as writer:
        writer.extend(frames)
    return buffer.getvalue()
