"""I/O layer: parsing, iteration, file access and writing of frames."""

from .base import TrajectoryReader, TrajectoryWriter
from .content import (
    MMAP_THRESHOLD,
    FileContents,
    read_all_frames,
    read_con,
    read_con_string,
    read_first_frame,
)
from .cursor import LineCursor
from .iterators import ConFrameIterator, count_frames, index_frames, skip_frame
from .parser import (
    parse_atom_blocks,
    parse_frame,
    parse_frame_header,
    parse_line_of_n,
    parse_single_frame,
    parse_velocity_section,
)
from .trajectory import ConReader
from .writer import DEFAULT_PRECISION, ConFrameWriter, write_con, write_con_string

__all__ = [
    # Base classes
    "TrajectoryReader",
    "TrajectoryWriter",
    # Parsing
    "LineCursor",
    "parse_line_of_n",
    "parse_frame_header",
    "parse_atom_blocks",
    "parse_single_frame",
    "parse_velocity_section",
    "parse_frame",
    # Iteration
    "ConFrameIterator",
    "skip_frame",
    "index_frames",
    "count_frames",
    # Files
    "MMAP_THRESHOLD",
    "FileContents",
    "ConReader",
    "read_all_frames",
    "read_first_frame",
    "read_con",
    "read_con_string",
    # Writing
    "DEFAULT_PRECISION",
    "ConFrameWriter",
    "write_con",
    "write_con_string",
]
