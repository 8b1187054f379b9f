"""
readcon - Reader and writer for ``.con`` / ``.convel`` atomistic trajectories.

A ``.con`` file holds one or more frames, each a 9-line header (cell,
angles, atom types, counts and masses) followed by per-type coordinate
blocks. ``.convel`` frames add a velocity section after a blank line.

Quick Start:
    >>> import readcon
    >>> frames = readcon.read_con("trajectory.con")
    >>> print(frames[0].natoms, frames[0].has_velocities())
    >>> readcon.write_con("copy.con", frames, precision=17)
"""

__version__ = "0.1.0"

from .errors import (
    BuilderError,
    IncompleteFrameError,
    IncompleteHeaderError,
    IncompleteVelocitySectionError,
    InvalidNumberFormatError,
    InvalidVectorLengthError,
    ParseError,
    ParseErrorKind,
)
from .io import (
    ConFrameIterator,
    ConFrameWriter,
    ConReader,
    count_frames,
    read_all_frames,
    read_con,
    read_con_string,
    read_first_frame,
    write_con,
    write_con_string,
)
from .system import AtomDatum, ConFrame, ConFrameBuilder, FrameHeader

__all__ = [
    # Data model
    "AtomDatum",
    "ConFrame",
    "ConFrameBuilder",
    "FrameHeader",
    # Reading
    "ConFrameIterator",
    "ConReader",
    "count_frames",
    "read_all_frames",
    "read_con",
    "read_con_string",
    "read_first_frame",
    # Writing
    "ConFrameWriter",
    "write_con",
    "write_con_string",
    # Errors
    "ParseError",
    "ParseErrorKind",
    "IncompleteHeaderError",
    "IncompleteFrameError",
    "IncompleteVelocitySectionError",
    "InvalidVectorLengthError",
    "InvalidNumberFormatError",
    "BuilderError",
]
