"""
Line-level parsers for the ``.con`` / ``.convel`` text format.

A frame is a 9-line header followed by one coordinate block per atom
type and, when the next line is blank, a mirrored velocity section:

    prebox line 1
    prebox line 2
    Lx Ly Lz
    alpha beta gamma
    postbox line 1
    postbox line 2
    T
    count_1 ... count_T
    mass_1 ... mass_T
    symbol
    Coordinates of Component 1
    x y z fixed atom_id
    ...
    <blank>
    symbol
    Velocities of Component 1
    vx vy vz fixed atom_id
    ...
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import TypeVar

from ..errors import (
    IncompleteFrameError,
    IncompleteHeaderError,
    IncompleteVelocitySectionError,
    InvalidNumberFormatError,
    InvalidVectorLengthError,
)
from ..system.frame import AtomDatum, ConFrame, FrameHeader
from .cursor import LineCursor

T = TypeVar("T")

COORDINATE_LABEL = "Coordinates of Component"
VELOCITY_LABEL = "Velocities of Component"

# Header lines before the type count that carry no line-count information
HEADER_SKIP_LINES = 6
# Values on each coordinate or velocity line
VALUES_PER_ATOM_LINE = 5


def _plain(token: str) -> str:
    # int() and float() also take digit separators and non-ASCII digits
    if "_" in token or not token.isascii():
        raise ValueError(f"invalid literal: {token!r}")
    return token


def parse_count(token: str) -> int:
    """Convert a token to a non-negative integer."""
    value = int(token)
    if value < 0:
        raise ValueError(f"invalid count literal: {token!r}")
    return value


def parse_line_of_n(
    line: str,
    n: int,
    convert: Callable[[str], T] = float,
) -> list[T]:
    """
    Split a line on whitespace and convert exactly ``n`` tokens.

    Args:
        line: Line of text.
        n: Exact number of values expected.
        convert: Conversion applied to each token. Tokens holding
            underscores or non-ASCII characters are rejected first.

    Returns:
        Converted values.

    Raises:
        InvalidNumberFormatError: If a token fails to convert.
        InvalidVectorLengthError: If the line does not hold exactly n tokens.
    """
    try:
        values = [convert(_plain(token)) for token in line.split()]
    except ValueError as e:
        raise InvalidNumberFormatError(str(e)) from e

    if len(values) != n:
        raise InvalidVectorLengthError(expected=n, found=len(values))
    return values


def _require(lines: LineCursor, error: type[Exception]) -> str:
    line = lines.next()
    if line is None:
        raise error()
    return line


def parse_frame_header(lines: LineCursor) -> FrameHeader:
    """
    Consume the 9 header lines of a frame.

    Args:
        lines: Cursor positioned at the first header line.

    Returns:
        Parsed header; the cursor is left at the first coordinate block.

    Raises:
        IncompleteHeaderError: If the input ends within the header.
        InvalidVectorLengthError, InvalidNumberFormatError: On bad numeric lines.
    """
    prebox = (
        _require(lines, IncompleteHeaderError),
        _require(lines, IncompleteHeaderError),
    )
    boxl = parse_line_of_n(_require(lines, IncompleteHeaderError), 3)
    angles = parse_line_of_n(_require(lines, IncompleteHeaderError), 3)
    postbox = (
        _require(lines, IncompleteHeaderError),
        _require(lines, IncompleteHeaderError),
    )
    natm_types = parse_line_of_n(
        _require(lines, IncompleteHeaderError), 1, parse_count
    )[0]
    natms_per_type = parse_line_of_n(
        _require(lines, IncompleteHeaderError), natm_types, parse_count
    )
    masses_per_type = parse_line_of_n(
        _require(lines, IncompleteHeaderError), natm_types
    )

    return FrameHeader(
        prebox_header=prebox,
        boxl=tuple(boxl),
        angles=tuple(angles),
        postbox_header=postbox,
        natm_types=natm_types,
        natms_per_type=natms_per_type,
        masses_per_type=masses_per_type,
    )


def _atom_id(value: float) -> int:
    if not math.isfinite(value) or value < 0:
        raise InvalidNumberFormatError(f"atom id {value!r} is not a non-negative number")
    return int(value)


def parse_atom_blocks(lines: LineCursor, header: FrameHeader) -> list[AtomDatum]:
    """
    Consume one coordinate block per atom type.

    Each block is a symbol line, a label line (ignored) and one
    ``x y z fixed atom_id`` line per atom. The symbol string is created
    once per block and shared by all of its atoms.

    Raises:
        IncompleteFrameError: If the input ends before a block is complete.
        InvalidVectorLengthError, InvalidNumberFormatError: On bad atom lines.
    """
    atom_data: list[AtomDatum] = []

    for num_atoms in header.natms_per_type:
        symbol = _require(lines, IncompleteFrameError).strip()
        _require(lines, IncompleteFrameError)

        for _ in range(num_atoms):
            x, y, z, fixed, atom_id = parse_line_of_n(
                _require(lines, IncompleteFrameError), VALUES_PER_ATOM_LINE
            )
            atom_data.append(
                AtomDatum(
                    symbol=symbol,
                    x=x,
                    y=y,
                    z=z,
                    is_fixed=fixed != 0.0,
                    atom_id=_atom_id(atom_id),
                )
            )

    return atom_data


def parse_single_frame(lines: LineCursor) -> ConFrame:
    """
    Parse a frame header and its coordinate blocks.

    The velocity section, if any, is left unread; see
    :func:`parse_velocity_section`.
    """
    header = parse_frame_header(lines)
    atom_data = parse_atom_blocks(lines, header)
    return ConFrame(header=header, atom_data=atom_data)


def parse_velocity_section(
    lines: LineCursor,
    header: FrameHeader,
    atom_data: list[AtomDatum],
) -> bool:
    """
    Parse an optional velocity section into existing atoms.

    The section is present only if the next line is blank. Velocities are
    assigned positionally, in the order produced by the coordinate blocks;
    the trailing fixed flag and atom id on each line are ignored.

    Args:
        lines: Cursor positioned just after the coordinate blocks.
        header: Header of the frame being parsed.
        atom_data: Atoms to update in place.

    Returns:
        True if a velocity section was parsed, False if there was none.

    Raises:
        IncompleteVelocitySectionError: If the section ends early or a
            label line is not a velocity label.
        InvalidVectorLengthError, InvalidNumberFormatError: On bad lines.
    """
    separator = lines.peek()
    if separator is None or separator.strip():
        return False
    lines.advance()

    atom_index = 0
    for num_atoms in header.natms_per_type:
        _require(lines, IncompleteVelocitySectionError)
        label = _require(lines, IncompleteVelocitySectionError)
        if VELOCITY_LABEL not in label:
            raise IncompleteVelocitySectionError()

        for _ in range(num_atoms):
            vx, vy, vz, _fixed, _atom_id = parse_line_of_n(
                _require(lines, IncompleteVelocitySectionError),
                VALUES_PER_ATOM_LINE,
            )
            if atom_index < len(atom_data):
                atom = atom_data[atom_index]
                atom.vx, atom.vy, atom.vz = vx, vy, vz
            atom_index += 1

    return True


def parse_frame(lines: LineCursor) -> ConFrame:
    """Parse a full frame: header, coordinate blocks and optional velocities."""
    frame = parse_single_frame(lines)
    parse_velocity_section(lines, frame.header, frame.atom_data)
    return frame
