"""Error taxonomy for frame parsing and construction."""

from __future__ import annotations

from enum import Enum


class ParseErrorKind(Enum):
    """Closed set of parse failure kinds."""

    INCOMPLETE_HEADER = "incomplete_header"
    INCOMPLETE_FRAME = "incomplete_frame"
    INCOMPLETE_VELOCITY_SECTION = "incomplete_velocity_section"
    INVALID_VECTOR_LENGTH = "invalid_vector_length"
    INVALID_NUMBER_FORMAT = "invalid_number_format"


class ParseError(ValueError):
    """
    Base class for all parse failures.

    Never raised directly; catch it to handle every parse failure at once.
    Subclasses keep their constructor arguments as ``args`` so that
    instances pickle cleanly across process boundaries.
    """

    kind: ParseErrorKind

    def __str__(self) -> str:
        return self.message

    @property
    def message(self) -> str:
        """Stable, human-readable description of the failure."""
        return super().__str__()


class IncompleteHeaderError(ParseError):
    """Input ended before all 9 header lines were read."""

    kind = ParseErrorKind.INCOMPLETE_HEADER

    @property
    def message(self) -> str:
        return "file ended unexpectedly while parsing frame header"


class IncompleteFrameError(ParseError):
    """Input ended inside the coordinate section."""

    kind = ParseErrorKind.INCOMPLETE_FRAME

    @property
    def message(self) -> str:
        return "file ended unexpectedly while reading atom data"


class IncompleteVelocitySectionError(ParseError):
    """Input ended (or a label line was wrong) inside the velocity section."""

    kind = ParseErrorKind.INCOMPLETE_VELOCITY_SECTION

    @property
    def message(self) -> str:
        return "file ended unexpectedly while reading velocity section"


class InvalidVectorLengthError(ParseError):
    """
    A line carried the wrong number of values.

    Attributes:
        expected: Number of values the line should have held.
        found: Number of values actually present.
    """

    kind = ParseErrorKind.INVALID_VECTOR_LENGTH

    def __init__(self, expected: int, found: int) -> None:
        super().__init__(expected, found)
        self.expected = expected
        self.found = found

    @property
    def message(self) -> str:
        return f"expected {self.expected} values on line, found {self.found}"


class InvalidNumberFormatError(ParseError):
    """
    A token could not be converted to a number.

    Attributes:
        detail: Message of the underlying conversion failure.
    """

    kind = ParseErrorKind.INVALID_NUMBER_FORMAT

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    @property
    def message(self) -> str:
        return f"invalid number format: {self.detail}"


class BuilderError(RuntimeError):
    """Raised when a frame builder is used after it has been finalized."""
