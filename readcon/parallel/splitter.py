"""
Data-parallel frame decoding.

Decoding runs in two phases. First the file is scanned sequentially with
the header-only skip path to find the byte range of every frame. Then
each range is decoded independently on a parallel backend. Ranges never
overlap and tasks share no mutable state; results come back in file
order whichever task finishes first, and a frame that fails to parse
yields its error at its own index without affecting the others.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Sequence
from pathlib import Path

from ..errors import ParseError
from ..io.content import MMAP_THRESHOLD, FileContents
from ..io.cursor import Buffer, LineCursor
from ..io.iterators import index_frames
from ..io.parser import parse_frame
from ..system.frame import ConFrame
from .backends.base import ParallelBackend
from .dispatcher import BackendType, get_backend

logger = logging.getLogger(__name__)

FrameResult = ConFrame | ParseError


def decode_frame(chunk: bytes) -> FrameResult:
    """Decode one frame from its own bytes, returning any parse error."""
    try:
        return parse_frame(LineCursor(chunk))
    except ParseError as e:
        return e


def decode_range(buffer: Buffer, bounds: tuple[int, int]) -> FrameResult:
    """Decode one frame from a byte range of a shared buffer."""
    start, end = bounds
    try:
        return parse_frame(LineCursor(buffer, start=start, end=end))
    except ParseError as e:
        return e


def decode_ranges(
    buffer: str | Buffer,
    ranges: Sequence[tuple[int, int]],
    backend: BackendType | ParallelBackend | None = None,
) -> list[FrameResult]:
    """
    Decode frame byte ranges on a parallel backend.

    Backends that share memory read straight from ``buffer``; process
    backends receive a copy of each range.

    Args:
        buffer: File bytes, read or memory-mapped. Text is encoded as
            UTF-8 first, since the ranges are byte offsets.
        ranges: ``(start, end)`` byte offsets, as from :func:`index_frames`.
        backend: Backend name or instance; the default backend if None.

    Returns:
        One frame or parse error per range, in range order.
    """
    if isinstance(buffer, str):
        buffer = buffer.encode("utf-8")
    backend = get_backend(backend)
    logger.debug("Decoding %d frame(s) on %r", len(ranges), backend)

    if backend.shares_memory:
        return backend.parallel_map(functools.partial(decode_range, buffer), ranges)
    chunks = [bytes(buffer[start:end]) for start, end in ranges]
    return backend.parallel_map(decode_frame, chunks)


def decode_frames(
    buffer: str | Buffer,
    backend: BackendType | ParallelBackend | None = None,
) -> list[FrameResult]:
    """Index a buffer or text and decode all of its frames in parallel."""
    if isinstance(buffer, str):
        buffer = buffer.encode("utf-8")
    return decode_ranges(buffer, index_frames(buffer), backend=backend)


def read_frames_parallel(
    filename: str | Path,
    backend: BackendType | ParallelBackend | None = None,
    threshold: int = MMAP_THRESHOLD,
) -> list[FrameResult]:
    """
    Decode every frame of a file in parallel.

    Args:
        filename: Path to a ``.con`` or ``.convel`` file.
        backend: Backend name or instance; the default backend if None.
        threshold: Size in bytes from which the file is memory-mapped.

    Returns:
        One frame or parse error per frame, in file order.
    """
    with FileContents(filename, threshold=threshold) as contents:
        return decode_frames(contents.data, backend=backend)


def read_all_frames_parallel(
    filename: str | Path,
    backend: BackendType | ParallelBackend | None = None,
    threshold: int = MMAP_THRESHOLD,
) -> list[ConFrame]:
    """
    Read every frame of a file in parallel.

    Raises:
        ParseError: The error of the first malformed frame, in file order.
    """
    results = read_frames_parallel(filename, backend=backend, threshold=threshold)
    for result in results:
        if isinstance(result, ParseError):
            raise result
    return results
