"""Parallel frame decoding on pluggable backends."""

from .backends.base import ParallelBackend
from .backends.serial import SerialBackend
from .dispatcher import get_backend, reset_default_backend, set_default_backend
from .splitter import (
    decode_frames,
    decode_ranges,
    read_all_frames_parallel,
    read_frames_parallel,
)

__all__ = [
    "ParallelBackend",
    "SerialBackend",
    "decode_frames",
    "decode_ranges",
    "get_backend",
    "read_all_frames_parallel",
    "read_frames_parallel",
    "reset_default_backend",
    "set_default_backend",
]
