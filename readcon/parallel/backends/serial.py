"""In-thread backend."""

from __future__ import annotations

from .base import ParallelBackend


class SerialBackend(ParallelBackend):
    """
    Decodes frame ranges one after another in the calling thread.

    Used when no backend is requested. Its output is the reference the
    pooled backends must reproduce.
    """

    @property
    def name(self) -> str:
        return "serial"

    @property
    def n_workers(self) -> int:
        return 1
