"""Process pool backend."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from concurrent.futures import ProcessPoolExecutor
from typing import Any

from .base import ParallelBackend


class MultiprocessingBackend(ParallelBackend):
    """
    Decodes frames in worker processes, sidestepping the GIL.

    Workers cannot see the caller's buffer, so each frame's bytes are
    pickled to a worker and its frame (or parse error) pickled back.
    """

    def __init__(self, n_workers: int | None = None, chunksize: int = 1) -> None:
        """
        Initialize process pool backend.

        Args:
            n_workers: Worker processes. Defaults to the CPU count.
            chunksize: Frames handed to a worker at a time. Larger values
                cut pickling round trips for long trajectories of small
                frames.
        """
        self._n_workers = n_workers or os.cpu_count() or 1
        self._chunksize = chunksize

    @property
    def name(self) -> str:
        return "multiprocessing"

    @property
    def n_workers(self) -> int:
        return self._n_workers

    @property
    def shares_memory(self) -> bool:
        return False

    def parallel_map(
        self,
        func: Callable[..., Any],
        items: Sequence[Any],
    ) -> list[Any]:
        """
        Run ``func`` over ``items`` in a fresh process pool.

        ``func`` must be a module-level function; items and results must
        pickle.
        """
        if not items:
            return []

        with ProcessPoolExecutor(max_workers=self._n_workers) as pool:
            return list(pool.map(func, items, chunksize=self._chunksize))
