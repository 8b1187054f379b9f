"""Thread pool backend."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from .base import ParallelBackend


class ThreadBackend(ParallelBackend):
    """
    Thread pool backend.

    Workers share the caller's memory, so a read-only mapped file can be
    handed to every task without copying. Useful when the mapped function
    releases the GIL or is dominated by I/O.
    """

    def __init__(self, n_workers: int | None = None) -> None:
        """
        Initialize thread backend.

        Args:
            n_workers: Number of threads. Defaults to CPU count.
        """
        self._n_workers = n_workers or os.cpu_count() or 1

    @property
    def name(self) -> str:
        """Return backend name."""
        return "threads"

    @property
    def n_workers(self) -> int:
        """Return number of parallel workers."""
        return self._n_workers

    def parallel_map(
        self,
        func: Callable[..., Any],
        items: Sequence[Any],
    ) -> list[Any]:
        """
        Apply function to items in parallel using a thread pool.

        Args:
            func: Function to apply.
            items: Items to process.

        Returns:
            Results for each item, in input order.
        """
        if len(items) == 0:
            return []

        with ThreadPoolExecutor(max_workers=self._n_workers) as executor:
            return list(executor.map(func, items))
