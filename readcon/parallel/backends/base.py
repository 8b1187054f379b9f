"""Interface shared by the frame-decoding backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any


class ParallelBackend(ABC):
    """
    Executes independent decode tasks and returns results in input order.

    Phase 2 of the splitter only needs an ordered map, so that is the
    whole contract. Whatever order tasks finish in, result ``i`` belongs
    to item ``i``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name of the backend."""
        ...

    @property
    @abstractmethod
    def n_workers(self) -> int:
        """Number of tasks that may run at once."""
        ...

    @property
    def shares_memory(self) -> bool:
        """Whether tasks can read the caller's buffer without a copy."""
        return True

    def parallel_map(
        self,
        func: Callable[..., Any],
        items: Sequence[Any],
    ) -> list[Any]:
        """
        Call ``func`` on every item and collect the results in order.

        The base version runs in the calling thread.
        """
        return [func(item) for item in items]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(n_workers={self.n_workers})"
