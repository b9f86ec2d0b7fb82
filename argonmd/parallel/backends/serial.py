"""Serial (single-thread) backend."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .base import ParallelBackend


class SerialBackend(ParallelBackend):
    """
    Serial backend for single-thread execution.

    This is the default backend and provides a reference implementation:
    the whole range is processed as a single chunk in the calling thread.
    """

    @property
    def name(self) -> str:
        """Return backend name."""
        return "serial"

    @property
    def n_workers(self) -> int:
        """Return number of parallel workers."""
        return 1

    def parallel_for(
        self,
        func: Callable[[int, int], Any],
        n_items: int,
    ) -> list[Any]:
        """Run func over the whole range in the calling thread."""
        return [func(start, end) for start, end in self.partition(n_items)]
