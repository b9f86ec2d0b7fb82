"""Abstract base class for parallel backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any

import numpy as np
from numpy.typing import NDArray


class ParallelBackend(ABC):
    """
    Abstract base class for parallelization backends.

    Every per-atom loop in the engine is a bulk-synchronous parallel-for:
    the atom range is split into contiguous chunks, each chunk is handed to
    exactly one worker, and the call returns only after all workers are
    done. Workers may write only to the rows of their own chunk; anything
    they need to accumulate is returned and combined with reduce_sum().
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return backend name."""
        ...

    @property
    @abstractmethod
    def n_workers(self) -> int:
        """Return number of parallel workers."""
        ...

    @abstractmethod
    def parallel_for(
        self,
        func: Callable[[int, int], Any],
        n_items: int,
    ) -> list[Any]:
        """
        Run func(start, end) over a partition of range(n_items).

        Args:
            func: Work function for one contiguous chunk.
            n_items: Number of items to partition.

        Returns:
            Per-chunk results, in chunk order. Returning is the barrier.
        """
        ...

    def close(self) -> None:
        """Release worker resources."""
        pass

    def __enter__(self) -> ParallelBackend:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def reduce_sum(self, partials: Sequence[Any]) -> NDArray[np.floating]:
        """
        Combine per-worker partial sums.

        The fold runs in chunk order, so the result for a fixed worker
        count is deterministic.

        Args:
            partials: Scalars or equally shaped arrays, one per chunk.

        Returns:
            Elementwise sum.
        """
        if len(partials) == 0:
            return np.zeros(0, dtype=np.float64)
        total = np.array(partials[0], dtype=np.float64, copy=True)
        for part in partials[1:]:
            total += np.asarray(part, dtype=np.float64)
        return total

    def partition(self, n_items: int) -> list[tuple[int, int]]:
        """
        Split range(n_items) into at most n_workers contiguous chunks.

        Args:
            n_items: Total number of items.

        Returns:
            List of (start_index, end_index) pairs, empty chunks omitted.
        """
        n_chunks = max(1, min(self.n_workers, n_items))
        items_per_chunk = n_items // n_chunks
        remainder = n_items % n_chunks

        chunks = []
        for rank in range(n_chunks):
            if rank < remainder:
                start = rank * (items_per_chunk + 1)
                end = start + items_per_chunk + 1
            else:
                start = rank * items_per_chunk + remainder
                end = start + items_per_chunk
            if end > start:
                chunks.append((start, end))

        return chunks
