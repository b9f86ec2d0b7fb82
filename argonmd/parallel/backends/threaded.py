"""Thread pool backend for shared-memory parallelism."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from .base import ParallelBackend

logger = logging.getLogger(__name__)


class ThreadPoolBackend(ParallelBackend):
    """
    Fixed pool of worker threads.

    The per-chunk kernels are NumPy array expressions, which release the
    GIL for the bulk of their work, so threads share the particle arrays
    without copying. The pool is created once and reused for every
    parallel-for until close() is called.
    """

    def __init__(self, n_workers: int | None = None) -> None:
        """
        Initialize thread pool backend.

        Args:
            n_workers: Number of worker threads. Defaults to CPU count.
        """
        n_workers = n_workers or os.cpu_count() or 1
        if n_workers < 1:
            raise ValueError(f"n_workers must be positive, got {n_workers}")

        self._n_workers = n_workers
        self._executor: ThreadPoolExecutor | None = ThreadPoolExecutor(
            max_workers=n_workers, thread_name_prefix="argonmd"
        )
        logger.debug("Started thread pool with %d workers", n_workers)

    @property
    def name(self) -> str:
        """Return backend name."""
        return "threads"

    @property
    def n_workers(self) -> int:
        """Return number of parallel workers."""
        return self._n_workers

    @property
    def closed(self) -> bool:
        """Check whether the pool has been shut down."""
        return self._executor is None

    def parallel_for(
        self,
        func: Callable[[int, int], Any],
        n_items: int,
    ) -> list[Any]:
        """
        Run func over each chunk on the pool and wait for all of them.

        Args:
            func: Work function for one contiguous chunk.
            n_items: Number of items to partition.

        Returns:
            Per-chunk results, in chunk order.

        Raises:
            RuntimeError: If the pool has been closed.
        """
        if self._executor is None:
            raise RuntimeError("Thread pool backend has been closed")

        chunks = self.partition(n_items)
        if len(chunks) == 1:
            start, end = chunks[0]
            return [func(start, end)]

        futures = [self._executor.submit(func, start, end) for start, end in chunks]
        return [future.result() for future in futures]

    def close(self) -> None:
        """Shut down the worker threads."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
            logger.debug("Thread pool shut down")
