"""Cubic periodic simulation box."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from ..parallel import ParallelBackend


@dataclass(frozen=True)
class PeriodicBox:
    """
    Cubic box with periodic boundary conditions.

    The primary cell spans [0, length] along every axis.

    Attributes:
        length: Box side length (reduced units).
    """

    length: float

    def __post_init__(self) -> None:
        """Validate box length."""
        length = float(self.length)
        if not length > 0:
            raise ValueError(f"Box length must be positive, got {self.length}")
        object.__setattr__(self, "length", length)

    @property
    def volume(self) -> float:
        """Return box volume."""
        return self.length**3

    def image_shifts(self, n_images: int) -> NDArray[np.floating]:
        """
        Translation vectors of the periodic replicas.

        Args:
            n_images: Replicas per axis on each side of the primary cell.

        Returns:
            Array of shape ((2 * n_images + 1)^3, 3); the zero shift is at
            index len // 2.
        """
        if n_images < 0:
            raise ValueError(f"n_images must be non-negative, got {n_images}")
        offsets = np.arange(-n_images, n_images + 1, dtype=np.float64)
        grid = np.stack(np.meshgrid(offsets, offsets, offsets, indexing="ij"), axis=-1)
        return grid.reshape(-1, 3) * self.length

    def wrap(
        self,
        positions: NDArray[np.floating],
        previous_positions: NDArray[np.floating],
        backend: ParallelBackend | None = None,
    ) -> None:
        """
        Re-image atoms that left the primary cell, in place.

        Each coordinate above the box length is shifted down by one length
        and each negative coordinate is shifted up by one length. The same
        shift is applied to the previous position so that
        positions - previous_positions stays a one-step displacement.

        Args:
            positions: Current positions, shape (N, 3). Modified in place.
            previous_positions: Positions one step back, shape (N, 3).
                Modified in place.
            backend: Parallel backend; serial if omitted.
        """
        length = self.length

        def wrap_chunk(start: int, end: int) -> None:
            pos = positions[start:end]
            prev = previous_positions[start:end]
            shift = np.where(pos > length, -length, 0.0)
            shift += np.where(pos < 0.0, length, 0.0)
            pos += shift
            prev += shift

        if backend is None:
            wrap_chunk(0, len(positions))
        else:
            backend.parallel_for(wrap_chunk, len(positions))

    def contains(self, positions: NDArray[np.floating]) -> bool:
        """Check whether all positions lie in the primary cell."""
        positions = np.asarray(positions)
        return bool(np.all((positions >= 0.0) & (positions <= self.length)))
