"""Base interface for force providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, NamedTuple

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from ..parallel import ParallelBackend
    from ..system import PeriodicBox, SimulationState


class ForceResult(NamedTuple):
    """Forces and global sums from one force evaluation."""

    forces: NDArray[np.floating]
    potential_energy: float
    virial: float


class ForceProvider(ABC):
    """
    Abstract base class for force computation modules.

    A provider maps positions in a periodic box to per-atom forces plus
    the potential energy and virial of the configuration.
    """

    @abstractmethod
    def compute(
        self,
        positions: NDArray[np.floating],
        box: PeriodicBox,
        backend: ParallelBackend | None = None,
    ) -> ForceResult:
        """
        Compute forces, potential energy and virial.

        Args:
            positions: Atomic positions, shape (N, 3).
            box: Periodic simulation box.
            backend: Parallel backend; serial if omitted.

        Returns:
            ForceResult with forces of shape (N, 3).
        """
        ...

    def apply(
        self, state: SimulationState, backend: ParallelBackend | None = None
    ) -> ForceResult:
        """
        Evaluate forces for a state and store them on it.

        Overwrites state.forces in place and refreshes
        state.potential_energy and state.virial.

        Args:
            state: Simulation state to update.
            backend: Parallel backend; serial if omitted.

        Returns:
            The ForceResult that was stored.
        """
        result = self.compute(state.positions, state.box, backend)
        state.forces[...] = result.forces
        state.potential_energy = result.potential_energy
        state.virial = result.virial
        return result
