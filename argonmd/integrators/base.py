"""Base interface for integrators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..parallel import ParallelBackend
    from ..system import SimulationState


class Integrator(ABC):
    """
    Abstract base class for time integration algorithms.

    Integrators advance the system state in place by one time step given
    the forces already stored on it.
    """

    @abstractmethod
    def step(
        self, state: SimulationState, backend: ParallelBackend | None = None
    ) -> None:
        """
        Advance the system by one time step.

        Args:
            state: Current state with up-to-date forces. Modified in place.
            backend: Parallel backend for the per-atom update.
        """
        ...

    @property
    @abstractmethod
    def timestep(self) -> float:
        """Return the integration timestep."""
        ...


class ThermostatModifier(ABC):
    """
    Abstract base class for velocity-scaling thermostats.

    A thermostat turns the current and target temperatures into the
    factor by which the integrator scales velocities.
    """

    @abstractmethod
    def scale_factor(self, temperature: float, target_temperature: float) -> float:
        """
        Compute the velocity scaling factor.

        Args:
            temperature: Current kinetic temperature.
            target_temperature: Temperature to steer toward.

        Returns:
            Multiplicative factor for velocities.
        """
        ...
