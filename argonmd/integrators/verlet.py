"""Euler-bootstrapped position Verlet integrator."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..config import Ensemble
from ..constants import DT
from .base import Integrator, ThermostatModifier
from .thermostats import WoodcockThermostat

if TYPE_CHECKING:
    from ..parallel import ParallelBackend
    from ..system import SimulationState

logger = logging.getLogger(__name__)


class EulerVerletIntegrator(Integrator):
    """
    Position Verlet integrator started with one second-order Euler step.

    Algorithm (unit masses, F = a):
        step 1:  r_prev = r
                 v = s * v
                 r = r + dt * v + 0.5 * dt^2 * F
                 v = v + dt * F
        step n:  NVE: r_new = 2 r - r_prev + F dt^2
                 NVT: r_new = r + s (r - r_prev) + F dt^2
                 v = (r_new - r_prev) / (2 dt)
                 r_prev = r

    In NVT the displacement term of the Verlet update is scaled by the
    thermostat factor s, which is equivalent to rescaling the velocity.
    The kinetic energy and temperature are measured from the velocities
    held at the start of the step.

    Attributes:
        dt: Integration timestep.
        thermostat: Source of the velocity scaling factor.
    """

    def __init__(
        self, dt: float = DT, thermostat: ThermostatModifier | None = None
    ) -> None:
        """
        Initialize the integrator.

        Args:
            dt: Integration timestep (reduced units).
            thermostat: Thermostat; Woodcock with the default alpha if omitted.
        """
        if not dt > 0:
            raise ValueError(f"dt must be positive, got {dt}")
        self._dt = dt
        self.thermostat = thermostat if thermostat is not None else WoodcockThermostat()

    @property
    def timestep(self) -> float:
        """Return the integration timestep."""
        return self._dt

    def step(
        self, state: SimulationState, backend: ParallelBackend | None = None
    ) -> None:
        """
        Advance the state by one step in place.

        Args:
            state: State with forces for the current positions.
            backend: Parallel backend for the per-atom update.

        Raises:
            AssertionError: If the state carries an unknown ensemble.
            FloatingPointError: If velocities must be rescaled from a
                vanishing temperature.
        """
        state.measure_kinetic()

        if state.step == 1:
            scale = self._scale(state)
            kernel = self._bootstrap_kernel(state, scale)
        elif state.ensemble is Ensemble.NVE:
            kernel = self._nve_kernel(state)
        elif state.ensemble is Ensemble.NVT:
            kernel = self._nvt_kernel(state, self._scale(state))
        else:
            raise AssertionError(
                f"Unknown ensemble reached the integrator: {state.ensemble!r}"
            )

        if backend is None:
            kernel(0, state.n_atoms)
        else:
            backend.parallel_for(kernel, state.n_atoms)

        state.time = state.step * self._dt
        state.step += 1

        logger.debug(
            "step=%d T=%.6f KE=%.6f PE=%.6f",
            state.step - 1,
            state.temperature,
            state.kinetic_energy,
            state.potential_energy,
        )

    def _scale(self, state: SimulationState) -> float:
        return self.thermostat.scale_factor(state.temperature, state.target_temperature)

    def _bootstrap_kernel(
        self, state: SimulationState, scale: float
    ) -> Callable[[int, int], None]:
        dt = self._dt
        positions = state.positions
        previous = state.previous_positions
        velocities = state.velocities
        forces = state.forces

        def kernel(start: int, end: int) -> None:
            r = positions[start:end]
            v = velocities[start:end]
            f = forces[start:end]
            previous[start:end] = r
            v *= scale
            r += dt * v + 0.5 * dt * dt * f
            v += dt * f

        return kernel

    def _nve_kernel(self, state: SimulationState) -> Callable[[int, int], None]:
        dt = self._dt
        positions = state.positions
        previous = state.previous_positions
        velocities = state.velocities
        forces = state.forces

        def kernel(start: int, end: int) -> None:
            r = positions[start:end]
            r_prev = previous[start:end]
            r_old = r.copy()
            r[...] = 2.0 * r - r_prev + forces[start:end] * (dt * dt)
            velocities[start:end] = 0.5 * (r - r_prev) / dt
            r_prev[...] = r_old

        return kernel

    def _nvt_kernel(
        self, state: SimulationState, scale: float
    ) -> Callable[[int, int], None]:
        dt = self._dt
        positions = state.positions
        previous = state.previous_positions
        velocities = state.velocities
        forces = state.forces

        def kernel(start: int, end: int) -> None:
            r = positions[start:end]
            r_prev = previous[start:end]
            r_old = r.copy()
            r += scale * (r - r_prev) + forces[start:end] * (dt * dt)
            velocities[start:end] = 0.5 * (r - r_prev) / dt
            r_prev[...] = r_old

        return kernel
