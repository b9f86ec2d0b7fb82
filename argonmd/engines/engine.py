"""Argon MD simulation controller."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import numpy as np

from .. import constants
from ..config import Ensemble, SimulationConfig
from ..forcefields import LennardJonesForce
from ..integrators import EulerVerletIntegrator, WoodcockThermostat
from ..parallel import ParallelBackend, get_backend
from ..rng import NumpyUniformSource, UniformSource
from ..system import (
    Particles,
    SimulationState,
    fcc_positions,
    random_velocities,
    scaled_lattice_constant,
)
from .reporters import Reporter, ReporterGroup

if TYPE_CHECKING:
    from ..forcefields import ForceProvider
    from ..integrators import Integrator

logger = logging.getLogger(__name__)


class ArgonSimulation:
    """
    Molecular dynamics of an FCC argon crystal in a periodic cube.

    Owns the simulation state and drives the per-step pipeline:
    force evaluation, integration with thermostat, periodic wrap. All
    internal quantities are reduced; the public observables are converted
    to laboratory units (K, Hartree, atm, nm, ps).

    Example usage:
        sim = ArgonSimulation(SimulationConfig(n_cells=4, temperature=50.0))
        sim.add_reporter(StateReporter(frequency=100))
        sim.run(n_steps=1000)
        print(sim.temperature, sim.pressure)

    Attributes:
        state: Current simulation state.
        integrator: Time integration algorithm.
        force_provider: Force computation module.
        backend: Parallel backend for per-atom loops.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        rng: UniformSource | None = None,
        backend: ParallelBackend | str | None = None,
        force_provider: ForceProvider | None = None,
        integrator: Integrator | None = None,
    ) -> None:
        """
        Initialize the simulation and build the initial crystal.

        Args:
            config: Simulation parameters; defaults if omitted.
            rng: Uniform random source for initial velocities. A fresh
                NumPy-backed source is used if omitted.
            backend: Parallel backend instance or name ("serial",
                "threads"). Backends created from a name are owned and
                closed by close().
            force_provider: Force module; truncated LJ from the config if
                omitted.
            integrator: Integrator; Euler/Verlet with a Woodcock
                thermostat from the config if omitted.
        """
        self._config = config if config is not None else SimulationConfig()
        self._rng = rng if rng is not None else NumpyUniformSource()
        self._owns_backend = isinstance(backend, str)
        self._backend = get_backend(backend)

        self._force_provider = (
            force_provider
            if force_provider is not None
            else LennardJonesForce(self._config.cutoff, self._config.n_images)
        )
        self._integrator = (
            integrator
            if integrator is not None
            else EulerVerletIntegrator(
                self._config.dt, WoodcockThermostat(self._config.alpha)
            )
        )

        self._state = SimulationState.create(
            n_cells=self._config.n_cells,
            lattice_scale=self._config.lattice_scale,
            lattice_constant=scaled_lattice_constant(self._config.lattice_scale),
            target_temperature=constants.kelvin_to_reduced(self._config.temperature),
            ensemble=self._config.ensemble,
        )

        self._reporters = ReporterGroup()

        # Tracking
        self._running = False
        self._total_steps = 0
        self._wall_time = 0.0

        self.recalc()

    def __enter__(self) -> ArgonSimulation:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the backend if this simulation created it."""
        if self._owns_backend:
            self._backend.close()

    # ------------------------------------------------------------------
    # Components

    @property
    def state(self) -> SimulationState:
        """Return current simulation state."""
        return self._state

    @property
    def config(self) -> SimulationConfig:
        """Return the construction parameters."""
        return self._config

    @property
    def integrator(self) -> Integrator:
        """Return integrator."""
        return self._integrator

    @property
    def force_provider(self) -> ForceProvider:
        """Return force provider."""
        return self._force_provider

    @property
    def backend(self) -> ParallelBackend:
        """Return parallel backend."""
        return self._backend

    # ------------------------------------------------------------------
    # Observables

    @property
    def step(self) -> int:
        """Index of the next step (1 before the first step)."""
        return self._state.step

    @property
    def n_atoms(self) -> int:
        """Return number of atoms."""
        return self._state.n_atoms

    @property
    def n_cells(self) -> int:
        """Return FCC unit cells per box side."""
        return self._state.n_cells

    @property
    def lattice_scale(self) -> float:
        """Return the lattice constant scale factor."""
        return self._state.lattice_scale

    @property
    def ensemble(self) -> Ensemble:
        """Return the ensemble."""
        return self._state.ensemble

    @property
    def atoms(self) -> Particles:
        """Return read-only views of positions, velocities and forces."""
        return self._state.particles()

    @property
    def elapsed_time(self) -> float:
        """Simulated time in ps."""
        return constants.reduced_to_picoseconds(self._state.time)

    @property
    def lattice_constant(self) -> float:
        """Lattice constant in nm."""
        return constants.reduced_to_nanometers(self._state.lattice_constant)

    @property
    def periodic_length(self) -> float:
        """Box side length in nm."""
        return constants.reduced_to_nanometers(self._state.periodic_length)

    @property
    def pressure(self) -> float:
        """Instantaneous virial pressure in atm."""
        return constants.reduced_pressure_to_atm(
            self._state.n_atoms,
            self._state.temperature,
            self._state.virial,
            self._state.periodic_length,
        )

    @property
    def temperature(self) -> float:
        """Kinetic temperature in K."""
        return constants.reduced_to_kelvin(self._state.temperature)

    @property
    def target_temperature(self) -> float:
        """Thermostat target temperature in K."""
        return constants.reduced_to_kelvin(self._state.target_temperature)

    @property
    def kinetic_energy(self) -> float:
        """Kinetic energy in Hartree."""
        return constants.reduced_to_hartree(self._state.kinetic_energy)

    @property
    def potential_energy(self) -> float:
        """Potential energy in Hartree."""
        return constants.reduced_to_hartree(self._state.potential_energy)

    @property
    def total_energy(self) -> float:
        """Total energy in Hartree."""
        return constants.reduced_to_hartree(self._state.total_energy)

    def force_magnitude(self, index: int) -> float:
        """
        Magnitude of the force on one atom (reduced units).

        Args:
            index: Atom index in [0, n_atoms).

        Returns:
            Euclidean norm of the force vector.
        """
        if not 0 <= index < self._state.n_atoms:
            raise IndexError(
                f"Atom index {index} out of range [0, {self._state.n_atoms})"
            )
        return float(np.linalg.norm(self._state.forces[index]))

    def observables(self) -> dict[str, Any]:
        """Return the current observables in laboratory units."""
        return {
            "step": self._state.step - 1,
            "time": self.elapsed_time,
            "temperature": self.temperature,
            "kinetic_energy": self.kinetic_energy,
            "potential_energy": self.potential_energy,
            "total_energy": self.total_energy,
            "pressure": self.pressure,
        }

    @property
    def performance(self) -> dict[str, float]:
        """Return performance statistics."""
        if self._wall_time == 0:
            return {"ns_per_day": 0.0, "steps_per_second": 0.0}

        steps_per_second = self._total_steps / self._wall_time
        ps_per_step = constants.reduced_to_picoseconds(self._integrator.timestep)
        ns_per_day = steps_per_second * ps_per_step * 86400 / 1000.0

        return {
            "ns_per_day": ns_per_day,
            "steps_per_second": steps_per_second,
            "wall_time": self._wall_time,
            "total_steps": self._total_steps,
        }

    # ------------------------------------------------------------------
    # Mutators

    def set_n_cells(self, n_cells: int) -> None:
        """
        Change the crystal size and restart from a fresh lattice.

        Args:
            n_cells: FCC unit cells per box side (N = 4 * n_cells^3).
        """
        if int(n_cells) != n_cells or n_cells < 1:
            raise ValueError(f"n_cells must be a positive integer, got {n_cells}")

        self._state.resize(int(n_cells))
        self._modify_lattice()

    def set_lattice_scale(self, lattice_scale: float) -> None:
        """
        Change the lattice constant scale and restart from a fresh lattice.

        Args:
            lattice_scale: Multiplier on the base lattice constant.
        """
        if not lattice_scale > 0:
            raise ValueError(f"lattice_scale must be positive, got {lattice_scale}")

        self._state.lattice_scale = float(lattice_scale)
        self._modify_lattice()

    def set_temperature(self, temperature: float) -> None:
        """
        Change the thermostat target without restarting.

        Args:
            temperature: Target temperature in K.
        """
        if not temperature > 0:
            raise ValueError(f"temperature must be positive, got {temperature}")

        self._state.target_temperature = constants.kelvin_to_reduced(temperature)
        logger.info("Target temperature set to %.2f K", temperature)

    def set_ensemble(self, ensemble: Ensemble | str) -> None:
        """
        Switch between NVE and NVT and restart from a fresh lattice.

        Args:
            ensemble: Ensemble member or name.
        """
        self._state.ensemble = Ensemble.parse(ensemble)
        self.recalc()

    def _modify_lattice(self) -> None:
        """Recompute the lattice constant (and thus the box) and restart."""
        self._state.lattice_constant = scaled_lattice_constant(self._state.lattice_scale)
        self.recalc()

    def recalc(self) -> None:
        """
        Restart the run: fresh FCC positions and random velocities.

        Resets the step counter to 1 and the clock to zero. Forces are
        cleared until the next step evaluates them.
        """
        state = self._state
        state.step = 1
        state.time = 0.0

        state.positions[...] = fcc_positions(state.n_cells, state.lattice_constant)
        state.previous_positions[...] = state.positions
        state.velocities[...] = random_velocities(
            state.n_atoms, state.target_temperature, self._rng
        )
        state.forces[...] = 0.0
        state.potential_energy = 0.0
        state.virial = 0.0
        state.measure_kinetic()

        logger.info(
            "Initialized %d atoms (%d cells/side, L=%.4f, %s)",
            state.n_atoms,
            state.n_cells,
            state.periodic_length,
            state.ensemble.name,
        )

    # ------------------------------------------------------------------
    # Running

    def add_reporter(self, reporter: Reporter) -> None:
        """Add a reporter."""
        self._reporters.add(reporter)

    def remove_reporter(self, reporter: Reporter) -> None:
        """Remove a reporter."""
        self._reporters.remove(reporter)

    def run_step(self) -> None:
        """
        Perform a single simulation step.

        1. Evaluate forces, potential energy and virial
        2. Integrate (with thermostat) and advance the clock
        3. Wrap atoms back into the primary cell
        4. Report
        """
        state = self._state
        self._force_provider.apply(state, self._backend)
        self._integrator.step(state, self._backend)
        state.box.wrap(state.positions, state.previous_positions, self._backend)

        if len(self._reporters) > 0:
            self._reporters.report(state, **self.observables())

    def run(
        self,
        n_steps: int,
        callback: Callable[[ArgonSimulation], bool] | None = None,
    ) -> SimulationState:
        """
        Run simulation for specified number of steps.

        Args:
            n_steps: Number of steps to run.
            callback: Optional callback called each step.
                     Return True to stop simulation early.

        Returns:
            Final simulation state.
        """
        self._running = True
        self._reporters.initialize(self._state)
        logger.info("Running %d steps from step %d", n_steps, self._state.step)

        start_time = time.perf_counter()

        try:
            for _ in range(n_steps):
                if not self._running:
                    break

                self.run_step()
                self._total_steps += 1

                if callback is not None and callback(self):
                    break
        finally:
            self._wall_time += time.perf_counter() - start_time
            self._reporters.finalize(self._state)
            self._running = False

        logger.info(
            "Finished at step %d: T=%.2f K, E=%.6e Eh",
            self._state.step - 1,
            self.temperature,
            self.total_energy,
        )
        return self._state

    def stop(self) -> None:
        """Signal simulation to stop."""
        self._running = False
