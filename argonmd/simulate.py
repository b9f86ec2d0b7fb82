"""
Simple high-level simulation API.

This module provides a user-friendly interface for running the argon
crystal simulation with minimal configuration.

Example:
    >>> from argonmd import simulate
    >>> result = simulate.argon(n_cells=3, temperature=50.0, n_steps=500)
    >>> print(result.mean_temperature)
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from . import constants
from .config import Ensemble, SimulationConfig
from .engines import ArgonSimulation, EnergyReporter
from .parallel import create_backend
from .rng import NumpyUniformSource


@dataclass
class SimulationResult:
    """Results from a simulation run (laboratory units)."""

    # Time series, one entry per completed step
    steps: NDArray[np.integer] = field(default_factory=lambda: np.array([], dtype=np.int64))
    times: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    kinetic_energy: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    potential_energy: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    total_energy: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    temperature: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    pressure: NDArray[np.floating] = field(default_factory=lambda: np.array([]))

    # Final configuration (nm)
    positions: NDArray[np.floating] = field(default_factory=lambda: np.array([]))

    # Summary statistics
    mean_temperature: float = 0.0
    mean_pressure: float = 0.0
    mean_potential_energy: float = 0.0
    mean_kinetic_energy: float = 0.0
    energy_drift: float = 0.0
    energy_fluctuation: float = 0.0

    # Metadata
    n_atoms: int = 0
    n_steps: int = 0
    timestep: float = 0.0
    box_size: float = 0.0
    target_temperature: float = 0.0
    ensemble: str = ""


def _relative_drift(total: NDArray[np.floating]) -> float:
    if len(total) < 2 or total[0] == 0:
        return 0.0
    return float((total[-1] - total[0]) / abs(total[0]))


def _relative_fluctuation(total: NDArray[np.floating]) -> float:
    if len(total) == 0:
        return 0.0
    mean = np.mean(total)
    if mean == 0:
        return 0.0
    return float(np.std(total) / abs(mean))


def argon(
    n_cells: int = 4,
    temperature: float = 50.0,
    lattice_scale: float = 1.0,
    ensemble: Ensemble | str = "NVT",
    n_steps: int = 1000,
    seed: int | None = 42,
    n_workers: int | None = None,
    verbose: bool = True,
) -> SimulationResult:
    """
    Run an FCC argon crystal simulation.

    Builds N = 4 * n_cells^3 atoms on an FCC lattice, draws velocities at
    the target temperature and integrates with Euler/Verlet under the
    truncated Lennard-Jones potential.

    Args:
        n_cells: FCC unit cells per box side (default: 4, i.e. 256 atoms).
        temperature: Target temperature in K (default: 50.0).
        lattice_scale: Multiplier on the lattice constant (default: 1.0).
        ensemble: "NVE" or "NVT" (default: "NVT").
        n_steps: Number of steps (default: 1000).
        seed: Random seed for reproducibility (default: 42).
        n_workers: Worker threads for the per-atom loops; serial if
            None or 1 (default: None).
        verbose: Print progress (default: True).

    Returns:
        SimulationResult with time series and summary statistics.

    Example:
        >>> result = argon(n_cells=3, ensemble="NVE", n_steps=200)
        >>> print(f"Energy drift: {result.energy_drift:.2e}")
    """
    config = SimulationConfig(
        n_cells=n_cells,
        lattice_scale=lattice_scale,
        temperature=temperature,
        ensemble=Ensemble.parse(ensemble),
    )
    if n_workers is not None and n_workers > 1:
        backend = create_backend("threads", n_workers=n_workers)
    else:
        backend = create_backend("serial")

    energies = EnergyReporter(frequency=1)

    with backend:
        sim = ArgonSimulation(
            config, rng=NumpyUniformSource(seed), backend=backend
        )
        sim.add_reporter(energies)

        if verbose:
            print(
                f"Argon FCC: N={sim.n_atoms}, L={sim.periodic_length:.4f} nm, "
                f"T={temperature} K, {config.ensemble.name}"
            )
            print(f"Running {n_steps} steps...", end=" ", flush=True)

        sim.run(n_steps)

        if verbose:
            print("done")

        positions_nm = constants.reduced_to_nanometers(sim.atoms.positions)

    total = energies.total_energy
    temp_arr = energies.temperature
    pressure_arr = energies.pressure

    result = SimulationResult(
        steps=energies.steps,
        times=energies.times,
        kinetic_energy=energies.kinetic_energy,
        potential_energy=energies.potential_energy,
        total_energy=total,
        temperature=temp_arr,
        pressure=pressure_arr,
        positions=np.array(positions_nm),
        mean_temperature=float(np.mean(temp_arr)) if len(temp_arr) else 0.0,
        mean_pressure=float(np.mean(pressure_arr)) if len(pressure_arr) else 0.0,
        mean_potential_energy=(
            float(np.mean(energies.potential_energy)) if len(total) else 0.0
        ),
        mean_kinetic_energy=(
            float(np.mean(energies.kinetic_energy)) if len(total) else 0.0
        ),
        energy_drift=_relative_drift(total),
        energy_fluctuation=_relative_fluctuation(total),
        n_atoms=sim.n_atoms,
        n_steps=n_steps,
        timestep=constants.reduced_to_picoseconds(config.dt),
        box_size=sim.periodic_length,
        target_temperature=temperature,
        ensemble=config.ensemble.name,
    )

    if verbose:
        print("\nResults:")
        print(f"  Mean T: {result.mean_temperature:.2f} K")
        print(f"  Mean P: {result.mean_pressure:.2f} atm")
        print(f"  Energy drift: {result.energy_drift:.2e}")
        print(f"  Energy fluctuation: {result.energy_fluctuation:.2e}")

    return result
