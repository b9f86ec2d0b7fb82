"""MD system state representation."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..config import Ensemble
from .box import PeriodicBox


@dataclass
class SimulationState:
    """
    Single source of truth for the argon system.

    Per-atom data is stored as parallel (N, 3) float64 arrays. Scalar
    observables are in reduced units and are refreshed by the force
    evaluator (potential energy, virial) and the integrator (kinetic
    energy, temperature, total energy).

    Attributes:
        positions: Current positions, shape (N, 3).
        previous_positions: Positions one step back, shape (N, 3).
        velocities: Velocities, shape (N, 3).
        forces: Forces from the last evaluation, shape (N, 3).
        n_cells: FCC unit cells per box side.
        lattice_scale: Multiplier on the base lattice constant.
        lattice_constant: FCC lattice constant.
        target_temperature: Thermostat target temperature.
        ensemble: NVE or NVT.
        step: Index of the next step; 1 means the Euler bootstrap is next.
        time: Elapsed simulated time.
        temperature: Last computed kinetic temperature.
        kinetic_energy: Last computed kinetic energy.
        potential_energy: Last computed potential energy.
        total_energy: Last computed total energy.
        virial: Last computed virial sum.
    """

    positions: NDArray[np.floating]
    previous_positions: NDArray[np.floating]
    velocities: NDArray[np.floating]
    forces: NDArray[np.floating]
    n_cells: int
    lattice_scale: float
    lattice_constant: float
    target_temperature: float
    ensemble: Ensemble = Ensemble.NVT
    step: int = 1
    time: float = 0.0
    temperature: float = 0.0
    kinetic_energy: float = 0.0
    potential_energy: float = 0.0
    total_energy: float = 0.0
    virial: float = 0.0

    def __post_init__(self) -> None:
        """Validate and convert arrays."""
        self.positions = np.asarray(self.positions, dtype=np.float64)
        self.previous_positions = np.asarray(self.previous_positions, dtype=np.float64)
        self.velocities = np.asarray(self.velocities, dtype=np.float64)
        self.forces = np.asarray(self.forces, dtype=np.float64)

        n_atoms = 4 * self.n_cells**3
        for name in ("positions", "previous_positions", "velocities", "forces"):
            shape = getattr(self, name).shape
            if shape != (n_atoms, 3):
                raise ValueError(
                    f"{name} shape {shape} incompatible with {n_atoms} atoms "
                    f"({self.n_cells} cells per side)"
                )

    @classmethod
    def create(
        cls,
        n_cells: int,
        lattice_scale: float,
        lattice_constant: float,
        target_temperature: float,
        ensemble: Ensemble = Ensemble.NVT,
    ) -> SimulationState:
        """
        Create a state with zeroed per-atom arrays for 4 * n_cells^3 atoms.

        Args:
            n_cells: FCC unit cells per box side.
            lattice_scale: Multiplier on the base lattice constant.
            lattice_constant: FCC lattice constant.
            target_temperature: Reduced target temperature.
            ensemble: NVE or NVT.

        Returns:
            New SimulationState instance.
        """
        n_atoms = 4 * n_cells**3
        return cls(
            positions=np.zeros((n_atoms, 3)),
            previous_positions=np.zeros((n_atoms, 3)),
            velocities=np.zeros((n_atoms, 3)),
            forces=np.zeros((n_atoms, 3)),
            n_cells=n_cells,
            lattice_scale=lattice_scale,
            lattice_constant=lattice_constant,
            target_temperature=target_temperature,
            ensemble=ensemble,
        )

    @property
    def n_atoms(self) -> int:
        """Return number of atoms."""
        return len(self.positions)

    @property
    def periodic_length(self) -> float:
        """Return the box side length (lattice constant times cells)."""
        return self.lattice_constant * self.n_cells

    @property
    def box(self) -> PeriodicBox:
        """Return the periodic box."""
        return PeriodicBox(self.periodic_length)

    @property
    def centroid(self) -> NDArray[np.floating]:
        """Mean position (all atoms have unit mass)."""
        return self.positions.mean(axis=0)

    @property
    def total_momentum(self) -> NDArray[np.floating]:
        """Sum of velocities (all atoms have unit mass)."""
        return self.velocities.sum(axis=0)

    def resize(self, n_cells: int) -> None:
        """
        Reallocate zeroed per-atom arrays for 4 * n_cells^3 atoms.

        The state object itself is kept, so existing references to it
        see the new size. Views taken earlier still point at the old arrays.
        """
        n_atoms = 4 * n_cells**3
        self.positions = np.zeros((n_atoms, 3))
        self.previous_positions = np.zeros((n_atoms, 3))
        self.velocities = np.zeros((n_atoms, 3))
        self.forces = np.zeros((n_atoms, 3))
        self.n_cells = n_cells

    def measure_kinetic(self) -> None:
        """Refresh kinetic energy, temperature and total energy from velocities."""
        kinetic = 0.5 * float(np.sum(self.velocities**2))
        self.kinetic_energy = kinetic
        self.total_energy = kinetic + self.potential_energy
        self.temperature = kinetic / (1.5 * self.n_atoms)

    def particles(self) -> Particles:
        """Return read-only views of the per-atom arrays."""
        return Particles(
            positions=_readonly(self.positions),
            previous_positions=_readonly(self.previous_positions),
            velocities=_readonly(self.velocities),
            forces=_readonly(self.forces),
        )

    def copy(self) -> SimulationState:
        """Create a deep copy of this state."""
        return SimulationState(
            positions=self.positions.copy(),
            previous_positions=self.previous_positions.copy(),
            velocities=self.velocities.copy(),
            forces=self.forces.copy(),
            n_cells=self.n_cells,
            lattice_scale=self.lattice_scale,
            lattice_constant=self.lattice_constant,
            target_temperature=self.target_temperature,
            ensemble=self.ensemble,
            step=self.step,
            time=self.time,
            temperature=self.temperature,
            kinetic_energy=self.kinetic_energy,
            potential_energy=self.potential_energy,
            total_energy=self.total_energy,
            virial=self.virial,
        )


@dataclass(frozen=True)
class Particles:
    """
    Read-only view of the per-atom arrays.

    The arrays share memory with the live state, so they reflect later
    steps, but cannot be written through.
    """

    positions: NDArray[np.floating]
    previous_positions: NDArray[np.floating]
    velocities: NDArray[np.floating]
    forces: NDArray[np.floating]

    def __len__(self) -> int:
        return len(self.positions)


def _readonly(array: NDArray[np.floating]) -> NDArray[np.floating]:
    view = array.view()
    view.flags.writeable = False
    return view
