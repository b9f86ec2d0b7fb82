"""Initial FCC configuration and thermal velocities."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from ..constants import BASE_LATTICE_CONSTANT
from ..rng import UniformSource

# Fractional coordinates of the four atoms in the FCC unit cell
FCC_BASIS = np.array(
    [
        [0.0, 0.0, 0.0],
        [0.5, 0.5, 0.0],
        [0.0, 0.5, 0.5],
        [0.5, 0.0, 0.5],
    ]
)

# Random unit vectors shorter than this before normalization are redrawn
MIN_DIRECTION_NORM = 1e-12
MAX_DIRECTION_ATTEMPTS = 100


def scaled_lattice_constant(lattice_scale: float) -> float:
    """Return the FCC lattice constant for a given scale factor."""
    return BASE_LATTICE_CONSTANT * lattice_scale


def fcc_positions(n_cells: int, lattice_constant: float) -> NDArray[np.floating]:
    """
    Build an FCC crystal of n_cells^3 unit cells centred on the origin.

    Atoms are ordered cell by cell (i, j, k with k fastest), four basis
    atoms per cell.

    Args:
        n_cells: Unit cells per side.
        lattice_constant: Edge length of the unit cell.

    Returns:
        Positions of 4 * n_cells^3 atoms, shape (N, 3), with zero centroid.
    """
    if n_cells < 1:
        raise ValueError(f"n_cells must be at least 1, got {n_cells}")

    cells = np.indices((n_cells, n_cells, n_cells)).reshape(3, -1).T
    positions = (cells[:, np.newaxis, :] + FCC_BASIS[np.newaxis, :, :]).reshape(-1, 3)
    positions = positions * lattice_constant

    positions -= positions.mean(axis=0)
    return positions


def random_direction(rng: UniformSource) -> NDArray[np.floating]:
    """
    Draw a unit vector from three uniform samples in [-1, 1].

    Args:
        rng: Injected uniform random source.

    Returns:
        Unit vector, shape (3,).

    Raises:
        FloatingPointError: If every draw was too short to normalize.
    """
    for _ in range(MAX_DIRECTION_ATTEMPTS):
        direction = np.array([rng.sample(-1.0, 1.0) for _ in range(3)])
        norm = np.linalg.norm(direction)
        if norm > MIN_DIRECTION_NORM:
            return direction / norm

    raise FloatingPointError(
        f"Random direction had norm <= {MIN_DIRECTION_NORM} "
        f"in {MAX_DIRECTION_ATTEMPTS} attempts"
    )


def random_velocities(
    n_atoms: int, temperature: float, rng: UniformSource
) -> NDArray[np.floating]:
    """
    Assign thermal speeds in random directions with zero net momentum.

    Every atom gets speed sqrt(3 T) (equipartition with unit mass and
    kB = 1); the mean velocity is then subtracted.

    Args:
        n_atoms: Number of atoms.
        temperature: Reduced temperature.
        rng: Injected uniform random source.

    Returns:
        Velocities, shape (n_atoms, 3).
    """
    speed = np.sqrt(3.0 * temperature)
    velocities = np.empty((n_atoms, 3))
    for n in range(n_atoms):
        velocities[n] = speed * random_direction(rng)

    velocities -= velocities.mean(axis=0)
    return velocities
