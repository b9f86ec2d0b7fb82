"""Lennard-Jones force implementation over periodic replicas."""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ...constants import CUTOFF, N_IMAGES
from ..base import ForceProvider, ForceResult

if TYPE_CHECKING:
    from ...parallel import ParallelBackend
    from ...system import PeriodicBox

# Upper bound on (rows x atoms) pairs held in memory at once per worker
MAX_BLOCK_PAIRS = 1 << 16


def _inverse_powers(r2: NDArray[np.floating]) -> tuple[NDArray, NDArray]:
    """Return (r^-6, r^-12) from squared distances."""
    rm6 = 1.0 / (r2 * r2 * r2)
    return rm6, rm6 * rm6


class LennardJonesForce(ForceProvider):
    """
    Truncated and shifted Lennard-Jones 12-6 potential in reduced units.

    V(r) = 4 * [r^-12 - r^-6] - V(rc)   for r <= rc, 0 beyond.

    Interactions are summed brute force over every atom and every
    periodic replica in [-n_images, n_images]^3. Each ordered pair is
    visited from both sides, so energy and virial contributions carry a
    factor 1/2.

    Attributes:
        cutoff: Cutoff radius rc.
        n_images: Replicas per axis on each side of the primary cell.
        energy_shift: Unshifted potential at rc, subtracted from every pair.
    """

    def __init__(self, cutoff: float = CUTOFF, n_images: int = N_IMAGES) -> None:
        """
        Initialize Lennard-Jones force.

        Args:
            cutoff: Cutoff distance for interactions.
            n_images: Periodic replicas per axis on each side.
        """
        if not cutoff > 0:
            raise ValueError(f"cutoff must be positive, got {cutoff}")
        if n_images < 0:
            raise ValueError(f"n_images must be non-negative, got {n_images}")

        self.cutoff = float(cutoff)
        self.n_images = int(n_images)
        self._cutoff2 = self.cutoff * self.cutoff

        rcm6, rcm12 = _inverse_powers(np.float64(self._cutoff2))
        self.energy_shift = float(4.0 * (rcm12 - rcm6))

    def pair_energy(self, r: ArrayLike) -> NDArray[np.floating]:
        """
        Shifted pair potential at distance(s) r.

        Args:
            r: Distance(s), any shape.

        Returns:
            Pair energies; exactly zero at and beyond the cutoff.
        """
        r = np.asarray(r, dtype=np.float64)
        r2 = r * r
        inside = r2 <= self._cutoff2
        rm6, rm12 = _inverse_powers(np.where(inside, r2, 1.0))
        return np.where(inside, 4.0 * (rm12 - rm6) - self.energy_shift, 0.0)

    def pair_force(self, r: ArrayLike) -> NDArray[np.floating]:
        """
        Radial force -dV/dr at distance(s) r (positive = repulsive).

        Args:
            r: Distance(s), any shape.

        Returns:
            48 r^-13 - 24 r^-7 inside the cutoff, zero beyond.
        """
        r = np.asarray(r, dtype=np.float64)
        r2 = r * r
        inside = r2 <= self._cutoff2
        r_safe = np.where(inside, r, 1.0)
        rm6, rm12 = _inverse_powers(r_safe * r_safe)
        return np.where(inside, 48.0 * rm12 / r_safe - 24.0 * rm6 / r_safe, 0.0)

    def _active_offsets(
        self, d0: NDArray[np.floating], offsets: NDArray[np.floating], axis: int
    ) -> list[tuple[int, float]]:
        """
        Image offsets along one axis that can bring any pair within rc.

        An offset is dropped only when every displacement component of the
        block stays farther than rc from it, in which case no pair can pass
        the cutoff test for any shift using that offset.
        """
        comp = d0[..., axis]
        lo = float(comp.min())
        hi = float(comp.max())
        limit = self.cutoff * (1.0 + 1e-9)

        active = []
        for index, offset in enumerate(offsets):
            if offset < lo:
                gap = lo - offset
            elif offset > hi:
                gap = offset - hi
            else:
                gap = 0.0
            if gap <= limit:
                active.append((index, float(offset)))
        return active

    def _compute_rows(
        self,
        positions: NDArray[np.floating],
        start: int,
        end: int,
        offsets: NDArray[np.floating],
        zero_index: int,
    ) -> tuple[NDArray[np.floating], float, float]:
        """
        Forces on atoms start..end-1 and their energy/virial contributions.

        Returns:
            Tuple of (forces for the rows, potential energy, virial).
        """
        n_rows = end - start
        cutoff2 = self._cutoff2
        shift = self.energy_shift

        forces = np.zeros((n_rows, 3))
        energy = 0.0
        virial = 0.0

        rows = np.arange(start, end)
        d0 = positions[start:end, np.newaxis, :] - positions[np.newaxis, :, :]
        per_axis = [self._active_offsets(d0, offsets, axis) for axis in range(3)]

        for (ix, sx), (iy, sy), (iz, sz) in itertools.product(*per_axis):
            d = d0 - np.array([sx, sy, sz])
            r2 = np.einsum("ijk,ijk->ij", d, d)
            mask = r2 <= cutoff2
            if ix == iy == iz == zero_index:
                # no self-interaction in the primary cell
                mask[np.arange(n_rows), rows] = False
            if not mask.any():
                continue

            row_index, col_index = np.nonzero(mask)
            r2_in = r2[row_index, col_index]
            d_in = d[row_index, col_index]

            r = np.sqrt(r2_in)
            rm6, rm12 = _inverse_powers(r2_in)
            fr = 48.0 * rm12 / r - 24.0 * rm6 / r

            contrib = d_in * (fr / r)[:, np.newaxis]
            for axis in range(3):
                forces[:, axis] += np.bincount(
                    row_index, weights=contrib[:, axis], minlength=n_rows
                )

            energy += 0.5 * float(np.sum(4.0 * (rm12 - rm6) - shift))
            virial += 0.5 * float(np.sum(r * fr))

        return forces, energy, virial

    def compute(
        self,
        positions: NDArray[np.floating],
        box: PeriodicBox,
        backend: ParallelBackend | None = None,
    ) -> ForceResult:
        """
        Compute Lennard-Jones forces, potential energy and virial.

        Rows of the force array are distributed over the backend's workers;
        each worker writes only its own rows and returns private energy and
        virial sums, which are added after all workers have finished.

        Args:
            positions: Atomic positions, shape (N, 3).
            box: Periodic simulation box.
            backend: Parallel backend; serial if omitted.

        Returns:
            ForceResult with forces of shape (N, 3).
        """
        positions = np.asarray(positions, dtype=np.float64)
        n_atoms = len(positions)
        forces = np.zeros((n_atoms, 3), dtype=np.float64)

        if n_atoms == 0:
            return ForceResult(forces, 0.0, 0.0)

        offsets = np.arange(-self.n_images, self.n_images + 1) * box.length
        zero_index = self.n_images
        block_rows = max(1, MAX_BLOCK_PAIRS // n_atoms)

        def force_chunk(start: int, end: int) -> NDArray[np.floating]:
            sums = np.zeros(2)
            for block_start in range(start, end, block_rows):
                block_end = min(block_start + block_rows, end)
                block_forces, energy, virial = self._compute_rows(
                    positions, block_start, block_end, offsets, zero_index
                )
                forces[block_start:block_end] = block_forces
                sums[0] += energy
                sums[1] += virial
            return sums

        if backend is None:
            totals = force_chunk(0, n_atoms)
        else:
            totals = backend.reduce_sum(backend.parallel_for(force_chunk, n_atoms))

        return ForceResult(forces, float(totals[0]), float(totals[1]))
