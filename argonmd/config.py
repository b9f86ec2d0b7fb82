"""Simulation parameters and ensemble selection."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum

from . import constants


class Ensemble(Enum):
    """Statistical ensemble sampled by the integrator."""

    NVE = 0
    NVT = 1

    @classmethod
    def parse(cls, value: Ensemble | str) -> Ensemble:
        """
        Resolve an ensemble from an enum member or its name.

        Args:
            value: Ensemble member or case-insensitive name ("NVE", "nvt").

        Returns:
            Matching Ensemble member.

        Raises:
            ValueError: If the name is unknown.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).upper()]
        except KeyError:
            raise ValueError(
                f"Unknown ensemble: {value!r}. Available: NVE, NVT"
            ) from None


@dataclass(frozen=True)
class SimulationConfig:
    """
    Parameters for an argon simulation.

    Attributes:
        n_cells: FCC unit cells per box side (N = 4 * n_cells^3).
        lattice_scale: Multiplier applied to the base lattice constant.
        temperature: Target temperature in K.
        ensemble: NVE or NVT.
        dt: Integration timestep in reduced units.
        cutoff: Interaction cutoff radius in sigma.
        n_images: Periodic images summed per axis on each side.
        alpha: Woodcock damping coefficient.
    """

    n_cells: int = constants.DEFAULT_N_CELLS
    lattice_scale: float = constants.DEFAULT_LATTICE_SCALE
    temperature: float = constants.DEFAULT_TEMPERATURE
    ensemble: Ensemble = Ensemble.NVT
    dt: float = constants.DT
    cutoff: float = constants.CUTOFF
    n_images: int = constants.N_IMAGES
    alpha: float = constants.WOODCOCK_ALPHA

    def __post_init__(self) -> None:
        """Validate parameters."""
        object.__setattr__(self, "ensemble", Ensemble.parse(self.ensemble))

        if int(self.n_cells) != self.n_cells or self.n_cells < 1:
            raise ValueError(f"n_cells must be a positive integer, got {self.n_cells}")
        object.__setattr__(self, "n_cells", int(self.n_cells))

        for name in ("lattice_scale", "temperature", "dt", "cutoff"):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"{name} must be positive, got {value}")

        if self.n_images < 0:
            raise ValueError(f"n_images must be non-negative, got {self.n_images}")
        if not 0.0 <= self.alpha <= 1.0:
            raise ValueError(f"alpha must lie in [0, 1], got {self.alpha}")

    def replace(self, **changes) -> SimulationConfig:
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)
