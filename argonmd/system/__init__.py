"""System state, periodic box and initial configuration."""

from .box import PeriodicBox
from .lattice import fcc_positions, random_velocities, scaled_lattice_constant
from .state import Particles, SimulationState

__all__ = [
    "PeriodicBox",
    "Particles",
    "SimulationState",
    "fcc_positions",
    "random_velocities",
    "scaled_lattice_constant",
]
