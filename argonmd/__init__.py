"""
argonmd - Molecular dynamics of a solid argon crystal.

Design Principles:
- Reduced Lennard-Jones units inside, laboratory units at the surface
- FCC crystal in a periodic cube, brute-force pair sum over images
- Euler bootstrap followed by position Verlet, Woodcock thermostat
- Shared-memory fork-join parallelism over atoms

Quick Start:
    >>> from argonmd import simulate
    >>> result = simulate.argon(n_cells=3, temperature=50.0, n_steps=500)
    >>> print(f"Mean temperature: {result.mean_temperature:.2f} K")
"""

__version__ = "0.1.0"

# High-level APIs
from . import plotting, simulate
from .config import Ensemble, SimulationConfig
from .engines import ArgonSimulation, EnergyReporter, StateReporter
from .logging_config import setup_logging

# Core components for advanced users
from .system import PeriodicBox, SimulationState

__all__ = [
    "simulate",
    "plotting",
    "ArgonSimulation",
    "Ensemble",
    "SimulationConfig",
    "EnergyReporter",
    "StateReporter",
    "PeriodicBox",
    "SimulationState",
    "setup_logging",
]
