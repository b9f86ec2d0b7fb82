"""Simulation controller and reporters."""

from .engine import ArgonSimulation
from .reporters import (
    CallbackReporter,
    EnergyReporter,
    Reporter,
    ReporterGroup,
    StateReporter,
)

__all__ = [
    "ArgonSimulation",
    "Reporter",
    "ReporterGroup",
    "StateReporter",
    "CallbackReporter",
    "EnergyReporter",
]
