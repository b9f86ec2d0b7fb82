"""Integrator implementations."""

from .base import Integrator, ThermostatModifier
from .thermostats import WoodcockThermostat
from .verlet import EulerVerletIntegrator

__all__ = [
    "Integrator",
    "ThermostatModifier",
    "EulerVerletIntegrator",
    "WoodcockThermostat",
]
