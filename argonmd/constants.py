"""
Physical constants and reduced-unit conversion factors for argon.

All quantities inside the engine are non-dimensional (sigma = epsilon =
mass = 1). The factors below convert them to laboratory units for
reporting.
"""

from __future__ import annotations

import math

# SI constants
K_BOLTZMANN = 1.3806488e-23  # J/K
AVOGADRO_CONSTANT = 6.022140857e23  # 1/mol
HARTREE = 4.35974465054e-18  # J
ATM = 9.86923266716013e-6  # atm/Pa

# Lennard-Jones parameters for argon
SIGMA = 3.405e-10  # m
EPSILON = 1.6540172624e-21  # J
MOLAR_MASS = 0.039948  # kg/mol

# Reference time tau = sqrt(m sigma^2 / epsilon), in s
TAU = math.sqrt(MOLAR_MASS / AVOGADRO_CONSTANT * SIGMA * SIGMA / EPSILON)

# Simulation defaults (reduced units unless noted)
DT = 0.001
CUTOFF = 2.5
N_IMAGES = 3
WOODCOCK_ALPHA = 0.2
DEFAULT_N_CELLS = 4
DEFAULT_LATTICE_SCALE = 1.0
DEFAULT_TEMPERATURE = 50.0  # K

# FCC lattice constant at unit scale: nearest neighbours sit at 2^(1/6)
BASE_LATTICE_CONSTANT = 2.0 ** (2.0 / 3.0)


def kelvin_to_reduced(temperature: float) -> float:
    """Convert a temperature in K to reduced units (kB T / epsilon)."""
    return temperature * K_BOLTZMANN / EPSILON


def reduced_to_kelvin(temperature: float) -> float:
    """Convert a reduced temperature to K."""
    return temperature * EPSILON / K_BOLTZMANN


def reduced_to_hartree(energy: float) -> float:
    """Convert a reduced energy to Hartree."""
    return energy * EPSILON / HARTREE


def reduced_to_picoseconds(time: float) -> float:
    """Convert a reduced time to ps."""
    return time * TAU * 1.0e12


def reduced_to_nanometers(length: float) -> float:
    """Convert a reduced length to nm."""
    return length * SIGMA * 1.0e9


def reduced_pressure_to_atm(
    n_atoms: int, temperature: float, virial: float, periodic_length: float
) -> float:
    """
    Instantaneous virial pressure in atm.

    P = (N kB T + W / 3) / V with W = sum r F(r) over interacting pairs.

    The virial enters with a plus sign, so a compressed (repulsive) crystal
    sits above the ideal-gas pressure. Codes that subtract W / 3 report
    the opposite sign for the excess term.

    Args:
        n_atoms: Number of atoms.
        temperature: Reduced temperature.
        virial: Reduced virial sum.
        periodic_length: Reduced box length.

    Returns:
        Pressure in atm.
    """
    volume = (SIGMA * periodic_length) ** 3
    ideal = n_atoms * EPSILON * temperature
    return (ideal + virial * EPSILON / 3.0) / volume * ATM
