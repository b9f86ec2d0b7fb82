"""Tests for physical constants and unit conversions."""

import math

import pytest

from argonmd import constants


class TestTemperatureConversion:
    """Test K <-> reduced temperature conversion."""

    def test_roundtrip(self):
        """Test converting to reduced units and back."""
        assert constants.reduced_to_kelvin(
            constants.kelvin_to_reduced(50.0)
        ) == pytest.approx(50.0)

    def test_epsilon_over_kb(self):
        """Test that reduced temperature 1 is epsilon / kB (about 119.8 K)."""
        assert constants.reduced_to_kelvin(1.0) == pytest.approx(119.8, abs=0.1)

    def test_fifty_kelvin(self):
        """Test the default target temperature in reduced units."""
        expected = 50.0 * constants.K_BOLTZMANN / constants.EPSILON
        assert constants.kelvin_to_reduced(50.0) == pytest.approx(expected)
        assert 0.41 < constants.kelvin_to_reduced(50.0) < 0.42


class TestOtherConversions:
    """Test time, length, energy and pressure conversion."""

    def test_tau_is_about_two_ps(self):
        """Test the argon reference time."""
        assert constants.reduced_to_picoseconds(1.0) == pytest.approx(2.156, abs=0.005)

    def test_sigma_in_nm(self):
        """Test that a reduced length of 1 is sigma."""
        assert constants.reduced_to_nanometers(1.0) == pytest.approx(0.3405)

    def test_energy_in_hartree(self):
        """Test conversion of epsilon to Hartree."""
        assert constants.reduced_to_hartree(1.0) == pytest.approx(
            constants.EPSILON / constants.HARTREE
        )

    def test_ideal_gas_pressure(self):
        """Test that zero virial gives the ideal-gas pressure."""
        n_atoms = 256
        temperature = constants.kelvin_to_reduced(300.0)
        length = 10.0

        pressure = constants.reduced_pressure_to_atm(n_atoms, temperature, 0.0, length)

        volume = (constants.SIGMA * length) ** 3
        expected = n_atoms * constants.K_BOLTZMANN * 300.0 / volume / 101325.0
        assert pressure == pytest.approx(expected, rel=1e-6)

    def test_virial_raises_pressure(self):
        """Test that a positive (repulsive) virial increases pressure."""
        base = constants.reduced_pressure_to_atm(32, 0.4, 0.0, 3.0)
        repulsive = constants.reduced_pressure_to_atm(32, 0.4, 10.0, 3.0)
        assert repulsive > base


class TestLatticeConstant:
    """Test the default lattice geometry."""

    def test_nearest_neighbour_at_potential_minimum(self):
        """Test that a / sqrt(2) equals the LJ minimum 2^(1/6)."""
        nearest = constants.BASE_LATTICE_CONSTANT / math.sqrt(2.0)
        assert nearest == pytest.approx(2.0 ** (1.0 / 6.0))
