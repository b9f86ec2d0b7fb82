"""Thermostat implementations."""

from __future__ import annotations

import numpy as np

from ..constants import WOODCOCK_ALPHA
from .base import ThermostatModifier

# Temperatures below this cannot be rescaled
MIN_TEMPERATURE = 1e-12


class WoodcockThermostat(ThermostatModifier):
    """
    Woodcock velocity-scaling thermostat with partial relaxation.

    Each step moves the kinetic temperature a fraction of the way toward
    the target:

        s = sqrt((T_target + alpha * (T - T_target)) / T)

    so that after scaling T' = T_target + alpha * (T - T_target). With
    alpha = 0 the target is hit exactly, with alpha = 1 nothing changes.

    Attributes:
        alpha: Fraction of the temperature deviation kept per step.
    """

    def __init__(self, alpha: float = WOODCOCK_ALPHA) -> None:
        """
        Initialize Woodcock thermostat.

        Args:
            alpha: Damping coefficient in [0, 1].
        """
        if not 0.0 <= alpha <= 1.0:
            raise ValueError(f"alpha must lie in [0, 1], got {alpha}")
        self.alpha = alpha

    def scale_factor(self, temperature: float, target_temperature: float) -> float:
        """
        Compute the Woodcock scaling factor.

        Args:
            temperature: Current kinetic temperature (reduced).
            target_temperature: Target temperature (reduced).

        Returns:
            Velocity scaling factor s.

        Raises:
            FloatingPointError: If the current temperature is too close to
                zero for the ratio to be meaningful.
        """
        if temperature < MIN_TEMPERATURE:
            raise FloatingPointError(
                f"Cannot rescale velocities from temperature {temperature:.3e}"
            )

        blended = target_temperature + self.alpha * (temperature - target_temperature)
        return float(np.sqrt(blended / temperature))
