"""
Built-in plotting utilities for simulation results.

Provides simple one-line plotting functions for the observable time series.

Example:
    >>> from argonmd import simulate, plotting
    >>> result = simulate.argon(n_cells=3)
    >>> plotting.energy(result)
    >>> plotting.save("argon.png")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .simulate import SimulationResult

# Try to import matplotlib, but don't fail if not available
try:
    import matplotlib.pyplot as plt

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False
    plt = None


def _check_matplotlib():
    """Check if matplotlib is available."""
    if not HAS_MATPLOTLIB:
        raise ImportError(
            "matplotlib is required for plotting. "
            "Install it with: pip install argonmd[plot]"
        )


def _with_band(ax, times, values, mean, color, label, unit) -> None:
    ax.plot(times, values, "-", color=color, alpha=0.7, lw=0.5)
    ax.axhline(
        y=mean,
        color="r",
        linestyle="--",
        lw=2,
        label=f"Mean {label} = {mean:.2f} {unit}",
    )
    if len(values) > 0:
        spread = np.std(values)
        ax.fill_between(
            times,
            mean - spread,
            mean + spread,
            alpha=0.2,
            color="r",
            label=f"±1σ = {spread:.2f} {unit}",
        )


def energy(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (10, 6),
) -> None:
    """
    Plot energy time series.

    Shows kinetic, potential, and total energy vs time next to the
    relative drift of the total energy.

    Args:
        result: SimulationResult from a simulation.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    fig, axes = plt.subplots(1, 2, figsize=figsize)
    times = result.times

    ax = axes[0]
    ax.plot(times, result.kinetic_energy, "b-", label="Kinetic", alpha=0.7, lw=0.8)
    ax.plot(times, result.potential_energy, "r-", label="Potential", alpha=0.7, lw=0.8)
    ax.plot(times, result.total_energy, "k-", label="Total", lw=1.5)
    ax.set_xlabel("Time (ps)")
    ax.set_ylabel("Energy (Hartree)")
    ax.set_title("Energy vs Time")
    ax.legend()
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    if len(result.total_energy) > 0:
        e0 = result.total_energy[0]
        rel_error = (
            (result.total_energy - e0) / abs(e0) * 100
            if e0 != 0
            else result.total_energy * 0
        )
        ax.plot(times, rel_error, "k-", lw=1)
        ax.axhline(y=0, color="r", linestyle="--", alpha=0.5)
    ax.set_xlabel("Time (ps)")
    ax.set_ylabel("Relative Energy Error (%)")
    ax.set_title(f"Energy Conservation ({result.ensemble}, drift: {result.energy_drift:.2e})")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()


def temperature(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (10, 4),
) -> None:
    """
    Plot temperature time series with the thermostat target.

    Args:
        result: SimulationResult from a simulation.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    fig, ax = plt.subplots(figsize=figsize)
    _with_band(
        ax, result.times, result.temperature, result.mean_temperature, "b", "T", "K"
    )
    ax.axhline(
        y=result.target_temperature,
        color="g",
        linestyle=":",
        lw=1.5,
        label=f"Target = {result.target_temperature:.2f} K",
    )

    ax.set_xlabel("Time (ps)")
    ax.set_ylabel("Temperature (K)")
    ax.set_title("Temperature vs Time")
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()


def pressure(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (10, 4),
) -> None:
    """
    Plot virial pressure time series.

    Args:
        result: SimulationResult from a simulation.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    fig, ax = plt.subplots(figsize=figsize)
    _with_band(
        ax, result.times, result.pressure, result.mean_pressure, "m", "P", "atm"
    )

    ax.set_xlabel("Time (ps)")
    ax.set_ylabel("Pressure (atm)")
    ax.set_title("Pressure vs Time")
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()


def save(filename: str | Path, dpi: int = 150) -> None:
    """
    Save the current figure to a file.

    Args:
        filename: Output filename (e.g., "plot.png", "plot.pdf").
        dpi: Resolution in dots per inch.

    Example:
        >>> plotting.energy(result, show=False)
        >>> plotting.save("energy.png")
    """
    _check_matplotlib()
    plt.savefig(filename, dpi=dpi, bbox_inches="tight")
    print(f"Saved plot to {filename}")


def show() -> None:
    """
    Display all pending plots.

    Use this after creating plots with show=False.
    """
    _check_matplotlib()
    plt.show()
