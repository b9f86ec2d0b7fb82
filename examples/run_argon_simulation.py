#!/usr/bin/env python
"""
Argon crystal simulation driven step by step through ArgonSimulation.

This example demonstrates:
- Configuring the system with SimulationConfig
- Running on a thread pool backend
- Tabular output with StateReporter
- Changing the target temperature mid-run
- Plotting the recorded observables

Usage:
    python examples/run_argon_simulation.py
"""

import logging

import matplotlib

matplotlib.use("Agg")  # Non-interactive backend

import matplotlib.pyplot as plt

from argonmd import ArgonSimulation, EnergyReporter, SimulationConfig, StateReporter
from argonmd.logging_config import setup_logging
from argonmd.rng import NumpyUniformSource


def main():
    setup_logging(logging.INFO)

    config = SimulationConfig(n_cells=4, temperature=50.0, ensemble="NVT")
    energies = EnergyReporter(frequency=5)

    with ArgonSimulation(config, rng=NumpyUniformSource(42), backend="threads") as sim:
        sim.add_reporter(StateReporter(frequency=100))
        sim.add_reporter(energies)

        print(f"N = {sim.n_atoms}, L = {sim.periodic_length:.4f} nm")

        # Equilibrate at 50 K, then heat to 80 K
        sim.run(1000)
        sim.set_temperature(80.0)
        sim.run(1000)

        perf = sim.performance
        print(f"\n{perf['steps_per_second']:.1f} steps/s, {perf['ns_per_day']:.3f} ns/day")

    fig, axes = plt.subplots(3, 1, figsize=(10, 10), sharex=True)

    axes[0].plot(energies.times, energies.temperature, "b-", lw=0.8)
    axes[0].set_ylabel("T (K)")

    axes[1].plot(energies.times, energies.kinetic_energy, "b-", label="Kinetic", lw=0.8)
    axes[1].plot(energies.times, energies.potential_energy, "r-", label="Potential", lw=0.8)
    axes[1].plot(energies.times, energies.total_energy, "k-", label="Total", lw=1.2)
    axes[1].set_ylabel("Energy (Hartree)")
    axes[1].legend()

    axes[2].plot(energies.times, energies.pressure, "m-", lw=0.8)
    axes[2].set_ylabel("P (atm)")
    axes[2].set_xlabel("Time (ps)")

    for ax in axes:
        ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig("argon_simulation.png", dpi=150)
    print("Saved plot to argon_simulation.png")


if __name__ == "__main__":
    main()
