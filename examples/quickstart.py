#!/usr/bin/env python
"""
Quick start example - the simplest way to run a simulation.

This demonstrates the high-level API for users who just want results
without dealing with the internal details.

Usage:
    python examples/quickstart.py
"""

from argonmd import simulate


def main():
    print("=" * 60)
    print("Argon Crystal Quick Start")
    print("=" * 60)

    # 1. Simplest possible simulation - just 1 line!
    print("\n1. Argon at 50 K (simplest usage):")
    print("-" * 40)
    result = simulate.argon(n_steps=200)

    # 2. Microcanonical run: total energy should be conserved
    print("\n2. NVE ensemble:")
    print("-" * 40)
    result = simulate.argon(n_cells=3, ensemble="NVE", n_steps=500)
    print(f"   Energy conserved: {abs(result.energy_drift) < 0.01}")

    # 3. Expanded lattice at a higher temperature
    print("\n3. Expanded lattice, 80 K:")
    print("-" * 40)
    result = simulate.argon(n_cells=3, temperature=80.0, lattice_scale=1.03, n_steps=500)

    print("\n" + "=" * 60)
    print("All examples completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()
