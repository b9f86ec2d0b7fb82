"""Nonbonded force implementations."""

from .lj import LennardJonesForce

__all__ = ["LennardJonesForce"]
