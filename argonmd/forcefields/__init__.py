"""Force field implementations."""

from .base import ForceProvider, ForceResult
from .nonbonded import LennardJonesForce

__all__ = ["ForceProvider", "ForceResult", "LennardJonesForce"]
