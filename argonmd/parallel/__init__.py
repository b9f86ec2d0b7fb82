"""Parallelization infrastructure for per-atom loops."""

from .backends.base import ParallelBackend
from .backends.serial import SerialBackend
from .backends.threaded import ThreadPoolBackend
from .dispatcher import create_backend, get_backend, set_default_backend

__all__ = [
    "ParallelBackend",
    "SerialBackend",
    "ThreadPoolBackend",
    "create_backend",
    "get_backend",
    "set_default_backend",
]
