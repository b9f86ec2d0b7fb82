"""Parallel backend implementations."""

from .base import ParallelBackend
from .serial import SerialBackend
from .threaded import ThreadPoolBackend

__all__ = [
    "ParallelBackend",
    "SerialBackend",
    "ThreadPoolBackend",
]
