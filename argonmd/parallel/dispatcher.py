"""Selection of the parallel backend that drives the per-atom loops."""

from __future__ import annotations

import logging
import os
from typing import Literal

from .backends.base import ParallelBackend
from .backends.serial import SerialBackend
from .backends.threaded import ThreadPoolBackend

logger = logging.getLogger(__name__)

BackendType = Literal["serial", "threads"]

_BACKENDS: dict[str, type[ParallelBackend]] = {
    "serial": SerialBackend,
    "threads": ThreadPoolBackend,
}

# Shared fallback when a simulation is built without an explicit backend
_default_backend: ParallelBackend | None = None


def create_backend(name: BackendType, **kwargs) -> ParallelBackend:
    """
    Build a new backend from its registered name.

    Args:
        name: "serial" or "threads".
        **kwargs: Constructor arguments; only the thread pool takes any
            (n_workers).

    Returns:
        Freshly created backend owned by the caller.

    Raises:
        ValueError: If the name is not registered.
    """
    try:
        backend_cls = _BACKENDS[name]
    except KeyError:
        raise ValueError(
            f"Unknown backend: {name}. Available: {', '.join(_BACKENDS)}"
        ) from None

    if backend_cls is SerialBackend:
        return SerialBackend()
    return backend_cls(**kwargs)


def get_backend(
    backend: BackendType | ParallelBackend | None = None,
    **kwargs,
) -> ParallelBackend:
    """
    Resolve a backend argument.

    Instances pass through untouched, names build a new backend and None
    yields the shared default (a serial backend unless replaced with
    set_default_backend).

    Examples:
        >>> get_backend().name
        'serial'
        >>> pool = get_backend("threads", n_workers=4)
    """
    global _default_backend

    if isinstance(backend, ParallelBackend):
        return backend
    if backend is not None:
        return create_backend(backend, **kwargs)

    if _default_backend is None:
        _default_backend = SerialBackend()
    return _default_backend


def set_default_backend(
    backend: BackendType | ParallelBackend,
    **kwargs,
) -> ParallelBackend:
    """Install the shared default backend and return it."""
    global _default_backend

    _default_backend = get_backend(backend, **kwargs)
    logger.debug("Default backend set to %s", _default_backend.name)
    return _default_backend


def reset_default_backend() -> None:
    """Forget the shared default; the next get_backend() makes a serial one."""
    global _default_backend
    _default_backend = None


def detect_best_backend() -> BackendType:
    """Prefer worker threads when more than one CPU is available."""
    return "threads" if (os.cpu_count() or 1) > 1 else "serial"


def auto_backend(**kwargs) -> ParallelBackend:
    """
    Create the backend suggested by detect_best_backend().

    Args:
        **kwargs: Passed to the thread pool (ignored for serial).

    Returns:
        ParallelBackend instance.
    """
    return create_backend(detect_best_backend(), **kwargs)
