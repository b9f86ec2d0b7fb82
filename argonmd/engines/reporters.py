"""Reporter implementations for simulation output."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TextIO

import numpy as np

if TYPE_CHECKING:
    from ..system import SimulationState


class Reporter(ABC):
    """
    Abstract base class for simulation reporters.

    Reporters are called after completed steps with the live state and
    the observables in laboratory units (see ArgonSimulation.observables).
    """

    @abstractmethod
    def report(self, state: SimulationState, **kwargs: Any) -> None:
        """
        Generate report for current state.

        Args:
            state: Current simulation state.
            **kwargs: Observables (step, time, temperature, energies,
                pressure).
        """
        ...

    @property
    @abstractmethod
    def frequency(self) -> int:
        """Return reporting frequency (every N steps)."""
        ...

    def should_report(self, step: int) -> bool:
        """Check if reporter should run after this many completed steps."""
        return step % self.frequency == 0

    def initialize(self, state: SimulationState) -> None:
        """Initialize reporter (called before simulation)."""
        pass

    def finalize(self, state: SimulationState) -> None:
        """Finalize reporter (called after simulation)."""
        pass


class ReporterGroup:
    """
    Collection of reporters with automatic frequency handling.
    """

    def __init__(self, reporters: list[Reporter] | None = None) -> None:
        """
        Initialize reporter group.

        Args:
            reporters: List of reporters to manage.
        """
        self._reporters: list[Reporter] = reporters if reporters else []

    def __len__(self) -> int:
        return len(self._reporters)

    def add(self, reporter: Reporter) -> None:
        """Add a reporter to the group."""
        self._reporters.append(reporter)

    def remove(self, reporter: Reporter) -> None:
        """Remove a reporter from the group."""
        self._reporters.remove(reporter)

    def initialize(self, state: SimulationState) -> None:
        """Initialize all reporters."""
        for reporter in self._reporters:
            reporter.initialize(state)

    def report(self, state: SimulationState, **kwargs: Any) -> None:
        """Run all reporters that should fire after this step."""
        step = kwargs.get("step", state.step - 1)
        for reporter in self._reporters:
            if reporter.should_report(step):
                reporter.report(state, **kwargs)

    def finalize(self, state: SimulationState) -> None:
        """Finalize all reporters."""
        for reporter in self._reporters:
            reporter.finalize(state)


class StateReporter(Reporter):
    """
    Reporter that prints a table of observables to console or file.

    Outputs step, time (ps), temperature (K), kinetic, potential and
    total energy (Hartree) and pressure (atm).
    """

    HEADERS = ("Step", "Time(ps)", "T(K)", "KE(Eh)", "PE(Eh)", "Total(Eh)", "P(atm)")

    def __init__(
        self,
        frequency: int = 100,
        file: TextIO | None = None,
        separator: str = "\t",
    ) -> None:
        """
        Initialize state reporter.

        Args:
            frequency: Reporting frequency (every N steps).
            file: Output file (defaults to stdout).
            separator: Field separator.
        """
        self._frequency = frequency
        self._file = file if file is not None else sys.stdout
        self._separator = separator
        self._header_written = False

    @property
    def frequency(self) -> int:
        return self._frequency

    def initialize(self, state: SimulationState) -> None:
        """Write header."""
        if not self._header_written:
            self._file.write(self._separator.join(self.HEADERS) + "\n")
            self._header_written = True

    def report(self, state: SimulationState, **kwargs: Any) -> None:
        """Write one row of observables."""
        values = [
            f"{kwargs.get('step', state.step - 1)}",
            f"{kwargs.get('time', 0.0):.4f}",
            f"{kwargs.get('temperature', 0.0):.2f}",
            f"{kwargs.get('kinetic_energy', 0.0):.6e}",
            f"{kwargs.get('potential_energy', 0.0):.6e}",
            f"{kwargs.get('total_energy', 0.0):.6e}",
            f"{kwargs.get('pressure', 0.0):.2f}",
        ]

        self._file.write(self._separator.join(values) + "\n")
        self._file.flush()


class CallbackReporter(Reporter):
    """
    Reporter that calls a user-defined function.

    Allows arbitrary custom reporting logic.
    """

    def __init__(
        self,
        callback: Callable[[SimulationState, dict[str, Any]], None],
        frequency: int = 1,
    ) -> None:
        """
        Initialize callback reporter.

        Args:
            callback: Function to call with (state, observables).
            frequency: Reporting frequency.
        """
        self._callback = callback
        self._frequency = frequency

    @property
    def frequency(self) -> int:
        return self._frequency

    def report(self, state: SimulationState, **kwargs: Any) -> None:
        """Call the callback function."""
        self._callback(state, kwargs)


class EnergyReporter(Reporter):
    """
    Reporter that records observables over time.
    """

    def __init__(self, frequency: int = 1) -> None:
        """
        Initialize energy reporter.

        Args:
            frequency: Reporting frequency.
        """
        self._frequency = frequency
        self._steps: list[int] = []
        self._times: list[float] = []
        self._temperature: list[float] = []
        self._kinetic: list[float] = []
        self._potential: list[float] = []
        self._total: list[float] = []
        self._pressure: list[float] = []

    @property
    def frequency(self) -> int:
        return self._frequency

    def report(self, state: SimulationState, **kwargs: Any) -> None:
        """Record observables."""
        self._steps.append(kwargs.get("step", state.step - 1))
        self._times.append(kwargs.get("time", 0.0))
        self._temperature.append(kwargs.get("temperature", 0.0))
        self._kinetic.append(kwargs.get("kinetic_energy", 0.0))
        self._potential.append(kwargs.get("potential_energy", 0.0))
        self._total.append(kwargs.get("total_energy", 0.0))
        self._pressure.append(kwargs.get("pressure", 0.0))

    @property
    def steps(self) -> np.ndarray:
        """Return step numbers."""
        return np.array(self._steps, dtype=np.int64)

    @property
    def times(self) -> np.ndarray:
        """Return times array (ps)."""
        return np.array(self._times)

    @property
    def temperature(self) -> np.ndarray:
        """Return temperature time series (K)."""
        return np.array(self._temperature)

    @property
    def kinetic_energy(self) -> np.ndarray:
        """Return kinetic energy time series (Hartree)."""
        return np.array(self._kinetic)

    @property
    def potential_energy(self) -> np.ndarray:
        """Return potential energy time series (Hartree)."""
        return np.array(self._potential)

    @property
    def total_energy(self) -> np.ndarray:
        """Return total energy time series (Hartree)."""
        return np.array(self._total)

    @property
    def pressure(self) -> np.ndarray:
        """Return pressure time series (atm)."""
        return np.array(self._pressure)

    def clear(self) -> None:
        """Clear stored data."""
        self._steps.clear()
        self._times.clear()
        self._temperature.clear()
        self._kinetic.clear()
        self._potential.clear()
        self._total.clear()
        self._pressure.clear()
