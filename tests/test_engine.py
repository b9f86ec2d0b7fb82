"""Tests for the argon simulation controller."""

import io

import numpy as np
import pytest

from argonmd import constants
from argonmd.config import Ensemble, SimulationConfig
from argonmd.engines import (
    ArgonSimulation,
    CallbackReporter,
    EnergyReporter,
    StateReporter,
)
from argonmd.engines.reporters import ReporterGroup
from argonmd.parallel import SerialBackend, ThreadPoolBackend
from argonmd.rng import NumpyUniformSource


@pytest.fixture
def small_sim():
    """32-atom NVT simulation at 50 K."""
    sim = ArgonSimulation(
        SimulationConfig(n_cells=2, temperature=50.0), rng=NumpyUniformSource(42)
    )
    yield sim
    sim.close()


@pytest.fixture(scope="module")
def default_sim():
    """256-atom simulation with default parameters."""
    sim = ArgonSimulation(rng=NumpyUniformSource(42))
    yield sim
    sim.close()


class TestInitialization:
    """Test the initial crystal."""

    def test_default_atom_count(self, default_sim):
        """Test N = 256 for four cells per side."""
        assert default_sim.n_atoms == 256
        assert default_sim.n_cells == 4

    def test_initial_clock(self, small_sim):
        """Test that a fresh simulation starts at step 1, time 0."""
        assert small_sim.step == 1
        assert small_sim.elapsed_time == 0.0

    def test_zero_momentum(self, small_sim):
        """Test that the initial momentum vanishes."""
        assert np.allclose(small_sim.state.total_momentum, 0.0, atol=1e-10)

    def test_centroid_at_origin(self, small_sim):
        """Test that the initial crystal is centred on the origin."""
        assert np.allclose(small_sim.state.centroid, 0.0, atol=1e-12)

    def test_initial_temperature(self, small_sim):
        """Test that the initial temperature is near the target."""
        assert small_sim.temperature == pytest.approx(50.0, rel=0.1)
        assert small_sim.target_temperature == pytest.approx(50.0)

    def test_geometry_units(self, small_sim):
        """Test lattice constant and box length in nm."""
        a = constants.reduced_to_nanometers(constants.BASE_LATTICE_CONSTANT)
        assert small_sim.lattice_constant == pytest.approx(a)
        assert small_sim.periodic_length == pytest.approx(2 * a)

    def test_backend_by_name_is_owned(self):
        """Test that a backend created from a name is closed with the simulation."""
        sim = ArgonSimulation(SimulationConfig(n_cells=1), backend="threads")
        backend = sim.backend
        sim.close()
        assert backend.closed

    def test_backend_instance_not_owned(self):
        """Test that a caller's backend stays open."""
        with ThreadPoolBackend(n_workers=2) as backend:
            with ArgonSimulation(SimulationConfig(n_cells=1), backend=backend):
                pass
            assert not backend.closed


class TestStepping:
    """Test single steps and runs."""

    def test_first_step(self, small_sim):
        """Test that the first step advances the counter and computes forces."""
        small_sim.run_step()

        assert small_sim.step == 2
        assert small_sim.elapsed_time == pytest.approx(
            constants.reduced_to_picoseconds(0.001)
        )
        assert small_sim.potential_energy < 0.0

    def test_ten_steps(self, default_sim):
        """Test the clock after ten steps of the default system."""
        default_sim.recalc()
        default_sim.run(10)

        assert default_sim.step == 11
        assert default_sim.state.time == pytest.approx(0.01)
        assert default_sim.n_atoms == 256

    def test_atoms_stay_in_box(self, small_sim):
        """Test that positions are wrapped into [0, L] after each step."""
        small_sim.run(5)
        assert small_sim.state.box.contains(small_sim.state.positions)

    def test_callback_stops_run(self, small_sim):
        """Test early termination from the run callback."""
        small_sim.run(20, callback=lambda sim: sim.step > 3)
        assert small_sim.step == 4

    def test_nve_energy_conservation(self):
        """Test that NVE total energy drifts by less than 1% over 100 steps."""
        sim = ArgonSimulation(
            SimulationConfig(n_cells=4, ensemble=Ensemble.NVE),
            rng=NumpyUniformSource(7),
        )
        energies = EnergyReporter()
        sim.add_reporter(energies)

        sim.run(100)

        # the bootstrap step rescales velocities, so measure from step 2
        total = energies.total_energy[1:]
        drift = np.max(np.abs(total - total[0])) / abs(total[0])
        assert drift < 0.01

    def test_nvt_approaches_target(self):
        """Test that the thermostat pulls a hot start toward the target."""
        sim = ArgonSimulation(
            SimulationConfig(n_cells=2, temperature=50.0), rng=NumpyUniformSource(3)
        )
        sim.set_temperature(20.0)
        energies = EnergyReporter()
        sim.add_reporter(energies)

        sim.run(30)

        assert energies.temperature[-1] == pytest.approx(20.0, rel=0.15)

    def test_threads_match_serial(self):
        """Test that a threaded run reproduces the serial trajectory."""
        config = SimulationConfig(n_cells=2)
        serial = ArgonSimulation(config, rng=NumpyUniformSource(9), backend=SerialBackend())
        with ThreadPoolBackend(n_workers=3) as backend:
            threaded = ArgonSimulation(config, rng=NumpyUniformSource(9), backend=backend)
            serial.run(5)
            threaded.run(5)

        assert np.allclose(serial.state.positions, threaded.state.positions, atol=1e-12)
        assert threaded.total_energy == pytest.approx(serial.total_energy, rel=1e-10)

    def test_performance(self, small_sim):
        """Test performance counters after a run."""
        assert small_sim.performance["steps_per_second"] == 0.0
        small_sim.run(2)
        perf = small_sim.performance
        assert perf["total_steps"] == 2
        assert perf["steps_per_second"] > 0.0


class TestMutators:
    """Test setters and re-initialization."""

    def test_set_n_cells(self, small_sim):
        """Test that changing the size rebuilds the crystal from step 1."""
        small_sim.run(3)
        small_sim.set_n_cells(3)

        assert small_sim.n_atoms == 108
        assert small_sim.step == 1
        assert small_sim.elapsed_time == 0.0
        assert small_sim.atoms.positions.shape == (108, 3)
        assert np.allclose(small_sim.state.total_momentum, 0.0, atol=1e-10)

    def test_set_n_cells_resizes_state_in_place(self, small_sim):
        """Test that held state references follow a size change."""
        held = small_sim.state

        small_sim.set_n_cells(3)

        assert held is small_sim.state
        assert held.n_atoms == 108
        assert held.n_cells == 3

        small_sim.run(2)
        assert held.step == 3

    def test_set_n_cells_keeps_settings(self, small_sim):
        """Test that size changes keep temperature, scale and ensemble."""
        small_sim.set_ensemble("NVE")
        small_sim.set_lattice_scale(1.05)
        small_sim.set_temperature(30.0)

        small_sim.set_n_cells(1)

        assert small_sim.ensemble is Ensemble.NVE
        assert small_sim.lattice_scale == 1.05
        assert small_sim.target_temperature == pytest.approx(30.0)

    def test_set_lattice_scale(self, small_sim):
        """Test that scaling the lattice scales the box."""
        before = small_sim.periodic_length
        small_sim.run(2)

        small_sim.set_lattice_scale(1.1)

        assert small_sim.periodic_length == pytest.approx(1.1 * before)
        assert small_sim.step == 1

    def test_set_temperature_does_not_restart(self, small_sim):
        """Test that a new target keeps the trajectory."""
        small_sim.run(2)
        small_sim.set_temperature(80.0)

        assert small_sim.step == 3
        assert small_sim.target_temperature == pytest.approx(80.0)

    def test_set_ensemble(self, small_sim):
        """Test switching ensemble by name restarts the run."""
        small_sim.run(2)
        small_sim.set_ensemble("nve")

        assert small_sim.ensemble is Ensemble.NVE
        assert small_sim.step == 1

    @pytest.mark.parametrize(
        "setter,value",
        [
            ("set_n_cells", 0),
            ("set_lattice_scale", 0.0),
            ("set_temperature", -5.0),
            ("set_ensemble", "NPT"),
        ],
    )
    def test_invalid_values(self, small_sim, setter, value):
        """Test that invalid input is rejected."""
        with pytest.raises(ValueError):
            getattr(small_sim, setter)(value)


class TestObservables:
    """Test the read-only query surface."""

    def test_atoms_read_only(self, small_sim):
        """Test that particle arrays cannot be written through the view."""
        atoms = small_sim.atoms
        assert len(atoms) == 32
        with pytest.raises(ValueError):
            atoms.velocities[0] = 0.0

    def test_force_magnitude(self, small_sim):
        """Test force norms and index checking."""
        small_sim.run_step()
        expected = np.linalg.norm(small_sim.atoms.forces[5])
        assert small_sim.force_magnitude(5) == pytest.approx(expected)

        with pytest.raises(IndexError):
            small_sim.force_magnitude(32)
        with pytest.raises(IndexError):
            small_sim.force_magnitude(-1)

    def test_energy_units(self, small_sim):
        """Test Hartree conversion of the energies."""
        small_sim.run_step()
        state = small_sim.state

        assert small_sim.kinetic_energy == pytest.approx(
            constants.reduced_to_hartree(state.kinetic_energy)
        )
        assert small_sim.potential_energy == pytest.approx(
            constants.reduced_to_hartree(state.potential_energy)
        )
        assert small_sim.total_energy == pytest.approx(
            small_sim.kinetic_energy + small_sim.potential_energy
        )

    def test_pressure(self, small_sim):
        """Test the virial pressure in atm."""
        small_sim.run_step()
        state = small_sim.state
        expected = constants.reduced_pressure_to_atm(
            state.n_atoms, state.temperature, state.virial, state.periodic_length
        )
        assert small_sim.pressure == pytest.approx(expected)

    def test_observables(self, small_sim):
        """Test the observable dictionary."""
        small_sim.run_step()
        obs = small_sim.observables()

        assert obs["step"] == 1
        assert obs["temperature"] == pytest.approx(small_sim.temperature)
        assert set(obs) == {
            "step",
            "time",
            "temperature",
            "kinetic_energy",
            "potential_energy",
            "total_energy",
            "pressure",
        }


class TestReporters:
    """Test reporters attached to the simulation."""

    def test_energy_reporter(self, small_sim):
        """Test recording one row per step."""
        reporter = EnergyReporter()
        small_sim.add_reporter(reporter)

        small_sim.run(4)

        assert list(reporter.steps) == [1, 2, 3, 4]
        assert len(reporter.total_energy) == 4
        assert reporter.times[-1] == pytest.approx(small_sim.elapsed_time)

        reporter.clear()
        assert len(reporter.steps) == 0

    def test_reporter_frequency(self, small_sim):
        """Test that reporters fire every N steps."""
        reporter = EnergyReporter(frequency=2)
        small_sim.add_reporter(reporter)

        small_sim.run(5)

        assert list(reporter.steps) == [2, 4]

    def test_state_reporter(self, small_sim):
        """Test the text table output."""
        out = io.StringIO()
        small_sim.add_reporter(StateReporter(frequency=1, file=out))

        small_sim.run(3)

        lines = out.getvalue().strip().split("\n")
        assert lines[0].split("\t") == list(StateReporter.HEADERS)
        assert len(lines) == 4
        assert lines[-1].split("\t")[0] == "3"

    def test_callback_reporter(self, small_sim):
        """Test custom reporting callbacks."""
        seen = []
        small_sim.add_reporter(
            CallbackReporter(lambda state, obs: seen.append(obs["step"]), frequency=1)
        )

        small_sim.run(3)

        assert seen == [1, 2, 3]

    def test_stop_from_reporter(self, small_sim):
        """Test that stop() from a reporter ends the run after that step."""

        def halt(state, obs):
            if obs["step"] == 2:
                small_sim.stop()

        small_sim.add_reporter(CallbackReporter(halt, frequency=1))
        small_sim.run(10)

        assert small_sim.step == 3
        assert small_sim.performance["total_steps"] == 2

    def test_remove_reporter(self, small_sim):
        """Test that removed reporters stop receiving data."""
        reporter = EnergyReporter()
        small_sim.add_reporter(reporter)
        small_sim.run(1)
        small_sim.remove_reporter(reporter)
        small_sim.run(1)

        assert len(reporter.steps) == 1

    def test_reporter_group(self, small_sim):
        """Test reporter group bookkeeping."""
        group = ReporterGroup()
        reporter = EnergyReporter()
        group.add(reporter)
        assert len(group) == 1

        small_sim.state.step = 3
        group.report(small_sim.state)
        assert list(reporter.steps) == [2]

        group.remove(reporter)
        assert len(group) == 0
