"""Tests for solver modules and solution writers."""

import io
import numpy as np
import pytest

from rkimex.core import properties as P
from rkimex.core.config import IntegratorConfig
from rkimex.core.errors import ConfigurationError, IntegratorStateError
from rkimex.core.rhs import FunctionRHS
from rkimex.methods.runge_kutta import dormand_prince54, rk4
from rkimex.modules import (
    AllSolutionWriterModule,
    CompoundSolutionWriter,
    DiskWriter,
    InterpolatingSolutionWriterModule,
    MemoryWriter,
    ModuleState,
    ProgressReporterModule,
    SolutionCollectorModule,
    SolverModule,
)
from rkimex.stepping.integrator import Integrator


def decay_rhs():
    return FunctionRHS(lambda t, y: -y, size=1, jac=lambda t, y: -np.eye(1))


class NeedsUnknown(SolverModule):
    required_properties = frozenset({P.FINAL_TIME, "jacobianCondition"})

    def step(self, properties):
        pass


class Recorder(SolverModule):
    """Keeps every published step and lifecycle event."""

    required_properties = frozenset({P.INITIAL_TIME, P.FINAL_TIME, P.STEP_ACCEPTED})

    def __init__(self, log=None, name="recorder"):
        self.log = log if log is not None else []
        self.name = name
        self.steps = []

    def begin_stepping(self, initial_time, initial_state, constant_properties):
        self.log.append((self.name, "begin"))
        self.constant = {
            name: constant_properties.kind(name) for name in constant_properties
        }

    def step(self, properties):
        self.log.append((self.name, "step"))
        self.steps.append((
            properties.get_real(P.INITIAL_TIME),
            properties.get_real(P.FINAL_TIME),
            properties.get_bool(P.STEP_ACCEPTED),
        ))

    def end_stepping(self):
        self.log.append((self.name, "end"))


class Reentrant(SolverModule):
    """Tries to register another module from inside a step."""

    def __init__(self, integrator):
        self.integrator = integrator
        self.error = None

    def step(self, properties):
        try:
            self.integrator.add_module(Recorder())
        except IntegratorStateError as exc:
            self.error = exc


class Failing(SolverModule):
    def step(self, properties):
        raise OSError("disk full")


def test_unsupplied_property_is_configuration_error():
    integrator = Integrator(decay_rhs(), rk4())
    with pytest.raises(ConfigurationError, match="jacobianCondition"):
        integrator.add_module(NeedsUnknown())


def test_error_norm_only_with_embedded_scheme():
    class NeedsErrorNorm(SolverModule):
        required_properties = frozenset({P.ERROR_NORM})

        def step(self, properties):
            pass

    with pytest.raises(ConfigurationError):
        Integrator(decay_rhs(), rk4()).add_module(NeedsErrorNorm())
    Integrator(decay_rhs(), dormand_prince54()).add_module(NeedsErrorNorm())


def test_add_module_while_running():
    integrator = Integrator(decay_rhs(), rk4(), IntegratorConfig(adaptive=False))
    module = Reentrant(integrator)
    integrator.add_module(module)
    integrator.solve(0.0, np.ones(1), 0.1, h0=0.05)
    assert isinstance(module.error, IntegratorStateError)


def test_modules_called_in_registration_order():
    log = []
    integrator = Integrator(decay_rhs(), rk4(), IntegratorConfig(adaptive=False))
    integrator.add_module(Recorder(log, "a"))
    integrator.add_module(Recorder(log, "b"))
    integrator.solve(0.0, np.ones(1), 0.2, h0=0.1)

    assert log == [
        ("a", "begin"), ("b", "begin"),
        ("a", "step"), ("b", "step"),
        ("a", "step"), ("b", "step"),
        ("a", "end"), ("b", "end"),
    ]


def test_constant_properties():
    rec = Recorder()
    integrator = Integrator(decay_rhs(), rk4(), IntegratorConfig(adaptive=False))
    integrator.add_module(rec)
    integrator.solve(0.0, np.ones(1), 0.1)
    assert set(rec.constant) == {P.SCHEME, P.RHS_PROPERTY, P.START_TIME, P.END_TIME, P.RTOL, P.ATOL}


def test_lifecycle_and_restart():
    rec = Recorder()
    integrator = Integrator(decay_rhs(), rk4(), IntegratorConfig(adaptive=False))
    integrator.add_module(rec)
    assert integrator.module_state(rec) is ModuleState.UNREGISTERED

    integrator.solve(0.0, np.ones(1), 0.1)
    assert integrator.module_state(rec) is ModuleState.FINISHED
    with pytest.raises(IntegratorStateError):
        integrator.solve(0.0, np.ones(1), 0.1)


def test_end_stepping_called_on_module_failure():
    log = []
    integrator = Integrator(decay_rhs(), rk4(), IntegratorConfig(adaptive=False))
    integrator.add_module(Recorder(log, "a"))
    integrator.add_module(Failing())
    with pytest.raises(OSError, match="disk full"):
        integrator.solve(0.0, np.ones(1), 1.0)
    assert log[-1] == ("a", "end")
    assert not integrator.running


def test_all_solution_writer():
    writer = MemoryWriter()
    integrator = Integrator(decay_rhs(), rk4(), IntegratorConfig(adaptive=False))
    integrator.add_module(AllSolutionWriterModule(writer))
    integrator.solve(0.0, np.ones(1), 0.5, h0=0.1)

    times, values = writer.as_arrays()
    assert np.allclose(times, [0.0, 0.1, 0.2, 0.3, 0.4, 0.5])
    assert np.allclose(values[:, 0], np.exp(-times), atol=1e-6)


def test_disk_writer_format(tmp_path):
    path = tmp_path / "out.dat"
    writer = DiskWriter(path)
    writer.begin()
    writer.emit(0.5, np.array([1.0, -2.25]))
    writer.emit(1.0, np.array([0.125, 3.0]))
    writer.end()

    assert path.read_text() == "0.5  1.0 -2.25\n1.0  0.125 3.0\n\n"


def test_disk_writer_through_integrator(tmp_path):
    path = tmp_path / "decay.dat"
    integrator = Integrator(decay_rhs(), rk4(), IntegratorConfig(adaptive=False))
    integrator.add_module(AllSolutionWriterModule(DiskWriter(path)))
    integrator.solve(0.0, np.ones(1), 0.3, h0=0.1)

    lines = path.read_text().splitlines()
    assert lines[-1] == ""
    rows = [list(map(float, line.split())) for line in lines[:-1]]
    assert len(rows) == 4
    assert rows[0] == [0.0, 1.0]
    assert np.isclose(rows[-1][0], 0.3)


def test_compound_writer_fans_out():
    first, second = MemoryWriter(), MemoryWriter()
    compound = CompoundSolutionWriter([first, second])
    compound.begin()
    compound.emit(0.0, np.array([1.0]))
    compound.emit(1.0, np.array([2.0]))
    compound.end()

    assert first.times == second.times == [0.0, 1.0]
    assert np.allclose(np.vstack(second.values), [[1.0], [2.0]])


def test_interpolating_writer_times():
    """Output at requested times matches the exact solution."""
    writer = MemoryWriter()
    out_times = np.linspace(0.0, 2.0, 9)
    integrator = Integrator(decay_rhs(), dormand_prince54(), IntegratorConfig(rtol=1e-8, atol=1e-10))
    integrator.add_module(InterpolatingSolutionWriterModule(writer, times=out_times))
    integrator.solve(0.0, np.ones(1), 2.0)

    times, values = writer.as_arrays()
    assert np.allclose(times, out_times)
    assert np.allclose(values[:, 0], np.exp(-out_times), atol=1e-6)


def test_interpolating_writer_interval():
    writer = MemoryWriter()
    integrator = Integrator(decay_rhs(), dormand_prince54(), IntegratorConfig(rtol=1e-8, atol=1e-10))
    integrator.add_module(InterpolatingSolutionWriterModule(writer, interval=0.25))
    integrator.solve(0.0, np.ones(1), 1.0)

    times, values = writer.as_arrays()
    assert np.allclose(times, [0.0, 0.25, 0.5, 0.75, 1.0])
    assert np.allclose(values[:, 0], np.exp(-times), atol=1e-6)


def test_interpolating_writer_arguments():
    with pytest.raises(ConfigurationError):
        InterpolatingSolutionWriterModule(MemoryWriter())
    with pytest.raises(ConfigurationError):
        InterpolatingSolutionWriterModule(MemoryWriter(), times=[0.0, 1.0], interval=0.5)
    with pytest.raises(ConfigurationError):
        InterpolatingSolutionWriterModule(MemoryWriter(), times=[0.0, 0.5, 0.5])


def test_progress_reporter():
    stream = io.StringIO()
    integrator = Integrator(decay_rhs(), rk4(), IntegratorConfig(adaptive=False))
    integrator.add_module(ProgressReporterModule(precision=0.2, stream=stream))
    integrator.solve(0.0, np.ones(1), 1.0, h0=0.1)

    lines = stream.getvalue().split()
    assert lines[0] == "30.00%"
    assert lines[-1] == "100.00%"
    assert all(line.endswith("%") for line in lines)


def test_progress_formatter_per_instance():
    first, second = ProgressReporterModule(), ProgressReporterModule()
    first.formatter = "{:.0%}".format
    assert second.formatter(0.5) == "50.00%"


def test_solution_collector():
    collector = SolutionCollectorModule()
    integrator = Integrator(decay_rhs(), rk4(), IntegratorConfig(adaptive=False))
    integrator.add_module(collector)
    integrator.solve(0.0, np.ones(1), 0.4, h0=0.1)

    assert collector.times.shape == (5,)
    assert collector.values.shape == (5, 1)
    assert np.allclose(collector.values[:, 0], np.exp(-collector.times), atol=1e-6)
