import threading

import pytest

from process_scheduler.config import SimulationOptions
from process_scheduler.errors import (
    DuplicateIdError,
    EmptyInputError,
    InvalidQuantumError,
    UnsupportedAlgorithmError,
    ValidationError,
)
from process_scheduler.models import Algorithm, ProcessState
from process_scheduler import session as session_module
from process_scheduler.session import SchedulerSession


def _session():
    session = SchedulerSession()
    session.add_process("P1", 0, 5)
    session.add_process("P2", 1, 3)
    session.add_process("P3", 2, 8)
    return session


def test_add_list_remove():
    session = _session()
    session.remove_process("P2")
    session.remove_process("P2")
    assert [p.pid for p in session.list_processes()] == ["P1", "P3"]


def test_add_process_errors_leave_registry_usable():
    session = _session()
    with pytest.raises(DuplicateIdError):
        session.add_process("P1", 4, 4)
    with pytest.raises(ValidationError):
        session.add_process("P4", "", 4)
    session.add_process("P4", 4, 4)
    assert len(session.list_processes()) == 4


def test_run_fcfs_replaces_registry_contents():
    session = _session()
    annotated = session.run_simulation(Algorithm.FCFS)

    assert [p.start_time for p in annotated] == [0, 5, 8]
    assert [p.completion_time for p in annotated] == [5, 8, 16]
    assert [p.waiting_time for p in annotated] == [0, 4, 6]
    assert session.list_processes() == annotated
    assert all(p.state is ProcessState.TERMINATED for p in session.list_processes())
    assert session.last_result.algorithm is Algorithm.FCFS


def test_run_sjf_by_name():
    annotated = _session().run_simulation("sjf")
    assert {p.pid: p.waiting_time for p in annotated} == {"P1": 0, "P2": 4, "P3": 6}


def test_run_rr_with_options_mapping():
    session = SchedulerSession()
    session.add_process("P1", 0, 5)
    session.add_process("P2", 1, 3)

    annotated = session.run_simulation("rr", {"quantum": 2})
    assert {p.pid: p.completion_time for p in annotated} == {"P1": 8, "P2": 7}
    assert session.last_result.quantum == 2


def test_rerun_on_annotated_registry_is_stable():
    session = _session()
    first = session.run_simulation("fcfs")
    second = session.run_simulation("fcfs")
    assert [(p.pid, p.start_time, p.completion_time) for p in first] == [
        (p.pid, p.start_time, p.completion_time) for p in second
    ]


def test_add_after_run_then_rerun():
    session = _session()
    session.run_simulation("priority")
    session.add_process("P4", 0, 1, priority=-1)
    annotated = session.run_simulation("priority")
    assert annotated[0].pid == "P4"
    assert len(annotated) == 4


def test_empty_registry_fails():
    session = SchedulerSession()
    with pytest.raises(EmptyInputError):
        session.run_simulation("fcfs")
    assert session.list_processes() == []
    assert session.last_result is None


def test_unsupported_algorithm_leaves_registry_untouched():
    session = _session()
    before = session.list_processes()
    with pytest.raises(UnsupportedAlgorithmError):
        session.run_simulation("lottery")
    assert session.list_processes() == before
    assert session.last_result is None


def test_invalid_quantum_leaves_registry_untouched():
    session = _session()
    before = session.list_processes()
    with pytest.raises(InvalidQuantumError):
        session.run_simulation("rr", SimulationOptions(quantum=0))
    assert session.list_processes() == before


def test_session_default_options():
    session = SchedulerSession(options=SimulationOptions(quantum=4))
    session.add_process("P1", 0, 9)
    session.run_simulation("rr")
    assert session.last_result.quantum == 4
    assert [s.duration for s in session.last_result.timeline] == [4, 4, 1]


def test_run_holds_registry_until_results_are_installed(monkeypatch):
    session = _session()
    real_run = session_module.run_algorithm
    adder_blocked = []

    def run_while_adding(*args, **kwargs):
        adder = threading.Thread(target=session.add_process, args=("P4", 0, 1))
        adder.start()
        adder.join(timeout=0.2)
        adder_blocked.append(adder.is_alive())
        result = real_run(*args, **kwargs)
        run_while_adding.adder = adder
        return result

    monkeypatch.setattr(session_module, "run_algorithm", run_while_adding)
    session.run_simulation("fcfs")
    run_while_adding.adder.join(timeout=5)

    assert adder_blocked == [True]
    pids = [p.pid for p in session.list_processes()]
    assert pids == ["P1", "P2", "P3", "P4"]
    assert session.registry.get("P4").state is ProcessState.NEW
