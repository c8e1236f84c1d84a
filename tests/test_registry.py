import pytest

from process_scheduler.errors import DuplicateIdError, ValidationError
from process_scheduler.models import Process, ProcessState
from process_scheduler.registry import ProcessRegistry, new_process


def test_new_process_parses_form_values():
    p = new_process("P1", "0", " 5 ", "")
    assert p == Process("P1", arrival_time=0, burst_time=5, priority=0)


def test_new_process_stores_ids_as_text():
    assert new_process(7, 1, 2, 3).pid == "7"
    assert new_process(" P1 ", 1, 2).pid == "P1"


@pytest.mark.parametrize(
    "fields, missing",
    [
        ((None, 0, 5), "pid"),
        (("", 0, 5), "pid"),
        (("P1", None, 5), "arrival_time"),
        (("P1", 0, "  "), "burst_time"),
    ],
)
def test_new_process_missing_fields(fields, missing):
    with pytest.raises(ValidationError) as info:
        new_process(*fields)
    assert info.value.field == missing


@pytest.mark.parametrize(
    "fields",
    [
        ("P1", "abc", 5),
        ("P1", 0, "2.5"),
        ("P1", -1, 5),
        ("P1", 0, 0),
        ("P1", 0, -3),
        ("P1", 0, 5, "high"),
        ("P1", True, 5),
    ],
)
def test_new_process_bad_values(fields):
    with pytest.raises(ValidationError):
        new_process(*fields)


def test_add_sets_defaults_and_keeps_order():
    reg = ProcessRegistry()
    reg.add(Process("B", arrival_time=2, burst_time=1, priority=None))
    reg.add(Process("A", arrival_time=0, burst_time=4, priority=3))

    listed = reg.list()
    assert [p.pid for p in listed] == ["B", "A"]
    assert listed[0].priority == 0
    assert all(p.state is ProcessState.NEW for p in listed)


def test_add_resets_metrics_from_previous_run():
    reg = ProcessRegistry()
    done = Process("P1", 0, 3, state=ProcessState.TERMINATED, start_time=0, completion_time=3)
    added = reg.add(done)
    assert added.state is ProcessState.NEW
    assert added.completion_time is None


def test_add_missing_field():
    reg = ProcessRegistry()
    with pytest.raises(ValidationError):
        reg.add(Process("P1", arrival_time=None, burst_time=4))
    assert len(reg) == 0


def test_duplicate_id_rejected_and_registry_unchanged():
    reg = ProcessRegistry()
    reg.add(Process("P1", 0, 5))
    before = reg.list()

    with pytest.raises(DuplicateIdError) as info:
        reg.add(Process("P1", 3, 1))

    assert info.value.pid == "P1"
    assert reg.list() == before


def test_ids_stay_unique_across_many_adds():
    reg = ProcessRegistry()
    for pid in ["a", "b", "a", "c", "b", "d", "a"]:
        try:
            reg.add(Process(pid, 0, 1))
        except DuplicateIdError:
            pass
    pids = [p.pid for p in reg.list()]
    assert pids == ["a", "b", "c", "d"]


def test_remove_is_a_noop_for_unknown_ids():
    reg = ProcessRegistry([Process("P1", 0, 5), Process("P2", 1, 3)])
    reg.remove("nope")
    reg.remove("P1")
    reg.remove("P1")
    assert [p.pid for p in reg.list()] == ["P2"]
    assert "P1" not in reg
    assert "P2" in reg


def test_list_is_a_snapshot():
    reg = ProcessRegistry([Process("P1", 0, 5)])
    snapshot = reg.list()
    reg.add(Process("P2", 1, 3))
    snapshot.append(Process("X", 0, 1))

    assert [p.pid for p in snapshot] == ["P1", "X"]
    assert [p.pid for p in reg.list()] == ["P1", "P2"]


def test_replace_all_installs_new_contents():
    reg = ProcessRegistry([Process("P1", 0, 5)])
    reg.replace_all([Process("P1", 0, 5, state=ProcessState.TERMINATED, completion_time=5)])
    assert reg.get("P1").completion_time == 5


def test_replace_all_rejects_duplicates_atomically():
    reg = ProcessRegistry([Process("P1", 0, 5)])
    with pytest.raises(DuplicateIdError):
        reg.replace_all([Process("X", 0, 1), Process("X", 1, 1)])
    assert [p.pid for p in reg.list()] == ["P1"]


def test_clear_and_iteration():
    reg = ProcessRegistry([Process("P1", 0, 5), Process("P2", 0, 5)])
    assert [p.pid for p in reg] == ["P1", "P2"]
    reg.clear()
    assert len(reg) == 0
    assert reg.get("P1") is None


def test_integer_and_text_ids_name_the_same_process():
    reg = ProcessRegistry([Process(1, 0, 5)])
    with pytest.raises(DuplicateIdError):
        reg.add(Process("1", 2, 3))
    assert reg.get("1").pid == 1
    assert reg.remove("1") is True
    assert reg.remove(1) is False
    assert len(reg) == 0
