from rich.panel import Panel

from process_scheduler.gantt import build_rich_gantt, render_gantt
from process_scheduler.models import ScheduledSlice


def test_render_gantt_contiguous():
    slices = [
        ScheduledSlice("P2", 5, 8),
        ScheduledSlice("P1", 0, 5),
        ScheduledSlice("P3", 8, 16),
    ]
    lines = render_gantt(slices).splitlines()
    assert lines[0] == "Gantt Chart:"
    assert lines[1] == "|" + "=" * 16 + "|"
    assert lines[2] == " P1   P2 P3"
    assert lines[3] == "0 5 8 16"


def test_render_gantt_marks_idle_time():
    lines = render_gantt([ScheduledSlice("P1", 0, 2), ScheduledSlice(7, 5, 6)]).splitlines()
    assert lines[1] == "|==...=|"
    assert lines[2] == " P1   7"
    assert lines[3] == "0 2 5 6"


def test_empty_gantt():
    assert render_gantt([]) == "(no execution)"
    panel, marks = build_rich_gantt([])
    assert isinstance(panel, Panel)
    assert marks == ""


def test_rich_gantt_time_marks():
    panel, marks = build_rich_gantt([ScheduledSlice("P1", 1, 3), ScheduledSlice("P2", 3, 4)])
    assert isinstance(panel, Panel)
    assert marks == "0  1  3  4"
