from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ProcessId, ScheduledSlice

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def _segments(slices: List[ScheduledSlice]) -> Iterator[Tuple[Optional[ScheduledSlice], int, int]]:
    """
    Walk the timeline left to right, yielding (slice, width, end_time).
    Idle stretches come out with slice=None.
    """
    last_time = 0
    for sl in sorted(slices, key=lambda s: (s.start_time, s.end_time)):
        if sl.start_time > last_time:
            yield None, sl.start_time - last_time, sl.start_time
        yield sl, max(1, sl.duration), sl.end_time
        last_time = sl.end_time


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart: '=' for busy time units, '.' for idle ones.
    """
    if not slices:
        return "(no execution)"

    bar, labels, marks = [], [], ["0"]
    for sl, width, end in _segments(slices):
        if sl is None:
            bar.append("." * width)
            labels.append(" " * width)
        else:
            bar.append("=" * width)
            labels.append(str(sl.pid)[:width].ljust(width))
        marks.append(str(end))

    return "\n".join(
        ["Gantt Chart:", f"|{''.join(bar)}|", f" {''.join(labels)}".rstrip(), " ".join(marks)]
    )


def build_rich_gantt(slices: List[ScheduledSlice]) -> Tuple[Panel, str]:
    """
    Colored Gantt chart inside a Panel, plus a line of right-aligned time marks.
    """
    if not slices:
        return Panel("No execution", title="Gantt Chart"), ""

    palette: Dict[ProcessId, str] = {}
    bar, labels = Text(), Text()
    marks = "0"

    for sl, width, end in _segments(slices):
        if sl is None:
            bar.append(" " * width)
            labels.append(" " * width)
        else:
            color = palette.setdefault(sl.pid, COLORS[len(palette) % len(COLORS)])
            bar.append(" " * width, style=f"on {color}")
            labels.append(str(sl.pid)[:width].ljust(width), style="bold")
        marks += f"{end:>3}"

    grid = Table.grid(padding=(0, 0))
    grid.add_row(bar)
    grid.add_row(labels)
    return Panel.fit(grid, title="Gantt Chart"), marks
