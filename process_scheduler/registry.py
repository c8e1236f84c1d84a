from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Iterable, Iterator, List, Optional

from .errors import DuplicateIdError, ValidationError
from .models import Process, ProcessId, ProcessState

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("pid", "arrival_time", "burst_time")


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer, got {value!r}", field=name)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ValidationError(f"{name} must be an integer, got {value!r}", field=name) from exc


def new_process(
    pid: Optional[ProcessId],
    arrival_time: Any,
    burst_time: Any,
    priority: Any = None,
) -> Process:
    """
    Build a validated Process from raw field values, as typed into a form or
    read from a workload file. Integer-like strings are accepted.
    """
    raw = {"pid": pid, "arrival_time": arrival_time, "burst_time": burst_time}
    for name in _REQUIRED_FIELDS:
        if _is_missing(raw[name]):
            raise ValidationError(f"Missing required field: {name}", field=name)

    # Form input and workload files disagree on id types; ids are text from here on.
    pid = str(pid).strip()

    arrival = _to_int("arrival_time", arrival_time)
    burst = _to_int("burst_time", burst_time)
    prio = 0 if _is_missing(priority) else _to_int("priority", priority)

    if arrival < 0:
        raise ValidationError(f"arrival_time must be non-negative, got {arrival}", field="arrival_time")
    if burst <= 0:
        raise ValidationError(f"burst_time must be positive, got {burst}", field="burst_time")

    return Process(pid=pid, arrival_time=arrival, burst_time=burst, priority=prio)


class ProcessRegistry:
    """
    Ordered in-memory collection of processes, unique by pid.

    All mutations go through one lock, and list() hands out a copy, so a
    caller can iterate a snapshot while the registry keeps changing.
    """

    def __init__(self, processes: Optional[Iterable[Process]] = None) -> None:
        self._lock = threading.RLock()
        self._processes: List[Process] = []
        for p in processes or ():
            self.add(p)

    def add(self, record: Process) -> Process:
        for name in _REQUIRED_FIELDS:
            if _is_missing(getattr(record, name, None)):
                raise ValidationError(f"Missing required field: {name}", field=name)

        process = replace(
            record,
            state=ProcessState.NEW,
            priority=0 if record.priority is None else record.priority,
            start_time=None,
            completion_time=None,
            turnaround_time=None,
            waiting_time=None,
            response_time=None,
        )

        with self._lock:
            if self._index_of(process.pid) is not None:
                logger.warning("Rejected duplicate process id %r", process.pid)
                raise DuplicateIdError(process.pid)
            self._processes.append(process)

        logger.info(
            "Added process %s (arrival=%s, burst=%s, priority=%s)",
            process.pid,
            process.arrival_time,
            process.burst_time,
            process.priority,
        )
        return process

    def remove(self, pid: ProcessId) -> bool:
        """
        Drop the process with this id. Unknown ids are ignored; the return
        value says whether anything was removed.
        """
        with self._lock:
            idx = self._index_of(pid)
            if idx is None:
                logger.debug("Remove of unknown process %r ignored", pid)
                return False
            del self._processes[idx]
        logger.info("Removed process %s", pid)
        return True

    def list(self) -> List[Process]:
        with self._lock:
            return list(self._processes)

    def replace_all(self, records: Iterable[Process]) -> None:
        new_contents = list(records)
        seen = set()
        for p in new_contents:
            if str(p.pid) in seen:
                raise DuplicateIdError(p.pid)
            seen.add(str(p.pid))

        with self._lock:
            self._processes = new_contents
        logger.info("Registry replaced with %d processes", len(new_contents))

    def clear(self) -> None:
        with self._lock:
            self._processes = []

    def get(self, pid: ProcessId) -> Optional[Process]:
        with self._lock:
            idx = self._index_of(pid)
            return None if idx is None else self._processes[idx]

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def _index_of(self, pid: ProcessId) -> Optional[int]:
        # 1 and "1" name the same process.
        key = str(pid)
        for i, p in enumerate(self._processes):
            if str(p.pid) == key:
                return i
        return None

    def __contains__(self, pid: object) -> bool:
        return self.get(pid) is not None  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[Process]:
        return iter(self.list())

    def __len__(self) -> int:
        with self._lock:
            return len(self._processes)
