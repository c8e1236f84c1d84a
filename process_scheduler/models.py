from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from .errors import UnsupportedAlgorithmError

ProcessId = Union[str, int]


class ProcessState(str, Enum):
    NEW = "New"
    READY = "Ready"
    RUNNING = "Running"
    WAITING = "Waiting"
    TERMINATED = "Terminated"


class Algorithm(str, Enum):
    """
    The closed set of scheduling policies the engine knows how to run.
    """

    FCFS = "fcfs"
    RR = "rr"
    SJF = "sjf"
    PRIORITY = "priority"

    @property
    def label(self) -> str:
        return _ALGORITHM_LABELS[self]

    @property
    def preemptive(self) -> bool:
        return self is Algorithm.RR

    @classmethod
    def parse(cls, value: Union["Algorithm", str]) -> "Algorithm":
        """
        Accept an Algorithm, its short name ("rr") or its label, case-insensitively.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            needle = value.strip().lower()
            for alg in cls:
                if needle in (alg.value, alg.name.lower(), alg.label.lower()):
                    return alg
        raise UnsupportedAlgorithmError(value)


_ALGORITHM_LABELS = {
    Algorithm.FCFS: "First-Come, First-Served (FCFS)",
    Algorithm.RR: "Round Robin (RR)",
    Algorithm.SJF: "Shortest Job First (SJF)",
    Algorithm.PRIORITY: "Priority Scheduling",
}


@dataclass(frozen=True)
class Process:
    """
    A process record. Metric fields stay None until a simulation has run;
    the engine returns new instances instead of touching its input.
    """

    pid: ProcessId
    arrival_time: int
    burst_time: int
    priority: int = 0
    state: ProcessState = ProcessState.NEW
    start_time: Optional[int] = None
    completion_time: Optional[int] = None
    turnaround_time: Optional[int] = None
    waiting_time: Optional[int] = None
    response_time: Optional[int] = None

    @property
    def has_metrics(self) -> bool:
        return self.completion_time is not None


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: ProcessId
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float
    starvation_count: int = 0


@dataclass
class ScheduleResult:
    algorithm: Algorithm
    quantum: Optional[int]
    processes: List[Process] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    system: Optional[SystemMetrics] = None

    def by_pid(self, pid: ProcessId) -> Process:
        for p in self.processes:
            if p.pid == pid:
                return p
        raise KeyError(pid)

    def slices_for(self, pid: ProcessId) -> List[ScheduledSlice]:
        return [s for s in self.timeline if s.pid == pid]
