from __future__ import annotations

import logging
from collections import deque
from dataclasses import replace
from typing import Callable, Deque, Dict, List, Optional, Sequence, Tuple, Union

from .config import DEFAULT_QUANTUM
from .errors import EmptyInputError, IncompleteProcessError, InvalidQuantumError, UnsupportedAlgorithmError
from .metrics import compute_system_metrics
from .models import Algorithm, Process, ProcessState, ScheduledSlice, ScheduleResult

logger = logging.getLogger(__name__)


def _check_snapshot(processes: Sequence[Process]) -> List[Process]:
    """
    Re-assert the registry's guarantees before scheduling anything.
    """
    snapshot = list(processes)
    if not snapshot:
        raise EmptyInputError()

    for p in snapshot:
        if isinstance(p.arrival_time, bool) or not isinstance(p.arrival_time, int) or p.arrival_time < 0:
            raise IncompleteProcessError(p.pid, "arrival_time")
        if isinstance(p.burst_time, bool) or not isinstance(p.burst_time, int) or p.burst_time <= 0:
            raise IncompleteProcessError(p.pid, "burst_time")
    return snapshot


def _finish(p: Process, start_time: int, completion_time: int) -> Process:
    turnaround_time = completion_time - p.arrival_time
    return replace(
        p,
        state=ProcessState.TERMINATED,
        start_time=start_time,
        completion_time=completion_time,
        turnaround_time=turnaround_time,
        waiting_time=turnaround_time - p.burst_time,
        response_time=start_time - p.arrival_time,
    )


def _build_result(
    algorithm: Algorithm,
    quantum: Optional[int],
    processes: List[Process],
    timeline: List[ScheduledSlice],
) -> ScheduleResult:
    result = ScheduleResult(algorithm=algorithm, quantum=quantum, processes=processes, timeline=timeline)
    compute_system_metrics(result)
    return result


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    sorted() is stable, so processes arriving together keep their
    insertion order.
    """
    processes_sorted = sorted(_check_snapshot(processes), key=lambda p: p.arrival_time)

    time = 0
    timeline: List[ScheduledSlice] = []
    finished: List[Process] = []

    for p in processes_sorted:
        start_time = max(time, p.arrival_time)
        end_time = start_time + p.burst_time

        logger.debug("FCFS: dispatch %s at t=%d until t=%d", p.pid, start_time, end_time)
        timeline.append(ScheduledSlice(pid=p.pid, start_time=start_time, end_time=end_time))
        finished.append(_finish(p, start_time, end_time))

        time = end_time

    return _build_result(Algorithm.FCFS, None, finished, timeline)


def _schedule_greedy(
    algorithm: Algorithm,
    processes: Sequence[Process],
    key: Callable[[Process], Tuple[int, ...]],
) -> ScheduleResult:
    """
    Shared loop for the non-preemptive "pick the best ready process" policies.

    At each decision point, among processes that have arrived and not yet
    run, choose the minimum of (key, arrival_time, insertion index). When
    nothing is ready the clock jumps to the next arrival.
    """
    pending = list(enumerate(_check_snapshot(processes)))

    time = 0
    timeline: List[ScheduledSlice] = []
    finished: List[Process] = []

    while pending:
        ready = [(idx, p) for idx, p in pending if p.arrival_time <= time]

        if not ready:
            time = min(p.arrival_time for _, p in pending)
            logger.debug("%s: CPU idle, jumping to t=%d", algorithm.name, time)
            continue

        idx, p = min(ready, key=lambda item: (*key(item[1]), item[1].arrival_time, item[0]))
        pending = [item for item in pending if item[0] != idx]

        start_time = time
        end_time = start_time + p.burst_time

        logger.debug("%s: dispatch %s at t=%d until t=%d", algorithm.name, p.pid, start_time, end_time)
        timeline.append(ScheduledSlice(pid=p.pid, start_time=start_time, end_time=end_time))
        finished.append(_finish(p, start_time, end_time))

        time = end_time

    return _build_result(algorithm, None, finished, timeline)


def schedule_sjf(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    Ties on burst time go to the earlier arrival, then to the process that
    was registered first.
    """
    return _schedule_greedy(Algorithm.SJF, processes, key=lambda p: (p.burst_time,))


def schedule_priority(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. A missing priority
    counts as 0, the registry default.
    """
    return _schedule_greedy(
        Algorithm.PRIORITY,
        processes,
        key=lambda p: (p.priority if p.priority is not None else 0,),
    )


def schedule_rr(processes: Sequence[Process], quantum: Optional[int] = DEFAULT_QUANTUM) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes join the FIFO ready queue in arrival order (ties by insertion
    order). Arrivals that happen while a slice runs are queued ahead of the
    preempted process.
    """
    if isinstance(quantum, bool) or not isinstance(quantum, int) or quantum <= 0:
        raise InvalidQuantumError(quantum)

    snapshot = _check_snapshot(processes)

    # Bookkeeping is keyed by insertion index, never by pid.
    arrivals = sorted(range(len(snapshot)), key=lambda i: snapshot[i].arrival_time)
    remaining: Dict[int, int] = {i: p.burst_time for i, p in enumerate(snapshot)}
    first_start: Dict[int, int] = {}
    dispatch_order: List[int] = []
    completion: Dict[int, int] = {}

    time = 0
    timeline: List[ScheduledSlice] = []
    ready: Deque[int] = deque()
    next_arrival = 0

    def enqueue_arrivals(current_time: int) -> None:
        nonlocal next_arrival
        while next_arrival < len(arrivals) and snapshot[arrivals[next_arrival]].arrival_time <= current_time:
            ready.append(arrivals[next_arrival])
            next_arrival += 1

    while len(completion) < len(snapshot):
        if not ready:
            # Jump to next arrival if CPU is idle
            time = max(time, snapshot[arrivals[next_arrival]].arrival_time)
            enqueue_arrivals(time)
            continue

        idx = ready.popleft()
        p = snapshot[idx]

        if idx not in first_start:
            first_start[idx] = time
            dispatch_order.append(idx)

        run_time = min(quantum, remaining[idx])
        slice_start = time
        slice_end = time + run_time
        logger.debug("RR: dispatch %s at t=%d until t=%d", p.pid, slice_start, slice_end)
        timeline.append(ScheduledSlice(pid=p.pid, start_time=slice_start, end_time=slice_end))

        time = slice_end
        remaining[idx] -= run_time

        enqueue_arrivals(time)

        if remaining[idx] > 0:
            ready.append(idx)
        else:
            completion[idx] = time

    finished = [_finish(snapshot[i], first_start[i], completion[i]) for i in dispatch_order]
    return _build_result(Algorithm.RR, quantum, finished, timeline)


ALGORITHMS: Dict[Algorithm, Callable[..., ScheduleResult]] = {
    Algorithm.FCFS: schedule_fcfs,
    Algorithm.RR: schedule_rr,
    Algorithm.SJF: schedule_sjf,
    Algorithm.PRIORITY: schedule_priority,
}


def run_algorithm(
    algorithm: Union[Algorithm, str],
    processes: Sequence[Process],
    quantum: Optional[int] = None,
) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. The quantum only matters for Round
    Robin, where it falls back to DEFAULT_QUANTUM when not given.
    """
    alg = Algorithm.parse(algorithm)
    func = ALGORITHMS.get(alg)
    if func is None:
        raise UnsupportedAlgorithmError(algorithm)

    if alg is Algorithm.RR:
        return func(processes, quantum=DEFAULT_QUANTUM if quantum is None else quantum)
    return func(processes)
