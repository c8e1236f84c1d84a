from __future__ import annotations

from typing import Dict, Sequence

from .config import STARVATION_FACTOR
from .models import Process, ScheduleResult, SystemMetrics


def compute_system_metrics(result: ScheduleResult, starvation_factor: float = STARVATION_FACTOR) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given populated per-process metrics
    and timeline slices. The makespan runs from t=0, so leading idle time
    counts against utilization.
    """
    finished = [p for p in result.processes if p.has_metrics]
    if not finished:
        system = SystemMetrics(cpu_busy_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)
        result.system = system
        return system

    makespan = max(p.completion_time for p in finished)
    cpu_busy_time = sum(slice_.duration for slice_ in result.timeline)

    throughput = len(finished) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    avg_wait = sum(p.waiting_time for p in finished) / len(finished)
    starvation_count = sum(1 for p in finished if p.waiting_time > starvation_factor * avg_wait)

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
        starvation_count=starvation_count,
    )
    result.system = system
    return system


def summarize_process_metrics(processes: Sequence[Process]) -> Dict[str, float]:
    """
    Return averages of the key per-process metrics for quick comparison.
    Processes that have not been simulated yet are ignored.
    """
    finished = [p for p in processes if p.has_metrics]
    if not finished:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(finished)
    return {
        "avg_waiting": sum(p.waiting_time for p in finished) / n,
        "avg_turnaround": sum(p.turnaround_time for p in finished) / n,
        "avg_response": sum(p.response_time for p in finished) / n,
    }
