from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from .algorithms import run_algorithm
from .config import SimulationOptions
from .models import Algorithm, Process, ProcessId, ScheduleResult
from .registry import ProcessRegistry, new_process

logger = logging.getLogger(__name__)


class SchedulerSession:
    """
    The four-operation surface a front end talks to: add, remove, list, run.

    A run snapshots the registry, schedules the snapshot, and installs the
    annotated processes as the new registry contents. If the engine raises,
    the registry is left exactly as it was.
    """

    def __init__(
        self,
        registry: Optional[ProcessRegistry] = None,
        options: Optional[SimulationOptions] = None,
    ) -> None:
        self.registry = registry if registry is not None else ProcessRegistry()
        self.options = options or SimulationOptions()
        self.last_result: Optional[ScheduleResult] = None

    def add_process(
        self,
        pid: ProcessId,
        arrival_time: Any,
        burst_time: Any,
        priority: Any = None,
    ) -> Process:
        return self.registry.add(new_process(pid, arrival_time, burst_time, priority))

    def add_processes(self, processes: Iterable[Process]) -> List[Process]:
        return [self.registry.add(p) for p in processes]

    def remove_process(self, pid: ProcessId) -> bool:
        return self.registry.remove(pid)

    def list_processes(self) -> List[Process]:
        return self.registry.list()

    def run_simulation(
        self,
        algorithm: Union[Algorithm, str],
        options: Union[SimulationOptions, Mapping[str, Any], None] = None,
    ) -> List[Process]:
        alg = Algorithm.parse(algorithm)
        if options is None:
            opts = self.options
        elif isinstance(options, SimulationOptions):
            opts = options
        else:
            opts = SimulationOptions.from_mapping(options)

        # Hold the registry from snapshot to replace_all so no add or remove
        # made in between is lost.
        with self.registry.lock:
            snapshot = self.registry.list()
            logger.info("Running %s on %d processes", alg.label, len(snapshot))

            result = run_algorithm(alg, snapshot, quantum=opts.quantum)

            self.registry.replace_all(result.processes)
        self.last_result = result
        logger.info(
            "%s finished: makespan=%s, cpu busy=%s",
            alg.label,
            result.system.makespan if result.system else None,
            result.system.cpu_busy_time if result.system else None,
        )
        return list(result.processes)
