"""
Process scheduler package.

Simulates FCFS, Round Robin, Shortest Job First and Priority scheduling
over a registry of processes, and ships a command-line front end.
"""

from .errors import (
    DuplicateIdError,
    EmptyInputError,
    IncompleteProcessError,
    InvalidQuantumError,
    SchedulerError,
    UnsupportedAlgorithmError,
    ValidationError,
)
from .models import Algorithm, Process, ProcessState, ScheduleResult
from .registry import ProcessRegistry
from .session import SchedulerSession

__all__ = [
    "Algorithm",
    "DuplicateIdError",
    "EmptyInputError",
    "IncompleteProcessError",
    "InvalidQuantumError",
    "Process",
    "ProcessRegistry",
    "ProcessState",
    "ScheduleResult",
    "SchedulerError",
    "SchedulerSession",
    "UnsupportedAlgorithmError",
    "ValidationError",
]
