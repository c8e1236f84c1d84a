"""
Typed failures raised by the registry and the scheduling engine.

Everything derives from SchedulerError, itself a ValueError, so callers
that only care about "bad input" can keep catching ValueError.
"""

from __future__ import annotations

from typing import Any, Optional


class SchedulerError(ValueError):
    """Base class for all registry and engine errors."""


class ValidationError(SchedulerError):
    """A process record is missing a required field or carries a bad value."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class DuplicateIdError(SchedulerError):
    def __init__(self, pid: Any) -> None:
        super().__init__(f"A process with id {pid!r} already exists")
        self.pid = pid


class EmptyInputError(SchedulerError):
    def __init__(self) -> None:
        super().__init__("Cannot run a simulation without any processes")


class IncompleteProcessError(SchedulerError):
    def __init__(self, pid: Any, field: str) -> None:
        super().__init__(f"Process {pid!r} has no valid {field}")
        self.pid = pid
        self.field = field


class InvalidQuantumError(SchedulerError):
    def __init__(self, quantum: Any) -> None:
        super().__init__(f"Round Robin requires a positive integer quantum, got {quantum!r}")
        self.quantum = quantum


class UnsupportedAlgorithmError(SchedulerError):
    def __init__(self, algorithm: Any) -> None:
        super().__init__(f"Unknown or unsupported algorithm {algorithm!r}")
        self.algorithm = algorithm
