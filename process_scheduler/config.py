from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

DEFAULT_QUANTUM = 2
DEFAULT_LOG_LEVEL = "WARNING"

# Waiting time above this multiple of the average counts as starvation.
STARVATION_FACTOR = 2.0


@dataclass(frozen=True)
class SimulationOptions:
    """
    Tunables for a simulation run. Only Round Robin reads the quantum.
    """

    quantum: int = DEFAULT_QUANTUM

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "SimulationOptions":
        if not mapping:
            return cls()
        quantum = mapping.get("quantum")
        return cls(quantum=DEFAULT_QUANTUM if quantum is None else quantum)
