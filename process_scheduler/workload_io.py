from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, List, Mapping, Union

from .errors import ValidationError
from .models import Process
from .registry import new_process

# Canonical field name -> accepted spellings, form-style camelCase included.
_FIELD_ALIASES = {
    "pid": ("pid", "id"),
    "arrival_time": ("arrival_time", "arrivalTime", "arrival"),
    "burst_time": ("burst_time", "burstTime", "burst"),
    "priority": ("priority",),
}


def load_workload(path: Union[str, Path]) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _lookup(mapping: Mapping[str, Any], name: str) -> Any:
    for key in _FIELD_ALIASES[name]:
        if key in mapping:
            return mapping[key]
    return None


def _process_from_mapping(mapping: Any) -> Process:
    if not isinstance(mapping, Mapping):
        raise ValidationError(f"Invalid process entry: {mapping!r}")

    try:
        return new_process(
            pid=_lookup(mapping, "pid"),
            arrival_time=_lookup(mapping, "arrival_time"),
            burst_time=_lookup(mapping, "burst_time"),
            priority=_lookup(mapping, "priority"),
        )
    except ValidationError as exc:
        raise ValidationError(f"Invalid process entry {dict(mapping)!r}: {exc}", field=exc.field) from exc
