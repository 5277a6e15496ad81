from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Dict

import numpy as np

TRAJECTORY_FIELDS = ["step", "x", "y", "z"]


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def trajectory_records(states: np.ndarray) -> list[Dict[str, float]]:
    return [
        {"step": i + 1, "x": float(x), "y": float(y), "z": float(z)}
        for i, (x, y, z) in enumerate(states)
    ]


def write_trajectory(path: Path, states: np.ndarray) -> None:
    """Write states as CSV or JSON, chosen by the file suffix."""
    suffix = path.suffix.lower()
    records = trajectory_records(states)
    if suffix == ".json":
        write_json(path, records)
    elif suffix == ".csv":
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=TRAJECTORY_FIELDS)
            writer.writeheader()
            writer.writerows(records)
    else:
        raise ValueError(f"Unsupported trajectory format '{path.suffix}'. Use .csv or .json")
