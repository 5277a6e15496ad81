from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Dict, List

import matplotlib.pyplot as plt
import numpy as np

DIVERGENCE_FIELDS = ["step", "t", "distance"]


def divergence_rows(distances: np.ndarray, dt: float) -> List[Dict[str, Any]]:
    return [
        {"step": i, "t": i * dt, "distance": float(d)}
        for i, d in enumerate(distances)
    ]


def divergence_summary(distances: np.ndarray, dt: float) -> Dict[str, Any]:
    initial = float(distances[0])
    final = float(distances[-1])
    return {
        "steps": len(distances) - 1,
        "dt": dt,
        "initial_distance": initial,
        "final_distance": final,
        "max_distance": float(np.max(distances)),
        "growth": final / initial if initial else None,
    }


def write_csv(path: Path, rows: List[Dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=DIVERGENCE_FIELDS)
        writer.writeheader()
        writer.writerows(rows)


def plot_divergence(distances: np.ndarray, dt: float, out_file: Path) -> Path:
    """Plot separation against time on a log scale and save it as an image."""
    out_file.parent.mkdir(parents=True, exist_ok=True)
    t = np.arange(len(distances)) * dt
    # log scale cannot show an exact zero
    positive = np.where(distances > 0, distances, np.nan)
    plt.figure(figsize=(8, 4.5))
    plt.plot(t, positive, color="tab:red", lw=1)
    plt.yscale("log")
    plt.xlabel("t")
    plt.ylabel("separation")
    plt.title(f"Divergence of twin trajectories (dt={dt}, initial={distances[0]:.1e})")
    plt.grid(True, alpha=0.3)
    plt.savefig(out_file, dpi=150, bbox_inches="tight")
    plt.close()
    return out_file
