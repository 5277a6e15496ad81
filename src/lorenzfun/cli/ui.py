from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

import typer


def _timestamp_utc() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _abs_path(path: Path | None) -> str:
    if path is None:
        return "n/a"
    try:
        return str(path.resolve())
    except OSError:
        return str(path)


def _fmt_triple(values: Sequence[float] | None) -> str:
    if values is None:
        return "n/a"
    return "(" + ",".join(f"{float(v):g}" for v in values) + ")"


def print_run_header(
    command: str,
    *,
    start: Sequence[float] | None = None,
    dt: float | None = None,
    steps: int | None = None,
    sigma: float | None = None,
    rho: float | None = None,
    beta: float | None = None,
) -> None:
    typer.echo(f"[run] command={command} ts_utc={_timestamp_utc()}")
    dt_text = dt if dt is not None else "n/a"
    steps_text = steps if steps is not None else "n/a"
    typer.echo(f"[lorenz] start={_fmt_triple(start)} dt={dt_text} steps={steps_text}")
    if sigma is not None or rho is not None or beta is not None:
        typer.echo(f"[lorenz] sigma={sigma} rho={rho} beta={beta}")


def print_io_write(path: Path) -> None:
    typer.echo(f"[io] Writing output: {_abs_path(path)}")


def print_state(label: str, state: Sequence[float]) -> None:
    x, y, z = state
    typer.echo(f"[state] {label} x={x:.6f} y={y:.6f} z={z:.6f}")


def print_divergence(initial: float, final: float, growth: float | None) -> None:
    growth_text = f"{growth:.3e}" if growth is not None else "n/a"
    typer.echo(f"[divergence] initial={initial:.3e} final={final:.6f} growth={growth_text}")


def print_done(summary: str) -> None:
    typer.echo(f"[done] {summary}")
