from __future__ import annotations

from typing import Sequence

import numpy as np

from lorenzfun.core.chaos.base import ChaoticSystem
from lorenzfun.core.chaos.lorenz import LorenzSystem
from lorenzfun.core.constants import (
    BETA,
    CHAOS_OFFSET,
    DEFAULT_DT,
    DIVERGENCE_STEPS,
    RHO,
    SIGMA,
    SVG_START,
    SVG_STEPS,
)
from lorenzfun.utils.logging import get_logger

logger = get_logger(__name__)


def build_system(
    start: Sequence[float],
    sigma: float = SIGMA,
    beta: float = BETA,
    rho: float = RHO,
) -> LorenzSystem:
    x, y, z = start
    return LorenzSystem(x=x, y=y, z=z, sigma=sigma, beta=beta, rho=rho)


def simulate(system: ChaoticSystem, steps: int, dt: float = DEFAULT_DT) -> np.ndarray:
    """Run ``steps`` updates and return the state after each one as an ``(steps, 3)`` array."""
    logger.debug("Simulating steps=%d dt=%s from state=%s", steps, dt, system.state)
    states = np.empty((steps, 3), dtype=np.float64)
    for i in range(steps):
        states[i] = system.update(dt)
    if steps:
        logger.debug("Final state x=%.6f y=%.6f z=%.6f", *states[-1])
    return states


def svg_points(
    steps: int = SVG_STEPS,
    dt: float = DEFAULT_DT,
    start: Sequence[float] = SVG_START,
) -> np.ndarray:
    """(x, y) pairs of a fresh trajectory, one per step, for the SVG exporter."""
    return simulate(build_system(start), steps, dt)[:, :2]


def divergence(
    start: Sequence[float] = (1.0, 1.0, 1.0),
    offset: float = CHAOS_OFFSET,
    axis: int = 0,
    steps: int = DIVERGENCE_STEPS,
    dt: float = DEFAULT_DT,
) -> np.ndarray:
    """
    Euclidean distance between two trajectories whose starts differ by ``offset`` on ``axis``.

    Entry 0 is the initial separation; entry ``i`` is the distance after ``i`` steps.
    """
    twin_start = list(start)
    twin_start[axis] += offset
    logger.debug("Divergence run start=%s offset=%s axis=%d steps=%d", tuple(start), offset, axis, steps)

    first = build_system(start)
    second = build_system(twin_start)
    initial = np.linalg.norm(np.subtract(first.state, second.state))
    a = simulate(first, steps, dt)
    b = simulate(second, steps, dt)
    distances = np.concatenate(([initial], np.linalg.norm(a - b, axis=1)))
    logger.debug("Divergence initial=%.3e final=%.3e", distances[0], distances[-1])
    return distances
