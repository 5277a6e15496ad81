from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from lorenzfun.core.chaos.lorenz import LorenzSystem
from lorenzfun.core.constants import (
    BETA,
    DEFAULT_DT,
    HEAD_SIZE,
    RHO,
    SIGMA,
    TRAIL_LEN,
    VISUAL_SCALE,
    WHITE,
)
from lorenzfun.core.trail import Trail
from lorenzfun.core.visual import SpinningMarker, to_visual

Color = tuple[float, float, float]


@dataclass(frozen=True)
class TrajectoryConfig:
    """Everything needed to build one visualised trajectory."""

    pos: tuple[float, float, float] = (0.0, 0.0, 0.0)
    color: Optional[Color] = None
    has_trail: bool = True
    trail_length: int = TRAIL_LEN
    sigma: float = SIGMA
    beta: float = BETA
    rho: float = RHO
    scale: float = VISUAL_SCALE
    head_size: float = HEAD_SIZE

    @property
    def effective_color(self) -> Color:
        return self.color if self.color is not None else WHITE


class Trajectory:
    """One Lorenz state coupled to an optional trail, a head marker and a colour."""

    def __init__(self, config: TrajectoryConfig):
        self.config = config
        x, y, z = config.pos
        self.lorenz = LorenzSystem(x, y, z, sigma=config.sigma, beta=config.beta, rho=config.rho)
        self.color = config.effective_color
        self.trail: Optional[Trail] = Trail(config.trail_length) if config.has_trail else None
        self.head = SpinningMarker(size=config.head_size)
        self.head.move_to(to_visual(self.lorenz.state, config.scale))

    @property
    def position(self) -> np.ndarray:
        return self.head.position

    def step(self, dt: float = DEFAULT_DT) -> np.ndarray:
        self.lorenz.update(dt)
        vector = to_visual(self.lorenz.state, self.config.scale)
        self.head.move_to(vector)
        self.head.spin()
        if self.trail is not None:
            self.trail.push(vector)
        return vector

    def segments(self) -> np.ndarray:
        """Trail line segments as an ``(n - 1, 2, 3)`` array, newest first."""
        if self.trail is None or len(self.trail) < 2:
            return np.empty((0, 2, 3), dtype=np.float32)
        pts = self.trail.points()
        return np.stack([pts[:-1], pts[1:]], axis=1)

    def segment_colors(self) -> np.ndarray:
        """Per-segment colours; each segment takes its newer endpoint's intensity."""
        if self.trail is None or len(self.trail) < 2:
            return np.empty((0, 3))
        return self.trail.colors(self.color)[:-1]
