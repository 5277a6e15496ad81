from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from lorenzfun.core.constants import HEAD_SIZE, HEAD_SPIN, VISUAL_SCALE

Y_AXIS = (0.0, 1.0, 0.0)

# Cube corners as (+/-1, +/-1, +/-1), faces as corner indices.
_CUBE_CORNERS = np.array(
    [
        [-1, -1, -1],
        [1, -1, -1],
        [1, 1, -1],
        [-1, 1, -1],
        [-1, -1, 1],
        [1, -1, 1],
        [1, 1, 1],
        [-1, 1, 1],
    ],
    dtype=np.float64,
)
_CUBE_FACES = (
    (0, 1, 2, 3),
    (4, 5, 6, 7),
    (0, 1, 5, 4),
    (2, 3, 7, 6),
    (1, 2, 6, 5),
    (0, 3, 7, 4),
)


def to_visual(state: Sequence[float], scale: float = VISUAL_SCALE) -> np.ndarray:
    """Map a raw ODE state into single-precision visual space."""
    return (np.asarray(state, dtype=np.float64) * scale).astype(np.float32)


def shade(color: Sequence[float], intensity: float) -> np.ndarray:
    return np.asarray(color, dtype=np.float64) * float(intensity)


def axis_angle(axis: Sequence[float], angle: float) -> np.ndarray:
    """Unit quaternion (w, x, y, z) for a rotation of ``angle`` about ``axis``."""
    a = np.asarray(axis, dtype=np.float64)
    a = a / np.linalg.norm(a)
    half = angle / 2.0
    return np.concatenate(([math.cos(half)], a * math.sin(half)))


def quat_multiply(q: np.ndarray, r: np.ndarray) -> np.ndarray:
    w1, x1, y1, z1 = q
    w2, x2, y2, z2 = r
    return np.array(
        [
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        ]
    )


def quat_rotate(q: np.ndarray, vectors: np.ndarray) -> np.ndarray:
    """Rotate one ``(3,)`` vector or an ``(n, 3)`` batch by unit quaternion ``q``."""
    w = q[0]
    u = np.asarray(q[1:], dtype=np.float64)
    v = np.asarray(vectors, dtype=np.float64)
    t = 2.0 * np.cross(u, v)
    return v + w * t + np.cross(u, t)


class SpinningMarker:
    """
    Cube that follows a trajectory head and spins a little every tick.

    The spin is independent of the ODE state; it only gives the head some life.
    """

    def __init__(
        self,
        size: float = HEAD_SIZE,
        spin_axis: Sequence[float] = Y_AXIS,
        spin_angle: float = HEAD_SPIN,
    ):
        self.size = float(size)
        self.position = np.zeros(3, dtype=np.float32)
        self.orientation = np.array([1.0, 0.0, 0.0, 0.0])
        self.spin_step = axis_angle(spin_axis, spin_angle)

    def move_to(self, position: Sequence[float]) -> None:
        self.position = np.asarray(position, dtype=np.float32).reshape(3)

    def spin(self) -> None:
        q = quat_multiply(self.spin_step, self.orientation)
        self.orientation = q / np.linalg.norm(q)

    def angle(self) -> float:
        """Total rotation angle carried by the current orientation."""
        w = min(1.0, abs(float(self.orientation[0])))
        return 2.0 * math.acos(w)

    def vertices(self) -> np.ndarray:
        corners = _CUBE_CORNERS * (self.size / 2.0)
        return quat_rotate(self.orientation, corners) + self.position

    def faces(self) -> list[np.ndarray]:
        verts = self.vertices()
        return [verts[list(face)] for face in _CUBE_FACES]
