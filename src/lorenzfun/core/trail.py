from __future__ import annotations

from collections import deque
from typing import Iterator, Optional, Sequence

import numpy as np

from lorenzfun.core.constants import TRAIL_LEN


def _as_point(point: Sequence[float]) -> np.ndarray:
    return np.asarray(point, dtype=np.float32).reshape(3)


class Trail:
    """
    Bounded history of visual-space points, newest first.

    Each push inserts at the front and drops the oldest point once the trail
    holds ``max_len`` entries. The position of a point in the trail drives a
    linear intensity ramp: 1.0 at the front, minus ``decay`` per step back.
    With ``decay = 1 / max_len`` the oldest retained point sits at ``1 / max_len``;
    the ramp only hits 0 one index past the end of the trail.
    """

    def __init__(self, max_len: int = TRAIL_LEN):
        max_len = int(max_len)
        if max_len < 1:
            raise ValueError(f"trail length must be >= 1, got {max_len}")
        self.max_len = max_len
        self._points: deque[np.ndarray] = deque(maxlen=max_len)

    @property
    def decay(self) -> float:
        return 1.0 / self.max_len

    def push(self, point: Sequence[float]) -> None:
        self._points.appendleft(_as_point(point))

    def clear(self) -> None:
        self._points.clear()

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._points)

    def __getitem__(self, index: int) -> np.ndarray:
        return self._points[index]

    def intensity(self, index: int, decay: Optional[float] = None) -> float:
        step = self.decay if decay is None else decay
        return max(0.0, 1.0 - index * step)

    def intensities(self, decay: Optional[float] = None) -> np.ndarray:
        step = self.decay if decay is None else decay
        ramp = 1.0 - np.arange(len(self._points), dtype=np.float64) * step
        return np.clip(ramp, 0.0, None)

    def points(self) -> np.ndarray:
        if not self._points:
            return np.empty((0, 3), dtype=np.float32)
        return np.stack(list(self._points))

    def weighted(self, decay: Optional[float] = None) -> Iterator[tuple[np.ndarray, float]]:
        """Yield ``(point, intensity)`` front to back (dot mode)."""
        for index, point in enumerate(self._points):
            yield point, self.intensity(index, decay)

    def segments(self, decay: Optional[float] = None) -> Iterator[tuple[np.ndarray, np.ndarray, float]]:
        """Yield ``(newer, older, intensity)`` for each consecutive pair (line mode)."""
        previous = None
        for index, point in enumerate(self._points):
            if previous is not None:
                yield previous, point, self.intensity(index - 1, decay)
            previous = point

    def colors(self, base_color: Sequence[float], decay: Optional[float] = None) -> np.ndarray:
        base = np.asarray(base_color, dtype=np.float64).reshape(1, 3)
        return self.intensities(decay)[:, None] * base


def push(trail: Trail, point: Sequence[float], max_len: Optional[int] = None) -> Trail:
    """Push onto ``trail``; the bound is fixed when the trail is built and ``max_len`` must agree with it."""
    if max_len is not None and int(max_len) != trail.max_len:
        raise ValueError(f"trail is bounded at {trail.max_len}, got max_len={max_len}")
    trail.push(point)
    return trail


def render_trail(
    trail: Trail, base_color: Sequence[float], decay: Optional[float] = None
) -> list[tuple[np.ndarray, np.ndarray]]:
    """Pair every trail point with its draw colour, newest first."""
    return list(zip(trail, trail.colors(base_color, decay)))
