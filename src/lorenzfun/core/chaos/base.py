from __future__ import annotations

from abc import ABC, abstractmethod


class ChaoticSystem(ABC):
    """Base class for three-variable chaotic systems integrated with forward Euler."""

    def __init__(self, x: float, y: float, z: float):
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    @abstractmethod
    def derivatives(self) -> tuple[float, float, float]:
        """Return (dx/dt, dy/dt, dz/dt) at the current state."""
        ...

    @property
    def state(self) -> tuple[float, float, float]:
        return self.x, self.y, self.z

    def reset(self, x: float, y: float, z: float) -> None:
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    def update(self, dt: float) -> tuple[float, float, float]:
        """Advance one explicit Euler step of size ``dt`` and return the new state."""
        dx, dy, dz = self.derivatives()

        self.x += dx * dt
        self.y += dy * dt
        self.z += dz * dt
        return self.x, self.y, self.z
