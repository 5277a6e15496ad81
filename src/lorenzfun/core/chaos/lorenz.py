from __future__ import annotations

from lorenzfun.core.constants import BETA, RHO, SIGMA

from .base import ChaoticSystem


class LorenzSystem(ChaoticSystem):
    """Explicit Euler integration of the Lorenz system."""

    def __init__(
        self,
        x: float = 0.0,
        y: float = 0.0,
        z: float = 0.0,
        sigma: float = SIGMA,
        beta: float = BETA,
        rho: float = RHO,
    ):
        super().__init__(x, y, z)
        self.sigma = float(sigma)
        self.beta = float(beta)
        self.rho = float(rho)

    def derivatives(self) -> tuple[float, float, float]:
        dx = self.sigma * (self.y - self.x)
        dy = self.x * (self.rho - self.z) - self.y
        dz = self.x * self.y - self.beta * self.z
        return dx, dy, dz

    def __repr__(self) -> str:
        return (
            f"LorenzSystem(x={self.x!r}, y={self.y!r}, z={self.z!r}, "
            f"sigma={self.sigma!r}, beta={self.beta!r}, rho={self.rho!r})"
        )
