"""Iteration controls (stable rules)."""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class ReturnMapControl:
    """Fixed-point controls of the biaxial shear return map."""

    tol: float = 1e-8
    max_iter: int = 20

    def __post_init__(self) -> None:
        if not float(self.tol) > 0.0:
            raise ValueError(f"Return-map tolerance must be positive, got {self.tol}")
        if int(self.max_iter) < 1:
            raise ValueError(f"Return-map max_iter must be >= 1, got {self.max_iter}")

    def converged(self, norm_dq: float) -> bool:
        return float(norm_dq) < float(self.tol)


@dataclass(frozen=True)
class NewtonConvergence:
    """Equilibrium check of the bearing driver on its free DOFs.

    The residual tolerance grows with the applied axial load:
    ``tol_r + beta * max(1, |axial_load|)``. A correction smaller than
    ``tol_du`` counts as stagnation.
    """

    tol_r: float = 1e-6
    beta: float = 1e-9
    tol_du: float = 1e-14

    def tolerance(self, axial_load: float) -> float:
        return float(self.tol_r + self.beta * max(1.0, abs(float(axial_load))))

    def converged(self, norm_r: float, axial_load: float) -> bool:
        return float(norm_r) < self.tolerance(axial_load)

    def stagnated(self, norm_du: float) -> bool:
        return float(norm_du) < float(self.tol_du)
