"""Friction laws for sliding bearings.

A friction law maps the instantaneous normal force ``N`` (positive in
compression) and the sliding speed ``|v|`` to a friction (yield) force

.. math::
    F_f = \\mu(N, |v|) \\, N \\quad (N > 0), \\qquad F_f = 0 \\quad (N \\le 0)

The element queries the law once per pass of its shear fixed-point iteration,
so ``set_trial`` must be cheap and free of history side effects beyond the
trial values. ``commit`` freezes the last trial pair.

Supported laws:
  - Coulomb: constant coefficient
  - VelDependent: exponential transition between slow and fast coefficients
  - VelPressureDep: as VelDependent with a pressure-dependent fast coefficient
  - VelDepMultiLinear: piecewise-linear coefficient over sliding speed

References
----------
- Constantinou, M.C., Mokha, A., Reinhorn, A.M. (1990). "Teflon bearings in
  base isolation II: Modeling." J. Struct. Eng. 116(2), 455-474.
"""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Protocol, Sequence, runtime_checkable

import numpy as np


@runtime_checkable
class FrictionModel(Protocol):
    type_id: ClassVar[str]

    def set_trial(self, normal_force: float, velocity: float) -> int:
        """Set trial normal force and sliding speed."""

    def yield_force(self) -> float: ...

    def commit(self) -> int: ...

    def revert_to_last_commit(self) -> int: ...

    def revert_to_start(self) -> int: ...

    def copy(self) -> "FrictionModel": ...

    def to_dict(self) -> Dict[str, Any]: ...

    def get_response(self, name: str) -> Any: ...


@dataclass
class FrictionModelBase:
    """Shared trial/commit bookkeeping; subclasses provide ``mu`` and, when parametrised, ``to_dict``."""

    type_id: ClassVar[str] = "FrictionModel"

    # trial / committed (normal force, sliding speed)
    _N: float = field(default=0.0, init=False, repr=False)
    _vel: float = field(default=0.0, init=False, repr=False)
    _N_c: float = field(default=0.0, init=False, repr=False)
    _vel_c: float = field(default=0.0, init=False, repr=False)

    def mu(self, normal_force: float, velocity: float) -> float:
        raise NotImplementedError

    def set_trial(self, normal_force: float, velocity: float) -> int:
        self._N = float(normal_force)
        self._vel = float(velocity)
        return 0

    def normal_force(self) -> float:
        return self._N

    def velocity(self) -> float:
        return self._vel

    def friction_coeff(self) -> float:
        return float(self.mu(self._N, abs(self._vel)))

    def yield_force(self) -> float:
        if self._N > 0.0:
            return self.friction_coeff() * self._N
        return 0.0

    def commit(self) -> int:
        self._N_c, self._vel_c = self._N, self._vel
        return 0

    def revert_to_last_commit(self) -> int:
        self._N, self._vel = self._N_c, self._vel_c
        return 0

    def revert_to_start(self) -> int:
        self._N = self._vel = self._N_c = self._vel_c = 0.0
        return 0

    def copy(self):
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type_id}

    def get_response(self, name: str) -> Any:
        if name in ("normalForce", "normalFrc", "N"):
            return self._N
        if name in ("velocity", "vel"):
            return self._vel
        if name in ("frictionForce", "frictionFrc", "yieldForce"):
            return self.yield_force()
        if name in ("frictionCoeff", "COF", "mu"):
            return self.friction_coeff()
        raise KeyError(f"Unknown response '{name}' for friction model {self.type_id}")


@dataclass
class Coulomb(FrictionModelBase):
    """Constant friction coefficient."""

    mu0: float

    type_id: ClassVar[str] = "Coulomb"

    def __post_init__(self) -> None:
        if float(self.mu0) < 0.0:
            raise ValueError("Coulomb friction coefficient must be >= 0")

    def mu(self, normal_force: float, velocity: float) -> float:
        return float(self.mu0)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type_id, "mu0": float(self.mu0)}


@dataclass
class VelDependent(FrictionModelBase):
    """``mu = mu_fast - (mu_fast - mu_slow) * exp(-trans_rate * |v|)``."""

    mu_slow: float
    mu_fast: float
    trans_rate: float

    type_id: ClassVar[str] = "VelDependent"

    def __post_init__(self) -> None:
        if float(self.mu_slow) < 0.0 or float(self.mu_fast) < 0.0:
            raise ValueError("VelDependent friction coefficients must be >= 0")
        if float(self.trans_rate) < 0.0:
            raise ValueError("VelDependent trans_rate must be >= 0")

    def mu(self, normal_force: float, velocity: float) -> float:
        ms, mf = float(self.mu_slow), float(self.mu_fast)
        return mf - (mf - ms) * math.exp(-float(self.trans_rate) * abs(velocity))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type_id,
            "mu_slow": float(self.mu_slow),
            "mu_fast": float(self.mu_fast),
            "trans_rate": float(self.trans_rate),
        }


@dataclass
class VelPressureDep(FrictionModelBase):
    """Velocity and pressure dependent friction.

    The fast coefficient decreases with bearing pressure ``p = N / area``:
    ``mu_fast = mu_fast0 - delta_mu * tanh(alpha * p)``.
    """

    mu_slow: float
    mu_fast0: float
    area: float
    delta_mu: float
    alpha: float
    trans_rate: float

    type_id: ClassVar[str] = "VelPressureDep"

    def __post_init__(self) -> None:
        if float(self.area) <= 0.0:
            raise ValueError("VelPressureDep requires a positive contact area")
        if float(self.mu_slow) < 0.0 or float(self.trans_rate) < 0.0:
            raise ValueError("VelPressureDep mu_slow and trans_rate must be >= 0")
        # keeps mu_fast >= 0 for any compressive pressure
        if not 0.0 <= float(self.delta_mu) <= float(self.mu_fast0):
            raise ValueError("VelPressureDep requires 0 <= delta_mu <= mu_fast0")

    def mu(self, normal_force: float, velocity: float) -> float:
        pressure = float(normal_force) / float(self.area)
        mu_fast = float(self.mu_fast0) - float(self.delta_mu) * math.tanh(float(self.alpha) * pressure)
        return mu_fast - (mu_fast - float(self.mu_slow)) * math.exp(-float(self.trans_rate) * abs(velocity))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type_id,
            "mu_slow": float(self.mu_slow),
            "mu_fast0": float(self.mu_fast0),
            "area": float(self.area),
            "delta_mu": float(self.delta_mu),
            "alpha": float(self.alpha),
            "trans_rate": float(self.trans_rate),
        }


@dataclass
class VelDepMultiLinear(FrictionModelBase):
    """Piecewise-linear ``mu(|v|)``, constant beyond the first/last point."""

    velocities: Sequence[float]
    mus: Sequence[float]

    type_id: ClassVar[str] = "VelDepMultiLinear"

    def __post_init__(self) -> None:
        v = np.asarray(self.velocities, dtype=float).reshape(-1)
        m = np.asarray(self.mus, dtype=float).reshape(-1)
        if v.size == 0 or v.size != m.size:
            raise ValueError("VelDepMultiLinear needs matching, non-empty velocity/mu points")
        if np.any(np.diff(v) <= 0.0):
            raise ValueError("VelDepMultiLinear velocity points must be strictly increasing")
        if v[0] < 0.0 or np.any(m < 0.0):
            raise ValueError("VelDepMultiLinear velocities and coefficients must be >= 0")
        self.velocities = tuple(float(x) for x in v)
        self.mus = tuple(float(x) for x in m)

    def mu(self, normal_force: float, velocity: float) -> float:
        return float(np.interp(abs(float(velocity)), self.velocities, self.mus))

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type_id, "velocities": list(self.velocities), "mus": list(self.mus)}
