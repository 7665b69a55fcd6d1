"""Uniaxial constitutive models for the bearing's axial and rotational axes.

The element talks to each axis through a small interface: a trial strain and
strain rate go in, a stress and an algorithmic tangent come out. History lives
inside the model as a *trial* and a *committed* copy, so the element can call
``set_trial_strain`` any number of times inside a Newton iteration and only
``commit`` freezes the result.

This module provides:
  - Linear elastic with optional viscous term and separate compression modulus
  - Elastic no-tension (compression-only contact spring)
  - Elastic-perfectly plastic with a 1D return mapping

All values are plain floats; the models are cheap to ``copy`` so that every
element owns its own instances.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class UniaxialMaterial(Protocol):
    type_id: ClassVar[str]

    def set_trial_strain(self, strain: float, rate: float = 0.0) -> int:
        """Set trial strain/rate and update the trial stress state."""

    def strain(self) -> float: ...

    def stress(self) -> float: ...

    def tangent(self) -> float: ...

    def initial_tangent(self) -> float: ...

    def commit(self) -> int: ...

    def revert_to_last_commit(self) -> int: ...

    def revert_to_start(self) -> int: ...

    def copy(self) -> "UniaxialMaterial": ...

    def to_dict(self) -> Dict[str, Any]: ...

    def get_response(self, name: str) -> Any: ...


def _material_response(mat: UniaxialMaterial, name: str) -> Any:
    if name == "stress":
        return mat.stress()
    if name == "strain":
        return mat.strain()
    if name == "tangent":
        return mat.tangent()
    if name in ("stressStrain", "stress_strain"):
        return (mat.stress(), mat.strain())
    raise KeyError(f"Unknown response '{name}' for material {mat.type_id}")


# ----------------------------
# Linear elastic
# ----------------------------


@dataclass
class Elastic:
    """Linear elastic spring ``s = E*e + eta*de``.

    ``E_neg`` is used for negative strains (defaults to ``E``).
    """

    E: float
    eta: float = 0.0
    E_neg: Optional[float] = None

    type_id: ClassVar[str] = "Elastic"

    _eps: float = field(default=0.0, init=False, repr=False)
    _rate: float = field(default=0.0, init=False, repr=False)
    _eps_c: float = field(default=0.0, init=False, repr=False)
    _rate_c: float = field(default=0.0, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.E_neg is None:
            self.E_neg = float(self.E)

    def _modulus(self) -> float:
        return float(self.E) if self._eps >= 0.0 else float(self.E_neg)

    def set_trial_strain(self, strain: float, rate: float = 0.0) -> int:
        self._eps = float(strain)
        self._rate = float(rate)
        return 0

    def strain(self) -> float:
        return self._eps

    def stress(self) -> float:
        return self._modulus() * self._eps + float(self.eta) * self._rate

    def tangent(self) -> float:
        return self._modulus()

    def initial_tangent(self) -> float:
        return float(self.E)

    def commit(self) -> int:
        self._eps_c = self._eps
        self._rate_c = self._rate
        return 0

    def revert_to_last_commit(self) -> int:
        self._eps = self._eps_c
        self._rate = self._rate_c
        return 0

    def revert_to_start(self) -> int:
        self._eps = self._rate = 0.0
        self._eps_c = self._rate_c = 0.0
        return 0

    def copy(self) -> "Elastic":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type_id, "E": float(self.E), "eta": float(self.eta), "E_neg": float(self.E_neg)}

    def get_response(self, name: str) -> Any:
        return _material_response(self, name)


# ----------------------------
# Elastic no-tension
# ----------------------------


@dataclass
class ElasticNoTension:
    """Compression-only elastic spring: zero stress and stiffness for ``e >= 0``."""

    E: float

    type_id: ClassVar[str] = "ElasticNoTension"

    _eps: float = field(default=0.0, init=False, repr=False)
    _eps_c: float = field(default=0.0, init=False, repr=False)

    def set_trial_strain(self, strain: float, rate: float = 0.0) -> int:
        self._eps = float(strain)
        return 0

    def strain(self) -> float:
        return self._eps

    def stress(self) -> float:
        if self._eps < 0.0:
            return float(self.E) * self._eps
        return 0.0

    def tangent(self) -> float:
        return float(self.E) if self._eps < 0.0 else 0.0

    def initial_tangent(self) -> float:
        return float(self.E)

    def commit(self) -> int:
        self._eps_c = self._eps
        return 0

    def revert_to_last_commit(self) -> int:
        self._eps = self._eps_c
        return 0

    def revert_to_start(self) -> int:
        self._eps = self._eps_c = 0.0
        return 0

    def copy(self) -> "ElasticNoTension":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type_id, "E": float(self.E)}

    def get_response(self, name: str) -> Any:
        return _material_response(self, name)


# -------------------------------------
# Elastic-perfectly plastic
# -------------------------------------


@dataclass
class ElasticPerfectlyPlastic:
    """Elastic-perfectly plastic spring with return mapping.

    Parameters
    ----------
    E : float
        Elastic modulus.
    fy : float
        Positive yield stress.
    fy_neg : float, optional
        Negative yield stress (defaults to ``-fy``).
    """

    E: float
    fy: float
    fy_neg: Optional[float] = None

    type_id: ClassVar[str] = "ElasticPerfectlyPlastic"

    _eps: float = field(default=0.0, init=False, repr=False)
    _eps_p: float = field(default=0.0, init=False, repr=False)
    _sig: float = field(default=0.0, init=False, repr=False)
    _tan: float = field(default=0.0, init=False, repr=False)
    _eps_c: float = field(default=0.0, init=False, repr=False)
    _eps_p_c: float = field(default=0.0, init=False, repr=False)
    _sig_c: float = field(default=0.0, init=False, repr=False)
    _tan_c: float = field(default=0.0, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.fy_neg is None:
            self.fy_neg = -float(self.fy)
        if float(self.E) <= 0.0:
            raise ValueError("ElasticPerfectlyPlastic requires E > 0")
        if not (float(self.fy_neg) <= 0.0 <= float(self.fy)):
            raise ValueError("ElasticPerfectlyPlastic requires fy_neg <= 0 <= fy")
        self._tan = self._tan_c = float(self.E)

    def set_trial_strain(self, strain: float, rate: float = 0.0) -> int:
        E = float(self.E)
        self._eps = float(strain)
        sig_tr = E * (self._eps - self._eps_p_c)

        if sig_tr > float(self.fy):
            self._sig = float(self.fy)
            self._eps_p = self._eps_p_c + (sig_tr - float(self.fy)) / E
            self._tan = 0.0
        elif sig_tr < float(self.fy_neg):
            self._sig = float(self.fy_neg)
            self._eps_p = self._eps_p_c + (sig_tr - float(self.fy_neg)) / E
            self._tan = 0.0
        else:
            self._sig = sig_tr
            self._eps_p = self._eps_p_c
            self._tan = E
        return 0

    def strain(self) -> float:
        return self._eps

    def stress(self) -> float:
        return self._sig

    def tangent(self) -> float:
        return self._tan

    def initial_tangent(self) -> float:
        return float(self.E)

    @property
    def plastic_strain(self) -> float:
        return self._eps_p

    def commit(self) -> int:
        self._eps_c, self._eps_p_c = self._eps, self._eps_p
        self._sig_c, self._tan_c = self._sig, self._tan
        return 0

    def revert_to_last_commit(self) -> int:
        self._eps, self._eps_p = self._eps_c, self._eps_p_c
        self._sig, self._tan = self._sig_c, self._tan_c
        return 0

    def revert_to_start(self) -> int:
        self._eps = self._eps_p = self._sig = 0.0
        self._eps_c = self._eps_p_c = self._sig_c = 0.0
        self._tan = self._tan_c = float(self.E)
        return 0

    def copy(self) -> "ElasticPerfectlyPlastic":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type_id,
            "E": float(self.E),
            "fy": float(self.fy),
            "fy_neg": float(self.fy_neg),
        }

    def get_response(self, name: str) -> Any:
        if name in ("plasticStrain", "plastic_strain"):
            return self._eps_p
        return _material_response(self, name)
