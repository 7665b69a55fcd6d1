"""Element frame and transformation operators.

This module is purely geometric; it does not depend on the constitutive
response.

Conventions
-----------
* Local x is the bearing axis (normal to the sliding surface).
* Local DOF ordering per node: ``[ux, uy, uz, rx, ry, rz]``, node i first.
* Basic ordering: ``[axial, shear_y, shear_z, torsion, bend_y, bend_z]``.

The local->basic operator is linear in the displacements; the element length
``L`` only enters through the rigid-body rotation of node j:

.. math::
    u_{b,1} = u_{l,7} - u_{l,1} - L\\,u_{l,11}, \\qquad
    u_{b,2} = u_{l,8} - u_{l,2} + L\\,u_{l,10}
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

EPS = float(np.finfo(float).eps)
DEFAULT_Y = (0.0, 1.0, 0.0)


def _vec3(v: Sequence[float], name: str) -> np.ndarray:
    a = np.asarray(v, dtype=float).reshape(-1)
    if a.shape != (3,):
        raise ValueError(f"Orientation vector '{name}' must have 3 components, got {a.size}")
    return a


def element_length(crd_i: Sequence[float], crd_j: Sequence[float]) -> float:
    d = np.asarray(crd_j, dtype=float).reshape(3) - np.asarray(crd_i, dtype=float).reshape(3)
    return float(np.linalg.norm(d))


def build_triad(x: Sequence[float], y: Sequence[float]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return the orthonormal triad (x, y, z) from an axis and an in-plane vector.

    ``z = x cross y`` and ``y`` is re-orthogonalised as ``z cross x``.

    Raises
    ------
    ValueError
        If a vector does not have 3 components, or if any of x, y, z has zero
        norm (zero-length input or x parallel to y).
    """
    x = _vec3(x, "x")
    y = _vec3(y, "y")
    z = np.cross(x, y)
    y = np.cross(z, x)

    xn = float(np.linalg.norm(x))
    yn = float(np.linalg.norm(y))
    zn = float(np.linalg.norm(z))
    if xn == 0.0 or yn == 0.0 or zn == 0.0:
        raise ValueError("Invalid orientation vectors: zero length or x parallel to y")
    return x / xn, y / yn, z / zn


def global_to_local(x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
    """12x12 block-diagonal rotation with rows (x, y, z) in every 3x3 block."""
    R = np.vstack([x, y, z]).astype(float)
    Tgl = np.zeros((12, 12), dtype=float)
    for b in range(4):
        Tgl[3 * b:3 * b + 3, 3 * b:3 * b + 3] = R
    return Tgl


def local_to_basic(L: float) -> np.ndarray:
    """6x12 operator removing rigid-body modes (linear, small rotations)."""
    Tlb = np.zeros((6, 12), dtype=float)
    for k in range(6):
        Tlb[k, k] = -1.0
        Tlb[k, k + 6] = 1.0
    Tlb[1, 11] = -float(L)
    Tlb[2, 10] = float(L)
    return Tlb


@dataclass(frozen=True)
class ElementFrame:
    """Fixed geometry of one element: length, triad and both operators."""

    L: float
    x: np.ndarray
    y: np.ndarray
    z: np.ndarray
    Tgl: np.ndarray
    Tlb: np.ndarray

    @classmethod
    def from_nodes(
        cls,
        crd_i: Sequence[float],
        crd_j: Sequence[float],
        x: Optional[Sequence[float]] = None,
        y: Sequence[float] = DEFAULT_Y,
        tag: int = 0,
    ) -> "ElementFrame":
        """Build the frame from end coordinates and optional orientation vectors.

        The node separation defines local x unless ``x`` is given. A given ``x``
        wins over the geometry (with a warning); for a zero-length element it is
        mandatory.
        """
        xp = np.asarray(crd_j, dtype=float).reshape(3) - np.asarray(crd_i, dtype=float).reshape(3)
        L = float(np.linalg.norm(xp))

        if x is None:
            if L <= EPS:
                raise ValueError(
                    f"Element {tag}: zero-length element requires an explicit local x vector"
                )
            x = xp
        elif L > EPS:
            warnings.warn(
                f"Element {tag}: ignoring nodes and using specified local x vector "
                "to determine orientation",
                UserWarning,
                stacklevel=2,
            )

        ex, ey, ez = build_triad(x, y)
        return cls(L=L, x=ex, y=ey, z=ez, Tgl=global_to_local(ex, ey, ez), Tlb=local_to_basic(L))
