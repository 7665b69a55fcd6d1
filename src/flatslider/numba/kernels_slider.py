"""Numba kernel for the circular (isotropic) friction yield surface.

Value-based radial return of a two-component shear force onto a circle of
radius ``q_yield``. The fixed-point iteration around it (normal force update,
friction law query) lives in :mod:`flatslider.element`; one call here is one
pass of that iteration.

Design
------
* Inputs/outputs are Python floats only.
* No Python objects, dicts, or dataclasses.
* The committed plastic displacement is an input and is never modified.
"""

from __future__ import annotations

import math

from numba import njit


@njit(cache=True)
def radial_return_2d(
    k0: float,
    q_yield: float,
    u1: float,
    u2: float,
    up1_c: float,
    up2_c: float,
):
    """Return-map the trial shear force ``k0 * (u - up_c)``.

    Parameters
    ----------
    k0 : float
        Elastic (pre-sliding) stiffness ``q_yield / uy``.
    q_yield : float
        Radius of the yield circle (friction force).
    u1, u2 : float
        Basic shear deformations.
    up1_c, up2_c : float
        Committed plastic shear displacements.

    Returns
    -------
    (q1, q2, k11, k12, k22, up1, up2, plastic)
        Returned forces, symmetric 2x2 tangent, trial plastic displacement and
        a flag (1.0 plastic, 0.0 elastic).
    """
    qt1 = k0 * (u1 - up1_c)
    qt2 = k0 * (u2 - up2_c)
    qt_norm = math.sqrt(qt1 * qt1 + qt2 * qt2)
    Y = qt_norm - q_yield

    # elastic step: no updates required
    if Y <= 0.0:
        return qt1, qt2, k0, 0.0, k0, up1_c, up2_c, 0.0

    # plastic step: radial return
    n1 = qt1 / qt_norm
    n2 = qt2 / qt_norm
    dgamma = Y / k0
    c = q_yield * k0 / (qt_norm * qt_norm * qt_norm)
    k11 = c * qt2 * qt2
    k12 = -c * qt1 * qt2
    k22 = c * qt1 * qt1
    return q_yield * n1, q_yield * n2, k11, k12, k22, up1_c + dgamma * n1, up2_c + dgamma * n2, 1.0
