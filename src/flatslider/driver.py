"""Displacement-history driver for a single bearing element.

Typical bearing test set-up: node i fixed, node j loaded by a constant vertical
force and driven through a prescribed horizontal displacement history. The
vertical DOF of node j is found by Newton iterations on the element tangent;
all other DOFs of node j are either prescribed or held at zero.

This is a test harness, not a structural solver: it handles exactly one
element and the partition described above.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd
import scipy.linalg as sla

from flatslider.convergence import NewtonConvergence
from flatslider.output.history import history_to_frame

DOF_NAMES = ("ux", "uy", "uz", "rx", "ry", "rz")
BASIC_NAMES = ("N", "Vy", "Vz", "T", "My", "Mz")


def generate_cyclic_path(
    amplitudes: Iterable[float],
    n_cycles: int = 1,
    n_per_leg: int = 10,
) -> np.ndarray:
    """
    Generate a cyclic displacement path.

    For each amplitude, repeats ``n_cycles`` of 0 -> +a -> 0 -> -a -> 0, with
    ``n_per_leg`` equal increments on every leg.

    Parameters
    ----------
    amplitudes : iterable of float
        Target amplitudes.
    n_cycles : int
        Cycles per amplitude.
    n_per_leg : int
        Increments per leg (>= 1).

    Returns
    -------
    path : np.ndarray
        Displacement path starting at 0 (the start point is included).
    """
    n_per_leg = int(n_per_leg)
    if n_per_leg < 1:
        raise ValueError("n_per_leg must be >= 1")

    path = [0.0]
    for a in amplitudes:
        for _ in range(int(n_cycles)):
            for target in (float(a), 0.0, -float(a), 0.0):
                start = path[-1]
                path.extend(np.linspace(start, target, n_per_leg + 1)[1:].tolist())
    return np.asarray(path, dtype=float)


def run_displacement_history(
    element,
    domain,
    path: Sequence[float],
    axial_load: float = 0.0,
    control_dofs: Sequence[int] = (1,),
    axial_dof: int = 2,
    dt: float = 1.0,
    newton: Optional[NewtonConvergence] = None,
    max_newton: int = 25,
    verbose: bool = False,
) -> pd.DataFrame:
    """Drive node j of ``element`` through ``path`` under a constant axial load.

    Parameters
    ----------
    element : FlatSlider3d
        Element attached to ``domain``.
    domain : Domain
        Owner of the nodes; committed after every step.
    path : array-like
        Shape (n,) for one control DOF or (n, len(control_dofs)). Every row
        is one committed step, including a leading zero row.
    axial_load : float
        Constant external force on the free DOF ``axial_dof`` of node j
        (negative pushes the bearing into compression for a bearing along +Z).
    control_dofs : sequence of int
        DOFs of node j (0..5) with prescribed displacement.
    axial_dof : int
        Free DOF of node j solved by Newton iterations.
    dt : float
        Pseudo-time increment per step; trial velocities are ``du / dt``.

    Returns
    -------
    pd.DataFrame
        One row per committed step.

    Raises
    ------
    RuntimeError
        If the element is inactive, an element update fails, or Newton
        iterations stagnate or do not converge.
    """
    if not element.active:
        raise RuntimeError(f"Element {element.tag} is not attached to a domain")
    if newton is None:
        newton = NewtonConvergence()

    ctrl = [int(d) for d in control_dofs]
    if int(axial_dof) in ctrl:
        raise ValueError("axial_dof cannot also be a controlled DOF")
    targets = np.asarray(path, dtype=float)
    if targets.ndim == 1:
        targets = targets.reshape(-1, 1)
    if targets.shape[1] != len(ctrl):
        raise ValueError(f"path has {targets.shape[1]} columns but {len(ctrl)} control DOFs")

    node_j = element.nodes[1]
    free = np.array([6 + int(axial_dof)])
    F_ext = np.zeros(12, dtype=float)
    F_ext[free] = float(axial_load)

    rows: List[Dict[str, Any]] = []
    for step, target in enumerate(targets, start=1):
        u_trial = node_j.disp.copy()
        u_trial[ctrl] = target

        converged = False
        stalled = False
        norm_r = np.inf
        it = 0
        for it in range(1, int(max_newton) + 1):
            node_j.set_trial_disp(u_trial)
            node_j.set_trial_vel((u_trial - node_j.disp) / float(dt))
            status = element.update()
            if status != 0:
                domain.revert_to_last_commit()
                raise RuntimeError(f"Step {step}: element {element.tag} update failed (status {status})")

            R = F_ext[free] - element.resisting_force()[free]
            norm_r = float(np.linalg.norm(R))
            if newton.converged(norm_r, axial_load):
                converged = True
                break
            # last correction was negligible but equilibrium is still off
            if stalled:
                domain.revert_to_last_commit()
                raise RuntimeError(f"Step {step}: Newton stagnated at iteration {it} (||r||={norm_r:.3e})")

            K = element.tangent_stiffness()[np.ix_(free, free)]
            du = sla.solve(K, R)
            u_trial[free - 6] += du
            stalled = newton.stagnated(float(np.linalg.norm(du)))

        if not converged:
            domain.revert_to_last_commit()
            raise RuntimeError(
                f"Step {step}: Newton did not converge after {it} iterations (||r||={norm_r:.3e})"
            )
        if verbose:
            print(f"[driver] step {step:04d}  it={it:02d}  ||r||={norm_r:.3e}")

        qb = element.basic_force
        up = element.plastic_displacement
        row: Dict[str, Any] = {"step": step}
        for k, name in enumerate(DOF_NAMES):
            row[name] = float(u_trial[k])
        for k, name in enumerate(BASIC_NAMES):
            row[name] = float(qb[k])
        row["normal_force"] = float(element.get_response("frictionModel", "normalForce")) if qb[0] < 0.0 else 0.0
        row["up_y"] = float(up[0])
        row["up_z"] = float(up[1])
        row["shear_iter"] = int(element.n_iter)
        row["newton_iter"] = int(it)
        rows.append(row)

        domain.commit()

    return history_to_frame(rows)
