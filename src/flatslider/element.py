"""Flat sliding bearing element (3D, two nodes, 12 DOFs).

State determination of a friction bearing with a flat sliding surface. The
element works in three frames:

* global (12): nodal DOFs as the structural model sees them,
* local (12): rotated into the element triad (``Tgl``),
* basic (6): rigid-body modes removed (``Tlb``), ordering
  ``[axial, shear_y, shear_z, torsion, bend_y, bend_z]``.

Per ``update``:

1. The axial material is evaluated. A non-negative axial force means uplift:
   force is zeroed, stiffness falls back to the initial one (axial entry scaled
   to machine epsilon in true tension) and the call returns immediately.
2. In contact, the two shear forces follow a circular friction yield surface of
   radius ``F_f(N, |v|)`` with pre-sliding stiffness ``k0 = F_f / uy``. Because
   ``N`` itself depends on the shear forces (through the node-i rotations), a
   fixed-point iteration is run around the radial return.
3. Torsion and the two bending axes are independent uniaxial springs.

Geometric (P-Delta / V-Delta) terms are added to the node-i rotational DOFs
only.

Notes
-----
The iteration is seeded with the *committed* shear forces, so repeated
``update`` calls with the same nodal kinematics give identical results. All
query methods allocate their own output arrays; no buffers are shared between
instances.
"""

from __future__ import annotations

import math
import warnings
from enum import IntEnum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np

from flatslider.bearing_state import SliderState
from flatslider.convergence import ReturnMapControl
from flatslider.friction import FrictionModel
from flatslider.geometry import DEFAULT_Y, EPS, ElementFrame
from flatslider.numba.kernels_slider import radial_return_2d
from flatslider.registry import friction_model_from_dict, uniaxial_material_from_dict
from flatslider.uniaxial import UniaxialMaterial


class Axis(IntEnum):
    """Uniaxial material slots of the element."""

    AXIAL = 0
    TORSION = 1
    BEND_Y = 2
    BEND_Z = 3


# basic-system component driven by each material slot
BASIC_INDEX = {Axis.AXIAL: 0, Axis.TORSION: 3, Axis.BEND_Y: 4, Axis.BEND_Z: 5}


class ReturnMapWarning(RuntimeWarning):
    """The shear fixed-point iteration hit its iteration cap."""


_GLOBAL_FORCE = ("force", "forces", "globalForce", "globalForces")
_LOCAL_FORCE = ("localForce", "localForces")
_BASIC_FORCE = ("basicForce", "basicForces")
_LOCAL_DISP = ("localDisplacement", "localDisplacements")
_BASIC_DISP = (
    "deformation", "deformations",
    "basicDeformation", "basicDeformations",
    "basicDisplacement", "basicDisplacements",
)


class FlatSlider3d:
    """Flat slider bearing between nodes ``node_i`` (bottom) and ``node_j`` (top).

    Parameters
    ----------
    tag : int
        Element tag.
    node_i, node_j : int
        Node tags in the domain.
    friction : FrictionModel
        Friction law; the element keeps its own copy.
    uy : float
        Yield displacement of the pre-sliding (elastic) branch, ``> 0``.
    materials : sequence of 4 UniaxialMaterial
        Axial, torsion, bend-y and bend-z materials (see :class:`Axis`); copied.
    y : sequence of float
        In-plane orientation vector (default global Y).
    x : sequence of float, optional
        Local x (bearing axis). Defaults to the node separation.
    mass : float
        Lumped element mass, split equally between both nodes.
    max_iter : int
        Cap on shear fixed-point passes per update.
    tol : float
        Convergence tolerance on the change of the shear-force pair.
    """

    def __init__(
        self,
        tag: int,
        node_i: int,
        node_j: int,
        friction: FrictionModel,
        uy: float,
        materials: Sequence[UniaxialMaterial],
        y: Sequence[float] = DEFAULT_Y,
        x: Optional[Sequence[float]] = None,
        mass: float = 0.0,
        max_iter: int = 20,
        tol: float = 1e-8,
    ) -> None:
        if friction is None or not isinstance(friction, FrictionModel):
            raise TypeError(f"Element {tag}: a FrictionModel instance is required, got {type(friction).__name__}")
        if materials is None or len(materials) != 4:
            raise ValueError(f"Element {tag}: exactly 4 uniaxial materials are required (axial, torsion, bend_y, bend_z)")
        for k, mat in enumerate(materials):
            if mat is None or not isinstance(mat, UniaxialMaterial):
                raise TypeError(f"Element {tag}: material {k + 1} is not a UniaxialMaterial")
        if not float(uy) > 0.0:
            raise ValueError(f"Element {tag}: yield displacement uy must be > 0, got {uy}")
        if float(mass) < 0.0:
            raise ValueError(f"Element {tag}: mass must be >= 0, got {mass}")

        self.tag = int(tag)
        self.node_tags = (int(node_i), int(node_j))
        self.friction = friction.copy()
        self.materials: List[UniaxialMaterial] = [m.copy() for m in materials]
        self.uy = float(uy)
        self.mass = float(mass)
        self.control = ReturnMapControl(tol=float(tol), max_iter=int(max_iter))
        self.x = None if x is None else np.asarray(x, dtype=float).reshape(-1)
        self.y = np.asarray(y, dtype=float).reshape(-1)

        self.alpha_m = 0.0
        self.beta_k = 0.0
        self.beta_k0 = 0.0
        self.beta_kc = 0.0

        self.nodes = (None, None)
        self.frame: Optional[ElementFrame] = None
        self.load = np.zeros(12, dtype=float)
        self.n_iter = 0

        self.kb_init = self._initial_basic_stiffness()
        self._trial = SliderState.initial(self.kb_init)
        self._committed = SliderState.initial(self.kb_init)
        self.revert_to_start()

    # ------------------------------------------------------------------
    # setup
    # ------------------------------------------------------------------

    @property
    def max_iter(self) -> int:
        return int(self.control.max_iter)

    @property
    def tol(self) -> float:
        return float(self.control.tol)

    @property
    def active(self) -> bool:
        return self.frame is not None and self.nodes[0] is not None and self.nodes[1] is not None

    def material(self, axis: Union[Axis, int, str]) -> UniaxialMaterial:
        if isinstance(axis, str):
            axis = Axis[axis.upper()]
        return self.materials[int(axis)]

    def _initial_basic_stiffness(self) -> np.ndarray:
        kb = np.zeros((6, 6), dtype=float)
        kb[0, 0] = self.materials[Axis.AXIAL].initial_tangent()
        kb[1, 1] = kb[0, 0] * EPS
        kb[2, 2] = kb[1, 1]
        kb[3, 3] = self.materials[Axis.TORSION].initial_tangent()
        kb[4, 4] = self.materials[Axis.BEND_Y].initial_tangent()
        kb[5, 5] = self.materials[Axis.BEND_Z].initial_tangent()
        return kb

    def set_domain(self, domain) -> None:
        """Attach to ``domain``; builds the frame on success.

        Missing nodes or nodes without 6 DOFs leave the element inactive (a
        warning is issued). Invalid orientation vectors raise ``ValueError``.
        """
        self.nodes = (None, None)
        self.frame = None
        if domain is None:
            return

        nd_i = domain.get_node(self.node_tags[0])
        nd_j = domain.get_node(self.node_tags[1])
        if nd_i is None or nd_j is None:
            which = "Nd1" if nd_i is None else "Nd2"
            tag = self.node_tags[0] if nd_i is None else self.node_tags[1]
            warnings.warn(
                f"FlatSlider3d.set_domain() - {which}: {tag} does not exist in the model "
                f"for FlatSlider3d ele: {self.tag}",
                UserWarning,
                stacklevel=2,
            )
            return
        for k, nd in enumerate((nd_i, nd_j)):
            if int(nd.ndf) != 6:
                warnings.warn(
                    f"FlatSlider3d.set_domain() - node {k + 1}: {nd.tag} has incorrect "
                    f"number of DOF (not 6) for ele: {self.tag}",
                    UserWarning,
                    stacklevel=2,
                )
                return

        self.frame = ElementFrame.from_nodes(nd_i.crds, nd_j.crds, x=self.x, y=self.y, tag=self.tag)
        self.nodes = (nd_i, nd_j)

    def set_rayleigh(self, alpha_m: float = 0.0, beta_k: float = 0.0, beta_k0: float = 0.0, beta_kc: float = 0.0) -> None:
        self.alpha_m = float(alpha_m)
        self.beta_k = float(beta_k)
        self.beta_k0 = float(beta_k0)
        self.beta_kc = float(beta_kc)

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------

    def commit(self) -> int:
        self._committed = self._trial.copy_shallow()
        err = self.friction.commit()
        for mat in self.materials:
            err += mat.commit()
        return err

    def revert_to_last_commit(self) -> int:
        self._trial = self._committed.copy_shallow()
        err = self.friction.revert_to_last_commit()
        for mat in self.materials:
            err += mat.revert_to_last_commit()
        return err

    def revert_to_start(self) -> int:
        self._trial = SliderState.initial(self.kb_init)
        self._committed = SliderState.initial(self.kb_init)
        self.n_iter = 0
        err = self.friction.revert_to_start()
        for mat in self.materials:
            err += mat.revert_to_start()
        return err

    # ------------------------------------------------------------------
    # state determination
    # ------------------------------------------------------------------

    def _global_kinematics(self):
        nd_i, nd_j = self.nodes
        ug = np.concatenate([nd_i.trial_disp, nd_j.trial_disp])
        ugdot = np.concatenate([nd_i.trial_vel, nd_j.trial_vel])
        return ug, ugdot

    def update(self) -> int:
        """Compute basic forces and stiffness for the current trial kinematics.

        Returns
        -------
        int
            0 on success, -1 if the shear iteration did not converge.
        """
        if not self.active:
            return 0

        Tgl, Tlb = self.frame.Tgl, self.frame.Tlb
        ug, ugdot = self._global_kinematics()

        st = self._trial
        st.ul = Tgl @ ug
        uldot = Tgl @ ugdot
        st.ub = Tlb @ st.ul
        st.ubdot = Tlb @ uldot

        # 1) axial force and stiffness, uplift check
        if self._axial_gate(st):
            return 0

        # 2) shear forces and stiffnesses in basic y and z
        vel = math.hypot(float(st.ubdot[1]), float(st.ubdot[2]))
        if self._shear_return_map(st, vel) != 0:
            return -1

        # 3-5) torsion and bending
        self._rotational_response(st)
        return 0

    def _axial_gate(self, st: SliderState) -> bool:
        """Evaluate the axial material; return True on uplift (response finished)."""
        mat = self.materials[Axis.AXIAL]
        mat.set_trial_strain(float(st.ub[0]), float(st.ubdot[0]))
        st.qb[0] = mat.stress()
        st.kb[0, 0] = mat.tangent()
        if st.qb[0] < 0.0:
            return False

        q0 = float(st.qb[0])
        st.kb = self.kb_init.copy()
        if q0 > 0.0:
            mat.set_trial_strain(float(self._committed.ub[0]), 0.0)
            st.kb[0, 0] *= EPS
        st.qb[:] = 0.0
        st.ub_plastic = self._committed.ub_plastic.copy()
        self.n_iter = 0
        return True

    def _shear_return_map(self, st: SliderState, vel: float) -> int:
        up_c = self._committed.ub_plastic
        u1, u2 = float(st.ub[1]), float(st.ub[2])
        ul4, ul5 = float(st.ul[4]), float(st.ul[5])
        qb0 = float(st.qb[0])
        q1, q2 = float(self._committed.qb[1]), float(self._committed.qb[2])

        converged = False
        dq = 0.0
        it = 0
        while it < self.control.max_iter:
            it += 1
            N = -qb0 - q1 * ul5 + q2 * ul4
            self.friction.set_trial(N, vel)
            q_yield = float(self.friction.yield_force())
            k0 = q_yield / self.uy

            qf1, qf2, k11, k12, k22, up1, up2, _ = radial_return_2d(
                k0, q_yield, u1, u2, float(up_c[0]), float(up_c[1])
            )
            q1_new = qf1 - N * ul5
            q2_new = qf2 + N * ul4
            dq = math.hypot(q1_new - q1, q2_new - q2)
            q1, q2 = q1_new, q2_new

            st.kb[1, 1] = k11
            st.kb[1, 2] = st.kb[2, 1] = k12
            st.kb[2, 2] = k22
            st.ub_plastic = np.array([up1, up2], dtype=float)

            if self.control.converged(dq):
                converged = True
                break

        st.qb[1] = q1
        st.qb[2] = q2
        self.n_iter = it
        if not converged:
            warnings.warn(
                f"FlatSlider3d.update() - element {self.tag}: did not find the shear force "
                f"after {it} iterations and norm: {dq:.6e}",
                ReturnMapWarning,
                stacklevel=3,
            )
            return -1
        return 0

    def _rotational_response(self, st: SliderState) -> None:
        for axis in (Axis.TORSION, Axis.BEND_Y, Axis.BEND_Z):
            k = BASIC_INDEX[axis]
            mat = self.materials[axis]
            mat.set_trial_strain(float(st.ub[k]), float(st.ubdot[k]))
            st.qb[k] = mat.stress()
            st.kb[k, k] = mat.tangent()

    # ------------------------------------------------------------------
    # stiffness
    # ------------------------------------------------------------------

    def _global_stiffness(self, st: SliderState) -> np.ndarray:
        Tgl, Tlb = self.frame.Tgl, self.frame.Tlb
        kl = Tlb.T @ st.kb @ Tlb

        # geometric stiffness (node i rotational rows)
        q0, q1, q2 = float(st.qb[0]), float(st.qb[1]), float(st.qb[2])
        kl[5, 1] -= q0
        kl[5, 7] += q0
        kl[4, 2] += q0
        kl[4, 8] -= q0
        kl[3, 1] += q2
        kl[3, 2] -= q1
        kl[3, 7] -= q2
        kl[3, 8] += q1

        return Tgl.T @ kl @ Tgl

    def tangent_stiffness(self) -> np.ndarray:
        if not self.active:
            return np.zeros((12, 12), dtype=float)
        return self._global_stiffness(self._trial)

    def committed_stiffness(self) -> np.ndarray:
        if not self.active:
            return np.zeros((12, 12), dtype=float)
        return self._global_stiffness(self._committed)

    def initial_stiffness(self) -> np.ndarray:
        if not self.active:
            return np.zeros((12, 12), dtype=float)
        Tgl, Tlb = self.frame.Tgl, self.frame.Tlb
        return Tgl.T @ (Tlb.T @ self.kb_init @ Tlb) @ Tgl

    def mass_matrix(self) -> np.ndarray:
        M = np.zeros((12, 12), dtype=float)
        if self.mass == 0.0:
            return M
        m = 0.5 * self.mass
        for i in range(3):
            M[i, i] = m
            M[i + 6, i + 6] = m
        return M

    def damping_matrix(self) -> np.ndarray:
        """Rayleigh damping ``alpha_m M + beta_k K + beta_k0 K0 + beta_kc Kc``."""
        C = np.zeros((12, 12), dtype=float)
        if self.alpha_m != 0.0:
            C += self.alpha_m * self.mass_matrix()
        if self.beta_k != 0.0:
            C += self.beta_k * self.tangent_stiffness()
        if self.beta_k0 != 0.0:
            C += self.beta_k0 * self.initial_stiffness()
        if self.beta_kc != 0.0:
            C += self.beta_kc * self.committed_stiffness()
        return C

    # ------------------------------------------------------------------
    # forces
    # ------------------------------------------------------------------

    def _local_force(self, st: SliderState) -> np.ndarray:
        ql = self.frame.Tlb.T @ st.qb
        ul = st.ul
        q0, q1, q2 = float(st.qb[0]), float(st.qb[1]), float(st.qb[2])
        dv = float(ul[7] - ul[1])
        dw = float(ul[8] - ul[2])

        # P-Delta moments
        ql[5] += q0 * dv
        ql[4] -= q0 * dw
        # V-Delta torsion
        ql[3] += q1 * dw - q2 * dv
        return ql

    def local_force(self) -> np.ndarray:
        if not self.active:
            return np.zeros(12, dtype=float)
        return self._local_force(self._trial)

    def resisting_force(self) -> np.ndarray:
        if not self.active:
            return np.zeros(12, dtype=float)
        f = self.frame.Tgl.T @ self._local_force(self._trial)
        return f - self.load

    def rayleigh_damping_force(self) -> np.ndarray:
        if not self.active:
            return np.zeros(12, dtype=float)
        _, ugdot = self._global_kinematics()
        return self.damping_matrix() @ ugdot

    def resisting_force_inc_inertia(self) -> np.ndarray:
        f = self.resisting_force()
        if not self.active:
            return f

        if self.alpha_m != 0.0 or self.beta_k != 0.0 or self.beta_k0 != 0.0 or self.beta_kc != 0.0:
            f += self.rayleigh_damping_force()

        if self.mass != 0.0:
            nd_i, nd_j = self.nodes
            m = 0.5 * self.mass
            f[0:3] += m * nd_i.trial_accel[0:3]
            f[6:9] += m * nd_j.trial_accel[0:3]
        return f

    def zero_load(self) -> None:
        self.load[:] = 0.0

    def add_load(self, *args: Any, **kwargs: Any) -> int:
        raise NotImplementedError(f"FlatSlider3d {self.tag}: element loads are not supported")

    def add_inertia_load_to_unbalance(self, accel: Sequence[float]) -> int:
        """Add ``-M R accel`` to the element load.

        ``accel`` is either one 6-component vector applied to both nodes or a
        12-component vector (node i then node j).
        """
        if self.mass == 0.0:
            return 0
        a = np.asarray(accel, dtype=float).reshape(-1)
        if a.size == 6:
            a = np.concatenate([a, a])
        if a.size != 12:
            raise ValueError(f"FlatSlider3d {self.tag}: acceleration must have 6 or 12 components, got {a.size}")
        m = 0.5 * self.mass
        self.load[0:3] -= m * a[0:3]
        self.load[6:9] -= m * a[6:9]
        return 0

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    @property
    def basic_force(self) -> np.ndarray:
        return self._trial.qb.copy()

    @property
    def basic_stiffness(self) -> np.ndarray:
        return self._trial.kb.copy()

    @property
    def basic_deformation(self) -> np.ndarray:
        return self._trial.ub.copy()

    @property
    def local_displacement(self) -> np.ndarray:
        return self._trial.ul.copy()

    @property
    def plastic_displacement(self) -> np.ndarray:
        return self._trial.ub_plastic.copy()

    @property
    def committed_plastic_displacement(self) -> np.ndarray:
        return self._committed.ub_plastic.copy()

    def get_response(self, name: str, *args: Any) -> Any:
        """Named response projections.

        ``material`` takes a slot (1..4 or an :class:`Axis` name) followed by
        the material's own response name; ``frictionModel`` takes the friction
        law's response name.
        """
        if name in _GLOBAL_FORCE:
            return self.resisting_force()
        if name in _LOCAL_FORCE:
            return self.local_force()
        if name in _BASIC_FORCE:
            return self.basic_force
        if name in _LOCAL_DISP:
            return self.local_displacement
        if name in _BASIC_DISP:
            return self.basic_deformation
        if name in ("plasticDisplacement", "plasticDisplacements"):
            return self.plastic_displacement
        if name == "material":
            if len(args) < 2:
                raise KeyError("'material' response needs a material slot and a response name")
            slot = args[0]
            if isinstance(slot, str) and slot.isdigit():
                slot = int(slot)
            if isinstance(slot, int) and not isinstance(slot, Axis):
                if not 1 <= slot <= 4:
                    raise KeyError(f"Material slot must be in 1..4, got {slot}")
                slot = slot - 1
            return self.material(slot).get_response(args[1])
        if name in ("frictionModel", "frnMdl", "friction"):
            if not args:
                raise KeyError("'frictionModel' response needs a response name")
            return self.friction.get_response(args[0])
        raise KeyError(f"Unknown response '{name}' for FlatSlider3d {self.tag}")

    def display_coordinates(self, fact: float = 1.0) -> np.ndarray:
        """Deformed end coordinates ``crd + fact * disp`` (committed), shape (2, 3)."""
        if not self.active:
            raise RuntimeError(f"FlatSlider3d {self.tag}: element is not attached to a domain")
        nd_i, nd_j = self.nodes
        v1 = nd_i.crds + float(fact) * nd_i.disp[0:3]
        v2 = nd_j.crds + float(fact) * nd_j.disp[0:3]
        return np.vstack([v1, v2])

    def describe(self) -> str:
        lines = [
            f"Element: {self.tag}  type: FlatSlider3d  iNode: {self.node_tags[0]}  jNode: {self.node_tags[1]}",
            f"  FrictionModel: {self.friction.type_id}",
            f"  uy: {self.uy}",
        ]
        for axis in Axis:
            lines.append(f"  Material {axis.name.lower()}: {self.materials[axis].type_id}")
        lines.append(f"  mass: {self.mass}  maxIter: {self.max_iter}  tol: {self.tol}")
        if self.active:
            lines.append(f"  resisting force: {np.array2string(self.resisting_force(), precision=6)}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()

    # ------------------------------------------------------------------
    # persistence
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "nodes": list(self.node_tags),
            "uy": self.uy,
            "mass": self.mass,
            "max_iter": self.max_iter,
            "tol": self.tol,
            "x": None if self.x is None else [float(v) for v in self.x],
            "y": [float(v) for v in self.y],
            "friction": self.friction.to_dict(),
            "materials": [mat.to_dict() for mat in self.materials],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FlatSlider3d":
        """Rebuild an element (virgin state) from :meth:`to_dict` output."""
        node_i, node_j = data["nodes"]
        return cls(
            tag=int(data["tag"]),
            node_i=int(node_i),
            node_j=int(node_j),
            friction=friction_model_from_dict(data["friction"]),
            uy=float(data["uy"]),
            materials=[uniaxial_material_from_dict(m) for m in data["materials"]],
            y=data.get("y", DEFAULT_Y),
            x=data.get("x"),
            mass=float(data.get("mass", 0.0)),
            max_iter=int(data.get("max_iter", 20)),
            tol=float(data.get("tol", 1e-8)),
        )
