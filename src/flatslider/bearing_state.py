"""History containers for the flat slider element.

The element keeps one :class:`SliderState` as its *trial* state (overwritten by
every ``update``) and one as its *committed* state (overwritten only by
``commit``). Reverting copies committed back into trial, so the pair always
reproduces the element exactly as it was at the last accepted step.

Basic-system ordering: ``[axial, shear_y, shear_z, torsion, bend_y, bend_z]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass
class SliderState:
    """Element-level history and last computed response.

    - ub, ubdot: basic deformation and rate (6)
    - ul: local displacement (12)
    - ub_plastic: plastic shear displacement (2)
    - qb, kb: basic force (6) and basic tangent (6x6)
    """

    ub: np.ndarray = field(default_factory=lambda: np.zeros(6, dtype=float))
    ubdot: np.ndarray = field(default_factory=lambda: np.zeros(6, dtype=float))
    ul: np.ndarray = field(default_factory=lambda: np.zeros(12, dtype=float))
    ub_plastic: np.ndarray = field(default_factory=lambda: np.zeros(2, dtype=float))
    qb: np.ndarray = field(default_factory=lambda: np.zeros(6, dtype=float))
    kb: np.ndarray = field(default_factory=lambda: np.zeros((6, 6), dtype=float))

    def copy_shallow(self) -> "SliderState":
        """Copy with NumPy arrays duplicated (safe for trial/commit workflows)."""
        return SliderState(
            ub=np.array(self.ub, copy=True),
            ubdot=np.array(self.ubdot, copy=True),
            ul=np.array(self.ul, copy=True),
            ub_plastic=np.array(self.ub_plastic, copy=True),
            qb=np.array(self.qb, copy=True),
            kb=np.array(self.kb, copy=True),
        )

    @classmethod
    def initial(cls, kb_init: np.ndarray) -> "SliderState":
        """Virgin state: zero history, elastic initial stiffness."""
        return cls(kb=np.array(kb_init, dtype=float, copy=True))
