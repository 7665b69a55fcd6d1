"""Minimal node/domain containers the element attaches to.

These stand in for the structural model of a full FE framework: they own the
nodal kinematics (committed and trial) and hand node references to elements.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np


def _zeros6() -> np.ndarray:
    return np.zeros(6, dtype=float)


@dataclass
class Node:
    """Spatial node with 6 DOFs ``[ux, uy, uz, rx, ry, rz]``."""

    tag: int
    crds: np.ndarray
    ndf: int = 6

    disp: np.ndarray = field(default_factory=_zeros6)
    vel: np.ndarray = field(default_factory=_zeros6)
    accel: np.ndarray = field(default_factory=_zeros6)
    trial_disp: np.ndarray = field(default_factory=_zeros6)
    trial_vel: np.ndarray = field(default_factory=_zeros6)
    trial_accel: np.ndarray = field(default_factory=_zeros6)

    def __post_init__(self) -> None:
        self.crds = np.asarray(self.crds, dtype=float).reshape(3)
        n = int(self.ndf)
        for name in ("disp", "vel", "accel", "trial_disp", "trial_vel", "trial_accel"):
            arr = np.asarray(getattr(self, name), dtype=float).reshape(-1)
            if arr.size != n:
                arr = np.zeros(n, dtype=float)
            setattr(self, name, arr)

    def set_trial_disp(self, u: Sequence[float]) -> None:
        self.trial_disp[:] = np.asarray(u, dtype=float).reshape(self.ndf)

    def set_trial_vel(self, v: Sequence[float]) -> None:
        self.trial_vel[:] = np.asarray(v, dtype=float).reshape(self.ndf)

    def set_trial_accel(self, a: Sequence[float]) -> None:
        self.trial_accel[:] = np.asarray(a, dtype=float).reshape(self.ndf)

    def commit(self) -> None:
        self.disp[:] = self.trial_disp
        self.vel[:] = self.trial_vel
        self.accel[:] = self.trial_accel

    def revert_to_last_commit(self) -> None:
        self.trial_disp[:] = self.disp
        self.trial_vel[:] = self.vel
        self.trial_accel[:] = self.accel

    def revert_to_start(self) -> None:
        for arr in (self.disp, self.vel, self.accel, self.trial_disp, self.trial_vel, self.trial_accel):
            arr[:] = 0.0


@dataclass
class Domain:
    """Node registry plus the elements attached to it."""

    nodes: Dict[int, Node] = field(default_factory=dict)
    elements: List = field(default_factory=list)

    def add_node(self, node: Node) -> Node:
        if node.tag in self.nodes:
            raise ValueError(f"Node {node.tag} already exists in the domain")
        self.nodes[node.tag] = node
        return node

    def get_node(self, tag: int) -> Optional[Node]:
        return self.nodes.get(int(tag))

    def add_element(self, element) -> None:
        self.elements.append(element)
        element.set_domain(self)

    def commit(self) -> int:
        err = 0
        for node in self.nodes.values():
            node.commit()
        for ele in self.elements:
            err += ele.commit()
        return err

    def revert_to_last_commit(self) -> int:
        err = 0
        for node in self.nodes.values():
            node.revert_to_last_commit()
        for ele in self.elements:
            err += ele.revert_to_last_commit()
        return err

    def revert_to_start(self) -> int:
        err = 0
        for node in self.nodes.values():
            node.revert_to_start()
        for ele in self.elements:
            err += ele.revert_to_start()
        return err
