"""Cyclic shear test of a single flat slider bearing.

Usage:
  flatslider-cyclic
  flatslider-cyclic --mu 0.06 --axial-load 1000 --amplitudes 0.05,0.1 --cycles 2
  flatslider-cyclic --csv out/loop.csv --plot out/loop.png

Model: node 1 fixed at the origin, node 2 at (0, 0, height). The bearing axis is
global Z, so the imposed displacement on node 2 ``uy`` is the basic shear-y
deformation. A compression-only spring carries the axial load; torsion and
bending use linear elastic springs; friction is Coulomb.
"""

from __future__ import annotations

import argparse
from typing import List, Optional, Sequence

from flatslider.domain import Domain, Node
from flatslider.driver import generate_cyclic_path, run_displacement_history
from flatslider.element import FlatSlider3d
from flatslider.friction import Coulomb
from flatslider.output.history import export_csv
from flatslider.uniaxial import Elastic, ElasticNoTension


def _floats(text: str) -> List[float]:
    vals = [float(v) for v in text.split(",") if v.strip()]
    if not vals:
        raise argparse.ArgumentTypeError("expected a comma-separated list of numbers")
    return vals


def build_model(
    mu: float = 0.06,
    uy: float = 0.001,
    k_axial: float = 1.0e8,
    k_rot: float = 1.0e6,
    height: float = 0.1,
    mass: float = 0.0,
):
    """Two-node domain with one flat slider between them; returns ``(domain, element)``."""
    domain = Domain()
    domain.add_node(Node(1, (0.0, 0.0, 0.0)))
    domain.add_node(Node(2, (0.0, 0.0, float(height))))
    ele = FlatSlider3d(
        tag=1,
        node_i=1,
        node_j=2,
        friction=Coulomb(mu),
        uy=uy,
        materials=[ElasticNoTension(k_axial), Elastic(k_rot), Elastic(k_rot), Elastic(k_rot)],
        y=(0.0, 1.0, 0.0),
        mass=mass,
    )
    domain.add_element(ele)
    return domain, ele


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Cyclic shear test of a flat sliding bearing")
    ap.add_argument("--mu", type=float, default=0.06, help="Coulomb friction coefficient (default: 0.06)")
    ap.add_argument("--uy", type=float, default=0.001, help="Pre-sliding yield displacement (default: 0.001)")
    ap.add_argument("--axial-load", type=float, default=1000.0,
                    help="Compressive axial load, positive value (default: 1000)")
    ap.add_argument("--k-axial", type=float, default=1.0e8, help="Axial contact stiffness (default: 1e8)")
    ap.add_argument("--k-rot", type=float, default=1.0e6, help="Torsion/bending stiffness (default: 1e6)")
    ap.add_argument("--height", type=float, default=0.1, help="Distance between the nodes (default: 0.1)")
    ap.add_argument("--amplitudes", type=_floats, default=[0.01, 0.02],
                    help="Comma-separated shear amplitudes (default: 0.01,0.02)")
    ap.add_argument("--cycles", type=int, default=1, help="Cycles per amplitude (default: 1)")
    ap.add_argument("--n-per-leg", type=int, default=10, help="Increments per quarter cycle (default: 10)")
    ap.add_argument("--csv", type=str, default="", help="Write the step history to this CSV file")
    ap.add_argument("--plot", type=str, default="", help="Save the hysteresis loop to this image file")
    ap.add_argument("--verbose", action="store_true", help="Print Newton progress")
    args = ap.parse_args(argv)

    if args.axial_load <= 0.0:
        ap.error("--axial-load must be positive (compression)")

    domain, ele = build_model(
        mu=args.mu, uy=args.uy, k_axial=args.k_axial, k_rot=args.k_rot, height=args.height
    )
    path = generate_cyclic_path(args.amplitudes, n_cycles=args.cycles, n_per_leg=args.n_per_leg)
    df = run_displacement_history(ele, domain, path, axial_load=-args.axial_load, verbose=args.verbose)

    vy = df["Vy"].abs().max()
    print(f"steps: {len(df)}  max |Vy|: {vy:.6g}  mu*P: {args.mu * args.axial_load:.6g}")

    if args.csv:
        out = export_csv(df, args.csv)
        print(f"history written to {out}")
    if args.plot:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from flatslider.output.plotting import plot_hysteresis

        ax = plot_hysteresis(df, label=f"mu={args.mu:g}, P={args.axial_load:g}")
        ax.figure.savefig(args.plot, dpi=150, bbox_inches="tight")
        plt.close(ax.figure)
        print(f"plot written to {args.plot}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
