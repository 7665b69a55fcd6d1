"""Displacement-history driver, history export and hysteresis plot."""

import numpy as np
import pandas as pd
import pytest

from flatslider.cli import build_model, main
from flatslider.convergence import NewtonConvergence
from flatslider.domain import Domain, Node
from flatslider.driver import generate_cyclic_path, run_displacement_history
from flatslider.element import FlatSlider3d
from flatslider.friction import Coulomb
from flatslider.output.history import export_csv, history_to_frame
from flatslider.uniaxial import Elastic


def test_cyclic_path_shape():
    path = generate_cyclic_path([1.0, 2.0], n_cycles=2, n_per_leg=4)
    assert path[0] == 0.0
    assert len(path) == 1 + 2 * 2 * 4 * 4
    assert np.isclose(path.max(), 2.0)
    assert np.isclose(path.min(), -2.0)
    assert np.isclose(path[4], 1.0)
    assert np.isclose(path[-1], 0.0)


def test_cyclic_path_validation():
    with pytest.raises(ValueError):
        generate_cyclic_path([1.0], n_per_leg=0)


def test_coulomb_loop_plateau():
    mu, P = 0.06, 1000.0
    domain, ele = build_model(mu=mu, uy=0.001)
    path = generate_cyclic_path([0.01], n_per_leg=5)
    df = run_displacement_history(ele, domain, path, axial_load=-P)

    assert len(df) == len(path)
    np.testing.assert_allclose(df["uy"].to_numpy(), path)
    np.testing.assert_allclose(df["N"].to_numpy(), -P, rtol=1e-9)
    np.testing.assert_allclose(df["normal_force"].to_numpy(), P, rtol=1e-9)
    assert np.isclose(df["Vy"].max(), mu * P, rtol=1e-9)
    assert np.isclose(df["Vy"].min(), -mu * P, rtol=1e-9)
    assert (df["Vy"].abs() <= mu * P * (1.0 + 1e-9)).all()

    # axial shortening from the contact spring
    np.testing.assert_allclose(df["uz"].to_numpy(), -P / 1.0e8, rtol=1e-9)

    # dissipated energy is positive over a closed loop
    V = df["Vy"].to_numpy()
    u = df["uy"].to_numpy()
    energy = float(np.sum(0.5 * (V[1:] + V[:-1]) * np.diff(u)))
    assert energy > 0.0
    assert (df["newton_iter"] >= 1).all()


def test_committed_state_after_run():
    domain, ele = build_model(mu=0.05, uy=0.001)
    path = generate_cyclic_path([0.004], n_per_leg=2)[:3]
    df = run_displacement_history(ele, domain, path, axial_load=-500.0)
    np.testing.assert_allclose(ele.committed_plastic_displacement, [df["up_y"].iloc[-1], df["up_z"].iloc[-1]])
    assert np.isclose(domain.get_node(2).disp[1], 0.004)


def test_driver_rejects_bad_input():
    domain, ele = build_model()
    with pytest.raises(ValueError):
        run_displacement_history(ele, domain, [0.0, 0.1], control_dofs=(2,), axial_dof=2)
    with pytest.raises(ValueError):
        run_displacement_history(ele, domain, np.zeros((3, 2)), control_dofs=(1,))

    lone = FlatSlider3d(9, 1, 2, Coulomb(0.1), 0.001, [Elastic(1.0)] * 4)
    with pytest.raises(RuntimeError, match="not attached"):
        run_displacement_history(lone, Domain(), [0.0])


def test_driver_reports_newton_failure():
    domain, ele = build_model()
    newton = NewtonConvergence(tol_r=1e-30, beta=0.0)
    with pytest.raises(RuntimeError, match="Newton did not converge"):
        run_displacement_history(ele, domain, [0.001], axial_load=-1000.0, newton=newton, max_newton=1)
    assert domain.get_node(2).trial_disp[1] == 0.0


def test_driver_stops_on_stagnation():
    domain, ele = build_model()
    # unreachable residual tolerance and a stagnation threshold above any correction
    newton = NewtonConvergence(tol_r=-1.0, beta=0.0, tol_du=1.0)
    with pytest.raises(RuntimeError, match="stagnated at iteration 2"):
        run_displacement_history(ele, domain, [0.001], axial_load=-1000.0, newton=newton, max_newton=10)
    assert domain.get_node(2).trial_disp[2] == 0.0
    np.testing.assert_array_equal(ele.committed_plastic_displacement, [0.0, 0.0])


def test_history_frame_and_csv(tmp_path):
    df = history_to_frame([{"step": 1, "uy": 0.1, "Vy": 2.0}, {"step": 2, "uy": 0.2, "Vy": 3.0}])
    assert list(df.columns) == ["step", "uy", "Vy"]
    assert history_to_frame([]).empty

    out = export_csv(df, tmp_path / "sub" / "hist.csv")
    assert out.exists()
    df2 = pd.read_csv(out)
    pd.testing.assert_frame_equal(df, df2)


def test_plot_hysteresis():
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    from flatslider.output.plotting import plot_hysteresis

    df = pd.DataFrame({"uy": [0.0, 1.0, 0.0], "Vy": [0.0, 1.0, -1.0]})
    ax = plot_hysteresis(df, label="loop")
    assert len(ax.lines) == 3
    np.testing.assert_allclose(ax.lines[0].get_xdata(), df["uy"])
    with pytest.raises(KeyError):
        plot_hysteresis(df, y="Vz", ax=ax)
    plt.close(ax.figure)


@pytest.mark.slow
def test_cli_writes_outputs(tmp_path, capsys):
    csv = tmp_path / "loop.csv"
    png = tmp_path / "loop.png"
    rc = main(["--amplitudes", "0.005,0.01", "--n-per-leg", "4", "--csv", str(csv), "--plot", str(png)])
    assert rc == 0
    assert csv.exists() and png.exists()
    df = pd.read_csv(csv)
    assert {"uy", "Vy", "N", "up_y", "shear_iter"} <= set(df.columns)
    assert "max |Vy|" in capsys.readouterr().out


def test_cli_rejects_tension_load():
    with pytest.raises(SystemExit):
        main(["--axial-load", "-5"])
