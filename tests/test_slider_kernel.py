"""Radial return onto the circular friction surface (numba kernel)."""

import numpy as np

from flatslider.numba.kernels_slider import radial_return_2d


def test_elastic_step_keeps_committed_plastic_displacement():
    q1, q2, k11, k12, k22, up1, up2, plastic = radial_return_2d(100.0, 10.0, 0.03, 0.04, 0.0, 0.0)
    assert np.isclose(q1, 3.0) and np.isclose(q2, 4.0)
    assert (k11, k12, k22) == (100.0, 0.0, 100.0)
    assert (up1, up2) == (0.0, 0.0)
    assert plastic == 0.0


def test_on_surface_is_elastic():
    q1, q2, _, _, _, up1, up2, plastic = radial_return_2d(100.0, 5.0, 0.03, 0.04, 0.0, 0.0)
    assert plastic == 0.0
    assert np.isclose(np.hypot(q1, q2), 5.0)


def test_plastic_step_returns_to_surface():
    k0, qy = 1000.0, 2.0
    q1, q2, k11, k12, k22, up1, up2, plastic = radial_return_2d(k0, qy, 0.003, -0.004, 0.0005, 0.0)
    assert plastic == 1.0
    assert np.isclose(np.hypot(q1, q2), qy)

    # force stays parallel to the trial force and equals k0 * (u - up)
    qt = k0 * np.array([0.0025, -0.004])
    np.testing.assert_allclose([q1, q2], qy * qt / np.linalg.norm(qt))
    np.testing.assert_allclose([q1, q2], k0 * (np.array([0.003, -0.004]) - [up1, up2]), atol=1e-12)


def test_plastic_tangent_is_singular_along_force():
    k0, qy = 500.0, 1.0
    q1, q2, k11, k12, k22, _, _, _ = radial_return_2d(k0, qy, 0.01, 0.02, 0.0, 0.0)
    K = np.array([[k11, k12], [k12, k22]])
    np.testing.assert_allclose(K @ np.array([q1, q2]), 0.0, atol=1e-10)
    assert np.isclose(np.linalg.det(K), 0.0, atol=1e-10)
    assert k11 > 0.0 and k22 > 0.0


def test_uniaxial_plastic_step():
    q1, q2, k11, k12, k22, up1, up2, plastic = radial_return_2d(5000.0, 50.0, 0.02, 0.0, 0.0, 0.0)
    assert np.isclose(q1, 50.0) and q2 == 0.0
    assert np.isclose(up1, 0.01) and up2 == 0.0
    assert k11 == 0.0 and k12 == 0.0
    assert np.isclose(k22, 2500.0)
