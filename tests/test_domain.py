"""Node and domain containers."""

import numpy as np
import pytest

from flatslider.convergence import NewtonConvergence, ReturnMapControl
from flatslider.domain import Domain, Node


def test_node_commit_and_revert():
    nd = Node(1, (0.0, 0.0, 0.0))
    nd.set_trial_disp(np.arange(6.0))
    nd.set_trial_vel(np.ones(6))
    nd.commit()
    nd.set_trial_disp(np.zeros(6))
    nd.revert_to_last_commit()
    np.testing.assert_array_equal(nd.trial_disp, np.arange(6.0))
    np.testing.assert_array_equal(nd.trial_vel, np.ones(6))

    nd.revert_to_start()
    np.testing.assert_array_equal(nd.disp, np.zeros(6))


def test_node_rejects_wrong_size():
    nd = Node(1, (0.0, 0.0, 0.0))
    with pytest.raises(ValueError):
        nd.set_trial_disp([1.0, 2.0])


def test_duplicate_node():
    domain = Domain()
    domain.add_node(Node(1, (0.0, 0.0, 0.0)))
    with pytest.raises(ValueError, match="already exists"):
        domain.add_node(Node(1, (1.0, 0.0, 0.0)))
    assert domain.get_node(2) is None


def test_return_map_control():
    ctrl = ReturnMapControl(tol=1e-6, max_iter=3)
    assert ctrl.converged(1e-7)
    assert not ctrl.converged(1e-6)
    with pytest.raises(ValueError):
        ReturnMapControl(max_iter=0)


def test_newton_tolerance_scales_with_axial_load():
    conv = NewtonConvergence(tol_r=1e-6, beta=1e-3)
    assert np.isclose(conv.tolerance(0.0), 1e-6 + 1e-3)
    assert np.isclose(conv.tolerance(-1e4), 1e-6 + 10.0)
    assert conv.converged(5.0, -1e4)
    assert not conv.converged(5.0, -10.0)
    assert conv.stagnated(1e-16)
