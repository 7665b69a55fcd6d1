"""Uniaxial materials used on the axial, torsion and bending axes."""

import numpy as np
import pytest

from flatslider.registry import uniaxial_material_from_dict
from flatslider.uniaxial import Elastic, ElasticNoTension, ElasticPerfectlyPlastic, UniaxialMaterial


def test_materials_satisfy_interface():
    for mat in (Elastic(1.0), ElasticNoTension(1.0), ElasticPerfectlyPlastic(1.0, 1.0)):
        assert isinstance(mat, UniaxialMaterial)


def test_elastic_stress_and_viscous_term():
    mat = Elastic(E=200.0, eta=5.0)
    mat.set_trial_strain(0.01, rate=2.0)
    assert np.isclose(mat.stress(), 200.0 * 0.01 + 5.0 * 2.0)
    assert mat.tangent() == 200.0
    assert mat.initial_tangent() == 200.0


def test_elastic_uses_negative_modulus_in_compression():
    mat = Elastic(E=100.0, E_neg=300.0)
    mat.set_trial_strain(-0.1)
    assert np.isclose(mat.stress(), -30.0)
    assert mat.tangent() == 300.0
    assert mat.initial_tangent() == 100.0


def test_no_tension_spring():
    mat = ElasticNoTension(E=1e6)
    mat.set_trial_strain(1e-3)
    assert mat.stress() == 0.0
    assert mat.tangent() == 0.0
    mat.set_trial_strain(0.0)
    assert mat.stress() == 0.0
    mat.set_trial_strain(-1e-3)
    assert np.isclose(mat.stress(), -1e3)
    assert mat.tangent() == 1e6
    assert mat.initial_tangent() == 1e6


def test_perfectly_plastic_yield_and_unloading():
    mat = ElasticPerfectlyPlastic(E=100.0, fy=1.0)
    mat.set_trial_strain(0.03)
    assert mat.stress() == 1.0
    assert mat.tangent() == 0.0
    assert np.isclose(mat.plastic_strain, 0.02)
    mat.commit()

    # elastic unloading from the committed plastic strain
    mat.set_trial_strain(0.025)
    assert np.isclose(mat.stress(), 0.5)
    assert mat.tangent() == 100.0

    mat.set_trial_strain(-0.5)
    assert mat.stress() == -1.0


def test_perfectly_plastic_commit_revert():
    mat = ElasticPerfectlyPlastic(E=10.0, fy=2.0, fy_neg=-1.0)
    mat.set_trial_strain(0.5)
    mat.commit()
    committed = (mat.stress(), mat.tangent(), mat.plastic_strain)

    mat.set_trial_strain(-3.0)
    assert mat.stress() == -1.0
    mat.revert_to_last_commit()
    assert (mat.stress(), mat.tangent(), mat.plastic_strain) == committed

    mat.revert_to_start()
    assert mat.stress() == 0.0
    assert mat.plastic_strain == 0.0
    assert mat.tangent() == 10.0


def test_perfectly_plastic_validation():
    with pytest.raises(ValueError):
        ElasticPerfectlyPlastic(E=0.0, fy=1.0)
    with pytest.raises(ValueError):
        ElasticPerfectlyPlastic(E=1.0, fy=1.0, fy_neg=0.5)


def test_copy_is_independent():
    mat = Elastic(E=1.0)
    clone = mat.copy()
    clone.set_trial_strain(1.0)
    assert mat.strain() == 0.0
    assert clone.strain() == 1.0


def test_responses():
    mat = ElasticPerfectlyPlastic(E=100.0, fy=1.0)
    mat.set_trial_strain(0.02)
    assert mat.get_response("stress") == 1.0
    assert mat.get_response("strain") == 0.02
    assert mat.get_response("stressStrain") == (1.0, 0.02)
    assert np.isclose(mat.get_response("plasticStrain"), 0.01)
    with pytest.raises(KeyError):
        mat.get_response("damage")


@pytest.mark.parametrize(
    "mat",
    [Elastic(E=3.0, eta=0.1, E_neg=4.0), ElasticNoTension(E=5.0), ElasticPerfectlyPlastic(E=6.0, fy=1.5)],
)
def test_registry_rebuilds_materials(mat):
    data = mat.to_dict()
    mat2 = uniaxial_material_from_dict(data)
    assert type(mat2) is type(mat)
    assert mat2.to_dict() == data


def test_registry_rejects_unknown_type():
    with pytest.raises(ValueError, match="Unknown uniaxial material"):
        uniaxial_material_from_dict({"type": "Steel02", "fy": 1.0})
