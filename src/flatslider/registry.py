"""Type identifiers for persisted friction laws and uniaxial materials.

``to_dict`` on every collaborator writes a ``"type"`` key; the functions here
map it back to a class so an element can be rebuilt from plain data.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Type

from flatslider.friction import Coulomb, VelDependent, VelDepMultiLinear, VelPressureDep
from flatslider.uniaxial import Elastic, ElasticNoTension, ElasticPerfectlyPlastic

FRICTION_MODELS: Dict[str, Type] = {
    cls.type_id: cls for cls in (Coulomb, VelDependent, VelPressureDep, VelDepMultiLinear)
}

UNIAXIAL_MATERIALS: Dict[str, Type] = {
    cls.type_id: cls for cls in (Elastic, ElasticNoTension, ElasticPerfectlyPlastic)
}


def register_friction_model(cls: Type) -> Type:
    """Register a friction law class under its ``type_id`` (usable as decorator)."""
    FRICTION_MODELS[cls.type_id] = cls
    return cls


def register_uniaxial_material(cls: Type) -> Type:
    """Register a uniaxial material class under its ``type_id`` (usable as decorator)."""
    UNIAXIAL_MATERIALS[cls.type_id] = cls
    return cls


def _build(table: Mapping[str, Type], data: Mapping[str, Any], kind: str) -> Any:
    params = dict(data)
    type_id = params.pop("type", None)
    if type_id not in table:
        raise ValueError(f"Unknown {kind} type '{type_id}'. Known: {sorted(table)}")
    return table[type_id](**params)


def friction_model_from_dict(data: Mapping[str, Any]) -> Any:
    return _build(FRICTION_MODELS, data, "friction model")


def uniaxial_material_from_dict(data: Mapping[str, Any]) -> Any:
    return _build(UNIAXIAL_MATERIALS, data, "uniaxial material")
