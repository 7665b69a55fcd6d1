"""Flat sliding friction bearing element (3D) with pluggable friction laws."""

from flatslider.bearing_state import SliderState
from flatslider.convergence import NewtonConvergence, ReturnMapControl
from flatslider.domain import Domain, Node
from flatslider.element import Axis, FlatSlider3d, ReturnMapWarning
from flatslider.friction import (
    Coulomb,
    FrictionModel,
    FrictionModelBase,
    VelDependent,
    VelDepMultiLinear,
    VelPressureDep,
)
from flatslider.geometry import ElementFrame, build_triad
from flatslider.uniaxial import Elastic, ElasticNoTension, ElasticPerfectlyPlastic, UniaxialMaterial

__version__ = "0.1.0"

__all__ = [
    "Axis",
    "Coulomb",
    "Domain",
    "Elastic",
    "ElasticNoTension",
    "ElasticPerfectlyPlastic",
    "ElementFrame",
    "FlatSlider3d",
    "FrictionModel",
    "FrictionModelBase",
    "NewtonConvergence",
    "Node",
    "ReturnMapControl",
    "ReturnMapWarning",
    "SliderState",
    "UniaxialMaterial",
    "VelDepMultiLinear",
    "VelDependent",
    "VelPressureDep",
    "build_triad",
]
