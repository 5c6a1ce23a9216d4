"""
FEM Module
==========

Quadrature, P1 basis, DoF numbering and face field evaluation.
"""

from .quadrature import QGauss1D
from .finite_element import (
    LinearTriangle,
    VectorField,
    ScalarField,
    displacement_field,
    phase_field,
)
from .dof_handler import DoFHandler
from .fe_values import FaceValues, UpdateFlags

__all__ = [
    "QGauss1D",
    "LinearTriangle",
    "VectorField",
    "ScalarField",
    "displacement_field",
    "phase_field",
    "DoFHandler",
    "FaceValues",
    "UpdateFlags",
]
