"""
Physics Module
==============

Isotropic linear elastic material model.
"""

from .material import IsotropicMaterial, isotropic_stress

__all__ = [
    "IsotropicMaterial",
    "isotropic_stress",
]
