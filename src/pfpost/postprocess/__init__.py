"""
Postprocessing Module
=====================

Boundary loads, crack opening profiles, point values, and their tracking.
"""

from .config import PostprocessConfig
from .boundary_load import BoundaryLoadIntegrator
from .crack_opening import CrackOpeningProfileSampler
from .point_values import NearestVertexSampler
from .load_history import LoadHistory, LoadRecord
from .visualization import (
    plot_partition,
    plot_cod_profile,
    plot_load_displacement,
)

__all__ = [
    "PostprocessConfig",
    "BoundaryLoadIntegrator",
    "CrackOpeningProfileSampler",
    "NearestVertexSampler",
    "LoadHistory",
    "LoadRecord",
    "plot_partition",
    "plot_cod_profile",
    "plot_load_displacement",
]
