"""
Phase-Field Postprocessing
==========================

Distributed postprocessing for finite-element phase-field fracture solutions.

Modules:
    mesh: Replicated triangle mesh, generators and per-rank partitions
    fem: Quadrature, P1 basis, DoF numbering and face field evaluation
    parallel: Reduction services and distributed vectors
    physics: Isotropic linear elasticity
    postprocess: Boundary load, crack opening profile and point values
    runtime: Logging setup
"""

from . import mesh
from . import fem
from . import parallel
from . import physics
from . import postprocess
from . import runtime

__version__ = "0.1.0"
__all__ = ["mesh", "fem", "parallel", "physics", "postprocess", "runtime"]
