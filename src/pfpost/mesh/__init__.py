"""
Mesh Module
===========

Replicated triangle mesh, structured generators, and per-rank partitions.
"""

from .triangle_mesh import TriangleMesh, INTERIOR_FACE_ID
from .mesh_generators import (
    create_rectangle_mesh,
    create_square_mesh,
    create_single_element,
    create_two_element_patch,
    perturb_interior_nodes,
    LEFT,
    RIGHT,
    BOTTOM,
    TOP,
)
from .partition import (
    MeshPartition,
    FaceRange,
    any_face,
    boundary_face,
    partition_cells,
)

__all__ = [
    "TriangleMesh",
    "INTERIOR_FACE_ID",
    "create_rectangle_mesh",
    "create_square_mesh",
    "create_single_element",
    "create_two_element_patch",
    "perturb_interior_nodes",
    "LEFT",
    "RIGHT",
    "BOTTOM",
    "TOP",
    "MeshPartition",
    "FaceRange",
    "any_face",
    "boundary_face",
    "partition_cells",
]
