"""
Boundary Load
=============

Net traction force over the boundary faces carrying a given id.
"""

import logging
import numpy as np
from typing import Optional

from ..fem.dof_handler import DoFHandler
from ..fem.fe_values import FaceValues, UpdateFlags
from ..fem.finite_element import displacement_field
from ..fem.quadrature import QGauss1D
from ..mesh.partition import boundary_face
from ..parallel.communicator import Communicator
from ..parallel.distributed_vector import DistributedVector
from ..physics.material import isotropic_stress
from .config import PostprocessConfig

logger = logging.getLogger(__name__)


class BoundaryLoadIntegrator:
    """
    Integrates σ·n over the faces of one boundary id.

    Each rank integrates over the boundary faces of its own cells, so every
    face is counted exactly once globally, and the partial loads are summed.

    Attributes:
        dof_handler: DoFHandler of the displacement / phase-field system
        communicator: group the solution is distributed over
        config: PostprocessConfig
    """

    def __init__(self, dof_handler: DoFHandler, communicator: Communicator,
                 config: Optional[PostprocessConfig] = None):
        self.dof_handler = dof_handler
        self.communicator = communicator
        self.config = config or PostprocessConfig()

    def compute(self, solution: DistributedVector, lame_lambda: float,
                shear_modulus: float, boundary_id: int) -> np.ndarray:
        """
        Boundary load vector.

        Collective over ``communicator``.

        Args:
            solution: distributed solution vector
            lame_lambda: first Lamé parameter λ
            shear_modulus: shear modulus μ
            boundary_id: boundary id of the loaded faces

        Returns:
            load: shape (dim,), identical on every rank
        """
        mesh = self.dof_handler.mesh
        partition = self.dof_handler.partition
        dim = mesh.dim

        # degree + 1 points; fewer would under-integrate higher-order bases
        quadrature = QGauss1D(self.dof_handler.fe.degree + 1)
        fe_face = FaceValues(self.dof_handler, quadrature,
                             UpdateFlags.GRADIENTS | UpdateFlags.NORMAL_VECTORS |
                             UpdateFlags.QUADRATURE_POINTS | UpdateFlags.JXW_VALUES)
        displacement = displacement_field(dim)

        relevant_solution = solution.relevant_copy(self.dof_handler.locally_relevant_dofs)

        local_load = np.zeros(dim)
        n_faces = 0
        for cell, face in partition.owned_cell_faces(boundary_face(boundary_id)):
            fe_face.reinit(cell, face)
            strains = fe_face[displacement].symmetric_gradients(relevant_solution)
            stresses = isotropic_stress(strains, lame_lambda, shear_modulus)

            for q in range(fe_face.n_quadrature_points):
                local_load += stresses[q] @ fe_face.normal_vector(q) * fe_face.JxW(q)
            n_faces += 1

        boundary_load = self.communicator.sum(local_load)

        level = logging.INFO if self.config.verbose else logging.DEBUG
        logger.log(level, "rank %d: boundary %d, %d local faces, load %s",
                   self.communicator.rank, boundary_id, n_faces, boundary_load)
        return boundary_load
