"""
Crack Opening Displacement
==========================

COD profile along transect lines, from the displacement and the gradient of
the phase field.

The phase-field gradient behaves like a regularized Dirac delta centered on
the diffuse crack, so ``0.5 * u · ∇φ`` integrated over faces lying on a
transect localizes onto the crack without an explicit crack surface.

Face visiting: every face of every owned cell is integrated, interior faces
included. An interior face is therefore visited once from each adjacent
cell, and with the 0.5 factor it contributes the average of its two
one-sided traces of ∇φ (which is discontinuous across faces for a P1
phase field). Boundary faces are visited once and contribute half.
"""

import logging
import numpy as np
from typing import Optional, Sequence

from ..fem.dof_handler import DoFHandler
from ..fem.fe_values import FaceValues, UpdateFlags
from ..fem.finite_element import displacement_field, phase_field
from ..fem.quadrature import QGauss1D
from ..parallel.communicator import Communicator
from ..parallel.distributed_vector import DistributedVector
from .config import PostprocessConfig

logger = logging.getLogger(__name__)


class CrackOpeningProfileSampler:
    """
    Samples crack opening along lines perpendicular to an axis.

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

    def compute(self, solution: DistributedVector, lines: Sequence[float],
                direction: int, space_tol: Optional[float] = None) -> np.ndarray:
        """
        COD value for each line.

        Line ``k`` collects the face quadrature points whose coordinate
        along axis ``1 - direction`` lies strictly within ``space_tol`` of
        ``lines[k]``.

        Collective over ``communicator``.

        Args:
            solution: distributed solution vector
            lines: line coordinates along axis ``1 - direction``
            direction: axis index the lines run along, 0 or 1
            space_tol: matching tolerance (default ``config.space_tol``)

        Returns:
            cod: shape (len(lines),), identical on every rank

        Raises:
            ValueError: if ``direction`` is not an axis of the mesh
        """
        mesh = self.dof_handler.mesh
        dim = mesh.dim
        if not 0 <= direction < dim:
            raise ValueError(f"direction must be in [0, {dim}), got {direction}")
        if space_tol is None:
            space_tol = self.config.space_tol

        lines = np.asarray(lines, dtype=np.float64).reshape(-1)
        axis = 1 - direction

        quadrature = QGauss1D(self.config.cod_quadrature_points)
        fe_face = FaceValues(self.dof_handler, quadrature,
                             UpdateFlags.VALUES | UpdateFlags.GRADIENTS |
                             UpdateFlags.QUADRATURE_POINTS | UpdateFlags.JXW_VALUES)
        displacement = displacement_field(dim)
        phi = phase_field(dim)

        relevant_solution = solution.relevant_copy(self.dof_handler.locally_relevant_dofs)

        cod = np.zeros(len(lines))
        n_hits = 0
        for cell, face in self.dof_handler.partition.owned_cell_faces():
            fe_face.reinit(cell, face)
            coords = fe_face.quadrature_points[:, axis]
            near = ((coords[:, None] > lines[None, :] - space_tol) &
                    (coords[:, None] < lines[None, :] + space_tol))
            if not near.any():
                continue

            u_values = fe_face[displacement].values(relevant_solution)
            grad_phi_values = fe_face[phi].gradients(relevant_solution)
            integrand = 0.5 * np.einsum('qi,qi->q', u_values, grad_phi_values)
            cod += (integrand * fe_face.JxW_values) @ near
            n_hits += int(near.sum())

        cod = self.communicator.sum(cod)

        level = logging.INFO if self.config.verbose else logging.DEBUG
        logger.log(level, "rank %d: %d lines, %d local quadrature hits",
                   self.communicator.rank, len(lines), n_hits)
        return cod
