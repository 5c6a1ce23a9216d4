"""
Face Values
===========

Evaluation of solution fields at quadrature points on cell faces.

Usage mirrors the classic "reinit then query" pattern::

    fe_face = FaceValues(dof_handler, QGauss1D(2),
                         UpdateFlags.GRADIENTS | UpdateFlags.NORMAL_VECTORS |
                         UpdateFlags.JXW_VALUES)
    for cell, face in partition.owned_cell_faces(predicate):
        fe_face.reinit(cell, face)
        eps = fe_face[displacement].symmetric_gradients(relevant_solution)
"""

import enum
import numpy as np

from .dof_handler import DoFHandler
from .finite_element import ScalarField, VectorField
from .quadrature import QGauss1D


class UpdateFlags(enum.Flag):
    """Quantities computed on each ``FaceValues.reinit``."""
    VALUES = enum.auto()
    GRADIENTS = enum.auto()
    QUADRATURE_POINTS = enum.auto()
    NORMAL_VECTORS = enum.auto()
    JXW_VALUES = enum.auto()


class FaceValues:
    """
    Shape functions, geometry and field samples on one face at a time.

    Attributes:
        dof_handler: DoFHandler of the field being evaluated
        quadrature: 1D face quadrature rule
        flags: UpdateFlags requested at construction
    """

    def __init__(self, dof_handler: DoFHandler, quadrature: QGauss1D,
                 flags: UpdateFlags):
        self.dof_handler = dof_handler
        self.quadrature = quadrature
        self.flags = flags
        self.cell = None
        self.face = None

    @property
    def n_quadrature_points(self) -> int:
        return self.quadrature.n_points

    def reinit(self, cell: int, face: int) -> None:
        """
        Recompute everything requested for local face ``face`` of ``cell``.

        Args:
            cell: global cell index
            face: local face index 0..2
        """
        mesh = self.dof_handler.mesh
        fe = self.dof_handler.fe
        X = mesh.get_element_nodes(cell)
        a, b = mesh.get_face_nodes(cell, face)
        s = self.quadrature.points
        tangent = b - a
        length = np.linalg.norm(tangent)

        self.cell, self.face = cell, face
        self._dof_indices = self.dof_handler.cell_dof_indices(cell)

        # Shape values follow the face parametrization x(s) = a + s (b - a)
        i, j = mesh.local_face_nodes[face]
        barycentric = np.zeros((len(s), 3))
        barycentric[:, i] = 1.0 - s
        barycentric[:, j] = s
        self._shape_values = fe.shape_values(barycentric)

        self._quadrature_points = a + s[:, None] * tangent[None, :]
        self._jxw = self.quadrature.weights * length

        if self.flags & UpdateFlags.GRADIENTS:
            self._shape_gradients = fe.shape_gradients(X)

        if self.flags & UpdateFlags.NORMAL_VECTORS:
            normal = np.array([tangent[1], -tangent[0]]) / length
            opposite = X[face]
            if np.dot(normal, opposite - a) > 0:
                normal = -normal
            self._normal = normal

    def _require(self, flag: UpdateFlags) -> None:
        if not self.flags & flag:
            raise RuntimeError(f"FaceValues was not constructed with {flag}")
        if self.cell is None:
            raise RuntimeError("FaceValues.reinit must be called first")

    @property
    def quadrature_points(self) -> np.ndarray:
        """Physical quadrature point coordinates, shape (n_q, 2)."""
        self._require(UpdateFlags.QUADRATURE_POINTS)
        return self._quadrature_points

    def quadrature_point(self, q: int) -> np.ndarray:
        return self.quadrature_points[q]

    @property
    def JxW_values(self) -> np.ndarray:
        """Quadrature weights times face length, shape (n_q,)."""
        self._require(UpdateFlags.JXW_VALUES)
        return self._jxw

    def JxW(self, q: int) -> float:
        return float(self.JxW_values[q])

    def normal_vector(self, q: int) -> np.ndarray:
        """Outward unit normal (constant over a straight face)."""
        self._require(UpdateFlags.NORMAL_VECTORS)
        return self._normal

    def __getitem__(self, extractor):
        if isinstance(extractor, VectorField):
            return VectorFieldView(self, extractor)
        if isinstance(extractor, ScalarField):
            return ScalarFieldView(self, extractor)
        raise TypeError(f"Unsupported extractor: {extractor!r}")

    def _coefficients(self, solution, components) -> np.ndarray:
        """Local coefficients, shape (3, len(components))."""
        n_components = self.dof_handler.n_components
        if max(components) >= n_components or min(components) < 0:
            raise ValueError(
                f"extractor components {components} outside [0, {n_components})")
        return solution.gather(self._dof_indices[:, list(components)])


class VectorFieldView:
    """Vector-field samples on the current face."""

    def __init__(self, fe_values: FaceValues, extractor: VectorField):
        self.fe_values = fe_values
        self.extractor = extractor

    def values(self, solution) -> np.ndarray:
        """Shape (n_q, dim)."""
        self.fe_values._require(UpdateFlags.VALUES)
        U = self.fe_values._coefficients(solution, self.extractor.components)
        return self.fe_values._shape_values @ U

    def gradients(self, solution) -> np.ndarray:
        """Shape (n_q, dim, dim), entry [q, i, j] = d u_i / d x_j."""
        self.fe_values._require(UpdateFlags.GRADIENTS)
        U = self.fe_values._coefficients(solution, self.extractor.components)
        grad = U.T @ self.fe_values._shape_gradients
        return np.broadcast_to(grad, (self.fe_values.n_quadrature_points,) + grad.shape).copy()

    def symmetric_gradients(self, solution) -> np.ndarray:
        """Shape (n_q, dim, dim), the small strain tensor for displacements."""
        grad = self.gradients(solution)
        return 0.5 * (grad + np.swapaxes(grad, 1, 2))


class ScalarFieldView:
    """Scalar-field samples on the current face."""

    def __init__(self, fe_values: FaceValues, extractor: ScalarField):
        self.fe_values = fe_values
        self.extractor = extractor

    def values(self, solution) -> np.ndarray:
        """Shape (n_q,)."""
        self.fe_values._require(UpdateFlags.VALUES)
        c = self.fe_values._coefficients(solution, self.extractor.components)
        return (self.fe_values._shape_values @ c)[:, 0]

    def gradients(self, solution) -> np.ndarray:
        """Shape (n_q, dim)."""
        self.fe_values._require(UpdateFlags.GRADIENTS)
        c = self.fe_values._coefficients(solution, self.extractor.components)
        grad = c[:, 0] @ self.fe_values._shape_gradients
        return np.tile(grad, (self.fe_values.n_quadrature_points, 1))
