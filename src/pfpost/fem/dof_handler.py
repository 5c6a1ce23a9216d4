"""
Degree-of-Freedom Handler
=========================

Maps (vertex, component) pairs of a partitioned mesh to global indices.
"""

import numpy as np
from typing import Callable

from ..mesh.partition import MeshPartition
from .finite_element import LinearTriangle


class DoFHandler:
    """
    Vertex-based DoF numbering for a vector-valued P1 element.

    Global index of component ``c`` at vertex ``v`` is
    ``v * n_components + c`` (interleaved, as ``2*n + 1`` addresses the
    y-displacement of vertex ``n``). Since every vertex carries exactly one
    DoF per component, fields are continuous across cells and partitions.

    Attributes:
        partition: MeshPartition of this rank
        fe: finite element
        n_dofs: global number of DoFs
    """

    def __init__(self, partition: MeshPartition, fe: LinearTriangle):
        self.partition = partition
        self.fe = fe
        self.n_dofs = partition.mesh.n_nodes * fe.n_components

    @property
    def mesh(self):
        return self.partition.mesh

    @property
    def n_components(self) -> int:
        return self.fe.n_components

    def vertex_dof_index(self, vertex: int, component: int) -> int:
        """Global index of ``component`` at ``vertex``."""
        if not 0 <= component < self.n_components:
            raise ValueError(
                f"component must be in [0, {self.n_components}), got {component}")
        return int(vertex) * self.n_components + component

    def cell_dof_indices(self, cell: int) -> np.ndarray:
        """
        Global DoF indices of a cell.

        Returns:
            indices: shape (3, n_components), row i for local vertex i
        """
        vertices = self.mesh.elements[cell]
        return (vertices[:, None] * self.n_components +
                np.arange(self.n_components)[None, :])

    def _vertex_dofs(self, vertices: np.ndarray) -> np.ndarray:
        return (np.asarray(vertices, dtype=np.int64)[:, None] * self.n_components +
                np.arange(self.n_components)[None, :]).ravel()

    @property
    def locally_owned_dofs(self) -> np.ndarray:
        """DoFs on vertices owned by this rank, ascending."""
        return self._vertex_dofs(self.partition.owned_vertices)

    @property
    def locally_relevant_dofs(self) -> np.ndarray:
        """DoFs on vertices of owned and ghost cells, ascending."""
        return self._vertex_dofs(self.partition.relevant_vertices)

    def interpolate(self, func: Callable[[float, float], np.ndarray]) -> np.ndarray:
        """
        Nodal interpolation of a function into a global coefficient array.

        Args:
            func: function(x, y) -> array of n_components values

        Returns:
            values: shape (n_dofs,)
        """
        values = np.zeros((self.mesh.n_nodes, self.n_components))
        for v, (x, y) in enumerate(self.mesh.nodes):
            values[v] = func(x, y)
        return values.ravel()
