"""
Point Values
============

Solution values at the mesh vertices closest to arbitrary query points.
"""

import logging
import numpy as np
from scipy.spatial import cKDTree
from typing import List, Tuple

from ..fem.dof_handler import DoFHandler
from ..parallel.communicator import Communicator
from ..parallel.distributed_vector import DistributedVector

logger = logging.getLogger(__name__)

# Relative slack under which two vertex distances count as a tie
TIE_RTOL = 1e-12


class NearestVertexSampler:
    """
    Samples one component at the globally nearest vertex of each point.

    Two phases. Locally, each rank finds its closest distance among the
    vertices of its owned and ghost cells, and the global minimum distance
    is agreed on. Then every vertex within ``TIE_RTOL`` of that minimum is a
    candidate, on whichever rank sees it, and a minimum reduction over the
    candidates' values hands the result to everyone.

    A point equidistant from several vertices therefore gets the smallest of
    their values, whether the tied vertices share a rank or not. Vertices
    seen by several ranks read the same global DoF, so the result does not
    depend on the partition.

    Attributes:
        dof_handler: DoFHandler of the sampled field
        communicator: group the solution is distributed over
    """

    def __init__(self, dof_handler: DoFHandler, communicator: Communicator):
        self.dof_handler = dof_handler
        self.communicator = communicator

    def _local_tree(self) -> Tuple[np.ndarray, cKDTree]:
        vertices = self.dof_handler.partition.relevant_vertices
        if len(vertices) == 0:
            return vertices, None
        return vertices, cKDTree(self.dof_handler.mesh.nodes[vertices])

    def closest_local_dofs(self, component: int,
                           points: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Nearest non-artificial vertex on this rank for every point.

        Among equidistant vertices the one returned is unspecified; use
        :meth:`tied_local_dofs` to get all of them.

        Args:
            component: solution component
            points: shape (n_points, 2)

        Returns:
            distances: shape (n_points,), +inf if the rank has no vertices
            dof_indices: shape (n_points,), -1 where no vertex was found
        """
        vertices, tree = self._local_tree()

        distances = np.full(len(points), np.inf)
        dof_indices = np.full(len(points), -1, dtype=np.int64)
        if tree is None or len(points) == 0:
            return distances, dof_indices

        distances, nearest = tree.query(points, k=1)
        dof_indices = vertices[nearest] * self.dof_handler.n_components + component
        return np.asarray(distances, dtype=np.float64), dof_indices

    def tied_local_dofs(self, component: int, points: np.ndarray,
                        distances: np.ndarray) -> List[np.ndarray]:
        """
        DoFs of all local vertices within ``distances`` of each point.

        A vertex qualifies when its distance is at most
        ``distances * (1 + TIE_RTOL)``.

        Returns:
            list with one array of global DoF indices per point (possibly
            empty)
        """
        vertices, tree = self._local_tree()
        nodes = self.dof_handler.mesh.nodes
        n_components = self.dof_handler.n_components

        tied = []
        for point, distance in zip(points, distances):
            if tree is None or not np.isfinite(distance):
                tied.append(np.zeros(0, dtype=np.int64))
                continue
            radius = max(distance * (1.0 + TIE_RTOL), np.finfo(np.float64).tiny)
            candidates = vertices[np.asarray(tree.query_ball_point(point, r=radius),
                                             dtype=np.int64)]
            # tie test on explicit distances, independent of the tree layout
            dist = np.linalg.norm(nodes[candidates] - point, axis=1)
            candidates = np.sort(candidates[dist <= radius])
            tied.append(candidates * n_components + component)
        return tied

    def compute(self, solution: DistributedVector, component: int,
                points: np.ndarray) -> np.ndarray:
        """
        Values at the vertices nearest to ``points``.

        Collective over ``communicator``.

        Args:
            solution: distributed solution vector
            component: solution component to sample
            points: shape (n_points, 2), query coordinates

        Returns:
            values: shape (n_points,), identical on every rank

        Raises:
            ValueError: on an invalid component or point array (before any
                collective), or if no rank holds a vertex for some point
        """
        n_components = self.dof_handler.n_components
        if not 0 <= component < n_components:
            raise ValueError(f"component must be in [0, {n_components}), got {component}")
        points = np.asarray(points, dtype=np.float64).reshape(-1, self.dof_handler.mesh.dim)

        relevant_solution = solution.relevant_copy(self.dof_handler.locally_relevant_dofs)

        min_distances, _ = self.closest_local_dofs(component, points)
        global_min_distances = self.communicator.min(min_distances)

        values = np.full(len(points), np.inf)
        n_resolved = 0
        for p, dofs in enumerate(self.tied_local_dofs(component, points,
                                                      global_min_distances)):
            if len(dofs):
                values[p] = relevant_solution.gather(dofs).min()
                n_resolved += 1

        values = self.communicator.min(values)

        logger.debug("rank %d: %d points, %d resolved locally",
                     self.communicator.rank, len(points), n_resolved)

        missing = ~np.isfinite(values)
        if missing.any():
            raise ValueError(
                f"No mesh vertex found for query points {np.where(missing)[0].tolist()}")
        return values
