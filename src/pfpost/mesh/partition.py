"""
Mesh Partitioning
=================

Ownership of a replicated mesh across workers, and the face iteration
contract used by the postprocessing algorithms.

Every worker holds the same :class:`TriangleMesh` and a ``cell_owners``
array. A :class:`MeshPartition` is the view of one rank: the cells it owns,
the ghost layer it can read field values from, and everything else, which
is artificial for that rank.
"""

import numpy as np
from typing import Callable, Iterator, Optional, Tuple

from .triangle_mesh import TriangleMesh

FacePredicate = Callable[[TriangleMesh, int, int], bool]


def any_face(mesh: TriangleMesh, cell: int, face: int) -> bool:
    """Accept every face of a cell, interior faces included."""
    return True


def boundary_face(boundary_id: int) -> FacePredicate:
    """
    Predicate for faces at the domain boundary carrying ``boundary_id``.

    Args:
        boundary_id: boundary id to match

    Returns:
        predicate(mesh, cell, face) -> bool
    """
    def predicate(mesh: TriangleMesh, cell: int, face: int) -> bool:
        return (mesh.face_at_boundary(cell, face) and
                mesh.face_boundary_id(cell, face) == boundary_id)
    return predicate


class FaceRange:
    """
    Lazy, restartable sequence of ``(cell, face)`` pairs.

    Iterates the locally owned cells of a partition in ascending order and,
    for each, the local faces 0..2 accepted by the predicate. Each call to
    ``iter()`` starts a fresh pass.
    """

    def __init__(self, partition: 'MeshPartition',
                 predicate: Optional[FacePredicate] = None):
        self.partition = partition
        self.predicate = predicate or any_face

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        mesh = self.partition.mesh
        for cell in self.partition.locally_owned_cells:
            cell = int(cell)
            for face in range(mesh.faces_per_cell):
                if self.predicate(mesh, cell, face):
                    yield cell, face

    def count(self) -> int:
        """Number of pairs in one pass (consumes a pass)."""
        return sum(1 for _ in self)


class MeshPartition:
    """
    One rank's view of a distributed mesh.

    Attributes:
        mesh: replicated TriangleMesh
        cell_owners: shape (n_elements,), owning rank of each cell
        rank: this worker's rank
        n_ranks: number of ranks in the partitioning
        vertex_owners: shape (n_nodes,), owning rank of each vertex
        locally_owned_cells: cells owned by this rank
        ghost_cells: cells not owned here sharing a vertex with an owned cell
    """

    def __init__(self, mesh: TriangleMesh, cell_owners: np.ndarray, rank: int,
                 vertex_owners: Optional[np.ndarray] = None):
        """
        Initialize the view of ``rank``.

        Args:
            mesh: replicated mesh
            cell_owners: shape (n_elements,), owner rank of each cell
            rank: this worker's rank
            vertex_owners: shape (n_nodes,), optional override of the vertex
                owners. Each vertex must be owned by a rank that owns one of
                its adjacent cells. Default: lowest adjacent owner rank.
        """
        self.mesh = mesh
        self.cell_owners = np.asarray(cell_owners, dtype=np.int64)
        self.rank = int(rank)

        if self.cell_owners.shape != (mesh.n_elements,):
            raise ValueError(
                f"cell_owners must have shape ({mesh.n_elements},), "
                f"got {self.cell_owners.shape}")
        if self.cell_owners.size and self.cell_owners.min() < 0:
            raise ValueError("cell_owners must be non-negative ranks")

        self.n_ranks = int(self.cell_owners.max()) + 1 if self.cell_owners.size else 1
        if self.rank < 0:
            raise ValueError(f"rank must be non-negative, got {rank}")

        self._owned_mask = self.cell_owners == self.rank
        self.locally_owned_cells = np.where(self._owned_mask)[0]

        owned_vertices = np.unique(mesh.elements[self.locally_owned_cells])
        touches_owned = np.isin(mesh.elements, owned_vertices).any(axis=1)
        self._ghost_mask = touches_owned & ~self._owned_mask
        self.ghost_cells = np.where(self._ghost_mask)[0]

        self.vertex_owners = self._resolve_vertex_owners(vertex_owners)

    def _resolve_vertex_owners(self, vertex_owners: Optional[np.ndarray]) -> np.ndarray:
        """Lowest adjacent owner rank per vertex, or a validated override."""
        mesh = self.mesh
        lowest = np.full(mesh.n_nodes, np.iinfo(np.int64).max, dtype=np.int64)
        np.minimum.at(lowest, mesh.elements.ravel(),
                      np.repeat(self.cell_owners, mesh.vertices_per_cell))
        # Vertices outside every cell are assigned to rank 0
        lowest[lowest == np.iinfo(np.int64).max] = 0

        if vertex_owners is None:
            return lowest

        vertex_owners = np.asarray(vertex_owners, dtype=np.int64)
        if vertex_owners.shape != (mesh.n_nodes,):
            raise ValueError(
                f"vertex_owners must have shape ({mesh.n_nodes},), "
                f"got {vertex_owners.shape}")
        for v, cells in enumerate(mesh.node_to_elements):
            if cells and vertex_owners[v] not in self.cell_owners[cells]:
                raise ValueError(
                    f"vertex {v} assigned to rank {vertex_owners[v]}, "
                    f"which owns none of its cells")
        return vertex_owners

    def is_locally_owned(self, cell: int) -> bool:
        return bool(self._owned_mask[cell])

    def is_ghost(self, cell: int) -> bool:
        return bool(self._ghost_mask[cell])

    def is_artificial(self, cell: int) -> bool:
        """Neither owned nor ghost on this rank."""
        return not (self._owned_mask[cell] or self._ghost_mask[cell])

    @property
    def relevant_cells(self) -> np.ndarray:
        """Owned and ghost cells, ascending."""
        return np.where(self._owned_mask | self._ghost_mask)[0]

    @property
    def owned_vertices(self) -> np.ndarray:
        """Vertices owned by this rank."""
        return np.where(self.vertex_owners == self.rank)[0]

    @property
    def relevant_vertices(self) -> np.ndarray:
        """Vertices of owned and ghost cells."""
        return np.unique(self.mesh.elements[self.relevant_cells])

    def owned_cell_faces(self, predicate: Optional[FacePredicate] = None) -> FaceRange:
        """
        Faces of locally owned cells accepted by ``predicate``.

        Args:
            predicate: function(mesh, cell, face) -> bool, default any_face

        Returns:
            FaceRange over (cell, face) pairs
        """
        return FaceRange(self, predicate)


def partition_cells(mesh: TriangleMesh, n_parts: int,
                    method: str = 'strips') -> np.ndarray:
    """
    Assign each cell to one of ``n_parts`` ranks by cell centroid.

    Args:
        mesh: mesh to partition
        n_parts: number of ranks
        method: 'strips' slices along the longest bounding-box axis into
            equally sized groups; 'rcb' uses recursive coordinate bisection

    Returns:
        cell_owners: shape (n_elements,)
    """
    if n_parts < 1:
        raise ValueError(f"n_parts must be positive, got {n_parts}")

    centroids = mesh.compute_cell_centroids()
    owners = np.zeros(mesh.n_elements, dtype=np.int64)

    if method == 'strips':
        extent = np.ptp(centroids, axis=0) if len(centroids) else np.zeros(2)
        axis = int(np.argmax(extent))
        order = np.lexsort((centroids[:, 1 - axis], centroids[:, axis]))
        for part, chunk in enumerate(np.array_split(order, n_parts)):
            owners[chunk] = part
    elif method == 'rcb':
        _bisect(centroids, np.arange(mesh.n_elements), 0, n_parts, owners)
    else:
        raise ValueError(f"Unknown partition method: {method}")

    return owners


def _bisect(centroids: np.ndarray, cells: np.ndarray, first_part: int,
            n_parts: int, owners: np.ndarray) -> None:
    """Split ``cells`` into ``n_parts`` groups along alternating longest axes."""
    if n_parts == 1 or len(cells) == 0:
        owners[cells] = first_part
        return

    pts = centroids[cells]
    axis = int(np.argmax(np.ptp(pts, axis=0)))
    order = cells[np.lexsort((pts[:, 1 - axis], pts[:, axis]))]

    n_left = n_parts // 2
    split = len(order) * n_left // n_parts
    _bisect(centroids, order[:split], first_part, n_left, owners)
    _bisect(centroids, order[split:], first_part + n_left, n_parts - n_left, owners)
