"""
Triangle Mesh with Face Connectivity
====================================

Replicated 2D triangle mesh used by the distributed postprocessing layer.
Every worker holds the full mesh; ownership is layered on top of it by
:class:`pfpost.mesh.partition.MeshPartition`.
"""

import numpy as np
from typing import List, Tuple

# Boundary id carried by faces that are not on the domain boundary
INTERIOR_FACE_ID = -1


class TriangleMesh:
    """
    Triangle mesh with face (edge) connectivity and boundary tags.

    In 2D the faces of a cell are its edges, so the mesh stores a list of
    unique edges together with the cells adjacent to each of them. Faces on
    the domain boundary carry an integer boundary id (0 unless retagged),
    interior faces carry ``INTERIOR_FACE_ID``.

    Attributes:
        nodes: np.ndarray, shape (n_nodes, 2)
            Vertex coordinates
        elements: np.ndarray, shape (n_elements, 3)
            Vertex indices for each cell
        edges: np.ndarray, shape (n_edges, 2)
            Vertex indices for each unique face
        element_to_edges: np.ndarray, shape (n_elements, 3)
            Face indices for each cell [face_opp_node0, face_opp_node1, face_opp_node2]
        edge_to_elements: list of lists
            Cells containing each face (1 or 2 cells)
        boundary_edges: np.ndarray
            Indices of faces on the boundary
        boundary_ids: np.ndarray, shape (n_edges,)
            Boundary id of each face

    Face Convention:
        For a cell with vertices (n0, n1, n2):
        - Face 0: connects n1-n2 (opposite to n0)
        - Face 1: connects n2-n0 (opposite to n1)
        - Face 2: connects n0-n1 (opposite to n2)
    """

    dim = 2
    faces_per_cell = 3
    vertices_per_cell = 3
    local_face_nodes = ((1, 2), (2, 0), (0, 1))

    def __init__(self, nodes: np.ndarray, elements: np.ndarray):
        """
        Initialize mesh and compute all connectivity.

        Args:
            nodes: shape (n_nodes, 2), vertex coordinates
            elements: shape (n_elements, 3), vertex indices for each cell
        """
        self.nodes = np.asarray(nodes, dtype=np.float64)
        self.elements = np.asarray(elements, dtype=np.int64)

        if self.nodes.ndim != 2 or self.nodes.shape[1] != 2:
            raise ValueError("nodes must have shape (n_nodes, 2)")
        if self.elements.ndim != 2 or self.elements.shape[1] != 3:
            raise ValueError("elements must have shape (n_elements, 3)")
        if self.elements.size and (self.elements.min() < 0 or
                                   self.elements.max() >= self.n_nodes):
            raise ValueError("elements reference vertices outside the node list")

        self._build_edge_connectivity()
        self._identify_boundary()
        self._build_node_connectivity()

    @property
    def n_nodes(self) -> int:
        """Number of vertices in the mesh."""
        return len(self.nodes)

    @property
    def n_elements(self) -> int:
        """Number of cells in the mesh."""
        return len(self.elements)

    @property
    def n_edges(self) -> int:
        """Number of unique faces in the mesh."""
        return len(self.edges)

    def _build_edge_connectivity(self) -> None:
        """
        Create face list and cell-face mappings.

        Uses canonical ordering (smaller vertex index first) to avoid duplicates.
        """
        edge_dict = {}
        edges_list = []
        element_to_edges = np.zeros((self.n_elements, 3), dtype=np.int64)
        edge_to_elements = []

        for elem_idx, elem_nodes in enumerate(self.elements):
            for local_edge, (i, j) in enumerate(self.local_face_nodes):
                n1, n2 = int(elem_nodes[i]), int(elem_nodes[j])
                edge_key = (min(n1, n2), max(n1, n2))

                if edge_key not in edge_dict:
                    edge_dict[edge_key] = len(edges_list)
                    edges_list.append(edge_key)
                    edge_to_elements.append([elem_idx])
                else:
                    edge_to_elements[edge_dict[edge_key]].append(elem_idx)

                element_to_edges[elem_idx, local_edge] = edge_dict[edge_key]

        self.edges = np.array(edges_list, dtype=np.int64).reshape(-1, 2)
        self.element_to_edges = element_to_edges
        self.edge_to_elements = edge_to_elements

    def _identify_boundary(self) -> None:
        """
        Find boundary faces and tag them with the default id 0.

        A face is on the boundary if it belongs to exactly one cell.
        """
        boundary_edge_mask = np.array([len(elems) == 1
                                       for elems in self.edge_to_elements],
                                      dtype=bool)
        self.boundary_edges = np.where(boundary_edge_mask)[0]
        self.boundary_ids = np.full(self.n_edges, INTERIOR_FACE_ID, dtype=np.int64)
        self.boundary_ids[self.boundary_edges] = 0

        self.boundary_nodes = np.unique(self.edges[self.boundary_edges])

    def _build_node_connectivity(self) -> None:
        """Cells adjacent to each vertex."""
        node_to_elements = [[] for _ in range(self.n_nodes)]
        for elem_idx, elem_nodes in enumerate(self.elements):
            for n in elem_nodes:
                node_to_elements[n].append(elem_idx)
        self.node_to_elements = node_to_elements

    def set_boundary_id(self, region_func, boundary_id: int) -> np.ndarray:
        """
        Tag boundary faces whose midpoints satisfy a condition.

        Args:
            region_func: function(x, y) -> bool
            boundary_id: non-negative id assigned to the matching faces

        Returns:
            edge_indices: indices of the retagged faces
        """
        if boundary_id < 0:
            raise ValueError(f"boundary_id must be non-negative, got {boundary_id}")

        midpoints = self.compute_edge_midpoints()
        tagged = [e for e in self.boundary_edges if region_func(*midpoints[e])]
        tagged = np.array(tagged, dtype=np.int64)
        self.boundary_ids[tagged] = boundary_id
        return tagged

    def get_boundary_ids(self) -> List[int]:
        """Sorted list of the boundary ids in use."""
        return sorted(set(int(b) for b in self.boundary_ids[self.boundary_edges]))

    def face_index(self, cell: int, face: int) -> int:
        """Global face index of local face ``face`` of ``cell``."""
        return int(self.element_to_edges[cell, face])

    def face_at_boundary(self, cell: int, face: int) -> bool:
        """Check if a local face of a cell lies on the domain boundary."""
        return len(self.edge_to_elements[self.face_index(cell, face)]) == 1

    def face_boundary_id(self, cell: int, face: int) -> int:
        """Boundary id of a local face (``INTERIOR_FACE_ID`` if interior)."""
        return int(self.boundary_ids[self.face_index(cell, face)])

    def compute_element_areas(self) -> np.ndarray:
        """
        Compute area of all cells.

        Uses the cross product formula:
        A = 0.5 * |det([x1-x0, y1-y0; x2-x0, y2-y0])|

        Returns:
            areas: shape (n_elements,)
        """
        X = self.nodes[self.elements]
        return 0.5 * np.abs(
            (X[:, 1, 0] - X[:, 0, 0]) * (X[:, 2, 1] - X[:, 0, 1]) -
            (X[:, 2, 0] - X[:, 0, 0]) * (X[:, 1, 1] - X[:, 0, 1])
        )

    def compute_edge_lengths(self) -> np.ndarray:
        """
        Compute length of all faces.

        Returns:
            lengths: shape (n_edges,)
        """
        return np.linalg.norm(self.nodes[self.edges[:, 1]] -
                              self.nodes[self.edges[:, 0]], axis=1)

    def compute_edge_midpoints(self) -> np.ndarray:
        """
        Compute midpoint of all faces.

        Returns:
            midpoints: shape (n_edges, 2)
        """
        return 0.5 * (self.nodes[self.edges[:, 0]] + self.nodes[self.edges[:, 1]])

    def compute_cell_centroids(self) -> np.ndarray:
        """
        Compute centroid of all cells.

        Returns:
            centroids: shape (n_elements, 2)
        """
        return self.nodes[self.elements].mean(axis=1)

    def get_element_nodes(self, elem_idx: int) -> np.ndarray:
        """
        Return coordinates of cell vertices.

        Args:
            elem_idx: cell index

        Returns:
            coordinates: shape (3, 2)
        """
        return self.nodes[self.elements[elem_idx]]

    def get_face_nodes(self, cell: int, face: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Return coordinates of the two endpoints of a local face.

        The endpoints follow the cell's local numbering, not the canonical
        global face ordering.
        """
        i, j = self.local_face_nodes[face]
        X = self.get_element_nodes(cell)
        return X[i], X[j]

    def get_nodes_in_region(self, region_func) -> np.ndarray:
        """
        Get indices of vertices satisfying a condition.

        Args:
            region_func: function(x, y) -> bool

        Returns:
            node_indices: array of vertex indices
        """
        indices = [i for i, (x, y) in enumerate(self.nodes) if region_func(x, y)]
        return np.array(indices, dtype=np.int64)
