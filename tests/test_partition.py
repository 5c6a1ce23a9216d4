"""
Tests for Mesh Partitioning
===========================
"""

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pfpost.mesh.mesh_generators import (
    create_square_mesh, create_two_element_patch, RIGHT
)
from pfpost.mesh.partition import (
    MeshPartition, partition_cells, boundary_face, any_face
)


class TestPartitionCells:
    """Tests for the partitioners."""

    @pytest.mark.parametrize("method", ['strips', 'rcb'])
    @pytest.mark.parametrize("n_parts", [1, 2, 3, 4, 7])
    def test_every_cell_assigned(self, method, n_parts):
        mesh = create_square_mesh(1.0, 6)
        owners = partition_cells(mesh, n_parts, method=method)

        assert owners.shape == (mesh.n_elements,)
        assert set(owners) == set(range(n_parts))

    def test_strips_balanced(self):
        mesh = create_square_mesh(1.0, 6)
        owners = partition_cells(mesh, 4, method='strips')
        counts = np.bincount(owners)
        assert counts.max() - counts.min() <= 1

    def test_strips_are_contiguous(self):
        """Strips along x do not interleave."""
        mesh = create_square_mesh(1.0, 4)
        owners = partition_cells(mesh, 2, method='strips')
        centroids = mesh.compute_cell_centroids()
        assert centroids[owners == 0].max(axis=0)[1] <= centroids[owners == 1].min(axis=0)[1] or \
            centroids[owners == 0].max(axis=0)[0] <= centroids[owners == 1].min(axis=0)[0]

    def test_invalid_arguments(self):
        mesh = create_square_mesh(1.0, 2)
        with pytest.raises(ValueError):
            partition_cells(mesh, 0)
        with pytest.raises(ValueError):
            partition_cells(mesh, 2, method='metis')


class TestMeshPartition:
    """Tests for MeshPartition."""

    @pytest.fixture
    def mesh(self):
        return create_square_mesh(1.0, 4)

    def test_owned_cells_disjoint_and_complete(self, mesh):
        owners = partition_cells(mesh, 3, method='rcb')
        parts = [MeshPartition(mesh, owners, r) for r in range(3)]

        all_owned = np.concatenate([p.locally_owned_cells for p in parts])
        assert len(all_owned) == mesh.n_elements
        assert len(np.unique(all_owned)) == mesh.n_elements

    def test_ghost_layer(self):
        """On the two-cell patch each rank sees the other cell as ghost."""
        mesh = create_two_element_patch()
        owners = np.array([0, 1])
        p0 = MeshPartition(mesh, owners, 0)

        assert p0.is_locally_owned(0)
        assert p0.is_ghost(1)
        assert not p0.is_artificial(1)
        assert list(p0.relevant_cells) == [0, 1]

    def test_artificial_cells(self, mesh):
        owners = partition_cells(mesh, 4, method='strips')
        partition = MeshPartition(mesh, owners, 0)

        # Rank 0 holds one strip; the far strips are not adjacent
        artificial = [c for c in range(mesh.n_elements) if partition.is_artificial(c)]
        assert len(artificial) > 0
        for c in artificial:
            shared = np.intersect1d(mesh.elements[c],
                                    mesh.elements[partition.locally_owned_cells])
            assert len(shared) == 0

    def test_vertex_owners_default_lowest(self, mesh):
        owners = partition_cells(mesh, 2, method='strips')
        partition = MeshPartition(mesh, owners, 1)

        for v, cells in enumerate(mesh.node_to_elements):
            assert partition.vertex_owners[v] == owners[cells].min()

    def test_owned_vertices_partition_all(self, mesh):
        owners = partition_cells(mesh, 3, method='rcb')
        parts = [MeshPartition(mesh, owners, r) for r in range(3)]

        owned = np.concatenate([p.owned_vertices for p in parts])
        assert np.array_equal(np.sort(owned), np.arange(mesh.n_nodes))
        for p in parts:
            assert np.all(np.isin(p.owned_vertices, p.relevant_vertices))

    def test_vertex_owner_override(self, mesh):
        owners = partition_cells(mesh, 2, method='strips')
        highest = np.array([owners[cells].max() for cells in mesh.node_to_elements])
        partition = MeshPartition(mesh, owners, 0, vertex_owners=highest)
        assert np.array_equal(partition.vertex_owners, highest)

        bad = highest.copy()
        # vertex 0 lies in rank 0's strip only
        bad[0] = 1
        with pytest.raises(ValueError):
            MeshPartition(mesh, owners, 0, vertex_owners=bad)

    def test_invalid_owner_shape(self, mesh):
        with pytest.raises(ValueError):
            MeshPartition(mesh, np.zeros(3), 0)


class TestFaceRange:
    """Tests for the face iteration contract."""

    def test_restartable(self):
        mesh = create_square_mesh(1.0, 2)
        faces = MeshPartition(mesh, np.zeros(mesh.n_elements), 0).owned_cell_faces()

        first = list(faces)
        second = list(faces)
        assert first == second
        assert len(first) == 3 * mesh.n_elements

    def test_boundary_predicate(self):
        mesh = create_square_mesh(1.0, 4)
        faces = MeshPartition(mesh, np.zeros(mesh.n_elements), 0).owned_cell_faces(
            boundary_face(RIGHT))

        pairs = list(faces)
        assert len(pairs) == 4
        for cell, face in pairs:
            a, b = mesh.get_face_nodes(cell, face)
            assert np.isclose(a[0], 1.0) and np.isclose(b[0], 1.0)

    def test_absent_boundary_id(self):
        mesh = create_square_mesh(1.0, 4)
        faces = MeshPartition(mesh, np.zeros(mesh.n_elements), 0).owned_cell_faces(
            boundary_face(42))
        assert faces.count() == 0

    def test_faces_split_across_ranks(self):
        """Every (cell, face) pair is visited by exactly one rank."""
        mesh = create_square_mesh(1.0, 4)
        owners = partition_cells(mesh, 3, method='rcb')

        visited = []
        for r in range(3):
            visited += list(MeshPartition(mesh, owners, r).owned_cell_faces(any_face))
        assert len(visited) == len(set(visited)) == 3 * mesh.n_elements
