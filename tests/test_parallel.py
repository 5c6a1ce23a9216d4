"""
Tests for Parallel Module
=========================
"""

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pfpost.parallel.communicator import SerialCommunicator, MPICommunicator
from pfpost.parallel.distributed_vector import DistributedVector, GhostedVector
from pfpost.mesh.mesh_generators import create_square_mesh
from pfpost.mesh.partition import partition_cells
from spmd_utils import run_spmd, make_dof_handler, distribute


class TestSerialCommunicator:
    """Tests for the single-worker group."""

    def test_scalar(self):
        comm = SerialCommunicator()
        assert comm.rank == 0 and comm.size == 1
        assert comm.sum(2.5) == 2.5
        assert isinstance(comm.min(1), float)

    def test_array_is_copied(self):
        comm = SerialCommunicator()
        value = np.array([1.0, 2.0])
        result = comm.sum(value)
        result[0] = 10.0
        assert value[0] == 1.0


class TestThreadGroup:
    """Sanity checks for the in-process harness used by the other tests."""

    def test_sum_and_min(self):
        def body(comm):
            return comm.sum(np.array([comm.rank, 1.0])), comm.min(float(comm.rank + 3))

        results = run_spmd(4, body)
        for total, smallest in results:
            assert np.allclose(total, [6.0, 4.0])
            assert smallest == 3.0

    def test_error_propagates(self):
        def body(comm):
            if comm.rank == 1:
                raise ValueError("boom")
            return comm.sum(1.0)

        with pytest.raises(ValueError):
            run_spmd(3, body)


class TestMPICommunicator:
    """Reductions through mpi4py on a one-process communicator."""

    def test_comm_self(self):
        MPI = pytest.importorskip("mpi4py.MPI")
        comm = MPICommunicator(MPI.COMM_SELF)

        assert comm.size == 1
        assert comm.sum(3.0) == 3.0
        assert np.allclose(comm.min(np.array([[1.0, -2.0]])), [[1.0, -2.0]])


class TestDistributedVector:
    """Tests for DistributedVector and GhostedVector."""

    def test_owned_access(self):
        vec = DistributedVector.from_global(np.arange(6.0), [1, 4], SerialCommunicator())

        assert vec[4] == 4.0
        vec[1] = 7.0
        assert vec[1] == 7.0
        with pytest.raises(IndexError):
            vec[2]

    def test_invalid_indices(self):
        with pytest.raises(ValueError):
            DistributedVector(4, [0, 5], SerialCommunicator())

    def test_ghosted_gather(self):
        ghosted = GhostedVector(np.array([2, 5, 9]), np.array([20.0, 50.0, 90.0]))

        assert np.array_equal(ghosted.gather(np.array([[9, 2], [5, 5]])),
                              [[90.0, 20.0], [50.0, 50.0]])
        assert 5 in ghosted and 3 not in ghosted
        with pytest.raises(IndexError):
            ghosted.gather([3])
        with pytest.raises(IndexError):
            ghosted[10]

    def test_relevant_copy_matches_global(self):
        """Ghost exchange reproduces the replicated vector exactly."""
        mesh = create_square_mesh(1.0, 5)
        owners = partition_cells(mesh, 3, method='rcb')
        rng = np.random.default_rng(0)
        global_values = rng.normal(size=3 * mesh.n_nodes)

        def body(comm):
            dof_handler = make_dof_handler(mesh, owners, comm.rank)
            solution = distribute(dof_handler, global_values, comm)
            relevant = solution.relevant_copy(dof_handler.locally_relevant_dofs)
            idx = dof_handler.locally_relevant_dofs
            return np.array_equal(relevant.gather(idx), global_values[idx])

        assert all(run_spmd(3, body))

    def test_relevant_copy_hides_far_entries(self):
        mesh = create_square_mesh(1.0, 4)
        owners = partition_cells(mesh, 4, method='strips')
        values = np.arange(3.0 * mesh.n_nodes)

        def body(comm):
            dof_handler = make_dof_handler(mesh, owners, comm.rank)
            relevant = distribute(dof_handler, values, comm).relevant_copy(
                dof_handler.locally_relevant_dofs)
            hidden = np.setdiff1d(np.arange(dof_handler.n_dofs),
                                  dof_handler.locally_relevant_dofs)
            return len(hidden) > 0 and not any(i in relevant for i in hidden)

        assert all(run_spmd(4, body))
