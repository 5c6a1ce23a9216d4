"""
Tests for Crack Opening Displacement
====================================
"""

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pfpost.mesh.mesh_generators import create_square_mesh, perturb_interior_nodes
from pfpost.mesh.partition import partition_cells
from pfpost.parallel.communicator import SerialCommunicator
from pfpost.postprocess.config import PostprocessConfig
from pfpost.postprocess.crack_opening import CrackOpeningProfileSampler
from spmd_utils import run_spmd, make_dof_handler, distribute


def serial_cod(mesh, func, lines, direction, config=None, **kwargs):
    comm = SerialCommunicator()
    dof_handler = make_dof_handler(mesh, np.zeros(mesh.n_elements, dtype=int), 0)
    values = func if isinstance(func, np.ndarray) else dof_handler.interpolate(func)
    solution = distribute(dof_handler, values, comm)
    sampler = CrackOpeningProfileSampler(dof_handler, comm, config)
    return sampler.compute(solution, lines, direction, **kwargs)


class TestCrackOpening:
    """Serial behaviour on a 4x4 unit square."""

    @pytest.fixture
    def mesh(self):
        return create_square_mesh(1.0, 4)

    def test_interior_line(self, mesh):
        """
        φ = 0.3 - 2y, u = (0, 1): the integrand is -1 on the line y = 0.5.

        Its four faces are interior and each is visited from both sides.
        """
        cod = serial_cod(mesh, lambda x, y: [0.0, 1.0, 0.3 - 2 * y], [0.5], 0)
        assert cod.shape == (1,)
        assert np.isclose(cod[0], -2.0)

    def test_boundary_line(self, mesh):
        """Boundary faces are visited once."""
        cod = serial_cod(mesh, lambda x, y: [0.0, 1.0, 0.3 - 2 * y], [0.0], 0)
        assert np.isclose(cod[0], -1.0)

    def test_orthogonal_displacement(self, mesh):
        cod = serial_cod(mesh, lambda x, y: [1.0, 0.0, 0.3 - 2 * y], [0.5], 0)
        assert np.isclose(cod[0], 0.0)

    def test_vertical_lines(self, mesh):
        """direction = 1 selects lines x = const."""
        cod = serial_cod(mesh, lambda x, y: [1.0, 0.0, -2 * x], [0.5, 1.0], 1)
        assert np.allclose(cod, [-2.0, -1.0])

    def test_several_lines(self, mesh):
        cod = serial_cod(mesh, lambda x, y: [0.0, 1.0, 0.3 - 2 * y],
                         [0.0, 0.5, 0.8], 0)
        assert np.allclose(cod, [-1.0, -2.0, 0.0])

    def test_space_tolerance(self, mesh):
        func = lambda x, y: [0.0, 1.0, 0.3 - 2 * y]
        assert np.isclose(serial_cod(mesh, func, [0.5 + 5e-8], 0)[0], -2.0)
        assert serial_cod(mesh, func, [0.5 + 5e-8], 0, space_tol=1e-9)[0] == 0.0
        config = PostprocessConfig(space_tol=1e-9)
        assert serial_cod(mesh, func, [0.5 + 5e-8], 0, config=config)[0] == 0.0

    def test_empty_lines(self, mesh):
        cod = serial_cod(mesh, lambda x, y: [0.0, 1.0, y], [], 0)
        assert cod.shape == (0,)

    def test_invalid_direction(self, mesh):
        with pytest.raises(ValueError):
            serial_cod(mesh, lambda x, y: [0.0, 0.0, 0.0], [0.5], 2)

    def test_config_validation(self):
        with pytest.raises(ValueError):
            PostprocessConfig(space_tol=0.0)
        with pytest.raises(ValueError):
            PostprocessConfig(cod_quadrature_points=0)


class TestCrackOpeningDistributed:
    """COD across simulated ranks."""

    @pytest.mark.parametrize("n_ranks", [2, 3, 4])
    @pytest.mark.parametrize("method", ['strips', 'rcb'])
    def test_partition_invariance(self, n_ranks, method):
        mesh = create_square_mesh(1.0, 8)
        rng = np.random.default_rng(3)
        values = rng.normal(size=3 * mesh.n_nodes)
        lines = np.linspace(0.0, 1.0, 9)
        owners = partition_cells(mesh, n_ranks, method=method)

        def body(comm):
            dof_handler = make_dof_handler(mesh, owners, comm.rank)
            solution = distribute(dof_handler, values, comm)
            return CrackOpeningProfileSampler(dof_handler, comm).compute(solution, lines, 0)

        results = run_spmd(n_ranks, body)
        reference = serial_cod(mesh, values, lines, 0)

        for result in results:
            assert np.array_equal(result, results[0])
            assert np.allclose(result, reference, rtol=1e-10, atol=1e-10)

    def test_perturbed_mesh_lines_on_boundary(self):
        """Only boundary lines of a perturbed mesh are guaranteed to hit faces."""
        mesh = perturb_interior_nodes(create_square_mesh(1.0, 4), 0.2, seed=2)
        owners = partition_cells(mesh, 2, method='rcb')
        func = lambda x, y: [0.0, 1.0, 0.3 - 2 * y]
        dof_handler = make_dof_handler(mesh, owners, 0)
        values = dof_handler.interpolate(func)

        def body(comm):
            dof_handler = make_dof_handler(mesh, owners, comm.rank)
            solution = distribute(dof_handler, values, comm)
            return CrackOpeningProfileSampler(dof_handler, comm).compute(
                solution, [0.0, 1.0], 0)

        for cod in run_spmd(2, body):
            assert np.allclose(cod, [-1.0, -1.0])

    def test_invalid_direction_all_ranks(self):
        """Every rank rejects the direction before any reduction."""
        mesh = create_square_mesh(1.0, 2)
        owners = partition_cells(mesh, 2)

        def body(comm):
            dof_handler = make_dof_handler(mesh, owners, comm.rank)
            solution = distribute(dof_handler, np.zeros(3 * mesh.n_nodes), comm)
            return CrackOpeningProfileSampler(dof_handler, comm).compute(solution, [0.5], -1)

        with pytest.raises(ValueError):
            run_spmd(2, body)
