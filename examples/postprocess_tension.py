"""
Tension Test Postprocessing Example
===================================

Postprocesses a sequence of synthetic single-edge-notched tension states:
reaction force on the top boundary, crack opening along horizontal lines,
and the vertical displacement at the two top corners.

Run serially or under MPI:

    python examples/postprocess_tension.py
    mpiexec -n 4 python examples/postprocess_tension.py
"""

import logging

import numpy as np
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pfpost.mesh import create_rectangle_mesh, MeshPartition, partition_cells, TOP
from pfpost.fem import LinearTriangle, DoFHandler
from pfpost.parallel import (
    HAS_MPI, SerialCommunicator, get_world_communicator, DistributedVector
)
from pfpost.physics import IsotropicMaterial
from pfpost.postprocess import (
    BoundaryLoadIntegrator, CrackOpeningProfileSampler, NearestVertexSampler,
    LoadHistory, PostprocessConfig
)
from pfpost.runtime import reset_logging

logger = logging.getLogger(__name__)


def notched_state(load, notch_tip=0.5, l0=0.02):
    """Displacement / phase field of a notch along y = 0.5 opened by ``load``."""
    def func(x, y):
        phi = np.exp(-abs(y - 0.5) / l0) * (x < notch_tip)
        u_y = load * y + 0.5 * load * np.sign(y - 0.5) * (x < notch_tip)
        return [0.0, u_y, phi]
    return func


def run_postprocessing():
    comm = get_world_communicator() if HAS_MPI else SerialCommunicator()
    reset_logging(comm, quiet_level=logging.WARNING)

    mesh = create_rectangle_mesh(1.0, 1.0, 40, 40, pattern='alternating')
    cell_owners = partition_cells(mesh, comm.size, method='rcb')
    partition = MeshPartition(mesh, cell_owners, comm.rank)
    dof_handler = DoFHandler(partition, LinearTriangle(n_components=3))
    logger.info("Mesh: %d nodes, %d cells, %d owned here",
                mesh.n_nodes, mesh.n_elements, len(partition.locally_owned_cells))

    # Material properties (brittle, normalized)
    material = IsotropicMaterial(E=210.0, nu=0.3)
    config = PostprocessConfig(space_tol=1e-7, verbose=False)

    boundary_load = BoundaryLoadIntegrator(dof_handler, comm, config)
    cod_sampler = CrackOpeningProfileSampler(dof_handler, comm, config)
    point_sampler = NearestVertexSampler(dof_handler, comm)

    lines = np.linspace(0.0, 1.0, 41)
    corners = np.array([[0.0, 1.0], [1.0, 1.0]])

    history = LoadHistory()
    for step, load in enumerate(np.linspace(0.0, 1e-2, 11)):
        values = dof_handler.interpolate(notched_state(load))
        solution = DistributedVector.from_global(values, dof_handler.locally_owned_dofs, comm)

        force = boundary_load.compute(solution, material.lame_lambda,
                                      material.shear_modulus, TOP)
        cod = cod_sampler.compute(solution, lines, direction=0)
        u_y = point_sampler.compute(solution, 1, corners)

        history.add_record(step, load, force, cod=cod, point_values=u_y)
        logger.info("step %2d: load %.2e, F_y %.4e, max COD %.4e",
                    step, load, force[1], np.abs(cod).max())

    peak = history.find_peak_load()
    logger.info("Peak load %.4e at step %d", peak['force'], peak['step'])

    if comm.rank == 0:
        history.to_csv('tension_postprocess.csv')
        logger.info("History written to 'tension_postprocess.csv'")

        # Optional: Plot results if matplotlib available
        try:
            import matplotlib.pyplot as plt
            from pfpost.postprocess import (
                plot_partition, plot_cod_profile, plot_load_displacement
            )

            fig, axes = plt.subplots(1, 3, figsize=(15, 5))
            plot_partition(mesh, cell_owners, ax=axes[0])
            axes[0].set_title(f'Partition ({comm.size} ranks)')
            plot_cod_profile(lines, history.records[-1].cod, ax=axes[1], direction=0)
            axes[1].set_title('COD profile (last step)')
            plot_load_displacement(history, component=1, ax=axes[2])
            axes[2].set_title('Top reaction')

            plt.tight_layout()
            plt.savefig('tension_postprocess.png', dpi=150)
            logger.info("Plots saved to 'tension_postprocess.png'")

        except ImportError:
            logger.info("matplotlib not available, skipping plots")

    return history


if __name__ == "__main__":
    history = run_postprocessing()
