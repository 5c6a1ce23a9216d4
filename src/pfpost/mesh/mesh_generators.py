"""
Mesh Generators
===============

Simple structured mesh generators for testing and examples.
"""

import numpy as np
from typing import Optional
from .triangle_mesh import TriangleMesh

# Boundary ids of the rectangle sides
LEFT, RIGHT, BOTTOM, TOP = 0, 1, 2, 3


def create_rectangle_mesh(Lx: float, Ly: float, nx: int, ny: int,
                          pattern: str = 'right') -> TriangleMesh:
    """
    Create structured triangular mesh on rectangle [0, Lx] × [0, Ly].

    Boundary faces are tagged per side: x = 0 -> 0, x = Lx -> 1,
    y = 0 -> 2, y = Ly -> 3.

    Args:
        Lx, Ly: domain dimensions
        nx, ny: number of divisions in x and y
        pattern: diagonal pattern
            'right': diagonals go from lower-left to upper-right
            'left': diagonals go from lower-right to upper-left
            'alternating': alternating diagonal direction

    Returns:
        TriangleMesh instance
    """
    if nx < 1 or ny < 1:
        raise ValueError(f"nx and ny must be positive, got {nx}, {ny}")

    if pattern not in ('right', 'left', 'alternating'):
        raise ValueError(f"Unknown pattern: {pattern}")

    xs = np.linspace(0.0, Lx, nx + 1)
    ys = np.linspace(0.0, Ly, ny + 1)
    X, Y = np.meshgrid(xs, ys)
    nodes = np.column_stack([X.ravel(), Y.ravel()])

    # Corner vertices of every quad, row by row
    j, i = np.divmod(np.arange(nx * ny), nx)
    n00 = j * (nx + 1) + i
    n10, n01 = n00 + 1, n00 + nx + 1
    n11 = n01 + 1

    if pattern == 'right':
        use_right = np.ones(nx * ny, dtype=bool)
    elif pattern == 'left':
        use_right = np.zeros(nx * ny, dtype=bool)
    else:
        use_right = (i + j) % 2 == 0

    first = np.where(use_right[:, None],
                     np.column_stack([n00, n10, n11]),
                     np.column_stack([n00, n10, n01]))
    second = np.where(use_right[:, None],
                      np.column_stack([n00, n11, n01]),
                      np.column_stack([n10, n11, n01]))
    elements = np.stack([first, second], axis=1).reshape(-1, 3)

    mesh = TriangleMesh(nodes, elements)

    tol = 1e-10 * max(Lx, Ly)
    mesh.set_boundary_id(lambda x, y: abs(x) < tol, LEFT)
    mesh.set_boundary_id(lambda x, y: abs(x - Lx) < tol, RIGHT)
    mesh.set_boundary_id(lambda x, y: abs(y) < tol, BOTTOM)
    mesh.set_boundary_id(lambda x, y: abs(y - Ly) < tol, TOP)
    return mesh


def create_square_mesh(L: float, n: int, pattern: str = 'right') -> TriangleMesh:
    """
    Create structured triangular mesh on square [0, L] × [0, L].

    Convenience function that calls create_rectangle_mesh.
    """
    return create_rectangle_mesh(L, L, n, n, pattern)


def create_single_element(node_coords: Optional[np.ndarray] = None) -> TriangleMesh:
    """
    Create mesh with a single triangle cell.

    Args:
        node_coords: shape (3, 2), vertex coordinates
            Default: right triangle with vertices at (0,0), (1,0), (0,1)

    Returns:
        TriangleMesh instance
    """
    if node_coords is None:
        node_coords = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])

    return TriangleMesh(node_coords, np.array([[0, 1, 2]]))


def create_two_element_patch() -> TriangleMesh:
    """
    Create mesh with two triangles sharing a face along the diagonal.

    Useful for testing face connectivity and ghost layers.
    """
    nodes = np.array([
        [0.0, 0.0],
        [1.0, 0.0],
        [1.0, 1.0],
        [0.0, 1.0]
    ])
    elements = np.array([
        [0, 1, 2],
        [0, 2, 3]
    ])
    return TriangleMesh(nodes, elements)


def perturb_interior_nodes(mesh: TriangleMesh, magnitude: float = 0.1,
                           seed: Optional[int] = None) -> TriangleMesh:
    """
    Randomly perturb interior vertices.

    Boundary faces keep their ids since boundary vertices do not move.

    Args:
        mesh: input mesh
        magnitude: perturbation magnitude as fraction of min face length
        seed: random seed for reproducibility

    Returns:
        New TriangleMesh with perturbed vertices
    """
    rng = np.random.default_rng(seed)
    pert = magnitude * np.min(mesh.compute_edge_lengths())

    new_nodes = mesh.nodes.copy()
    interior = np.setdiff1d(np.arange(mesh.n_nodes), mesh.boundary_nodes)
    new_nodes[interior] += rng.uniform(-pert, pert, (len(interior), 2))

    new_mesh = TriangleMesh(new_nodes, mesh.elements.copy())
    new_mesh.boundary_ids = mesh.boundary_ids.copy()
    return new_mesh
