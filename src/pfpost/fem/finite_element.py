"""
Finite Element Basis
====================

Linear Lagrange triangle carrying the coupled displacement / phase-field
system, and the extractors that select a vector or scalar field from it.
"""

import numpy as np
from typing import Tuple


class LinearTriangle:
    """
    Vector-valued P1 Lagrange element on triangles.

    Every component uses the same linear shape functions, one per vertex.
    For the phase-field system the components are the displacement
    ``u_0 .. u_{dim-1}`` followed by the phase field ``phi``.

    Attributes:
        degree: polynomial degree of the basis (1)
        n_components: number of solution components per vertex
        dofs_per_cell: vertices_per_cell * n_components
    """

    degree = 1
    vertices_per_cell = 3

    def __init__(self, n_components: int = 3):
        if n_components < 1:
            raise ValueError(f"n_components must be positive, got {n_components}")
        self.n_components = n_components

    @property
    def dofs_per_cell(self) -> int:
        return self.vertices_per_cell * self.n_components

    @staticmethod
    def shape_values(barycentric: np.ndarray) -> np.ndarray:
        """
        Shape function values at points given in barycentric coordinates.

        For P1 the shape functions are the barycentric coordinates.

        Args:
            barycentric: shape (n_points, 3)

        Returns:
            N: shape (n_points, 3)
        """
        return np.asarray(barycentric, dtype=np.float64)

    @staticmethod
    def shape_gradients(X: np.ndarray) -> np.ndarray:
        """
        Physical shape function gradients (constant over the cell).

        N_i = (a_i + b_i*x + c_i*y) / (2*A), with A the signed area, so the
        result does not depend on the vertex orientation.

        Args:
            X: shape (3, 2), cell vertex coordinates

        Returns:
            G: shape (3, 2), G[i] = grad N_i
        """
        two_area = ((X[1, 0] - X[0, 0]) * (X[2, 1] - X[0, 1]) -
                    (X[2, 0] - X[0, 0]) * (X[1, 1] - X[0, 1]))
        if abs(two_area) < 1e-15:
            raise ValueError("Cell has zero area (degenerate triangle)")

        b = np.array([
            X[1, 1] - X[2, 1],
            X[2, 1] - X[0, 1],
            X[0, 1] - X[1, 1]
        ])
        c = np.array([
            X[2, 0] - X[1, 0],
            X[0, 0] - X[2, 0],
            X[1, 0] - X[0, 0]
        ])
        return np.column_stack([b, c]) / two_area

    def __repr__(self) -> str:
        return f"LinearTriangle(n_components={self.n_components})"


class VectorField:
    """Selects ``dim`` consecutive components starting at ``first_component``."""

    rank = 1

    def __init__(self, first_component: int = 0, dim: int = 2):
        self.first_component = first_component
        self.dim = dim

    @property
    def components(self) -> Tuple[int, ...]:
        return tuple(range(self.first_component, self.first_component + self.dim))

    def __repr__(self) -> str:
        return f"VectorField(first_component={self.first_component})"


class ScalarField:
    """Selects a single component."""

    rank = 0

    def __init__(self, component: int):
        self.component = component

    @property
    def components(self) -> Tuple[int, ...]:
        return (self.component,)

    def __repr__(self) -> str:
        return f"ScalarField(component={self.component})"


def displacement_field(dim: int = 2) -> VectorField:
    """Displacement extractor of the phase-field system."""
    return VectorField(0, dim)


def phase_field(dim: int = 2) -> ScalarField:
    """Phase-field extractor of the phase-field system."""
    return ScalarField(dim)
