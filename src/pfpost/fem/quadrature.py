"""
Quadrature
==========

Gauss-Legendre rules on the unit interval, used for face integrals.
"""

import numpy as np


class QGauss1D:
    """
    Gauss-Legendre rule with ``n_points`` points on [0, 1].

    Integrates polynomials up to degree ``2 * n_points - 1`` exactly.
    Weights sum to one, so physical weights are ``weights * face_length``.

    Attributes:
        points: shape (n_points,), abscissae in [0, 1]
        weights: shape (n_points,)
    """

    def __init__(self, n_points: int):
        if n_points < 1:
            raise ValueError(f"n_points must be positive, got {n_points}")

        xi, w = np.polynomial.legendre.leggauss(n_points)
        self.points = 0.5 * (xi + 1.0)
        self.weights = 0.5 * w

    @property
    def n_points(self) -> int:
        return len(self.weights)

    def __len__(self) -> int:
        return self.n_points

    def __repr__(self) -> str:
        return f"QGauss1D({self.n_points})"
