"""
Postprocessing Configuration
============================
"""

from dataclasses import dataclass


@dataclass
class PostprocessConfig:
    """Configuration shared by the postprocessing algorithms."""
    space_tol: float = 1e-7           # Half-width of the band around a COD line
    cod_quadrature_points: int = 3    # Gauss points per face for the COD integral
    verbose: bool = False             # Log per-call summaries at INFO instead of DEBUG

    def __post_init__(self):
        if self.space_tol <= 0:
            raise ValueError(f"space_tol must be positive, got {self.space_tol}")
        if self.cod_quadrature_points < 1:
            raise ValueError(
                f"cod_quadrature_points must be positive, got {self.cod_quadrature_points}")
