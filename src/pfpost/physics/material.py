"""
Material Models
===============

Isotropic linear elasticity used to turn strains into tractions.
"""

import numpy as np
from dataclasses import dataclass


@dataclass
class IsotropicMaterial:
    """
    Isotropic linear elastic material.

    Attributes:
        E: Young's modulus [Pa]
        nu: Poisson's ratio [-]
    """
    E: float
    nu: float

    def __post_init__(self):
        """Validate material parameters."""
        if self.E <= 0:
            raise ValueError(f"Young's modulus must be positive, got {self.E}")
        if not -1 < self.nu < 0.5:
            raise ValueError(f"Poisson's ratio must be in (-1, 0.5), got {self.nu}")

    @classmethod
    def from_lame(cls, lame_lambda: float, lame_mu: float) -> 'IsotropicMaterial':
        """
        Build from Lamé parameters.

        E = μ(3λ + 2μ) / (λ + μ),  ν = λ / (2(λ + μ))
        """
        if lame_mu <= 0 or lame_lambda + lame_mu <= 0:
            raise ValueError(
                f"Invalid Lamé parameters λ={lame_lambda}, μ={lame_mu}")
        E = lame_mu * (3 * lame_lambda + 2 * lame_mu) / (lame_lambda + lame_mu)
        nu = lame_lambda / (2 * (lame_lambda + lame_mu))
        return cls(E=E, nu=nu)

    @property
    def lame_lambda(self) -> float:
        """
        First Lamé parameter λ.

        λ = E·ν / ((1+ν)(1-2ν))
        """
        return self.E * self.nu / ((1 + self.nu) * (1 - 2 * self.nu))

    @property
    def lame_mu(self) -> float:
        """
        Second Lamé parameter μ (shear modulus).

        μ = E / (2(1+ν))
        """
        return self.E / (2 * (1 + self.nu))

    @property
    def shear_modulus(self) -> float:
        """Alias for lame_mu."""
        return self.lame_mu

    def stress(self, strain: np.ndarray) -> np.ndarray:
        """Stress tensor(s) for strain tensor(s), see ``isotropic_stress``."""
        return isotropic_stress(strain, self.lame_lambda, self.lame_mu)


def isotropic_stress(strain: np.ndarray, lame_lambda: float,
                     shear_modulus: float) -> np.ndarray:
    """
    Isotropic linear elastic stress.

    σ = λ·tr(ε)·I + 2μ·ε

    Args:
        strain: shape (..., dim, dim), symmetric strain tensor(s)
        lame_lambda: first Lamé parameter λ
        shear_modulus: shear modulus μ

    Returns:
        σ: same shape as strain
    """
    strain = np.asarray(strain, dtype=np.float64)
    dim = strain.shape[-1]
    trace = np.trace(strain, axis1=-2, axis2=-1)
    return (lame_lambda * trace[..., None, None] * np.eye(dim) +
            2 * shear_modulus * strain)
