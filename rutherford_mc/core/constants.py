"""
Physical constants (SI units).

CODATA 2018 values.
"""

import numpy as np
from dataclasses import dataclass


ELEMENTARY_CHARGE = 1.602176634e-19     # C
EPSILON_0 = 8.8541878128e-12            # F/m
ATOMIC_MASS_UNIT = 1.66053906660e-27    # kg

# Projectile mass numbers [u]
PROJECTILES = {
    'alpha': 4.0,
    'He-4': 4.0,
    'He-3': 3.0,
    'proton': 1.0,
    'H-1': 1.0,
    'deuteron': 2.0,
    'H-2': 2.0,
    'triton': 3.0,
    'H-3': 3.0,
    'Li-7': 7.0,
    'C-12': 12.0,
}


@dataclass(frozen=True)
class PhysicalConstants:
    """
    Immutable constant set shared by every particle of a run.

    Parameters:
        elementary_charge: e [C]
        epsilon_0: Vacuum permittivity [F/m]
        atomic_mass_unit: u [kg]
        projectile_mass_u: Projectile mass number [u] (4 for an alpha)
    """
    elementary_charge: float = ELEMENTARY_CHARGE
    epsilon_0: float = EPSILON_0
    atomic_mass_unit: float = ATOMIC_MASS_UNIT
    projectile_mass_u: float = 4.0

    @property
    def k_coulomb(self) -> float:
        """Coulomb constant 1/(4 pi eps0) [N m^2 / C^2]."""
        return 1.0 / (4.0 * np.pi * self.epsilon_0)

    @property
    def projectile_mass(self) -> float:
        """Projectile rest mass [kg]."""
        return self.projectile_mass_u * self.atomic_mass_unit

    @classmethod
    def for_projectile(cls, projectile: str) -> "PhysicalConstants":
        """
        Constants for a named projectile ('alpha', 'proton', 'C-12', ...).

        Raises:
            ValueError: if the projectile is not in PROJECTILES
        """
        if projectile not in PROJECTILES:
            raise ValueError(f"Unknown projectile '{projectile}'. "
                             f"Available: {list(PROJECTILES.keys())}")
        return cls(projectile_mass_u=PROJECTILES[projectile])


DEFAULT_CONSTANTS = PhysicalConstants()
