"""
Simulation parameters and configuration loading.

Defaults reproduce the reference run: 2500 alphas at 5 MeV on gold,
impact parameters up to 1 Angstrom.
"""

import numpy as np
import yaml
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from typing import Tuple, Union

from rutherford_mc.core.constants import PhysicalConstants, DEFAULT_CONSTANTS


# Target nuclei: charge number Z
TARGET_NUCLEI = {
    'gold': 79.0,
    'silver': 47.0,
    'copper': 29.0,
    'aluminum': 13.0,
    'platinum': 78.0,
    'lead': 82.0,
}


@dataclass(frozen=True)
class SimulationParameters:
    """
    Immutable run configuration.

    Parameters:
        n_particles: Number of Monte Carlo trials
        energy_MeV: Projectile kinetic energy [MeV]
        z_projectile: Projectile charge number
        z_target: Target nucleus charge number
        b_max: Maximum impact parameter [m]
        frames_before: Pre-foil frame count
        frames_after: Maximum post-foil frame count
        start_x: Starting x position [m]
        foil_x: Foil plane x position [m]
        exit_x: Post-foil recording stops once x > exit_x [m]
        frame_dt: Artificial time per post-foil frame [s]
        escape_y: Post-foil recording stops once |y| > escape_y [m]
    """
    n_particles: int = 2500
    energy_MeV: float = 5.0
    z_projectile: float = 2.0
    z_target: float = 79.0
    b_max: float = 1.0e-10
    frames_before: int = 220
    frames_after: int = 400
    start_x: float = -6e-14
    foil_x: float = 0.0
    exit_x: float = 6e-14
    frame_dt: float = 1e-17
    escape_y: float = 1e-11

    def energy_joule(self, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> float:
        """Kinetic energy [J]."""
        return self.energy_MeV * 1.0e6 * constants.elementary_charge

    def charges(self, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> Tuple[float, float]:
        """Projectile and target charges (q1, q2) [C]."""
        return (self.z_projectile * constants.elementary_charge,
                self.z_target * constants.elementary_charge)

    def initial_speed(self, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> float:
        """Non-relativistic speed v0 = sqrt(2E/m) [m/s]."""
        return np.sqrt(2.0 * self.energy_joule(constants) / constants.projectile_mass)

    @classmethod
    def option_names(cls) -> list:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_dict(cls, options: dict) -> "SimulationParameters":
        """
        Build parameters from a mapping of recognized options.

        A 'target' entry naming a nucleus in TARGET_NUCLEI sets z_target
        unless z_target is given explicitly.

        Raises:
            ValueError: on unknown option names or target presets
        """
        options = dict(options)

        target = options.pop('target', None)
        if target is not None:
            target = str(target).lower()
            if target not in TARGET_NUCLEI:
                raise ValueError(f"Unknown target '{target}'. "
                                 f"Available: {list(TARGET_NUCLEI.keys())}")
            options.setdefault('z_target', TARGET_NUCLEI[target])

        unknown = sorted(set(options) - set(cls.option_names()))
        if unknown:
            raise ValueError(f"Unknown simulation option(s) {unknown}. "
                             f"Available: {cls.option_names()}")

        # YAML reads 1e-10 (no dot) as a string
        for f in fields(cls):
            if f.name in options:
                convert = int if f.type in (int, 'int') else float
                options[f.name] = convert(options[f.name])

        return cls(**options)

    def to_dict(self) -> dict:
        return asdict(self)

    def with_options(self, **options) -> "SimulationParameters":
        """Copy with some options replaced."""
        return replace(self, **options)


def load_config(path: Union[str, Path]) -> Tuple[SimulationParameters, PhysicalConstants]:
    """
    Load a YAML run configuration.

    File format (all keys optional):
        projectile: alpha
        target: gold
        n_particles: 2500
        energy_MeV: 5.0
        b_max: 1.0e-10
        ...

    Returns:
        (parameters, constants)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, 'r') as f:
        options = yaml.safe_load(f) or {}

    if not isinstance(options, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping")

    projectile = options.pop('projectile', None)
    if projectile is None:
        constants = DEFAULT_CONSTANTS
    else:
        constants = PhysicalConstants.for_projectile(str(projectile))

    return SimulationParameters.from_dict(options), constants
