"""
Per-particle records and structured-array layouts.

Particles are created per trial, handed to the trajectory step and
then only survive as rows of the batch arrays below.
"""

import numpy as np
from dataclasses import dataclass
from typing import NamedTuple


# Batch layouts (one row per particle / per frame)
PARTICLE_DTYPE = np.dtype([
    ('particle', np.int64),
    ('impact_parameter', np.float64),  # b [m]
    ('y0', np.float64),                # signed transverse offset [m]
    ('theta', np.float64),             # scattering angle [rad]
    ('theta_signed', np.float64),      # [rad], sign of y0
    ('vx', np.float64),                # post-scattering velocity [m/s]
    ('vy', np.float64),
    ('n_frames', np.int32),
    ('termination', np.int8),          # TerminationState value
])

TRAJECTORY_DTYPE = np.dtype([
    ('particle', np.int64),
    ('frame', np.int64),
    ('x', np.float64),  # [m]
    ('y', np.float64),  # [m]
])

ANGLE_DTYPE = np.dtype([
    ('particle', np.int64),
    ('theta_deg', np.float64),
])


class TrajectoryFrame(NamedTuple):
    particle: int
    frame: int
    x: float
    y: float


class AngleRecord(NamedTuple):
    particle: int
    theta_deg: float


@dataclass(frozen=True)
class Particle:
    """
    Outcome of one Monte Carlo trial.

    Parameters:
        index: Particle index (output grouping only)
        impact_parameter: b [m]
        y0: Transverse start offset, sign * b [m]
        theta: Scattering angle [rad], 0 to pi
        theta_signed: theta carrying the sign of y0 [rad]
        vx: Post-scattering x velocity [m/s]
        vy: Post-scattering y velocity [m/s]
    """
    index: int
    impact_parameter: float
    y0: float
    theta: float
    theta_signed: float
    vx: float
    vy: float

    @property
    def theta_deg(self) -> float:
        """Scattering angle [degrees]."""
        return self.theta * 180.0 / np.pi

    @property
    def sign(self) -> float:
        return 1.0 if self.y0 >= 0.0 else -1.0

    @property
    def speed(self) -> float:
        return float(np.hypot(self.vx, self.vy))

    def angle_record(self) -> AngleRecord:
        return AngleRecord(self.index, self.theta_deg)
