"""
Single Coulomb (Rutherford) scattering off a heavy nucleus.

The deflection angle is set in closed form from the impact parameter:

    tan(θ/2) = k q1 q2 / (2 E b)

and applied instantaneously at the foil plane. The speed is unchanged
(elastic scattering off an infinitely heavy target).

References:
    - Rutherford, Phil. Mag. 21, 669 (1911)
    - Goldstein, Classical Mechanics, 3rd ed., Sec. 3.10
"""

import numpy as np
import numba
from typing import Tuple

from rutherford_mc.core.constants import PhysicalConstants, DEFAULT_CONSTANTS
from rutherford_mc.core.parameters import SimulationParameters
from rutherford_mc.core.particle import Particle

# tan(θ/2) above this counts as a head-on collision (θ = π)
TAN_HALF_OVERFLOW = 1e300


@numba.njit(cache=True, error_model='numpy')
def rutherford_tan_half(b: float, energy_joule: float, k_q1_q2: float) -> float:
    """
    tan(θ/2) for impact parameter b.

    Parameters:
        b: Impact parameter [m]
        energy_joule: Projectile kinetic energy [J]
        k_q1_q2: Product k * q1 * q2 [J m]

    Returns:
        tan(θ/2); +inf for b = 0 or E = 0 (no exception raised)
    """
    return k_q1_q2 / (2.0 * energy_joule * b)


@numba.njit(cache=True, error_model='numpy')
def rutherford_angle(b: float, energy_joule: float, k_q1_q2: float) -> float:
    """
    Rutherford scattering angle [radians], 0 to π.

    Head-on limit: returns exactly π once tan(θ/2) exceeds TAN_HALF_OVERFLOW.
    """
    t2 = rutherford_tan_half(b, energy_joule, k_q1_q2)
    if t2 > TAN_HALF_OVERFLOW:
        return np.pi
    return 2.0 * np.arctan(t2)


@numba.njit(cache=True, error_model='numpy')
def rutherford_angles(b: np.ndarray, energy_joule: float, k_q1_q2: float) -> np.ndarray:
    """Vectorized rutherford_angle over an array of impact parameters."""
    theta = np.empty(b.shape[0], dtype=np.float64)
    for i in range(b.shape[0]):
        theta[i] = rutherford_angle(b[i], energy_joule, k_q1_q2)
    return theta


@numba.njit(cache=True)
def deflected_velocity(theta: float, y0: float, v0: float) -> Tuple[float, float, float]:
    """
    Rotate the +x velocity by the signed scattering angle.

    Particles passing above the nucleus (y0 >= 0) are deflected upward.

    Returns:
        (theta_signed, vx, vy)
    """
    if y0 >= 0.0:
        theta_signed = theta
    else:
        theta_signed = -theta
    return theta_signed, v0 * np.cos(theta_signed), v0 * np.sin(theta_signed)


def sample_impact_parameter(rng: np.random.Generator, b_max: float) -> Tuple[float, float]:
    """
    Sample an area-weighted impact parameter and its transverse offset.

    b = b_max * sqrt(u) is uniform over the disk of radius b_max (uniform
    incoming flux). The sign of y0 is drawn separately from U[-1, 1).

    Returns:
        (b, y0)
    """
    u = rng.random()
    b = b_max * np.sqrt(u)
    sign = 1.0 if rng.uniform(-1.0, 1.0) >= 0.0 else -1.0
    return b, sign * b


def impact_parameter_for_angle(theta, energy_joule: float, k_q1_q2: float):
    """
    Inverse Rutherford relation b(θ) = k q1 q2 / (2 E tan(θ/2)).

    Accepts scalars or arrays. θ = 0 gives +inf.
    """
    theta = np.asarray(theta, dtype=np.float64)
    with np.errstate(divide='ignore'):
        b = k_q1_q2 / (2.0 * energy_joule * np.tan(theta / 2.0))
    return b if b.ndim else float(b)


def differential_cross_section(theta, energy_joule: float, k_q1_q2: float):
    """
    Rutherford differential cross section dσ/dΩ [m^2/sr].

        dσ/dΩ = (k q1 q2 / 4E)^2 / sin^4(θ/2)
    """
    theta = np.asarray(theta, dtype=np.float64)
    prefactor = (k_q1_q2 / (4.0 * energy_joule))**2
    with np.errstate(divide='ignore'):
        dsdo = prefactor / np.sin(theta / 2.0)**4
    return dsdo if dsdo.ndim else float(dsdo)


class RutherfordScattering:
    """
    High-level interface for the per-particle physics step.

    Usage:
        rs = RutherfordScattering(SimulationParameters())
        particle = rs.sample(rng, index=0)
        theta = rs.angle(1e-12)
    """

    def __init__(self, params: SimulationParameters = SimulationParameters(),
                 constants: PhysicalConstants = DEFAULT_CONSTANTS):
        """
        Parameters:
            params: Run configuration
            constants: Physical constants (projectile mass)
        """
        self.params = params
        self.constants = constants

        q1, q2 = params.charges(constants)
        self.energy_joule = params.energy_joule(constants)
        self.k_q1_q2 = constants.k_coulomb * q1 * q2
        with np.errstate(divide='ignore', invalid='ignore'):
            self.v0 = float(params.initial_speed(constants))

    def angle(self, b: float) -> float:
        """Scattering angle [rad] for impact parameter b [m]."""
        return rutherford_angle(b, self.energy_joule, self.k_q1_q2)

    def angles(self, b: np.ndarray) -> np.ndarray:
        return rutherford_angles(np.ascontiguousarray(b, dtype=np.float64),
                                 self.energy_joule, self.k_q1_q2)

    def scatter(self, index: int, b: float, y0: float) -> Particle:
        """Deterministic physics outcome for a given geometry."""
        theta = self.angle(b)
        theta_signed, vx, vy = deflected_velocity(theta, y0, self.v0)
        return Particle(index=index, impact_parameter=b, y0=y0, theta=theta,
                        theta_signed=theta_signed, vx=vx, vy=vy)

    def sample(self, rng: np.random.Generator, index: int = 0) -> Particle:
        """Draw one particle: geometry from rng, then scatter it."""
        b, y0 = sample_impact_parameter(rng, self.params.b_max)
        return self.scatter(index, b, y0)

    def impact_parameter(self, theta):
        """Impact parameter [m] producing angle theta [rad]."""
        return impact_parameter_for_angle(theta, self.energy_joule, self.k_q1_q2)

    def cross_section(self, theta):
        """dσ/dΩ [m^2/sr] at angle theta [rad]."""
        return differential_cross_section(theta, self.energy_joule, self.k_q1_q2)

    @property
    def min_angle(self) -> float:
        """Smallest angle reachable, θ(b_max) [rad]."""
        return self.angle(self.params.b_max)
