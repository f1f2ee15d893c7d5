"""
Angular distribution analysis.

Compares the sampled scattering angles against Rutherford theory and
checks the impact-parameter sampling.
"""

import numpy as np
from scipy import stats
from typing import Tuple

from rutherford_mc.physics.rutherford import RutherfordScattering, differential_cross_section
from rutherford_mc.transport.trajectory import TerminationState


def angle_histogram(theta_deg: np.ndarray, bins: int = 36) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Histogram of scattering angles over [0, 180] degrees.

    Angles outside the range (or NaN) are clamped into the edge bins.

    Returns:
        (edges, centers, counts)
    """
    edges = np.linspace(0.0, 180.0, bins + 1)
    centers = 0.5 * (edges[:-1] + edges[1:])

    idx = np.floor(np.nan_to_num(theta_deg, nan=0.0) / (180.0 / bins)).astype(np.int64)
    idx = np.clip(idx, 0, bins - 1)
    counts = np.bincount(idx, minlength=bins)

    return edges, centers, counts


def rutherford_shape_counts(bins: int, n_particles: int,
                            scattering: RutherfordScattering) -> np.ndarray:
    """
    Expected counts per bin from the Rutherford cross section alone.

    dσ/dΩ * 2π sinθ dθ evaluated at bin centers, normalized to n_particles.
    Ignores the b_max cutoff; used for the theory overlay.
    """
    dtheta = np.pi / bins
    centers = (np.arange(bins) + 0.5) * dtheta

    dsdo = differential_cross_section(centers, scattering.energy_joule, scattering.k_q1_q2)
    weight = dsdo * 2.0 * np.pi * np.sin(centers) * dtheta

    norm = np.sum(weight)
    if norm > 0:
        return weight / norm * n_particles
    return np.zeros(bins)


def expected_angle_counts(edges_deg: np.ndarray, n_particles: int,
                          scattering: RutherfordScattering) -> np.ndarray:
    """
    Exact expected counts per bin for area-weighted sampling up to b_max.

    P(θ > θ0) = b(θ0)^2 / b_max^2 with b(θ0) clipped to b_max, so
    the probability of a bin is the difference of squared impact parameters
    at its edges.
    """
    b_max = scattering.params.b_max
    b_edges = scattering.impact_parameter(np.radians(edges_deg))
    b_edges = np.clip(np.atleast_1d(b_edges), 0.0, b_max)

    prob = (b_edges[:-1]**2 - b_edges[1:]**2) / b_max**2
    return prob * n_particles


def chi_square_test(observed: np.ndarray, expected: np.ndarray,
                    min_expected: float = 5.0) -> Tuple[float, float, int]:
    """
    Pearson chi-square of observed vs expected bin counts.

    Bins with expected < min_expected are dropped.

    Returns:
        (chi2, p_value, degrees_of_freedom)
    """
    mask = expected >= min_expected
    obs = observed[mask]
    exp = expected[mask]

    chi2 = float(np.sum((obs - exp)**2 / exp))
    dof = max(int(np.sum(mask)) - 1, 1)
    p_value = float(stats.chi2.sf(chi2, dof))

    return chi2, p_value, dof


def impact_parameter_uniformity(b: np.ndarray, b_max: float):
    """
    Kolmogorov-Smirnov test of b^2/b_max^2 against U(0, 1).

    Area-weighted sampling makes b^2 uniform.

    Returns:
        scipy KstestResult (statistic, pvalue)
    """
    return stats.kstest((np.asarray(b) / b_max)**2, 'uniform')


def summarize(result, backscatter_deg: float = 90.0) -> dict:
    """
    Summary statistics of a run.

    Parameters:
        result: SimulationResult
        backscatter_deg: Angle above which a particle counts as backscattered
    """
    theta_deg = result.theta_deg
    counts = result.termination_counts()
    n = result.n_particles

    return {
        'n_particles': n,
        'n_frames': len(result.trajectories),
        'mean_angle_deg': float(np.mean(theta_deg)) if n > 0 else 0.0,
        'median_angle_deg': float(np.median(theta_deg)) if n > 0 else 0.0,
        'max_angle_deg': float(np.max(theta_deg)) if n > 0 else 0.0,
        'backscatter_fraction': float(np.mean(theta_deg > backscatter_deg)) if n > 0 else 0.0,
        'exit_x_reached': counts[TerminationState.EXIT_X_REACHED.name],
        'escaped_y': counts[TerminationState.ESCAPED_Y.name],
        'frames_exhausted': counts[TerminationState.FRAMES_EXHAUSTED.name],
    }
