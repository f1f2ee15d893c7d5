"""
Gold Foil Experiment - Simple Example

Simulates alpha particles scattering off gold nuclei and compares the
angular distribution with the Rutherford formula.

This example validates:
    - Area-weighted impact parameter sampling
    - Rutherford angle vs impact parameter
    - Angular distribution (1/sin^4(θ/2))

Expected results for 5 MeV alphas on gold with b_max = 1e-13 m:
    - Minimum angle θ(b_max): ~25.6 degrees
    - Chi-square p-value against theory: not small
"""

import numpy as np
import matplotlib.pyplot as plt
from pathlib import Path

from rutherford_mc.core.parameters import SimulationParameters
from rutherford_mc.physics.rutherford import RutherfordScattering
from rutherford_mc.transport.engine import RutherfordSimulation
from rutherford_mc.analysis.angular import (
    angle_histogram, expected_angle_counts, chi_square_test,
    impact_parameter_uniformity, summarize,
)
from rutherford_mc.visualization.plots import plot_trajectories, plot_angle_distribution


def simulate_gold_foil(energy_MeV: float = 5.0, b_max: float = 1e-13,
                       n_particles: int = 20000, seed: int = 42, bins: int = 18):
    """
    Run the Monte Carlo and compare with theory.

    Parameters:
        energy_MeV: Alpha energy [MeV]
        b_max: Maximum impact parameter [m]
        n_particles: Number of particles
        seed: Random seed
        bins: Angle histogram bins

    Returns:
        result, chi2, p_value
    """
    print(f"\n{'='*70}")
    print(f"Gold Foil Simulation")
    print(f"{'='*70}")
    print(f"  Energy: {energy_MeV} MeV")
    print(f"  b_max: {b_max} m")
    print(f"  Particles: {n_particles:,}")
    print(f"{'='*70}\n")

    params = SimulationParameters(n_particles=n_particles, energy_MeV=energy_MeV, b_max=b_max)
    sim = RutherfordSimulation(params)
    result = sim.run(seed=seed, verbose=True, progress=True)

    rs = RutherfordScattering(params)
    edges, _, counts = angle_histogram(result.theta_deg, bins)
    expected = expected_angle_counts(edges, n_particles, rs)
    chi2, p_value, dof = chi_square_test(counts, expected)
    ks = impact_parameter_uniformity(result.particles['impact_parameter'], b_max)
    summary = summarize(result)

    print(f"\n{'='*70}")
    print(f"Results:")
    print(f"{'='*70}")
    print(f"  Minimum angle: {np.degrees(rs.min_angle):.2f} deg")
    print(f"  Mean angle: {summary['mean_angle_deg']:.2f} deg")
    print(f"  Backscattered (>90 deg): {summary['backscatter_fraction']*100:.3f}%")
    print(f"  Chi-square: {chi2:.1f} / {dof} dof (p = {p_value:.3f})")
    print(f"  KS b^2 uniformity: D = {ks.statistic:.4f} (p = {ks.pvalue:.3f})")
    print(f"{'='*70}\n")

    return result, chi2, p_value


# ============================================================================
# Main Execution
# ============================================================================

if __name__ == "__main__":
    result, chi2, p_value = simulate_gold_foil()

    out_dir = Path(__file__).parent
    plot_trajectories(result, max_particles=300,
                      save_path=str(out_dir / 'gold_foil_trajectories.png'))
    plot_angle_distribution(result, bins=18,
                            save_path=str(out_dir / 'gold_foil_angles.png'))
    plt.show()
