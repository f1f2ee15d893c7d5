"""
Matplotlib views of a run: trajectories, angle histogram, animation.
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib import animation
from typing import Optional

from rutherford_mc.analysis.angular import angle_histogram, rutherford_shape_counts
from rutherford_mc.physics.rutherford import RutherfordScattering

# Particles deflected by more than this are drawn in the highlight color
STRONG_DEFLECTION_RAD = 0.2
COLOR_WEAK = '#6eb5ff'
COLOR_STRONG = '#ff6b6b'


def _particle_colors(result) -> list:
    strong = np.abs(result.particles['theta_signed']) > STRONG_DEFLECTION_RAD
    return [COLOR_STRONG if s else COLOR_WEAK for s in strong]


def _split_trajectories(result, max_particles: Optional[int]) -> list:
    """Per-particle (x, y) arrays, in particle order."""
    frames = result.trajectories
    n_frames = result.particles['n_frames'][:max_particles].astype(np.int64)
    ends = np.cumsum(n_frames)
    starts = ends - n_frames
    return [(frames['x'][s:e], frames['y'][s:e]) for s, e in zip(starts, ends)]


def _draw_foil(ax, params):
    ax.axvline(params.foil_x, color='gold', linewidth=3, alpha=0.8, label='Foil')
    ax.plot([params.foil_x], [0.0], 'o', color='#ffcf4d', markeredgecolor='#ffaa00',
            markersize=8, label='Nucleus')


def plot_trajectories(result, max_particles: Optional[int] = 200, ax=None,
                      save_path: Optional[str] = None):
    """
    Plot particle paths through the foil plane.

    Parameters:
        result: SimulationResult
        max_particles: Draw only the first max_particles particles (None = all)
        ax: Axes to draw into (new figure if None)
        save_path: Path to save figure (optional)

    Returns:
        Matplotlib Axes
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(10, 6))

    colors = _particle_colors(result)
    for i, (x, y) in enumerate(_split_trajectories(result, max_particles)):
        ax.plot(x, y, color=colors[i], linewidth=0.8, alpha=0.7)

    _draw_foil(ax, result.params)

    ax.set_xlabel('x [m]', fontsize=12)
    ax.set_ylabel('y [m]', fontsize=12)
    ax.set_title(f'Rutherford Scattering: {result.params.energy_MeV} MeV, '
                 f'Z1={result.params.z_projectile:g}, Z2={result.params.z_target:g}',
                 fontsize=14)
    ax.grid(True, alpha=0.3, linestyle='--')
    ax.legend(loc='upper left')

    if save_path:
        ax.figure.tight_layout()
        ax.figure.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Figure saved: {save_path}")

    return ax


def plot_angle_distribution(result, bins: int = 36, ax=None, log: bool = True,
                            save_path: Optional[str] = None):
    """
    Histogram of scattering angles with the Rutherford curve overlaid.

    Returns:
        Matplotlib Axes
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(10, 6))

    edges, centers, counts = angle_histogram(result.theta_deg, bins)
    scattering = RutherfordScattering(result.params, result.constants)
    theory = rutherford_shape_counts(bins, result.n_particles, scattering)

    ax.bar(centers, counts, width=np.diff(edges) * 0.9, color='#333333',
           label='Monte Carlo')
    ax.plot(centers, theory, color='#ff8b3a', linewidth=2,
            label=r'Rutherford $1/\sin^4(\theta/2)$')

    if log:
        ax.set_yscale('log')

    ax.set_xlabel(r'$\theta$ [deg]', fontsize=12)
    ax.set_ylabel('Counts', fontsize=12)
    ax.set_xlim(0, 180)
    ax.grid(True, alpha=0.3, linestyle='--')
    ax.legend()

    if save_path:
        ax.figure.tight_layout()
        ax.figure.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Figure saved: {save_path}")

    return ax


def animate_trajectories(result, max_particles: Optional[int] = 200, trail: int = 6,
                         interval: int = 30):
    """
    Animate particles advancing one frame per tick.

    Particles whose trajectory ended stay at their last frame.

    Returns:
        matplotlib.animation.FuncAnimation
    """
    paths = _split_trajectories(result, max_particles)
    colors = _particle_colors(result)[:len(paths)]
    n_ticks = max((len(x) for x, _ in paths), default=0)

    fig, ax = plt.subplots(figsize=(10, 6))
    _draw_foil(ax, result.params)

    if paths:
        all_x = np.concatenate([x for x, _ in paths])
        all_y = np.concatenate([y for _, y in paths])
        ax.set_xlim(np.nanmin(all_x), np.nanmax(all_x))
        ax.set_ylim(np.nanmin(all_y), np.nanmax(all_y))

    lines = [ax.plot([], [], color=c, linewidth=1.2)[0] for c in colors]
    dots = ax.scatter(np.zeros(len(paths)), np.zeros(len(paths)), s=6, c=colors)
    label = ax.text(0.01, 0.01, '', transform=ax.transAxes, family='monospace')

    def update(frame):
        offsets = np.empty((len(paths), 2))
        for i, (x, y) in enumerate(paths):
            idx = min(frame, len(x) - 1)
            lo = max(0, idx - trail)
            lines[i].set_data(x[lo:idx + 1], y[lo:idx + 1])
            offsets[i] = (x[idx], y[idx])
        dots.set_offsets(offsets)
        label.set_text(f'frame: {frame}')
        return lines + [dots, label]

    return animation.FuncAnimation(fig, update, frames=n_ticks, interval=interval, blit=True)
