import matplotlib.pyplot as plt
import pytest
from matplotlib import animation

from rutherford_mc.visualization.plots import (
    animate_trajectories,
    plot_angle_distribution,
    plot_trajectories,
)


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


def test_plot_trajectories(result, tmp_path):
    path = tmp_path / 'traj.png'
    ax = plot_trajectories(result, max_particles=25, save_path=str(path))
    # 25 paths plus foil line and nucleus marker
    assert len(ax.lines) == 27
    assert path.exists()


def test_plot_angle_distribution(result, tmp_path):
    path = tmp_path / 'angles.png'
    ax = plot_angle_distribution(result, bins=18, save_path=str(path))
    assert len(ax.patches) == 18
    assert ax.get_xlim() == (0.0, 180.0)
    assert path.exists()


def test_animation(result):
    anim = animate_trajectories(result, max_particles=10)
    assert isinstance(anim, animation.FuncAnimation)
