import matplotlib
matplotlib.use('Agg')

import numpy as np
import pytest

from rutherford_mc.core.constants import DEFAULT_CONSTANTS
from rutherford_mc.core.parameters import SimulationParameters
from rutherford_mc.physics.rutherford import RutherfordScattering
from rutherford_mc.transport.engine import RutherfordSimulation
from rutherford_mc.transport.trajectory import TrajectorySynthesizer


@pytest.fixture
def params():
    """Reference configuration with a small particle count."""
    return SimulationParameters(n_particles=300)


@pytest.fixture
def wide_params():
    """Small b_max so the angles spread over the full range."""
    return SimulationParameters(n_particles=300, b_max=1e-13)


@pytest.fixture
def scattering(params):
    return RutherfordScattering(params, DEFAULT_CONSTANTS)


@pytest.fixture
def synthesizer(params):
    return TrajectorySynthesizer(params)


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def simulation(params):
    return RutherfordSimulation(params)


@pytest.fixture
def result(simulation):
    return simulation.run(seed=2024, verbose=False)
