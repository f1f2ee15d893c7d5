"""
RUTHERFORD_MC: Monte Carlo Simulation of Rutherford Scattering

Samples charged projectiles with area-weighted impact parameters,
deflects them with the closed-form Rutherford angle and synthesizes
frame-by-frame trajectories for animation and plotting.

Modules:
    core: Physical constants, run parameters, particle records
    physics: Rutherford scattering angle and cross section
    transport: Trajectory synthesis and simulation engine
    io: CSV and HDF5 output
    analysis: Angular distribution and sampling checks
    visualization: Matplotlib plots and animation
"""

__version__ = "0.1.0"

from rutherford_mc.core.constants import PhysicalConstants
from rutherford_mc.core.parameters import SimulationParameters, load_config
from rutherford_mc.core.particle import Particle, TrajectoryFrame, AngleRecord
from rutherford_mc.physics.rutherford import RutherfordScattering
from rutherford_mc.transport.trajectory import TrajectorySynthesizer, TerminationState
from rutherford_mc.transport.engine import RutherfordSimulation, SimulationResult

__all__ = [
    "PhysicalConstants",
    "SimulationParameters",
    "load_config",
    "Particle",
    "TrajectoryFrame",
    "AngleRecord",
    "RutherfordScattering",
    "TrajectorySynthesizer",
    "TerminationState",
    "RutherfordSimulation",
    "SimulationResult",
]
