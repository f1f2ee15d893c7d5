"""Core module: Constants, parameters and particle records."""

from rutherford_mc.core.constants import PhysicalConstants, DEFAULT_CONSTANTS
from rutherford_mc.core.parameters import SimulationParameters, load_config
from rutherford_mc.core.particle import Particle, TrajectoryFrame, AngleRecord

__all__ = ["PhysicalConstants", "DEFAULT_CONSTANTS", "SimulationParameters",
           "load_config", "Particle", "TrajectoryFrame", "AngleRecord"]
