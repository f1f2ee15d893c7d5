"""Transport module: Trajectory synthesis and the Monte Carlo engine."""

from rutherford_mc.transport.trajectory import TrajectorySynthesizer, TerminationState
from rutherford_mc.transport.engine import RutherfordSimulation, SimulationResult

__all__ = ["TrajectorySynthesizer", "TerminationState",
           "RutherfordSimulation", "SimulationResult"]
