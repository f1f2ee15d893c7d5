"""
Monte Carlo driver for Rutherford scattering.

Per particle:
    - Sample impact parameter and transverse side
    - Closed-form Rutherford deflection
    - Trajectory synthesis (pre-foil and post-foil frames)

Particles are independent, so the run can be split across processes with
one independently seeded generator per worker.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple
from tqdm import tqdm

from rutherford_mc.core.constants import PhysicalConstants, DEFAULT_CONSTANTS
from rutherford_mc.core.parameters import SimulationParameters
from rutherford_mc.core.particle import (
    Particle, AngleRecord, TrajectoryFrame,
    PARTICLE_DTYPE, TRAJECTORY_DTYPE, ANGLE_DTYPE,
)
from rutherford_mc.physics.rutherford import RutherfordScattering
from rutherford_mc.transport.trajectory import (
    Trajectory, TrajectorySynthesizer, TerminationState,
)


@dataclass
class SimulationResult:
    """
    In-memory output of a run.

    Attributes:
        params: Run configuration
        constants: Physical constants used
        particles: One PARTICLE_DTYPE row per particle, ordered by index
        trajectories: TRAJECTORY_DTYPE rows grouped by particle, frames in order
        seed: Seed the run was started from (None if a generator was injected)
    """
    params: SimulationParameters
    constants: PhysicalConstants
    particles: np.ndarray
    trajectories: np.ndarray
    seed: Optional[int] = None
    elapsed_time: float = field(default=0.0, compare=False)

    @property
    def n_particles(self) -> int:
        return len(self.particles)

    @property
    def theta_deg(self) -> np.ndarray:
        return self.particles['theta'] * 180.0 / np.pi

    @property
    def angles(self) -> np.ndarray:
        """ANGLE_DTYPE rows, one per particle."""
        rows = np.zeros(self.n_particles, dtype=ANGLE_DTYPE)
        rows['particle'] = self.particles['particle']
        rows['theta_deg'] = self.theta_deg
        return rows

    def angle_records(self) -> Iterator[AngleRecord]:
        for row in self.angles:
            yield AngleRecord(int(row['particle']), float(row['theta_deg']))

    def trajectory_frames(self) -> Iterator[TrajectoryFrame]:
        for row in self.trajectories:
            yield TrajectoryFrame(int(row['particle']), int(row['frame']),
                                  float(row['x']), float(row['y']))

    def trajectory(self, particle: int) -> np.ndarray:
        """Frames of a single particle."""
        return self.trajectories[self.trajectories['particle'] == particle]

    def termination_counts(self) -> dict:
        states = self.particles['termination']
        return {state.name: int(np.sum(states == state)) for state in TerminationState}

    @classmethod
    def merge(cls, chunks: list) -> "SimulationResult":
        """Combine chunk results, ordered by particle index."""
        chunks = sorted(chunks, key=lambda c: c.particles['particle'][0] if c.n_particles else 0)
        first = chunks[0]
        return cls(
            params=first.params,
            constants=first.constants,
            particles=np.concatenate([c.particles for c in chunks]),
            trajectories=np.concatenate([c.trajectories for c in chunks]),
            seed=first.seed,
        )


def particle_row(particle: Particle, trajectory: Trajectory) -> Tuple:
    return (particle.index, particle.impact_parameter, particle.y0, particle.theta,
            particle.theta_signed, particle.vx, particle.vy,
            trajectory.n_frames, int(trajectory.termination))


# Engine instance for each worker process
_worker_engine = None

def _init_worker(params, constants):
    """Initialize worker process with its own engine instance."""
    global _worker_engine
    _worker_engine = RutherfordSimulation(params, constants)

def _run_chunk_worker(work_item):
    """
    Simulate a contiguous index range with an independent generator.

    Parameters:
        work_item: (start, stop, seed_sequence)

    Returns:
        SimulationResult for particles start..stop-1
    """
    start, stop, seed_sequence = work_item
    rng = np.random.default_rng(seed_sequence)
    return _worker_engine.run(n_particles=stop - start, rng=rng,
                              first_index=start, verbose=False)


class RutherfordSimulation:
    """
    Main engine for the Rutherford scattering Monte Carlo.

    Example:
        sim = RutherfordSimulation(SimulationParameters(n_particles=1000))
        result = sim.run(seed=42)
        result.angles['theta_deg']
    """

    def __init__(self, params: SimulationParameters = SimulationParameters(),
                 constants: PhysicalConstants = DEFAULT_CONSTANTS):
        """
        Parameters:
            params: Run configuration
            constants: Physical constants
        """
        self.params = params
        self.constants = constants

        self.scattering = RutherfordScattering(params, constants)
        self.synthesizer = TrajectorySynthesizer(params)

    @property
    def v0(self) -> float:
        return self.scattering.v0

    def simulate_particle(self, rng: np.random.Generator,
                          index: int) -> Tuple[Particle, Trajectory]:
        """Sample, scatter and synthesize one particle."""
        particle = self.scattering.sample(rng, index)
        return particle, self.synthesizer.synthesize(particle)

    def iter_particles(self, n_particles: int, rng: np.random.Generator,
                       first_index: int = 0,
                       progress: bool = False) -> Iterator[Tuple[Particle, Trajectory]]:
        """
        Lazily simulate particles in index order.

        Suitable for streaming straight into a writer without holding the
        whole run in memory.
        """
        indices = range(first_index, first_index + n_particles)
        if progress:
            indices = tqdm(indices, desc="Particles", unit="particle")
        for index in indices:
            yield self.simulate_particle(rng, index)

    def run(self, n_particles: Optional[int] = None, seed: Optional[int] = None,
            rng: Optional[np.random.Generator] = None, first_index: int = 0,
            verbose: bool = True, progress: bool = False) -> SimulationResult:
        """
        Run the simulation serially.

        Parameters:
            n_particles: Number of particles (default: params.n_particles)
            seed: Seed for a fresh generator (ignored if rng is given)
            rng: Generator to draw from (dependency injection)
            first_index: Index of the first particle
            verbose: Print progress information
            progress: Show a tqdm progress bar

        Returns:
            SimulationResult
        """
        import time

        if n_particles is None:
            n_particles = self.params.n_particles
        if rng is None:
            rng = np.random.default_rng(seed)

        if verbose:
            self._print_header(n_particles)

        start_time = time.time()

        particles = np.zeros(n_particles, dtype=PARTICLE_DTYPE)
        trajectories = []
        for i, (particle, trajectory) in enumerate(
                self.iter_particles(n_particles, rng, first_index, progress)):
            particles[i] = particle_row(particle, trajectory)
            trajectories.append(trajectory.to_structured_array())

        elapsed = time.time() - start_time

        if trajectories:
            frames = np.concatenate(trajectories)
        else:
            frames = np.zeros(0, dtype=TRAJECTORY_DTYPE)

        result = SimulationResult(self.params, self.constants, particles, frames,
                                  seed=seed, elapsed_time=elapsed)

        if verbose:
            self._print_summary(result)

        return result

    def run_parallel(self, n_particles: Optional[int] = None, seed: Optional[int] = None,
                     n_processes: Optional[int] = None, verbose: bool = True) -> SimulationResult:
        """
        Run the simulation across worker processes.

        The index range is split into one contiguous chunk per process, each
        drawing from a generator spawned from SeedSequence(seed). Output is
        reproducible for a fixed (seed, n_processes) but differs from the
        serial stream of the same seed.

        Parameters:
            n_particles: Number of particles (default: params.n_particles)
            seed: Root seed
            n_processes: Number of processes (default: cpu_count)
            verbose: Print progress information

        Returns:
            SimulationResult ordered by particle index
        """
        import multiprocessing as mp
        import time

        if n_particles is None:
            n_particles = self.params.n_particles
        if n_processes is None:
            n_processes = mp.cpu_count()
        n_processes = max(1, min(n_processes, n_particles))

        if verbose:
            self._print_header(n_particles)
            print(f"  Processes: {n_processes}")

        bounds = np.linspace(0, n_particles, n_processes + 1).astype(int)
        seeds = np.random.SeedSequence(seed).spawn(n_processes)
        work_items = [(int(bounds[i]), int(bounds[i + 1]), seeds[i])
                      for i in range(n_processes)]

        start_time = time.time()

        with mp.Pool(n_processes, initializer=_init_worker,
                     initargs=(self.params, self.constants)) as pool:
            chunks = pool.map(_run_chunk_worker, work_items)

        elapsed = time.time() - start_time

        result = SimulationResult.merge(chunks)
        result.seed = seed
        result.elapsed_time = elapsed

        if verbose:
            self._print_summary(result)

        return result

    def _print_header(self, n_particles: int):
        p = self.params
        print(f"\nSimulating {n_particles} particles...")
        print(f"  Energy: {p.energy_MeV} MeV")
        print(f"  Charges: Z1={p.z_projectile}  Z2={p.z_target}")
        print(f"  b_max: {p.b_max} m")
        print(f"  v0: {self.v0:.6e} m/s")

    def _print_summary(self, result: SimulationResult):
        counts = result.termination_counts()
        print(f"\nSimulation complete!")
        print(f"  Time: {result.elapsed_time:.2f}s")
        print(f"  Frames: {len(result.trajectories):,}")
        print(f"  Exit x reached: {counts['EXIT_X_REACHED']}")
        print(f"  Escaped in y: {counts['ESCAPED_Y']}")
        print(f"  Frames exhausted: {counts['FRAMES_EXHAUSTED']}")
