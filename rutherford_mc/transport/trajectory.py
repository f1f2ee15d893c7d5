"""
Frame-by-frame trajectory synthesis for animation and plotting.

Pre-foil frames are evenly spaced along the undeflected path; post-foil
frames step the deflected straight line at a fixed frame time. No field
integration takes place: the whole deflection happens at the foil plane.
"""

import enum
import numpy as np
import numba
from dataclasses import dataclass
from typing import Iterator

from rutherford_mc.core.parameters import SimulationParameters
from rutherford_mc.core.particle import Particle, TrajectoryFrame, TRAJECTORY_DTYPE


class TerminationState(enum.IntEnum):
    """Terminal state of the post-foil segment."""
    FRAMES_EXHAUSTED = 0
    EXIT_X_REACHED = 1
    ESCAPED_Y = 2


# Plain ints for the numba kernel
_FRAMES_EXHAUSTED = int(TerminationState.FRAMES_EXHAUSTED)
_EXIT_X_REACHED = int(TerminationState.EXIT_X_REACHED)
_ESCAPED_Y = int(TerminationState.ESCAPED_Y)


def pre_foil_positions(start_x: float, foil_x: float, frames_before: int) -> np.ndarray:
    """
    x positions of the pre-foil frames.

    Linear from start_x (frame 0) towards foil_x, which is reached by the
    first post-foil frame's starting point.
    """
    if frames_before <= 0:
        return np.empty(0, dtype=np.float64)
    pre_dx = (foil_x - start_x) / float(frames_before)
    return start_x + pre_dx * np.arange(frames_before, dtype=np.float64)


@numba.njit(cache=True)
def step_post_foil(x0: float, y0: float, vx: float, vy: float, frame_dt: float,
                   frames_after: int, exit_x: float, escape_y: float,
                   xs: np.ndarray, ys: np.ndarray):
    """
    Straight-line stepping after the foil.

    Each step advances by (vx, vy) * frame_dt, stores the frame, then
    checks the stopping conditions in order: x > exit_x, then |y| > escape_y.

    Parameters:
        xs, ys: Output buffers of length >= frames_after (filled in place)

    Returns:
        (n_frames, termination): frames written and TerminationState value
    """
    x = x0
    y = y0
    n = 0
    for _ in range(frames_after):
        x += vx * frame_dt
        y += vy * frame_dt
        xs[n] = x
        ys[n] = y
        n += 1
        if x > exit_x:
            return n, _EXIT_X_REACHED
        if abs(y) > escape_y:
            return n, _ESCAPED_Y
    return n, _FRAMES_EXHAUSTED


@dataclass
class Trajectory:
    """
    Ordered frames of one particle.

    Attributes:
        particle: Particle index
        x, y: Positions [m], pre-foil frames followed by post-foil frames
        n_pre: Number of pre-foil frames
        termination: How the post-foil segment ended
    """
    particle: int
    x: np.ndarray
    y: np.ndarray
    n_pre: int
    termination: TerminationState

    @property
    def n_frames(self) -> int:
        return len(self.x)

    @property
    def n_post(self) -> int:
        return self.n_frames - self.n_pre

    @property
    def frame_indices(self) -> np.ndarray:
        return np.arange(self.n_frames, dtype=np.int64)

    def frames(self) -> Iterator[TrajectoryFrame]:
        """Yield TrajectoryFrame records in emission order."""
        for f in range(self.n_frames):
            yield TrajectoryFrame(self.particle, f, float(self.x[f]), float(self.y[f]))

    def to_structured_array(self) -> np.ndarray:
        rows = np.zeros(self.n_frames, dtype=TRAJECTORY_DTYPE)
        rows['particle'] = self.particle
        rows['frame'] = self.frame_indices
        rows['x'] = self.x
        rows['y'] = self.y
        return rows


class TrajectorySynthesizer:
    """
    Builds the frame sequence of a scattered particle.

    Usage:
        synth = TrajectorySynthesizer(SimulationParameters())
        traj = synth.synthesize(particle)
    """

    def __init__(self, params: SimulationParameters = SimulationParameters()):
        self.params = params
        # Shared by every particle
        self._pre_x = pre_foil_positions(params.start_x, params.foil_x,
                                         params.frames_before)

    def synthesize(self, particle: Particle) -> Trajectory:
        p = self.params
        n_pre = p.frames_before

        xs = np.empty(n_pre + p.frames_after, dtype=np.float64)
        ys = np.empty(n_pre + p.frames_after, dtype=np.float64)
        xs[:n_pre] = self._pre_x
        ys[:n_pre] = particle.y0

        n_post, state = step_post_foil(
            p.foil_x, particle.y0, particle.vx, particle.vy, p.frame_dt,
            p.frames_after, p.exit_x, p.escape_y, xs[n_pre:], ys[n_pre:]
        )

        n_total = n_pre + n_post
        return Trajectory(particle=particle.index, x=xs[:n_total], y=ys[:n_total],
                          n_pre=n_pre, termination=TerminationState(state))
