"""
CSV output: trajectories.csv and angles.csv.

Number formatting is fixed so that existing
consumers keep working:
    - trajectories: x_m, y_m in scientific notation, 6 fractional digits
    - angles: theta_deg in fixed notation, 8 decimals
"""

from pathlib import Path
from typing import Iterable, Union

from rutherford_mc.core.particle import AngleRecord, Particle, TrajectoryFrame

TRAJECTORY_FILENAME = 'trajectories.csv'
ANGLE_FILENAME = 'angles.csv'

TRAJECTORY_HEADER = 'particle,frame,x_m,y_m\n'
ANGLE_HEADER = 'particle,theta_deg\n'


class OutputError(OSError):
    """Output files could not be created."""


def format_trajectory_row(frame: TrajectoryFrame) -> str:
    return f"{frame.particle},{frame.frame},{frame.x:e},{frame.y:e}\n"


def format_angle_row(record: AngleRecord) -> str:
    return f"{record.particle},{record.theta_deg:.8f}\n"


class CSVWriter:
    """
    Writes trajectory frames and angle records to the two CSV tables.

    Both files are created (and headers written) when the writer opens;
    records are appended in the order they are received.

    Usage:
        with CSVWriter('out') as writer:
            for particle, trajectory in sim.iter_particles(n, rng):
                writer.write_particle(particle, trajectory)
    """

    def __init__(self, output_dir: Union[str, Path] = '.',
                 trajectory_name: str = TRAJECTORY_FILENAME,
                 angle_name: str = ANGLE_FILENAME):
        self.output_dir = Path(output_dir)
        self.trajectory_path = self.output_dir / trajectory_name
        self.angle_path = self.output_dir / angle_name
        self._traj = None
        self._angs = None
        self.n_frames = 0
        self.n_angles = 0

    def open(self):
        """
        Create both files and write the headers.

        Raises:
            OutputError: if either file cannot be opened
        """
        try:
            self._traj = open(self.trajectory_path, 'w', newline='')
            self._angs = open(self.angle_path, 'w', newline='')
        except OSError as e:
            self.close()
            raise OutputError(f"Cannot open output files in {self.output_dir}: {e}") from e

        self._traj.write(TRAJECTORY_HEADER)
        self._angs.write(ANGLE_HEADER)
        return self

    def close(self):
        for f in (self._traj, self._angs):
            if f is not None:
                f.close()
        self._traj = None
        self._angs = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def write_angle(self, record: AngleRecord):
        self._angs.write(format_angle_row(record))
        self.n_angles += 1

    def write_frames(self, frames: Iterable[TrajectoryFrame]):
        for frame in frames:
            self._traj.write(format_trajectory_row(frame))
            self.n_frames += 1

    def write_particle(self, particle: Particle, trajectory):
        """Angle record first, then the particle's frames."""
        self.write_angle(particle.angle_record())
        self.write_frames(trajectory.frames())

    def write_result(self, result):
        """Write a finished SimulationResult."""
        for record in result.angle_records():
            self.write_angle(record)
        self.write_frames(result.trajectory_frames())


def write_csv(result, output_dir: Union[str, Path] = '.') -> tuple:
    """
    Write a SimulationResult to trajectories.csv and angles.csv.

    Returns:
        (trajectory_path, angle_path)
    """
    with CSVWriter(output_dir) as writer:
        writer.write_result(result)
    return writer.trajectory_path, writer.angle_path
