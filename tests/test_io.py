import numpy as np
import pytest

from rutherford_mc.core.particle import AngleRecord, TrajectoryFrame
from rutherford_mc.io.csv_writer import (
    CSVWriter,
    OutputError,
    format_angle_row,
    format_trajectory_row,
    write_csv,
)
from rutherford_mc.io.hdf5_writer import read_hdf5, write_hdf5


def test_trajectory_row_format():
    row = format_trajectory_row(TrajectoryFrame(0, 0, -6e-14, 1e-10))
    assert row == "0,0,-6.000000e-14,1.000000e-10\n"

    row = format_trajectory_row(TrajectoryFrame(12, 220, 1.5531e-10, -0.0))
    assert row == "12,220,1.553100e-10,-0.000000e+00\n"


def test_angle_row_format():
    assert format_angle_row(AngleRecord(3, 12.5)) == "3,12.50000000\n"
    assert format_angle_row(AngleRecord(0, 180.0)) == "0,180.00000000\n"
    assert format_angle_row(AngleRecord(7, 0.026071234567)) == "7,0.02607123\n"


def test_non_finite_values_are_written():
    assert format_angle_row(AngleRecord(1, float('nan'))) == "1,nan\n"
    assert format_trajectory_row(TrajectoryFrame(1, 2, float('inf'), 0.0)) == "1,2,inf,0.000000e+00\n"


def test_write_csv_tables(result, params, tmp_path):
    traj_path, ang_path = write_csv(result, tmp_path)

    traj_lines = traj_path.read_text().splitlines()
    ang_lines = ang_path.read_text().splitlines()

    assert traj_lines[0] == "particle,frame,x_m,y_m"
    assert ang_lines[0] == "particle,theta_deg"
    assert len(ang_lines) == params.n_particles + 1
    assert len(traj_lines) == len(result.trajectories) + 1

    first = traj_lines[1].split(',')
    assert first[:2] == ['0', '0']
    assert float(first[2]) == params.start_x

    particle, theta = ang_lines[1].split(',')
    assert particle == '0'
    assert len(theta.split('.')[1]) == 8
    assert float(theta) == pytest.approx(result.theta_deg[0], abs=1e-8)


def test_writer_counts(result, tmp_path):
    with CSVWriter(tmp_path) as writer:
        writer.write_result(result)
    assert writer.n_angles == result.n_particles
    assert writer.n_frames == len(result.trajectories)


def test_unwritable_sink_raises_output_error(tmp_path):
    writer = CSVWriter(tmp_path / 'does' / 'not' / 'exist')
    with pytest.raises(OutputError, match="Cannot open output files"):
        writer.open()
    assert isinstance(OutputError("x"), OSError)


def test_hdf5_round_trip(result, tmp_path):
    path = write_hdf5(result, tmp_path / 'run.h5')
    loaded = read_hdf5(path)

    assert loaded.params == result.params
    assert loaded.constants == result.constants
    assert loaded.seed == result.seed
    np.testing.assert_array_equal(loaded.particles, result.particles)
    np.testing.assert_array_equal(loaded.trajectories, result.trajectories)
    np.testing.assert_array_equal(loaded.angles, result.angles)


def test_hdf5_unwritable_path(result, tmp_path):
    with pytest.raises(OutputError):
        write_hdf5(result, tmp_path / 'missing' / 'run.h5')
