"""
HDF5 export of a full run (particles, frames, angles and parameters).

Layout:
    /particles      PARTICLE_DTYPE
    /trajectories   TRAJECTORY_DTYPE
    /angles         ANGLE_DTYPE
    attrs           simulation parameters, constants, seed
"""

import h5py
import numpy as np
from pathlib import Path
from typing import Union

from rutherford_mc.core.constants import PhysicalConstants
from rutherford_mc.core.parameters import SimulationParameters
from rutherford_mc.io.csv_writer import OutputError


def write_hdf5(result, path: Union[str, Path], compression: str = 'gzip') -> Path:
    """
    Save a SimulationResult to an HDF5 file.

    Raises:
        OutputError: if the file cannot be created
    """
    path = Path(path)
    try:
        f = h5py.File(path, 'w')
    except OSError as e:
        raise OutputError(f"Cannot open output file {path}: {e}") from e

    with f:
        for name, data in (('particles', result.particles),
                           ('trajectories', result.trajectories),
                           ('angles', result.angles)):
            # Empty datasets cannot be chunked
            f.create_dataset(name, data=data, compression=compression if len(data) else None)

        for name, value in result.params.to_dict().items():
            f.attrs[name] = value
        f.attrs['projectile_mass_u'] = result.constants.projectile_mass_u
        f.attrs['seed'] = -1 if result.seed is None else result.seed

    return path


def read_hdf5(path: Union[str, Path]):
    """
    Load a run saved by write_hdf5.

    Returns:
        SimulationResult
    """
    from rutherford_mc.transport.engine import SimulationResult

    with h5py.File(path, 'r') as f:
        particles = f['particles'][()]
        trajectories = f['trajectories'][()]
        attrs = dict(f.attrs)

    options = {name: attrs[name].item() if isinstance(attrs[name], np.generic) else attrs[name]
               for name in SimulationParameters.option_names() if name in attrs}
    params = SimulationParameters.from_dict(options)
    constants = PhysicalConstants(projectile_mass_u=float(attrs['projectile_mass_u']))
    seed = int(attrs['seed'])

    return SimulationResult(params, constants, particles, trajectories,
                            seed=None if seed < 0 else seed)
