"""
Command-line entry point: run a simulation and write the CSV tables.

    rutherford-mc --n-particles 2500 --seed 42 --output-dir results/
"""

import argparse
import sys
import numpy as np
from pathlib import Path

from rutherford_mc.core.constants import DEFAULT_CONSTANTS
from rutherford_mc.core.parameters import SimulationParameters, load_config
from rutherford_mc.io.csv_writer import CSVWriter, OutputError
from rutherford_mc.transport.engine import RutherfordSimulation


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='rutherford-mc',
        description='Monte Carlo simulation of Rutherford scattering.',
    )
    parser.add_argument('--config', type=Path, default=None,
                        help='YAML configuration file')
    parser.add_argument('--n-particles', type=int, default=None,
                        help='Number of particles (overrides config)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed (default: fresh entropy)')
    parser.add_argument('--output-dir', type=Path, default=Path('.'),
                        help='Directory for trajectories.csv and angles.csv')
    parser.add_argument('--processes', type=int, default=1,
                        help='Worker processes (1 = serial, streamed output)')
    parser.add_argument('--hdf5', type=Path, default=None,
                        help='Also save the run to this HDF5 file')
    parser.add_argument('--plot', type=Path, default=None,
                        help='Save trajectory and angle plots with this file stem')
    parser.add_argument('--bins', type=int, default=36,
                        help='Angle histogram bins for --plot')
    parser.add_argument('--progress', action='store_true',
                        help='Show a progress bar')
    parser.add_argument('--quiet', action='store_true',
                        help='Suppress progress output')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.config is not None:
        params, constants = load_config(args.config)
    else:
        params, constants = SimulationParameters(), DEFAULT_CONSTANTS

    if args.n_particles is not None:
        params = params.with_options(n_particles=args.n_particles)

    sim = RutherfordSimulation(params, constants)
    verbose = not args.quiet
    need_result = args.processes > 1 or args.hdf5 is not None or args.plot is not None

    writer = CSVWriter(args.output_dir)
    try:
        writer.open()
    except OutputError as e:
        print("Cannot open output files.", file=sys.stderr)
        print(f"  {e}", file=sys.stderr)
        return 1

    try:
        if not need_result:
            rng = np.random.default_rng(args.seed)
            for particle, trajectory in sim.iter_particles(params.n_particles, rng,
                                                           progress=args.progress):
                writer.write_particle(particle, trajectory)
            result = None
        elif args.processes > 1:
            result = sim.run_parallel(seed=args.seed, n_processes=args.processes,
                                      verbose=verbose)
            writer.write_result(result)
        else:
            result = sim.run(seed=args.seed, verbose=verbose, progress=args.progress)
            writer.write_result(result)
    finally:
        writer.close()

    if args.hdf5 is not None:
        from rutherford_mc.io.hdf5_writer import write_hdf5
        try:
            write_hdf5(result, args.hdf5)
        except OutputError as e:
            print(f"Cannot open output file: {e}", file=sys.stderr)
            return 1

    if args.plot is not None:
        import matplotlib
        matplotlib.use('Agg')
        from rutherford_mc.visualization.plots import plot_trajectories, plot_angle_distribution
        stem = str(args.plot.with_suffix(''))
        plot_trajectories(result, save_path=f"{stem}_trajectories.png")
        plot_angle_distribution(result, bins=args.bins, save_path=f"{stem}_angles.png")

    print(f"Wrote {writer.trajectory_path.name} and {writer.angle_path.name}  "
          f"(particles: {params.n_particles})")
    print(f"Parameters: E(MeV)={params.energy_MeV:g}  bmax(m)={params.b_max:g}  "
          f"v0(m/s)={sim.v0:g}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
