"""IO module: CSV tables and HDF5 export."""

from rutherford_mc.io.csv_writer import CSVWriter, OutputError, write_csv

__all__ = ["CSVWriter", "OutputError", "write_csv"]
