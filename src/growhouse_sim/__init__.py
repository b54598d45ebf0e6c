"""growhouse-sim: minute-by-minute greenhouse crop and climate simulation."""

__version__ = "0.1.0"
