"""I/O for impedance spectra."""

from flute_bore.io.hdf5 import (
    read_impedance_spectrum,
    write_impedance_spectrum,
)

__all__ = [
    "write_impedance_spectrum",
    "read_impedance_spectrum",
]
