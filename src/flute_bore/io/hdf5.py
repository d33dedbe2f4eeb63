"""HDF5 output format for impedance spectra.

Stores the input-impedance curve of a bore design together with the
geometry that produced it and, optionally, the design script, so a spectrum
file is self-describing and reproducible.

Layout:
    /metadata            attrs: created_at, package_version, script_hash,
                         script_content, resonance_hz (if found)
    /geometry            attrs: length, bore_radius, wall_thickness
    /geometry/holes/*    datasets: position, radius, open
    /spectrum/*          datasets: frequency, impedance_real, impedance_imag
"""

import hashlib
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

import h5py
import numpy as np
from numpy.typing import ArrayLike, NDArray

if TYPE_CHECKING:
    from flute_bore.engine import FluteEngine


def write_impedance_spectrum(
    filename: str | Path,
    engine: "FluteEngine",
    frequencies: ArrayLike,
    script_content: str | None = None,
    resonance_hz: float | None = None,
    compression: str | None = "gzip",
) -> Path:
    """Evaluate and store the impedance spectrum of ``engine``.

    Args:
        filename: Output file path
        engine: Engine whose current geometry is evaluated
        frequencies: Frequency grid in Hz
        script_content: Source script for reproducibility
        resonance_hz: Predicted pitch to record alongside the curve
        compression: Dataset compression ('gzip', 'lzf', None)

    Returns:
        Path of the written file
    """
    filename = Path(filename)
    filename.parent.mkdir(parents=True, exist_ok=True)
    freqs, impedance = engine.impedance_spectrum(frequencies)
    tube = engine.tube

    with h5py.File(filename, "w") as f:
        meta = f.create_group("metadata")
        meta.attrs["created_at"] = datetime.now(timezone.utc).isoformat()
        meta.attrs["package_version"] = _package_version()
        if script_content:
            meta.attrs["script_hash"] = hashlib.sha256(script_content.encode()).hexdigest()
            meta.attrs["script_content"] = script_content
        if resonance_hz is not None:
            meta.attrs["resonance_hz"] = float(resonance_hz)

        geometry = f.create_group("geometry")
        geometry.attrs["length"] = tube.length
        geometry.attrs["bore_radius"] = tube.bore_radius
        geometry.attrs["wall_thickness"] = tube.wall_thickness
        geometry.attrs["units"] = "cm"

        holes = geometry.create_group("holes")
        hole_list = engine.holes
        holes.create_dataset(
            "position", data=np.array([h.position for h in hole_list], dtype=np.float64)
        )
        holes.create_dataset(
            "radius", data=np.array([h.radius for h in hole_list], dtype=np.float64)
        )
        holes.create_dataset("open", data=np.array([h.open for h in hole_list], dtype=np.bool_))

        spectrum = f.create_group("spectrum")
        for name, data in (
            ("frequency", freqs),
            ("impedance_real", impedance.real),
            ("impedance_imag", impedance.imag),
        ):
            spectrum.create_dataset(name, data=data, compression=compression)
        spectrum["frequency"].attrs["units"] = "Hz"
        spectrum.attrs["embouchure"] = engine.embouchure is not None

    return filename


def read_impedance_spectrum(filename: str | Path) -> dict[str, Any]:
    """Load a spectrum file written by :func:`write_impedance_spectrum`.

    Returns:
        Dict with keys "metadata", "geometry", "holes", "frequency" and
        "impedance" (complex array)
    """
    with h5py.File(filename, "r") as f:
        holes = f["geometry/holes"]
        impedance: NDArray[np.complexfloating] = (
            f["spectrum/impedance_real"][:] + 1j * f["spectrum/impedance_imag"][:]
        )
        return {
            "metadata": dict(f["metadata"].attrs),
            "geometry": dict(f["geometry"].attrs),
            "holes": {
                "position": holes["position"][:],
                "radius": holes["radius"][:],
                "open": holes["open"][:].astype(bool),
            },
            "frequency": f["spectrum/frequency"][:],
            "impedance": impedance,
        }


def _package_version() -> str:
    from flute_bore import __version__

    return __version__
