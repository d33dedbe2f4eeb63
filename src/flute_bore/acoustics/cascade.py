"""
Impedance cascade: input impedance of a bore topology.

The foot of the tube is terminated by the radiation impedance of an
unflanged pipe. Walking from the foot back to the excitation end, each plain
segment transforms the running impedance through its transfer matrix and
each open hole is combined with it in parallel. Closed holes are skipped.

Everything here is a pure function of ``(topology, frequency)``.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from flute_bore.acoustics.embouchure import Embouchure
from flute_bore.acoustics.losses import radiation_impedance
from flute_bore.acoustics.topology import BoreSegment, Topology
from flute_bore.acoustics.transfer import apply_load, identity_matrix, shunt_matrix


def foot_impedance(topology: Topology, frequency: ArrayLike) -> NDArray[np.complexfloating]:
    """Radiation load at the open foot of the bore."""
    return radiation_impedance(topology.tube.bore_radius, frequency)


def input_impedance(
    topology: Topology,
    frequency: ArrayLike,
    embouchure: Embouchure | None = None,
) -> NDArray[np.complexfloating]:
    """Input impedance at the excitation end.

    Args:
        topology: Bore topology from :func:`build_topology`
        frequency: Frequency in Hz (scalar or array)
        embouchure: Optional head-joint model combined in parallel at x = 0

    Returns:
        Complex impedance, same shape as ``frequency``
    """
    f = np.asarray(frequency, dtype=np.float64)
    z = foot_impedance(topology, f)

    for element in reversed(topology.elements):
        if isinstance(element, BoreSegment):
            if element.length > 0:
                z = apply_load(element.matrix(f), z)
            continue
        z_hole = element.shunt_impedance(f)
        if z_hole is not None:
            z = z * z_hole / (z + z_hole)

    if embouchure is not None:
        y_total = 1.0 / z + embouchure.admittance(topology.tube.bore_radius, f)
        z = 1.0 / y_total

    return z


def chain_matrix(topology: Topology, frequency: ArrayLike) -> NDArray[np.complexfloating]:
    """Product of all element matrices in bore order (excitation to foot).

    ``apply_load(chain_matrix(t, f), foot_impedance(t, f))`` equals
    ``input_impedance(t, f)`` up to rounding.
    """
    f = np.asarray(frequency, dtype=np.float64)
    total = identity_matrix(f)
    for element in topology.elements:
        if isinstance(element, BoreSegment):
            total = total @ element.matrix(f)
            continue
        z_hole = element.shunt_impedance(f)
        if z_hole is not None:
            total = total @ shunt_matrix(z_hole)
    return total


def impedance_spectrum(
    topology: Topology,
    frequencies: ArrayLike,
    embouchure: Embouchure | None = None,
) -> tuple[NDArray[np.floating], NDArray[np.complexfloating]]:
    """Evaluate the input impedance on a frequency grid.

    Returns:
        Tuple of (frequencies, impedance) arrays
    """
    f = np.atleast_1d(np.asarray(frequencies, dtype=np.float64))
    return f, input_impedance(topology, f, embouchure=embouchure)
