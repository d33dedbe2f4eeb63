"""
Tone-hole side-branch model.

An open tone hole is treated as a short duct (the chimney through the wall)
lengthened by an inner end correction, terminated by the radiation impedance
of its outer opening. Its input impedance is the shunt impedance loading the
main bore at the hole position. Closed holes are not modelled as a side
branch at all.

Example:
    >>> zs = hole_shunt_impedance(0.35, 0.95, 0.4, 440.0)
    >>> zs.imag > 0  # mass-like at low frequency
    True

References:
    - Dalmont et al., "Experimental determination of the equivalent circuit
      of an open side hole", J. Acoust. Soc. Am. 111 (2002)
    - Keefe, "Theory of the single woodwind tone hole", JASA 72 (1982)
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from flute_bore.acoustics.losses import radiation_impedance
from flute_bore.acoustics.transfer import apply_load, segment_matrix

# Hole radii are kept below this fraction of the bore radius; the inner end
# correction is only fitted for δ = r_h/r_b < 1
HOLE_RADIUS_LIMIT = 0.99


def clamp_hole_radius(hole_radius: float, bore_radius: float) -> float:
    """Limit a hole radius to HOLE_RADIUS_LIMIT times the bore radius."""
    return min(float(hole_radius), HOLE_RADIUS_LIMIT * float(bore_radius))


def inner_end_correction(hole_radius: float, bore_radius: float) -> float:
    """Inner end correction t_i of an open side hole (cm)."""
    rh = clamp_hole_radius(hole_radius, bore_radius)
    delta = rh / bore_radius
    return rh * (
        0.82 - 0.193 * delta - 1.09 * delta**2 + 1.27 * delta**3 - 0.71 * delta**4
    )


def outer_end_correction(
    hole_radius: float, bore_radius: float, wall_thickness: float
) -> float:
    """Outer (radiation) end correction t_o of a hole in a pipe wall (cm)."""
    rh = clamp_hole_radius(hole_radius, bore_radius)
    outer_radius = bore_radius + wall_thickness
    return rh * (0.82 - 0.47 * (rh / outer_radius) ** 0.8)


def chimney_length(hole_radius: float, bore_radius: float, wall_thickness: float) -> float:
    """Wall thickness plus inner end correction: the duct length of the hole."""
    return wall_thickness + inner_end_correction(hole_radius, bore_radius)


def hole_shunt_impedance(
    hole_radius: float,
    bore_radius: float,
    wall_thickness: float,
    frequency: ArrayLike,
) -> NDArray[np.complexfloating]:
    """Shunt impedance of an open tone hole seen from the main bore.

    Args:
        hole_radius: Hole radius in cm (clamped below the bore radius)
        bore_radius: Main bore radius in cm
        wall_thickness: Chimney height in cm
        frequency: Frequency in Hz (scalar or array)

    Returns:
        Complex shunt impedance, same shape as ``frequency``
    """
    rh = clamp_hole_radius(hole_radius, bore_radius)
    chimney = segment_matrix(
        chimney_length(rh, bore_radius, wall_thickness), rh, frequency
    )
    z_rad = radiation_impedance(
        rh,
        frequency,
        end_correction=outer_end_correction(rh, bore_radius, wall_thickness),
    )
    return apply_load(chimney, z_rad)
