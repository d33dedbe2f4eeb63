"""
Embouchure (mouth-hole) region of a transverse flute.

Upstream of the acoustic origin the bore continues as a short closed cavity
up to the cork, and the player's jet drives the air column through the
embouchure hole. Both load the excitation end in parallel with the main
bore:

    Y_total = Y_bore + Y_cork + Y_mouth

The cork cavity is a closed stub (compliance-like, Y = i·tan(kL)/Z0); the
embouchure hole is a mass with radiation resistance whose effective length
is the chimney height plus an end correction of 1.5 hole radii.

References:
    - Benade, "Fundamentals of Musical Acoustics" (1976), ch. 22
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from flute_bore.acoustics.losses import (
    characteristic_impedance,
    radiation_impedance,
    wavenumber,
)
from flute_bore.exceptions import InvalidGeometry

MOUTH_END_CORRECTION = 1.5  # in hole radii


@dataclass(frozen=True)
class Embouchure:
    """Head-joint geometry around the excitation end.

    Attributes:
        cork_length: Distance from the embouchure centre to the cork (cm)
        hole_radius: Embouchure hole radius (cm)
        chimney: Height of the embouchure chimney / lip plate (cm)
    """

    cork_length: float = 1.7
    hole_radius: float = 0.5
    chimney: float = 0.5

    def __post_init__(self) -> None:
        for name in ("cork_length", "hole_radius", "chimney"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise InvalidGeometry(f"{name} must be positive and finite, got {value}")

    @property
    def mouth_effective_length(self) -> float:
        """Chimney height plus the embouchure end correction (cm)."""
        return self.chimney + MOUTH_END_CORRECTION * self.hole_radius

    def cork_admittance(
        self, bore_radius: float, frequency: ArrayLike
    ) -> NDArray[np.complexfloating]:
        """Admittance of the closed cavity between the embouchure and the cork."""
        k = wavenumber(bore_radius, frequency)
        return 1j * np.tan(k * self.cork_length) / characteristic_impedance(bore_radius)

    def mouth_admittance(self, frequency: ArrayLike) -> NDArray[np.complexfloating]:
        """Admittance of the embouchure hole radiating to the room."""
        z_mouth = radiation_impedance(
            self.hole_radius, frequency, end_correction=self.mouth_effective_length
        )
        return 1.0 / z_mouth

    def admittance(
        self, bore_radius: float, frequency: ArrayLike
    ) -> NDArray[np.complexfloating]:
        """Combined admittance added in parallel to the bore at the excitation end."""
        return self.cork_admittance(bore_radius, frequency) + self.mouth_admittance(frequency)
