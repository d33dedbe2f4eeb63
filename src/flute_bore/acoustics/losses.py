"""
Propagation in lossy cylindrical ducts.

Provides the complex wavenumber with viscothermal boundary-layer attenuation,
the characteristic impedance of a circular duct and the radiation impedance
of an unflanged open end.

Conventions:
    - CGS units (cm, g, s); frequency in Hz
    - Time dependence e^{+iωt}: an attenuating wave has k = ω/c - iα with α > 0

All functions broadcast over NumPy arrays of frequency.

References:
    - Benade, "Fundamentals of Musical Acoustics" (1976), ch. 21
    - Levine & Schwinger, "On the radiation of sound from an unflanged
      circular pipe", Phys. Rev. 73 (1948)
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

# Physical constants (air at ~25°C)
SPEED_OF_SOUND = 34500.0  # cm/s
AIR_DENSITY = 0.0012  # g/cm³

# α = VISCOTHERMAL_COEFFICIENT * √f / r; the constant is unit-independent
# because α scales as 1/r
VISCOTHERMAL_COEFFICIENT = 3.0e-5

# Smallest radius accepted by the duct formulas (cm)
MIN_RADIUS = 1e-6

# Levine-Schwinger low-frequency end correction of an unflanged pipe, δ/a
UNFLANGED_END_CORRECTION = 0.6133


def _radius(radius: float) -> float:
    return max(float(radius), MIN_RADIUS)


def attenuation(radius: float, frequency: ArrayLike) -> NDArray[np.floating]:
    """Viscothermal attenuation constant α in nepers/cm."""
    f = np.abs(np.asarray(frequency, dtype=np.float64))
    return VISCOTHERMAL_COEFFICIENT * np.sqrt(f) / _radius(radius)


def wavenumber(radius: float, frequency: ArrayLike) -> NDArray[np.complexfloating]:
    """Complex wavenumber of a cylindrical duct.

    Args:
        radius: Duct radius in cm (clamped to MIN_RADIUS)
        frequency: Frequency in Hz (scalar or array)

    Returns:
        k = 2πf/c - iα, same shape as ``frequency``
    """
    f = np.asarray(frequency, dtype=np.float64)
    k_real = 2 * np.pi * f / SPEED_OF_SOUND
    return k_real - 1j * attenuation(radius, f)


def characteristic_impedance(radius: float) -> float:
    """Characteristic acoustic impedance ρc/S of a circular duct."""
    r = _radius(radius)
    return AIR_DENSITY * SPEED_OF_SOUND / (np.pi * r**2)


def radiation_impedance(
    radius: float,
    frequency: ArrayLike,
    end_correction: float | None = None,
) -> NDArray[np.complexfloating]:
    """Low-frequency radiation impedance of an open duct end.

    Z_rad = Z0 * (¼(ka)² + i·k·δ)

    Args:
        radius: Radius of the opening in cm
        frequency: Frequency in Hz
        end_correction: Reactive end correction δ in cm. Defaults to the
            unflanged value 0.6133·a.

    Returns:
        Complex radiation impedance, same shape as ``frequency``
    """
    r = _radius(radius)
    if end_correction is None:
        end_correction = UNFLANGED_END_CORRECTION * r
    k = 2 * np.pi * np.asarray(frequency, dtype=np.float64) / SPEED_OF_SOUND
    ka = k * r
    return characteristic_impedance(r) * (0.25 * ka**2 + 1j * k * end_correction)
