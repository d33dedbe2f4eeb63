"""
Two-port transfer (ABCD) matrices.

A matrix relates pressure and volume flow at the input of an element to the
values at its output:

    [p_in]   [A  B] [p_out]
    [U_in] = [C  D] [U_out]

Matrices are NumPy arrays of shape ``(..., 2, 2)`` where the leading axes
follow the frequency array, so chains can be multiplied with ``@``.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from flute_bore.acoustics.losses import characteristic_impedance, wavenumber


def identity_matrix(frequency: ArrayLike) -> NDArray[np.complexfloating]:
    """Identity two-port broadcast over the frequency shape."""
    shape = np.shape(frequency)
    matrix = np.zeros(shape + (2, 2), dtype=np.complex128)
    matrix[..., 0, 0] = 1.0
    matrix[..., 1, 1] = 1.0
    return matrix


def segment_matrix(
    length: float, radius: float, frequency: ArrayLike
) -> NDArray[np.complexfloating]:
    """Transfer matrix of a lossy cylindrical segment.

    A = D = cos(kL), B = i·Z0·sin(kL), C = i·sin(kL)/Z0

    Args:
        length: Segment length in cm (0 gives the exact identity)
        radius: Segment radius in cm
        frequency: Frequency in Hz (scalar or array)

    Returns:
        Complex array of shape ``frequency.shape + (2, 2)``
    """
    if length == 0:
        return identity_matrix(frequency)

    z0 = characteristic_impedance(radius)
    kl = wavenumber(radius, frequency) * length
    cos_kl = np.cos(kl)
    sin_kl = np.sin(kl)

    matrix = np.empty(np.shape(kl) + (2, 2), dtype=np.complex128)
    matrix[..., 0, 0] = cos_kl
    matrix[..., 0, 1] = 1j * z0 * sin_kl
    matrix[..., 1, 0] = 1j * sin_kl / z0
    matrix[..., 1, 1] = cos_kl
    return matrix


def shunt_matrix(impedance: ArrayLike) -> NDArray[np.complexfloating]:
    """Transfer matrix of a side branch of impedance Zs in parallel."""
    zs = np.asarray(impedance, dtype=np.complex128)
    matrix = identity_matrix(zs)
    matrix[..., 1, 0] = 1.0 / zs
    return matrix


def apply_load(
    matrix: NDArray[np.complexfloating], load: ArrayLike
) -> NDArray[np.complexfloating]:
    """Input impedance of a two-port terminated by ``load``.

    Z_in = (A·Z_L + B) / (C·Z_L + D)
    """
    z_load = np.asarray(load, dtype=np.complex128)
    a = matrix[..., 0, 0]
    b = matrix[..., 0, 1]
    c = matrix[..., 1, 0]
    d = matrix[..., 1, 1]
    return (a * z_load + b) / (c * z_load + d)
