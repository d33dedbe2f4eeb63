"""Tests for two-port transfer matrices."""

import numpy as np

from flute_bore.acoustics.losses import characteristic_impedance, radiation_impedance
from flute_bore.acoustics.transfer import (
    apply_load,
    identity_matrix,
    segment_matrix,
    shunt_matrix,
)

FREQS = np.array([100.0, 440.0, 1234.5, 3000.0])


class TestSegmentMatrix:
    """Test cylindrical segment matrices."""

    def test_zero_length_is_exact_identity(self):
        m = segment_matrix(0.0, 0.95, FREQS)
        np.testing.assert_array_equal(m, identity_matrix(FREQS))

    def test_shape_follows_frequency(self):
        assert segment_matrix(10.0, 0.95, FREQS).shape == (4, 2, 2)
        assert segment_matrix(10.0, 0.95, 440.0).shape == (2, 2)

    def test_reciprocal(self):
        """AD - BC = 1 for a uniform duct."""
        m = segment_matrix(12.0, 0.95, FREQS)
        det = m[..., 0, 0] * m[..., 1, 1] - m[..., 0, 1] * m[..., 1, 0]
        np.testing.assert_allclose(det, 1.0, rtol=1e-10)

    def test_segments_compose(self):
        """Two adjacent pieces equal one segment of the combined length."""
        split = segment_matrix(7.0, 0.95, FREQS) @ segment_matrix(5.0, 0.95, FREQS)
        whole = segment_matrix(12.0, 0.95, FREQS)
        np.testing.assert_allclose(split, whole, rtol=1e-10, atol=1e-12)

    def test_matched_load_is_transparent(self):
        """A duct terminated by its characteristic impedance looks like Z0."""
        z0 = characteristic_impedance(0.95)
        z = apply_load(segment_matrix(30.0, 0.95, FREQS), z0)
        np.testing.assert_allclose(z, z0, rtol=1e-10)


class TestShuntAndLoad:
    """Test shunt matrices and load application."""

    def test_identity_returns_load(self):
        load = radiation_impedance(0.95, FREQS)
        np.testing.assert_allclose(apply_load(identity_matrix(FREQS), load), load)

    def test_shunt_is_parallel_combination(self):
        load = radiation_impedance(0.95, FREQS)
        zs = radiation_impedance(0.35, FREQS)
        expected = load * zs / (load + zs)
        np.testing.assert_allclose(apply_load(shunt_matrix(zs), load), expected, rtol=1e-12)
