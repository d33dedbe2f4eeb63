"""
Tests for bore geometry storage.

Tests cover:
- Tube dimension validation
- Hole collection replace/update semantics
- Atomic rejection of invalid mutations
- Read-only buffer views
"""

import math

import numpy as np
import pytest

from flute_bore import FluteBoreError, Hole, HoleSet, InvalidGeometry, TubeParameters


class TestTubeParameters:
    """Test tube dimension validation."""

    def test_valid_dimensions(self):
        tube = TubeParameters(length=60.0, bore_radius=0.95, wall_thickness=0.4)
        assert tube.length == 60.0
        assert tube.outer_radius == pytest.approx(1.35)

    def test_integers_are_coerced(self):
        tube = TubeParameters(60, 1, 1)
        assert isinstance(tube.length, float)

    @pytest.mark.parametrize(
        "length, bore_radius, wall_thickness",
        [
            (0.0, 0.95, 0.4),
            (-60.0, 0.95, 0.4),
            (60.0, 0.0, 0.4),
            (60.0, 0.95, -0.1),
            (math.nan, 0.95, 0.4),
            (60.0, math.inf, 0.4),
            ("long", 0.95, 0.4),
        ],
    )
    def test_invalid_dimensions_rejected(self, length, bore_radius, wall_thickness):
        with pytest.raises(InvalidGeometry):
            TubeParameters(length, bore_radius, wall_thickness)

    def test_invalid_geometry_is_value_error(self):
        """InvalidGeometry can be caught as ValueError or FluteBoreError."""
        assert issubclass(InvalidGeometry, ValueError)
        assert issubclass(InvalidGeometry, FluteBoreError)


class TestHoleSetReplace:
    """Test wholesale replacement of the hole collection."""

    def test_empty_by_default(self):
        holes = HoleSet()
        assert len(holes) == 0
        assert list(holes) == []

    def test_replace_keeps_index_order(self):
        holes = HoleSet()
        holes.replace([40.0, 25.0, 32.0], [0.4, 0.35, 0.3], [True, False, True])

        assert len(holes) == 3
        assert holes[0] == Hole(40.0, 0.4, True)
        assert holes[1] == Hole(25.0, 0.35, False)
        np.testing.assert_array_equal(holes.positions, [40.0, 25.0, 32.0])

    def test_integer_flags_accepted(self):
        holes = HoleSet()
        holes.replace([25.0, 28.0], [0.35, 0.35], [1, 0])
        np.testing.assert_array_equal(holes.open_flags, [True, False])

    def test_same_count_reuses_buffers(self):
        holes = HoleSet()
        holes.replace([25.0, 28.0], [0.35, 0.35], [True, True])
        before = holes.positions

        holes.replace([26.0, 29.0], [0.3, 0.3], [False, True])

        assert np.shares_memory(before, holes.positions)
        np.testing.assert_array_equal(holes.positions, [26.0, 29.0])

    def test_mismatched_lengths_rejected_atomically(self):
        holes = HoleSet()
        holes.replace([25.0, 28.0], [0.35, 0.35], [True, True])

        with pytest.raises(InvalidGeometry, match="equal length"):
            holes.replace([25.0, 28.0, 32.0], [0.35, 0.35], [True, True, True])

        assert list(holes) == [Hole(25.0, 0.35, True), Hole(28.0, 0.35, True)]

    @pytest.mark.parametrize(
        "positions, radii",
        [
            ([25.0, math.nan], [0.35, 0.35]),
            ([25.0, 28.0], [0.35, 0.0]),
            ([25.0, 28.0], [0.35, -0.2]),
            ([25.0, 28.0], [0.35, math.inf]),
        ],
    )
    def test_invalid_values_rejected(self, positions, radii):
        holes = HoleSet()
        with pytest.raises(InvalidGeometry):
            holes.replace(positions, radii, [True, True])
        assert len(holes) == 0

    def test_two_dimensional_input_rejected(self):
        holes = HoleSet()
        with pytest.raises(InvalidGeometry, match="1-D"):
            holes.replace([[25.0]], [[0.35]], [[True]])

    @pytest.mark.parametrize(
        "positions, radii",
        [
            (["a", 28.0], [0.35, 0.35]),
            ([25.0, 28.0], [0.35, None]),
            ([[25.0], [28.0, 32.0]], [0.35, 0.35]),
        ],
    )
    def test_non_numeric_input_rejected(self, positions, radii):
        holes = HoleSet()
        holes.replace([25.0], [0.35], [True])

        with pytest.raises(InvalidGeometry, match="numeric"):
            holes.replace(positions, radii, [True, True])

        assert list(holes) == [Hole(25.0, 0.35, True)]


class TestHoleSetUpdate:
    """Test single-hole updates (the drag path)."""

    @pytest.fixture
    def holes(self):
        holes = HoleSet()
        holes.replace([25.0, 28.0, 32.0], [0.35, 0.35, 0.35], [True, True, True])
        return holes

    def test_update_in_place(self, holes):
        before = holes.positions
        holes.update(1, 28.5, 0.4, False)

        assert holes[1] == Hole(28.5, 0.4, False)
        assert np.shares_memory(before, holes.positions)
        # Other holes untouched
        assert holes[0] == Hole(25.0, 0.35, True)
        assert holes[2] == Hole(32.0, 0.35, True)

    @pytest.mark.parametrize("index", [3, -1, 100])
    def test_index_out_of_range(self, holes, index):
        with pytest.raises(InvalidGeometry, match="out of range"):
            holes.update(index, 30.0, 0.35, True)

    def test_non_integer_index(self, holes):
        with pytest.raises(InvalidGeometry, match="integer"):
            holes.update(1.5, 30.0, 0.35, True)

    def test_invalid_radius_leaves_hole_unchanged(self, holes):
        with pytest.raises(InvalidGeometry):
            holes.update(0, 26.0, 0.0, True)
        assert holes[0] == Hole(25.0, 0.35, True)

    def test_non_finite_position(self, holes):
        with pytest.raises(InvalidGeometry, match="finite"):
            holes.update(0, math.inf, 0.35, True)

    def test_views_are_read_only(self, holes):
        with pytest.raises(ValueError):
            holes.positions[0] = 0.0
        with pytest.raises(ValueError):
            holes.open_flags[0] = False
