"""
Tests for tube mesh generation.

Tests cover:
- Closed, consistently oriented surfaces
- Topology (one tunnel per hole) via the Euler characteristic
- Exact volume of the plain tube
- Determinism and face groups
- Embouchure extension and mouth hole
"""

import numpy as np
import pytest

from flute_bore import Embouchure, Hole
from flute_bore.manufacturing.mesh import generate_tube_mesh

SIX_HOLES = [
    Hole(p, r)
    for p, r in zip([25.0, 28.0, 32.0, 36.0, 40.0, 45.0], [0.35, 0.35, 0.35, 0.35, 0.4, 0.4])
]


class TestPlainTube:
    """Test the mesh of a tube without holes."""

    def test_watertight_annulus(self, tube):
        mesh = generate_tube_mesh(tube, segments=64)
        assert mesh.is_watertight
        assert mesh.euler_characteristic == 0

    def test_element_counts(self, tube):
        mesh = generate_tube_mesh(tube, segments=64)
        # Two rings at each end, inner and outer
        assert mesh.num_vertices == 4 * 64
        # Outer, bore and two end caps, two triangles per quad
        assert mesh.num_faces == 8 * 64

    def test_exact_polygonal_volume(self, tube):
        n = 48
        mesh = generate_tube_mesh(tube, segments=n)
        area = 0.5 * n * np.sin(2 * np.pi / n) * (tube.outer_radius**2 - tube.bore_radius**2)
        assert mesh.volume == pytest.approx(tube.length * area, rel=1e-9)

    def test_vertices_on_surfaces(self, tube):
        mesh = generate_tube_mesh(tube, segments=32)
        radial = np.hypot(mesh.vertices[:, 1], mesh.vertices[:, 2])
        on_bore = np.isclose(radial, tube.bore_radius)
        on_outer = np.isclose(radial, tube.outer_radius)
        assert np.all(on_bore | on_outer)
        assert mesh.vertices[:, 0].min() == 0.0
        assert mesh.vertices[:, 0].max() == tube.length

    def test_tone_hole_group_empty(self, tube):
        mesh = generate_tube_mesh(tube, segments=32)
        assert mesh.group_faces("tone_holes").shape == (0, 3)
        assert mesh.group_faces("outer").shape == (64, 3)


class TestHoleCutouts:
    """Test meshes with tone holes cut through the wall."""

    def test_single_hole(self, tube):
        mesh = generate_tube_mesh(tube, [Hole(30.0, 0.35)], segments=48)
        assert mesh.is_watertight
        assert mesh.euler_characteristic == -2
        assert len(mesh.group_faces("tone_holes")) > 0

    def test_six_holes(self, tube):
        mesh = generate_tube_mesh(tube, SIX_HOLES, segments=64)
        assert mesh.is_watertight
        assert mesh.euler_characteristic == -12
        assert mesh.volume > 0

    def test_holes_remove_material(self, tube):
        plain = generate_tube_mesh(tube, segments=64)
        holed = generate_tube_mesh(tube, SIX_HOLES, segments=64)
        assert 0 < holed.volume < plain.volume

    def test_open_flag_ignored(self, tube):
        open_mesh = generate_tube_mesh(tube, SIX_HOLES, segments=32)
        closed_mesh = generate_tube_mesh(
            tube, [Hole(h.position, h.radius, open=False) for h in SIX_HOLES], segments=32
        )
        np.testing.assert_array_equal(open_mesh.vertices, closed_mesh.vertices)
        np.testing.assert_array_equal(open_mesh.faces, closed_mesh.faces)

    def test_hole_order_irrelevant(self, tube):
        forward = generate_tube_mesh(tube, SIX_HOLES, segments=32)
        backward = generate_tube_mesh(tube, SIX_HOLES[::-1], segments=32)
        np.testing.assert_array_equal(forward.vertices, backward.vertices)
        np.testing.assert_array_equal(forward.faces, backward.faces)

    def test_coincident_holes_form_one_tunnel(self, tube):
        mesh = generate_tube_mesh(tube, [Hole(30.0, 0.35), Hole(30.0, 0.35)], segments=32)
        assert mesh.is_watertight
        assert mesh.euler_characteristic == -2

    def test_oversized_hole_clamped(self, tube):
        mesh = generate_tube_mesh(tube, [Hole(30.0, 5.0)], segments=64)
        assert mesh.is_watertight
        assert mesh.euler_characteristic == -2

    def test_more_slices_more_vertices(self, tube):
        coarse = generate_tube_mesh(tube, [Hole(30.0, 0.35)], segments=32, hole_slices=4)
        fine = generate_tube_mesh(tube, [Hole(30.0, 0.35)], segments=32, hole_slices=12)
        assert fine.num_vertices > coarse.num_vertices
        assert fine.is_watertight

    def test_deterministic(self, tube):
        first = generate_tube_mesh(tube, SIX_HOLES, segments=32)
        second = generate_tube_mesh(tube, SIX_HOLES, segments=32)
        np.testing.assert_array_equal(first.vertices, second.vertices)
        np.testing.assert_array_equal(first.faces, second.faces)
        assert first.groups == second.groups

    def test_all_vertices_referenced(self, tube):
        mesh = generate_tube_mesh(tube, SIX_HOLES, segments=32)
        assert np.unique(mesh.faces).size == mesh.num_vertices
        assert mesh.faces.min() == 0


class TestEmbouchureMesh:
    """Test the head-joint extension."""

    def test_extends_to_cork(self, tube):
        mesh = generate_tube_mesh(tube, embouchure=Embouchure(cork_length=1.7), segments=32)
        assert mesh.vertices[:, 0].min() == pytest.approx(-1.7)
        assert mesh.vertices[:, 0].max() == tube.length

    def test_mouth_hole_cut(self, tube):
        mesh = generate_tube_mesh(tube, SIX_HOLES, embouchure=Embouchure(), segments=64)
        assert mesh.is_watertight
        assert mesh.euler_characteristic == -14


class TestValidation:
    """Test argument validation and group lookup."""

    def test_too_few_segments(self, tube):
        with pytest.raises(ValueError, match="segments"):
            generate_tube_mesh(tube, segments=4)

    def test_too_few_hole_slices(self, tube):
        with pytest.raises(ValueError, match="hole_slices"):
            generate_tube_mesh(tube, hole_slices=1)

    def test_unknown_group(self, tube):
        mesh = generate_tube_mesh(tube, segments=16)
        with pytest.raises(KeyError, match="Unknown face group"):
            mesh.group_faces("handles")
