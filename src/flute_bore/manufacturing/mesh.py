"""
Closed triangle mesh of the tube wall with tone-hole cutouts.

The tube lies along +x from the excitation end; tone holes are drilled along
+z (the top of the tube). The wall is built as a structured revolution grid:

- Axial stations at the tube ends and at cosine-spaced slices across every
  hole footprint.
- Angular stations uniform around the circumference, except inside the
  sector spanned by the holes where each station sits exactly on a hole
  edge. Inner and outer surfaces use their own edge angles so the cutouts
  are straight cylinders rather than radial wedges.

A grid cell whose axial band lies inside a hole footprint and whose angular
span lies inside the hole chord is removed from both surfaces. Every edge
between a kept cell and a removed cell (or a tube end) gets a wall quad
joining the inner and outer surfaces, which keeps the solid closed and
manifold. Quads are split into triangles with outward-facing winding.

The construction only iterates over ordered arrays, so identical input
yields identical vertex and face ordering.

Example:
    >>> tube = TubeParameters(length=60.0, bore_radius=0.95, wall_thickness=0.4)
    >>> mesh = generate_tube_mesh(tube, [Hole(30.0, 0.35)])
    >>> mesh.is_watertight
    True
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from flute_bore.acoustics.embouchure import Embouchure
from flute_bore.acoustics.holes import clamp_hole_radius
from flute_bore.geometry.bore import Hole, HoleSet, TubeParameters

# Decimal places used to merge coincident stations and equal chord widths
_MERGE_DECIMALS = 9


@dataclass(frozen=True)
class TubeMesh:
    """Indexed triangle mesh.

    Attributes:
        vertices: (N, 3) float64 vertex coordinates in cm
        faces: (M, 3) int64 zero-based vertex indices, counter-clockwise
            seen from outside the solid
        groups: Ordered (name, first_face, end_face) ranges into ``faces``
    """

    vertices: NDArray[np.float64]
    faces: NDArray[np.int64]
    groups: tuple[tuple[str, int, int], ...]

    @property
    def num_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def num_faces(self) -> int:
        return int(self.faces.shape[0])

    @property
    def euler_characteristic(self) -> int:
        """V - E + F of the surface."""
        edges = np.sort(self._directed_edges(), axis=1)
        num_edges = np.unique(edges, axis=0).shape[0]
        return self.num_vertices - num_edges + self.num_faces

    @property
    def is_watertight(self) -> bool:
        """True if every edge is shared by exactly two consistently wound faces."""
        if self.num_faces == 0:
            return False
        edges = self._directed_edges()
        _, counts = np.unique(edges, axis=0, return_counts=True)
        if np.any(counts != 1):
            return False
        forward = {(int(a), int(b)) for a, b in edges}
        return all((b, a) in forward for a, b in forward)

    @property
    def volume(self) -> float:
        """Signed enclosed volume (positive for outward winding), cm³."""
        tri = self.vertices[self.faces]
        return float(np.sum(np.einsum("ij,ij->i", tri[:, 0], np.cross(tri[:, 1], tri[:, 2]))) / 6.0)

    def group_faces(self, name: str) -> NDArray[np.int64]:
        """Faces belonging to one named group."""
        for group, start, stop in self.groups:
            if group == name:
                return self.faces[start:stop]
        raise KeyError(f"Unknown face group '{name}'. Available: {[g[0] for g in self.groups]}")

    def _directed_edges(self) -> NDArray[np.int64]:
        f = self.faces
        return np.concatenate([f[:, [0, 1]], f[:, [1, 2]], f[:, [2, 0]]])


def _merge_sorted(values: Iterable[float]) -> NDArray[np.float64]:
    return np.unique(np.round(np.asarray(list(values), dtype=np.float64), _MERGE_DECIMALS))


def _cutouts(
    tube: TubeParameters,
    holes: HoleSet | Iterable[Hole],
    embouchure: Embouchure | None,
) -> list[tuple[float, float]]:
    if isinstance(holes, HoleSet):
        pairs = zip(holes.positions.tolist(), holes.radii.tolist())
    else:
        pairs = ((h.position, h.radius) for h in holes)
    cutouts = [(float(x), clamp_hole_radius(r, tube.bore_radius)) for x, r in pairs]
    if embouchure is not None:
        cutouts.append((0.0, clamp_hole_radius(embouchure.hole_radius, tube.bore_radius)))
    return cutouts


def _axial_stations(
    x_start: float, x_end: float, cutouts: list[tuple[float, float]], hole_slices: int
) -> NDArray[np.float64]:
    k = np.arange(hole_slices + 1)
    stations = [x_start, x_end]
    for center, radius in cutouts:
        xs = center - radius * np.cos(np.pi * k / hole_slices)
        stations.extend(np.clip(xs, x_start, x_end).tolist())
    return _merge_sorted(stations)


def _band_widths(
    stations: NDArray[np.float64], cutouts: list[tuple[float, float]]
) -> NDArray[np.float64]:
    """Half chord width of the widest hole crossing each axial band (0 if none)."""
    mids = 0.5 * (stations[:-1] + stations[1:])
    widths = np.zeros_like(mids)
    for center, radius in cutouts:
        d = mids - center
        inside = np.abs(d) < radius
        chord = np.sqrt(np.maximum(radius**2 - d**2, 0.0))
        widths = np.where(inside, np.maximum(widths, chord), widths)
    return np.round(widths, _MERGE_DECIMALS)


def _angular_offsets(
    segments: int, chord_widths: NDArray[np.float64], radius: float, sector: float
) -> NDArray[np.float64]:
    """Station angles measured from the top (+z), ascending in [-π, π)."""
    base = 2 * np.pi * np.arange(segments) / segments - np.pi / 2
    base = np.sort(np.mod(base + np.pi, 2 * np.pi) - np.pi)
    if chord_widths.size == 0:
        return base
    margin = np.pi / segments
    edges = np.arcsin(chord_widths / radius)
    return np.concatenate([
        base[base < -sector - margin],
        -edges[::-1],
        edges,
        base[base > sector + margin],
    ])


def _ring_vertices(
    stations: NDArray[np.float64], offsets: NDArray[np.float64], radius: float
) -> NDArray[np.float64]:
    theta = np.pi / 2 + offsets
    x = np.repeat(stations, offsets.size)
    y = np.tile(radius * np.cos(theta), stations.size)
    z = np.tile(radius * np.sin(theta), stations.size)
    return np.stack([x, y, z], axis=1)


def generate_tube_mesh(
    tube: TubeParameters,
    holes: HoleSet | Iterable[Hole] = (),
    embouchure: Embouchure | None = None,
    segments: int = 64,
    hole_slices: int = 8,
) -> TubeMesh:
    """Build the closed wall solid of the tube with every hole cut through.

    Holes are cut whether or not they are open. With an embouchure the tube
    is extended upstream to the cork and a mouth hole is cut at x = 0.

    Args:
        tube: Tube dimensions
        holes: Hole collection (any order)
        embouchure: Optional head-joint geometry
        segments: Angular resolution of the plain wall
        hole_slices: Axial slices across each hole footprint

    Returns:
        TubeMesh with face groups "outer", "bore", "ends", "tone_holes"
    """
    if segments < 8:
        raise ValueError("segments must be >= 8")
    if hole_slices < 2:
        raise ValueError("hole_slices must be >= 2")

    x_start = -embouchure.cork_length if embouchure is not None else 0.0
    x_end = tube.length
    r_in = tube.bore_radius
    r_out = tube.outer_radius

    cutouts = _cutouts(tube, holes, embouchure)
    stations = _axial_stations(x_start, x_end, cutouts, hole_slices)
    band_width = _band_widths(stations, cutouts)
    chord_widths = np.unique(band_width[band_width > 0])

    sector = float(np.arcsin(chord_widths[-1] / r_in)) if chord_widths.size else 0.0
    inner_offsets = _angular_offsets(segments, chord_widths, r_in, sector)
    outer_offsets = _angular_offsets(segments, chord_widths, r_out, sector)

    n_bands = stations.size - 1
    n_cols = inner_offsets.size

    # Removed cells: the band's chord spans the stations ±edge[m], i.e.
    # 2m + 1 cells centred on the top of the tube
    removed = np.zeros((n_bands, n_cols), dtype=np.bool_)
    if chord_widths.size:
        n_left = int(np.count_nonzero(inner_offsets < -sector - np.pi / segments))
        n_widths = chord_widths.size
        for k in np.flatnonzero(band_width > 0):
            m = int(np.searchsorted(chord_widths, band_width[k]))
            first = n_left + n_widths - 1 - m
            removed[k, first:first + 2 * m + 1] = True

    ring = n_cols
    inner_base = (n_bands + 1) * ring

    def outer(k: int, j: int) -> int:
        return k * ring + j % ring

    def inner(k: int, j: int) -> int:
        return inner_base + k * ring + j % ring

    def wall(a: tuple[int, int], b: tuple[int, int]) -> list[int]:
        # Closes the outer edge a -> b against the matching inner edge
        return [outer(*b), outer(*a), inner(*a), inner(*b)]

    groups: dict[str, list[list[int]]] = {"outer": [], "bore": [], "ends": [], "tone_holes": []}
    for k in range(n_bands):
        for j in range(n_cols):
            if removed[k, j]:
                continue
            groups["outer"].append([outer(k, j), outer(k, j + 1), outer(k + 1, j + 1), outer(k + 1, j)])
            groups["bore"].append([inner(k, j), inner(k + 1, j), inner(k + 1, j + 1), inner(k, j + 1)])

            if k == 0:
                groups["ends"].append(wall((0, j), (0, j + 1)))
            elif removed[k - 1, j]:
                groups["tone_holes"].append(wall((k, j), (k, j + 1)))

            if k == n_bands - 1:
                groups["ends"].append(wall((k + 1, j + 1), (k + 1, j)))
            elif removed[k + 1, j]:
                groups["tone_holes"].append(wall((k + 1, j + 1), (k + 1, j)))

            if removed[k, (j - 1) % n_cols]:
                groups["tone_holes"].append(wall((k + 1, j), (k, j)))
            if removed[k, (j + 1) % n_cols]:
                groups["tone_holes"].append(wall((k, j + 1), (k + 1, j + 1)))

    grid = np.concatenate([
        _ring_vertices(stations, outer_offsets, r_out),
        _ring_vertices(stations, inner_offsets, r_in),
    ])

    triangles: list[list[int]] = []
    ranges: list[tuple[str, int, int]] = []
    for name, quads in groups.items():
        start = len(triangles)
        for a, b, c, d in quads:
            triangles.append([a, b, c])
            triangles.append([a, c, d])
        ranges.append((name, start, len(triangles)))

    faces = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    used, inverse = np.unique(faces, return_inverse=True)
    vertices = grid[used] + 0.0  # normalise -0.0
    return TubeMesh(
        vertices=vertices,
        faces=inverse.reshape(-1, 3).astype(np.int64),
        groups=tuple(ranges),
    )
