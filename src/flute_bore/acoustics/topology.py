"""
Bore topology: the tube partitioned into plain segments and hole junctions.

The topology is a value rebuilt from scratch for every evaluation. Holes may
be supplied in any order; they are sorted by position (stably, so coincident
holes keep their index order) and clamped into ``[0, length]``. Coincident
holes produce a zero-length segment between their junctions, so the elements
always alternate segment, junction, segment, ..., segment and tile
``[0, length]`` without gaps or overlaps.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from flute_bore.acoustics.holes import clamp_hole_radius, hole_shunt_impedance
from flute_bore.acoustics.transfer import segment_matrix
from flute_bore.geometry.bore import Hole, HoleSet, TubeParameters


@dataclass(frozen=True)
class BoreSegment:
    """Plain cylindrical section between two stations (cm)."""

    start: float
    end: float
    radius: float

    @property
    def length(self) -> float:
        return self.end - self.start

    def matrix(self, frequency: ArrayLike) -> NDArray[np.complexfloating]:
        """Transfer matrix of this segment."""
        return segment_matrix(self.length, self.radius, frequency)


@dataclass(frozen=True)
class HoleJunction:
    """A tone hole loading the bore at ``position``.

    Attributes:
        position: Clamped hole position (cm)
        hole_radius: Hole radius, clamped below the bore radius (cm)
        bore_radius: Main bore radius (cm)
        wall_thickness: Chimney height (cm)
        open: Whether the hole radiates
        index: Index of the hole in the caller's collection
    """

    position: float
    hole_radius: float
    bore_radius: float
    wall_thickness: float
    open: bool
    index: int

    def shunt_impedance(self, frequency: ArrayLike) -> NDArray[np.complexfloating] | None:
        """Shunt impedance of the hole, or None when it is closed."""
        if not self.open:
            return None
        return hole_shunt_impedance(
            self.hole_radius, self.bore_radius, self.wall_thickness, frequency
        )


@dataclass(frozen=True)
class Topology:
    """Ordered bore elements from the excitation end (0) to the foot (length)."""

    tube: TubeParameters
    elements: tuple[BoreSegment | HoleJunction, ...]

    def __iter__(self) -> Iterator[BoreSegment | HoleJunction]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    @property
    def segments(self) -> tuple[BoreSegment, ...]:
        return tuple(e for e in self.elements if isinstance(e, BoreSegment))

    @property
    def junctions(self) -> tuple[HoleJunction, ...]:
        return tuple(e for e in self.elements if isinstance(e, HoleJunction))

    @property
    def length(self) -> float:
        return self.tube.length


def _hole_arrays(
    holes: HoleSet | Iterable[Hole],
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.bool_]]:
    if isinstance(holes, HoleSet):
        return holes.positions, holes.radii, holes.open_flags
    holes = list(holes)
    return (
        np.array([h.position for h in holes], dtype=np.float64),
        np.array([h.radius for h in holes], dtype=np.float64),
        np.array([h.open for h in holes], dtype=np.bool_),
    )


def build_topology(tube: TubeParameters, holes: HoleSet | Iterable[Hole] = ()) -> Topology:
    """Partition the tube into segments and hole junctions.

    Args:
        tube: Tube dimensions
        holes: Hole collection in any order

    Returns:
        Topology spanning ``[0, tube.length]``
    """
    positions, radii, open_flags = _hole_arrays(holes)
    clamped = np.clip(positions, 0.0, tube.length)
    order = np.argsort(clamped, kind="stable")

    elements: list[BoreSegment | HoleJunction] = []
    current = 0.0
    for index in order:
        position = float(clamped[index])
        elements.append(BoreSegment(current, position, tube.bore_radius))
        elements.append(
            HoleJunction(
                position=position,
                hole_radius=clamp_hole_radius(radii[index], tube.bore_radius),
                bore_radius=tube.bore_radius,
                wall_thickness=tube.wall_thickness,
                open=bool(open_flags[index]),
                index=int(index),
            )
        )
        current = position
    elements.append(BoreSegment(current, tube.length, tube.bore_radius))

    return Topology(tube=tube, elements=tuple(elements))
