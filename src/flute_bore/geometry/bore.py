"""
Persistent bore geometry: tube dimensions and the tone-hole collection.

Classes:
    TubeParameters: Global tube dimensions (length, bore radius, wall)
    Hole: Value view of one tone hole
    HoleSet: Index-ordered hole storage backed by preallocated NumPy buffers

The hole collection keeps the caller's index order; spatial sorting happens in
:func:`flute_bore.acoustics.topology.build_topology` on every evaluation.
Every mutation validates its whole input before writing, so a rejected call
never leaves the collection partially updated.

All lengths are in centimetres.
"""

from __future__ import annotations

import math
import operator
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from flute_bore.exceptions import InvalidGeometry


def _require_positive(name: str, value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError) as err:
        raise InvalidGeometry(f"{name} must be a number, got {value!r}") from err
    if not math.isfinite(value) or value <= 0:
        raise InvalidGeometry(f"{name} must be positive and finite, got {value}")
    return value


@dataclass(frozen=True)
class TubeParameters:
    """Global tube dimensions.

    Attributes:
        length: Acoustic length from the excitation end to the open foot (cm)
        bore_radius: Inner radius of the bore (cm)
        wall_thickness: Wall thickness, also the tone-hole chimney height (cm)
    """

    length: float
    bore_radius: float
    wall_thickness: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "length", _require_positive("length", self.length))
        object.__setattr__(
            self, "bore_radius", _require_positive("bore_radius", self.bore_radius)
        )
        object.__setattr__(
            self, "wall_thickness", _require_positive("wall_thickness", self.wall_thickness)
        )

    @property
    def outer_radius(self) -> float:
        """Outer radius of the tube wall (cm)."""
        return self.bore_radius + self.wall_thickness


@dataclass(frozen=True)
class Hole:
    """One tone hole.

    Attributes:
        position: Distance of the hole centre from the excitation end (cm)
        radius: Hole radius (cm)
        open: Whether the hole is currently uncovered
    """

    position: float
    radius: float
    open: bool = True


class HoleSet:
    """Index-ordered hole collection stored as three parallel buffers.

    ``replace`` swaps the whole collection (reusing the buffers when the count
    is unchanged); ``update`` rewrites a single slot in place, which is the
    path used while a hole is being dragged.

    Example:
        >>> holes = HoleSet()
        >>> holes.replace([25.0, 28.0], [0.35, 0.35], [True, False])
        >>> holes.update(1, 28.5, 0.35, True)
        >>> holes[1]
        Hole(position=28.5, radius=0.35, open=True)
    """

    def __init__(self) -> None:
        self._positions: NDArray[np.float64] = np.zeros(0, dtype=np.float64)
        self._radii: NDArray[np.float64] = np.zeros(0, dtype=np.float64)
        self._open: NDArray[np.bool_] = np.zeros(0, dtype=np.bool_)

    def __len__(self) -> int:
        return self._positions.shape[0]

    def __getitem__(self, index: int) -> Hole:
        index = self._check_index(index)
        return Hole(
            position=float(self._positions[index]),
            radius=float(self._radii[index]),
            open=bool(self._open[index]),
        )

    def __iter__(self) -> Iterator[Hole]:
        for i in range(len(self)):
            yield self[i]

    def __repr__(self) -> str:
        return f"HoleSet({list(self)!r})"

    @property
    def positions(self) -> NDArray[np.float64]:
        """Read-only view of hole positions in index order."""
        view = self._positions.view()
        view.flags.writeable = False
        return view

    @property
    def radii(self) -> NDArray[np.float64]:
        """Read-only view of hole radii in index order."""
        view = self._radii.view()
        view.flags.writeable = False
        return view

    @property
    def open_flags(self) -> NDArray[np.bool_]:
        """Read-only view of open flags in index order."""
        view = self._open.view()
        view.flags.writeable = False
        return view

    def replace(
        self,
        positions: ArrayLike,
        radii: ArrayLike,
        open_flags: ArrayLike | Sequence[bool],
    ) -> None:
        """Replace the entire collection.

        Args:
            positions: Hole centre positions (cm)
            radii: Hole radii (cm), each positive
            open_flags: Truthy for open holes (bools or 0/1 integers)

        Raises:
            InvalidGeometry: If the arrays are not numeric, differ in length,
                are not 1-D, or contain non-finite positions or non-positive radii
        """
        try:
            pos = np.asarray(positions, dtype=np.float64)
            rad = np.asarray(radii, dtype=np.float64)
            flags = np.asarray(open_flags)
        except (TypeError, ValueError) as err:
            raise InvalidGeometry(f"hole arrays must be numeric sequences: {err}") from err

        if pos.ndim != 1 or rad.ndim != 1 or flags.ndim != 1:
            raise InvalidGeometry("positions, radii and open_flags must be 1-D sequences")
        if not (pos.shape[0] == rad.shape[0] == flags.shape[0]):
            raise InvalidGeometry(
                "positions, radii and open_flags must have equal length, got "
                f"{pos.shape[0]}, {rad.shape[0]}, {flags.shape[0]}"
            )
        if not np.all(np.isfinite(pos)):
            raise InvalidGeometry("hole positions must be finite")
        if not np.all(np.isfinite(rad)) or np.any(rad <= 0):
            raise InvalidGeometry("hole radii must be positive and finite")

        flags = flags.astype(np.bool_)
        if pos.shape[0] == len(self):
            self._positions[:] = pos
            self._radii[:] = rad
            self._open[:] = flags
        else:
            self._positions = pos.copy()
            self._radii = rad.copy()
            self._open = flags.copy()

    def update(self, index: int, position: float, radius: float, open: bool) -> None:
        """Rewrite one hole in place.

        Raises:
            InvalidGeometry: If the index is out of range or the values are invalid
        """
        index = self._check_index(index)
        try:
            position = float(position)
        except (TypeError, ValueError) as err:
            raise InvalidGeometry(f"position must be a number, got {position!r}") from err
        if not math.isfinite(position):
            raise InvalidGeometry(f"position must be finite, got {position}")
        radius = _require_positive("radius", radius)

        self._positions[index] = position
        self._radii[index] = radius
        self._open[index] = bool(open)

    def _check_index(self, index: int) -> int:
        try:
            index = operator.index(index)
        except TypeError as err:
            raise InvalidGeometry(f"hole index must be an integer, got {index!r}") from err
        if not 0 <= index < len(self):
            raise InvalidGeometry(f"hole index {index} out of range for {len(self)} holes")
        return index
