"""
FluteEngine: the single-owner handle exposed to editors and scripts.

The engine owns the tube dimensions and the hole collection. Every pitch
query rebuilds the bore topology from that state, runs the impedance cascade
inside the resonance search and discards everything derived.

Threading:
    The engine holds no locks. Calls must be serialised by the host; a
    single UI thread does this naturally, a multi-threaded host has to wrap
    the engine in its own mutex.

Example:
    >>> engine = FluteEngine(length=60.0, bore_radius=0.95, wall_thickness=0.4)
    >>> engine.set_holes([25, 28, 32, 36, 40, 45],
    ...                  [0.35, 0.35, 0.35, 0.35, 0.4, 0.4],
    ...                  [True] * 6)
    >>> pitch = engine.calculate_pitch(440.0)
    >>> engine.update_hole(0, 25.5, 0.35, True)   # drag hot path
    >>> pitch = engine.calculate_pitch(pitch)
    >>> obj_text = engine.export_obj()
"""

from __future__ import annotations

import math
import warnings
from collections.abc import Sequence
from pathlib import Path

import numpy as np
from numpy.typing import ArrayLike, NDArray

from flute_bore.acoustics.cascade import impedance_spectrum, input_impedance
from flute_bore.acoustics.embouchure import Embouchure
from flute_bore.acoustics.losses import SPEED_OF_SOUND
from flute_bore.acoustics.resonance import Resonance, ResonanceSearch, find_resonance
from flute_bore.acoustics.topology import Topology, build_topology
from flute_bore.exceptions import NoResonanceFound
from flute_bore.geometry.bore import Hole, HoleSet, TubeParameters
from flute_bore.manufacturing.export import export_dxf_template, export_stl, to_obj
from flute_bore.manufacturing.mesh import TubeMesh, generate_tube_mesh


class FluteEngine:
    """Pitch prediction and mesh export for one bore design.

    Args:
        length: Tube length from the excitation end to the foot (cm)
        bore_radius: Bore radius (cm)
        wall_thickness: Wall thickness (cm)
        search: Resonance search tunables
        embouchure: Optional head-joint model; None treats the excitation
            end as a plain reference plane

    Raises:
        InvalidGeometry: If any dimension is not strictly positive
    """

    def __init__(
        self,
        length: float,
        bore_radius: float,
        wall_thickness: float,
        search: ResonanceSearch | None = None,
        embouchure: Embouchure | None = None,
    ):
        self._tube = TubeParameters(length, bore_radius, wall_thickness)
        self._holes = HoleSet()
        self.search = search if search is not None else ResonanceSearch()
        self._embouchure = embouchure

    def __repr__(self) -> str:
        t = self._tube
        return (
            f"FluteEngine(length={t.length}, bore_radius={t.bore_radius}, "
            f"wall_thickness={t.wall_thickness}, holes={len(self._holes)})"
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def tube(self) -> TubeParameters:
        return self._tube

    @property
    def holes(self) -> tuple[Hole, ...]:
        """Snapshot of the holes in index order."""
        return tuple(self._holes)

    @property
    def num_holes(self) -> int:
        return len(self._holes)

    @property
    def embouchure(self) -> Embouchure | None:
        return self._embouchure

    def set_physics_params(self, length: float, bore_radius: float, wall_thickness: float) -> None:
        """Replace the tube dimensions wholesale.

        Raises:
            InvalidGeometry: If any dimension is not strictly positive
        """
        self._tube = TubeParameters(length, bore_radius, wall_thickness)

    def set_holes(
        self,
        positions: ArrayLike,
        radii: ArrayLike,
        open_flags: ArrayLike | Sequence[bool],
    ) -> None:
        """Replace the entire hole collection.

        Raises:
            InvalidGeometry: If the arrays differ in length or hold invalid values
        """
        self._holes.replace(positions, radii, open_flags)

    def update_hole(self, index: int, position: float, radius: float, open: bool) -> None:
        """Rewrite one hole in place without reallocating the collection.

        Raises:
            InvalidGeometry: If ``index`` is out of range or the values are invalid
        """
        self._holes.update(index, position, radius, open)

    def set_embouchure(self, embouchure: Embouchure | None) -> None:
        """Enable (or with None disable) the head-joint model."""
        self._embouchure = embouchure

    # ------------------------------------------------------------------
    # Acoustics
    # ------------------------------------------------------------------

    def topology(self) -> Topology:
        """Fresh topology for the current geometry."""
        return build_topology(self._tube, self._holes)

    def input_impedance(self, frequency: ArrayLike) -> NDArray[np.complexfloating]:
        """Input impedance at the excitation end for the current geometry."""
        return input_impedance(self.topology(), frequency, embouchure=self._embouchure)

    def impedance_spectrum(
        self, frequencies: ArrayLike
    ) -> tuple[NDArray[np.floating], NDArray[np.complexfloating]]:
        """Input impedance on a frequency grid, as (frequencies, impedance)."""
        return impedance_spectrum(self.topology(), frequencies, embouchure=self._embouchure)

    @property
    def default_guess(self) -> float:
        """Half-wavelength estimate c / 2L used when no usable guess is given."""
        return SPEED_OF_SOUND / (2 * self._tube.length)

    def resonance(self, frequency_guess: float = 0.0) -> Resonance:
        """Run the resonance search and return the full result.

        Raises:
            NoResonanceFound: If no resonance exists in the search range
        """
        guess = float(frequency_guess)
        if not math.isfinite(guess) or guess <= 0:
            guess = self.default_guess

        topology = self.topology()
        embouchure = self._embouchure

        def impedance(frequency: ArrayLike) -> NDArray[np.complexfloating]:
            return input_impedance(topology, frequency, embouchure=embouchure)

        return find_resonance(impedance, guess, self.search)

    def calculate_pitch(self, frequency_guess: float = 0.0) -> float:
        """Predicted playing frequency in Hz.

        Args:
            frequency_guess: Previous pitch or any estimate; values <= 0 or
                non-finite fall back to :attr:`default_guess`

        Raises:
            NoResonanceFound: If no resonance exists in the search range
        """
        return self.resonance(frequency_guess).frequency

    def try_calculate_pitch(self, frequency_guess: float, previous: float) -> float:
        """Pitch, or ``previous`` with a warning when no resonance is found."""
        try:
            return self.calculate_pitch(frequency_guess)
        except NoResonanceFound as err:
            warnings.warn(
                f"{err}; keeping previous pitch {previous:.2f} Hz",
                UserWarning,
                stacklevel=2,
            )
            return previous

    # ------------------------------------------------------------------
    # Manufacturing
    # ------------------------------------------------------------------

    def mesh(self, segments: int = 64, hole_slices: int = 8) -> TubeMesh:
        """Closed wall mesh with every hole cut, open or not."""
        return generate_tube_mesh(
            self._tube,
            self._holes,
            embouchure=self._embouchure,
            segments=segments,
            hole_slices=hole_slices,
        )

    def export_obj(self, name: str = "FluteProject", segments: int = 64) -> str:
        """OBJ text of the wall mesh."""
        return to_obj(self.mesh(segments=segments), name=name)

    def export_stl(self, path: Path, segments: int = 64) -> Path:
        """Write the wall mesh as binary STL."""
        return export_stl(self.mesh(segments=segments), path)

    def export_dxf_template(self, path: Path) -> Path:
        """Write a DXF drilling template of the holes."""
        return export_dxf_template(self._tube, self._holes, path)
