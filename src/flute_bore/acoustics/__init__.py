"""Transfer-matrix acoustics of a bore with tone holes."""

from flute_bore.acoustics.cascade import (
    chain_matrix,
    foot_impedance,
    impedance_spectrum,
    input_impedance,
)
from flute_bore.acoustics.embouchure import Embouchure
from flute_bore.acoustics.holes import (
    HOLE_RADIUS_LIMIT,
    hole_shunt_impedance,
    inner_end_correction,
    outer_end_correction,
)
from flute_bore.acoustics.losses import (
    AIR_DENSITY,
    MIN_RADIUS,
    SPEED_OF_SOUND,
    characteristic_impedance,
    radiation_impedance,
    wavenumber,
)
from flute_bore.acoustics.resonance import Resonance, ResonanceSearch, find_resonance
from flute_bore.acoustics.topology import (
    BoreSegment,
    HoleJunction,
    Topology,
    build_topology,
)
from flute_bore.acoustics.transfer import apply_load, segment_matrix, shunt_matrix

__all__ = [
    # Constants
    "SPEED_OF_SOUND",
    "AIR_DENSITY",
    "MIN_RADIUS",
    "HOLE_RADIUS_LIMIT",
    # Duct physics
    "wavenumber",
    "characteristic_impedance",
    "radiation_impedance",
    "segment_matrix",
    "shunt_matrix",
    "apply_load",
    # Tone holes
    "hole_shunt_impedance",
    "inner_end_correction",
    "outer_end_correction",
    "Embouchure",
    # Topology and cascade
    "BoreSegment",
    "HoleJunction",
    "Topology",
    "build_topology",
    "input_impedance",
    "foot_impedance",
    "chain_matrix",
    "impedance_spectrum",
    # Resonance search
    "ResonanceSearch",
    "Resonance",
    "find_resonance",
]
