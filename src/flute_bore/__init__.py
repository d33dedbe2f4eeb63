"""
Flute Bore - pitch prediction and manufacturing export for flute-like tubes.

Main exports:
- FluteEngine: Single-owner handle for pitch queries and mesh export
- TubeParameters, Hole, HoleSet: Bore geometry
- Embouchure: Optional head-joint model
- ResonanceSearch, Resonance: Resonance search tunables and result
- TubeMesh: Closed wall mesh with the tone holes cut through
- FluteBoreError, InvalidGeometry, NoResonanceFound: Error types
"""

from flute_bore.acoustics import (
    Embouchure,
    Resonance,
    ResonanceSearch,
    build_topology,
    find_resonance,
    input_impedance,
)
from flute_bore.engine import FluteEngine
from flute_bore.exceptions import FluteBoreError, InvalidGeometry, NoResonanceFound
from flute_bore.geometry import Hole, HoleSet, TubeParameters
from flute_bore.logging_config import setup_logging
from flute_bore.manufacturing import TubeMesh, generate_tube_mesh, to_obj

# Submodules for more specific imports
from . import acoustics, geometry, io, manufacturing

__version__ = "0.1.0"

__all__ = [
    # Engine
    "FluteEngine",
    # Geometry
    "TubeParameters",
    "Hole",
    "HoleSet",
    # Acoustics
    "Embouchure",
    "ResonanceSearch",
    "Resonance",
    "build_topology",
    "input_impedance",
    "find_resonance",
    # Manufacturing
    "TubeMesh",
    "generate_tube_mesh",
    "to_obj",
    # Errors
    "FluteBoreError",
    "InvalidGeometry",
    "NoResonanceFound",
    # Logging
    "setup_logging",
    # Submodules
    "acoustics",
    "geometry",
    "io",
    "manufacturing",
]
