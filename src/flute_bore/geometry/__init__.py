"""Bore geometry: tube dimensions and tone holes."""

from flute_bore.geometry.bore import Hole, HoleSet, TubeParameters

__all__ = [
    "TubeParameters",
    "Hole",
    "HoleSet",
]
