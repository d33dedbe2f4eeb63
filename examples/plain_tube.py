"""
Example: Plain Tube with Head Joint
===================================
An unperforated tube with the optional embouchure model enabled. The cork
cavity and mouth hole pull the resonance below the bare half-wavelength
estimate c / 2L.

Run with:
    flute-compute examples/plain_tube.py --stl tube.stl
"""

from flute_bore import Embouchure, FluteEngine

engine = FluteEngine(
    length=60.0,
    bore_radius=0.95,
    wall_thickness=0.4,
    embouchure=Embouchure(cork_length=1.7, hole_radius=0.5, chimney=0.5),
)

print(f"Half-wavelength estimate: {engine.default_guess:.2f} Hz")
