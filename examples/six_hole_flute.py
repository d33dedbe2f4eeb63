"""
Example: Six-Hole Flute
=======================
A 60 cm cylindrical flute with six tone holes. Every hole is opened in
turn from the foot upward to walk through the scale, then the design is
handed to flute-compute with all holes open.

Run with:
    flute-compute examples/six_hole_flute.py --obj flute.obj --spectrum flute.h5

Tube: 60 cm long, 1.9 cm bore, 0.4 cm wall
Holes: 25-45 cm from the embouchure reference plane
"""

import numpy as np

from flute_bore import FluteEngine

engine = FluteEngine(length=60.0, bore_radius=0.95, wall_thickness=0.4)

positions = np.array([25.0, 28.0, 32.0, 36.0, 40.0, 45.0])
radii = np.array([0.35, 0.35, 0.35, 0.35, 0.4, 0.4])

# =============================================================================
# Fingering chart
# =============================================================================
# Closing holes from the mouth end lengthens the acoustic tube, so the
# fingering with every hole closed plays lowest.

print("Fingering chart (x = closed):")
pitch = 0.0
for n_closed in range(len(positions) + 1):
    open_flags = np.arange(len(positions)) >= n_closed
    engine.set_holes(positions, radii, open_flags)
    # The previous note is the guess for the next one, as in an editor drag
    pitch = engine.calculate_pitch(pitch)
    chart = "".join("o" if flag else "x" for flag in open_flags)
    print(f"  {chart}  {pitch:8.2f} Hz")

# Leave every hole open for flute-compute
engine.set_holes(positions, radii, [True] * len(positions))
guess = 440.0
