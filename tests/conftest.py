"""Pytest configuration and shared fixtures for the flute-bore test suite."""

import pytest

from flute_bore import FluteEngine, TubeParameters

# Six-hole reference design used throughout the suite
SIX_HOLE_POSITIONS = [25.0, 28.0, 32.0, 36.0, 40.0, 45.0]
SIX_HOLE_RADII = [0.35, 0.35, 0.35, 0.35, 0.4, 0.4]


@pytest.fixture
def tube():
    """60 cm tube with a 1.9 cm bore and 0.4 cm wall."""
    return TubeParameters(length=60.0, bore_radius=0.95, wall_thickness=0.4)


@pytest.fixture
def plain_engine():
    """Engine for the 60 cm tube without holes."""
    return FluteEngine(length=60.0, bore_radius=0.95, wall_thickness=0.4)


@pytest.fixture
def six_hole_engine():
    """Engine for the 60 cm tube with all six holes open."""
    engine = FluteEngine(length=60.0, bore_radius=0.95, wall_thickness=0.4)
    engine.set_holes(SIX_HOLE_POSITIONS, SIX_HOLE_RADII, [True] * 6)
    return engine
