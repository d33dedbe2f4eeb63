"""Tests for CLI script executor."""

import builtins
import tempfile
from pathlib import Path

import pytest

from flute_bore.cli.executor import (
    RestrictedImportError,
    execute_design_script,
    validate_engine_object,
)


def _run(script_content):
    with tempfile.NamedTemporaryFile(mode="w", suffix=".py", delete=False) as f:
        f.write(script_content)
        script_path = Path(f.name)

    try:
        return execute_design_script(script_path, script_content)
    finally:
        script_path.unlink()


def test_execute_valid_script():
    """Test executing a valid design script."""
    namespace = _run(
        """
from flute_bore import FluteEngine

engine = FluteEngine(length=60.0, bore_radius=0.95, wall_thickness=0.4)
engine.set_holes([25.0, 28.0], [0.35, 0.35], [True, False])
guess = 440.0
"""
    )

    assert "engine" in namespace
    assert namespace["engine"].num_holes == 2
    assert namespace["guess"] == 440.0


def test_execute_script_with_numpy_and_math():
    """Test that numpy and math imports are allowed."""
    namespace = _run(
        """
import math
import numpy as np

positions = np.linspace(25.0, 45.0, 6)
result = math.floor(positions.sum())
"""
    )

    assert namespace["result"] == 210


def test_execute_script_restricted_import():
    """Test that restricted imports are blocked."""
    with pytest.raises(RestrictedImportError) as exc_info:
        _run(
            """
import os  # Not allowed!

files = os.listdir('.')
"""
        )

    assert "os" in str(exc_info.value)
    assert "flute_bore" in str(exc_info.value)


def test_restricted_from_import():
    """Test that from-imports of other packages are blocked too."""
    with pytest.raises(RestrictedImportError):
        _run("from subprocess import run\n")


def test_builtins_restored():
    """Test that the global import hook is untouched after execution."""
    original = builtins.__import__
    with pytest.raises(RestrictedImportError):
        _run("import socket\n")
    assert builtins.__import__ is original


def test_execute_script_syntax_error():
    """Test that syntax errors are propagated."""
    with pytest.raises(SyntaxError):
        _run(
            """
this is not valid python syntax!
"""
        )


def test_validate_engine_valid():
    """Test validating a valid engine object."""
    from flute_bore import FluteEngine

    engine = FluteEngine(length=60.0, bore_radius=0.95, wall_thickness=0.4)
    namespace = {"engine": engine}

    result = validate_engine_object(namespace)
    assert result is engine


def test_validate_engine_missing():
    """Test validation when engine is missing."""
    namespace = {"other_var": 42}

    with pytest.raises(ValueError) as exc_info:
        validate_engine_object(namespace)

    assert "must define an 'engine'" in str(exc_info.value)


def test_validate_engine_invalid():
    """Test validation when engine is not a valid object."""
    namespace = {"engine": "not an engine"}

    with pytest.raises(ValueError) as exc_info:
        validate_engine_object(namespace)

    assert "missing required methods" in str(exc_info.value)


def test_validate_engine_partial():
    """Test validation lists every method the CLI calls that is absent."""

    class PitchOnly:
        def calculate_pitch(self, frequency_guess=0.0):
            return 440.0

        def export_obj(self, name="flute", segments=64):
            return ""

        def impedance_spectrum(self, frequencies):
            return frequencies

    with pytest.raises(ValueError) as exc_info:
        validate_engine_object({"engine": PitchOnly()})

    message = str(exc_info.value)
    for method in ("resonance", "export_stl", "export_dxf_template"):
        assert method in message
    assert "calculate_pitch" not in message
