"""Exception types raised by flute_bore.

All errors are reported synchronously to the caller. Rejected mutations leave
the engine state untouched.
"""

from __future__ import annotations


class FluteBoreError(Exception):
    """Base class for all flute_bore errors."""

    pass


class InvalidGeometry(FluteBoreError, ValueError):
    """Raised for non-positive tube dimensions, bad hole data or bad indices."""

    pass


class NoResonanceFound(FluteBoreError):
    """Raised when no playing resonance exists in the searched range.

    Hosts should keep the last good pitch rather than display a value.

    Attributes:
        f_min: Lower edge of the searched range in Hz
        f_max: Upper edge of the searched range in Hz
    """

    def __init__(self, f_min: float, f_max: float):
        self.f_min = f_min
        self.f_max = f_max
        super().__init__(
            f"No impedance zero crossing found between {f_min:g} Hz and {f_max:g} Hz"
        )
