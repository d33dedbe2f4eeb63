"""
Resonance search on the input reactance.

The playing resonance of an open flute-like bore is an input-impedance
minimum, where Im(Z_in) crosses zero from negative to positive with
increasing frequency. The search works in two stages:

1. Local bracket: sample Im(Z) on a small fixed-step window centred on the
   caller's guess (normally the previous pitch). While a hole is dragged the
   crossing is almost always inside this window. The range below the window
   is then swept on the coarse grid so that a lower mode is never skipped
   after a large edit.
2. Coarse sweep: if the window holds no upward crossing, sample the whole
   ``[f_min, f_max]`` range on a fixed grid and take the first crossing.

The bracket is then refined with Brent's method to a fixed absolute
tolerance or iteration cap, whichever comes first, so every query has a
bounded cost.

Example:
    >>> from flute_bore.acoustics import build_topology, input_impedance
    >>> topology = build_topology(tube)
    >>> result = find_resonance(lambda f: input_impedance(topology, f), 440.0)
    >>> result.frequency
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.optimize import brentq

from flute_bore.exceptions import NoResonanceFound

logger = logging.getLogger(__name__)

ImpedanceFunction = Callable[[ArrayLike], NDArray[np.complexfloating]]


@dataclass(frozen=True)
class ResonanceSearch:
    """Tunables of the resonance search.

    Attributes:
        f_min: Lowest frequency considered (Hz)
        f_max: Highest frequency considered (Hz)
        local_step: Sample spacing of the local window around the guess (Hz)
        local_steps: Number of samples on each side of the guess
        sweep_step: Sample spacing of the fallback sweep (Hz)
        tolerance: Absolute frequency tolerance of the refinement (Hz)
        max_iterations: Iteration cap of the refinement
    """

    f_min: float = 20.0
    f_max: float = 5000.0
    local_step: float = 10.0
    local_steps: int = 8
    sweep_step: float = 5.0
    tolerance: float = 0.01
    max_iterations: int = 60

    def __post_init__(self) -> None:
        for name in ("f_min", "f_max", "local_step", "sweep_step", "tolerance"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite")
        if self.f_min <= 0:
            raise ValueError("f_min must be positive")
        if self.f_max <= self.f_min:
            raise ValueError("f_max must be greater than f_min")
        if self.local_step <= 0:
            raise ValueError("local_step must be positive")
        if self.local_steps < 1:
            raise ValueError("local_steps must be >= 1")
        if self.sweep_step <= 0:
            raise ValueError("sweep_step must be positive")
        if self.tolerance <= 0:
            raise ValueError("tolerance must be positive")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")

    @property
    def sweep_frequencies(self) -> NDArray[np.floating]:
        """Sample grid of the fallback sweep, including both range edges."""
        num = int(np.ceil((self.f_max - self.f_min) / self.sweep_step)) + 1
        return np.linspace(self.f_min, self.f_max, num)

    def window_frequencies(self, guess: float) -> NDArray[np.floating]:
        """Local window samples around ``guess`` that fall inside the range."""
        offsets = np.arange(-self.local_steps, self.local_steps + 1) * self.local_step
        freqs = guess + offsets
        return freqs[(freqs >= self.f_min) & (freqs <= self.f_max)]


@dataclass(frozen=True)
class Resonance:
    """Outcome of a resonance search.

    Attributes:
        frequency: Refined resonance frequency (Hz)
        strategy: "local" if the guess window bracketed it, "sweep" if
            the coarse grid found it (no window crossing or a lower one)
        bracket: Frequencies enclosing the crossing before refinement
        iterations: Refinement iterations used
        converged: False if the iteration cap stopped the refinement
    """

    frequency: float
    strategy: Literal["local", "sweep"]
    bracket: tuple[float, float]
    iterations: int
    converged: bool


def first_upward_crossing(
    frequencies: NDArray[np.floating], reactance: NDArray[np.floating]
) -> tuple[float, float] | None:
    """First adjacent sample pair where the reactance goes from < 0 to >= 0."""
    if frequencies.size < 2:
        return None
    upward = (reactance[:-1] < 0) & (reactance[1:] >= 0)
    hits = np.flatnonzero(upward)
    if hits.size == 0:
        return None
    i = int(hits[0])
    return float(frequencies[i]), float(frequencies[i + 1])


def _reactance(impedance: ImpedanceFunction, frequency: ArrayLike) -> NDArray[np.floating]:
    return np.imag(impedance(np.asarray(frequency, dtype=np.float64)))


def local_bracket(
    impedance: ImpedanceFunction, guess: float, search: ResonanceSearch
) -> tuple[float, float] | None:
    """Bracket an upward reactance crossing inside the window around ``guess``."""
    if not np.isfinite(guess):
        return None
    freqs = search.window_frequencies(guess)
    if freqs.size < 2:
        return None
    return first_upward_crossing(freqs, _reactance(impedance, freqs))


def sweep_bracket(
    impedance: ImpedanceFunction,
    search: ResonanceSearch,
    upper: float | None = None,
) -> tuple[float, float] | None:
    """Bracket the lowest upward reactance crossing in the full range.

    With ``upper`` set, only ``[f_min, upper]`` is swept; ``upper`` itself is
    kept as the last sample.
    """
    freqs = search.sweep_frequencies
    if upper is not None:
        freqs = np.append(freqs[freqs < upper], upper)
    return first_upward_crossing(freqs, _reactance(impedance, freqs))


def refine(
    impedance: ImpedanceFunction,
    bracket: tuple[float, float],
    search: ResonanceSearch,
) -> tuple[float, int, bool]:
    """Refine a bracketed crossing with Brent's method.

    Returns:
        Tuple of (frequency, iterations, converged)
    """
    low, high = bracket

    def reactance(f: float) -> float:
        return float(_reactance(impedance, f))

    root, info = brentq(
        reactance,
        low,
        high,
        xtol=search.tolerance,
        maxiter=search.max_iterations,
        full_output=True,
        disp=False,
    )
    return float(root), int(info.iterations), bool(info.converged)


def find_resonance(
    impedance: ImpedanceFunction,
    guess: float,
    search: ResonanceSearch | None = None,
) -> Resonance:
    """Locate the lowest playing resonance, starting from the guess.

    The window around the guess brackets the crossing cheaply; a crossing
    below the window always takes precedence, so the fundamental is returned
    even when the guess sits next to a higher mode.

    Args:
        impedance: Callable mapping frequency (Hz, scalar or array) to the
            complex input impedance
        guess: Starting frequency in Hz, typically the previous pitch
        search: Search tunables (defaults to ResonanceSearch())

    Returns:
        Resonance describing the refined frequency

    Raises:
        NoResonanceFound: If no upward crossing exists in ``[f_min, f_max]``
    """
    if search is None:
        search = ResonanceSearch()

    strategy: Literal["local", "sweep"] = "local"
    bracket = local_bracket(impedance, guess, search)
    if bracket is not None:
        lower = sweep_bracket(impedance, search, upper=bracket[0])
        if lower is not None:
            logger.debug(
                "Lower crossing below window around %.2f Hz, using [%.2f, %.2f]",
                guess,
                lower[0],
                lower[1],
            )
            strategy = "sweep"
            bracket = lower
    else:
        logger.debug("No crossing within window around %.2f Hz, sweeping full range", guess)
        strategy = "sweep"
        bracket = sweep_bracket(impedance, search)
        if bracket is None:
            raise NoResonanceFound(search.f_min, search.f_max)

    frequency, iterations, converged = refine(impedance, bracket, search)
    logger.debug(
        "Resonance %.3f Hz via %s bracket [%.2f, %.2f] in %d iterations",
        frequency,
        strategy,
        bracket[0],
        bracket[1],
        iterations,
    )
    return Resonance(
        frequency=frequency,
        strategy=strategy,
        bracket=bracket,
        iterations=iterations,
        converged=converged,
    )
