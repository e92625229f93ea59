"""
Parameter mapping.

Slider values on the [1, 100] scale are converted to physically-scaled
magnitudes by two distinct curves:

    map_log(v)   = 10^(−1 + 3·(v − 1)/99)        ∈ [0.1, 100]
    map_slope(v) = 0.1 + (v / 100) · 5.906       ∈ [0.159, 6.006]

map_log is the grain-size (supply-side) curve; map_slope is the transport-side
curve used in the balance ratio.  They are not interchangeable: swapping them
moves the regime boundary.

Precondition: inputs lie in [1, 100].  Validation happens upstream in
ParameterSet; these functions do not check their domain.
"""

from __future__ import annotations

import math

LOG_EXPONENT_MIN: float = -1.0
LOG_EXPONENT_SPAN: float = 3.0
SLOPE_OFFSET: float = 0.1
SLOPE_GAIN: float = 5.906


def normalize(value: float) -> float:
    """Map a slider value to t = (v − 1) / 99 ∈ [0, 1]."""
    return (value - 1.0) / 99.0


def map_log(value: float) -> float:
    """Log-interpolate a slider value to a magnitude in [0.1, 100].

    Strictly increasing; map_log(1) = 0.1 and map_log(100) = 100.
    """
    exponent = LOG_EXPONENT_MIN + LOG_EXPONENT_SPAN * normalize(value)
    return math.pow(10.0, exponent)


def map_d50(value: float) -> float:
    """Median grain size in millimetres for a D50 slider value."""
    return map_log(value)


def map_slope(value: float) -> float:
    """Linear transport-side slope magnitude for the balance ratio."""
    return SLOPE_OFFSET + (value / 100.0) * SLOPE_GAIN


def format_log_magnitude(value: float) -> str:
    """Human-readable text for a log-mapped slider value.

    Below 1 two decimals are shown, below 10 one decimal, otherwise the
    magnitude is rounded to an integer.
    """
    magnitude = map_log(value)
    if magnitude < 1.0:
        return f"{magnitude:.2f}"
    if magnitude < 10.0:
        return f"{magnitude:.1f}"
    return str(int(math.floor(magnitude + 0.5)))
