"""
Deterministic seed utilities.

All procedural "randomness" comes from a hash-like function of a real seed:

    pseudo_random(n) = frac(sin(n) · 10000)  ∈ [0, 1)

This is not a statistically rigorous PRNG; it is reproducible for identical
inputs, which is the only property the geometry generators rely on.  Each
generated feature derives its own sub-seed as base + offset + index·stride, so
changing how many features of one kind are produced never reshuffles another.

The frame seed packs all four slider values plus a coarse ratio bucket into one
float:

    key  = clamp(round(log10(max(0.01, ratio))·100 + 500), 0, 999)
    seed = ((Qs·1000 + D50)·1000 + Qw)·1000 + S + key/1000
"""

from __future__ import annotations

import math

from .parameters import ParameterSet

RATIO_KEY_MIN: int = 0
RATIO_KEY_MAX: int = 999


def pseudo_random(seed: float) -> float:
    """Deterministic value in [0, 1) for any real seed."""
    x = math.sin(seed) * 10000.0
    return x - math.floor(x)


def sub_seed(base: float, offset: float, index: int = 0, stride: float = 0.0) -> float:
    """Seed of the index-th feature in a family: base + offset + index·stride."""
    return base + offset + index * stride


def ratio_key(ratio: float) -> int:
    """Bucket a balance ratio into an integer in [0, 999].

    Infinite ratios saturate at 999.  Rounding is half-up.
    """
    if math.isnan(ratio):
        raise ValueError("ratio must not be NaN")
    raw = math.log10(max(0.01, ratio)) * 100.0 + 500.0
    raw = max(float(RATIO_KEY_MIN), min(float(RATIO_KEY_MAX), raw))
    return int(math.floor(raw + 0.5))


def compute_seed(params: ParameterSet, ratio: float) -> float:
    """Stable seed combining the four controls and the balance ratio.

    Args:
        params: Current parameter set.
        ratio:  Balance ratio for params (may be math.inf).

    Returns:
        Seed value; identical inputs always give an identical float.
    """
    qs, d50, qw, s = params.as_tuple()
    return ((qs * 1000.0 + d50) * 1000.0 + qw) * 1000.0 + s + ratio_key(ratio) / 1000.0
