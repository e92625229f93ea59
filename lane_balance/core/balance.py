"""
Lane's balance.

    Qs · D50  ∝  Qw · S

The balance ratio compares the supply-side term with the transport-side term:

    ratio = (Qs · map_log(D50)) / (Qw · map_slope(S))

      > 1 : aggradation  (sediment supply exceeds transport capacity)
      < 1 : degradation  (transport capacity exceeds sediment supply)
      ≈ 1 : equilibrium

The regime is decided on the log-scaled imbalance index

    I = log10(clamp(ratio, 0.01, 100))

with a symmetric dead band |I| ≤ 0.05 around perfect balance (ratio ∈
[0.891, 1.122]).  The band lives on the log index, so it is symmetric in
multiplicative terms.

The beam tilt uses the opposite sign to the ratio: a supply-heavy balance
(ratio > 1) tilts negative, i.e. the sediment pan goes down.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum, unique
from typing import Any, Dict, Tuple

from .mapping import map_log, map_slope


@unique
class Regime(IntEnum):
    """Balance regime, ordered by the sign of the imbalance."""

    DEGRADATION = -1
    EQUILIBRIUM = 0
    AGGRADATION = 1

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class BalanceThresholds:
    """Constants governing regime classification and the scale geometry.

    Independent of the pattern classifier thresholds.

    Attributes:
        dead_band:          Half-width of the equilibrium band on the imbalance index.
        index_ratio_min:    Lower ratio clamp before log10 for the imbalance index.
        index_ratio_max:    Upper ratio clamp before log10 for the imbalance index.
        tilt_max_degrees:   Beam tilt magnitude at saturation.
        tilt_ratio_min:     Ratio at which the beam tilt saturates positive.
        tilt_ratio_max:     Ratio at which the beam tilt saturates negative.
        indicator_max_degrees: Needle deflection at saturation.
    """

    dead_band: float = 0.05
    index_ratio_min: float = 0.01
    index_ratio_max: float = 100.0
    tilt_max_degrees: float = 30.0
    tilt_ratio_min: float = 0.1
    tilt_ratio_max: float = 10.0
    indicator_max_degrees: float = 50.0

    def __post_init__(self) -> None:
        """Validate ranges and orderings."""
        if not 0.0 <= self.dead_band < 1.0:
            raise ValueError(f"dead_band must be in [0, 1), got {self.dead_band}")
        if not 0.0 < self.index_ratio_min < 1.0 < self.index_ratio_max:
            raise ValueError(
                "index ratio clamp must satisfy 0 < min < 1 < max, got "
                f"[{self.index_ratio_min}, {self.index_ratio_max}]"
            )
        if not 0.0 < self.tilt_ratio_min < 1.0 < self.tilt_ratio_max:
            raise ValueError(
                "tilt ratio clamp must satisfy 0 < min < 1 < max, got "
                f"[{self.tilt_ratio_min}, {self.tilt_ratio_max}]"
            )
        for name in ("tilt_max_degrees", "indicator_max_degrees"):
            value = getattr(self, name)
            if not 0.0 < value <= 90.0:
                raise ValueError(f"{name} must be in (0, 90], got {value}")

    def to_dict(self) -> Dict[str, float]:
        return dict(self.__dict__)


DEFAULT_BALANCE_THRESHOLDS = BalanceThresholds()


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def calculate_ratio(qs: float, d50: float, qw: float, s: float) -> float:
    """Balance ratio (Qs · map_log(D50)) / (Qw · map_slope(S)).

    Returns math.inf if the transport-side term is exactly zero.
    """
    sediment_term = qs * map_log(d50)
    water_term = qw * map_slope(s)
    if water_term == 0.0:
        return math.inf
    return sediment_term / water_term


def get_imbalance_index(
    ratio: float, thresholds: BalanceThresholds = DEFAULT_BALANCE_THRESHOLDS
) -> float:
    """I = log10(clamp(ratio, 0.01, 100)) ∈ [−2, 2].

    The clamp precedes the log so that ratio → 0 or ∞ never yields ±inf.
    """
    clamped = _clamp(ratio, thresholds.index_ratio_min, thresholds.index_ratio_max)
    return math.log10(clamped)


def get_state(
    ratio: float, thresholds: BalanceThresholds = DEFAULT_BALANCE_THRESHOLDS
) -> Regime:
    """Classify the regime from the imbalance index and the dead band."""
    imbalance = get_imbalance_index(ratio, thresholds)
    if imbalance < -thresholds.dead_band:
        return Regime.DEGRADATION
    if imbalance > thresholds.dead_band:
        return Regime.AGGRADATION
    return Regime.EQUILIBRIUM


def calculate_tilt_angle(
    ratio: float, thresholds: BalanceThresholds = DEFAULT_BALANCE_THRESHOLDS
) -> float:
    """Beam tilt in degrees, within ±tilt_max_degrees.

    angle = −ln(clamp(ratio, 0.1, 10)) · 30 / ln(10)

    Supply-heavy balances (ratio > 1) tilt negative.  Ratios outside the clamp
    saturate rather than extrapolate.
    """
    clamped = _clamp(ratio, thresholds.tilt_ratio_min, thresholds.tilt_ratio_max)
    scale_factor = thresholds.tilt_max_degrees / math.log(10.0)
    return -math.log(clamped) * scale_factor


def calculate_indicator_angle(
    ratio: float, thresholds: BalanceThresholds = DEFAULT_BALANCE_THRESHOLDS
) -> float:
    """Needle deflection in degrees: positive towards aggradation, ±50 at saturation."""
    clamped = _clamp(ratio, thresholds.tilt_ratio_min, thresholds.tilt_ratio_max)
    return math.log(clamped) / math.log(10.0) * thresholds.indicator_max_degrees


def calculate_stream_power(qw: float, s: float) -> float:
    """Normalised stream power proxy (Qw · S) / 10000 ∈ (0, 1]."""
    return (qw * s) / (100.0 * 100.0)


@dataclass(frozen=True)
class BalanceResult:
    """Derived balance quantities for one parameter set.

    Attributes:
        ratio:              Balance ratio (math.inf when degenerate).
        imbalance_index:    log10 of the clamped ratio ∈ [−2, 2].
        regime:             Regime classification.
        tilt_angle_degrees: Beam tilt ∈ [−30, 30].
        indicator_angle_degrees: Needle deflection ∈ [−50, 50].
        stream_power:       Normalised stream power proxy.
        active_processes:   Ordered active processes for the regime.
    """

    ratio: float
    imbalance_index: float
    regime: Regime
    tilt_angle_degrees: float
    indicator_angle_degrees: float
    stream_power: float
    active_processes: Tuple[Any, ...] = field(default_factory=tuple)

    @property
    def is_degenerate(self) -> bool:
        """True when the transport-side term vanished."""
        return math.isinf(self.ratio)

    def process_names(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.active_processes)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to plain dictionary."""
        return {
            "ratio": self.ratio,
            "imbalance_index": self.imbalance_index,
            "regime": self.regime.label,
            "tilt_angle_degrees": self.tilt_angle_degrees,
            "indicator_angle_degrees": self.indicator_angle_degrees,
            "stream_power": self.stream_power,
            "active_processes": [p.to_dict() for p in self.active_processes],
        }


def describe_regime(regime: Regime) -> str:
    """One-line description of a regime."""
    if regime is Regime.AGGRADATION:
        return "Sediment supply exceeds transport capacity."
    if regime is Regime.DEGRADATION:
        return "Transport capacity exceeds sediment supply."
    return "Sediment supply and transport capacity are balanced."
