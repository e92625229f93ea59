"""
Channel pattern classifier.

Maps the four controls and the balance ratio to a discrete planform using a
weighted braiding index and a first-match decision ladder.  No stochastic
components — the classifier is a pure function of its inputs.

    load      = Qs / 100
    grain     = D50 / 100
    discharge = Qw / 100

    aggradation = min((ratio − 1) · 0.3, 0.3)   if ratio > 1 else 0
    index       = load · 0.35 + grain · 0.25 + aggradation

    BRAIDED     if index > 0.5
    STRAIGHT    elif discharge < 0.15
    MEANDERING  otherwise

Discharge and slope are deliberately absent from the braiding index: higher
stream power raises transport capacity, so it takes more sediment to braid,
not less.  The thresholds are tuned so the midpoint (50/50/50/50) meanders.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, unique
from typing import Dict

from ..core.parameters import ParameterSet


@unique
class Pattern(IntEnum):
    """Channel planform."""

    STRAIGHT = 0
    MEANDERING = 1
    BRAIDED = 2

    @property
    def label(self) -> str:
        return self.name.lower()

    @property
    def title(self) -> str:
        return f"{self.name.capitalize()} Channel"


@dataclass(frozen=True)
class PatternThresholds:
    """Weights and thresholds of the pattern classifier.

    Independent of the balance regime thresholds.

    Attributes:
        load_weight:        Braiding-index weight of the sediment load.
        grain_weight:       Braiding-index weight of the grain size.
        aggradation_gain:   Slope of the aggradation contribution above ratio 1.
        aggradation_cap:    Maximum aggradation contribution.
        braided_index:      Braiding index above which the channel braids.
        straight_discharge: Normalised discharge below which the channel is straight.
        sinuosity_base:     Meander sinuosity at zero discharge and load.
        sinuosity_discharge_gain: Sinuosity added per unit normalised discharge.
        sinuosity_load_drag:      Sinuosity removed per unit normalised load.
        sinuosity_floor:    Minimum sinuosity.
    """

    load_weight: float = 0.35
    grain_weight: float = 0.25
    aggradation_gain: float = 0.3
    aggradation_cap: float = 0.3
    braided_index: float = 0.5
    straight_discharge: float = 0.15
    sinuosity_base: float = 1.1
    sinuosity_discharge_gain: float = 0.5
    sinuosity_load_drag: float = 0.2
    sinuosity_floor: float = 1.05

    def __post_init__(self) -> None:
        """Validate weights and thresholds."""
        for name in ("load_weight", "grain_weight", "aggradation_gain",
                     "aggradation_cap", "braided_index", "straight_discharge"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(
                    f"PatternThresholds.{name} must be in [0, 1], got {value}"
                )
        if self.sinuosity_floor < 1.0:
            raise ValueError(
                f"PatternThresholds.sinuosity_floor must be >= 1, got {self.sinuosity_floor}"
            )

    def to_dict(self) -> Dict[str, float]:
        return dict(self.__dict__)


DEFAULT_PATTERN_THRESHOLDS = PatternThresholds()


def aggradation_factor(
    ratio: float, thresholds: PatternThresholds = DEFAULT_PATTERN_THRESHOLDS
) -> float:
    """Capped braiding contribution of excess supply; zero for ratio ≤ 1."""
    if ratio > 1.0:
        return min((ratio - 1.0) * thresholds.aggradation_gain, thresholds.aggradation_cap)
    return 0.0


def braiding_index(
    qs: float,
    d50: float,
    ratio: float,
    thresholds: PatternThresholds = DEFAULT_PATTERN_THRESHOLDS,
) -> float:
    """Load-dominant braiding index; discharge and slope are excluded."""
    sediment_load = qs / 100.0
    grain_size = d50 / 100.0
    return (
        sediment_load * thresholds.load_weight
        + grain_size * thresholds.grain_weight
        + aggradation_factor(ratio, thresholds)
    )


def get_channel_pattern(
    qs: float,
    d50: float,
    qw: float,
    s: float,
    ratio: float,
    thresholds: PatternThresholds = DEFAULT_PATTERN_THRESHOLDS,
) -> Pattern:
    """Select the channel pattern; the first matching rule wins.

    Args:
        qs, d50, qw, s: Slider values in [1, 100].  s is accepted for a uniform
                        signature but does not enter the decision.
        ratio:          Balance ratio for the same inputs.
        thresholds:     Classifier constants.

    Returns:
        BRAIDED, STRAIGHT or MEANDERING.
    """
    if braiding_index(qs, d50, ratio, thresholds) > thresholds.braided_index:
        return Pattern.BRAIDED
    if qw / 100.0 < thresholds.straight_discharge:
        return Pattern.STRAIGHT
    return Pattern.MEANDERING


def classify_pattern(
    params: ParameterSet,
    ratio: float,
    thresholds: PatternThresholds = DEFAULT_PATTERN_THRESHOLDS,
) -> Pattern:
    """get_channel_pattern over a validated ParameterSet."""
    return get_channel_pattern(params.qs, params.d50, params.qw, params.s, ratio, thresholds)


def sinuosity_factor(
    qs: float, qw: float, thresholds: PatternThresholds = DEFAULT_PATTERN_THRESHOLDS
) -> float:
    """Meander sinuosity: discharge raises it, sediment load suppresses it.

        sinuosity = max(1.05, 1.1 + 0.5 · Qw/100 − 0.2 · Qs/100)
    """
    sinuosity = (
        thresholds.sinuosity_base
        + (qw / 100.0) * thresholds.sinuosity_discharge_gain
        - (qs / 100.0) * thresholds.sinuosity_load_drag
    )
    return max(thresholds.sinuosity_floor, sinuosity)

