"""
Library call-points.

    evaluate_balance(params)              → BalanceResult
    classify_pattern(params, ratio)       → Pattern
    compute_seed(params, ratio)           → float
    generate_geometry(pattern, params, seed) → GeometryFrame

Each is a pure function of its explicit inputs.  Optional threshold tables
come from an EngineConfig; the three tables are independent of each other.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from .core.balance import (
    DEFAULT_BALANCE_THRESHOLDS,
    BalanceResult,
    BalanceThresholds,
    calculate_indicator_angle,
    calculate_ratio,
    calculate_stream_power,
    calculate_tilt_angle,
    get_imbalance_index,
    get_state,
)
from .core.parameters import ParameterSet
from .core.seeding import compute_seed
from .geometry.generator import Canvas
from .geometry.generator import generate_geometry as _generate_geometry
from .geometry.primitives import GeometryFrame
from .systems.pattern_classifier import (
    DEFAULT_PATTERN_THRESHOLDS,
    Pattern,
    PatternThresholds,
    classify_pattern as _classify_pattern,
)
from .systems.processes import (
    DEFAULT_PROCESS_THRESHOLDS,
    ProcessThresholds,
    get_active_processes,
)

__all__ = [
    "EngineConfig",
    "DEFAULT_CONFIG",
    "evaluate_balance",
    "classify_pattern",
    "compute_seed",
    "generate_geometry",
]


@dataclass(frozen=True)
class EngineConfig:
    """Threshold tables and canvas used by the call-points."""

    balance: BalanceThresholds = field(default_factory=BalanceThresholds)
    processes: ProcessThresholds = field(default_factory=ProcessThresholds)
    pattern: PatternThresholds = field(default_factory=PatternThresholds)
    canvas: Canvas = field(default_factory=Canvas)

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {
            "balance": self.balance.to_dict(),
            "processes": self.processes.to_dict(),
            "pattern": self.pattern.to_dict(),
            "canvas": self.canvas.to_dict(),
        }


DEFAULT_CONFIG = EngineConfig()


def evaluate_balance(
    params: ParameterSet,
    balance_thresholds: BalanceThresholds = DEFAULT_BALANCE_THRESHOLDS,
    process_thresholds: ProcessThresholds = DEFAULT_PROCESS_THRESHOLDS,
) -> BalanceResult:
    """Ratio, imbalance index, regime, angles and active processes for params."""
    ratio = calculate_ratio(*params.as_tuple())
    return BalanceResult(
        ratio=ratio,
        imbalance_index=get_imbalance_index(ratio, balance_thresholds),
        regime=get_state(ratio, balance_thresholds),
        tilt_angle_degrees=calculate_tilt_angle(ratio, balance_thresholds),
        indicator_angle_degrees=calculate_indicator_angle(ratio, balance_thresholds),
        stream_power=calculate_stream_power(params.qw, params.s),
        active_processes=get_active_processes(
            ratio, params.qw, params.s, process_thresholds, balance_thresholds
        ),
    )


def classify_pattern(
    params: ParameterSet,
    ratio: float,
    thresholds: PatternThresholds = DEFAULT_PATTERN_THRESHOLDS,
) -> Pattern:
    """Channel pattern for params at the given balance ratio."""
    return _classify_pattern(params, ratio, thresholds)


def generate_geometry(
    pattern: Pattern,
    params: ParameterSet,
    seed: float,
    config: Optional[EngineConfig] = None,
) -> GeometryFrame:
    """GeometryFrame for (pattern, params, seed) under config."""
    config = config or DEFAULT_CONFIG
    return _generate_geometry(
        pattern,
        params,
        seed,
        canvas=config.canvas,
        pattern_thresholds=config.pattern,
        balance_thresholds=config.balance,
    )
