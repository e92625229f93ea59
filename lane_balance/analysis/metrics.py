"""
Parameter-space metrics.

Sweeps the engine over a grid of parameter sets and summarises how the regime
and the channel pattern are distributed.  All functions are pure.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from ..core.balance import BalanceResult, Regime
from ..core.parameters import PARAMETER_MAX, PARAMETER_MIN, ParameterSet
from ..engine import DEFAULT_CONFIG, EngineConfig, classify_pattern, evaluate_balance
from ..systems.pattern_classifier import Pattern, braiding_index


@dataclass(frozen=True)
class SweepRecord:
    """Engine outputs for one grid point."""

    params: ParameterSet
    balance: BalanceResult
    pattern: Pattern
    braiding_index: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "params": self.params.to_dict(),
            "ratio": self.balance.ratio,
            "imbalance_index": self.balance.imbalance_index,
            "regime": self.balance.regime.label,
            "pattern": self.pattern.label,
            "braiding_index": self.braiding_index,
        }


def axis_values(steps: int) -> np.ndarray:
    """steps evenly spaced slider values across [1, 100]."""
    if steps < 2:
        raise ValueError(f"steps must be >= 2, got {steps}")
    return np.linspace(PARAMETER_MIN, PARAMETER_MAX, steps)


def parameter_grid(
    steps: int = 5,
    fixed: Optional[Dict[str, float]] = None,
) -> List[ParameterSet]:
    """Full factorial grid over the four controls.

    Args:
        steps: Values per axis.
        fixed: Short keys pinned to a single value instead of swept.

    Returns:
        List of ParameterSet in Qs, D50, Qw, S nesting order.
    """
    fixed = dict(fixed or {})
    unknown = set(fixed) - {"Qs", "D50", "Qw", "S"}
    if unknown:
        raise KeyError(f"Unknown parameters: {sorted(unknown)}")
    values = axis_values(steps).tolist()
    axes = [[fixed[key]] if key in fixed else values for key in ("Qs", "D50", "Qw", "S")]
    return [ParameterSet(*combo) for combo in itertools.product(*axes)]


def sweep(
    grid: Iterable[ParameterSet],
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[SweepRecord]:
    """Evaluate balance and pattern at every grid point."""
    records = []
    for params in grid:
        balance = evaluate_balance(params, config.balance, config.processes)
        records.append(SweepRecord(
            params=params,
            balance=balance,
            pattern=classify_pattern(params, balance.ratio, config.pattern),
            braiding_index=braiding_index(params.qs, params.d50, balance.ratio, config.pattern),
        ))
    return records


def regime_distribution(records: Sequence[SweepRecord]) -> Dict[Regime, float]:
    """Fraction of records in each regime."""
    if not records:
        return {regime: 0.0 for regime in Regime}
    labels = np.array([int(r.balance.regime) for r in records])
    return {regime: float(np.mean(labels == int(regime))) for regime in Regime}


def pattern_distribution(records: Sequence[SweepRecord]) -> Dict[Pattern, float]:
    """Fraction of records in each channel pattern."""
    if not records:
        return {pattern: 0.0 for pattern in Pattern}
    labels = np.array([int(r.pattern) for r in records])
    return {pattern: float(np.mean(labels == int(pattern))) for pattern in Pattern}


def summary_statistics(records: Sequence[SweepRecord]) -> Dict[str, float]:
    """Compute a summary over a sweep.

    Args:
        records: Sweep output.

    Returns:
        Dictionary of metric name → scalar value.
    """
    if not records:
        return {"n_points": 0.0}
    index = np.array([r.balance.imbalance_index for r in records])
    braiding = np.array([r.braiding_index for r in records])
    regimes = regime_distribution(records)
    patterns = pattern_distribution(records)
    return {
        "n_points": float(len(records)),
        "mean_imbalance_index": float(np.mean(index)),
        "min_imbalance_index": float(np.min(index)),
        "max_imbalance_index": float(np.max(index)),
        "mean_braiding_index": float(np.mean(braiding)),
        "fraction_degradation": regimes[Regime.DEGRADATION],
        "fraction_equilibrium": regimes[Regime.EQUILIBRIUM],
        "fraction_aggradation": regimes[Regime.AGGRADATION],
        "fraction_straight": patterns[Pattern.STRAIGHT],
        "fraction_meandering": patterns[Pattern.MEANDERING],
        "fraction_braided": patterns[Pattern.BRAIDED],
    }
