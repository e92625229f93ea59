"""
Property validation suite for the Lane's balance engine.

All checks use assert statements exclusively — no print statements.
Run directly:

    python -m lane_balance.analysis.validation

Exit code 0 means all checks passed.

Checks:
  1.  Log mapping bounds and monotonicity
  2.  Midpoint equilibrium and meandering
  3.  Ratio monotonicity in Qs and Qw
  4.  Geometry determinism
  5.  Pattern boundaries
  6.  Equilibrium process list
  7.  Imbalance index odd symmetry
  8.  Tilt saturation
  9.  Sub-seed stability of braided features
  10. Flow animator cancellation
"""

from __future__ import annotations

import math
from typing import Callable, List, Tuple

import numpy as np

from ..core.balance import (
    Regime,
    calculate_ratio,
    calculate_tilt_angle,
    get_imbalance_index,
)
from ..core.mapping import map_log
from ..core.parameters import ParameterSet
from ..core.seeding import compute_seed
from ..engine import classify_pattern, evaluate_balance, generate_geometry
from ..geometry.plan import generate_braided
from ..simulation.flow import FlowAnimator
from ..systems.pattern_classifier import Pattern, braiding_index
from ..systems.processes import get_active_processes


# --------------------------------------------------------------------------- #
# Internal helpers                                                              #
# --------------------------------------------------------------------------- #


def _grid(steps: int = 12) -> np.ndarray:
    return np.linspace(1.0, 100.0, steps)


def _frame_for(params: ParameterSet):
    result = evaluate_balance(params)
    pattern = classify_pattern(params, result.ratio)
    seed = compute_seed(params, result.ratio)
    return generate_geometry(pattern, params, seed)


# --------------------------------------------------------------------------- #
# Checks                                                                        #
# --------------------------------------------------------------------------- #


def check_log_mapping() -> None:
    """map_log is strictly increasing on [1, 100] and spans [0.1, 100]."""
    values = np.linspace(1.0, 100.0, 991)
    mapped = np.array([map_log(v) for v in values])
    assert np.all(np.diff(mapped) > 0), "map_log is not strictly increasing"
    assert math.isclose(map_log(1), 0.1, rel_tol=1e-12), f"map_log(1) = {map_log(1)}"
    assert math.isclose(map_log(100), 100.0, rel_tol=1e-12), f"map_log(100) = {map_log(100)}"
    assert mapped.min() >= 0.1 - 1e-12 and mapped.max() <= 100.0 + 1e-9


def check_midpoint_equilibrium() -> None:
    """All controls at 50 → equilibrium, meandering."""
    params = ParameterSet.equilibrium()
    result = evaluate_balance(params)
    assert result.regime is Regime.EQUILIBRIUM, f"midpoint regime is {result.regime.label}"
    pattern = classify_pattern(params, result.ratio)
    assert pattern is Pattern.MEANDERING, f"midpoint pattern is {pattern.label}"


def check_ratio_monotonicity() -> None:
    """Raising Qs never lowers the ratio; raising Qw never raises it."""
    for d50 in _grid(6):
        for s in _grid(6):
            for other in _grid(6):
                qs_ratios = [calculate_ratio(qs, d50, other, s) for qs in _grid()]
                assert all(b >= a for a, b in zip(qs_ratios, qs_ratios[1:])), (
                    f"ratio decreased with Qs at D50={d50}, Qw={other}, S={s}"
                )
                qw_ratios = [calculate_ratio(other, d50, qw, s) for qw in _grid()]
                assert all(b <= a for a, b in zip(qw_ratios, qw_ratios[1:])), (
                    f"ratio increased with Qw at Qs={other}, D50={d50}, S={s}"
                )


def check_geometry_determinism() -> None:
    """Identical inputs give identical frames for every pattern."""
    for params in (
        ParameterSet.equilibrium(),
        ParameterSet(100, 100, 50, 50),
        ParameterSet(30, 30, 10, 50),
    ):
        first = _frame_for(params)
        second = _frame_for(params)
        assert first == second, f"frames differ for {params.to_dict()}"
        assert first.fingerprint() == second.fingerprint()


def check_pattern_boundaries() -> None:
    """High load braids; low discharge with moderate load stays straight."""
    braided = ParameterSet(100, 100, 50, 50)
    ratio = calculate_ratio(*braided.as_tuple())
    assert braiding_index(100, 100, ratio) > 0.5
    assert classify_pattern(braided, ratio) is Pattern.BRAIDED

    straight = ParameterSet(30, 30, 10, 50)
    ratio = calculate_ratio(*straight.as_tuple())
    assert classify_pattern(straight, ratio) is Pattern.STRAIGHT


def check_equilibrium_processes() -> None:
    """Equilibrium lists exactly the two balance processes for any Qw, S."""
    expected = ("Sediment transport balance", "Dynamic equilibrium")
    for qw in _grid(8):
        for s in _grid(8):
            names = tuple(p.name for p in get_active_processes(1.0, qw, s))
            assert names == expected, f"equilibrium processes were {names}"


def check_imbalance_symmetry() -> None:
    """I(r) = −I(1/r) for r in (0, 100]."""
    for r in np.geomspace(0.01, 100.0, 101):
        assert math.isclose(
            get_imbalance_index(r), -get_imbalance_index(1.0 / r), abs_tol=1e-12
        ), f"asymmetric imbalance index at r={r}"


def check_tilt_saturation() -> None:
    """Tilt clamps to +30 at r ≤ 0.1 and −30 at r ≥ 10."""
    for r in (1e-6, 0.01, 0.1):
        assert math.isclose(calculate_tilt_angle(r), 30.0, rel_tol=1e-12), r
    for r in (10.0, 100.0, math.inf):
        assert math.isclose(calculate_tilt_angle(r), -30.0, rel_tol=1e-12), r


def check_sub_seed_stability() -> None:
    """Changing the gravel patch count never moves threads or earlier patches."""
    seed = compute_seed(ParameterSet(80, 80, 50, 50), 2.0)
    sparse = generate_braided(10, 80, 50, seed, 560.0, 140.0)
    dense = generate_braided(100, 80, 50, seed, 560.0, 140.0)
    assert dense.primitives != sparse.primitives

    sparse_by_id = {p.id: p for p in sparse.primitives}
    dense_by_id = {p.id: p for p in dense.primitives}
    patches = [i for i in sparse_by_id if i.startswith("plan/gravel/")]
    assert len(patches) < sum(1 for i in dense_by_id if i.startswith("plan/gravel/"))
    for primitive_id, primitive in sparse_by_id.items():
        assert dense_by_id[primitive_id] == primitive, f"{primitive_id} changed with Qs"
    assert sparse.flow_paths == dense.flow_paths


def check_animator_cancellation() -> None:
    """A cancelled animator never moves again."""
    frame = _frame_for(ParameterSet.equilibrium())
    animator = FlowAnimator.from_frame(frame)
    animator.advance(120)
    before = animator.offsets()
    animator.cancel()
    assert animator.advance(10_000) == 0
    assert animator.offsets() == before


# --------------------------------------------------------------------------- #
# Runner                                                                        #
# --------------------------------------------------------------------------- #

CHECKS: List[Tuple[str, Callable[[], None]]] = [
    ("1. Log mapping bounds and monotonicity", check_log_mapping),
    ("2. Midpoint equilibrium and meandering", check_midpoint_equilibrium),
    ("3. Ratio monotonicity in Qs and Qw", check_ratio_monotonicity),
    ("4. Geometry determinism", check_geometry_determinism),
    ("5. Pattern boundaries", check_pattern_boundaries),
    ("6. Equilibrium process list", check_equilibrium_processes),
    ("7. Imbalance index odd symmetry", check_imbalance_symmetry),
    ("8. Tilt saturation", check_tilt_saturation),
    ("9. Sub-seed stability of braided features", check_sub_seed_stability),
    ("10. Flow animator cancellation", check_animator_cancellation),
]


def run_all_checks() -> List[str]:
    """Execute every check; raises AssertionError on first failure.

    Returns:
        Names of the checks that ran, in order.
    """
    passed = []
    for name, fn in CHECKS:
        fn()
        passed.append(name)
    return passed


if __name__ == "__main__":
    run_all_checks()
