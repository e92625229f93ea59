"""
lane_balance — Lane's balance for alluvial channels.

Maps four slider controls (sediment discharge Qs, median grain size D50,
water discharge Qw, slope S) onto the balance ratio Qs·D50 / Qw·S, the
resulting regime (degradation, equilibrium, aggradation), the active
geomorphic processes, the channel pattern, and a seeded, deterministic
geometry frame for the plan view and the balance scale.

Quick start
-----------
    from lane_balance import BalanceSession, ParameterSet

    with BalanceSession(ParameterSet(80, 60, 40, 30)) as session:
        evaluation = session.evaluation
        print(evaluation.balance.regime.label, evaluation.pattern.label)
        session.set_parameter("Qw", 70)

Public API
----------
    ParameterSet        — validated control values in [1, 100]
    evaluate_balance    — ratio, imbalance index, regime, angles, processes
    classify_pattern    — straight / meandering / braided
    compute_seed        — deterministic geometry seed
    generate_geometry   — GeometryFrame of styled primitives
    BalanceSession      — stateful session with the redraw gate
    FlowAnimator        — fixed-tick flow animation
"""

from __future__ import annotations

__version__ = "1.0.0"

from .core.parameters import DomainViolation, ParameterSet
from .core.balance import BalanceResult, BalanceThresholds, Regime
from .systems.processes import ActiveProcess, ProcessThresholds
from .systems.pattern_classifier import Pattern, PatternThresholds
from .geometry.primitives import GeometryFrame, Primitive
from .geometry.generator import Canvas
from .engine import (
    DEFAULT_CONFIG,
    EngineConfig,
    classify_pattern,
    compute_seed,
    evaluate_balance,
    generate_geometry,
)
from .simulation.flow import FlowAnimator
from .simulation.session import BalanceSession, Evaluation
from .analysis.logging import EvaluationLogger
from .analysis.metrics import summary_statistics
from .config_loader import load_scenario

__all__ = [
    "DomainViolation",
    "ParameterSet",
    "BalanceResult",
    "BalanceThresholds",
    "Regime",
    "ActiveProcess",
    "ProcessThresholds",
    "Pattern",
    "PatternThresholds",
    "GeometryFrame",
    "Primitive",
    "Canvas",
    "DEFAULT_CONFIG",
    "EngineConfig",
    "classify_pattern",
    "compute_seed",
    "evaluate_balance",
    "generate_geometry",
    "FlowAnimator",
    "BalanceSession",
    "Evaluation",
    "EvaluationLogger",
    "summary_statistics",
    "load_scenario",
    "__version__",
]
