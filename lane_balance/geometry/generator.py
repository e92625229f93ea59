"""
Seeded geometry generator.

generate_geometry() is the single entry point that turns (pattern, params,
seed) into a GeometryFrame.  It holds no state and consults no entropy source:
identical inputs give identical frames, down to the JSON fingerprint.

Frame order: plan-view primitives first (floodplain, channel form, bars),
then the scale (beam, needle, rocks back to front, water).
"""

from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass, replace
from typing import Dict

from ..core.balance import DEFAULT_BALANCE_THRESHOLDS, BalanceThresholds
from ..core.parameters import DomainViolation, ParameterSet
from ..systems.pattern_classifier import (
    DEFAULT_PATTERN_THRESHOLDS,
    Pattern,
    PatternThresholds,
)
from .plan import PlanGeometry, generate_braided, generate_meandering, generate_straight
from .primitives import GeometryFrame
from .scale import generate_scale

logger = logging.getLogger("lane_balance.geometry")


@dataclass(frozen=True)
class Canvas:
    """Drawing extents of the two views.

    Attributes:
        plan_width:   Plan canvas width.
        plan_height:  Plan canvas height.
        scale_width:  Scale panel width.
        scale_height: Scale panel height.
    """

    plan_width: float = 560.0
    plan_height: float = 140.0
    scale_width: float = 500.0
    scale_height: float = 280.0

    def __post_init__(self) -> None:
        for name in ("plan_width", "plan_height", "scale_width", "scale_height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise DomainViolation(f"Canvas.{name} must be a real number, got {value!r}")
            if not math.isfinite(value) or value <= 0:
                raise DomainViolation(f"Canvas.{name} must be positive and finite, got {value}")
            object.__setattr__(self, name, float(value))
        # Connectors are placed in [50, width − 50].
        if self.plan_width <= 100:
            raise DomainViolation(f"Canvas.plan_width must exceed 100, got {self.plan_width}")

    def to_dict(self) -> Dict[str, float]:
        return dict(self.__dict__)


DEFAULT_CANVAS = Canvas()


def _check_inputs(pattern: Pattern, params: ParameterSet, seed: float) -> None:
    if not isinstance(pattern, Pattern):
        raise DomainViolation(f"pattern must be a Pattern, got {pattern!r}")
    if not isinstance(params, ParameterSet):
        raise DomainViolation(f"params must be a ParameterSet, got {type(params).__name__}")
    if isinstance(seed, bool) or not isinstance(seed, numbers.Real) or not math.isfinite(seed):
        raise DomainViolation(f"seed must be a finite real number, got {seed!r}")


def generate_plan(
    pattern: Pattern,
    params: ParameterSet,
    seed: float,
    canvas: Canvas = DEFAULT_CANVAS,
    pattern_thresholds: PatternThresholds = DEFAULT_PATTERN_THRESHOLDS,
) -> PlanGeometry:
    """Plan-view geometry for one channel pattern."""
    width, height = canvas.plan_width, canvas.plan_height
    if pattern is Pattern.STRAIGHT:
        return generate_straight(params.qw, seed, width, height)
    if pattern is Pattern.BRAIDED:
        return generate_braided(params.qs, params.d50, params.qw, seed, width, height)
    return generate_meandering(
        params.qs, params.d50, params.qw, seed, width, height, pattern_thresholds
    )


def generate_geometry(
    pattern: Pattern,
    params: ParameterSet,
    seed: float,
    canvas: Canvas = DEFAULT_CANVAS,
    pattern_thresholds: PatternThresholds = DEFAULT_PATTERN_THRESHOLDS,
    balance_thresholds: BalanceThresholds = DEFAULT_BALANCE_THRESHOLDS,
) -> GeometryFrame:
    """Generate the complete frame for pattern, params and seed.

    Args:
        pattern:            Channel pattern to draw.
        params:             Validated parameter set.
        seed:               Frame seed, normally compute_seed(params, ratio).
        canvas:             View extents.
        pattern_thresholds: Sinuosity constants for the meandering form.
        balance_thresholds: Tilt and regime constants for the scale.

    Returns:
        GeometryFrame.

    Raises:
        DomainViolation: For a non-Pattern pattern, a non-ParameterSet params
                         or a non-finite seed.
    """
    _check_inputs(pattern, params, seed)
    seed = float(seed)

    plan = generate_plan(pattern, params, seed, canvas, pattern_thresholds)
    layout, scale_primitives = generate_scale(
        params, canvas.scale_width, canvas.scale_height, balance_thresholds
    )

    frame = GeometryFrame(
        pattern=pattern.label,
        seed=seed,
        primitives=tuple(plan.primitives) + tuple(scale_primitives),
        flow_paths=tuple(plan.flow_paths),
        flow_elements=tuple(plan.flow_elements),
        scale_layout=layout,
    )
    logger.debug(
        "Generated %s frame: %d primitives, %d flow paths, %d flow elements",
        pattern.label, len(frame.primitives), len(frame.flow_paths), len(frame.flow_elements),
    )
    return frame


def refresh_scale(
    frame: GeometryFrame,
    params: ParameterSet,
    canvas: Canvas = DEFAULT_CANVAS,
    balance_thresholds: BalanceThresholds = DEFAULT_BALANCE_THRESHOLDS,
) -> GeometryFrame:
    """Frame with the plan view of frame and the scale view of params.

    Used when the plan view is kept across a small parameter change; the
    scale always shows the current controls.
    """
    if not isinstance(params, ParameterSet):
        raise DomainViolation(f"params must be a ParameterSet, got {type(params).__name__}")
    layout, scale_primitives = generate_scale(
        params, canvas.scale_width, canvas.scale_height, balance_thresholds
    )
    plan_primitives = tuple(p for p in frame.primitives if p.layer == "plan")
    return replace(
        frame,
        primitives=plan_primitives + tuple(scale_primitives),
        scale_layout=layout,
    )
