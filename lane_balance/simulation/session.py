"""
Balance session.

Provides BalanceSession — the consumer-owned state object that sits between
input controls and the pure engine.  Every parameter change runs one
synchronous recompute step:

    params → evaluate_balance → classify_pattern → compute_seed
           → (redraw gate) → generate_geometry → FlowAnimator

Redraw gate: geometry is regenerated only when the pattern changes or any
control moved by more than one unit since the last generated frame.
Otherwise the previous plan view and its running animation are kept and
only the scale is rebuilt for the current controls.

Usage:
    from lane_balance.simulation.session import BalanceSession

    session = BalanceSession()
    evaluation = session.set_parameter("Qs", 80)
    print(evaluation.balance.regime, evaluation.pattern)
    session.animator.advance(200)
    session.close()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..core.balance import BalanceResult
from ..core.parameters import SHORT_NAMES, ParameterSet
from ..core.seeding import compute_seed
from ..engine import DEFAULT_CONFIG, EngineConfig, classify_pattern, evaluate_balance, generate_geometry
from ..geometry.generator import refresh_scale
from ..geometry.primitives import GeometryFrame
from ..systems.pattern_classifier import Pattern
from ..systems.tendency import TendencySummary, summarize_tendency
from .flow import TICK_MS, FlowAnimator

logger = logging.getLogger("lane_balance.simulation")

REDRAW_TOLERANCE: float = 1.0


@dataclass(frozen=True)
class Evaluation:
    """Result of one recompute step.

    Attributes:
        params:   Parameters evaluated.
        balance:  Balance result.
        pattern:  Channel pattern.
        seed:     Seed for params (the frame may carry an older one when
                  the redraw gate kept it).
        tendency: Summary text.
        frame:    Geometry currently on display.
        redrawn:  Whether this step generated a new frame.
    """

    params: ParameterSet
    balance: BalanceResult
    pattern: Pattern
    seed: float
    tendency: TendencySummary
    frame: GeometryFrame
    redrawn: bool

    def to_dict(self, include_geometry: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "params": self.params.to_dict(),
            "balance": self.balance.to_dict(),
            "pattern": self.pattern.label,
            "seed": self.seed,
            "tendency": self.tendency.to_dict(),
            "redrawn": self.redrawn,
        }
        if include_geometry:
            data["geometry"] = self.frame.to_dict()
        return data


class BalanceSession:
    """Holds the current parameters, frame and animator for one consumer.

    Attributes:
        config:  Engine configuration.
        history: Every Evaluation produced, in order (if record_history).
    """

    def __init__(
        self,
        params: Optional[ParameterSet] = None,
        config: Optional[EngineConfig] = None,
        tick_ms: float = TICK_MS,
        record_history: bool = False,
    ) -> None:
        """Initialise the session and draw the first frame.

        Args:
            params:         Starting parameters (defaults to equilibrium).
            config:         Threshold tables and canvas.
            tick_ms:        Flow animation tick.
            record_history: Keep every Evaluation in history.
        """
        self.config: EngineConfig = config or DEFAULT_CONFIG
        self.tick_ms = tick_ms
        self.record_history = record_history
        self.history: List[Evaluation] = []

        self._params: ParameterSet = params or ParameterSet.equilibrium()
        self._previous: ParameterSet = self._params
        self._last_changed: Optional[str] = None
        self._drawn_params: Optional[ParameterSet] = None
        self._drawn_pattern: Optional[Pattern] = None
        self._frame: Optional[GeometryFrame] = None
        self._animator: Optional[FlowAnimator] = None
        self._closed = False
        self._evaluation: Evaluation = self._recompute()

    # ------------------------------------------------------------------ #
    # Parameter changes                                                    #
    # ------------------------------------------------------------------ #

    def set_parameter(self, name: str, value: float) -> Evaluation:
        """Change one control (short key or field name) and recompute."""
        new_params = self._params.copy_with(**{name: value})
        key = next((k for k, f in SHORT_NAMES.items() if name in (k, f)), name)
        return self._apply(new_params, key)

    def update(self, params: ParameterSet, last_changed: Optional[str] = None) -> Evaluation:
        """Replace all controls at once and recompute.

        When last_changed is None and exactly one control differs, that
        control is credited in the tendency text.
        """
        if last_changed is None:
            changed = params.changed_fields(self._params)
            if len(changed) == 1:
                last_changed = next(k for k, f in SHORT_NAMES.items() if f == changed[0])
        return self._apply(params, last_changed)

    def reset(self) -> Evaluation:
        """Return every control to the equilibrium value."""
        logger.info("Session reset to equilibrium")
        return self._apply(ParameterSet.equilibrium(), None)

    def _apply(self, params: ParameterSet, last_changed: Optional[str]) -> Evaluation:
        if self._closed:
            raise RuntimeError("Session is closed")
        self._previous = self._params
        self._params = params
        self._last_changed = last_changed
        self._evaluation = self._recompute()
        return self._evaluation

    # ------------------------------------------------------------------ #
    # Recompute                                                            #
    # ------------------------------------------------------------------ #

    def needs_redraw(self, params: ParameterSet, pattern: Pattern) -> bool:
        """True when the pattern changed or a control moved by more than one unit."""
        if self._frame is None or self._drawn_params is None:
            return True
        if pattern is not self._drawn_pattern:
            return True
        return bool(params.changed_fields(self._drawn_params, tolerance=REDRAW_TOLERANCE))

    def _recompute(self) -> Evaluation:
        params = self._params
        config = self.config
        balance = evaluate_balance(params, config.balance, config.processes)
        pattern = classify_pattern(params, balance.ratio, config.pattern)
        seed = compute_seed(params, balance.ratio)

        redrawn = self.needs_redraw(params, pattern)
        if redrawn:
            if self._animator is not None:
                self._animator.cancel()
            self._frame = generate_geometry(pattern, params, seed, config)
            self._animator = FlowAnimator.from_frame(self._frame, tick_ms=self.tick_ms)
            if self._drawn_pattern is not None and pattern is not self._drawn_pattern:
                logger.info("Pattern changed %s -> %s; redrawing",
                            self._drawn_pattern.label, pattern.label)
            else:
                logger.debug("Redrawing %s frame (seed %.3f)", pattern.label, seed)
            self._drawn_params = params
            self._drawn_pattern = pattern
        else:
            self._frame = refresh_scale(self._frame, params, config.canvas, config.balance)
            logger.debug("Change within redraw tolerance; keeping plan view")

        tendency = summarize_tendency(
            balance.regime,
            balance.imbalance_index,
            self._last_changed,
            params,
            self._previous,
        )
        evaluation = Evaluation(
            params=params,
            balance=balance,
            pattern=pattern,
            seed=seed,
            tendency=tendency,
            frame=self._frame,
            redrawn=redrawn,
        )
        if self.record_history:
            self.history.append(evaluation)
        return evaluation

    # ------------------------------------------------------------------ #
    # State access                                                         #
    # ------------------------------------------------------------------ #

    @property
    def params(self) -> ParameterSet:
        return self._params

    @property
    def evaluation(self) -> Evaluation:
        return self._evaluation

    @property
    def frame(self) -> GeometryFrame:
        return self._evaluation.frame

    @property
    def animator(self) -> FlowAnimator:
        """Animator for the frame on display."""
        if self._animator is None:
            raise RuntimeError("Session has no animator")
        return self._animator

    @property
    def last_changed(self) -> Optional[str]:
        return self._last_changed

    # ------------------------------------------------------------------ #
    # Teardown                                                             #
    # ------------------------------------------------------------------ #

    def close(self) -> None:
        """Cancel the running animator; the session accepts no more changes."""
        if self._animator is not None:
            self._animator.cancel()
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "BalanceSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
