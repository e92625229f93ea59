"""
Flow marker animation.

The flow overlay is the one piece of mutable state in the system and it
belongs to the consumer, not the engine.  A FlowAnimator is seeded once from a
GeometryFrame's flow paths and elements and then advanced on a fixed cadence:

    every whole 50 ms tick:  offset ← (offset + speed) mod path length

Time is supplied by the caller (a frame timestamp or an elapsed interval);
the animator never reads a clock.  The remainder of a partial tick carries
over, so the marker positions depend only on the total elapsed time and
re-sending the same timestamp is a no-op.

Once cancelled, an animator is inert: advancing it does nothing and no hook
fires again.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Optional, Tuple

from ..geometry.curves import Polyline
from ..geometry.primitives import FlowElement, FlowPath, GeometryFrame

logger = logging.getLogger("lane_balance.simulation")

TICK_MS: float = 50.0

# Type alias for tick hooks:  hook(animator, ticks_applied) -> None
TickHook = Callable[["FlowAnimator", int], None]


class FlowAnimator:
    """Fixed-tick animator for the flow markers of one frame.

    Attributes:
        tick_ms: Tick length in milliseconds.
    """

    def __init__(
        self,
        flow_paths: Tuple[FlowPath, ...],
        flow_elements: Tuple[FlowElement, ...],
        tick_ms: float = TICK_MS,
        tick_hooks: Optional[List[TickHook]] = None,
    ) -> None:
        """Initialise the animator.

        Args:
            flow_paths:    Paths the markers travel along.
            flow_elements: Initial marker states.
            tick_ms:       Tick length in milliseconds.
            tick_hooks:    Callables invoked with (animator, ticks) after each
                           advance that applied at least one tick.

        Raises:
            ValueError: If tick_ms is not positive or an element references
                        an unknown path.
        """
        if not tick_ms > 0:
            raise ValueError(f"tick_ms must be positive, got {tick_ms}")
        self.tick_ms: float = float(tick_ms)
        self._curves: Dict[str, Polyline] = {
            path.id: Polyline.catmull_rom(path.points) for path in flow_paths
        }
        self._lengths: Dict[str, float] = {
            path_id: curve.length for path_id, curve in self._curves.items()
        }
        for element in flow_elements:
            if element.path_id not in self._curves:
                raise ValueError(
                    f"Flow element {element.id!r} references unknown path {element.path_id!r}"
                )
        self._elements: Tuple[FlowElement, ...] = tuple(flow_elements)
        self._offsets: List[float] = [e.offset for e in flow_elements]
        self._hooks: List[TickHook] = list(tick_hooks or [])
        self._clock_ms: float = 0.0
        self._last_tick_ms: float = 0.0
        self._ticks: int = 0
        self._cancelled: bool = False

    @classmethod
    def from_frame(cls, frame: GeometryFrame, tick_ms: float = TICK_MS) -> "FlowAnimator":
        return cls(frame.flow_paths, frame.flow_elements, tick_ms=tick_ms)

    # ------------------------------------------------------------------ #
    # Advancing                                                            #
    # ------------------------------------------------------------------ #

    def advance_to(self, timestamp_ms: float) -> int:
        """Advance to an absolute timestamp.

        Args:
            timestamp_ms: Caller clock in milliseconds, measured from the
                          animator's start.

        Returns:
            Number of ticks applied (0 when cancelled or within the same tick).

        Raises:
            ValueError: If timestamp_ms is earlier than the previous one.
        """
        if self._cancelled:
            return 0
        if not math.isfinite(timestamp_ms):
            raise ValueError(f"timestamp must be finite, got {timestamp_ms}")
        if timestamp_ms < self._clock_ms:
            raise ValueError(
                f"timestamp {timestamp_ms} ms is earlier than the last one ({self._clock_ms} ms)"
            )
        self._clock_ms = float(timestamp_ms)

        ticks = int(math.floor((self._clock_ms - self._last_tick_ms) / self.tick_ms))
        if ticks <= 0:
            return 0
        self._last_tick_ms += ticks * self.tick_ms
        self._step(ticks)
        self._ticks += ticks

        for hook in self._hooks:
            hook(self, ticks)
        return ticks

    def advance(self, elapsed_ms: float) -> int:
        """Advance by an elapsed interval; see advance_to()."""
        if elapsed_ms < 0:
            raise ValueError(f"elapsed time must be non-negative, got {elapsed_ms}")
        return self.advance_to(self._clock_ms + elapsed_ms)

    def _step(self, ticks: int) -> None:
        for i, element in enumerate(self._elements):
            length = self._lengths[element.path_id]
            if length <= 0:
                continue
            self._offsets[i] = (self._offsets[i] + element.speed * ticks) % length

    # ------------------------------------------------------------------ #
    # Cancellation                                                         #
    # ------------------------------------------------------------------ #

    def cancel(self) -> None:
        """Stop the animator for good; safe to call more than once."""
        if not self._cancelled:
            logger.debug("Flow animator cancelled after %d ticks", self._ticks)
        self._cancelled = True
        self._hooks = []

    @property
    def active(self) -> bool:
        return not self._cancelled

    # ------------------------------------------------------------------ #
    # State access                                                         #
    # ------------------------------------------------------------------ #

    @property
    def ticks(self) -> int:
        """Total ticks applied so far."""
        return self._ticks

    @property
    def clock_ms(self) -> float:
        return self._clock_ms

    def __len__(self) -> int:
        return len(self._elements)

    def offsets(self) -> Dict[str, float]:
        return {e.id: self._offsets[i] for i, e in enumerate(self._elements)}

    def positions(self) -> Dict[str, Tuple[float, float]]:
        """Current (x, y) of every marker, keyed by element id."""
        return {
            e.id: self._curves[e.path_id].point_at(self._offsets[i])
            for i, e in enumerate(self._elements)
        }

    def register_hook(self, hook: TickHook) -> None:
        """Add a tick callback; ignored once cancelled."""
        if not self._cancelled:
            self._hooks.append(hook)
