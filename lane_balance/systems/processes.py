"""
Active geomorphic processes.

Given the balance ratio and the stream power proxy, lists the processes that
are active for the current regime.  The list is deterministic and ordered:
the most universal process of a regime comes first and the checks append in
a fixed order.

  DEGRADATION  — Bed incision, then Bank erosion (power > 0.3), Knickpoint
                 migration (power > 0.5), Bed armoring (ratio < 0.5)
  AGGRADATION  — Bar formation, then Channel widening (ratio > 1.5),
                 Avulsion risk (ratio > 2), and always Overbank deposition last
  EQUILIBRIUM  — Sediment transport balance, Dynamic equilibrium
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from ..core.balance import (
    DEFAULT_BALANCE_THRESHOLDS,
    BalanceThresholds,
    Regime,
    calculate_stream_power,
    get_state,
)


@dataclass(frozen=True)
class ProcessThresholds:
    """Gates for the regime-specific processes.

    Attributes:
        bank_erosion_power:     Stream power above which banks erode.
        knickpoint_power:       Stream power above which knickpoints migrate.
        armoring_ratio:         Ratio below which the bed armors.
        widening_ratio:         Ratio above which the channel widens.
        avulsion_ratio:         Ratio above which avulsion becomes a risk.
    """

    bank_erosion_power: float = 0.3
    knickpoint_power: float = 0.5
    armoring_ratio: float = 0.5
    widening_ratio: float = 1.5
    avulsion_ratio: float = 2.0

    def __post_init__(self) -> None:
        """Validate gate ranges."""
        for name in ("bank_erosion_power", "knickpoint_power"):
            value = getattr(self, name)
            if not 0.0 < value < 1.0:
                raise ValueError(f"ProcessThresholds.{name} must be in (0, 1), got {value}")
        if not 0.0 < self.armoring_ratio < 1.0:
            raise ValueError(
                f"ProcessThresholds.armoring_ratio must be in (0, 1), got {self.armoring_ratio}"
            )
        for name in ("widening_ratio", "avulsion_ratio"):
            value = getattr(self, name)
            if not value > 1.0:
                raise ValueError(f"ProcessThresholds.{name} must be > 1, got {value}")

    def to_dict(self) -> Dict[str, float]:
        return dict(self.__dict__)


DEFAULT_PROCESS_THRESHOLDS = ProcessThresholds()


@dataclass(frozen=True)
class ActiveProcess:
    """A named process tagged with the regime that activates it."""

    name: str
    regime: Regime

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "type": self.regime.label}


def get_active_processes(
    ratio: float,
    qw: float,
    s: float,
    thresholds: ProcessThresholds = DEFAULT_PROCESS_THRESHOLDS,
    balance_thresholds: BalanceThresholds = DEFAULT_BALANCE_THRESHOLDS,
) -> Tuple[ActiveProcess, ...]:
    """Ordered active processes for the regime implied by ratio.

    Args:
        ratio:              Balance ratio.
        qw:                 Water discharge slider value.
        s:                  Slope slider value.
        thresholds:         Process gates.
        balance_thresholds: Regime dead band used to decide the regime.

    Returns:
        Tuple of ActiveProcess in display order.
    """
    state = get_state(ratio, balance_thresholds)
    stream_power = calculate_stream_power(qw, s)
    processes: List[ActiveProcess] = []

    if state is Regime.DEGRADATION:
        processes.append(ActiveProcess("Bed incision", state))
        if stream_power > thresholds.bank_erosion_power:
            processes.append(ActiveProcess("Bank erosion", state))
        if stream_power > thresholds.knickpoint_power:
            processes.append(ActiveProcess("Knickpoint migration", state))
        if ratio < thresholds.armoring_ratio:
            processes.append(ActiveProcess("Bed armoring", state))
    elif state is Regime.AGGRADATION:
        processes.append(ActiveProcess("Bar formation", state))
        if ratio > thresholds.widening_ratio:
            processes.append(ActiveProcess("Channel widening", state))
        if ratio > thresholds.avulsion_ratio:
            processes.append(ActiveProcess("Avulsion risk", state))
        processes.append(ActiveProcess("Overbank deposition", state))
    else:
        processes.append(ActiveProcess("Sediment transport balance", state))
        processes.append(ActiveProcess("Dynamic equilibrium", state))

    return tuple(processes)
