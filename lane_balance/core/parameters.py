"""
Parameter set for the Lane's balance engine.

The four controls of the balance are bounded scalars on a common slider scale:

    Qs   — sediment discharge
    D50  — median sediment size
    Qw   — water discharge
    S    — channel slope

Each lies in the closed range [1, 100].  A ParameterSet is immutable; every
external change produces a new instance.  Out-of-range values are rejected at
construction time with DomainViolation rather than clamped, so that a caller
bug never hides behind a downstream guard.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Any, Dict, Tuple

PARAMETER_MIN: float = 1.0
PARAMETER_MAX: float = 100.0
EQUILIBRIUM_VALUE: float = 50.0

# Short keys used on the slider scale → dataclass field names.
SHORT_NAMES: Dict[str, str] = {
    "Qs": "sediment_discharge",
    "D50": "sediment_size",
    "Qw": "water_discharge",
    "S": "slope",
}
FIELD_ORDER: Tuple[str, ...] = tuple(SHORT_NAMES.values())


class DomainViolation(ValueError):
    """Raised when an input lies outside its documented domain."""


def check_domain(name: str, value: float) -> float:
    """Return value as float if it lies in [1, 100], otherwise raise.

    Args:
        name:  Parameter name used in the error message.
        value: Candidate value.

    Returns:
        The value converted to float.

    Raises:
        DomainViolation: If value is non-numeric, non-finite or out of range.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise DomainViolation(f"{name} must be a real number, got {value!r}")
    value = float(value)
    if not math.isfinite(value) or not (PARAMETER_MIN <= value <= PARAMETER_MAX):
        raise DomainViolation(
            f"{name} must be in [{PARAMETER_MIN:g}, {PARAMETER_MAX:g}], got {value}"
        )
    return value


@dataclass(frozen=True)
class ParameterSet:
    """Immutable, validated set of the four balance controls.

    Attributes:
        sediment_discharge: Qs ∈ [1, 100].
        sediment_size:      D50 ∈ [1, 100] (log-mapped to 0.1–100 mm).
        water_discharge:    Qw ∈ [1, 100].
        slope:              S ∈ [1, 100].
    """

    sediment_discharge: float
    sediment_size: float
    water_discharge: float
    slope: float

    def __post_init__(self) -> None:
        """Reject any out-of-range value at construction time."""
        for name in FIELD_ORDER:
            object.__setattr__(self, name, check_domain(name, getattr(self, name)))

    # ------------------------------------------------------------------ #
    # Short aliases used in the balance formulas                           #
    # ------------------------------------------------------------------ #

    @property
    def qs(self) -> float:
        return self.sediment_discharge

    @property
    def d50(self) -> float:
        return self.sediment_size

    @property
    def qw(self) -> float:
        return self.water_discharge

    @property
    def s(self) -> float:
        return self.slope

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """Return (Qs, D50, Qw, S)."""
        return (self.sediment_discharge, self.sediment_size,
                self.water_discharge, self.slope)

    # ------------------------------------------------------------------ #
    # Construction helpers                                                 #
    # ------------------------------------------------------------------ #

    @classmethod
    def equilibrium(cls) -> "ParameterSet":
        """All four controls at the midpoint (the reset state)."""
        return cls(EQUILIBRIUM_VALUE, EQUILIBRIUM_VALUE,
                   EQUILIBRIUM_VALUE, EQUILIBRIUM_VALUE)

    def copy_with(self, **kwargs: float) -> "ParameterSet":
        """Return a new ParameterSet with selected fields overridden.

        Both field names and short keys (Qs, D50, Qw, S) are accepted.
        """
        current = self.to_dict(short=False)
        for key, value in kwargs.items():
            name = SHORT_NAMES.get(key, key)
            if name not in current:
                raise KeyError(f"Unknown parameter: {key}")
            current[name] = value
        return ParameterSet(**current)

    def changed_fields(self, other: "ParameterSet", tolerance: float = 0.0) -> Tuple[str, ...]:
        """Field names whose absolute difference to other exceeds tolerance."""
        return tuple(
            name for name in FIELD_ORDER
            if abs(getattr(self, name) - getattr(other, name)) > tolerance
        )

    def to_dict(self, short: bool = True) -> Dict[str, float]:
        """Serialise to plain dictionary (short slider keys by default)."""
        if short:
            return {key: getattr(self, name) for key, name in SHORT_NAMES.items()}
        return {name: getattr(self, name) for name in FIELD_ORDER}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParameterSet":
        """Deserialise from a dictionary using short keys or field names."""
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = SHORT_NAMES.get(key, key)
            if name not in FIELD_ORDER:
                raise KeyError(f"Unknown parameter: {key}")
            kwargs[name] = value
        missing = [name for name in FIELD_ORDER if name not in kwargs]
        if missing:
            raise KeyError(f"Missing parameters: {missing}")
        return cls(**kwargs)
