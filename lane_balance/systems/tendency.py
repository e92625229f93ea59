"""
Tendency summary text.

Human-readable companion to a balance evaluation: a tendency label, a short
"why" sentence that credits the last changed control, and the imbalance index
formatted to two decimals.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from ..core.balance import Regime, describe_regime
from ..core.parameters import SHORT_NAMES, ParameterSet

TENDENCY_LABELS: Dict[Regime, str] = {
    Regime.AGGRADATION: "Tendency: Aggradation",
    Regime.DEGRADATION: "Tendency: Degradation",
    Regime.EQUILIBRIUM: "Tendency: Near equilibrium",
}

PARAMETER_DESCRIPTIONS: Dict[str, str] = {
    "Qs": "sediment supply (Qs)",
    "D50": "sediment size (D50)",
    "Qw": "water discharge (Qw)",
    "S": "channel slope (S)",
}

REGIME_COLOURS: Dict[Regime, str] = {
    Regime.DEGRADATION: "#c0392b",
    Regime.EQUILIBRIUM: "#27ae60",
    Regime.AGGRADATION: "#d68910",
}


def tendency_label(regime: Regime) -> str:
    return TENDENCY_LABELS[regime]


def imbalance_text(imbalance_index: float) -> str:
    # + 0.0 folds a negative zero into "0.00"
    return f"Imbalance index I = {imbalance_index + 0.0:.2f}"


def _short_key(name: str) -> str:
    for key, field_name in SHORT_NAMES.items():
        if name in (key, field_name):
            return key
    raise KeyError(f"Unknown parameter: {name}")


def why_sentence(
    regime: Regime,
    last_changed: Optional[str] = None,
    current: Optional[ParameterSet] = None,
    previous: Optional[ParameterSet] = None,
) -> str:
    """Explain the regime, crediting the last changed control when known.

    Args:
        regime:       Current regime.
        last_changed: Short key or field name of the last moved control.
        current:      Parameters now.
        previous:     Parameters before the last change.

    Returns:
        The regime description, followed by a sentence naming the moved
        control and its direction when it actually changed.  Equilibrium
        never credits a control.
    """
    description = describe_regime(regime)
    if regime is Regime.EQUILIBRIUM or last_changed is None:
        return description
    if current is None or previous is None:
        return description

    key = _short_key(last_changed)
    field_name = SHORT_NAMES[key]
    now = getattr(current, field_name)
    before = getattr(previous, field_name)
    if now == before:
        return description
    direction = "increased" if now > before else "decreased"
    return f"{description} The {direction} {PARAMETER_DESCRIPTIONS[key]} contributed to this."


@dataclass(frozen=True)
class TendencySummary:
    """Label, explanation and index text for one evaluation."""

    label: str
    why: str
    imbalance: str
    colour: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "label": self.label,
            "why": self.why,
            "imbalance": self.imbalance,
            "colour": self.colour,
        }


def summarize_tendency(
    regime: Regime,
    imbalance_index: float,
    last_changed: Optional[str] = None,
    current: Optional[ParameterSet] = None,
    previous: Optional[ParameterSet] = None,
) -> TendencySummary:
    return TendencySummary(
        label=tendency_label(regime),
        why=why_sentence(regime, last_changed, current, previous),
        imbalance=imbalance_text(imbalance_index),
        colour=REGIME_COLOURS[regime],
    )
