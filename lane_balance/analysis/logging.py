"""
Evaluation recorder.

Provides EvaluationLogger — a lightweight observer that records session
Evaluations into an in-memory list.  Supports serialisation to list-of-dicts
for downstream persistence.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..simulation.session import Evaluation


class EvaluationLogger:
    """Records Evaluation objects produced by a BalanceSession.

    Typical use:

        recorder = EvaluationLogger()
        for value in range(1, 101):
            recorder.record(session.set_parameter("Qs", value))

    Attributes:
        max_records: Maximum number of evaluations to retain (None = unlimited).
    """

    def __init__(self, max_records: Optional[int] = None) -> None:
        """Initialise an empty recorder.

        Args:
            max_records: If set, older records are discarded when the buffer
                         exceeds this limit (FIFO).
        """
        if max_records is not None and max_records <= 0:
            raise ValueError(
                f"max_records must be > 0 or None, got {max_records}"
            )
        self.max_records: Optional[int] = max_records
        self._records: List[Evaluation] = []

    def record(self, evaluation: Evaluation) -> None:
        self._records.append(evaluation)
        if self.max_records is not None and len(self._records) > self.max_records:
            self._records.pop(0)  # FIFO eviction

    def records(self) -> List[Evaluation]:
        """Copy of the recorded evaluations in chronological order."""
        return list(self._records)

    def clear(self) -> None:
        self._records = []

    def __len__(self) -> int:
        return len(self._records)

    def to_dicts(self, include_geometry: bool = False) -> List[Dict[str, Any]]:
        """Serialise all recorded evaluations to plain dictionaries."""
        return [e.to_dict(include_geometry=include_geometry) for e in self._records]

    def series(self) -> Dict[str, List[Any]]:
        """Time-series of the headline quantities.

        Returns:
            Dictionary mapping quantity name to list of values.
        """
        return {
            "ratio": [e.balance.ratio for e in self._records],
            "imbalance_index": [e.balance.imbalance_index for e in self._records],
            "tilt_angle_degrees": [e.balance.tilt_angle_degrees for e in self._records],
            "regime": [e.balance.regime.label for e in self._records],
            "pattern": [e.pattern.label for e in self._records],
            "redrawn": [e.redrawn for e in self._records],
        }

    def parameter_series(self) -> Dict[str, List[float]]:
        """Time-series of the four controls, keyed by short name."""
        series: Dict[str, List[float]] = {"Qs": [], "D50": [], "Qw": [], "S": []}
        for evaluation in self._records:
            for key, value in evaluation.params.to_dict().items():
                series[key].append(value)
        return series

    def redraw_count(self) -> int:
        return sum(1 for e in self._records if e.redrawn)
