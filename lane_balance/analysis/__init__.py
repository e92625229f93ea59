"""Evaluation recording, parameter sweeps, and property validation."""
from .logging import EvaluationLogger
from .metrics import parameter_grid, summary_statistics, sweep

__all__ = ["EvaluationLogger", "parameter_grid", "summary_statistics", "sweep"]
