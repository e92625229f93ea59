"""Threshold-table subsystems: active processes, channel pattern, tendency text."""
from .processes import ActiveProcess, ProcessThresholds, get_active_processes
from .pattern_classifier import (
    Pattern,
    PatternThresholds,
    braiding_index,
    classify_pattern,
    get_channel_pattern,
    sinuosity_factor,
)
from .tendency import TendencySummary, summarize_tendency, why_sentence

__all__ = [
    "ActiveProcess",
    "ProcessThresholds",
    "get_active_processes",
    "Pattern",
    "PatternThresholds",
    "braiding_index",
    "classify_pattern",
    "get_channel_pattern",
    "sinuosity_factor",
    "TendencySummary",
    "summarize_tendency",
    "why_sentence",
]
