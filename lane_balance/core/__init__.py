"""Parameter domain, slider mappings, balance ratio and seeding."""
from .parameters import DomainViolation, ParameterSet, check_domain
from .mapping import format_log_magnitude, map_d50, map_log, map_slope, normalize
from .balance import (
    BalanceResult,
    BalanceThresholds,
    Regime,
    calculate_indicator_angle,
    calculate_ratio,
    calculate_stream_power,
    calculate_tilt_angle,
    describe_regime,
    get_imbalance_index,
    get_state,
)
from .seeding import compute_seed, pseudo_random, ratio_key, sub_seed

__all__ = [
    "DomainViolation",
    "ParameterSet",
    "check_domain",
    "format_log_magnitude",
    "map_d50",
    "map_log",
    "map_slope",
    "normalize",
    "BalanceResult",
    "BalanceThresholds",
    "Regime",
    "calculate_indicator_angle",
    "calculate_ratio",
    "calculate_stream_power",
    "calculate_tilt_angle",
    "describe_regime",
    "get_imbalance_index",
    "get_state",
    "compute_seed",
    "pseudo_random",
    "ratio_key",
    "sub_seed",
]
