"""Tests for the channel pattern classifier."""

import math

import pytest

from lane_balance.core.balance import calculate_ratio
from lane_balance.core.parameters import ParameterSet
from lane_balance.systems.pattern_classifier import (
    Pattern,
    PatternThresholds,
    aggradation_factor,
    braiding_index,
    classify_pattern,
    get_channel_pattern,
    sinuosity_factor,
)


def test_midpoint_meanders(midpoint):
    ratio = calculate_ratio(*midpoint.as_tuple())
    assert classify_pattern(midpoint, ratio) is Pattern.MEANDERING


def test_high_load_braids():
    assert math.isclose(braiding_index(100, 100, 1.0), 0.6)
    assert get_channel_pattern(100, 100, 50, 50, 1.0) is Pattern.BRAIDED


def test_low_discharge_is_straight():
    assert get_channel_pattern(20, 20, 10, 50, 0.5) is Pattern.STRAIGHT
    # 0.15 itself is not below the threshold.
    assert get_channel_pattern(20, 20, 15, 50, 0.5) is Pattern.MEANDERING


def test_braiding_wins_over_straight():
    assert get_channel_pattern(100, 100, 5, 50, 1.0) is Pattern.BRAIDED


def test_slope_does_not_enter_the_decision():
    for s in (1, 50, 100):
        assert get_channel_pattern(60, 40, 50, s, 1.2) is get_channel_pattern(60, 40, 50, 1, 1.2)


@pytest.mark.parametrize("ratio, expected", [
    (0.5, 0.0), (1.0, 0.0), (1.5, 0.15), (2.0, 0.3), (5.0, 0.3),
])
def test_aggradation_factor_is_capped(ratio, expected):
    assert math.isclose(aggradation_factor(ratio), expected, abs_tol=1e-12)


def test_aggradation_pushes_towards_braiding():
    # index 0.45 without aggradation, 0.6 with ratio 1.5
    assert get_channel_pattern(70, 82, 50, 50, 0.9) is Pattern.MEANDERING
    assert get_channel_pattern(70, 82, 50, 50, 1.5) is Pattern.BRAIDED


def test_sinuosity_factor():
    assert math.isclose(sinuosity_factor(0, 100), 1.6)
    assert math.isclose(sinuosity_factor(50, 50), 1.25)
    assert sinuosity_factor(100, 0) == 1.05


def test_custom_thresholds():
    eager = PatternThresholds(braided_index=0.2)
    params = ParameterSet.equilibrium()
    ratio = calculate_ratio(*params.as_tuple())
    assert classify_pattern(params, ratio, eager) is Pattern.BRAIDED


def test_threshold_validation():
    with pytest.raises(ValueError):
        PatternThresholds(load_weight=1.5)
    with pytest.raises(ValueError):
        PatternThresholds(sinuosity_floor=0.9)


def test_pattern_labels():
    assert Pattern.BRAIDED.label == "braided"
    assert Pattern.MEANDERING.title == "Meandering Channel"
