"""Tests for parameter sweeps and the evaluation recorder."""

import math

import pytest

from lane_balance.analysis.logging import EvaluationLogger
from lane_balance.analysis.metrics import (
    axis_values,
    parameter_grid,
    pattern_distribution,
    regime_distribution,
    summary_statistics,
    sweep,
)
from lane_balance.core.balance import Regime
from lane_balance.core.parameters import ParameterSet
from lane_balance.simulation.session import BalanceSession
from lane_balance.systems.pattern_classifier import Pattern


def test_axis_values():
    values = axis_values(3)
    assert values.tolist() == [1.0, 50.5, 100.0]
    with pytest.raises(ValueError):
        axis_values(1)


def test_parameter_grid():
    assert len(parameter_grid(2)) == 16
    grid = parameter_grid(3, {"Qw": 50})
    assert len(grid) == 27
    assert all(p.qw == 50 for p in grid)
    assert grid[0] == ParameterSet(1, 1, 50, 1)
    with pytest.raises(KeyError):
        parameter_grid(3, {"Flow": 10})


def test_sweep_single_point():
    (record,) = sweep([ParameterSet.equilibrium()])
    assert record.balance.regime is Regime.EQUILIBRIUM
    assert record.pattern is Pattern.MEANDERING
    assert record.to_dict()["pattern"] == "meandering"


def test_distributions_sum_to_one():
    records = sweep(parameter_grid(4))
    assert math.isclose(sum(regime_distribution(records).values()), 1.0)
    assert math.isclose(sum(pattern_distribution(records).values()), 1.0)


def test_summary_statistics():
    stats = summary_statistics(sweep(parameter_grid(3)))
    assert stats["n_points"] == 81
    assert -2.0 <= stats["min_imbalance_index"] <= stats["mean_imbalance_index"] \
        <= stats["max_imbalance_index"] <= 2.0
    assert stats["fraction_braided"] > 0
    assert stats["fraction_straight"] > 0
    assert summary_statistics([]) == {"n_points": 0.0}


def test_evaluation_logger():
    recorder = EvaluationLogger(max_records=3)
    with BalanceSession() as session:
        recorder.record(session.evaluation)
        for value in (50.5, 60, 70, 70.5):
            recorder.record(session.set_parameter("Qs", value))
    assert len(recorder) == 3
    assert recorder.parameter_series()["Qs"] == [60, 70, 70.5]
    assert recorder.series()["redrawn"] == [True, True, False]
    assert recorder.redraw_count() == 2
    assert recorder.to_dicts()[0]["params"]["Qs"] == 60
    recorder.clear()
    assert len(recorder) == 0
    with pytest.raises(ValueError):
        EvaluationLogger(max_records=0)
