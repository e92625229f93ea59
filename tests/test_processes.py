"""Tests for the active process lists."""

import pytest

from lane_balance.core.balance import Regime
from lane_balance.systems.processes import ProcessThresholds, get_active_processes


def _names(ratio, qw, s, thresholds=ProcessThresholds()):
    return [p.name for p in get_active_processes(ratio, qw, s, thresholds)]


def test_equilibrium_processes():
    assert _names(1.0, 10, 90) == ["Sediment transport balance", "Dynamic equilibrium"]


def test_degradation_low_power():
    assert _names(0.8, 10, 10) == ["Bed incision"]


def test_degradation_all_processes_in_order():
    assert _names(0.2, 100, 100) == [
        "Bed incision", "Bank erosion", "Knickpoint migration", "Bed armoring",
    ]


def test_degradation_bank_erosion_only():
    # power 0.36: above bank erosion gate, below knickpoint gate
    assert _names(0.6, 60, 60) == ["Bed incision", "Bank erosion"]


@pytest.mark.parametrize("ratio, expected", [
    (1.2, ["Bar formation", "Overbank deposition"]),
    (1.8, ["Bar formation", "Channel widening", "Overbank deposition"]),
    (2.0, ["Bar formation", "Channel widening", "Overbank deposition"]),
    (3.0, ["Bar formation", "Channel widening", "Avulsion risk", "Overbank deposition"]),
])
def test_aggradation_processes(ratio, expected):
    assert _names(ratio, 50, 50) == expected


def test_processes_are_tagged_with_regime():
    processes = get_active_processes(0.2, 100, 100)
    assert all(p.regime is Regime.DEGRADATION for p in processes)
    assert processes[0].to_dict() == {"name": "Bed incision", "type": "degradation"}


def test_custom_thresholds():
    relaxed = ProcessThresholds(bank_erosion_power=0.01)
    # power 0.02
    assert "Bank erosion" in _names(0.8, 20, 10, relaxed)


def test_power_gates_are_strict():
    # power exactly 0.01 does not clear a 0.01 gate
    relaxed = ProcessThresholds(bank_erosion_power=0.01)
    assert _names(0.8, 10, 10, relaxed) == ["Bed incision"]
    # power exactly 0.3 / 0.5 with the defaults
    assert _names(0.8, 60, 50) == ["Bed incision"]
    assert _names(0.8, 100, 50) == ["Bed incision", "Bank erosion"]


def test_threshold_validation():
    with pytest.raises(ValueError):
        ProcessThresholds(bank_erosion_power=1.5)
    with pytest.raises(ValueError):
        ProcessThresholds(armoring_ratio=1.0)
    with pytest.raises(ValueError):
        ProcessThresholds(avulsion_ratio=0.9)
