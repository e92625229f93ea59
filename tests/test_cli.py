"""Tests for the command-line interface."""

import json

import pytest

from lane_balance.cli import main


def test_evaluate_json(capsys):
    main(["evaluate", "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["balance"]["regime"] == "equilibrium"
    assert data["pattern"] == "meandering"
    assert data["params"] == {"Qs": 50.0, "D50": 50.0, "Qw": 50.0, "S": 50.0}


def test_evaluate_scenario_with_override(capsys):
    main(["evaluate", "--scenario", "sediment_pulse"])
    out = capsys.readouterr().out
    assert "Braided Channel" in out
    assert "Tendency: Aggradation" in out
    assert "Avulsion risk" in out

    main(["evaluate", "--scenario", "sediment_pulse", "--qs", "5", "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["params"]["Qs"] == 5.0
    assert data["params"]["D50"] == 85.0


def test_evaluate_out_of_range_exits(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["evaluate", "--qs", "0"])
    assert excinfo.value.code == 2


@pytest.mark.parametrize("argv", [
    ["evaluate", "--scenario", "nope"],
    ["sweep", "--fix", "Qs"],
    ["sweep", "--fix", "Qs=abc"],
    ["sweep", "--steps", "1"],
])
def test_bad_input_exits_with_usage_error(argv, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 2
    assert "error:" in capsys.readouterr().err


def test_geometry_to_file(tmp_path):
    target = tmp_path / "frame.json"
    main(["geometry", "--qw", "10", "--qs", "30", "--d50", "30", "--output", str(target)])
    frame = json.loads(target.read_text())
    assert frame["pattern"] == "straight"
    assert any(p["id"] == "plan/channel" for p in frame["primitives"])


def test_sweep_json(capsys):
    main(["sweep", "--steps", "2", "--fix", "S=50", "--json"])
    stats = json.loads(capsys.readouterr().out)
    assert stats["n_points"] == 8


def test_scenarios_listing(capsys):
    main(["scenarios"])
    out = capsys.readouterr().out
    assert "equilibrium: equilibrium, meandering" in out
    assert "sediment_starved: degradation, meandering" in out


def test_info(capsys):
    main(["info"])
    out = capsys.readouterr().out
    assert "dead_band: 0.05" in out
    assert "braided_index: 0.5" in out


def test_validate(capsys):
    main(["validate"])
    assert "All 10 validation checks passed." in capsys.readouterr().out


def test_command_required():
    with pytest.raises(SystemExit):
        main([])
