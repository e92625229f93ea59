"""Tests for BalanceSession and the redraw gate."""

import pytest

from lane_balance.core.balance import Regime
from lane_balance.core.parameters import DomainViolation, ParameterSet
from lane_balance.systems.pattern_classifier import Pattern
from lane_balance.simulation.session import BalanceSession


def test_initial_state():
    with BalanceSession() as session:
        evaluation = session.evaluation
        assert evaluation.redrawn
        assert evaluation.balance.regime is Regime.EQUILIBRIUM
        assert evaluation.pattern is Pattern.MEANDERING
        assert evaluation.tendency.label == "Tendency: Near equilibrium"
        assert session.animator.active


def test_small_change_keeps_plan_view():
    with BalanceSession() as session:
        first = session.frame
        animator = session.animator
        evaluation = session.set_parameter("Qs", 50.5)
        assert not evaluation.redrawn
        assert session.animator is animator and animator.active
        assert session.frame.get("plan/channel") == first.get("plan/channel")
        assert session.frame.seed == first.seed
        assert evaluation.seed != first.seed
        # The scale always follows the current controls.
        assert session.frame.scale_layout.tilt_angle_degrees == pytest.approx(
            evaluation.balance.tilt_angle_degrees
        )


def test_gate_measures_against_drawn_frame():
    with BalanceSession() as session:
        assert not session.set_parameter("Qs", 50.6).redrawn
        assert session.set_parameter("Qs", 51.2).redrawn


def test_pattern_change_forces_redraw():
    with BalanceSession(ParameterSet(20, 20, 15.5, 50)) as session:
        assert session.evaluation.pattern is Pattern.MEANDERING
        old = session.animator
        evaluation = session.set_parameter("Qw", 14.6)
        assert evaluation.pattern is Pattern.STRAIGHT
        assert evaluation.redrawn
        assert not old.active
        assert session.animator is not old
        assert session.frame.pattern == "straight"


def test_why_credits_last_change():
    with BalanceSession() as session:
        evaluation = session.set_parameter("Qs", 80)
        assert evaluation.balance.regime is Regime.AGGRADATION
        assert evaluation.tendency.why.endswith(
            "The increased sediment supply (Qs) contributed to this."
        )
        assert session.last_changed == "Qs"


def test_update_infers_single_change():
    with BalanceSession() as session:
        evaluation = session.update(ParameterSet(50, 50, 50, 20))
        assert session.last_changed == "S"
        assert "decreased channel slope (S)" in evaluation.tendency.why

        session.update(ParameterSet(60, 50, 40, 20))
        assert session.last_changed is None


def test_reset():
    with BalanceSession(ParameterSet(90, 90, 10, 10)) as session:
        evaluation = session.reset()
        assert session.params == ParameterSet.equilibrium()
        assert evaluation.balance.regime is Regime.EQUILIBRIUM
        assert session.last_changed is None


def test_invalid_change_leaves_state_untouched():
    with BalanceSession() as session:
        before = session.evaluation
        with pytest.raises(DomainViolation):
            session.set_parameter("Qs", 0)
        with pytest.raises(KeyError):
            session.set_parameter("Qx", 10)
        assert session.evaluation is before


def test_close():
    session = BalanceSession()
    animator = session.animator
    session.close()
    assert session.closed
    assert not animator.active
    with pytest.raises(RuntimeError):
        session.set_parameter("Qs", 60)


def test_history_and_serialisation():
    with BalanceSession(record_history=True) as session:
        session.set_parameter("Qw", 80)
        session.set_parameter("Qw", 80.5)
        assert [e.redrawn for e in session.history] == [True, True, False]
        data = session.evaluation.to_dict(include_geometry=True)
        assert data["params"]["Qw"] == 80.5
        assert data["geometry"]["pattern"] == data["pattern"]
