"""Tests for the seeded geometry generator."""

import json
import math

import numpy as np
import pytest

from lane_balance.core.parameters import DomainViolation, ParameterSet
from lane_balance.engine import EngineConfig, generate_geometry
from lane_balance.geometry.generator import Canvas, refresh_scale
from lane_balance.geometry.plan import (
    generate_braided,
    generate_meandering,
    mid_channel_bar_count,
)
from lane_balance.geometry.primitives import Primitive, ShapeKind
from lane_balance.geometry.scale import (
    generate_sediment_pile,
    generate_water_fill,
    pan_offset,
    rock_colour,
    rock_count,
    scale_layout,
    wave_count,
)
from lane_balance.systems.pattern_classifier import Pattern

BRAIDED = ParameterSet(100, 100, 50, 50)
STRAIGHT = ParameterSet(30, 30, 10, 50)


# --------------------------------------------------------------------------- #
# Frame                                                                         #
# --------------------------------------------------------------------------- #

@pytest.mark.parametrize("params, pattern", [
    (ParameterSet.equilibrium(), "meandering"),
    (BRAIDED, "braided"),
    (STRAIGHT, "straight"),
])
def test_frames_are_deterministic(make_frame, params, pattern):
    first = make_frame(params)
    second = make_frame(params)
    assert first.pattern == pattern
    assert first == second
    assert first.fingerprint() == second.fingerprint()


def test_primitive_ids_are_unique(make_frame):
    for params in (ParameterSet.equilibrium(), BRAIDED, STRAIGHT):
        ids = make_frame(params).ids()
        assert len(ids) == len(set(ids)), f"duplicate ids for {params.to_dict()}"


def test_plan_primitives_precede_scale(make_frame):
    layers = [p.layer for p in make_frame(ParameterSet.equilibrium())]
    first_scale = next(i for i, layer in enumerate(layers) if layer != "plan")
    assert all(layer != "plan" for layer in layers[first_scale:])
    assert layers[0] == "plan"


def test_different_seeds_change_the_plan():
    params = STRAIGHT
    a = generate_geometry(Pattern.STRAIGHT, params, 1.0)
    b = generate_geometry(Pattern.STRAIGHT, params, 2.0)
    assert a.get("plan/channel") != b.get("plan/channel")
    assert a.get("scale/beam") == b.get("scale/beam")


def test_frame_serialises_to_json(make_frame):
    frame = make_frame(ParameterSet.equilibrium())
    data = json.loads(frame.to_json())
    assert data["pattern"] == "meandering"
    assert len(data["primitives"]) == len(frame)
    assert data["scale_layout"]["regime_colour"] == "#27ae60"
    channel = next(p for p in data["primitives"] if p["id"] == "plan/channel")
    assert channel["curve"] == "catmull-rom"


def test_frame_lookup(make_frame):
    frame = make_frame(ParameterSet.equilibrium())
    assert frame.get("plan/floodplain").role == "floodplain"
    assert frame.flow_path("plan/channel").length > 0
    with pytest.raises(KeyError):
        frame.get("plan/nothing")
    assert frame.count("rock") == len(frame.by_role("rock"))


def test_invalid_inputs_raise_domain_violation(midpoint):
    with pytest.raises(DomainViolation):
        generate_geometry(1, midpoint, 1.0)
    with pytest.raises(DomainViolation):
        generate_geometry(Pattern.MEANDERING, midpoint.to_dict(), 1.0)
    with pytest.raises(DomainViolation):
        generate_geometry(Pattern.MEANDERING, midpoint, math.nan)
    with pytest.raises(DomainViolation):
        Canvas(plan_width=100)
    with pytest.raises(DomainViolation):
        Canvas(scale_height=-1)


def test_primitive_validation():
    with pytest.raises(ValueError):
        Primitive(id="x", kind=ShapeKind.RECT, role="r", layer="nowhere")
    with pytest.raises(ValueError):
        Primitive(id="x", kind=ShapeKind.PATH, role="r", layer="plan", points=((0.0, 0.0),))


def test_custom_canvas(midpoint):
    config = EngineConfig(canvas=Canvas(plan_width=800, plan_height=200))
    frame = generate_geometry(Pattern.MEANDERING, midpoint, 1.0, config)
    floodplain = frame.get("plan/floodplain")
    assert (floodplain.rx, floodplain.ry) == (800, 200)


# --------------------------------------------------------------------------- #
# Plan view                                                                     #
# --------------------------------------------------------------------------- #

def test_straight_flow_elements():
    frame = generate_geometry(Pattern.STRAIGHT, STRAIGHT, 7.0)
    assert len(frame.flow_elements) == 12
    assert {e.path_id for e in frame.flow_elements} == {"plan/channel"}
    assert all(e.opacity == 0.6 for e in frame.flow_elements)


def test_meander_point_bars_depend_on_sinuosity():
    curvy = generate_meandering(50, 50, 50, 1.0, 560, 140)
    assert any(p.role == "point-bar" for p in curvy.primitives)
    # sinuosity floors at 1.05 with heavy load and low discharge
    flat = generate_meandering(100, 50, 20, 1.0, 560, 140)
    assert not any(p.role == "point-bar" for p in flat.primitives)


@pytest.mark.parametrize("qs, d50, count", [
    (20, 20, 0), (35, 35, 0), (50, 50, 1), (100, 100, 7),
])
def test_mid_channel_bar_count(qs, d50, count):
    assert mid_channel_bar_count(qs, d50) == count


def test_mid_channel_bars_are_stable_prefixes():
    few = generate_meandering(60, 60, 50, 3.0, 560, 140)
    many = generate_meandering(90, 60, 50, 3.0, 560, 140)
    few_bars = [p for p in few.primitives if p.role == "mid-channel-bar"]
    many_bars = {p.id: p for p in many.primitives if p.role == "mid-channel-bar"}
    assert 0 < len(few_bars) < len(many_bars)
    for bar in few_bars:
        assert many_bars[bar.id].rx == bar.rx
        assert many_bars[bar.id].rotation == bar.rotation


def test_braided_counts():
    plan = generate_braided(100, 100, 50, 5.0, 560, 140)
    roles = [p.role for p in plan.primitives]
    assert roles.count("gravel-patch") == 73
    assert roles.count("thread") == 5
    assert roles.count("thread-highlight") == 5
    assert roles.count("connector") == 7
    assert len(plan.flow_paths) == 5
    assert all(e.path_id.startswith("plan/thread/") for e in plan.flow_elements)


def test_braided_threads_independent_of_sediment():
    a = generate_braided(10, 80, 50, 9.0, 560, 140)
    b = generate_braided(100, 80, 50, 9.0, 560, 140)
    threads_a = [p for p in a.primitives if p.role == "thread"]
    threads_b = [p for p in b.primitives if p.role == "thread"]
    assert threads_a == threads_b
    assert a.flow_elements == b.flow_elements


def test_braided_threads_stay_in_corridor():
    plan = generate_braided(80, 80, 100, 11.0, 560, 140)
    corridor = 60 + 50
    for path in plan.flow_paths:
        ys = [y for _, y in path.points]
        assert min(ys) >= 70 - corridor / 2 - 1e-9
        assert max(ys) <= 70 + corridor / 2 + 1e-9


# --------------------------------------------------------------------------- #
# Scale                                                                         #
# --------------------------------------------------------------------------- #

@pytest.mark.parametrize("qs, count", [(1, 2), (50, 7), (100, 12)])
def test_rock_count(qs, count):
    assert rock_count(qs) == count
    assert len(generate_sediment_pile(qs, 50)) == count


def test_rocks_drawn_back_to_front():
    rocks = generate_sediment_pile(100, 70)
    ys = [r.y for r in rocks]
    assert ys == sorted(ys, reverse=True)
    assert all(r.layer == "sediment-pan" for r in rocks)
    assert all(r.rx <= 12.0 for r in rocks)


def test_rock_ids_follow_generation_index():
    rocks = generate_sediment_pile(64, 40)
    assert {r.id for r in rocks} == {f"scale/rock/{i}" for i in range(rock_count(64))}


def test_rock_colour_darkens_with_grain_size():
    assert rock_colour(0) == "rgb(200, 170, 120)"
    assert rock_colour(100) == "rgb(140, 100, 70)"


@pytest.mark.parametrize("s, waves", [(1, 2), (39, 2), (40, 3), (79, 3), (80, 4), (100, 4)])
def test_wave_bands(s, waves):
    assert wave_count(s) == waves
    surface = generate_water_fill(50, s)[1]
    # start point, then a (control, end) pair per wave
    assert len(surface.points) == 1 + 2 * waves


def test_water_level_rises_with_discharge():
    low = generate_water_fill(1, 50)[0]
    high = generate_water_fill(100, 50)[0]
    # smaller y is higher in the bucket
    assert high.points[0][1] < low.points[0][1]


def test_scale_layout(midpoint):
    layout = scale_layout(midpoint, 500, 280)
    assert layout.pivot == (250, 280 * 0.38)
    assert layout.beam_length == pytest.approx(360)
    assert layout.sediment_pan_offset < 0 < layout.water_pan_offset
    assert pan_offset(1, 360, left=True) == -90
    assert pan_offset(100, 360, left=False) == 180


def test_beam_colour_and_rotation(make_frame, midpoint):
    frame = make_frame(midpoint)
    assert frame.get("scale/beam").style.fill == "#666"
    heavy = make_frame(ParameterSet(90, 80, 20, 20))
    beam = heavy.get("scale/beam")
    assert beam.style.fill == "#d68910"
    assert beam.rotation == heavy.scale_layout.tilt_angle_degrees < 0


def test_refresh_scale_keeps_plan(make_frame, midpoint):
    frame = make_frame(midpoint)
    moved = midpoint.copy_with(Qs=50.5)
    refreshed = refresh_scale(frame, moved)
    plan = [p for p in frame if p.layer == "plan"]
    assert [p for p in refreshed if p.layer == "plan"] == plan
    assert refreshed.seed == frame.seed
    assert refreshed.flow_elements == frame.flow_elements
    assert refreshed.scale_layout != frame.scale_layout


def test_numpy_seed_and_canvas(midpoint):
    canvas = Canvas(plan_width=np.int64(600), plan_height=np.int64(150))
    assert canvas.plan_width == 600.0 and type(canvas.plan_width) is float
    frame = generate_geometry(Pattern.MEANDERING, midpoint, np.int64(7), EngineConfig(canvas=canvas))
    assert frame.seed == 7.0
    assert frame == generate_geometry(Pattern.MEANDERING, midpoint, 7.0, EngineConfig(canvas=canvas))
    assert json.loads(frame.to_json())["primitives"][0]["rx"] == 600.0
