"""
Balance scale geometry.

Supply side: a pile of rocks in the sediment pan.
    count      = floor(2 + Qs/100 · 10)            ∈ [2, 12]
    base size  = 3 + D50/100 · 7
    layers of three, each 12 units narrower than the one below
    drawn back to front (largest y first)

Transport side: water in a tapered bucket.
    fill       = 0.15 + Qw/100 · 0.7               ∈ [0.15, 0.85]
    amplitude  = 1 + S/100 · 2
    waves      = 2 + floor(S/40)                    (S < 40: 2, < 80: 3, else 4)

Pan positions on the beam follow the moment arm of D50 (sediment pan) and S
(water pan).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

from ..core.balance import (
    DEFAULT_BALANCE_THRESHOLDS,
    BalanceThresholds,
    Regime,
    calculate_indicator_angle,
    calculate_ratio,
    calculate_tilt_angle,
    get_state,
)
from ..core.mapping import normalize
from ..core.parameters import ParameterSet
from ..core.seeding import pseudo_random, sub_seed
from ..systems.tendency import REGIME_COLOURS
from .primitives import CurveKind, Point2, Primitive, ScaleLayout, ShapeKind, Style

ROCK_STROKE = "#4a3520"
BEAM_NEUTRAL = "#666"
WATER_FILL = "#5dade2"
WATER_SURFACE = "#2980b9"

PILE_WIDTH = 50.0
LAYER_NARROWING = 12.0
MIN_LAYER_WIDTH = 10.0
MAX_ROCK_SIZE = 12.0
ROCK_STRIDE = 17


@dataclass(frozen=True)
class Bucket:
    """Interior of the water bucket in water-pan coordinates."""

    top_width: float = 49.0
    bottom_width: float = 37.0
    height: float = 41.0
    top: float = 2.0


DEFAULT_BUCKET = Bucket()


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rock_colour(d50: float) -> str:
    """Finer sediment is lighter, coarser darker."""
    t = d50 / 100.0
    r = round_half_up(200 - t * 60)
    g = round_half_up(170 - t * 70)
    b = round_half_up(120 - t * 50)
    return f"rgb({r}, {g}, {b})"


def rock_count(qs: float) -> int:
    return int(math.floor(2 + (qs / 100.0) * 10))


def wave_count(s: float) -> int:
    return 2 + int(math.floor(s / 40.0))


def fill_fraction(qw: float) -> float:
    return 0.15 + (qw / 100.0) * 0.7


def pan_offset(value: float, beam_length: float, left: bool) -> float:
    """Pan x offset from the pivot: beam · [0.25, 0.50] across the slider range."""
    minimum = beam_length * 0.25
    maximum = beam_length * 0.50
    offset = minimum + normalize(value) * (maximum - minimum)
    return -offset if left else offset


def generate_sediment_pile(qs: float, d50: float) -> List[Primitive]:
    """Rock ellipses in sediment-pan coordinates, sorted back to front.

    Each rock keeps the id and the jitter of its generation index, so adding
    rocks never changes the rocks already on the pile.
    """
    n = rock_count(qs)
    base_size = 3 + (d50 / 100.0) * 7
    base_seed = qs * 1000 + d50 * 10
    colour = rock_colour(d50)

    rocks: List[Tuple[float, Primitive]] = []
    for i in range(n):
        layer = i // 3
        layer_width = max(PILE_WIDTH - layer * LAYER_NARROWING, MIN_LAYER_WIDTH)

        seed = sub_seed(base_seed, 0, i, ROCK_STRIDE)
        rand_x = pseudo_random(seed)
        rand_y = pseudo_random(seed + 1)
        rand_size = pseudo_random(seed + 2)
        x = (rand_x - 0.5) * layer_width
        y = max(18 - layer * base_size * 0.9 - rand_y * 3, 5.0)
        size = min(base_size * (0.7 + rand_size * 0.5), MAX_ROCK_SIZE)

        rotation = pseudo_random(seed + 3) * 360
        aspect = 0.6 + pseudo_random(seed + 4) * 0.35

        rocks.append((y, Primitive(
            id=f"scale/rock/{i}",
            kind=ShapeKind.ELLIPSE,
            role="rock",
            layer="sediment-pan",
            x=x,
            y=y,
            rx=size,
            ry=size * aspect,
            rotation=rotation,
            style=Style(fill=colour, stroke=ROCK_STROKE, stroke_width=0.5),
        )))

    # Stable: equal heights keep generation order.
    rocks.sort(key=lambda item: -item[0])
    return [rock for _, rock in rocks]


def generate_water_fill(qw: float, s: float, bucket: Bucket = DEFAULT_BUCKET) -> List[Primitive]:
    """Water body and wavy surface in water-pan coordinates."""
    water_height = bucket.height * fill_fraction(qw)
    water_top = bucket.top + bucket.height - water_height
    taper = (water_top - bucket.top) / bucket.height
    top_width = bucket.top_width - (bucket.top_width - bucket.bottom_width) * taper
    floor_y = bucket.top + bucket.height

    body = Primitive(
        id="scale/water/body",
        kind=ShapeKind.PATH,
        role="water-fill",
        layer="water-pan",
        points=(
            (-top_width / 2, water_top),
            (-bucket.bottom_width / 2, floor_y),
            (bucket.bottom_width / 2, floor_y),
            (top_width / 2, water_top),
            (-top_width / 2, water_top),
        ),
        curve=CurveKind.LINEAR,
        style=Style(fill=WATER_FILL, opacity=0.85),
    )

    amplitude = 1 + (s / 100.0) * 2
    waves = wave_count(s)
    wave_width = top_width / waves
    left = -top_width / 2
    surface: List[Point2] = [(left, water_top)]
    for i in range(waves):
        direction = -1 if i % 2 == 0 else 1
        surface.append((left + wave_width * i + wave_width / 2, water_top + direction * amplitude))
        surface.append((left + wave_width * (i + 1), water_top))

    wave = Primitive(
        id="scale/water/surface",
        kind=ShapeKind.PATH,
        role="water-surface",
        layer="water-pan",
        points=tuple(surface),
        curve=CurveKind.QUADRATIC,
        style=Style(stroke=WATER_SURFACE, stroke_width=2.0),
    )
    return [body, wave]


def scale_layout(
    params: ParameterSet,
    width: float,
    height: float,
    thresholds: BalanceThresholds = DEFAULT_BALANCE_THRESHOLDS,
) -> ScaleLayout:
    """Beam tilt, needle angle and pan offsets for params."""
    ratio = calculate_ratio(*params.as_tuple())
    beam_length = width * 0.72
    return ScaleLayout(
        pivot=(width / 2, height * 0.38),
        beam_length=beam_length,
        tilt_angle_degrees=calculate_tilt_angle(ratio, thresholds),
        indicator_angle_degrees=calculate_indicator_angle(ratio, thresholds),
        sediment_pan_offset=pan_offset(params.d50, beam_length, left=True),
        water_pan_offset=pan_offset(params.s, beam_length, left=False),
        regime_colour=REGIME_COLOURS[get_state(ratio, thresholds)],
    )


def generate_scale(
    params: ParameterSet,
    width: float,
    height: float,
    thresholds: BalanceThresholds = DEFAULT_BALANCE_THRESHOLDS,
) -> Tuple[ScaleLayout, List[Primitive]]:
    """Layout plus beam, needle, rock pile and water primitives."""
    layout = scale_layout(params, width, height, thresholds)
    regime = get_state(calculate_ratio(*params.as_tuple()), thresholds)
    beam_fill = BEAM_NEUTRAL if regime is Regime.EQUILIBRIUM else layout.regime_colour

    px, py = layout.pivot
    beam = Primitive(
        id="scale/beam",
        kind=ShapeKind.RECT,
        role="beam",
        layer="scale",
        x=px - layout.beam_length / 2,
        y=py - 5,
        rx=layout.beam_length,
        ry=10.0,
        rotation=layout.tilt_angle_degrees,
        style=Style(fill=beam_fill),
    )
    needle = Primitive(
        id="scale/indicator",
        kind=ShapeKind.PATH,
        role="indicator",
        layer="scale",
        x=width / 2,
        y=height * 0.12,
        points=((0.0, -40.0), (-6.0, -25.0), (-2.0, -25.0), (-2.0, 8.0),
                (2.0, 8.0), (2.0, -25.0), (6.0, -25.0), (0.0, -40.0)),
        rotation=layout.indicator_angle_degrees,
        style=Style(fill=layout.regime_colour, stroke="#333", stroke_width=1.0),
    )

    primitives = [beam, needle]
    primitives.extend(generate_sediment_pile(params.qs, params.d50))
    primitives.extend(generate_water_fill(params.qw, params.s))
    return layout, primitives
