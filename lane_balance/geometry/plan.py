"""
Plan-view channel geometry.

Three channel forms, each a pure function of the controls, the frame seed and
the canvas size:

    straight    — one jittered thread, 21 samples
    meandering  — sinusoidal centreline with point bars on the inside of the
                  bends and mid-channel bars that ramp in with sediment
    braided     — gravel braidplain, weaving threads and connectors

Every feature family draws its own sub-seeds (frame seed + family offset +
index · stride), so the number of features in one family never changes the
shape of another.

    family              offset  stride
    straight jitter       1000      13
    braided base          2000
      gravel patches     +1000      17
      threads                       97
      connectors         +3000      41
    point bars            3000      23
    mid-channel bars      4000      37
      gravel clasts     bar+100     11
    braided flow jitter            100 per thread
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from ..core.seeding import pseudo_random, sub_seed
from ..systems.pattern_classifier import (
    DEFAULT_PATTERN_THRESHOLDS,
    PatternThresholds,
    sinuosity_factor,
)
from .curves import Polyline
from .primitives import (
    CurveKind,
    FlowElement,
    FlowPath,
    Point2,
    Primitive,
    ShapeKind,
    Style,
)

FLOODPLAIN = "#e8e4d9"
BANK = "#8b4513"
CHANNEL = "#5dade2"
POINT_BAR = "#cd853f"
CLAST = "#6b6b6b"
BRAIDPLAIN_BANK = "#6b5d4d"
BRAIDPLAIN_GRAVEL = "#a89888"
THREAD = "#b8d4e8"
THREAD_HIGHLIGHT = "#d8eef8"

STRAIGHT_SEED_OFFSET = 1000
BRAIDED_SEED_OFFSET = 2000
POINT_BAR_SEED_OFFSET = 3000
MID_BAR_SEED_OFFSET = 4000

POINT_BAR_MIN_SINUOSITY = 1.2
MID_BAR_THRESHOLD = 0.35


@dataclass
class PlanGeometry:
    """Accumulator for one plan-view frame."""

    primitives: List[Primitive] = field(default_factory=list)
    flow_paths: List[FlowPath] = field(default_factory=list)
    flow_elements: List[FlowElement] = field(default_factory=list)

    def add(self, primitive: Primitive) -> None:
        self.primitives.append(primitive)


def _rgb(r: float, g: float, b: float) -> str:
    return "rgb({}, {}, {})".format(*(int(math.floor(c + 0.5)) for c in (r, g, b)))


def _path(id_: str, role: str, points: List[Point2], colour: str, width: float,
          opacity: float) -> Primitive:
    return Primitive(
        id=id_,
        kind=ShapeKind.PATH,
        role=role,
        layer="plan",
        points=tuple(points),
        curve=CurveKind.CATMULL_ROM,
        style=Style(stroke=colour, stroke_width=width, opacity=opacity),
    )


def floodplain(width: float, height: float) -> Primitive:
    return Primitive(
        id="plan/floodplain",
        kind=ShapeKind.RECT,
        role="floodplain",
        layer="plan",
        rx=width,
        ry=height,
        style=Style(fill=FLOODPLAIN),
    )


# ---------------------------------------------------------------------- #
# Single-thread channels                                                   #
# ---------------------------------------------------------------------- #

def _channel_strokes(geometry: PlanGeometry, points: List[Point2], width: float) -> None:
    geometry.add(_path("plan/bank", "channel-bank", points, BANK, width + 4, 0.3))
    geometry.add(_path("plan/channel", "channel", points, CHANNEL, width, 0.8))


def _single_thread_flow(geometry: PlanGeometry, points: List[Point2], qw: float) -> None:
    """Evenly spaced flow elements along the main channel."""
    curve = Polyline.catmull_rom(points)
    path = FlowPath(id="plan/channel", points=tuple(points), length=curve.length)
    geometry.flow_paths.append(path)

    n = int(math.floor(10 + qw / 5))
    radius = 1.5 + (qw / 100.0) * 1.5
    speed = 0.5 + (qw / 100.0) * 0.5
    offsets = (path.length / n) * np.arange(n)
    positions = curve.points_at(offsets)
    for i in range(n):
        geometry.flow_elements.append(FlowElement(
            id=f"flow/{i}",
            path_id=path.id,
            offset=float(offsets[i]),
            speed=speed,
            radius=radius,
            x=float(positions[i, 0]),
            y=float(positions[i, 1]),
            opacity=0.6,
        ))


def generate_straight(qw: float, seed: float, width: float, height: float) -> PlanGeometry:
    """Nearly straight thread with ±2.5 units of per-sample jitter."""
    geometry = PlanGeometry()
    geometry.add(floodplain(width, height))

    channel_width = 12 + (qw / 100.0) * 20
    centre_y = height / 2
    base = seed + STRAIGHT_SEED_OFFSET
    points: List[Point2] = []
    for i in range(21):
        x = (i / 20) * width
        y = centre_y + (pseudo_random(sub_seed(base, 0, i, 13)) - 0.5) * 5
        points.append((x, y))

    _channel_strokes(geometry, points, channel_width)
    _single_thread_flow(geometry, points, qw)
    return geometry


def meander_centreline(qw: float, sinuosity: float, width: float, height: float) -> Tuple[List[Point2], float]:
    """101-sample sinusoidal centreline and the channel width."""
    channel_width = 15 + (qw / 100.0) * 25
    amplitude = 25 * sinuosity
    wavelength = width / 3
    x = np.arange(101) / 100 * width
    y = height / 2 + np.sin((x / wavelength) * math.pi * 2) * amplitude
    return list(zip(x.tolist(), y.tolist())), channel_width


def point_bars(points: List[Point2], channel_width: float, sinuosity: float,
               seed: float, height: float) -> List[Primitive]:
    """Point bars on the inside of the bends found at samples 10, 35, 60, 85."""
    if sinuosity < POINT_BAR_MIN_SINUOSITY:
        return []

    bends: List[Tuple[float, float, int]] = []
    for i in range(10, len(points) - 10, 25):
        prev_y = points[i - 5][1]
        y = points[i][1]
        next_y = points[i + 5][1]
        if (y > prev_y and y > next_y) or (y < prev_y and y < next_y):
            side = -1 if y > height / 2 else 1
            bends.append((points[i][0], y, side))

    bars = []
    for k, (x, y, side) in enumerate(bends):
        offset = channel_width * (0.25 + pseudo_random(sub_seed(seed, POINT_BAR_SEED_OFFSET, k, 23)) * 0.15)
        bars.append(Primitive(
            id=f"plan/point-bar/{k}",
            kind=ShapeKind.ELLIPSE,
            role="point-bar",
            layer="plan",
            x=x,
            y=y + side * offset,
            rx=channel_width * 0.55,
            ry=channel_width * 0.28,
            style=Style(fill=POINT_BAR, opacity=0.7),
        ))
    return bars


def mid_channel_bar_count(qs: float, d50: float) -> int:
    """Zero below a combined factor of 0.35, then a linear ramp."""
    factor = (qs / 100.0 + d50 / 100.0) / 2
    if factor < MID_BAR_THRESHOLD:
        return 0
    return max(0, int(math.floor((factor - MID_BAR_THRESHOLD) * 12)))


def mid_channel_bars(points: List[Point2], channel_width: float, qs: float,
                     d50: float, seed: float) -> List[Primitive]:
    """Ellipsoidal bars inside the channel; larger bars carry gravel clasts."""
    primitives: List[Primitive] = []
    size_multiplier = 0.5 + (d50 / 100.0) * 0.8
    shade = 180 - (d50 / 100.0) * 40
    colour = _rgb(shade + 25, shade - 10, shade - 50)

    for i in range(mid_channel_bar_count(qs, d50)):
        bar_seed = sub_seed(seed, MID_BAR_SEED_OFFSET, i, 37)
        t = 0.15 + pseudo_random(bar_seed) * 0.7
        px, py = points[int(math.floor(t * (len(points) - 1)))]

        magnitude = channel_width * 0.2 * pseudo_random(bar_seed + 1)
        direction = 1 if pseudo_random(bar_seed + 2) > 0.5 else -1
        bar_width = channel_width * (0.2 + pseudo_random(bar_seed + 3) * 0.25) * size_multiplier
        bar_height = bar_width * (0.4 + pseudo_random(bar_seed + 4) * 0.3)
        rotation = (pseudo_random(bar_seed + 5) - 0.5) * 40
        cy = py + direction * magnitude

        primitives.append(Primitive(
            id=f"plan/mid-bar/{i}",
            kind=ShapeKind.ELLIPSE,
            role="mid-channel-bar",
            layer="plan",
            x=px,
            y=cy,
            rx=bar_width,
            ry=bar_height,
            rotation=rotation,
            style=Style(fill=colour, opacity=0.6 + pseudo_random(bar_seed + 6) * 0.25),
        ))

        if bar_width > channel_width * 0.25:
            clasts = 2 + int(math.floor(pseudo_random(bar_seed + 7) * 4))
            for g in range(clasts):
                g_seed = sub_seed(bar_seed, 100, g, 11)
                primitives.append(Primitive(
                    id=f"plan/mid-bar/{i}/clast/{g}",
                    kind=ShapeKind.CIRCLE,
                    role="clast",
                    layer="plan",
                    x=px + (pseudo_random(g_seed) - 0.5) * bar_width * 0.8,
                    y=cy + (pseudo_random(g_seed + 1) - 0.5) * bar_height * 0.8,
                    rx=0.8 + pseudo_random(g_seed + 2) * 1.2,
                    ry=0.8 + pseudo_random(g_seed + 2) * 1.2,
                    style=Style(fill=CLAST, opacity=0.5),
                ))
    return primitives


def generate_meandering(
    qs: float,
    d50: float,
    qw: float,
    seed: float,
    width: float,
    height: float,
    thresholds: PatternThresholds = DEFAULT_PATTERN_THRESHOLDS,
) -> PlanGeometry:
    geometry = PlanGeometry()
    geometry.add(floodplain(width, height))

    sinuosity = sinuosity_factor(qs, qw, thresholds)
    points, channel_width = meander_centreline(qw, sinuosity, width, height)

    _channel_strokes(geometry, points, channel_width)
    geometry.primitives.extend(point_bars(points, channel_width, sinuosity, seed, height))
    geometry.primitives.extend(mid_channel_bars(points, channel_width, qs, d50, seed))
    _single_thread_flow(geometry, points, qw)
    return geometry


# ---------------------------------------------------------------------- #
# Braided                                                                  #
# ---------------------------------------------------------------------- #

def braided_thread(channel_seed: float, qw: float, corridor: float,
                   centre_y: float, width: float) -> Tuple[List[Point2], float]:
    """41-sample two-harmonic thread clamped inside the corridor."""
    thread_width = 3 + (qw / 100.0) * 5 + pseudo_random(channel_seed) * 4
    y_start = (pseudo_random(channel_seed + 1) - 0.5) * (corridor * 0.7)
    frequency = 2 + pseudo_random(channel_seed + 2) * 2
    amplitude = 8 + pseudo_random(channel_seed + 3) * 12

    t = np.arange(41) / 40
    drift = np.array([(pseudo_random(channel_seed + 4 + i) - 0.5) * 8 for i in range(41)])
    y = (
        centre_y + y_start
        + np.sin(t * math.pi * frequency) * amplitude
        + np.sin(t * math.pi * frequency * 2.3) * (amplitude * 0.4)
        + drift
    )
    y = np.clip(y, centre_y - corridor / 2 + thread_width, centre_y + corridor / 2 - thread_width)
    return list(zip((t * width).tolist(), y.tolist())), thread_width


def generate_braided(
    qs: float,
    d50: float,
    qw: float,
    seed: float,
    width: float,
    height: float,
) -> PlanGeometry:
    """Gravel braidplain with weaving threads and anastomosing connectors."""
    geometry = PlanGeometry()
    geometry.add(floodplain(width, height))

    corridor = 60 + (qw / 100.0) * 50
    centre_y = height / 2
    base = seed + BRAIDED_SEED_OFFSET

    geometry.add(Primitive(
        id="plan/braidplain/bank", kind=ShapeKind.RECT, role="braidplain-bank",
        layer="plan", x=0.0, y=centre_y - corridor / 2 - 4, rx=width, ry=corridor + 8,
        style=Style(fill=BRAIDPLAIN_BANK),
    ))
    geometry.add(Primitive(
        id="plan/braidplain/gravel", kind=ShapeKind.RECT, role="braidplain-gravel",
        layer="plan", x=0.0, y=centre_y - corridor / 2, rx=width, ry=corridor,
        style=Style(fill=BRAIDPLAIN_GRAVEL),
    ))

    patches = 40 + int(math.floor(qs / 3))
    for i in range(patches):
        g_seed = sub_seed(base, 1000, i, 17)
        radius = 2 + pseudo_random(g_seed + 2) * 6
        grey = 130 + pseudo_random(g_seed + 3) * 50 - (d50 / 100.0) * 20
        geometry.add(Primitive(
            id=f"plan/gravel/{i}",
            kind=ShapeKind.ELLIPSE,
            role="gravel-patch",
            layer="plan",
            x=pseudo_random(g_seed) * width,
            y=centre_y + (pseudo_random(g_seed + 1) - 0.5) * (corridor - 8),
            rx=radius * (1 + pseudo_random(g_seed + 4) * 0.5),
            ry=radius * (0.5 + pseudo_random(g_seed + 5) * 0.3),
            style=Style(fill=_rgb(grey + 10, grey, grey - 15),
                        opacity=0.4 + pseudo_random(g_seed + 6) * 0.3),
        ))

    n_threads = 3 + int(math.floor(qw / 25))
    threads: List[Tuple[List[Point2], float]] = []
    for c in range(n_threads):
        points, thread_width = braided_thread(sub_seed(base, 0, c, 97), qw, corridor, centre_y, width)
        threads.append((points, thread_width))
        geometry.add(_path(f"plan/thread/{c}", "thread", points, THREAD, thread_width, 0.85))
        geometry.add(_path(f"plan/thread/{c}/highlight", "thread-highlight", points,
                           THREAD_HIGHLIGHT, thread_width * 0.4, 0.6))

    geometry.primitives.extend(connectors(threads, base, width))
    _braided_flow(geometry, threads, qw, seed)
    return geometry


def connectors(threads: List[Tuple[List[Point2], float]], base: float, width: float) -> List[Primitive]:
    """Short links from one thread at x − 15 to another at x + 15."""
    n_threads = len(threads)
    primitives: List[Primitive] = []
    if n_threads < 2:
        return primitives

    for i in range(int(math.floor(n_threads * 1.5))):
        c_seed = sub_seed(base, 3000, i, 41)
        x = 50 + pseudo_random(c_seed) * (width - 100)
        a = int(math.floor(pseudo_random(c_seed + 5) * n_threads))
        b = (a + 1 + int(math.floor(pseudo_random(c_seed + 6) * (n_threads - 1)))) % n_threads

        xs_a, ys_a = zip(*threads[a][0])
        xs_b, ys_b = zip(*threads[b][0])
        y1 = float(np.interp(x - 15, xs_a, ys_a))
        y2 = float(np.interp(x + 15, xs_b, ys_b))
        mid = (y1 + y2) / 2 + (pseudo_random(c_seed + 4) - 0.5) * 10

        primitives.append(_path(
            f"plan/connector/{i}", "connector",
            [(x - 15, y1), (x, mid), (x + 15, y2)],
            THREAD, 2 + pseudo_random(c_seed + 3) * 3, 0.7,
        ))
    return primitives


def _braided_flow(geometry: PlanGeometry, threads: List[Tuple[List[Point2], float]],
                  qw: float, seed: float) -> None:
    radius = 1.2 + (qw / 100.0)
    speed = 0.6 + (qw / 100.0) * 0.8
    for c, (points, _) in enumerate(threads):
        curve = Polyline.catmull_rom(points)
        path = FlowPath(id=f"plan/thread/{c}", points=tuple(points), length=curve.length)
        geometry.flow_paths.append(path)

        n = int(math.floor(path.length / 40 + qw / 20))
        if n <= 0:
            continue
        offsets = np.array([
            ((path.length / n) * i + pseudo_random(seed + c * 100 + i) * 20) % path.length
            for i in range(n)
        ])
        positions = curve.points_at(offsets)
        for i in range(n):
            geometry.flow_elements.append(FlowElement(
                id=f"flow/{c}-{i}",
                path_id=path.id,
                offset=float(offsets[i]),
                speed=speed,
                radius=radius,
                x=float(positions[i, 0]),
                y=float(positions[i, 1]),
            ))
