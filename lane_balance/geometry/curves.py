"""
Centripetal Catmull-Rom curves.

Channel centrelines are rendered as centripetal (alpha = 0.5) Catmull-Rom
splines through their sample points.  Each span is converted to a cubic
Bézier using the Barry–Goldman control point construction; the first and
last spans reuse their end point as the outer control point, so the curve
passes through every sample and stops exactly at both ends.

The flow overlay needs arc length and point-at-distance on that curve, so the
Béziers are densely sampled into a polyline and measured with numpy.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

ALPHA: float = 0.5
SAMPLES_PER_SPAN: int = 16
_EPSILON: float = 1e-12


def _as_array(points: Sequence[Tuple[float, float]]) -> np.ndarray:
    array = np.asarray(points, dtype=np.float64)
    if array.ndim != 2 or array.shape[1] != 2:
        raise ValueError(f"points must have shape (n, 2), got {array.shape}")
    if array.shape[0] < 2:
        raise ValueError("a curve needs at least two points")
    return array


def bezier_controls(
    points: Sequence[Tuple[float, float]], alpha: float = ALPHA
) -> Tuple[np.ndarray, np.ndarray]:
    """Inner Bézier control points for every span of the spline.

    Args:
        points: Sample points, shape (n, 2).
        alpha:  Parameterisation exponent (0.5 = centripetal).

    Returns:
        (c1, c2), each of shape (n − 1, 2): the control points of the span
        from points[i] to points[i + 1].
    """
    p = _as_array(points)
    n = p.shape[0]
    if n == 2:
        return p[:-1].copy(), p[1:].copy()

    d = np.linalg.norm(np.diff(p, axis=0), axis=1)
    l12_a = d ** alpha
    l12_2a = d ** (2.0 * alpha)

    # Distances to the outer neighbours; the ends have none.
    l01_a = np.concatenate(([0.0], l12_a[:-1]))
    l01_2a = np.concatenate(([0.0], l12_2a[:-1]))
    l23_a = np.concatenate((l12_a[1:], [0.0]))
    l23_2a = np.concatenate((l12_2a[1:], [0.0]))

    p0 = np.vstack((p[:1], p[:-2]))
    p1 = p[:-1]
    p2 = p[1:]
    p3 = np.vstack((p[2:], p[-1:]))

    has_prev = l01_a > _EPSILON
    has_next = l23_a > _EPSILON

    a = 2.0 * l01_2a + 3.0 * l01_a * l12_a + l12_2a
    nn = 3.0 * l01_a * (l01_a + l12_a)
    nn = np.where(has_prev, nn, 1.0)
    c1 = (p1 * a[:, None] - p0 * l12_2a[:, None] + p2 * l01_2a[:, None]) / nn[:, None]
    c1 = np.where(has_prev[:, None], c1, p1)

    b = 2.0 * l23_2a + 3.0 * l23_a * l12_a + l12_2a
    m = 3.0 * l23_a * (l23_a + l12_a)
    m = np.where(has_next, m, 1.0)
    c2 = (p2 * b[:, None] + p1 * l23_2a[:, None] - p3 * l12_2a[:, None]) / m[:, None]
    c2 = np.where(has_next[:, None], c2, p2)

    return c1, c2


def sample_catmull_rom(
    points: Sequence[Tuple[float, float]],
    samples_per_span: int = SAMPLES_PER_SPAN,
    alpha: float = ALPHA,
) -> np.ndarray:
    """Densely sample the spline through points.

    Returns:
        Array of shape ((n − 1) · samples_per_span + 1, 2).
    """
    if samples_per_span < 1:
        raise ValueError(f"samples_per_span must be >= 1, got {samples_per_span}")
    p = _as_array(points)
    c1, c2 = bezier_controls(p, alpha)
    start = p[:-1]
    end = p[1:]

    t = np.linspace(0.0, 1.0, samples_per_span, endpoint=False)[None, :, None]
    u = 1.0 - t
    spans = (
        u ** 3 * start[:, None, :]
        + 3.0 * u ** 2 * t * c1[:, None, :]
        + 3.0 * u * t ** 2 * c2[:, None, :]
        + t ** 3 * end[:, None, :]
    )
    return np.vstack((spans.reshape(-1, 2), p[-1:]))


class Polyline:
    """Arc-length parameterised polyline.

    Attributes:
        vertices:   Array of shape (m, 2).
        cumulative: Cumulative length at each vertex, starting at 0.
    """

    def __init__(self, vertices: np.ndarray) -> None:
        self.vertices = np.asarray(vertices, dtype=np.float64)
        segment = np.linalg.norm(np.diff(self.vertices, axis=0), axis=1)
        self.cumulative = np.concatenate(([0.0], np.cumsum(segment)))

    @classmethod
    def catmull_rom(
        cls,
        points: Sequence[Tuple[float, float]],
        samples_per_span: int = SAMPLES_PER_SPAN,
    ) -> "Polyline":
        return cls(sample_catmull_rom(points, samples_per_span))

    @property
    def length(self) -> float:
        return float(self.cumulative[-1])

    def point_at(self, distance: float) -> Tuple[float, float]:
        """Point at arc length distance, clamped to [0, length]."""
        d = min(max(distance, 0.0), self.length)
        x = float(np.interp(d, self.cumulative, self.vertices[:, 0]))
        y = float(np.interp(d, self.cumulative, self.vertices[:, 1]))
        return x, y

    def points_at(self, distances: np.ndarray) -> np.ndarray:
        """Vectorised point_at; returns shape (k, 2)."""
        d = np.clip(np.asarray(distances, dtype=np.float64), 0.0, self.length)
        return np.column_stack((
            np.interp(d, self.cumulative, self.vertices[:, 0]),
            np.interp(d, self.cumulative, self.vertices[:, 1]),
        ))


def path_length(points: Sequence[Tuple[float, float]]) -> float:
    """Arc length of the centripetal Catmull-Rom curve through points."""
    return Polyline.catmull_rom(points).length
