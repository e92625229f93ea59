"""
Geometry primitives.

A GeometryFrame is the complete, ordered description of what a renderer has to
draw for one parameter set: typed shape descriptors with style hints and a
stable id, plus the path metadata the flow overlay needs.

Coordinate frames (the ``layer`` of a primitive):

    plan          — plan canvas, origin top-left, y down
    scale         — scale panel, origin top-left, y down
    sediment-pan  — local to the sediment pan content (x = 0 on the pan axis)
    water-pan     — local to the bucket content (y = 0 at the bucket rim)

Where the pans sit on the beam is carried separately by ScaleLayout.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

Point2 = Tuple[float, float]

LAYERS: Tuple[str, ...] = ("plan", "scale", "sediment-pan", "water-pan")


class ShapeKind(str, Enum):
    """Shape of a primitive."""

    ELLIPSE = "ellipse"
    CIRCLE = "circle"
    PATH = "path"
    RECT = "rect"


class CurveKind(str, Enum):
    """How the points of a PATH primitive are joined."""

    LINEAR = "linear"
    CATMULL_ROM = "catmull-rom"
    # start point, then (control, end) pairs
    QUADRATIC = "quadratic"


@dataclass(frozen=True)
class Style:
    """Paint hints for a primitive."""

    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: float = 0.0
    opacity: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fill": self.fill,
            "stroke": self.stroke,
            "stroke_width": self.stroke_width,
            "opacity": self.opacity,
        }


@dataclass(frozen=True)
class Primitive:
    """One drawable shape.

    Attributes:
        id:       Stable identity, e.g. ``plan/point-bar/0``.
        kind:     Shape kind.
        role:     Semantic role (``rock``, ``channel``, ``mid-channel-bar`` ...).
        layer:    Coordinate frame, one of LAYERS.
        x, y:     Centre for ellipses and circles, top-left for rects,
                  rotation pivot for paths.
        rx, ry:   Radii for ellipses and circles; width and height for rects.
        points:   Vertices for paths.
        curve:    Interpolation of the path vertices.
        rotation: Rotation in degrees about (x, y).
        style:    Paint hints.
    """

    id: str
    kind: ShapeKind
    role: str
    layer: str
    x: float = 0.0
    y: float = 0.0
    rx: float = 0.0
    ry: float = 0.0
    points: Tuple[Point2, ...] = ()
    curve: CurveKind = CurveKind.LINEAR
    rotation: float = 0.0
    style: Style = field(default_factory=Style)

    def __post_init__(self) -> None:
        if self.layer not in LAYERS:
            raise ValueError(f"Unknown layer {self.layer!r}; expected one of {LAYERS}")
        if self.kind is ShapeKind.PATH and len(self.points) < 2:
            raise ValueError(f"Path primitive {self.id!r} needs at least two points")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "kind": self.kind.value,
            "role": self.role,
            "layer": self.layer,
            "x": self.x,
            "y": self.y,
            "rotation": self.rotation,
            "style": self.style.to_dict(),
        }
        if self.kind is ShapeKind.PATH:
            data["points"] = [list(p) for p in self.points]
            data["curve"] = self.curve.value
        else:
            data["rx"] = self.rx
            data["ry"] = self.ry
        return data


@dataclass(frozen=True)
class FlowPath:
    """A centreline along which flow elements travel.

    ``length`` is measured on the rendered centripetal Catmull-Rom curve.
    """

    id: str
    points: Tuple[Point2, ...]
    length: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "points": [list(p) for p in self.points],
            "length": self.length,
        }


@dataclass(frozen=True)
class FlowElement:
    """Initial state of one animated flow marker."""

    id: str
    path_id: str
    offset: float
    speed: float
    radius: float
    x: float
    y: float
    opacity: float = 0.8

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)


@dataclass(frozen=True)
class ScaleLayout:
    """Placement of the balance scale parts on the scale panel.

    Attributes:
        pivot:              Beam pivot in scale coordinates.
        beam_length:        Beam length.
        tilt_angle_degrees: Beam rotation (negative = sediment pan down).
        indicator_angle_degrees: Needle rotation (positive = aggradation).
        sediment_pan_offset: Sediment pan x offset from the pivot (negative).
        water_pan_offset:   Water pan x offset from the pivot (positive).
        regime_colour:      Colour hint for the current regime.
    """

    pivot: Point2
    beam_length: float
    tilt_angle_degrees: float
    indicator_angle_degrees: float
    sediment_pan_offset: float
    water_pan_offset: float
    regime_colour: str

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.__dict__)
        data["pivot"] = list(self.pivot)
        return data


@dataclass(frozen=True)
class GeometryFrame:
    """Ordered primitive list plus flow metadata for one parameter set.

    Frames are pure values: two frames generated from identical inputs
    compare equal and share a fingerprint.
    """

    pattern: str
    seed: float
    primitives: Tuple[Primitive, ...]
    flow_paths: Tuple[FlowPath, ...] = ()
    flow_elements: Tuple[FlowElement, ...] = ()
    scale_layout: Optional[ScaleLayout] = None

    def __len__(self) -> int:
        return len(self.primitives)

    def __iter__(self) -> Iterator[Primitive]:
        return iter(self.primitives)

    def ids(self) -> List[str]:
        return [p.id for p in self.primitives]

    def by_role(self, role: str) -> List[Primitive]:
        return [p for p in self.primitives if p.role == role]

    def by_layer(self, layer: str) -> List[Primitive]:
        return [p for p in self.primitives if p.layer == layer]

    def count(self, role: str) -> int:
        return sum(1 for p in self.primitives if p.role == role)

    def get(self, primitive_id: str) -> Primitive:
        for primitive in self.primitives:
            if primitive.id == primitive_id:
                return primitive
        raise KeyError(primitive_id)

    def flow_path(self, path_id: str) -> FlowPath:
        for path in self.flow_paths:
            if path.id == path_id:
                return path
        raise KeyError(path_id)

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self.primitives]

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the whole frame to plain data."""
        return {
            "pattern": self.pattern,
            "seed": self.seed,
            "primitives": self.to_dicts(),
            "flow_paths": [p.to_dict() for p in self.flow_paths],
            "flow_elements": [e.to_dict() for e in self.flow_elements],
            "scale_layout": self.scale_layout.to_dict() if self.scale_layout else None,
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    def fingerprint(self) -> str:
        """SHA-256 of the canonical JSON form."""
        return hashlib.sha256(self.to_json().encode("utf-8")).hexdigest()
