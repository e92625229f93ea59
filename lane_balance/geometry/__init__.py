"""Seeded procedural geometry for the plan view and the balance scale."""
from .primitives import (
    CurveKind,
    FlowElement,
    FlowPath,
    GeometryFrame,
    Primitive,
    ScaleLayout,
    ShapeKind,
    Style,
)
from .curves import Polyline, sample_catmull_rom
from .generator import Canvas, generate_geometry, refresh_scale

__all__ = [
    "CurveKind",
    "FlowElement",
    "FlowPath",
    "GeometryFrame",
    "Primitive",
    "ScaleLayout",
    "ShapeKind",
    "Style",
    "Polyline",
    "sample_catmull_rom",
    "Canvas",
    "generate_geometry",
    "refresh_scale",
]
