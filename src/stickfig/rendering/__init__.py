"""Geometry handed to an external renderer."""

from .geometry import (
    CirclePrimitive,
    CurvePrimitive,
    DrawPrimitive,
    SegmentPrimitive,
    SelectorMarker,
    bendy_curve_points,
    build_draw_list,
    quadratic_segments,
    sample_curve,
    selector_markers,
)

__all__ = [
    'SegmentPrimitive',
    'CirclePrimitive',
    'CurvePrimitive',
    'DrawPrimitive',
    'SelectorMarker',
    'bendy_curve_points',
    'build_draw_list',
    'quadratic_segments',
    'sample_curve',
    'selector_markers',
]
