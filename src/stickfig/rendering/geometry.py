"""
Render Geometry

Turns a bone tree into the primitives an external renderer draws:
straight segments, filled circles, and smoothed curves through bendy
chains. Nothing here draws pixels.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

import numpy as np
from pyrr import vector

from ..animation.ik import collect_ancestor_chain
from ..animation.skeleton import Bone, BoneShape
from ..config.settings import BENDY_MIN_DEPTH, CURVE_SAMPLES_PER_SEGMENT, SELECTOR_COLORS
from ..core.vector import Vector2

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class SegmentPrimitive:
    """Straight stroked line from a bone's origin to its tip."""

    bone: Bone
    start: Vector2
    end: Vector2
    width: float
    color: Color


@dataclass(frozen=True)
class CirclePrimitive:
    """Filled circle spanning a bone's length."""

    bone: Bone
    center: Vector2
    radius: float
    color: Color


@dataclass(frozen=True)
class CurvePrimitive:
    """Smoothed stroke through the joint points of a bendy chain."""

    bone: Bone
    points: Tuple[Vector2, ...]
    width: float
    color: Color


DrawPrimitive = Union[SegmentPrimitive, CirclePrimitive, CurvePrimitive]


@dataclass(frozen=True)
class SelectorMarker:
    """Drag handle drawn over a selected figure."""

    bone: Bone
    position: Vector2
    role: str     # 'root', 'ik' or 'fk'
    color: str


def bendy_chain(bone: Bone) -> List[Bone]:
    """Bones covered by bone's bendy curve, anchor first."""
    chain = collect_ancestor_chain(bone, bone.bendy_depth) or []
    return list(reversed(chain))


def bendy_curve_points(bone: Bone) -> List[Vector2]:
    """
    Joint points the smoothed curve of a bendy bone passes through.

    The first chain bone contributes its origin only for very short
    chains; longer chains start at the second bone's origin. The curve
    always ends at bone's tip.
    """
    sticks = bendy_chain(bone)
    if not sticks:
        return []

    points = []
    if len(sticks) <= 2:
        points.append(sticks[0].global_position)
    for stick in sticks[1:]:
        points.append(stick.global_position)
    points.append(sticks[-1].tip)
    return points


def swallowed_by_bendy_curve(bone: Bone) -> bool:
    """True if a bendy curve below (or at) bone already draws it."""
    bendy = bone.closest_bendy_ancestor_or_self()
    if bendy is None:
        return False
    sticks = bendy_chain(bendy)
    if len(sticks) > 2:
        sticks = sticks[1:]
    return any(stick is bone for stick in sticks)


def primitive_for_bone(bone: Bone):
    """Primitive for a single bone, or None if it is drawn as part of a curve."""
    if bone.shape is BoneShape.CIRCLE:
        direction = Vector2.from_angle(bone.global_rotation)
        center = bone.global_position + direction * (bone.length / 2.0)
        return CirclePrimitive(bone, center, bone.length / 2.0, tuple(bone.color))

    if bone.bendy_depth >= BENDY_MIN_DEPTH:
        return CurvePrimitive(bone, tuple(bendy_curve_points(bone)), bone.width, tuple(bone.color))

    if swallowed_by_bendy_curve(bone):
        return None

    return SegmentPrimitive(bone, bone.global_position, bone.tip, bone.width, tuple(bone.color))


def build_draw_list(root: Bone) -> List[DrawPrimitive]:
    """Primitives for root and its subtree in draw (pre-) order."""
    primitives = []
    for bone in root.all_descendants_including_self():
        primitive = primitive_for_bone(bone)
        if primitive is not None:
            primitives.append(primitive)
    return primitives


def quadratic_segments(points: Sequence[Vector2]) -> List[Tuple[Vector2, Vector2]]:
    """
    (control, end) pairs of a quadratic spline starting at points[0].

    Interior points act as control points and the curve passes through
    the midpoints between them; the last segment ends on the last point.
    """
    if len(points) < 2:
        return []
    if len(points) == 2:
        return [(points[1], points[1])]

    segments = []
    i = 1
    while i < len(points) - 2:
        segments.append((points[i], points[i].lerp(points[i + 1], 0.5)))
        i += 1
    segments.append((points[i], points[i + 1]))
    return segments


def sample_curve(points: Sequence[Vector2], samples_per_segment: int = CURVE_SAMPLES_PER_SEGMENT) -> np.ndarray:
    """
    Flatten the quadratic spline through points into a polyline.

    Returns:
        Array of shape (N, 2), starting at points[0]
    """
    if not points:
        return np.zeros((0, 2))

    polyline = [points[0].as_array()[np.newaxis, :]]
    t = np.linspace(0.0, 1.0, samples_per_segment + 1)[1:, np.newaxis]
    start = points[0].as_array()
    for control, end in quadratic_segments(points):
        c = control.as_array()
        e = end.as_array()
        # de Casteljau: lerp of lerps
        polyline.append(vector.interpolate(vector.interpolate(start, c, t), vector.interpolate(c, e, t), t))
        start = e
    return np.vstack(polyline)


def selector_markers(root: Bone) -> List[SelectorMarker]:
    """Drag handles for every bone of a figure."""
    markers = []
    for bone in root.all_descendants_including_self():
        if bone.parent is None:
            role = "root"
        elif bone.ik_depth > 0:
            role = "ik"
        else:
            role = "fk"
        markers.append(SelectorMarker(bone, bone.clickable_point, role, SELECTOR_COLORS[role]))
    return markers
