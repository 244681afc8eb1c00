"""Tests for render geometry generation"""

import math

import numpy as np

from stickfig.animation.skeleton import Bone, BoneShape
from stickfig.config.settings import SELECTOR_COLORS
from stickfig.core.vector import Vector2
from stickfig.rendering.geometry import (
    CirclePrimitive,
    CurvePrimitive,
    SegmentPrimitive,
    bendy_curve_points,
    build_draw_list,
    quadratic_segments,
    sample_curve,
    selector_markers,
    swallowed_by_bendy_curve,
)


def make_chain(bendy_depth):
    """r -> a -> b -> c along +x, length 10 each; c is bendy."""
    r = Bone(length=10.0, name="r")
    a = r.add_child(length=10.0)
    a.name = "a"
    b = a.add_child(length=10.0)
    b.name = "b"
    c = b.add_child(length=10.0)
    c.name = "c"
    c.bendy_depth = bendy_depth
    return r, a, b, c


def test_segment_primitive():
    """Line bones become segments from origin to tip"""
    root = Bone(length=10.0, color=(1, 2, 3))
    child = root.add_child(length=10.0, rotation=math.pi / 2, width=3.0)

    primitives = build_draw_list(root)
    assert all(isinstance(p, SegmentPrimitive) for p in primitives)
    segment = primitives[1]
    assert segment.bone is child
    assert np.allclose(tuple(segment.start), (10.0, 0.0))
    assert np.allclose(tuple(segment.end), (10.0, 10.0))
    assert segment.width == 3.0
    assert primitives[0].color == (1, 2, 3)


def test_circle_primitive():
    """Circle bones are centered halfway along the bone"""
    head = Bone(length=20.0)
    head.shape = BoneShape.CIRCLE

    (circle,) = build_draw_list(head)
    assert isinstance(circle, CirclePrimitive)
    assert np.allclose(tuple(circle.center), (10.0, 0.0))
    assert circle.radius == 10.0


def test_bendy_chain_of_three():
    """Long bendy chains start the curve at the second bone's origin"""
    r, a, b, c = make_chain(bendy_depth=3)

    points = bendy_curve_points(c)
    assert np.allclose([tuple(p) for p in points], [(20.0, 0.0), (30.0, 0.0), (40.0, 0.0)])

    assert not swallowed_by_bendy_curve(r)
    assert not swallowed_by_bendy_curve(a)
    assert swallowed_by_bendy_curve(b)

    primitives = build_draw_list(r)
    assert [type(p) for p in primitives] == [SegmentPrimitive, SegmentPrimitive, CurvePrimitive]
    assert [p.bone for p in primitives] == [r, a, c]


def test_bendy_chain_of_two():
    """Short bendy chains include the first bone's origin"""
    r, a, b, c = make_chain(bendy_depth=2)

    points = bendy_curve_points(c)
    assert np.allclose([tuple(p) for p in points], [(20.0, 0.0), (30.0, 0.0), (40.0, 0.0)])
    assert swallowed_by_bendy_curve(b)
    assert not swallowed_by_bendy_curve(a)
    assert [p.bone for p in build_draw_list(r)] == [r, a, c]


def test_bendy_depth_one_draws_segments():
    """A bendy depth below two is an ordinary segment"""
    r, a, b, c = make_chain(bendy_depth=1)
    assert all(isinstance(p, SegmentPrimitive) for p in build_draw_list(r))


def test_quadratic_segments():
    """Interior points are controls; segments end at midpoints then the last point"""
    points = [Vector2(0.0, 0.0), Vector2(10.0, 0.0), Vector2(20.0, 10.0), Vector2(30.0, 10.0)]

    segments = quadratic_segments(points)
    assert segments == [
        (Vector2(10.0, 0.0), Vector2(15.0, 5.0)),
        (Vector2(20.0, 10.0), Vector2(30.0, 10.0)),
    ]
    assert quadratic_segments(points[:2]) == [(points[1], points[1])]
    assert quadratic_segments(points[:1]) == []


def test_sample_curve():
    """The polyline starts and ends on the curve's end points"""
    points = [Vector2(0.0, 0.0), Vector2(10.0, 10.0), Vector2(20.0, 0.0)]

    polyline = sample_curve(points, samples_per_segment=4)
    assert polyline.shape == (5, 2)
    assert np.allclose(polyline[0], (0.0, 0.0))
    assert np.allclose(polyline[2], (10.0, 5.0))
    assert np.allclose(polyline[-1], (20.0, 0.0))
    assert sample_curve([]).shape == (0, 2)


def test_selector_markers():
    """Handles are colored by role"""
    r, a, b, c = make_chain(bendy_depth=0)
    c.ik_depth = 2

    markers = selector_markers(r)
    assert [m.role for m in markers] == ["root", "fk", "fk", "ik"]
    assert markers[0].color == SELECTOR_COLORS["root"]
    assert markers[3].color == SELECTOR_COLORS["ik"]
    assert markers[0].position == Vector2(0.0, 0.0)
    assert np.allclose(tuple(markers[3].position), (40.0, 0.0))
