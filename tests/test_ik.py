"""Tests for the FABRIK solver"""

import math

import numpy as np

from stickfig.animation.ik import (
    apply_solved_chain_to_bone,
    chain_segment_lengths,
    collect_ancestor_chain,
    collect_chain_points,
    solve_chain,
    solve_reach,
)
from stickfig.animation.skeleton import Bone
from stickfig.core.vector import Vector2


def make_arm(ik_depth=2, length=10.0):
    """Three bones along +x from the origin; the last is the IK effector."""
    a = Bone(length=length, name="a")
    b = a.add_child(length=length)
    b.name = "b"
    c = b.add_child(length=length)
    c.name = "c"
    c.ik_depth = ik_depth
    return a, b, c


def straight_points(count, spacing=10.0):
    """Chain points effector first, anchor at the origin."""
    return [Vector2(spacing * (count - 1 - i), 0.0) for i in range(count)]


def test_collect_ancestor_chain():
    """Walk up for max_depth bones, effector first"""
    a, b, c = make_arm(ik_depth=2)

    assert collect_ancestor_chain(c) == [c, b]
    assert collect_ancestor_chain(c, 3) == [c, b, a]
    assert collect_ancestor_chain(c, 10) == [c, b, a]
    assert collect_ancestor_chain(c, 0) is None


def test_collect_chain_points():
    """ik_depth + 1 tip points, effector tip first"""
    a, b, c = make_arm(ik_depth=2)

    points = collect_chain_points(c)
    assert len(points) == 3
    assert np.allclose([tuple(p) for p in points], [(30.0, 0.0), (20.0, 0.0), (10.0, 0.0)])

    c.ik_depth = 0
    assert collect_chain_points(c) is None


def test_collect_chain_points_anchors_at_root_origin():
    """A chain that reaches the root is anchored at the root's origin"""
    a, b, c = make_arm(ik_depth=3)
    a.x = 5.0

    points = collect_chain_points(c)
    assert len(points) == 4
    assert points[-1] == Vector2(5.0, 0.0)


def test_solve_reach_preserves_length():
    """The head lands on target and the segment keeps its length"""
    head = Vector2(0.0, 0.0)
    tail = Vector2(10.0, 0.0)
    target = Vector2(3.0, 7.0)

    new_head, new_tail = solve_reach(head, tail, target)
    assert new_head == target
    assert np.isclose(new_head.distance_to(new_tail), 10.0)
    # new tail lies on the ray from target through the old tail
    direction = (tail - target).normalized()
    assert np.allclose(tuple((new_tail - target).normalized()), tuple(direction))


def test_solve_reach_target_on_tail_keeps_direction():
    """Degenerate reach: the segment is translated, not turned into NaN"""
    head = Vector2(0.0, 0.0)
    tail = Vector2(10.0, 0.0)

    new_head, new_tail = solve_reach(head, tail, tail)
    assert new_head == Vector2(10.0, 0.0)
    assert new_tail == Vector2(20.0, 0.0)


def test_solve_chain_preserves_lengths_and_anchor():
    """One pass keeps every segment length and returns the anchor"""
    points = straight_points(4)
    target = Vector2(15.0, 15.0)
    before = points[0].distance_to(target)

    solve_chain(points, target)

    assert np.allclose(chain_segment_lengths(points), [10.0, 10.0, 10.0])
    assert points[-1] == Vector2(0.0, 0.0)
    assert points[0].distance_to(target) < before


def test_solve_chain_converges_on_reachable_target():
    """Repeated passes bring the effector onto a reachable target"""
    points = straight_points(4)
    target = Vector2(10.0, 18.0)

    for _ in range(100):
        solve_chain(points, target)

    assert points[0].distance_to(target) < 1e-3
    assert np.isclose(sum(chain_segment_lengths(points)), 30.0)


def test_solve_chain_unreachable_target_stretches_toward_it():
    """An out-of-reach target straightens the chain toward it"""
    points = straight_points(4)
    target = Vector2(0.0, 100.0)

    for _ in range(50):
        solve_chain(points, target)

    assert np.allclose(chain_segment_lengths(points), [10.0, 10.0, 10.0])
    assert np.isclose(points[0].distance_to(target), 70.0, atol=1e-3)
    assert np.allclose(tuple(points[0]), (0.0, 30.0), atol=1e-3)


def test_solve_chain_target_on_chain_point_stays_finite():
    """Targets coinciding with chain points never produce NaN"""
    points = straight_points(3)
    solve_chain(points, Vector2(10.0, 0.0))

    assert all(math.isfinite(p.x) and math.isfinite(p.y) for p in points)
    assert np.allclose(chain_segment_lengths(points), [10.0, 10.0])


def test_apply_solved_chain_to_bone():
    """Solved points become local rotations that reproduce the points"""
    a, b, c = make_arm(ik_depth=2)
    points = collect_chain_points(c)
    target = Vector2(20.0, 10.0)

    for _ in range(50):
        solve_chain(points, target)
        apply_solved_chain_to_bone(c, points)
    # settled points: one more write-back lines every tip up
    apply_solved_chain_to_bone(c, points)

    assert a.rotation == 0.0
    assert np.allclose(tuple(c.tip), tuple(points[0]), atol=1e-9)
    assert np.allclose(tuple(b.tip), tuple(points[1]), atol=1e-9)
    assert c.tip.distance_to(target) < 1e-3


def test_apply_solved_chain_noop_without_ik():
    """Bones without IK depth are left alone"""
    a, b, c = make_arm(ik_depth=0)
    apply_solved_chain_to_bone(c, [Vector2(0.0, 5.0), Vector2(0.0, 0.0)])

    assert (a.rotation, b.rotation, c.rotation) == (0.0, 0.0, 0.0)


def test_apply_solved_chain_walks_effector_first():
    """Each bone is assigned before its parent, against the parent's old pose"""
    a = Bone(length=10.0, name="a")
    b = a.add_child(length=10.0)
    b.ik_depth = 2
    points = [Vector2(0.0, 20.0), Vector2(0.0, 10.0), Vector2(0.0, 0.0)]

    apply_solved_chain_to_bone(b, points)
    assert np.isclose(b.rotation, math.pi / 2)
    assert np.isclose(a.rotation, math.pi / 2)

    apply_solved_chain_to_bone(b, points)
    assert np.isclose(b.rotation, 0.0)
    assert np.isclose(a.rotation, math.pi / 2)
    assert np.allclose(tuple(b.tip), (0.0, 20.0))
