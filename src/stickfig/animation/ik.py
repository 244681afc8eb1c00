"""
Inverse Kinematics

Forward And Backward Reaching Inverse Kinematics (FABRIK) over a bone
and its ancestors.

Each solve is a single forward + backward pass with no state kept
between calls. Calling it once per pointer move converges the chain
over the course of a drag.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np
from pyrr import vector

from ..core.errors import DegenerateGeometryError
from ..core.vector import Vector2
from .skeleton import Bone

logger = logging.getLogger(__name__)


def collect_ancestor_chain(bone: Bone, max_depth: Optional[int] = None) -> Optional[List[Bone]]:
    """
    Collect bone and its ancestors, effector first.

    Args:
        bone: Chain end bone
        max_depth: Number of bones to collect (defaults to bone.ik_depth)

    Returns:
        Up to max_depth bones (fewer if the root is reached), or None
        when max_depth is 0
    """
    if max_depth is None:
        max_depth = bone.ik_depth
    if max_depth == 0:
        return None

    chain = []
    node = bone
    while node is not None and len(chain) < max_depth:
        chain.append(node)
        node = node.parent
    return chain


def collect_chain_points(bone: Bone) -> Optional[List[Vector2]]:
    """
    Collect tip points of bone and its ancestors for ik_depth + 1 steps.

    Index 0 is the effector tip, the last index is the anchor point. If
    the root is reached first, the root's origin becomes the anchor.

    Returns:
        Tip points, or None when bone.ik_depth is 0
    """
    if bone.ik_depth == 0:
        return None

    points = []
    node = bone
    last = bone
    while node is not None and len(points) <= bone.ik_depth:
        points.append(node.tip)
        last = node
        node = node.parent
    if len(points) <= bone.ik_depth:
        points.append(last.global_position)
    return points


def solve_reach(head: Vector2, tail: Vector2, target: Vector2) -> Tuple[Vector2, Vector2]:
    """
    Move a segment so its head sits on target, keeping its length.

    The new tail lies on the ray from target through the old tail at the
    original head-tail distance. When target coincides with tail that ray
    has no direction; the segment then keeps its current orientation and
    is translated onto target.

    Args:
        head: Segment point to move onto target
        tail: Other segment point
        target: Point the head should reach

    Returns:
        (new_head, new_tail)
    """
    segment_length = tail.distance_to(head)
    try:
        direction = (tail - target).normalized()
    except DegenerateGeometryError:
        logger.debug("Reach target %s coincides with tail, keeping segment direction", target)
        return target, target + (tail - head)
    return target, target + direction * segment_length


def solve_chain(points: List[Vector2], target: Vector2) -> List[Vector2]:
    """
    Run one FABRIK iteration over a chain of points in place.

    points are ordered effector to anchor. The forward pass drags the
    effector onto target; the backward pass pulls the anchor back to its
    original position. Distances between consecutive points are kept.

    Args:
        points: Chain points, effector first (modified in place)
        target: Point the effector should reach

    Returns:
        The same list, for convenience
    """
    if len(points) < 2:
        return points

    base = points[-1]

    # Forward
    for i in range(len(points) - 1):
        points[i], target = solve_reach(points[i], points[i + 1], target)
    points[-1] = target

    # Backward
    target = base
    for i in range(len(points) - 1, 0, -1):
        points[i], target = solve_reach(points[i], points[i - 1], target)
    points[0] = target

    return points


def apply_solved_chain_to_bone(bone: Bone, points: Sequence[Vector2]):
    """
    Write solved chain points back as local bone rotations.

    Walks bone and its ancestors for bone.ik_depth steps, effector first.
    Step i takes the world angle of points[i] - points[i + 1], subtracts
    the parent's current global rotation and assigns the result as the
    bone's local rotation before moving up to the parent.

    Parents are updated after their children, so a child's rotation is
    relative to its parent's pose from before this call. While a drag
    keeps moving the points the chain lags by one call; once the points
    settle, a further call lands every tip on its solved point.
    """
    if bone.ik_depth == 0:
        return

    node = bone
    i = 0
    while node is not None and i < bone.ik_depth and i + 1 < len(points):
        angle = (points[i] - points[i + 1]).angle()
        parent_rotation = node.parent.global_rotation if node.parent is not None else 0.0
        node.rotation = angle - parent_rotation
        node = node.parent
        i += 1


def chain_segment_lengths(points: Sequence[Vector2]) -> np.ndarray:
    """Distances between consecutive chain points."""
    array = np.array([p.as_array() for p in points], dtype=float)
    if len(array) < 2:
        return np.zeros(0)
    return vector.length(np.diff(array, axis=0))
