"""
Animation System

Provides the bone hierarchy, keyframe playback and IK posing.
"""

from .skeleton import Bone, BoneShape, Skeleton
from .animation import Keyframe, KeyframeTrack, Pose, angle_lerp, lerp, short_angle_dist
from .animation_controller import Clock, ManualClock, PlaybackController
from .ik import (
    apply_solved_chain_to_bone,
    chain_segment_lengths,
    collect_ancestor_chain,
    collect_chain_points,
    solve_chain,
    solve_reach,
)

__all__ = [
    'Bone',
    'BoneShape',
    'Skeleton',
    'Keyframe',
    'KeyframeTrack',
    'Pose',
    'lerp',
    'angle_lerp',
    'short_angle_dist',
    'Clock',
    'ManualClock',
    'PlaybackController',
    'collect_ancestor_chain',
    'collect_chain_points',
    'solve_reach',
    'solve_chain',
    'apply_solved_chain_to_bone',
    'chain_segment_lengths',
]
