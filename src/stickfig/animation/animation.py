"""
Animation

Keyframe storage and interpolation for a single bone.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from ..core.errors import InvariantViolation

TAU = 2.0 * math.pi


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between two scalars."""
    return (1.0 - t) * a + b * t


def short_angle_dist(a0: float, a1: float) -> float:
    """
    Signed angular distance from a0 to a1 along the shorter arc.

    The result lies in (-pi, pi].
    """
    delta = (a1 - a0) % TAU
    if delta > math.pi:
        delta -= TAU
    return delta


def angle_lerp(a0: float, a1: float, t: float) -> float:
    """Interpolate an angle along the shortest path around the circle."""
    return a0 + short_angle_dist(a0, a1) * t


@dataclass
class Pose:
    """Local pose of a bone: offset from the parent tip and rotation."""

    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0


class Keyframe:
    """
    Single keyframe in a bone track.

    Stores the frame number and the bone's local pose at that frame.
    """

    def __init__(self, frame: int, rotation: float = 0.0, x: float = 0.0, y: float = 0.0):
        """
        Initialize keyframe.

        Args:
            frame: Integer frame number
            rotation: Local rotation in radians
            x: Local x offset
            y: Local y offset
        """
        self.frame = int(frame)
        self.rotation = rotation
        self.x = x
        self.y = y

    def to_pose(self) -> Pose:
        return Pose(self.x, self.y, self.rotation)

    def __repr__(self):
        return f"Keyframe(frame={self.frame}, r={self.rotation:.3f}, x={self.x:.2f}, y={self.y:.2f})"


class KeyframeTrack:
    """
    Ordered keyframes for one bone.

    Keyframes are unique per frame and kept sorted ascending by frame
    after every insertion.
    """

    def __init__(self, keyframes: Optional[Iterable[Keyframe]] = None):
        """
        Initialize the track.

        Args:
            keyframes: Initial keyframes (must not repeat a frame)

        Raises:
            InvariantViolation: if two initial keyframes share a frame
        """
        self.keyframes: List[Keyframe] = sorted(keyframes or [], key=lambda k: k.frame)
        self._check_unique_frames()

    def insert(self, frame: int, rotation: float, x: float, y: float) -> Keyframe:
        """
        Insert or overwrite the keyframe at frame.

        Returns:
            The stored keyframe
        """
        existing = self.get_keyframe_at(frame)
        if existing is not None:
            existing.rotation = rotation
            existing.x = x
            existing.y = y
            return existing

        keyframe = Keyframe(frame, rotation, x, y)
        self.keyframes.append(keyframe)
        self.keyframes.sort(key=lambda k: k.frame)
        return keyframe

    def sample(self, frame: float, rest_pose: Pose) -> Pose:
        """
        Sample the track at a given frame.

        Between two keyframes x and y are interpolated linearly and
        rotation along the shorter arc. Outside the keyed range (before
        the first keyframe as well as at or after the last) the last
        keyframe is returned unchanged. An empty track yields rest_pose.

        Args:
            frame: Frame to sample (may be fractional)
            rest_pose: Pose returned when the track has no keyframes

        Returns:
            Interpolated pose
        """
        for ck, nk in zip(self.keyframes, self.keyframes[1:]):
            if ck.frame <= frame < nk.frame:
                t = (frame - ck.frame) / (nk.frame - ck.frame)
                return Pose(
                    x=lerp(ck.x, nk.x, t),
                    y=lerp(ck.y, nk.y, t),
                    rotation=angle_lerp(ck.rotation, nk.rotation, t),
                )

        if not self.keyframes:
            return Pose(rest_pose.x, rest_pose.y, rest_pose.rotation)

        return self.keyframes[-1].to_pose()

    def get_keyframe_at(self, frame: int) -> Optional[Keyframe]:
        """Keyframe stored exactly at frame, or None."""
        for keyframe in self.keyframes:
            if keyframe.frame == frame:
                return keyframe
        return None

    def get_active_keyframe_before(self, frame: int) -> Optional[Keyframe]:
        """Most recent keyframe at or before frame, or None."""
        active = None
        for keyframe in self.keyframes:
            if keyframe.frame > frame:
                break
            active = keyframe
        return active

    @property
    def frames(self) -> List[int]:
        return [k.frame for k in self.keyframes]

    def _check_unique_frames(self):
        frames = self.frames
        if len(frames) != len(set(frames)):
            raise InvariantViolation(f"Duplicate keyframe frames in track: {frames}")

    def __len__(self) -> int:
        return len(self.keyframes)

    def __iter__(self) -> Iterator[Keyframe]:
        return iter(self.keyframes)

    def __repr__(self):
        return f"KeyframeTrack(frames={self.frames})"
