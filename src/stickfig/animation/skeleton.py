"""
Skeleton

Represents a hierarchy of rigid 2D bones ("sticks") and the figures
they form.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..config.settings import (
    BENDY_MIN_DEPTH,
    DEFAULT_BONE_COLOR,
    DEFAULT_BONE_LENGTH,
    DEFAULT_BONE_WIDTH,
)
from ..core.errors import InvariantViolation
from ..core.vector import Vector2
from .animation import Keyframe, KeyframeTrack, Pose


class BoneShape(Enum):
    """How the renderer draws a bone."""
    LINE = "line"
    CIRCLE = "circle"


class Bone:
    """
    Represents a single bone in a skeleton hierarchy.

    Each bone has:
    - Local pose (offset from the parent's tip, rotation relative to the
      parent's global rotation)
    - Length along its own rotated x-axis
    - Render attributes (width, color, shape)
    - IK and bendy depths
    - A keyframe track used during playback

    Global pose is derived on every query by walking the parent chain.
    """

    def __init__(
        self,
        length: float = DEFAULT_BONE_LENGTH,
        rotation: float = 0.0,
        width: float = DEFAULT_BONE_WIDTH,
        color: Tuple[int, int, int] = DEFAULT_BONE_COLOR,
        name: str = "stick",
    ):
        """
        Initialize a bone.

        Args:
            length: Distance from origin to tip
            rotation: Local rotation in radians
            width: Stroke width for the renderer
            color: RGB triple
            name: Label (not required to be unique)
        """
        self.name = name
        self.x = 0.0
        self.y = 0.0
        self.rotation = rotation
        self.length = length
        self.width = width
        self.color = tuple(color)
        self.shape = BoneShape.LINE
        self.ik_depth = 0
        self.bendy_depth = 0

        # Index assigned by the owning Skeleton (None until registered)
        self.index: Optional[int] = None

        self.parent: Optional[Bone] = None
        self.children: List[Bone] = []

        self.keyframes = KeyframeTrack()

        # Playback state: while active, local pose reads come from sampled_pose
        self.animation_mode_active = False
        self.sampled_pose = Pose()

    # ------------------------------------------------------------------
    # Hierarchy
    # ------------------------------------------------------------------

    def add_child(
        self,
        length: float = DEFAULT_BONE_LENGTH,
        rotation: float = 0.0,
        width: float = DEFAULT_BONE_WIDTH,
        color: Tuple[int, int, int] = DEFAULT_BONE_COLOR,
    ) -> Bone:
        """Create a new bone parented to this one and return it."""
        child = Bone(length, rotation, width, color)
        self.attach(child)
        return child

    def attach(self, child: Bone):
        """
        Append an existing parentless bone to this bone's children.

        Raises:
            InvariantViolation: if child already has a parent or is this
                bone or one of its ancestors
        """
        if child.parent is not None:
            raise InvariantViolation(
                f"Bone '{child.name}' is already attached to '{child.parent.name}'"
            )
        node = self
        while node is not None:
            if node is child:
                raise InvariantViolation(
                    f"Attaching '{child.name}' under '{self.name}' would create a cycle"
                )
            node = node.parent

        self.children.append(child)
        child.parent = self

    def detach(self):
        """Remove this bone (and its subtree) from its parent."""
        if self.parent is None:
            return
        self.parent.children.remove(self)
        self.parent = None

    @property
    def root(self) -> Bone:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def all_descendants_including_self(self) -> List[Bone]:
        """Pre-order list of this bone and its whole subtree, without repeats."""
        ordered: List[Bone] = []
        seen = set()
        stack = [self]
        while stack:
            bone = stack.pop()
            if id(bone) in seen:
                continue
            seen.add(id(bone))
            ordered.append(bone)
            stack.extend(reversed(bone.children))
        return ordered

    def closest_bendy_ancestor_or_self(self) -> Optional[Bone]:
        """
        First bone marked bendy, searching self then descendants depth-first.

        The renderer uses this to find the curve a bone belongs to.
        """
        for bone in self.all_descendants_including_self():
            if bone.bendy_depth >= BENDY_MIN_DEPTH:
                return bone
        return None

    # ------------------------------------------------------------------
    # Pose
    # ------------------------------------------------------------------

    @property
    def local_offset(self) -> Vector2:
        if self.animation_mode_active:
            return Vector2(self.sampled_pose.x, self.sampled_pose.y)
        return Vector2(self.x, self.y)

    @property
    def local_rotation(self) -> float:
        if self.animation_mode_active:
            return self.sampled_pose.rotation
        return self.rotation

    def _global_transform(self) -> Tuple[Vector2, float]:
        """Global (position, rotation), composed from the root down without recursion."""
        chain = []
        node = self
        while node is not None:
            chain.append(node)
            node = node.parent

        root = chain.pop()
        position = root.local_offset
        rotation = root.local_rotation
        previous = root
        while chain:
            node = chain.pop()
            tip = position + Vector2.from_angle(rotation, previous.length)
            position = node.local_offset + tip
            rotation = node.local_rotation + rotation
            previous = node
        return position, rotation

    @property
    def global_rotation(self) -> float:
        return self._global_transform()[1]

    @property
    def global_position(self) -> Vector2:
        return self._global_transform()[0]

    @property
    def tip(self) -> Vector2:
        position, rotation = self._global_transform()
        return position + Vector2.from_angle(rotation, self.length)

    @property
    def clickable_point(self) -> Vector2:
        """Drag handle location: the origin for a root, the tip otherwise."""
        if self.parent is None:
            return self.global_position
        return self.tip

    def is_animating(self) -> bool:
        """True if this bone or any ancestor is driven by playback."""
        node = self
        while node is not None:
            if node.animation_mode_active:
                return True
            node = node.parent
        return False

    @property
    def rest_pose(self) -> Pose:
        return Pose(self.x, self.y, self.rotation)

    # ------------------------------------------------------------------
    # Keyframes
    # ------------------------------------------------------------------

    def insert_keyframe(self, frame: int, rotation: float, x: float, y: float) -> Keyframe:
        return self.keyframes.insert(frame, rotation, x, y)

    def commit_keyframe(self, frame: int) -> Keyframe:
        """Store the current static pose as the keyframe at frame."""
        return self.keyframes.insert(frame, self.rotation, self.x, self.y)

    def sample_at(self, frame: float) -> Pose:
        return self.keyframes.sample(frame, self.rest_pose)

    def get_keyframe_at(self, frame: int) -> Optional[Keyframe]:
        return self.keyframes.get_keyframe_at(frame)

    def get_active_keyframe_before(self, frame: int) -> Optional[Keyframe]:
        return self.keyframes.get_active_keyframe_before(frame)

    def apply_frame(self, frame: float):
        """Sample the track at frame and store the result as sampled_pose."""
        self.sampled_pose = self.sample_at(frame)

    def __repr__(self):
        return f"Bone(name='{self.name}', length={self.length}, children={len(self.children)})"


class Skeleton:
    """
    Collection of bone figures.

    Manages the root bones and provides utilities for:
    - Registering every bone with a stable index
    - Finding bones by name
    - Switching playback mode for all bones
    - Picking a bone from a point

    ``bones``, ``bone_by_name`` and each bone's ``index`` are a snapshot
    taken by refresh(). Call refresh() after add_child(), attach() or
    detach() on a registered figure; walk(), pick() and the playback
    helpers always follow the live tree.
    """

    def __init__(self, name: str = "Skeleton"):
        """
        Initialize skeleton.

        Args:
            name: Skeleton name for debugging
        """
        self.name = name
        self.bones: List[Bone] = []
        self.roots: List[Bone] = []
        self.bone_by_name: Dict[str, Bone] = {}

    def add_figure(self, root: Bone):
        """
        Add a figure (a root bone and its subtree) to the skeleton.

        Raises:
            InvariantViolation: if root has a parent
        """
        if root.parent is not None:
            raise InvariantViolation(f"Figure root '{root.name}' has a parent")
        self.roots.append(root)
        self.refresh()

    def refresh(self):
        """Re-register all bones after the figures' trees changed."""
        self.bones = []
        self.bone_by_name = {}
        for root in self.roots:
            for bone in root.all_descendants_including_self():
                bone.index = len(self.bones)
                self.bones.append(bone)
                # First bone in pre-order wins for duplicate names
                self.bone_by_name.setdefault(bone.name, bone)

    def get_bone(self, name: str) -> Optional[Bone]:
        """
        Find a bone by name.

        Returns:
            First bone with that name in pre-order, None if not found.
            Bones added since the last refresh() are not found.
        """
        return self.bone_by_name.get(name)

    def walk(self):
        """Yield every bone of every figure in pre-order, following live tree edits."""
        for root in self.roots:
            yield from root.all_descendants_including_self()

    def set_animation_mode(self, active: bool):
        for bone in self.walk():
            bone.animation_mode_active = active

    def apply_frame(self, frame: float):
        for bone in self.walk():
            bone.apply_frame(frame)

    def pick(self, point: Vector2, radius: float) -> Optional[Bone]:
        """
        Find the first bone whose drag handle lies within radius of point.

        Args:
            point: Skeleton-space point
            radius: Pick distance (exclusive)

        Returns:
            Picked bone or None
        """
        for bone in self.walk():
            if bone.clickable_point.distance_to(point) < radius:
                return bone
        return None

    def __repr__(self):
        return f"Skeleton(name='{self.name}', bones={len(self.bones)}, roots={len(self.roots)})"
