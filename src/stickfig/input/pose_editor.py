"""
Pose Editor - Picking and Dragging Bones

Handles pointer events in skeleton space: picking a bone's drag handle,
then moving a root, rotating a plain bone, or solving an IK chain as
the pointer moves.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from ..animation.ik import apply_solved_chain_to_bone, collect_chain_points, solve_chain
from ..config.settings import PICK_TOLERANCE, SELECTOR_RADIUS
from ..core.vector import Vector2
from .input_commands import PoseCommand

if TYPE_CHECKING:
    from ..animation.animation_controller import PlaybackController
    from ..animation.skeleton import Bone, Skeleton

logger = logging.getLogger(__name__)


class PoseEditor:
    """Turns pointer events into pose edits on a skeleton."""

    def __init__(
        self,
        skeleton: Skeleton,
        playback: Optional[PlaybackController] = None,
        pick_radius: float = SELECTOR_RADIUS + PICK_TOLERANCE,
    ):
        """
        Initialize pose editor.

        Args:
            skeleton: Skeleton to edit
            playback: Controller receiving keyframe and playback commands
            pick_radius: Maximum distance from a drag handle for a hit
        """
        self.skeleton = skeleton
        self.playback = playback
        self.pick_radius = pick_radius

        self.selected_bone: Optional[Bone] = None
        self.selected_figure: Optional[Bone] = None
        self.moving = False
        self._chain_points: Optional[List[Vector2]] = None

    def pointer_down(self, point: Vector2) -> Optional[Bone]:
        """
        Select the bone whose handle is under point and start a drag.

        Returns:
            Selected bone, or None (which also clears the selection)
        """
        bone = self.skeleton.pick(point, self.pick_radius)
        if bone is None:
            self.clear_selection()
            return None

        self.selected_bone = bone
        self.selected_figure = bone.root
        self._chain_points = collect_chain_points(bone) if bone.ik_depth > 0 else None
        self.moving = True
        logger.debug("Selected bone '%s'", bone.name)
        return bone

    def pointer_move(self, point: Vector2) -> bool:
        """
        Drag the selected bone toward point.

        Returns:
            True if the pose changed
        """
        bone = self.selected_bone
        if not self.moving or bone is None:
            return False

        if bone.is_animating():
            logger.debug("Ignoring drag on '%s' during playback", bone.name)
            return False

        if bone.parent is None:
            bone.x = point.x
            bone.y = point.y
        elif bone.ik_depth <= 0:
            angle = (point - bone.global_position).angle()
            bone.rotation = angle - bone.parent.global_rotation
        elif self._chain_points is not None:
            solve_chain(self._chain_points, point)
            apply_solved_chain_to_bone(bone, self._chain_points)
        else:
            return False
        return True

    def pointer_up(self):
        self.moving = False

    def clear_selection(self):
        self.selected_bone = None
        self.selected_figure = None
        self._chain_points = None
        self.moving = False

    def handle_command(self, command: PoseCommand) -> bool:
        """
        Execute a non-pointer command.

        Returns:
            True if the command was handled
        """
        if command == PoseCommand.CLEAR_SELECTION:
            self.clear_selection()
            return True

        if self.playback is None:
            logger.warning("No playback controller for command %s", command.name)
            return False

        if command == PoseCommand.COMMIT_KEYFRAME:
            if self.selected_figure is None:
                return False
            for bone in self.selected_figure.all_descendants_including_self():
                self.playback.commit_keyframe(bone)
            return True
        if command == PoseCommand.PLAY:
            self.playback.play()
            return True
        if command == PoseCommand.STOP:
            self.playback.stop()
            return True
        if command == PoseCommand.TOGGLE_PLAYBACK:
            self.playback.toggle()
            return True
        return False
