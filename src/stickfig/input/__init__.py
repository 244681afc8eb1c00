"""Pointer and command handling for interactive posing."""

from .input_commands import PoseCommand
from .pose_editor import PoseEditor

__all__ = ['PoseCommand', 'PoseEditor']
