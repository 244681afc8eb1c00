"""
Input Commands

Commands an input source can send to the pose editor, independent of
which key or widget produced them.
"""

from enum import Enum, auto


class PoseCommand(Enum):
    """Editor commands that are not pointer movement."""

    # Store the current pose of the selected figure at the current frame
    COMMIT_KEYFRAME = auto()

    # Playback
    PLAY = auto()
    STOP = auto()
    TOGGLE_PLAYBACK = auto()

    # Selection
    CLEAR_SELECTION = auto()
