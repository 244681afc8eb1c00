"""
Stickfig - 2D Stick Figure Animation Kernel

Bone hierarchies with forward transforms, FABRIK posing, keyframe
playback and a small description language for building figures.
"""

# Configuration
from .config.settings import *

# Core
from .core.vector import Vector2
from .core.errors import ParseError, DegenerateGeometryError, InvariantViolation

# Animation
from .animation import (
    Bone,
    BoneShape,
    Skeleton,
    Keyframe,
    KeyframeTrack,
    Pose,
    PlaybackController,
    ManualClock,
    collect_ancestor_chain,
    collect_chain_points,
    solve_reach,
    solve_chain,
    apply_solved_chain_to_bone,
)

# Loaders
from .loaders import SkeletonLoader, SkeletonLoadResult, StickParser, parse_skeleton, parse_figures, format_skeleton

# Rendering geometry
from .rendering import build_draw_list, selector_markers

# Input
from .input import PoseCommand, PoseEditor

__version__ = "0.1.0"
__all__ = [
    # Config (exported via *)
    # Core
    "Vector2",
    "ParseError",
    "DegenerateGeometryError",
    "InvariantViolation",
    # Animation
    "Bone",
    "BoneShape",
    "Skeleton",
    "Keyframe",
    "KeyframeTrack",
    "Pose",
    "PlaybackController",
    "ManualClock",
    "collect_ancestor_chain",
    "collect_chain_points",
    "solve_reach",
    "solve_chain",
    "apply_solved_chain_to_bone",
    # Loaders
    "SkeletonLoader",
    "SkeletonLoadResult",
    "StickParser",
    "parse_skeleton",
    "parse_figures",
    "format_skeleton",
    # Rendering
    "build_draw_list",
    "selector_markers",
    # Input
    "PoseCommand",
    "PoseEditor",
]
