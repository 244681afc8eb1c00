"""
Stickfig Configuration Settings

All configuration constants for the skeleton kernel.
Modify these values to change editor and playback behavior.
"""

import json
import math
from pathlib import Path

# ============================================================================
# Project Paths
# ============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
ASSETS_DIR = PROJECT_ROOT / "assets"
FIGURES_DIR = ASSETS_DIR / "figures"

# ============================================================================
# Bone Defaults
# ============================================================================

# Bones created through Bone.add_child()
DEFAULT_BONE_LENGTH = 30.0
DEFAULT_BONE_WIDTH = 12.0
DEFAULT_BONE_COLOR = (0, 0, 0)  # RGB, 0-255

# Bones created by the description parser when a property is omitted
PARSED_BONE_LENGTH = 0.0
PARSED_BONE_WIDTH = 12.0
PARSED_BONE_SHAPE = "line"

# A bone with bendy depth at or above this value starts a smoothed curve
BENDY_MIN_DEPTH = 2

# ============================================================================
# Picking / Selection
# ============================================================================

SELECTOR_RADIUS = 5.0   # Radius of the drag handle drawn on each bone
PICK_TOLERANCE = 4.0    # Extra slack added to SELECTOR_RADIUS when picking

SELECTOR_COLORS = {
    "root": "orange",   # Root handle (moves the whole figure)
    "ik": "lime",       # IK effector handle
    "fk": "red",        # Plain rotate handle
}

# ============================================================================
# Playback
# ============================================================================

FRAME_RATE = 24     # Frames per second
MAX_FRAMES = 48     # Playback wraps to frame 0 after this many frames

# ============================================================================
# Inverse Kinematics / Geometry
# ============================================================================

# Vectors shorter than this are treated as having no direction
GEOMETRY_EPSILON = 1e-9

DEGREES_TO_RADIANS = math.pi / 180.0

# ============================================================================
# Rendering Geometry
# ============================================================================

CURVE_SAMPLES_PER_SEGMENT = 8  # Polyline samples per quadratic segment

# ============================================================================
# Logging
# ============================================================================

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL = "INFO"


def load_playback_config(path=None) -> dict:
    """
    Load playback overrides from a JSON configuration file.

    Recognized keys are ``frame_rate`` and ``max_frames``. Missing keys
    fall back to FRAME_RATE and MAX_FRAMES.

    Args:
        path: JSON file path (defaults to assets/config/playback.json)

    Returns:
        Dictionary with ``frame_rate`` and ``max_frames`` entries
    """
    config_path = Path(path) if path is not None else ASSETS_DIR / "config" / "playback.json"

    config = {"frame_rate": FRAME_RATE, "max_frames": MAX_FRAMES}
    if not config_path.exists():
        return config

    with open(config_path, "r", encoding="utf-8") as f:
        payload = json.load(f)

    if "frame_rate" in payload:
        config["frame_rate"] = int(payload["frame_rate"])
    if "max_frames" in payload:
        config["max_frames"] = int(payload["max_frames"])

    if config["frame_rate"] <= 0 or config["max_frames"] <= 0:
        raise ValueError(f"Invalid playback config in {config_path}: {config}")

    return config
