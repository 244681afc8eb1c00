#!/usr/bin/env python3
"""
Print the pose of every bone in a stick description file.

Usage::

    python -m stickfig figure.stick
    python -m stickfig figure.stick --verbose
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from pathlib import Path

from .config.settings import LOG_FORMAT, LOG_LEVEL
from .core.errors import ParseError
from .loaders.skeleton_loader import SkeletonLoader

logger = logging.getLogger(__name__)


def _format_bone(bone) -> str:
    depth = 0
    node = bone.parent
    while node is not None:
        depth += 1
        node = node.parent
    pos = bone.global_position
    tip = bone.tip
    return (
        f"{'  ' * depth}{bone.name:<16} "
        f"pos=({pos.x:8.2f}, {pos.y:8.2f}) "
        f"rot={math.degrees(bone.global_rotation):8.2f}deg "
        f"tip=({tip.x:8.2f}, {tip.y:8.2f})"
    )


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Print bone poses from a stick description file.")
    parser.add_argument("path", type=Path, help="Stick description file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else LOG_LEVEL, format=LOG_FORMAT)

    try:
        result = SkeletonLoader().load(args.path.resolve())
    except (FileNotFoundError, ParseError) as exc:
        logger.error("Failed to load %s: %s", args.path, exc)
        return 1

    for bone in result.skeleton.walk():
        print(_format_bone(bone))
    return 0


if __name__ == "__main__":
    sys.exit(main())
