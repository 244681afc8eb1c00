"""Loader utilities for stick description text."""

from .stick_parser import StickParser, parse_figures, parse_skeleton
from .stick_writer import format_skeleton
from .skeleton_loader import SkeletonLoader, SkeletonLoadResult

__all__ = [
    'StickParser',
    'parse_skeleton',
    'parse_figures',
    'format_skeleton',
    'SkeletonLoader',
    'SkeletonLoadResult',
]
