"""Skeleton loader for stick description files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from ..animation.skeleton import Bone, Skeleton
from ..config.settings import PROJECT_ROOT
from .stick_parser import parse_figures
from .stick_writer import format_skeleton

logger = logging.getLogger(__name__)


@dataclass
class SkeletonLoadResult:
    """Result returned from :class:`SkeletonLoader`."""

    skeleton: Skeleton
    source_path: Path
    figures: List[Bone] = field(default_factory=list)


class SkeletonLoader:
    """Load and save skeletons as stick description text."""

    def load(self, path: Path | str) -> SkeletonLoadResult:
        """
        Load every figure in a description file into a new Skeleton.

        Relative paths are resolved against the project root.

        Raises:
            FileNotFoundError: if the file does not exist
            ParseError: if the file is malformed
        """
        figure_path = self._resolve(path)
        if not figure_path.exists():
            raise FileNotFoundError(f"Figure file not found: {figure_path}")

        text = figure_path.read_text(encoding="utf-8")
        result = self.loads(text, name=figure_path.stem)
        result.source_path = figure_path
        logger.info("Loaded %d figure(s) from %s", len(result.figures), figure_path)
        return result

    def loads(self, text: str, name: str = "Skeleton") -> SkeletonLoadResult:
        """Parse description text into a new Skeleton."""
        figures = parse_figures(text)
        skeleton = Skeleton(name=name)
        for root in figures:
            skeleton.add_figure(root)
        return SkeletonLoadResult(skeleton=skeleton, source_path=Path(), figures=figures)

    def save(self, skeleton: Skeleton, path: Path | str) -> Path:
        """Write every figure of skeleton to path, one tree after another."""
        figure_path = self._resolve(path)
        figure_path.parent.mkdir(parents=True, exist_ok=True)
        text = "\n\n".join(format_skeleton(root) for root in skeleton.roots)
        figure_path.write_text(text + "\n", encoding="utf-8")
        return figure_path

    @staticmethod
    def _resolve(path: Path | str) -> Path:
        figure_path = Path(path)
        if not figure_path.is_absolute():
            figure_path = PROJECT_ROOT / figure_path
        return figure_path.resolve()
