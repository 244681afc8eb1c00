"""
Vector2

Immutable 2D vector used for skeleton-space points and directions.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ..config.settings import GEOMETRY_EPSILON
from .errors import DegenerateGeometryError


@dataclass(frozen=True)
class Vector2:
    """Immutable 2D vector. Every operation returns a new instance."""

    x: float
    y: float

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2:
        return Vector2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> Vector2:
        return self * scalar

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def __iter__(self):
        yield self.x
        yield self.y

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def normalized(self) -> Vector2:
        """
        Unit vector with the same direction.

        Raises:
            DegenerateGeometryError: if the vector is (near) zero length
        """
        length = self.length()
        if length < GEOMETRY_EPSILON:
            raise DegenerateGeometryError(f"Cannot normalize zero-length vector {self}")
        return Vector2(self.x / length, self.y / length)

    def distance_to(self, other: Vector2) -> float:
        return (other - self).length()

    def angle(self) -> float:
        """Angle in radians from the positive x-axis."""
        return math.atan2(self.y, self.x)

    def lerp(self, other: Vector2, t: float) -> Vector2:
        """Linear interpolation toward other."""
        return Vector2(
            (1.0 - t) * self.x + other.x * t,
            (1.0 - t) * self.y + other.y * t,
        )

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)

    @staticmethod
    def from_angle(angle: float, length: float = 1.0) -> Vector2:
        """Vector of the given length pointing along angle (radians)."""
        return Vector2(math.cos(angle) * length, math.sin(angle) * length)

    @staticmethod
    def zero() -> Vector2:
        return Vector2(0.0, 0.0)

    def __repr__(self):
        return f"Vector2({self.x:.4f}, {self.y:.4f})"
