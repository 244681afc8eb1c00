"""Math primitives and error types."""

from .errors import ParseError, DegenerateGeometryError, InvariantViolation
from .vector import Vector2

__all__ = [
    'Vector2',
    'ParseError',
    'DegenerateGeometryError',
    'InvariantViolation',
]
