"""
Errors

Exception types raised by the skeleton kernel.
"""

from typing import Optional


class ParseError(ValueError):
    """
    Malformed skeleton description text.

    Carries the character offset where the parser gave up, plus the
    1-based line and column derived from it.
    """

    def __init__(self, message: str, offset: Optional[int] = None,
                 line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.offset = offset
        self.line = line
        self.column = column
        super().__init__(str(self))

    def __str__(self):
        if self.line is None:
            return self.message
        return f"{self.message} (line {self.line}, column {self.column})"


class DegenerateGeometryError(ArithmeticError):
    """A direction was requested from a zero-length vector."""


class InvariantViolation(RuntimeError):
    """The bone tree or a keyframe track was put into an impossible state."""
