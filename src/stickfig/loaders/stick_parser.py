"""
Stick Parser

Recursive-descent reader for the stick figure description language:

    bone      := "stick" "(" property ("," property)* ")" ("{" bone* "}")?
    property  := identifier "=" atom
    atom      := string | number | boolean | list
    list      := "[" atom ("," atom)* "]"
    number    := ["-"] digit+ ["." digit+] ["d"]
    string    := "'" <any chars except "'"> "'"
    boolean   := "true" | "false"

A trailing ``d`` on a number means degrees. Whitespace between tokens
is ignored. Example::

    stick(name='root', x=10, y=20) {
        stick(name='arm', length=30, rotation=45d, ik=1)
    }
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from ..animation.skeleton import Bone, BoneShape
from ..config.settings import (
    DEFAULT_BONE_COLOR,
    DEGREES_TO_RADIANS,
    PARSED_BONE_LENGTH,
    PARSED_BONE_SHAPE,
    PARSED_BONE_WIDTH,
)
from ..core.errors import ParseError

logger = logging.getLogger(__name__)


class Token(NamedTuple):
    """A lexical value read by the parser."""

    kind: str   # 'str', 'num', 'bool', 'id' or 'list'
    value: Any


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_identifier_start(ch: str) -> bool:
    return ch.isascii() and (ch.isalpha() or ch == "_")


def _is_identifier_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == "_")


class StickParser:
    """Parse stick description text into a Bone tree."""

    def __init__(self, data: str):
        """
        Args:
            data: Description text
        """
        self.data = data
        self.pos = 0

    # ------------------------------------------------------------------
    # Character stream
    # ------------------------------------------------------------------

    def at_end(self) -> bool:
        return self.pos >= len(self.data)

    def peek(self) -> Optional[str]:
        if self.at_end():
            return None
        return self.data[self.pos]

    def next(self) -> Optional[str]:
        ch = self.peek()
        if ch is not None:
            self.pos += 1
        return ch

    def read(self, predicate: Callable[[str], bool]) -> str:
        start = self.pos
        while not self.at_end() and predicate(self.data[self.pos]):
            self.pos += 1
        return self.data[start:self.pos]

    def skip_spaces(self):
        self.read(str.isspace)

    def error(self, message: str, offset: Optional[int] = None) -> ParseError:
        """Build a ParseError pointing at offset (default: current position)."""
        if offset is None:
            offset = self.pos
        consumed = self.data[:offset]
        line = consumed.count("\n") + 1
        column = offset - (consumed.rfind("\n") + 1) + 1
        return ParseError(message, offset=offset, line=line, column=column)

    def expect(self, ch: str, message: str):
        self.skip_spaces()
        if self.peek() != ch:
            raise self.error(message)
        self.next()

    # ------------------------------------------------------------------
    # Atoms
    # ------------------------------------------------------------------

    def read_identifier(self) -> Token:
        if self.at_end() or not _is_identifier_start(self.peek()):
            return Token("id", "")
        return Token("id", self.read(_is_identifier_char))

    def read_number(self) -> Token:
        start = self.pos
        text = ""
        if self.peek() == "-":
            text += self.next()

        digits = self.read(_is_digit)
        if not digits:
            raise self.error("Malformed number: expected a digit.", start)
        text += digits

        is_float = False
        if self.peek() == ".":
            self.next()
            fraction = self.read(_is_digit)
            if not fraction:
                raise self.error("Malformed number: expected a digit after the decimal point.", start)
            text += "." + fraction
            is_float = True

        degrees = self.peek() is not None and self.peek().lower() == "d"
        if degrees:
            self.next()

        # int() refuses very long literals; huge ints overflow the degree conversion
        try:
            value = float(text) if is_float else int(text)
            if degrees:
                value = value * DEGREES_TO_RADIANS
        except (ValueError, OverflowError):
            raise self.error("Malformed number: value out of range.", start) from None

        if self.peek() is not None and _is_identifier_char(self.peek()):
            raise self.error(f"Malformed number: unexpected '{self.peek()}'.", start)
        return Token("num", value)

    def read_string(self) -> Token:
        start = self.pos
        if self.peek() != "'":
            raise self.error("Expected an opening single quote on string.")
        self.next()
        value = self.read(lambda ch: ch != "'")
        if self.at_end():
            raise self.error("Expected a closing single quote on string.", start)
        self.next()
        return Token("str", value)

    def read_bool(self) -> Token:
        """Read true/false (any case); other identifiers pass through unchanged."""
        token = self.read_identifier()
        word = token.value.lower()
        if word == "true":
            return Token("bool", True)
        if word == "false":
            return Token("bool", False)
        return token

    def read_list(self) -> Token:
        self.expect("[", "Expected an opening bracket on list.")
        items = []
        while True:
            items.append(self.read_atom())
            self.skip_spaces()
            ch = self.peek()
            if ch == ",":
                self.next()
            elif ch == "]":
                self.next()
                break
            else:
                raise self.error("Expected a comma or end of list.")
        return Token("list", items)

    def read_atom(self) -> Token:
        self.skip_spaces()
        ch = self.peek()
        if ch is None:
            raise self.error("Unexpected end of input, expected a value.")
        if ch == "'":
            return self.read_string()
        if _is_digit(ch) or ch in "-.":
            return self.read_number()
        if _is_identifier_start(ch):
            return self.read_bool()
        if ch == "[":
            return self.read_list()
        raise self.error(f"Unexpected character '{ch}', expected a value.")

    # ------------------------------------------------------------------
    # Sticks
    # ------------------------------------------------------------------

    def read_property(self) -> tuple:
        self.skip_spaces()
        start = self.pos
        name = self.read_identifier()
        if name.value == "":
            raise self.error("Invalid identifier.")
        self.expect("=", "Expected an equals symbol.")
        return name.value, self.read_atom(), start

    def read_stick(self) -> Dict[str, tuple]:
        """Read ``stick(...)`` and return its properties keyed by name."""
        self.skip_spaces()
        keyword = self.read_identifier()
        if keyword.value.lower() != "stick":
            raise self.error("Invalid identifier. Expected 'stick'.")

        self.expect("(", "Expected a left-paren.")
        props: Dict[str, tuple] = {}
        while True:
            name, token, offset = self.read_property()
            props[name] = (token, offset)
            self.skip_spaces()
            ch = self.peek()
            if ch == ",":
                self.next()
            elif ch == ")":
                self.next()
                break
            else:
                raise self.error("Expected a comma or end of stick.")
        return props

    def read_node(self) -> Bone:
        """Read a single ``stick(...)`` into a parentless bone."""
        start = self.pos
        props = self.read_stick()
        return self._build_bone(props, start)

    def open_block(self) -> bool:
        """Consume a ``{`` if one follows."""
        self.skip_spaces()
        if self.peek() == "{":
            self.next()
            return True
        return False

    def read_bone(self) -> Bone:
        """
        Read one stick and its nested children.

        Open ``{`` blocks are tracked on an explicit stack, so nesting
        depth is not limited by the interpreter's recursion limit.
        """
        root = self.read_node()
        open_blocks = [root] if self.open_block() else []
        while open_blocks:
            self.skip_spaces()
            ch = self.peek()
            if ch == "}":
                self.next()
                open_blocks.pop()
                continue
            if ch is None:
                raise self.error("Expected closing bracket.")
            child = self.read_node()
            open_blocks[-1].attach(child)
            if self.open_block():
                open_blocks.append(child)

        logger.debug("Parsed stick '%s' with %d children", root.name, len(root.children))
        return root

    def parse(self, parent: Optional[Bone] = None) -> Bone:
        """
        Parse exactly one stick tree from the text.

        Args:
            parent: Bone to attach the parsed tree to once parsing succeeds

        Returns:
            Root of the parsed tree

        Raises:
            ParseError: on malformed input (nothing is attached to parent)
        """
        try:
            bone = self.read_bone()
        except RecursionError:
            raise self.error("Nesting too deep.") from None
        self.skip_spaces()
        if not self.at_end():
            raise self.error("Unexpected trailing input after stick.")
        if parent is not None:
            parent.attach(bone)
        return bone

    def parse_all(self) -> List[Bone]:
        """Parse every top-level stick tree until the end of the text."""
        figures = []
        self.skip_spaces()
        while not self.at_end():
            try:
                figures.append(self.read_bone())
            except RecursionError:
                raise self.error("Nesting too deep.") from None
            self.skip_spaces()
        return figures

    # ------------------------------------------------------------------
    # Property mapping
    # ------------------------------------------------------------------

    def _build_bone(self, props: Dict[str, tuple], start: int) -> Bone:
        if not self._string(props, "name", ""):
            raise self.error("Expected a stick name.", start)

        bone = Bone(
            length=self._number(props, "length", PARSED_BONE_LENGTH),
            width=self._number(props, "width", PARSED_BONE_WIDTH),
            color=self._color(props),
        )
        bone.name = self._string(props, "name", None)
        bone.x = self._number(props, "x", 0)
        bone.y = self._number(props, "y", 0)
        bone.rotation = self._number(props, "rotation", 0)
        bone.shape = self._shape(props)
        bone.ik_depth = self._count(props, "ik")
        bone.bendy_depth = self._count(props, "bendy")
        return bone

    def _string(self, props, key, default):
        if key not in props:
            return default
        token, offset = props[key]
        if token.kind not in ("str", "id"):
            raise self.error(f"Property '{key}' expects a string.", offset)
        return token.value

    def _number(self, props, key, default):
        if key not in props:
            return default
        token, offset = props[key]
        if token.kind != "num":
            raise self.error(f"Property '{key}' expects a number.", offset)
        return token.value

    def _count(self, props, key) -> int:
        value = self._number(props, key, 0)
        if value != int(value) or value < 0:
            raise self.error(f"Property '{key}' expects a non-negative integer.", props[key][1])
        return int(value)

    def _shape(self, props) -> BoneShape:
        value = self._string(props, "shape", PARSED_BONE_SHAPE)
        try:
            return BoneShape(value.lower())
        except ValueError:
            raise self.error(f"Unknown shape '{value}'.", props["shape"][1]) from None

    def _color(self, props) -> tuple:
        if "color" not in props:
            return DEFAULT_BONE_COLOR
        token, offset = props["color"]
        if token.kind != "list" or len(token.value) != 3 or any(t.kind != "num" for t in token.value):
            raise self.error("Property 'color' expects a list of three numbers.", offset)
        return tuple(t.value for t in token.value)


def parse_skeleton(text: str, parent: Optional[Bone] = None) -> Bone:
    """Parse a single stick tree. See StickParser.parse."""
    return StickParser(text).parse(parent)


def parse_figures(text: str) -> List[Bone]:
    """Parse zero or more top-level stick trees."""
    return StickParser(text).parse_all()
