"""Tests for the stick description parser"""

import math

import numpy as np
import pytest

from stickfig.animation.skeleton import Bone, BoneShape
from stickfig.core.errors import ParseError
from stickfig.loaders.stick_parser import StickParser, parse_figures, parse_skeleton


def test_parse_root_with_child():
    """Nested sticks become a parented tree; 'd' means degrees"""
    root = parse_skeleton("stick(name='root', x=10, y=20){stick(name='child', length=30, rotation=45d)}")

    assert root.name == "root"
    assert (root.x, root.y) == (10, 20)
    assert root.rotation == 0
    assert root.parent is None
    assert len(root.children) == 1

    child = root.children[0]
    assert child.name == "child"
    assert child.parent is root
    assert child.length == 30
    assert np.isclose(child.rotation, 45 * math.pi / 180)


def test_parse_defaults():
    """Omitted properties take their defaults"""
    bone = parse_skeleton("stick(name='a')")

    assert (bone.x, bone.y, bone.rotation) == (0, 0, 0)
    assert bone.width == 12
    assert bone.length == 0
    assert bone.shape == BoneShape.LINE
    assert bone.color == (0, 0, 0)
    assert bone.ik_depth == 0
    assert bone.bendy_depth == 0


def test_parse_all_properties():
    """Every recognized property maps onto the bone"""
    bone = parse_skeleton(
        "stick(name='head', x=-12.5, y=3, rotation=-90d, width=4, length=22.25, "
        "shape='circle', color=[255, 0, 10], ik=2, bendy=3)"
    )

    assert bone.x == -12.5
    assert bone.y == 3
    assert np.isclose(bone.rotation, -math.pi / 2)
    assert bone.width == 4
    assert bone.length == 22.25
    assert bone.shape == BoneShape.CIRCLE
    assert bone.color == (255, 0, 10)
    assert bone.ik_depth == 2
    assert bone.bendy_depth == 3


def test_parse_whitespace_is_insignificant():
    """Spaces and newlines between tokens are skipped"""
    text = """
        stick ( name = 'root' ,
                x = 1 )
        {
            stick( name='a' )
            stick( name='b', color = [ 1 , 2 , 3 ] )
        }
    """
    root = parse_skeleton(text)

    assert [c.name for c in root.children] == ["a", "b"]
    assert root.children[1].color == (1, 2, 3)


def test_parse_ignores_unknown_properties():
    """Unrecognized properties, booleans and raw identifiers are accepted"""
    bone = parse_skeleton("stick(name='a', visible=TRUE, hidden=false, tag=foo, extra=[1, 'x', true])")
    assert bone.name == "a"


def test_parse_case_insensitive_keyword_and_degrees():
    """'stick' and the degree suffix ignore case"""
    bone = parse_skeleton("STICK(name='a', rotation=180D)")
    assert np.isclose(bone.rotation, math.pi)


def test_read_atoms():
    """Atom tokens carry their kind and value"""
    assert StickParser("'hi'").read_atom() == ("str", "hi")
    assert StickParser("-4").read_atom() == ("num", -4)
    assert StickParser("2.5").read_atom() == ("num", 2.5)
    assert StickParser("True").read_atom() == ("bool", True)
    assert StickParser("other").read_atom() == ("id", "other")

    token = StickParser("[1, 'a']").read_atom()
    assert token.kind == "list"
    assert [t.value for t in token.value] == [1, "a"]


def test_parse_figures():
    """Several top-level trees can share one text"""
    figures = parse_figures("stick(name='a') stick(name='b'){stick(name='c')}")

    assert [f.name for f in figures] == ["a", "b"]
    assert figures[1].children[0].name == "c"
    assert parse_figures("   ") == []


def test_parse_attaches_to_parent_on_success():
    """A given parent receives the parsed tree"""
    parent = Bone(name="host")
    bone = parse_skeleton("stick(name='limb', length=5)", parent)

    assert bone.parent is parent
    assert parent.children == [bone]


def test_failed_parse_leaves_parent_untouched():
    """A parse error attaches nothing"""
    parent = Bone(name="host")
    with pytest.raises(ParseError):
        parse_skeleton("stick(name='a'){stick(name='b')", parent)

    assert parent.children == []


@pytest.mark.parametrize("text", [
    "stick(name='a'",                       # missing closing paren
    "stick(x=1)",                           # missing name
    "stick(name='a)",                       # unterminated string
    "stick(name='a', x=-)",                 # malformed number
    "stick(name='a', x=1.)",                # malformed number
    "stick(name='a', x=12px)",              # malformed number
    "bone(name='a')",                       # wrong keyword
    "stick name='a')",                      # missing opening paren
    "stick(name 'a')",                      # missing equals
    "stick()",                              # no properties
    "stick(name='a'){stick(name='b')",      # unclosed child block
    "stick(name='a', color=[1, 2])",        # wrong color arity
    "stick(name='a', color=[1, 2, 3)",      # unclosed list
    "stick(name='a', ik=-1)",               # negative depth
    "stick(name='a', bendy=1.5)",           # fractional depth
    "stick(name='a', shape='square')",      # unknown shape
    "stick(name='a', x='left')",            # wrong type
    "stick(name=3)",                        # wrong type
    "stick(name='a', x=)",                  # missing value
    "stick(name='a') trailing",             # trailing input
    "stick(name='')",                       # empty name
    "stick(name='a', x=\u00b2)",                 # non-ASCII digit
    "stick(name='a', x=1\u0663)",                # non-ASCII digit after a number
    "stick(name='a', x=" + "1" * 5000 + ")",   # literal too long for int()
    "stick(name='a', x=" + "9" * 400 + "d)",   # too large for degrees
    "stick(name='a', tag=" + "[" * 5000 + ")",  # list nesting too deep
])
def test_malformed_input_raises(text):
    """Malformed descriptions raise ParseError"""
    with pytest.raises(ParseError):
        parse_skeleton(text)


def test_parse_error_reports_position():
    """Errors carry offset, line and column"""
    with pytest.raises(ParseError) as excinfo:
        parse_skeleton("stick(name='a',\n  x=?)")

    error = excinfo.value
    assert error.offset == 20
    assert error.line == 2
    assert error.column == 5
    assert "line 2" in str(error)


def test_parse_deep_nesting():
    """Nesting depth is not bounded by the recursion limit"""
    depth = 1500
    text = "stick(name='s', length=1){" * (depth - 1) + "stick(name='leaf', length=1)" + "}" * (depth - 1)

    root = parse_skeleton(text)
    leaf = root
    while leaf.children:
        leaf = leaf.children[0]

    assert leaf.name == "leaf"
    assert leaf.root is root
    assert np.allclose(tuple(leaf.tip), (float(depth), 0.0))
    assert len(parse_figures(text + text)) == 2
