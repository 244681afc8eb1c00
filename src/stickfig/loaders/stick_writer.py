"""Write bone trees back out as stick description text."""

from __future__ import annotations

import math
from typing import List

from ..animation.skeleton import Bone, BoneShape
from ..config.settings import DEFAULT_BONE_COLOR, PARSED_BONE_LENGTH, PARSED_BONE_WIDTH


def format_number(value: float) -> str:
    """Format a number in the grammar's plain decimal notation (no exponent)."""
    if isinstance(value, bool) or not math.isfinite(value):
        raise ValueError(f"Cannot write non-finite or boolean number: {value!r}")
    if isinstance(value, int) or float(value).is_integer():
        return str(int(value))
    text = f"{value:.12f}".rstrip("0")
    return text if not text.endswith(".") else text + "0"


def format_string(value: str) -> str:
    if "'" in value:
        raise ValueError(f"Stick names cannot contain a single quote: {value!r}")
    return f"'{value}'"


def format_properties(bone: Bone) -> str:
    """Property list for one bone; defaults are left out."""
    props: List[str] = [f"name={format_string(bone.name)}"]
    if bone.x:
        props.append(f"x={format_number(bone.x)}")
    if bone.y:
        props.append(f"y={format_number(bone.y)}")
    if bone.rotation:
        props.append(f"rotation={format_number(bone.rotation)}")
    if bone.length != PARSED_BONE_LENGTH:
        props.append(f"length={format_number(bone.length)}")
    if bone.width != PARSED_BONE_WIDTH:
        props.append(f"width={format_number(bone.width)}")
    if bone.shape is not BoneShape.LINE:
        props.append(f"shape={format_string(bone.shape.value)}")
    if tuple(bone.color) != tuple(DEFAULT_BONE_COLOR):
        props.append("color=[" + ", ".join(format_number(c) for c in bone.color) + "]")
    if bone.ik_depth:
        props.append(f"ik={bone.ik_depth}")
    if bone.bendy_depth:
        props.append(f"bendy={bone.bendy_depth}")
    return ", ".join(props)


def format_skeleton(bone: Bone, indent: str = "    ", depth: int = 0) -> str:
    """
    Serialize a bone and its subtree.

    Rotations are written in radians. Parsing the result yields a tree
    with the same names, poses, attributes and structure.
    """
    lines: List[str] = []
    # (bone, depth, closing) entries; closing emits the bone's "}"
    stack = [(bone, depth, False)]
    while stack:
        node, level, closing = stack.pop()
        pad = indent * level
        if closing:
            lines.append(pad + "}")
            continue
        line = f"{pad}stick({format_properties(node)})"
        if not node.children:
            lines.append(line)
            continue
        lines.append(line + " {")
        stack.append((node, level, True))
        for child in reversed(node.children):
            stack.append((child, level + 1, False))
    return "\n".join(lines)
