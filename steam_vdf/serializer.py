"""Write a node tree back out as VDF text."""

from __future__ import annotations

from .errors import UnsupportedValue
from .nodes import ObjectNode, StringNode


def serialize(node: ObjectNode, depth: int = 0) -> str:
    """
    Serialize an object's properties in insertion order.

    Each line is indented with ``depth`` tabs; nested objects are written
    one level deeper between brace lines. Keys and values are quoted but
    not escaped.

    Raises:
        UnsupportedValue: if a property is neither a string nor an object node
    """
    if depth < 0:
        raise ValueError(f"depth must not be negative, got {depth}")

    indent = "\t" * depth
    parts: list[str] = []

    for key, value in node.items():
        if isinstance(value, StringNode):
            parts.append(f'{indent}"{key}"\t\t"{value.value}"\n')
        elif isinstance(value, ObjectNode):
            parts.append(f'{indent}"{key}"\n')
            parts.append(f"{indent}{{\n")
            parts.append(serialize(value, depth + 1))
            parts.append(f"{indent}}}\n")
        else:
            raise UnsupportedValue(key, value)

    return "".join(parts)
