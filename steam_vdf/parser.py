"""
Parse Valve's text VDF format into a node tree.

VDF format:
    "section"
    {
        "key"		"value"
        "nested"
        {
            "nested_key"		"nested_value"
        }
    }

Nesting comes from the brace lines only. Leading tabs on key lines are
cosmetic and vary between files, so they are never used for structure.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from .errors import MalformedDocument
from .nodes import ObjectNode, StringNode

# Values are greedy: a value containing a quote is not split correctly.
KEY_VALUE_RE = re.compile(r'^\t*"(\S+)"\t\t"(.*)"$')
KEY_RE = re.compile(r'^\t*"(\S+)"$')
OPEN_RE = re.compile(r"^\t*\{$")
CLOSE_RE = re.compile(r"^\t*\}$")


class _ParseContext:
    """Mutable state for a single parse call."""

    def __init__(self) -> None:
        self.root = ObjectNode()
        # stack[depth] is the object receiving keys at that brace depth
        self.stack: list[ObjectNode] = [self.root]
        self.current_parent = self.root
        self.current_element: ObjectNode | None = None

    @property
    def depth(self) -> int:
        return len(self.stack) - 1

    def add_value(self, key: str, value: str, line_number: int) -> None:
        if self.current_element is None:
            raise MalformedDocument(
                f"value {key!r} appears before any section key", line_number
            )
        self.current_element[key] = StringNode(value)

    def add_section(self, key: str) -> None:
        element = ObjectNode()
        self.current_parent[key] = element
        self.current_element = element

    def open_block(self, line_number: int) -> None:
        pending = self.current_element
        if pending is None or pending is self.current_parent:
            raise MalformedDocument("'{' without a preceding section key", line_number)
        self.stack.append(pending)
        self.current_parent = pending

    def close_block(self, line_number: int) -> None:
        if self.depth == 0:
            raise MalformedDocument("'}' without a matching '{'", line_number)
        self.stack.pop()
        self.current_parent = self.stack[-1]
        self.current_element = self.current_parent


def parse(lines: Iterable[str]) -> ObjectNode:
    """
    Parse VDF lines into a tree.

    The returned root wraps the file's top-level key, e.g.
    ``parse(lines)["AppState"]`` for an app manifest.

    Blank lines, ``//`` comments and anything else unrecognized are skipped.

    Raises:
        MalformedDocument: on unbalanced braces, or a value before any key
    """
    ctx = _ParseContext()
    line_number = 0

    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.rstrip("\r\n")

        if match := KEY_VALUE_RE.match(line):
            ctx.add_value(match.group(1), match.group(2), line_number)
        elif match := KEY_RE.match(line):
            ctx.add_section(match.group(1))
        elif OPEN_RE.match(line):
            ctx.open_block(line_number)
        elif CLOSE_RE.match(line):
            ctx.close_block(line_number)

    if ctx.depth != 0:
        raise MalformedDocument(
            f"unexpected end of input, {ctx.depth} block(s) still open", line_number
        )

    return ctx.root


def parse_text(content: str) -> ObjectNode:
    """
    Parse a whole VDF document held in a string.

    Only newline characters end a line; other Unicode line breaks such as
    U+2028 stay inside values.
    """
    return parse(content.split("\n"))
