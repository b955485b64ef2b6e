"""Reader and writer for Valve's text VDF format."""

from .errors import MalformedDocument, UnsupportedValue, VdfError
from .nodes import Node, NodeKind, ObjectNode, StringNode
from .parser import parse, parse_text
from .serializer import serialize

__all__ = [
    "parse",
    "parse_text",
    "serialize",
    "Node",
    "NodeKind",
    "ObjectNode",
    "StringNode",
    "VdfError",
    "MalformedDocument",
    "UnsupportedValue",
]
