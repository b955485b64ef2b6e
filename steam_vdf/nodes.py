"""Document model for parsed VDF text."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar, Union


class NodeKind(Enum):
    STRING = auto()
    OBJECT = auto()


@dataclass(frozen=True, slots=True)
class StringNode:
    """A leaf value."""

    kind: ClassVar[NodeKind] = NodeKind.STRING

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(eq=False)
class ObjectNode:
    """
    Ordered mapping from key to node.

    Assigning an existing key replaces its value but keeps the key in its
    original position.
    """

    kind: ClassVar[NodeKind] = NodeKind.OBJECT

    children: dict[str, Node] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ObjectNode:
        """Build a tree from nested dicts of strings."""
        node = cls()
        for key, value in data.items():
            if isinstance(value, Mapping):
                node[key] = cls.from_dict(value)
            elif isinstance(value, (StringNode, ObjectNode)):
                node[key] = value
            else:
                node[key] = StringNode(str(value))
        return node

    def to_dict(self) -> dict:
        result = {}
        for key, value in self.children.items():
            if isinstance(value, ObjectNode):
                result[key] = value.to_dict()
            else:
                result[key] = value.value
        return result

    # -- Mapping protocol -------------------------------------------------

    def __getitem__(self, key: str) -> Node:
        return self.children[key]

    def __setitem__(self, key: str, value: Node) -> None:
        self.children[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self.children

    def __iter__(self) -> Iterator[str]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ObjectNode):
            return NotImplemented
        # dict equality ignores order; documents are order-sensitive
        return list(self.children.items()) == list(other.children.items())

    def keys(self):
        return self.children.keys()

    def values(self):
        return self.children.values()

    def items(self):
        return self.children.items()

    def get(self, key: str, default: Node | None = None) -> Node | None:
        return self.children.get(key, default)

    # -- Typed access -----------------------------------------------------

    def get_string(self, key: str, default: str | None = None) -> str | None:
        """Return the string stored under key, or default if absent or an object."""
        value = self.children.get(key)
        if isinstance(value, StringNode):
            return value.value
        return default

    def get_object(self, key: str) -> ObjectNode | None:
        """Return the object stored under key, or None if absent or a string."""
        value = self.children.get(key)
        if isinstance(value, ObjectNode):
            return value
        return None

    def find(self, *keys: str) -> Node | None:
        """
        Walk nested objects by key.

        Returns None as soon as a key is missing or a string is reached
        before the last key.
        """
        current: Node = self
        for key in keys:
            if not isinstance(current, ObjectNode):
                return None
            found = current.children.get(key)
            if found is None:
                return None
            current = found
        return current


Node = Union[StringNode, ObjectNode]
