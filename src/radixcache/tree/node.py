"""Radix tree vertices: a node owns its value and its outgoing edges."""

from typing import Any, NamedTuple

# Marks a node that no key terminates at; None is a legal stored value.
_NO_VALUE: Any = object()


class Edge(NamedTuple):
    label: str
    child: "Node"


class Node:
    """Trie vertex. children maps the first character of each edge label to the edge."""

    __slots__ = ("value", "children")

    def __init__(self, value: Any = _NO_VALUE) -> None:
        self.value = value
        self.children: dict[str, Edge] = {}

    @property
    def has_value(self) -> bool:
        return self.value is not _NO_VALUE

    def clear_value(self) -> None:
        self.value = _NO_VALUE

    def add_edge(self, label: str, child: "Node") -> None:
        """Attach child under label, replacing any edge that starts with the same character."""
        if not label:
            raise ValueError("edge label must be non-empty")
        self.children[label[0]] = Edge(label, child)

    def edge_for(self, char: str) -> Edge | None:
        return self.children.get(char)

    def __repr__(self) -> str:
        value = repr(self.value) if self.has_value else "-"
        return f"Node(value={value}, edges={[e.label for e in self.children.values()]})"
