"""Radix tree (compressed trie) keyed by strings, with longest-stored-prefix lookup and LRU eviction."""

import logging
from collections import OrderedDict
from typing import Any, Iterator, NamedTuple

from radixcache.tree.node import Node

logger = logging.getLogger(__name__)


class Location(NamedTuple):
    """Where a traversal stopped.

    node: deepest node reached by consuming whole edge labels.
    edge_label: label of the edge at node that only partially matched, or "".
    leftover: part of the query that was not consumed.
    """

    node: Node
    edge_label: str
    leftover: str


class BestMatch(NamedTuple):
    value: Any
    prefix: str

    @property
    def length(self) -> int:
        return len(self.prefix)


def _common_prefix_length(a: str, b: str) -> int:
    n = 0
    for x, y in zip(a, b):
        if x != y:
            break
        n += 1
    return n


class RadixTree:
    """Compressed prefix tree. Children are indexed by the first character of their edge label.

    Stored keys are kept in recency order (least recently used first); put and
    lookup hits refresh a key, evict_lru drops the stalest one and prunes the
    nodes it leaves behind.
    """

    def __init__(self) -> None:
        self.root = Node()
        self._recency: OrderedDict[str, None] = OrderedDict()

    def _locate(self, query: str) -> Location:
        node = self.root
        while query:
            edge = node.edge_for(query[0])
            if edge is None:
                break
            if not query.startswith(edge.label):
                return Location(node, edge.label, query)
            query = query[len(edge.label):]
            node = edge.child
        return Location(node, "", query)

    def _find(self, key: str) -> Node | None:
        """Return the node key terminates at, if it stores a value."""
        node, edge_label, leftover = self._locate(key)
        if edge_label or leftover or not node.has_value:
            return None
        return node

    def _touch(self, key: str) -> None:
        if key in self._recency:
            self._recency.move_to_end(key)

    def put(self, key: str, value: Any) -> bool:
        """Store value under key, replacing any previous value. Returns False for an empty key."""
        if not key:
            return False
        node, edge_label, leftover = self._locate(key)
        if edge_label:
            # Fork the partially matched edge at a new valueless bridge node.
            shared = _common_prefix_length(edge_label, leftover)
            old_child = node.children[edge_label[0]].child
            bridge = Node()
            bridge.add_edge(edge_label[shared:], old_child)
            leftover = leftover[shared:]
            if leftover:
                bridge.add_edge(leftover, Node(value))
            else:
                bridge.value = value
            # The new subtree is complete before it replaces the old edge.
            node.add_edge(edge_label[:shared], bridge)
            logger.debug("Split edge %r at %d for key %r", edge_label, shared, key)
        elif leftover:
            node.add_edge(leftover, Node(value))
        else:
            node.value = value
        self._recency[key] = None
        self._recency.move_to_end(key)
        return True

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored at exactly key, or default on a miss."""
        node = self._find(key)
        if node is None:
            return default
        self._touch(key)
        return node.value

    def get_best_match(self, query: str) -> BestMatch | None:
        """Return the value of the longest stored key that is a prefix of query, or None."""
        node = self.root
        best: Node | None = node if node.has_value else None
        best_length = 0
        consumed = 0
        rest = query
        while rest:
            edge = node.edge_for(rest[0])
            if edge is None or not rest.startswith(edge.label):
                break
            consumed += len(edge.label)
            rest = rest[len(edge.label):]
            node = edge.child
            if node.has_value:
                best, best_length = node, consumed
        if best is None:
            return None
        prefix = query[:best_length]
        self._touch(prefix)
        return BestMatch(best.value, prefix)

    def evict_lru(self) -> bool:
        """Remove the least recently used key. Returns False if the tree is empty."""
        if not self._recency:
            return False
        key = next(iter(self._recency))
        self._remove(key)
        logger.debug("Evicted %r", key)
        return True

    def delete(self, key: str) -> bool:
        """Remove key. Returns False if it is not stored."""
        return self._remove(key)

    def _remove(self, key: str) -> bool:
        path: list[tuple[Node, str]] = []
        node = self.root
        rest = key
        while rest:
            edge = node.edge_for(rest[0])
            if edge is None or not rest.startswith(edge.label):
                return False
            path.append((node, rest[0]))
            rest = rest[len(edge.label):]
            node = edge.child
        self._recency.pop(key, None)
        if not node.has_value:
            return False
        node.clear_value()
        self._prune(path, node)
        return True

    def _prune(self, path: list[tuple[Node, str]], node: Node) -> None:
        """Unlink empty nodes and merge single-child bridges, walking back towards the root."""
        while path:
            parent, char = path.pop()
            if node.has_value:
                return
            label = parent.children[char].label
            if not node.children:
                del parent.children[char]
                logger.debug("Pruned edge %r", label)
                node = parent
                continue
            if len(node.children) == 1:
                (child_label, child), = node.children.values()
                parent.add_edge(label + child_label, child)
                logger.debug("Merged edge %r into %r", label, label + child_label)
            return

    def clear(self) -> None:
        self.root = Node()
        self._recency.clear()

    def lru_keys(self) -> list[str]:
        """Stored keys, least recently used first."""
        return list(self._recency)

    def items(self) -> Iterator[tuple[str, Any]]:
        """Yield (key, value) pairs in lexicographic key order."""
        stack: list[tuple[str, Node]] = [("", self.root)]
        while stack:
            prefix, node = stack.pop()
            if node.has_value:
                yield prefix, node.value
            for char in sorted(node.children, reverse=True):
                label, child = node.children[char]
                stack.append((prefix + label, child))

    def __len__(self) -> int:
        return len(self._recency)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._find(key) is not None

    def __iter__(self) -> Iterator[str]:
        for key, _ in self.items():
            yield key

    def __getitem__(self, key: str) -> Any:
        node = self._find(key)
        if node is None:
            raise KeyError(key)
        self._touch(key)
        return node.value

    def __setitem__(self, key: str, value: Any) -> None:
        if not self.put(key, value):
            raise ValueError("key must be a non-empty string")

    def __delitem__(self, key: str) -> None:
        if not self._remove(key):
            raise KeyError(key)
