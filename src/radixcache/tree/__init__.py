"""In-memory radix tree for exact and longest-stored-prefix lookup."""

from radixcache.tree.node import Edge, Node
from radixcache.tree.radix_tree import BestMatch, RadixTree

__all__ = ["BestMatch", "Edge", "Node", "RadixTree"]
