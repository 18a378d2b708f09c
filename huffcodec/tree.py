from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Tuple
import heapq
import itertools
import logging

from huffcodec.errors import InsufficientAlphabet, MalformedTree

logger = logging.getLogger(__name__)


class EncodingTreeNode:
    """A leaf holding one symbol, or an internal node with both children.

    Nodes are never mutated after construction and each node has exactly one
    parent.
    """

    __slots__ = ("symbol", "zero", "one")

    def __init__(
        self,
        symbol: Optional[str] = None,
        zero: Optional[EncodingTreeNode] = None,
        one: Optional[EncodingTreeNode] = None,
    ) -> None:
        if (zero is None) != (one is None):
            raise MalformedTree("internal node must have both a zero and a one child")
        if symbol is not None and zero is not None:
            raise MalformedTree("a leaf cannot have children")
        if symbol is None and zero is None:
            raise MalformedTree("a leaf must hold a symbol")
        self.symbol: Optional[str] = symbol
        self.zero: Optional[EncodingTreeNode] = zero
        self.one: Optional[EncodingTreeNode] = one

    @classmethod
    def leaf(cls, symbol: str) -> EncodingTreeNode:
        return cls(symbol=symbol)

    @classmethod
    def internal(cls, zero: EncodingTreeNode, one: EncodingTreeNode) -> EncodingTreeNode:
        return cls(zero=zero, one=one)

    def isLeaf(self) -> bool:
        return self.zero is None and self.one is None

    def __repr__(self) -> str:
        if self.isLeaf():
            return f"Leaf({self.symbol!r})"
        return f"Node({self.zero!r}, {self.one!r})"


def are_equal(a: Optional[EncodingTreeNode], b: Optional[EncodingTreeNode]) -> bool:
    """Structural equality: same shape and same symbols at the same leaves."""
    pairs = [(a, b)]
    while pairs:
        a, b = pairs.pop()
        if a is None or b is None:
            if a is not b:
                return False
        elif a.isLeaf() or b.isLeaf():
            if not (a.isLeaf() and b.isLeaf() and a.symbol == b.symbol):
                return False
        else:
            pairs.append((a.one, b.one))
            pairs.append((a.zero, b.zero))
    return True


def build_frequency_table(text: Iterable[str]) -> Dict[str, int]:
    # Count frequency of characters
    freq_table: Dict[str, int] = {}
    for symbol in text:
        if symbol in freq_table:
            freq_table[symbol] += 1
        else:
            freq_table[symbol] = 1
    return freq_table


def merge_frequency_tables(freq_tables: Iterable[Dict[str, int]]) -> Dict[str, int]:
    merged_freq_table: Dict[str, int] = {}
    for freq_table in freq_tables:
        for symbol, freq in freq_table.items():
            merged_freq_table[symbol] = merged_freq_table.get(symbol, 0) + freq
    return merged_freq_table


def build_tree_from_frequencies(freq_table: Dict[str, int]) -> EncodingTreeNode:
    """Greedy pairwise merge of the two lightest entries until one remains.

    Leaves are enqueued in sorted symbol order. Among entries of equal weight
    the most recently enqueued one is dequeued first, so a freshly merged
    subtree is taken ahead of an older entry of the same weight. The entry
    dequeued first becomes the zero child.
    """
    if len(freq_table) < 2:
        raise InsufficientAlphabet(
            f"need at least 2 distinct symbols, got {len(freq_table)}"
        )
    enqueue_order = itertools.count()
    heap: List[Tuple[int, int, EncodingTreeNode]] = []
    for symbol, freq in sorted(freq_table.items()):
        if freq < 1:
            raise ValueError(f"frequency of {symbol!r} must be positive, got {freq}")
        heap.append((freq, -next(enqueue_order), EncodingTreeNode.leaf(symbol)))
    heapq.heapify(heap)
    while len(heap) != 1:
        freq1, _, node1 = heapq.heappop(heap)
        freq2, _, node2 = heapq.heappop(heap)
        new_parent_node = EncodingTreeNode.internal(zero=node1, one=node2)
        heapq.heappush(heap, (freq1 + freq2, -next(enqueue_order), new_parent_node))
    logger.debug(
        "Built Huffman tree over %d symbols, total weight %d",
        len(freq_table),
        heap[0][0],
    )
    return heap[0][2]


def build_huffman_tree(text: str) -> EncodingTreeNode:
    return build_tree_from_frequencies(freq_table=build_frequency_table(text))
