from __future__ import annotations
from typing import Iterable, List, Optional, Tuple
import logging

from huffcodec.bits import Bit
from huffcodec.errors import MalformedTree
from huffcodec.tree import EncodingTreeNode

logger = logging.getLogger(__name__)


def flatten_tree(root: EncodingTreeNode) -> Tuple[List[Bit], List[str]]:
    """Pre-order, zero branch first: ONE for an internal node, ZERO for a leaf.

    Leaf symbols are emitted in the order the traversal reaches them.
    """
    shape: List[Bit] = []
    leaves: List[str] = []
    # one child is pushed first so the zero child is visited first
    stack = [root]
    while stack:
        node = stack.pop()
        if node.isLeaf():
            shape.append(Bit.ZERO)
            leaves.append(node.symbol)
        else:
            shape.append(Bit.ONE)
            stack.append(node.one)
            stack.append(node.zero)
    return shape, leaves


class _PendingNode:
    __slots__ = ("zero",)

    def __init__(self) -> None:
        self.zero: Optional[EncodingTreeNode] = None


def unflatten_tree(shape: Iterable, leaves: Iterable[str]) -> EncodingTreeNode:
    """Rebuilds the tree written by flatten_tree.

    Both streams are consumed left to right and a zero subtree is always
    completed before its sibling one subtree is started. Raises MalformedTree
    when either stream runs out early or has anything left over.
    """
    shape_iter = iter(shape)
    leaves_iter = iter(leaves)
    # internal nodes still waiting for one or both children
    pending: List[_PendingNode] = []
    root: Optional[EncodingTreeNode] = None
    shape_bits_read = 0
    while root is None:
        try:
            bit = Bit.from_value(next(shape_iter))
        except StopIteration:
            raise MalformedTree(
                f"tree shape ended after {shape_bits_read} bits with "
                f"{len(pending) + 1} subtrees incomplete"
            ) from None
        shape_bits_read += 1
        if bit == Bit.ONE:
            pending.append(_PendingNode())
            continue
        try:
            node = EncodingTreeNode.leaf(next(leaves_iter))
        except StopIteration:
            raise MalformedTree("ran out of leaf symbols") from None
        while True:
            if not pending:
                root = node
                break
            parent = pending[-1]
            if parent.zero is None:
                parent.zero = node
                break
            pending.pop()
            node = EncodingTreeNode.internal(zero=parent.zero, one=node)
    if next(shape_iter, None) is not None:
        raise MalformedTree(f"extra shape bits after the first {shape_bits_read}")
    if next(leaves_iter, None) is not None:
        raise MalformedTree("extra leaf symbols after the tree was complete")
    logger.debug("Unflattened tree from %d shape bits", shape_bits_read)
    return root
