from __future__ import annotations
from typing import Dict, Iterable, List, Tuple
import logging

from huffcodec.bits import Bit
from huffcodec.errors import MalformedBitstream, MalformedTree, UnknownSymbol
from huffcodec.tree import EncodingTreeNode

logger = logging.getLogger(__name__)


def _require_internal_root(root: EncodingTreeNode):
    if root.isLeaf():
        raise MalformedTree("a tree with a single leaf assigns no codes")


def generate_coding_table(root: EncodingTreeNode) -> Dict[str, List[Bit]]:
    coding_table: Dict[str, List[Bit]] = {}
    stack: List[Tuple[EncodingTreeNode, List[Bit]]] = [(root, [])]
    while stack:
        node, path = stack.pop()
        if node.isLeaf():
            coding_table[node.symbol] = path
        else:
            stack.append((node.one, path + [Bit.ONE]))
            stack.append((node.zero, path + [Bit.ZERO]))
    return coding_table


def encode_text(root: EncodingTreeNode, text: str) -> List[Bit]:
    """Concatenates the root-to-leaf path of every symbol of text.

    Raises UnknownSymbol for a symbol that has no leaf in the tree.
    """
    _require_internal_root(root)
    coding_table = generate_coding_table(root=root)
    message_bits: List[Bit] = []
    for symbol in text:
        try:
            message_bits.extend(coding_table[symbol])
        except KeyError:
            raise UnknownSymbol(symbol) from None
    logger.debug("Encoded %d symbols into %d bits", len(text), len(message_bits))
    return message_bits


def decode_text(root: EncodingTreeNode, bits: Iterable) -> str:
    """Walks the tree once per symbol, restarting at the root after each leaf."""
    _require_internal_root(root)
    decoded_symbols: List[str] = []
    curr_node = root
    bits_read = 0
    for value in bits:
        bit = Bit.from_value(value)
        bits_read += 1
        curr_node = curr_node.zero if bit == Bit.ZERO else curr_node.one
        if curr_node.isLeaf():
            decoded_symbols.append(curr_node.symbol)
            curr_node = root
    if curr_node is not root:
        raise MalformedBitstream(
            f"bit sequence ends inside a code after {bits_read} bits"
        )
    return "".join(decoded_symbols)
