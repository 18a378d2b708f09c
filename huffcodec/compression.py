from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List
import logging

from huffcodec.bits import Bit, to_bits
from huffcodec.codec import decode_text, encode_text
from huffcodec.errors import MalformedBitstream, MalformedTree
from huffcodec.flatten import flatten_tree, unflatten_tree
from huffcodec.tree import build_huffman_tree

logger = logging.getLogger(__name__)


@dataclass
class EncodedRecord:
    """Flattened tree plus the message encoded against it."""

    shape: List[Bit] = field(default_factory=list)
    leaves: List[str] = field(default_factory=list)
    message_bits: List[Bit] = field(default_factory=list)

    def to_dict(self) -> Dict[str, list]:
        return {
            "shape": [int(bit) for bit in self.shape],
            "leaves": list(self.leaves),
            "message_bits": [int(bit) for bit in self.message_bits],
        }

    @staticmethod
    def from_dict(data: Dict[str, list]) -> EncodedRecord:
        try:
            record = EncodedRecord(
                shape=to_bits(data["shape"]),
                leaves=list(data["leaves"]),
                message_bits=to_bits(data["message_bits"]),
            )
        except (KeyError, TypeError) as e:
            raise MalformedBitstream(f"not an encoded record: {e}") from e
        for leaf in record.leaves:
            if not isinstance(leaf, str) or len(leaf) != 1:
                raise MalformedTree(f"leaf symbol {leaf!r} is not a single character")
        return record


def compress(text: str) -> EncodedRecord:
    root = build_huffman_tree(text)
    shape, leaves = flatten_tree(root)
    message_bits = encode_text(root, text)
    logger.debug(
        "Compressed %d symbols: %d shape bits, %d leaves, %d message bits",
        len(text),
        len(shape),
        len(leaves),
        len(message_bits),
    )
    return EncodedRecord(shape=shape, leaves=leaves, message_bits=message_bits)


def decompress(record: EncodedRecord) -> str:
    root = unflatten_tree(record.shape, record.leaves)
    return decode_text(root, record.message_bits)
