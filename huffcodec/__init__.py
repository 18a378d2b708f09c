from huffcodec.bits import Bit
from huffcodec.codec import decode_text, encode_text, generate_coding_table
from huffcodec.compression import EncodedRecord, compress, decompress
from huffcodec.errors import (
    HuffmanError,
    InsufficientAlphabet,
    MalformedBitstream,
    MalformedTree,
    UnknownSymbol,
)
from huffcodec.flatten import flatten_tree, unflatten_tree
from huffcodec.tree import (
    EncodingTreeNode,
    are_equal,
    build_frequency_table,
    build_huffman_tree,
    build_tree_from_frequencies,
    merge_frequency_tables,
)

__all__ = [
    "Bit",
    "EncodedRecord",
    "EncodingTreeNode",
    "HuffmanError",
    "InsufficientAlphabet",
    "MalformedBitstream",
    "MalformedTree",
    "UnknownSymbol",
    "are_equal",
    "build_frequency_table",
    "build_huffman_tree",
    "build_tree_from_frequencies",
    "compress",
    "decode_text",
    "decompress",
    "encode_text",
    "flatten_tree",
    "generate_coding_table",
    "merge_frequency_tables",
    "unflatten_tree",
]
