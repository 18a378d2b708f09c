from __future__ import annotations
from typing import List, Sequence, Tuple
import logging

from huffcodec.bits import Bit
from huffcodec.compression import EncodedRecord
from huffcodec.errors import MalformedBitstream, MalformedTree

logger = logging.getLogger(__name__)

LENGTH_FIELD_BYTES = 4
HEADER_BYTES = 3 * LENGTH_FIELD_BYTES


def pack_bits(bits: Sequence[Bit]) -> bytearray:
    """Packs bits MSB first, zero padding the last byte."""
    byte_array = bytearray()
    number_of_bits = 8
    for i in range(0, len(bits), number_of_bits):
        byte = 0
        chunk = bits[i : i + number_of_bits]
        for bit in chunk:
            byte = (byte << 1) | int(bit)
        byte <<= number_of_bits - len(chunk)
        byte_array.append(byte)
    return byte_array


def unpack_bits(byte_array: bytes, original_length: int) -> List[Bit]:
    if len(byte_array) * 8 < original_length:
        raise MalformedBitstream(
            f"{len(byte_array)} bytes cannot hold {original_length} bits"
        )
    bits = [
        Bit((byte >> shift) & 1) for byte in byte_array for shift in range(7, -1, -1)
    ]
    return bits[:original_length]


def _packed_size(number_of_bits: int) -> int:
    return (number_of_bits + 7) // 8


def record_to_bytes(record: EncodedRecord) -> bytes:
    # leaves are re-split per character on read
    for leaf in record.leaves:
        if len(leaf) != 1:
            raise MalformedTree(f"leaf symbol {leaf!r} is not a single character")
    leaves_bytes = "".join(record.leaves).encode("utf-8")
    out = bytearray()
    # Header: shape bit count, leaves byte length, message bit count
    out += len(record.shape).to_bytes(length=LENGTH_FIELD_BYTES, byteorder="big")
    out += len(leaves_bytes).to_bytes(length=LENGTH_FIELD_BYTES, byteorder="big")
    out += len(record.message_bits).to_bytes(
        length=LENGTH_FIELD_BYTES, byteorder="big"
    )
    out += pack_bits(record.shape)
    out += leaves_bytes
    out += pack_bits(record.message_bits)
    return bytes(out)


def _read_header(data: bytes) -> Tuple[int, int, int]:
    if len(data) < HEADER_BYTES:
        raise MalformedBitstream(f"container header needs {HEADER_BYTES} bytes")
    return tuple(
        int.from_bytes(data[i : i + LENGTH_FIELD_BYTES], byteorder="big")
        for i in range(0, HEADER_BYTES, LENGTH_FIELD_BYTES)
    )


def record_from_bytes(data: bytes) -> EncodedRecord:
    shape_length, leaves_length, message_length = _read_header(data)
    offset = HEADER_BYTES
    shape_end = offset + _packed_size(shape_length)
    leaves_end = shape_end + leaves_length
    message_end = leaves_end + _packed_size(message_length)
    if len(data) != message_end:
        raise MalformedBitstream(
            f"container holds {len(data)} bytes, header describes {message_end}"
        )
    try:
        leaves = list(data[shape_end:leaves_end].decode("utf-8"))
    except UnicodeDecodeError as e:
        raise MalformedBitstream(f"leaf symbols are not valid UTF-8: {e}") from e
    return EncodedRecord(
        shape=unpack_bits(data[offset:shape_end], shape_length),
        leaves=leaves,
        message_bits=unpack_bits(data[leaves_end:message_end], message_length),
    )


def write_record_file(path_output: str, record: EncodedRecord):
    data = record_to_bytes(record)
    with open(path_output, "wb") as f:
        f.write(data)
    logger.info("Wrote %d bytes to %s", len(data), path_output)


def read_record_file(path_input: str) -> EncodedRecord:
    with open(path_input, "rb") as f:
        data = f.read()
    return record_from_bytes(data)


def merge_chunk_records(records: Sequence[EncodedRecord]) -> EncodedRecord:
    """Joins records encoded against one shared tree, in the given order."""
    if not records:
        raise MalformedBitstream("no records to merge")
    first = records[0]
    message_bits: List[Bit] = []
    for record in records:
        if list(record.shape) != list(first.shape) or list(record.leaves) != list(
            first.leaves
        ):
            raise MalformedTree("chunks were encoded against different trees")
        message_bits.extend(record.message_bits)
    return EncodedRecord(
        shape=list(first.shape), leaves=list(first.leaves), message_bits=message_bits
    )
