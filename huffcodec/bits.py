from __future__ import annotations
from enum import IntEnum
from typing import Iterable, List

from huffcodec.errors import MalformedBitstream


class Bit(IntEnum):
    ZERO = 0
    ONE = 1

    @staticmethod
    def from_value(value) -> Bit:
        # bool is an int subclass, "0"/"1" are the character codes
        if isinstance(value, Bit):
            return value
        if isinstance(value, str):
            if value == "0":
                return Bit.ZERO
            if value == "1":
                return Bit.ONE
        elif isinstance(value, int) and value in (0, 1):
            return Bit(int(value))
        raise MalformedBitstream(f"{value!r} is not a bit")

    def to_char(self) -> str:
        return "1" if self is Bit.ONE else "0"


def to_bits(values: Iterable) -> List[Bit]:
    return [Bit.from_value(value) for value in values]


def bits_from_string(binary_string: str) -> List[Bit]:
    """Converts a string of '0'/'1' characters into a list of bits."""
    return [Bit.from_value(char) for char in binary_string]


def bits_to_string(bits: Iterable[Bit]) -> str:
    return "".join(Bit.from_value(bit).to_char() for bit in bits)
