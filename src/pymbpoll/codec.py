"""
Wide-value codec: 32-bit integers and IEEE 754 floats spread over two 16-bit registers.

`first` is always the word at the lower address, `second` the one after it.
With big endian word order `first` is the most significant half; with little endian
word order the roles swap. Conversions go through pymodbus' register helpers so the
bytes match what the client library puts on the wire.
"""

import math
from typing import Literal, Sequence

from pymodbus.client.mixin import ModbusClientMixin

from .errors import WriteValueError

DATATYPE = ModbusClientMixin.DATATYPE
WORD_MASK = 0xFFFF


def word_order(big_endian: bool) -> Literal["big", "little"]:
    return "big" if big_endian else "little"


def combine_words(first: int, second: int, big_endian: bool = True) -> int:
    """Combine two 16-bit words into an unsigned 32-bit value."""
    return ModbusClientMixin.convert_from_registers(
        [first & WORD_MASK, second & WORD_MASK], DATATYPE.UINT32, word_order=word_order(big_endian)
    )


def split_words(value: int, big_endian: bool = True) -> tuple[int, int]:
    """Inverse of combine_words: unsigned 32-bit value -> (first, second) register words."""
    first, second = ModbusClientMixin.convert_to_registers(
        value & 0xFFFFFFFF, DATATYPE.UINT32, word_order=word_order(big_endian)
    )
    return first, second


def decode_int32(first: int, second: int, big_endian: bool = True) -> int:
    """Read a register pair as a signed 32-bit integer."""
    return ModbusClientMixin.convert_from_registers(
        [first, second], DATATYPE.INT32, word_order=word_order(big_endian)
    )


def decode_float32(first: int, second: int, big_endian: bool = True) -> float:
    """Read a register pair as an IEEE 754 single, bit for bit."""
    return ModbusClientMixin.convert_from_registers(
        [first, second], DATATYPE.FLOAT32, word_order=word_order(big_endian)
    )


def float_from_bits(bits: int) -> float:
    """Reinterpret an unsigned 32-bit pattern as an IEEE 754 single."""
    return decode_float32(bits >> 16, bits & WORD_MASK, big_endian=True)


def to_uint16(value: float) -> int:
    """
    Narrow a write value to one 16-bit register.

    Truncates toward zero and wraps to 16 bits, so -1 becomes 0xFFFF. NaN and the
    infinities have no integer value and raise WriteValueError.
    """
    if not math.isfinite(value):
        raise WriteValueError(f"cannot write {value} to a 16-bit register", value=value)
    return int(value) & WORD_MASK


def pair_values(values: Sequence[float]) -> list[tuple[float, float]]:
    """Group write values two by two; an odd count cannot form 32-bit values."""
    if len(values) % 2:
        raise WriteValueError(f"32-bit values require even number of values, got {len(values)}")
    return [(values[i], values[i + 1]) for i in range(0, len(values), 2)]
