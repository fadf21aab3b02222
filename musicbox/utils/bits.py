"""
Bit-array primitives for the compact song format.

Songs are packed into a flat list of bits, most significant bit first.
Fields are written with push_bits() and read back with read_bits() or a
BitReader cursor. The bit list is then packed into bytes, zero-padding the
final byte.

Reading past the end of the available bits is not an error: missing bits
read as 0. A truncated payload therefore decodes as empty beats instead of
failing.

Example:
    >>> bits = []
    >>> push_bits(bits, 0b101, 3)
    >>> push_bits(bits, 1, 1)
    >>> bits
    [1, 0, 1, 1]
    >>> bits_to_bytes(bits)
    b'\\xb0'
"""

from typing import List, Sequence, Union


def push_bits(bits: List[int], value: int, width: int) -> None:
    """
    Append the `width` least significant bits of value, MSB first.

    Args:
        bits: Bit list to append to
        value: Value to write (higher bits are dropped)
        width: Number of bits to write
    """
    for i in range(width - 1, -1, -1):
        bits.append((value >> i) & 1)


def read_bits(bits: Sequence[int], offset: int, width: int) -> int:
    """
    Read an unsigned integer of `width` bits starting at offset, MSB first.

    Bits beyond the end of the sequence read as 0.

    Args:
        bits: Bit sequence
        offset: Index of the first bit
        width: Number of bits to read

    Returns:
        Unsigned integer value
    """
    value = 0
    available = len(bits)
    for i in range(width):
        pos = offset + i
        bit = bits[pos] if 0 <= pos < available else 0
        value = (value << 1) | (bit & 1)
    return value


def bits_to_bytes(bits: Sequence[int]) -> bytes:
    """
    Pack bits into bytes, MSB first, zero-padding the final byte.

    Args:
        bits: Bit sequence

    Returns:
        Packed bytes (ceil(len(bits) / 8) long)
    """
    result = bytearray()
    for i in range(0, len(bits), 8):
        result.append(read_bits(bits, i, 8))
    return bytes(result)


def bytes_to_bits(data: Union[bytes, List[int]]) -> List[int]:
    """
    Unpack bytes into a list of bits, MSB first.

    Args:
        data: Raw bytes

    Returns:
        List of 0/1 values, 8 per byte
    """
    if isinstance(data, list):
        data = bytes(data)

    bits: List[int] = []
    for byte in data:
        push_bits(bits, byte, 8)
    return bits


class BitReader:
    """
    Sequential reader over a bit list.

    Keeps the read offset so decoders can read fields in layout order.
    """

    def __init__(self, bits: Sequence[int], offset: int = 0):
        self.bits = bits
        self.offset = offset

    def read(self, width: int) -> int:
        """Read the next field of `width` bits."""
        value = read_bits(self.bits, self.offset, width)
        self.offset += width
        return value

    @property
    def remaining(self) -> int:
        """Number of real (non-padding) bits left, never negative."""
        return max(0, len(self.bits) - self.offset)

    @property
    def exhausted(self) -> bool:
        """True once the cursor has moved past the last real bit."""
        return self.offset >= len(self.bits)
