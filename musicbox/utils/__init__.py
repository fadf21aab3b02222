"""Utility functions for musicbox."""

from musicbox.utils.bits import push_bits, read_bits, bits_to_bytes, bytes_to_bits, BitReader
from musicbox.utils.validation import ValidationError

__all__ = [
    "push_bits",
    "read_bits",
    "bits_to_bytes",
    "bytes_to_bits",
    "BitReader",
    "ValidationError",
]
