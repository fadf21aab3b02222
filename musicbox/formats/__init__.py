"""Encoders and decoders for the compact song string format."""

from musicbox.formats.framing import DecodeError, UnknownVersionError
from musicbox.formats.layouts import LATEST_VERSION, LAYOUTS
from musicbox.formats.reader import SongReader, decode_song
from musicbox.formats.writer import SongWriter, encode_song

__all__ = [
    "DecodeError",
    "UnknownVersionError",
    "LATEST_VERSION",
    "LAYOUTS",
    "SongReader",
    "SongWriter",
    "decode_song",
    "encode_song",
]
