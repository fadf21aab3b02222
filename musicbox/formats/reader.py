"""
Song string reader.

Decodes "v<N>_<base64url>" strings from any shipped format version into
a SongState.
"""

import logging
from typing import List, Optional

from musicbox.formats.decoder import DECODERS
from musicbox.formats.framing import DecodeError, UnknownVersionError, from_base64url, split_version
from musicbox.models.song import SongState
from musicbox.utils.bits import bytes_to_bits

logger = logging.getLogger(__name__)


class SongReader:
    """
    Reader for encoded song strings.

    parse() raises DecodeError with the reason a string could not be
    decoded; read() is the lenient entry point used when loading share
    URLs, returning None instead so the caller can start a fresh song.

    Example:
        song = SongReader.read("v5_...")
        if song is None:
            song = SongState.create_empty()
    """

    def __init__(self):
        self.version: Optional[int] = None
        self.tagged = False
        self._payload: bytes = b""

    @classmethod
    def read(cls, encoded: str) -> Optional[SongState]:
        """
        Decode an encoded song, returning None if it cannot be decoded.

        Args:
            encoded: Encoded song string

        Returns:
            Decoded SongState, or None for malformed input and unknown versions
        """
        reader = cls()
        try:
            return reader.parse(encoded)
        except DecodeError as e:
            logger.warning("Failed to decode song state: %s", e)
            return None

    def parse(self, encoded: str) -> SongState:
        """
        Decode an encoded song.

        Args:
            encoded: Encoded song string

        Returns:
            Decoded SongState

        Raises:
            UnknownVersionError: If the version tag is not a shipped format
            DecodeError: If the payload is not valid base64
        """
        self.version, payload, self.tagged = split_version(encoded)

        decoder = DECODERS.get(self.version)
        if decoder is None:
            raise UnknownVersionError(self.version)

        self._payload = from_base64url(payload)
        bits = bytes_to_bits(self._payload)

        song = decoder(bits)
        logger.debug(
            "Decoded v%d song: %d bytes, %d beats, %d notes",
            self.version,
            len(self._payload),
            song.beat_count,
            song.note_count,
        )
        return song

    def parse_bits(self, bits: List[int], version: int) -> SongState:
        """
        Decode an already unpacked bitstream of a given version.

        Raises:
            UnknownVersionError: If the version is not a shipped format
        """
        decoder = DECODERS.get(version)
        if decoder is None:
            raise UnknownVersionError(version)
        self.version = version
        return decoder(bits)

    @property
    def payload(self) -> bytes:
        """Packed payload of the last parsed string."""
        return self._payload

    @classmethod
    def can_read(cls, encoded: str) -> bool:
        """
        Check if a string decodes to a song.

        Args:
            encoded: String to check

        Returns:
            True if the string is a decodable song
        """
        try:
            cls().parse(encoded)
        except DecodeError:
            return False
        return True


def decode_song(encoded: str) -> Optional[SongState]:
    """Decode an encoded song string, or return None if it cannot be decoded."""
    return SongReader.read(encoded)
