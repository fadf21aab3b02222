"""
Song string writer.

Encodes a SongState into the latest format version. The bitstream is a
header followed by one fixed-width record per beat; beats without a note
starting on them still write the empty pitch and placeholder fields.
"""

import logging
from typing import Dict, List, Optional

from musicbox.formats.framing import join_version, to_base64url
from musicbox.formats.layouts import LATEST_VERSION, LAYOUTS, FormatLayout, TrackLayout
from musicbox.models.note import NoteEvent
from musicbox.models.song import SongState, snap_beat_count
from musicbox.utils.bits import bits_to_bytes, push_bits
from musicbox.utils.tables import (
    BEAT_LENGTHS,
    DEFAULT_OCTAVES,
    DEFAULT_VELOCITY,
    KEY_NAMES,
    MAX_DURATION,
    MAX_OCTAVE,
    MIN_DURATION,
    MIN_OCTAVE,
    PERCUSSION_TRACK,
    SPEEDS,
    VELOCITY_LEVELS,
    index_of,
)

logger = logging.getLogger(__name__)


def quantize_velocity(velocity: float) -> int:
    """Map a 0.0-1.0 velocity to the nearest of 16 levels (half rounds up)."""
    clamped = min(max(velocity, 0.0), 1.0)
    return int(clamped * VELOCITY_LEVELS + 0.5)


def quantize_duration(duration: int) -> int:
    """Store a 1-8 beat duration as 0-7."""
    return min(max(duration, MIN_DURATION), MAX_DURATION) - MIN_DURATION


def quantize_octave(octave: int) -> int:
    """Store a 2-6 octave as 0-4."""
    return min(max(octave, MIN_OCTAVE), MAX_OCTAVE) - MIN_OCTAVE


class SongWriter:
    """
    Writer for encoded song strings.

    Always writes the latest format version.

    Example:
        song = SongState.create_empty()
        song.high_piano.add_note(0, "C")
        encoded = SongWriter.write(song)  # "v5_..."
    """

    def __init__(self):
        self.layout: FormatLayout = LAYOUTS[LATEST_VERSION]

    @classmethod
    def write(cls, song: SongState) -> str:
        """
        Encode a song to a "v<N>_<base64url>" string.

        Args:
            song: Song to encode

        Returns:
            Encoded song string
        """
        writer = cls()
        return writer.to_string(song)

    def to_string(self, song: SongState) -> str:
        """Encode a song to a tagged base64url string."""
        return join_version(self.layout.version, to_base64url(self.to_bytes(song)))

    def to_bytes(self, song: SongState) -> bytes:
        """Encode a song to packed bytes (zero-padded final byte)."""
        return bits_to_bytes(self.to_bits(song))

    def to_bits(self, song: SongState) -> List[int]:
        """
        Encode a song to a bit list.

        Args:
            song: Song to encode

        Returns:
            Header bits followed by one record per beat
        """
        bits: List[int] = []

        header = self._header_values(song)
        for spec in self.layout.header:
            push_bits(bits, header[spec.name], spec.width)

        beat_count = BEAT_LENGTHS[header["length"]]
        for beat in range(beat_count):
            for track_layout in self.layout.tracks:
                note = song.get_track(track_layout.track).note_at(beat)
                values = self._track_values(note, track_layout)
                for spec in track_layout.fields:
                    push_bits(bits, values[spec.name], spec.width)

        return bits

    def _header_values(self, song: SongState) -> Dict[str, int]:
        """Raw header field values for a song."""
        beat_count = snap_beat_count(song.beat_count)
        if beat_count != song.beat_count:
            logger.debug("Song length %d stored as %d beats", song.beat_count, beat_count)

        if song.key_name in KEY_NAMES:
            key_index = KEY_NAMES.index(song.key_name)
        else:
            logger.debug("Unknown key %r stored as %s", song.key_name, KEY_NAMES[0])
            key_index = 0

        return {
            "mode": song.mode.index,
            "speed": min(max(song.speed_index, 0), len(SPEEDS) - 1),
            "loop": 1 if song.loop else 0,
            "length": BEAT_LENGTHS.index(beat_count),
            "key": key_index,
        }

    def _track_values(self, note: Optional[NoteEvent], track_layout: TrackLayout) -> Dict[str, int]:
        """
        Raw per-beat field values of one track.

        No note writes pitch 0 with the default duration, velocity and
        octave as placeholders.
        """
        default_octave = 0
        if track_layout.track != PERCUSSION_TRACK:
            default_octave = quantize_octave(DEFAULT_OCTAVES[track_layout.track])

        if note is None:
            return {
                "pitch": 0,
                "duration": 0,
                "velocity": quantize_velocity(DEFAULT_VELOCITY),
                "octave": default_octave,
            }

        pitch = index_of(track_layout.pitch_table, note.pitch)
        if pitch >= 1 << track_layout.pitch_bits:
            # push_bits keeps the low bits, which is 0 (empty) for cowbell
            logger.debug(
                "%r at beat %d does not fit %d pitch bits and is dropped",
                note.pitch,
                note.beat,
                track_layout.pitch_bits,
            )

        return {
            "pitch": pitch,
            "duration": quantize_duration(note.duration),
            "velocity": quantize_velocity(note.velocity),
            "octave": quantize_octave(note.octave) if note.octave is not None else default_octave,
        }


def encode_song(song: SongState) -> str:
    """Encode a song to the latest "v<N>_<base64url>" format."""
    return SongWriter.write(song)
