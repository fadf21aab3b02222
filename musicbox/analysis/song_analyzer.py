"""
Encoded song analyzer.

Breaks an encoded song string down to its individual bit fields:
- Version tag and payload size
- Header fields with bit offsets, raw values and meaning
- Per-beat track fields
- Truncation and padding status
"""

from dataclasses import dataclass, field
from typing import List, Optional

from musicbox.formats.decoder import DECODERS
from musicbox.formats.framing import UnknownVersionError, from_base64url, split_version
from musicbox.formats.layouts import LAYOUTS, FieldSpec, FormatLayout, TrackLayout
from musicbox.models.song import Mode, SongState
from musicbox.utils.bits import bytes_to_bits, read_bits
from musicbox.utils.tables import (
    MAX_OCTAVE,
    MIN_OCTAVE,
    SPEEDS,
    VELOCITY_LEVELS,
    get_key_name,
)


@dataclass
class BitField:
    """A single decoded bit field."""

    name: str
    offset: int
    width: int
    raw: int
    meaning: str
    truncated: bool = False  # Some of the bits lie past the end of the payload

    @property
    def bits_str(self) -> str:
        """Raw value as a zero-padded binary string."""
        return format(self.raw, f"0{self.width}b")


@dataclass
class TrackFields:
    """Fields of one track at one beat."""

    track: int
    fields: List[BitField] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.fields or self.fields[0].raw == 0


@dataclass
class BeatRecord:
    """All track fields of one beat."""

    beat: int
    offset: int
    tracks: List[TrackFields] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return all(t.is_empty for t in self.tracks)


@dataclass
class SongAnalysis:
    """Complete breakdown of an encoded song."""

    encoded: str
    version: int
    tagged: bool
    payload: bytes
    layout: FormatLayout
    header: List[BitField] = field(default_factory=list)
    beats: List[BeatRecord] = field(default_factory=list)
    song: Optional[SongState] = None

    @property
    def beat_count(self) -> int:
        return len(self.beats)

    @property
    def available_bits(self) -> int:
        return len(self.payload) * 8

    @property
    def expected_bits(self) -> int:
        return self.layout.total_bits(self.beat_count)

    @property
    def is_truncated(self) -> bool:
        """Payload holds fewer bits than the layout needs."""
        return self.available_bits < self.expected_bits

    @property
    def padding_bits(self) -> int:
        """Unused bits after the last beat record."""
        return max(0, self.available_bits - self.expected_bits)

    @property
    def non_empty_beats(self) -> int:
        return sum(1 for beat in self.beats if not beat.is_empty)


class SongAnalyzer:
    """
    Analyzer for encoded song strings.

    Example:
        analysis = SongAnalyzer("v5_...").analyze()
        for f in analysis.header:
            print(f.name, f.offset, f.bits_str, f.meaning)
    """

    def __init__(self, encoded: str):
        self.encoded = encoded
        self.bits: List[int] = []

    def analyze(self) -> SongAnalysis:
        """
        Perform full analysis.

        Raises:
            UnknownVersionError: If the version tag is not a shipped format
            DecodeError: If the payload is not valid base64
        """
        version, payload_text, tagged = split_version(self.encoded)
        if version not in LAYOUTS:
            raise UnknownVersionError(version)

        layout = LAYOUTS[version]
        payload = from_base64url(payload_text)
        self.bits = bytes_to_bits(payload)

        analysis = SongAnalysis(
            encoded=self.encoded,
            version=version,
            tagged=tagged,
            payload=payload,
            layout=layout,
        )

        offset = 0
        length_index = 0
        for spec in layout.header:
            bit_field = self._read_field(spec, offset, self._header_meaning(spec, layout))
            if spec.name == "length":
                length_index = bit_field.raw
            analysis.header.append(bit_field)
            offset += spec.width

        for beat in range(layout.beat_count(length_index)):
            record = BeatRecord(beat=beat, offset=offset)
            for track_layout in layout.tracks:
                record.tracks.append(self._read_track(track_layout, offset))
                offset += track_layout.width
            analysis.beats.append(record)

        analysis.song = DECODERS[version](self.bits)
        return analysis

    def _read_field(self, spec: FieldSpec, offset: int, describe) -> BitField:
        """Read one field and describe its raw value."""
        raw = read_bits(self.bits, offset, spec.width)
        return BitField(
            name=spec.name,
            offset=offset,
            width=spec.width,
            raw=raw,
            meaning=describe(raw),
            truncated=offset + spec.width > len(self.bits),
        )

    def _read_track(self, track_layout: TrackLayout, offset: int) -> TrackFields:
        """Read the fields of one track at one beat."""
        result = TrackFields(track=track_layout.track)
        for spec in track_layout.fields:
            describe = self._track_meaning(spec, track_layout)
            result.fields.append(self._read_field(spec, offset, describe))
            offset += spec.width
        return result

    @staticmethod
    def _header_meaning(spec: FieldSpec, layout: FormatLayout):
        """Build the describer for a header field."""
        if spec.name == "mode":
            return lambda raw: Mode.from_index(raw).value
        if spec.name == "speed":
            return lambda raw: f"{SPEEDS[raw][0]} ms/beat" if raw < len(SPEEDS) else "?"
        if spec.name == "loop":
            return lambda raw: "on" if raw else "off"
        if spec.name == "length":
            return lambda raw: f"{layout.beat_count(raw)} beats"
        if spec.name == "key":
            return get_key_name
        return str

    @staticmethod
    def _track_meaning(spec: FieldSpec, track_layout: TrackLayout):
        """Build the describer for a per-beat field."""
        if spec.name == "pitch":
            table = track_layout.pitch_table

            def describe_pitch(raw: int) -> str:
                if raw == 0:
                    return "-"
                return table[raw] if raw < len(table) else "?"

            return describe_pitch
        if spec.name == "duration":
            return lambda raw: f"{raw + 1} beat{'s' if raw else ''}"
        if spec.name == "velocity":
            return lambda raw: f"{raw / VELOCITY_LEVELS:.2f}"
        if spec.name == "octave":
            return lambda raw: str(raw + MIN_OCTAVE) if raw + MIN_OCTAVE <= MAX_OCTAVE else "?"
        return str


def analyze_encoded(encoded: str) -> SongAnalysis:
    """Analyze an encoded song string (see SongAnalyzer.analyze)."""
    return SongAnalyzer(encoded).analyze()
