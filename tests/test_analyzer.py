"""Tests for the encoded song analyzer."""

import pytest
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from musicbox.analysis import SongAnalyzer, analyze_encoded
from musicbox.formats.framing import DecodeError, UnknownVersionError
from musicbox.formats.writer import encode_song
from musicbox.models.song import SongState


class TestHeaderFields:
    """Test cases for header breakdown."""

    def test_v5_offsets(self, empty_song):
        """Test field names and bit offsets of the latest header."""
        analysis = analyze_encoded(encode_song(empty_song))
        assert [f.name for f in analysis.header] == ["mode", "speed", "loop", "length", "key"]
        assert [f.offset for f in analysis.header] == [0, 2, 4, 5, 7]
        assert [f.width for f in analysis.header] == [2, 2, 1, 2, 4]

    def test_meanings(self, sample_song):
        """Test raw values are described."""
        analysis = analyze_encoded(encode_song(sample_song))
        meanings = {f.name: f.meaning for f in analysis.header}
        assert meanings["mode"] == "studio"
        assert meanings["speed"] == "130 ms/beat"
        assert meanings["loop"] == "on"
        assert meanings["length"] == "32 beats"
        assert meanings["key"] == "G Major"

    def test_bits_str(self, encode_fields):
        """Test binary rendering keeps leading zeros."""
        analysis = analyze_encoded(encode_fields(3, {"key": 1}))
        key = analysis.header[-1]
        assert key.name == "key"
        assert key.bits_str == "0001"

    def test_v1_header(self, encode_fields):
        """Test the oldest header layout."""
        analysis = analyze_encoded(encode_fields(1, {"length": 2}, tagged=False))
        assert analysis.version == 1
        assert not analysis.tagged
        assert [f.offset for f in analysis.header] == [0, 2, 3]
        assert analysis.header[-1].meaning == "32 beats"


class TestBeatRecords:
    """Test cases for per-beat breakdown."""

    def test_record_offsets(self, empty_song):
        """Test records follow the header at fixed width."""
        analysis = analyze_encoded(encode_song(empty_song))
        assert analysis.beat_count == 16
        assert analysis.beats[0].offset == 13
        assert analysis.beats[1].offset == 13 + 35
        assert all(beat.is_empty for beat in analysis.beats)

    def test_note_fields(self):
        """Test a note's fields are described."""
        song = SongState.create_empty()
        song.high_piano.add_note(2, "F#", duration=3, velocity=1.0, octave=4)
        analysis = analyze_encoded(encode_song(song))

        record = analysis.beats[2]
        assert not record.is_empty
        fields = {f.name: f.meaning for f in record.tracks[0].fields}
        assert fields == {"pitch": "F#", "duration": "3 beats", "velocity": "1.00", "octave": "4"}
        assert analysis.non_empty_beats == 1

    def test_decoded_song(self, sample_song):
        """Test the analysis carries the decoded song."""
        analysis = analyze_encoded(encode_song(sample_song))
        assert analysis.song.note_count == sample_song.note_count


class TestPayloadStatus:
    """Test cases for size and truncation."""

    def test_complete(self, empty_song):
        """Test a complete payload."""
        analysis = analyze_encoded(encode_song(empty_song))
        assert analysis.expected_bits == 573
        assert analysis.available_bits == 576
        assert analysis.padding_bits == 3
        assert not analysis.is_truncated

    def test_truncated(self, empty_song):
        """Test fields past the end are flagged."""
        encoded = encode_song(empty_song)[: len("v5_") + 8]  # 6 bytes
        analysis = analyze_encoded(encoded)
        assert analysis.is_truncated
        assert analysis.available_bits == 48
        assert not analysis.header[-1].truncated
        assert analysis.beats[-1].tracks[0].fields[0].truncated
        assert analysis.padding_bits == 0


class TestErrors:
    """Test cases for analyzer errors."""

    def test_unknown_version(self):
        """Test unknown versions raise."""
        with pytest.raises(UnknownVersionError):
            SongAnalyzer("v9_AAAA").analyze()

    def test_malformed(self):
        """Test malformed payloads raise."""
        with pytest.raises(DecodeError):
            analyze_encoded("v5_!!!!")
