#!/usr/bin/env python3
"""
Example: Basic song analysis

Shows how to build a song, share it and inspect the encoded string.
"""

import sys

sys.path.insert(0, "..")

from musicbox import SongState, decode_song, encode_song
from musicbox.analysis import analyze_encoded
from musicbox.models.song import Mode
from musicbox.share import build_share_url


def main():
    # Build a short song
    song = SongState.create_empty(beat_count=16, key_name="A Minor", mode=Mode.TWEEN)
    for beat, pitch in enumerate(["A", "C", "E", "A"]):
        song.high_piano.add_note(beat * 4, pitch, duration=2, velocity=0.6 + beat * 0.1)
    song.low_piano.add_note(0, "A", duration=8, octave=2)
    for beat in range(0, 16, 2):
        song.percussion.add_note(beat, "kick" if beat % 4 == 0 else "hihat")

    # Encode and share
    encoded = encode_song(song)
    print(f"Encoded ({len(encoded)} chars): {encoded}")
    print(f"Share URL: {build_share_url(encoded, 'https://example.com/music-box/')}")
    print()

    # Decode it back
    restored = decode_song(encoded)
    print(f"Mode: {restored.mode.value}")
    print(f"Key: {restored.key_name}")
    print(f"Length: {restored.beat_count} beats")
    print(f"Beat length: {restored.beat_duration_ms:.0f} ms")
    print()

    print("Notes:")
    for number, track in sorted(restored.tracks.items()):
        for note in track.iter_notes():
            print(
                f"  Track {number} beat {note.beat:2d}: {note.label:<6} "
                f"dur={note.duration} vel={note.velocity:.2f}"
            )
    print()

    # Bit layout
    analysis = analyze_encoded(encoded)
    print(f"Payload: {len(analysis.payload)} bytes, {analysis.padding_bits} padding bits")
    print("Header fields:")
    for field in analysis.header:
        print(f"  {field.name:<7} @{field.offset:<3} {field.bits_str:>4}  {field.meaning}")


if __name__ == "__main__":
    main()
