"""
Song data model - the top-level container for Music Box Composer songs.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from musicbox.models.note import NoteEvent
from musicbox.models.track import Track, create_default_tracks
from musicbox.utils.tables import (
    BEAT_LENGTHS,
    DEFAULT_BEAT_COUNT,
    DEFAULT_BPM,
    DEFAULT_KEY,
    DEFAULT_SPEED_INDEX,
    HIGH_PIANO_TRACK,
    LOW_PIANO_TRACK,
    MODE_NAMES,
    PERCUSSION_TRACK,
    SPEEDS,
    TRACK_NUMBERS,
    get_allowed_pitches,
)
from musicbox.utils.validation import (
    ValidationError,
    validate_beat_count,
    validate_bpm,
    validate_duration,
    validate_key_name,
    validate_octave,
    validate_speed_index,
    validate_velocity,
)


class Mode(Enum):
    """
    Composer feature sets.

    Kid mode is the original simple composer; tween and studio unlock
    velocity, octave and tempo controls.
    """

    KID = "kid"
    TWEEN = "tween"
    STUDIO = "studio"

    @classmethod
    def from_index(cls, index: int) -> "Mode":
        """
        Get mode from its wire index.

        Args:
            index: Mode index (0-2); anything else falls back to kid

        Returns:
            Corresponding Mode
        """
        if 0 <= index < len(MODE_NAMES):
            return cls(MODE_NAMES[index])
        return cls.KID

    @property
    def index(self) -> int:
        """Wire index of the mode."""
        return MODE_NAMES.index(self.value)


@dataclass
class SongState:
    """
    Complete song state.

    This is what gets encoded into a share URL and what a decoded URL
    turns back into. It is rebuilt from the timeline on every encode and
    discarded once applied after a decode.

    Attributes:
        mode: Composer mode
        speed_index: Index into the speed table (0-3)
        loop: Whether playback loops
        beat_count: Song length in beats (16, 32, 48 or 64)
        key_name: Key signature name
        bpm: Studio mode tempo (40-200), only used when use_bpm is set
        use_bpm: Use bpm instead of the speed table in studio mode
        tracks: The three tracks keyed by number
    """

    mode: Mode = Mode.KID
    speed_index: int = DEFAULT_SPEED_INDEX
    loop: bool = False
    beat_count: int = DEFAULT_BEAT_COUNT
    key_name: str = DEFAULT_KEY
    bpm: int = DEFAULT_BPM
    use_bpm: bool = False
    tracks: Dict[int, Track] = field(default_factory=dict)

    def __post_init__(self):
        """Make sure all three tracks exist."""
        for number, track in create_default_tracks().items():
            self.tracks.setdefault(number, track)

    @property
    def high_piano(self) -> Track:
        """Track 1."""
        return self.tracks[HIGH_PIANO_TRACK]

    @property
    def low_piano(self) -> Track:
        """Track 2."""
        return self.tracks[LOW_PIANO_TRACK]

    @property
    def percussion(self) -> Track:
        """Track 3."""
        return self.tracks[PERCUSSION_TRACK]

    def get_track(self, number: int) -> Track:
        """Get a track by number (1-3)."""
        if number not in self.tracks:
            raise KeyError(f"No track {number}, songs have tracks {list(TRACK_NUMBERS)}")
        return self.tracks[number]

    @property
    def beat_duration_ms(self) -> float:
        """Length of one beat in milliseconds."""
        if self.mode is Mode.STUDIO and self.use_bpm:
            return 60000.0 / self.bpm
        index = min(max(self.speed_index, 0), len(SPEEDS) - 1)
        return float(SPEEDS[index][0])

    @property
    def note_count(self) -> int:
        """Total number of notes across all tracks."""
        return sum(len(track.notes) for track in self.tracks.values())

    @property
    def is_empty(self) -> bool:
        """Check if no track has notes."""
        return self.note_count == 0

    def notes_at_beat(self, beat: int) -> Dict[int, Optional[NoteEvent]]:
        """
        Get the note attacking at beat on every track.

        Returns:
            Track number -> note (or None)
        """
        return {number: track.note_at(beat) for number, track in sorted(self.tracks.items())}

    def out_of_key_notes(self) -> List[NoteEvent]:
        """Piano notes whose pitch is not playable in the song's key."""
        allowed = set(get_allowed_pitches(self.key_name))
        result = []
        for number in (HIGH_PIANO_TRACK, LOW_PIANO_TRACK):
            result.extend(n for n in self.tracks[number].iter_notes() if n.pitch not in allowed)
        return result

    def validate(self) -> List[str]:
        """
        Validate song data.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        checks = [
            (validate_speed_index, self.speed_index),
            (validate_beat_count, self.beat_count),
            (validate_key_name, self.key_name),
            (validate_bpm, self.bpm),
        ]
        for check, value in checks:
            try:
                check(value)
            except ValidationError as e:
                errors.append(str(e))

        for number, track in sorted(self.tracks.items()):
            if number not in TRACK_NUMBERS:
                errors.append(f"Unknown track number {number}")
                continue

            for note in track.iter_notes():
                errors.extend(
                    f"Track {number} beat {note.beat}: {message}"
                    for message in self._note_errors(track, note)
                )

            for earlier, later in track.find_overlaps():
                errors.append(
                    f"Track {number}: note at beat {earlier.beat} "
                    f"(duration {earlier.duration}) overlaps note at beat {later.beat}"
                )

        return errors

    def _note_errors(self, track: Track, note: NoteEvent) -> List[str]:
        """Collect range problems of a single note."""
        errors = []

        if not 0 <= note.beat < self.beat_count:
            errors.append(f"beat outside song length {self.beat_count}")

        if note.pitch not in track.symbols[1:]:
            errors.append(f"unknown {'sound' if track.is_percussion else 'pitch'} {note.pitch!r}")

        checks = [(validate_duration, note.duration), (validate_velocity, note.velocity)]
        if track.is_piano:
            if note.octave is None:
                errors.append("piano note has no octave")
            else:
                checks.append((validate_octave, note.octave))
        elif note.duration != 1:
            errors.append(f"percussion duration must be 1, got {note.duration}")

        for check, value in checks:
            try:
                check(value)
            except ValidationError as e:
                errors.append(str(e))

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a JSON-compatible dict.

        Tracks are stored as lists of [beat, pitch, duration, velocity, octave]
        rows keyed by the track number as a string.
        """
        return {
            "mode": self.mode.value,
            "speed": self.speed_index,
            "loop": self.loop,
            "beats": self.beat_count,
            "key": self.key_name,
            "bpm": self.bpm,
            "use_bpm": self.use_bpm,
            "tracks": {
                str(number): [note.to_row() for note in track.iter_notes()]
                for number, track in sorted(self.tracks.items())
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SongState":
        """
        Create a song from a dict produced by to_dict().

        Missing fields take their defaults. Piano notes without an octave
        get the track's default octave.

        Raises:
            ValueError: If a field has the wrong type or an unknown mode
        """
        if not isinstance(data, dict):
            raise ValueError(f"Song data must be an object, got {type(data).__name__}")

        song = cls(
            mode=Mode(data.get("mode", Mode.KID.value)),
            speed_index=int(data.get("speed", DEFAULT_SPEED_INDEX)),
            loop=bool(data.get("loop", False)),
            beat_count=int(data.get("beats", DEFAULT_BEAT_COUNT)),
            key_name=str(data.get("key", DEFAULT_KEY)),
            bpm=int(data.get("bpm", DEFAULT_BPM)),
            use_bpm=bool(data.get("use_bpm", False)),
        )

        for key, rows in (data.get("tracks") or {}).items():
            track = song.get_track(int(key))
            for row in rows:
                note = NoteEvent.from_row(row)
                if note.octave is None and track.is_piano:
                    note.octave = track.default_octave
                track.set_note(note)

        return song

    @classmethod
    def create_empty(
        cls,
        beat_count: int = DEFAULT_BEAT_COUNT,
        key_name: str = DEFAULT_KEY,
        mode: Mode = Mode.KID,
    ) -> "SongState":
        """
        Create an empty song.

        Args:
            beat_count: Song length in beats
            key_name: Key signature
            mode: Composer mode

        Returns:
            New SongState instance
        """
        return cls(mode=mode, beat_count=beat_count, key_name=key_name)

    def copy(self) -> "SongState":
        """Create a deep copy of this song."""
        import copy

        return copy.deepcopy(self)

    def __repr__(self) -> str:
        return (
            f"SongState(mode={self.mode.value!r}, beats={self.beat_count}, "
            f"key={self.key_name!r}, notes={self.note_count})"
        )


def snap_beat_count(beat_count: int) -> int:
    """
    Snap a length to the smallest preset that holds it.

    Lengths above the largest preset snap to the largest.
    """
    for length in BEAT_LENGTHS:
        if beat_count <= length:
            return length
    return BEAT_LENGTHS[-1]
