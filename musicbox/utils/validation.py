"""
Data validation utilities for song data.
"""

from musicbox.utils.tables import (
    BEAT_LENGTHS,
    KEY_SIGNATURES,
    MAX_BPM,
    MAX_DURATION,
    MAX_OCTAVE,
    MIN_BPM,
    MIN_DURATION,
    MIN_OCTAVE,
    SPEEDS,
)


class ValidationError(Exception):
    """Raised when song data validation fails."""

    pass


def validate_speed_index(index: int) -> None:
    """
    Validate an index into the speed table.

    Raises:
        ValidationError: If index is out of range
    """
    if not 0 <= index < len(SPEEDS):
        raise ValidationError(f"Speed index must be 0-{len(SPEEDS) - 1}, got {index}")


def validate_bpm(bpm: int) -> None:
    """
    Validate studio mode tempo.

    Raises:
        ValidationError: If tempo is out of range
    """
    if not MIN_BPM <= bpm <= MAX_BPM:
        raise ValidationError(f"Tempo must be {MIN_BPM}-{MAX_BPM} BPM, got {bpm}")


def validate_beat_count(beat_count: int) -> None:
    """
    Validate song length.

    Raises:
        ValidationError: If length is not one of the presets
    """
    if beat_count not in BEAT_LENGTHS:
        raise ValidationError(
            f"Beat count must be one of {list(BEAT_LENGTHS)}, got {beat_count}"
        )


def validate_key_name(key_name: str) -> None:
    """
    Validate key signature name.

    Raises:
        ValidationError: If the key is unknown
    """
    if key_name not in KEY_SIGNATURES:
        raise ValidationError(f"Unknown key signature: {key_name!r}")


def validate_duration(duration: int) -> None:
    """
    Validate note duration in beats.

    Raises:
        ValidationError: If duration is out of range
    """
    if not MIN_DURATION <= duration <= MAX_DURATION:
        raise ValidationError(
            f"Duration must be {MIN_DURATION}-{MAX_DURATION} beats, got {duration}"
        )


def validate_velocity(velocity: float) -> None:
    """
    Validate note velocity.

    Raises:
        ValidationError: If velocity is outside 0.0-1.0
    """
    if not 0.0 <= velocity <= 1.0:
        raise ValidationError(f"Velocity must be 0.0-1.0, got {velocity}")


def validate_octave(octave: int) -> None:
    """
    Validate piano octave.

    Raises:
        ValidationError: If octave is out of range
    """
    if not MIN_OCTAVE <= octave <= MAX_OCTAVE:
        raise ValidationError(f"Octave must be {MIN_OCTAVE}-{MAX_OCTAVE}, got {octave}")
