"""
Display formatting utilities for CLI output.

Provides bar graphics, note labels and other formatting helpers.
"""

from musicbox.models.track import Track


def value_bar(
    value: float,
    max_value: float = 1.0,
    width: int = 10,
    filled_char: str = "█",
    empty_char: str = "░",
    show_value: bool = True,
    show_percent: bool = True,
) -> str:
    """
    Create a text-based bar graphic with value and percentage.

    Args:
        value: Current value
        max_value: Maximum value (default 1.0 for velocity)
        width: Bar width in characters
        filled_char: Character for filled portion
        empty_char: Character for empty portion
        show_value: Show numeric value
        show_percent: Show percentage

    Returns:
        Formatted string like "0.80 [████████░░]  80%"
    """
    if max_value <= 0:
        max_value = 1

    clamped = max(0, min(value, max_value))

    fill_count = int(round((clamped / max_value) * width))
    empty_count = width - fill_count

    bar = filled_char * fill_count + empty_char * empty_count
    percent = int(round((clamped / max_value) * 100))

    parts = []
    if show_value:
        parts.append(f"{value:.2f}")
    parts.append(f"[{bar}]")
    if show_percent:
        parts.append(f"{percent:3d}%")

    return " ".join(parts)


def density_bar(
    used: int,
    total: int,
    width: int = 20,
    filled_char: str = "█",
    empty_char: str = "░",
) -> str:
    """
    Create a density/usage bar with percentage.

    Returns:
        Formatted string like "[████████░░░░░░░░░░░░]  42.0% (128/304)"
    """
    if total <= 0:
        return f"[{empty_char * width}]  0% (0/0)"

    percent = (used / total) * 100
    fill_count = int((used / total) * width)
    empty_count = width - fill_count

    bar = filled_char * fill_count + empty_char * empty_count

    return f"[{bar}] {percent:5.1f}% ({used}/{total})"


def note_cell(track: Track, beat: int) -> str:
    """
    Format one timeline cell.

    Returns:
        "C5" / "kick" for an attack, "~" for a sustained beat, "·" when silent
    """
    note = track.note_at(beat)
    if note is not None:
        return f"[bold]{note.label}[/bold]"
    if track.is_sustained(beat):
        return "[dim]~[/dim]"
    return "[dim]·[/dim]"


def format_bits(bits: str, truncated: bool = False) -> str:
    """
    Format a field's binary string, dimming fields read past the payload end.

    Returns:
        "0101" or "[dim]0000[/dim]"
    """
    if truncated:
        return f"[dim]{bits}[/dim]"
    return bits
