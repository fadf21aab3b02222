"""
CLI display modules.
"""

from cli.display.tables import (
    display_song,
    display_analysis_summary,
    display_header_fields,
    display_beat_fields,
)
from cli.display.hex_view import display_hex_dump

__all__ = [
    "display_song",
    "display_analysis_summary",
    "display_header_fields",
    "display_beat_fields",
    "display_hex_dump",
]
