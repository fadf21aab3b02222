"""
Song analysis module.

Provides bit-level breakdown of encoded song strings.
"""

from musicbox.analysis.song_analyzer import SongAnalyzer, SongAnalysis, analyze_encoded

__all__ = [
    "SongAnalyzer",
    "SongAnalysis",
    "analyze_encoded",
]
