"""
Share URL helpers.

The composer page keeps the encoded song in the "c" query parameter:

    https://example.com/music-box/?c=v5_AAAA
"""

from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from musicbox.formats.reader import SongReader
from musicbox.formats.writer import SongWriter
from musicbox.models.song import SongState
from musicbox.utils.tables import QUERY_KEY


def build_share_url(encoded: str, base_url: str = "") -> str:
    """
    Put an encoded song into a URL's query string.

    Other query parameters of base_url are kept; an existing song
    parameter is replaced.

    Args:
        encoded: Encoded song string
        base_url: Page URL (may be empty or a bare path)

    Returns:
        URL with ?c=<encoded>
    """
    parts = urlsplit(base_url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != QUERY_KEY]
    query.append((QUERY_KEY, encoded))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def extract_encoded(text: str) -> Optional[str]:
    """
    Get the encoded song out of a URL, a query string or a bare string.

    Args:
        text: Full share URL, "?c=..."/"c=..." query string, or encoded song

    Returns:
        Encoded song string, or None if a URL/query carries no song
    """
    text = text.strip()

    if "://" in text or text.startswith(("?", "/")):
        query = urlsplit(text).query
    elif text.startswith(f"{QUERY_KEY}=") or "&" in text:
        query = text
    else:
        return text or None

    for key, value in parse_qsl(query, keep_blank_values=True):
        if key == QUERY_KEY:
            return value or None
    return None


def song_to_url(song: SongState, base_url: str = "") -> str:
    """Encode a song and build its share URL."""
    return build_share_url(SongWriter.write(song), base_url)


def song_from_url(url: str) -> Optional[SongState]:
    """
    Load a song from a share URL.

    Returns:
        Decoded song, or None when the URL has no song or it cannot be decoded
    """
    encoded = extract_encoded(url)
    if encoded is None:
        return None
    return SongReader.read(encoded)
