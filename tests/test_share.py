"""Tests for share URL helpers."""

import pytest
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from musicbox.share import build_share_url, extract_encoded, song_from_url, song_to_url


class TestBuildShareUrl:
    """Test cases for building URLs."""

    def test_plain_page(self):
        """Test adding the song to a page URL."""
        url = build_share_url("v5_AbC-_9", "https://example.com/music-box/")
        assert url == "https://example.com/music-box/?c=v5_AbC-_9"

    def test_replaces_existing_song(self):
        """Test an existing song parameter is replaced and others kept."""
        url = build_share_url("v5_new", "https://example.com/?lang=en&c=v5_old")
        assert url == "https://example.com/?lang=en&c=v5_new"

    def test_bare_query(self):
        """Test without a base URL."""
        assert build_share_url("v5_AAAA") == "?c=v5_AAAA"

    def test_keeps_fragment(self):
        """Test fragments stay at the end."""
        url = build_share_url("v5_AAAA", "https://example.com/page#top")
        assert url == "https://example.com/page?c=v5_AAAA#top"


class TestExtractEncoded:
    """Test cases for getting the song out of text."""

    @pytest.mark.parametrize(
        "text",
        [
            "https://example.com/music-box/?c=v5_AAAA",
            "https://example.com/?lang=en&c=v5_AAAA#x",
            "?c=v5_AAAA",
            "/music-box/?c=v5_AAAA",
            "c=v5_AAAA",
            "lang=en&c=v5_AAAA",
            "v5_AAAA",
            "  v5_AAAA\n",
        ],
    )
    def test_forms(self, text):
        """Test URLs, query strings and bare strings."""
        assert extract_encoded(text) == "v5_AAAA"

    def test_url_without_song(self):
        """Test URLs without the song parameter."""
        assert extract_encoded("https://example.com/?lang=en") is None
        assert extract_encoded("?c=") is None

    def test_empty(self):
        """Test empty text."""
        assert extract_encoded("") is None


class TestSongUrls:
    """Test cases for song <-> URL."""

    def test_roundtrip(self, sample_song):
        """Test a song survives a share URL."""
        url = song_to_url(sample_song, "https://example.com/music-box/")
        assert url.startswith("https://example.com/music-box/?c=v5_")

        song = song_from_url(url)
        assert song.to_dict()["tracks"]["3"] == sample_song.to_dict()["tracks"]["3"]
        assert song.key_name == sample_song.key_name

    def test_bad_url(self):
        """Test URLs without a decodable song."""
        assert song_from_url("https://example.com/") is None
        assert song_from_url("https://example.com/?c=v99_AAAA") is None
