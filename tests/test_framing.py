"""Tests for version tags and base64url framing."""

import pytest
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from musicbox.formats.framing import (
    DecodeError,
    UnknownVersionError,
    from_base64url,
    join_version,
    split_version,
    to_base64url,
)


class TestBase64Url:
    """Test cases for URL-safe base64."""

    def test_url_safe_alphabet(self):
        """Test '+' and '/' are replaced and padding stripped."""
        # Standard base64 of FB FF is "+/8="
        assert to_base64url(bytes([0xFB, 0xFF])) == "-_8"

    def test_decode_restores_padding(self):
        """Test unpadded input decodes."""
        assert from_base64url("-_8") == bytes([0xFB, 0xFF])
        assert from_base64url("AA") == b"\x00"

    def test_no_unsafe_characters(self):
        """Test every byte value encodes without '+', '/' or '='."""
        text = to_base64url(bytes(range(256)))
        assert "+" not in text
        assert "/" not in text
        assert "=" not in text

    @pytest.mark.parametrize("length", [0, 1, 2, 3, 4, 5, 71, 72])
    def test_roundtrip_lengths(self, length):
        """Test payloads of every padding class decode back."""
        data = bytes((i * 37) & 0xFF for i in range(length))
        assert from_base64url(to_base64url(data)) == data

    def test_empty(self):
        """Test empty payload."""
        assert to_base64url(b"") == ""
        assert from_base64url("") == b""

    @pytest.mark.parametrize("text", ["@@@@", "AB!D", "A", "AAAA AAAA"])
    def test_malformed(self, text):
        """Test non-alphabet characters and impossible lengths are rejected."""
        with pytest.raises(DecodeError):
            from_base64url(text)

    def test_decode_error_is_value_error(self):
        """Test DecodeError can be caught as ValueError."""
        with pytest.raises(ValueError):
            from_base64url("%%")


class TestVersionTag:
    """Test cases for the v<N>_ prefix."""

    def test_tagged(self):
        """Test a tagged string splits into version and payload."""
        assert split_version("v5_AAAA") == (5, "AAAA", True)

    def test_multi_digit(self):
        """Test versions with more than one digit."""
        assert split_version("v12_x") == (12, "x", True)

    def test_untagged_is_v1(self):
        """Test strings without a tag are version 1."""
        assert split_version("AAAA") == (1, "AAAA", False)

    def test_payload_may_contain_underscore(self):
        """Test only the first tag is split off."""
        assert split_version("v3_ab_cd") == (3, "ab_cd", True)

    def test_tag_without_payload(self):
        """Test a bare tag is not a tagged string."""
        version, payload, tagged = split_version("v5_")
        assert not tagged
        assert version == 1
        assert payload == "v5_"

    def test_ascii_digits_only(self):
        """Test non-ASCII digits do not form a tag."""
        assert split_version("v٥_AAAA") == (1, "v٥_AAAA", False)

    @pytest.mark.skipif(
        not hasattr(sys, "get_int_max_str_digits"), reason="int() has no digit limit"
    )
    def test_unconvertible_version(self):
        """Test a tag too long for int() raises DecodeError."""
        with pytest.raises(DecodeError):
            split_version("v" + "1" * 5000 + "_AAAA")

    def test_join(self):
        """Test building a tagged string."""
        assert join_version(5, "AAAA") == "v5_AAAA"


class TestErrors:
    """Test cases for decode errors."""

    def test_unknown_version(self):
        """Test unknown version error carries the version."""
        error = UnknownVersionError(99)
        assert error.version == 99
        assert "99" in str(error)
        assert isinstance(error, DecodeError)
        assert isinstance(error, ValueError)
