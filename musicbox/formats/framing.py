"""
Version tag and base64url framing of encoded songs.

An encoded song looks like "v5_<payload>" where the payload is the packed
bitstream in URL-safe base64: "+" becomes "-", "/" becomes "_" and the
trailing "=" padding is dropped. Strings without a "v<N>_" tag are legacy
version 1 payloads.
"""

import base64
import re
from typing import Tuple

VERSION_PATTERN = re.compile(r"v([0-9]+)_(.+)")

# Version assumed for strings without a tag
UNTAGGED_VERSION = 1


class DecodeError(ValueError):
    """Raised when an encoded song cannot be decoded."""

    pass


class UnknownVersionError(DecodeError):
    """Raised when the version tag names a format that was never shipped."""

    def __init__(self, version: int):
        super().__init__(f"Unknown encoding version: {version}")
        self.version = version


def split_version(encoded: str) -> Tuple[int, str, bool]:
    """
    Split an encoded song into version and payload.

    Args:
        encoded: Encoded song string

    Returns:
        (version, payload, tagged) where tagged tells whether a
        "v<N>_" prefix was present

    Raises:
        DecodeError: If the version number cannot be converted
    """
    match = VERSION_PATTERN.fullmatch(encoded)
    if not match:
        return UNTAGGED_VERSION, encoded, False

    try:
        version = int(match.group(1))
    except ValueError as e:
        raise DecodeError(f"Invalid version tag: {e}") from e
    return version, match.group(2), True


def join_version(version: int, payload: str) -> str:
    """Prefix a payload with its version tag."""
    return f"v{version}_{payload}"


def to_base64url(data: bytes) -> str:
    """
    Encode bytes as unpadded URL-safe base64.

    Example:
        >>> to_base64url(bytes([0xFB, 0xFF]))
        '-_8'
    """
    text = base64.b64encode(data).decode("ascii")
    return text.replace("+", "-").replace("/", "_").rstrip("=")


def from_base64url(text: str) -> bytes:
    """
    Decode unpadded URL-safe base64.

    Raises:
        DecodeError: If the text is not valid base64
    """
    padded = text.replace("-", "+").replace("_", "/")
    while len(padded) % 4:
        padded += "="

    try:
        return base64.b64decode(padded, validate=True)
    except ValueError as e:
        raise DecodeError(f"Invalid base64 payload: {e}") from e
