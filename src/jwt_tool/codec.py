"""
Base64url and JSON primitives used to build and read token segments.
"""

from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any, Mapping

from .errors import DecodeError

__all__ = [
    "encode_base64url",
    "decode_base64url",
    "json_stringify",
    "json_parse",
    "decode_segment",
]

# URL-safe alphabet, optionally followed by up to two padding characters.
_BASE64URL_RE = re.compile(r"[A-Za-z0-9_-]*={0,2}")


def _add_base64_padding(data: str) -> str:
    """Add padding characters for base64url decoding."""
    padding = len(data) % 4
    if padding:
        data += "=" * (4 - padding)
    return data


def encode_base64url(data: bytes) -> str:
    """Encode *data* as base64url without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def decode_base64url(text: str) -> bytes:
    """Decode a base64url string.

    Only the URL-safe alphabet is accepted.  Characters from the standard
    alphabet (``+`` and ``/``), whitespace and anything else are rejected
    instead of being silently discarded.

    Raises:
        DecodeError: If *text* is not valid base64url.
    """
    if not isinstance(text, str) or not _BASE64URL_RE.fullmatch(text):
        raise DecodeError("invalid base64url alphabet")

    stripped = text.rstrip("=")
    if len(stripped) % 4 == 1:
        raise DecodeError("invalid base64url length")

    try:
        return base64.urlsafe_b64decode(_add_base64_padding(stripped))
    except (binascii.Error, ValueError) as exc:
        raise DecodeError("invalid base64url data") from exc


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def json_stringify(mapping: Mapping[str, Any]) -> str:
    """Serialise *mapping* to compact JSON, keeping key insertion order."""
    return json.dumps(
        mapping,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def json_parse(text: str) -> dict[str, Any]:
    """Parse *text* as a JSON object.

    Raises:
        DecodeError: If the text is not valid JSON or is not an object.
    """
    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        raise DecodeError("invalid JSON text") from exc

    if not isinstance(value, dict):
        raise DecodeError(f"expected a JSON object, got {type(value).__name__}")
    return value


def decode_segment(segment: str) -> dict[str, Any]:
    """Decode a single base64url-encoded JWT segment into a dict."""
    raw = decode_base64url(segment)
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError("segment is not valid UTF-8") from exc
    return json_parse(text)
