"""
Parsing of compact-serialised tokens.

Splits ``header.payload.signature``, decodes the first two segments and
optionally validates the result before handing it back.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .codec import decode_segment
from .errors import DecodeError, ParsingError
from .models import DecodedToken
from .policy import ValidationPolicy

__all__ = ["decode"]

logger = logging.getLogger(__name__)


def _decode_part(segment: str, label: str) -> dict[str, Any]:
    try:
        return decode_segment(segment)
    except DecodeError:
        # The codec's message is not passed on to the caller.
        raise ParsingError(
            f"failed to decode and/or parse the {label} portion of the JWT"
        ) from None


def decode(
    token: str,
    validate_before_return: bool = True,
    secret: str | bytes | None = None,
    policy: ValidationPolicy | Mapping[str, Any] | None = None,
    now: float | None = None,
) -> DecodedToken:
    """
    Decode a JWT token string into a :class:`DecodedToken`.

    Anything after the second dot is treated as the signature, so a token
    with extra dots parses and then fails signature verification.

    Raises:
        ParsingError: If the token is malformed or cannot be decoded.
        ValidationError: If *validate_before_return* is set and the token
            fails a signature or claim check.
    """
    if not isinstance(token, str):
        raise ParsingError(f"expected a string token, got {type(token).__name__}")

    token = token.strip()

    first = token.find(".")
    if first == -1:
        raise ParsingError("failed to find first dot separator")

    second = token.find(".", first + 1)
    if second == -1:
        raise ParsingError("failed to find second dot separator")

    encoded_headers = token[:first]
    if not encoded_headers:
        raise ParsingError(
            "the headers portion of the JWT was found to be zero-length/empty"
        )

    encoded_payload = token[first + 1:second]
    if not encoded_payload:
        raise ParsingError(
            "the payload portion of the JWT was found to be zero-length/empty"
        )

    signature = token[second + 1:]
    if not signature:
        raise ParsingError(
            "the signature portion of the JWT was found to be zero-length/empty"
        )

    logger.debug(
        "Split token: header=%d chars, payload=%d chars, signature=%d chars",
        len(encoded_headers),
        len(encoded_payload),
        len(signature),
    )

    headers = _decode_part(encoded_headers, "headers")
    payload = _decode_part(encoded_payload, "payload")

    result = DecodedToken(
        headers,
        payload,
        signature,
        encoded_headers=encoded_headers,
        encoded_payload=encoded_payload,
    )

    if validate_before_return:
        result.validate(secret, policy, now=now)

    return result
