"""
HMAC signature computation and verification.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Callable

from .algorithms import Algorithm, is_valid_algorithm
from .codec import encode_base64url
from .errors import ParsingError, UnsupportedAlgorithmError

__all__ = ["compute_signature", "verify_signature", "resolve_algorithm"]

logger = logging.getLogger(__name__)

# Digest constructor per supported algorithm.  Every other member of
# Algorithm is valid but unsupported.
_HMAC_DIGESTS: dict[Algorithm, Callable] = {
    Algorithm.HS256: hashlib.sha256,
    Algorithm.HS384: hashlib.sha384,
    Algorithm.HS512: hashlib.sha512,
}


def resolve_algorithm(algorithm: Algorithm | str) -> Algorithm:
    """Turn *algorithm* into an :class:`Algorithm` member.

    Raises:
        ParsingError: If the name is not one of the standard identifiers.
    """
    if isinstance(algorithm, Algorithm):
        return algorithm
    if not is_valid_algorithm(algorithm):
        raise ParsingError(f"invalid hashing algorithm: {algorithm!r}")
    return Algorithm(algorithm)


def _key_bytes(secret: str | bytes) -> bytes:
    if isinstance(secret, bytes):
        return secret
    if isinstance(secret, str):
        return secret.encode("utf-8")
    raise TypeError(f"secret must be str or bytes, got {type(secret).__name__}")


def compute_signature(
    algorithm: Algorithm | str,
    secret: str | bytes,
    encoded_header: str,
    encoded_payload: str,
) -> str:
    """Return the base64url signature over ``encoded_header.encoded_payload``.

    Raises:
        UnsupportedAlgorithmError: For the asymmetric identifiers.
        ParsingError: If *algorithm* is not a standard identifier.
    """
    alg = resolve_algorithm(algorithm)
    digest = _HMAC_DIGESTS.get(alg)
    if digest is None:
        raise UnsupportedAlgorithmError(alg.value)

    signing_input = f"{encoded_header}.{encoded_payload}".encode("utf-8")
    mac = hmac.new(_key_bytes(secret), signing_input, digest).digest()
    return encode_base64url(mac)


def verify_signature(
    algorithm: Algorithm | str,
    secret: str | bytes,
    encoded_header: str,
    encoded_payload: str,
    signature: str,
) -> bool:
    """Recompute the signature and compare it with *signature* in constant time."""
    expected = compute_signature(algorithm, secret, encoded_header, encoded_payload)
    # Lone surrogates (undecodable argv bytes) compare as a mismatch.
    matched = hmac.compare_digest(
        expected.encode("ascii"), signature.encode("utf-8", "surrogatepass")
    )
    logger.debug("Signature check (%s): %s", algorithm, "match" if matched else "mismatch")
    return matched
