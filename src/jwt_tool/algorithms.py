"""
Hashing algorithm identifiers recognised in the ``alg`` header.
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    "Algorithm",
    "VALID_ALGORITHMS",
    "SUPPORTED_ALGORITHMS",
    "DEFAULT_ALGORITHM",
    "is_valid_algorithm",
    "is_supported_algorithm",
]


class Algorithm(str, Enum):
    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    PS256 = "PS256"
    PS384 = "PS384"
    PS512 = "PS512"
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"
    ES256 = "ES256"
    ES256K = "ES256K"
    ES384 = "ES384"
    ES512 = "ES512"
    EdDSA = "EdDSA"

    def __str__(self) -> str:
        return self.value


# Every identifier defined for JWS, whether or not we can compute it.
VALID_ALGORITHMS = frozenset(Algorithm)
_VALID_NAMES = frozenset(a.value for a in Algorithm)

# Symmetric HMAC variants only.
SUPPORTED_ALGORITHMS = frozenset({Algorithm.HS256, Algorithm.HS384, Algorithm.HS512})

DEFAULT_ALGORITHM = Algorithm.HS256


def is_valid_algorithm(name: object) -> bool:
    """Return True if *name* is one of the 14 standard identifiers."""
    return isinstance(name, str) and name in _VALID_NAMES


def is_supported_algorithm(name: object) -> bool:
    """Return True if *name* is an identifier this package can sign with."""
    return is_valid_algorithm(name) and Algorithm(name) in SUPPORTED_ALGORITHMS
