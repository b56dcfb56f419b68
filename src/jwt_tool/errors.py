"""
Exception hierarchy for JWT decoding, parsing and validation.

Structural problems (``ParsingError``) and trust decisions
(``ValidationError``) are kept apart so callers can tell a garbled token
from a forged or expired one.
"""

from __future__ import annotations

__all__ = [
    "JWTError",
    "DecodeError",
    "ParsingError",
    "UnsupportedAlgorithmError",
    "ValidationError",
]


class JWTError(Exception):
    """Base class for every error raised by this package."""


class DecodeError(JWTError):
    """Raised when a base64url or JSON primitive cannot be decoded."""


class ParsingError(JWTError):
    """Raised when a token string is structurally malformed."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Failed to parse JWT from string - {detail}.")


class UnsupportedAlgorithmError(ParsingError):
    """Raised for an algorithm name that is valid but cannot be computed here."""

    def __init__(self, algorithm: str) -> None:
        self.algorithm = algorithm
        super().__init__(
            f"the hashing algorithm '{algorithm}' is valid but is not "
            f"supported by this implementation"
        )


class ValidationError(JWTError):
    """Raised when a well-formed token fails a signature or claim check."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Failed to validate JWT - {detail}.")
