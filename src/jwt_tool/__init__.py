"""HMAC JSON Web Token encoding, decoding and validation."""

from .algorithms import Algorithm, SUPPORTED_ALGORITHMS, VALID_ALGORITHMS
from .errors import (
    DecodeError,
    JWTError,
    ParsingError,
    UnsupportedAlgorithmError,
    ValidationError,
)
from .models import DecodedToken, Token, encode
from .parser import decode
from .policy import ABSENT, ValidationPolicy
from .signer import compute_signature, verify_signature
from .validator import validate_token

__version__ = "0.1.0"

__all__ = [
    "ABSENT",
    "Algorithm",
    "DecodeError",
    "DecodedToken",
    "JWTError",
    "ParsingError",
    "SUPPORTED_ALGORITHMS",
    "Token",
    "UnsupportedAlgorithmError",
    "VALID_ALGORITHMS",
    "ValidationError",
    "ValidationPolicy",
    "compute_signature",
    "decode",
    "encode",
    "validate_token",
    "verify_signature",
]
