"""
In-memory token representations.

Two variants share the same read-only view over a header and payload
mapping:

- ``Token``        a token being constructed; its signature is computed
                   from the secret on demand.
- ``DecodedToken`` a token parsed from the wire; its signature is kept
                   exactly as it was received.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .algorithms import DEFAULT_ALGORITHM, Algorithm, SUPPORTED_ALGORITHMS, is_valid_algorithm
from .codec import encode_base64url, json_stringify
from .errors import ParsingError, UnsupportedAlgorithmError, ValidationError
from .policy import ABSENT, ValidationPolicy
from .signer import compute_signature, resolve_algorithm
from .validator import validate_signature, validate_token

__all__ = ["Token", "DecodedToken", "encode"]

logger = logging.getLogger(__name__)


class _TokenView:
    """Accessors shared by every token variant.

    Subclasses set ``headers`` and ``payload`` and implement
    :meth:`get_signature`.
    """

    headers: dict[str, Any]
    payload: dict[str, Any]

    # ------------------------------------------------------------------
    # Headers / payload
    # ------------------------------------------------------------------

    def get_headers(self) -> dict[str, Any]:
        return self.headers

    def get_payload(self) -> dict[str, Any]:
        return self.payload

    def get_encoded_headers(self) -> str:
        return encode_base64url(json_stringify(self.headers).encode("utf-8"))

    def get_encoded_payload(self) -> str:
        return encode_base64url(json_stringify(self.payload).encode("utf-8"))

    def has_claim(self, name: str) -> bool:
        return name in self.payload

    def get_claim(self, name: str, default: Any = ABSENT) -> Any:
        """Return the payload claim *name*.

        A missing claim yields *default* (:data:`ABSENT` unless given); a
        claim present with a JSON ``null`` yields ``None``.
        """
        return self.payload.get(name, default)

    # ------------------------------------------------------------------
    # Algorithm
    # ------------------------------------------------------------------

    def get_hashing_algorithm_identifier(self) -> Algorithm:
        """Return the algorithm named by the ``alg`` header.

        Raises:
            ParsingError: If ``alg`` is missing or not a standard identifier.
            UnsupportedAlgorithmError: If ``alg`` is valid but not HMAC.
        """
        if "alg" not in self.headers:
            raise ParsingError("the 'alg' header was found to be undefined")

        alg = self.headers["alg"]
        if not is_valid_algorithm(alg):
            raise ParsingError(f"the 'alg' header was found to be invalid: {alg!r}")

        algorithm = Algorithm(alg)
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise UnsupportedAlgorithmError(algorithm.value)
        return algorithm

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def get_signature(self) -> str:
        raise NotImplementedError

    def to_string(self) -> str:
        return ".".join(
            [self.get_encoded_headers(), self.get_encoded_payload(), self.get_signature()]
        )

    def __str__(self) -> str:
        return self.to_string()


class Token(_TokenView):
    """A token under construction, signed with *secret* when serialised."""

    def __init__(
        self,
        payload: Mapping[str, Any],
        secret: str | bytes,
        algorithm: Algorithm | str = DEFAULT_ALGORITHM,
        headers: Mapping[str, Any] | None = None,
    ) -> None:
        self.algorithm = resolve_algorithm(algorithm)
        self.secret = secret
        self.payload = dict(payload)
        self.headers = (
            dict(headers) if headers is not None else self.get_default_headers(self.algorithm)
        )

    @staticmethod
    def get_default_headers(algorithm: Algorithm | str | None = None) -> dict[str, Any]:
        """Return the default header set, including ``alg`` when given."""
        headers: dict[str, Any] = {"typ": "JWT"}
        if algorithm is not None:
            headers["alg"] = str(algorithm)
        return headers

    def get_secret(self) -> str | bytes:
        return self.secret

    def set_payload_field(self, field: str, value: Any) -> None:
        self.payload[field] = value

    def get_signature(self) -> str:
        return compute_signature(
            self.algorithm,
            self.secret,
            self.get_encoded_headers(),
            self.get_encoded_payload(),
        )

    def __repr__(self) -> str:
        """Keep the secret out of repr output."""
        return (
            f"Token(algorithm={self.algorithm.value!r}, headers={self.headers!r}, "
            f"payload={self.payload!r}, secret='***')"
        )


class DecodedToken(_TokenView):
    """A token read from its wire form.

    The encoded header and payload segments are kept as received so the
    signature is always checked against the exact bytes that were signed.
    Edits made through the live mappings returned by :meth:`get_headers`
    and :meth:`get_payload` are not re-serialised: the encoded accessors
    and :meth:`to_string` keep returning the received segments.
    """

    def __init__(
        self,
        headers: dict[str, Any],
        payload: dict[str, Any],
        signature: str,
        encoded_headers: str | None = None,
        encoded_payload: str | None = None,
    ) -> None:
        self.headers = headers
        self.payload = payload
        self.signature = signature
        self._encoded_headers = encoded_headers
        self._encoded_payload = encoded_payload

    @classmethod
    def get_default_validation_policy(cls) -> ValidationPolicy:
        return ValidationPolicy()

    def get_encoded_headers(self) -> str:
        if self._encoded_headers is not None:
            return self._encoded_headers
        return super().get_encoded_headers()

    def get_encoded_payload(self) -> str:
        if self._encoded_payload is not None:
            return self._encoded_payload
        return super().get_encoded_payload()

    def get_signature(self) -> str:
        return self.signature

    def validate(
        self,
        secret: str | bytes | None,
        policy: ValidationPolicy | Mapping[str, Any] | None = None,
        now: float | None = None,
    ) -> None:
        """Check the signature and claims, raising on the first failure.

        Raises:
            ValidationError: If the signature or any enabled claim check fails.
            ParsingError: If the ``alg`` header cannot be used.
        """
        validate_token(self, secret, policy, now=now)

    def is_valid(
        self,
        secret: str | bytes | None,
        policy: ValidationPolicy | Mapping[str, Any] | None = None,
        now: float | None = None,
    ) -> bool:
        """Like :meth:`validate`, but return False on a validation failure."""
        try:
            self.validate(secret, policy, now=now)
        except ValidationError as exc:
            logger.debug("Token rejected: %s", exc.detail)
            return False
        return True

    def validate_secret(self, secret: str | bytes) -> bool:
        """Return True if the signature matches *secret*."""
        try:
            validate_signature(self, secret)
        except ValidationError:
            return False
        return True

    def __repr__(self) -> str:
        return f"DecodedToken(headers={self.headers!r}, payload={self.payload!r})"


def encode(
    payload: Mapping[str, Any],
    secret: str | bytes,
    algorithm: Algorithm | str = DEFAULT_ALGORITHM,
    headers: Mapping[str, Any] | None = None,
) -> str:
    """Build and sign a token, returning its compact string form."""
    return Token(payload, secret, algorithm, headers).to_string()
