"""
Signature and claim validation for decoded tokens.

Checks run in a fixed order and stop at the first failure:

    signature -> iss -> sub -> aud -> exp -> nbf -> iat

The token is never modified.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Iterable, Mapping

from .errors import ValidationError
from .policy import ABSENT, ValidationPolicy, build_policy
from .signer import verify_signature

__all__ = ["validate_token", "validate_signature", "validate_claims"]

logger = logging.getLogger(__name__)

# (claim, policy attribute, label used in messages)
_ALLOW_LIST_CHECKS = (
    ("iss", "allowable_issuers", "issuer"),
    ("sub", "allowable_subjects", "subject"),
    ("aud", "allowable_audiences", "audience"),
)


def _same_json_value(a: Any, b: Any) -> bool:
    # JSON booleans are not numbers: True must not match 1.
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a is b
    if a is None or b is None:
        return a is b
    return a == b and (
        type(a) is type(b) or (isinstance(a, (int, float)) and isinstance(b, (int, float)))
    )


def _is_allowed(value: Any, allowed: Iterable[Any]) -> bool:
    for candidate in allowed:
        if candidate is ABSENT or value is ABSENT:
            if candidate is value:
                return True
            continue
        if _same_json_value(value, candidate):
            return True
    return False


def _describe(value: Any) -> str:
    return "undefined" if value is ABSENT else repr(value)


def _numeric_claim(payload: Mapping[str, Any], claim: str) -> float:
    if claim not in payload:
        raise ValidationError(f"the '{claim}' claim was found to be undefined")
    value = payload[claim]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"the '{claim}' claim was found to be non-numeric")
    return value


def validate_signature(token: Any, secret: str | bytes | None) -> None:
    """Recompute the token's signature with *secret* and compare.

    Raises:
        ValidationError: If no secret is given or the signatures differ.
        ParsingError: If the ``alg`` header is missing, invalid or unsupported.
    """
    if secret is None:
        raise ValidationError("no secret was provided to verify the signature")

    algorithm = token.get_hashing_algorithm_identifier()
    matched = verify_signature(
        algorithm,
        secret,
        token.get_encoded_headers(),
        token.get_encoded_payload(),
        token.get_signature(),
    )
    if not matched:
        raise ValidationError("signature mismatch")


def validate_claims(
    payload: Mapping[str, Any],
    policy: ValidationPolicy,
    now: float | None = None,
) -> None:
    """Run the allow-list and timing checks enabled in *policy*."""
    for claim, attr, label in _ALLOW_LIST_CHECKS:
        allowed = getattr(policy, attr)
        if allowed is None:
            continue
        value = payload.get(claim, ABSENT)
        if not _is_allowed(value, allowed):
            logger.debug("Disallowed %s claim", claim)
            raise ValidationError(f"disallowed {label}: {_describe(value)}")

    if not (
        policy.validate_expiration_time_claim
        or policy.validate_not_before_claim
        or policy.validate_issued_at_claim
    ):
        return

    current_time = time.time() if now is None else now
    tolerance = policy.timing_tolerance

    if policy.validate_expiration_time_claim:
        exp = _numeric_claim(payload, "exp")
        if exp < current_time + tolerance:
            raise ValidationError("the 'exp' claim indicates that this JWT is expired")

    if policy.validate_not_before_claim:
        nbf = _numeric_claim(payload, "nbf")
        if current_time - tolerance < nbf:
            raise ValidationError(
                "the 'nbf' claim indicates that this JWT is not yet valid"
            )

    if policy.validate_issued_at_claim:
        iat = _numeric_claim(payload, "iat")
        if current_time - tolerance < iat:
            raise ValidationError(
                "the 'iat' claim indicates that this JWT has not been issued yet"
            )


def validate_token(
    token: Any,
    secret: str | bytes | None,
    policy: ValidationPolicy | Mapping[str, Any] | None = None,
    now: float | None = None,
) -> None:
    """Validate *token* against *secret* and *policy*.

    *policy* may be a full :class:`ValidationPolicy` or a mapping of
    overrides applied on top of the defaults.  *now* defaults to the
    current Unix time.
    """
    policy = build_policy(policy)

    if policy.verify_signature:
        validate_signature(token, secret)
    else:
        logger.debug("Signature verification disabled by policy")

    validate_claims(token.get_payload(), policy, now=now)
