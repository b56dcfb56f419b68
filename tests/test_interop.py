"""Cross-checks against PyJWT as an independent implementation."""

from __future__ import annotations

import time

import jwt
import pytest

from jwt_tool import ParsingError, UnsupportedAlgorithmError, ValidationError, decode, encode

# Long enough for HS512 so PyJWT does not complain about key length.
SECRET = "k" * 64


def _claims() -> dict:
    now = int(time.time())
    return {"sub": "alice", "name": "Zoë", "iat": now - 5, "nbf": now - 5, "exp": now + 300}


@pytest.mark.parametrize("algorithm", ["HS256", "HS384", "HS512"])
def test_pyjwt_tokens_decode_and_validate(algorithm):
    claims = _claims()
    raw = jwt.encode(claims, SECRET, algorithm=algorithm)

    token = decode(raw, True, SECRET, {"validate_issued_at_claim": True})

    assert token.get_payload() == claims
    assert token.get_headers()["alg"] == algorithm


@pytest.mark.parametrize("algorithm", ["HS256", "HS384", "HS512"])
def test_our_tokens_verify_with_pyjwt(algorithm):
    claims = _claims()
    raw = encode(claims, SECRET, algorithm)

    assert jwt.decode(raw, SECRET, algorithms=[algorithm]) == claims
    assert jwt.get_unverified_header(raw) == {"typ": "JWT", "alg": algorithm}


def test_pyjwt_token_with_wrong_secret_is_rejected():
    raw = jwt.encode(_claims(), SECRET, algorithm="HS256")
    with pytest.raises(ValidationError, match="signature mismatch"):
        decode(raw, True, "x" * 64)


def test_pyjwt_expired_token_is_rejected():
    claims = {**_claims(), "exp": int(time.time()) - 60}
    raw = jwt.encode(claims, SECRET, algorithm="HS256")
    with pytest.raises(ValidationError, match="expired"):
        decode(raw, True, SECRET)


def test_none_algorithm_is_never_accepted():
    raw = jwt.encode(_claims(), None, algorithm="none")
    # PyJWT emits an empty signature segment for alg=none.
    with pytest.raises(ParsingError, match="invalid") as exc_info:
        decode(raw + "forged", True, SECRET)
    assert not isinstance(exc_info.value, UnsupportedAlgorithmError)
