from __future__ import annotations

import pytest

from jwt_tool import DecodedToken, ParsingError, UnsupportedAlgorithmError, ValidationError, decode
from jwt_tool.codec import encode_base64url

from conftest import NOW, SECRET

SAMPLE = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9"
    ".eyJzdWIiOiJob25rcyIsIm5hbWUiOiJIb25rcyBNY0dlZSIsImlhdCI6MTY2NzkyNDA5Mn0"
    ".s52T6YUh_COF3eDyz_M_TGbvpJ_8vYknVuNN7UXv0-E"
)

HEADER = "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9"


def test_basic_decoding_without_validation():
    token = decode(SAMPLE, False)

    assert isinstance(token, DecodedToken)
    assert token.get_headers() == {"alg": "HS256", "typ": "JWT"}
    payload = token.get_payload()
    assert payload["sub"] == "honks"
    assert payload["name"] == "Honks McGee"
    assert payload["iat"] == 1667924092
    assert token.get_signature() == "s52T6YUh_COF3eDyz_M_TGbvpJ_8vYknVuNN7UXv0-E"


def test_surrounding_whitespace_is_trimmed():
    token = decode(f"  \n{SAMPLE}\t ", validate_before_return=False)
    assert token.to_string() == SAMPLE


def test_decoded_token_keeps_received_segments():
    # Header with spaces and reversed key order; re-encoding would differ.
    header = encode_base64url(b'{ "typ": "JWT", "alg": "HS256" }')
    raw = f"{header}.{encode_base64url(b'{}')}.sig"
    token = decode(raw, False)
    assert token.get_encoded_headers() == header
    assert token.to_string() == raw


@pytest.mark.parametrize(
    "raw, message",
    [
        ("", "failed to find first dot separator"),
        ("abcdef", "failed to find first dot separator"),
        ("abc.def", "failed to find second dot separator"),
        (".abc.def", "headers portion of the JWT was found to be zero-length/empty"),
        ("abc..def", "payload portion of the JWT was found to be zero-length/empty"),
        ("abc..", "payload portion of the JWT was found to be zero-length/empty"),
        ("abc.def.", "signature portion of the JWT was found to be zero-length/empty"),
        ("..", "headers portion"),
    ],
)
def test_structural_errors(raw, message):
    with pytest.raises(ParsingError) as exc_info:
        decode(raw, False)
    assert message in str(exc_info.value)
    assert str(exc_info.value).startswith("Failed to parse JWT from string - ")


def test_empty_segment_is_reported_before_decoding():
    # The header is garbage, but the empty payload is what gets reported.
    with pytest.raises(ParsingError, match="payload portion"):
        decode("!!!..sig", False)


@pytest.mark.parametrize(
    "header, payload, label",
    [
        ("!!!", HEADER, "headers"),
        (encode_base64url(b"not json"), HEADER, "headers"),
        (encode_base64url(b"[1,2,3]"), HEADER, "headers"),
        (HEADER, "e30*", "payload"),
        (HEADER, encode_base64url(b'"just a string"'), "payload"),
        (HEADER, encode_base64url(b"\xff\xfe"), "payload"),
    ],
)
def test_undecodable_segments(header, payload, label):
    with pytest.raises(ParsingError) as exc_info:
        decode(f"{header}.{payload}.sig", False)
    message = str(exc_info.value)
    assert f"failed to decode and/or parse the {label} portion of the JWT" in message
    # The decoder's own message is not passed through.
    assert exc_info.value.__cause__ is None
    assert "Expecting" not in message


def test_extra_segments_are_folded_into_the_signature(make_token, live_claims):
    good = make_token(live_claims)
    token = decode(good + ".extra", False)
    assert token.get_signature().endswith(".extra")

    with pytest.raises(ValidationError, match="signature mismatch"):
        decode(good + ".extra", True, SECRET, now=NOW)


def test_decode_validates_by_default(make_token, live_claims):
    raw = make_token(live_claims)
    token = decode(raw, secret=SECRET, now=NOW)
    assert token.get_payload() == live_claims


def test_decode_requires_secret_when_validating(make_token, live_claims):
    with pytest.raises(ValidationError, match="no secret"):
        decode(make_token(live_claims), now=NOW)


def test_decode_with_partial_policy(make_token):
    raw = make_token({"sub": "alice"})
    token = decode(
        raw,
        True,
        SECRET,
        {"validate_expiration_time_claim": False, "validate_not_before_claim": False},
    )
    assert token.get_claim("sub") == "alice"


def test_decode_surfaces_alg_problems_as_parsing_errors(make_token, live_claims):
    header = encode_base64url(b'{"alg":"RS256","typ":"JWT"}')
    _, payload, signature = make_token(live_claims).split(".")
    raw = f"{header}.{payload}.{signature}"

    # Parsing alone succeeds; the algorithm is only discerned when validating.
    decode(raw, False)
    with pytest.raises(UnsupportedAlgorithmError):
        decode(raw, True, SECRET, now=NOW)


def test_non_string_input():
    with pytest.raises(ParsingError):
        decode(None, False)
