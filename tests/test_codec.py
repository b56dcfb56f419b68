from __future__ import annotations

import pytest

from jwt_tool.codec import (
    decode_base64url,
    decode_segment,
    encode_base64url,
    json_parse,
    json_stringify,
)
from jwt_tool.errors import DecodeError


def test_encode_base64url_has_no_padding():
    assert encode_base64url(b"a") == "YQ"
    assert encode_base64url(b"ab") == "YWI"
    assert encode_base64url(b"abc") == "YWJj"


def test_encode_base64url_uses_url_safe_alphabet():
    assert encode_base64url(b"\xfb\xff") == "-_8"


def test_decode_base64url_accepts_missing_and_present_padding():
    assert decode_base64url("YWI") == b"ab"
    assert decode_base64url("YWI=") == b"ab"
    assert decode_base64url("-_8") == b"\xfb\xff"


@pytest.mark.parametrize("text", ["YW*j", "+/8", "YW I", "Y", "YQ=a", "YWJj\n"])
def test_decode_base64url_rejects_malformed_input(text):
    with pytest.raises(DecodeError):
        decode_base64url(text)


def test_json_stringify_is_compact_and_keeps_insertion_order():
    assert json_stringify({"user": "johns", "admin": False}) == '{"user":"johns","admin":false}'
    assert json_stringify({"b": 1, "a": [1, None]}) == '{"b":1,"a":[1,null]}'


def test_json_stringify_writes_non_ascii_verbatim():
    assert json_stringify({"name": "Zoë"}) == '{"name":"Zoë"}'


def test_json_parse_returns_object():
    assert json_parse('{"a": {"b": [1, 2.5, true, null]}}') == {"a": {"b": [1, 2.5, True, None]}}


@pytest.mark.parametrize("text", ["{", "[1, 2]", '"str"', "42", "null", '{"a": NaN}', '{"a": Infinity}'])
def test_json_parse_rejects_invalid_or_non_object(text):
    with pytest.raises(DecodeError):
        json_parse(text)


def test_json_parse_rejects_deep_nesting():
    with pytest.raises(DecodeError):
        json_parse('{"a":' + "[" * 100_000 + "]" * 100_000 + "}")


def test_decode_segment():
    assert decode_segment("eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9") == {"alg": "HS256", "typ": "JWT"}


def test_decode_segment_rejects_invalid_utf8():
    with pytest.raises(DecodeError):
        decode_segment(encode_base64url(b'{"a":"\xff"}'))
