from __future__ import annotations

import pytest

from jwt_tool import Token

SECRET = "hunter2"

# Fixed clock for timing checks.
NOW = 1_700_000_000


@pytest.fixture
def now() -> int:
    return NOW


@pytest.fixture
def live_claims() -> dict:
    """Claims that pass the default exp/nbf checks at NOW."""
    return {"sub": "alice", "nbf": NOW - 60, "exp": NOW + 3600}


@pytest.fixture
def make_token():
    def _make(payload: dict, secret: str = SECRET, algorithm: str = "HS256", headers=None) -> str:
        return Token(payload, secret, algorithm, headers).to_string()

    return _make
