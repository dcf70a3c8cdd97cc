import json

import pytest

from respotcore.keymaster import Token, token_url


def test_token_url():
    assert token_url("abc", "streaming") == (
        "hm://keymaster/token/authenticated?client_id=abc&scope=streaming"
    )


def test_from_json():
    payload = json.dumps(
        {
            "accessToken": "token",
            "expiresIn": 3600,
            "tokenType": "Bearer",
            "scope": ["streaming", "user-read-playback-state"],
            "extra": 1,
        }
    ).encode()
    token = Token.from_json(payload)
    assert token.access_token == "token"
    assert token.expires_in == 3600
    assert token.token_type == "Bearer"
    assert token.scope == ["streaming", "user-read-playback-state"]


def test_from_json_missing_field():
    with pytest.raises(ValueError):
        Token.from_json(json.dumps({"accessToken": "token"}))


def test_from_json_bad_expiry():
    payload = json.dumps(
        {"accessToken": "token", "expiresIn": -1, "tokenType": "Bearer", "scope": []}
    )
    with pytest.raises(ValueError):
        Token.from_json(payload)