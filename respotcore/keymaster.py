"""Access tokens handed out by the keymaster service."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


def token_url(client_id: str, scopes: str) -> str:
    """The request URI for a token with the given client id and scopes."""
    return f"hm://keymaster/token/authenticated?client_id={client_id}&scope={scopes}"


@dataclass(frozen=True)
class Token:
    access_token: str
    expires_in: int
    token_type: str
    scope: list[str]

    @classmethod
    def from_json(cls, data: str | bytes) -> "Token":
        """Parse the camelCase JSON payload of a token response."""
        obj: Any = json.loads(data)
        if not isinstance(obj, dict):
            raise ValueError("token must be a JSON object")
        try:
            access_token = obj["accessToken"]
            expires_in = obj["expiresIn"]
            token_type = obj["tokenType"]
            scope = obj["scope"]
        except KeyError as exc:
            raise ValueError(f"missing field {exc.args[0]}") from None
        if not isinstance(access_token, str) or not isinstance(token_type, str):
            raise ValueError("invalid token fields")
        if (
            not isinstance(expires_in, int)
            or isinstance(expires_in, bool)
            or not 0 <= expires_in < 1 << 32
        ):
            raise ValueError("invalid expiresIn")
        if not isinstance(scope, list) or not all(isinstance(s, str) for s in scope):
            raise ValueError("invalid scope")
        return cls(access_token, expires_in, token_type, list(scope))