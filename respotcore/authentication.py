"""Login credentials and authentication errors."""

from __future__ import annotations

import base64
import binascii
import hashlib
import io
import json
import struct
from dataclasses import dataclass
from typing import Any, Callable

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

AUTHENTICATION_USER_PASS = 0

_BLOCK_SIZE = 16
_PBKDF2_ROUNDS = 0x100


class AuthenticationError(Exception):
    """Raised when logging in to an access point fails."""


class BadCredentials(AuthenticationError):
    def __init__(self) -> None:
        super().__init__("Authentication failed with error: Bad credentials")


class PremiumAccountRequired(AuthenticationError):
    def __init__(self) -> None:
        super().__init__("Authentication failed with error: Premium account required")


def login_failed_error(error_code: str) -> AuthenticationError:
    """Build the error for a login failure reported under ``error_code``."""
    if error_code == "BadCredentials":
        return BadCredentials()
    if error_code == "PremiumAccountRequired":
        return PremiumAccountRequired()
    return AuthenticationError(f"Authentication failed with error: {error_code}")


class _BlobReader:
    """Reads the length-prefixed fields of a decrypted credentials blob."""

    def __init__(self, data: bytes) -> None:
        self._stream = io.BytesIO(data)

    def u8(self) -> int:
        byte = self._stream.read(1)
        if not byte:
            raise ValueError("truncated credentials blob")
        return byte[0]

    def varint(self) -> int:
        lo = self.u8()
        if lo & 0x80 == 0:
            return lo
        hi = self.u8()
        return lo & 0x7F | hi << 7

    def chunk(self) -> bytes:
        length = self.varint()
        data = self._stream.read(length)
        if len(data) != length:
            raise ValueError("truncated credentials blob")
        return data


def _blob_key(username: str, device_id: str) -> bytes:
    device_digest = hashlib.sha1(device_id.encode("utf-8")).digest()
    derived = hashlib.pbkdf2_hmac(
        "sha1", device_digest, username.encode("utf-8"), _PBKDF2_ROUNDS, 20
    )
    return hashlib.sha1(derived).digest() + struct.pack(">I", 20)


@dataclass
class Credentials:
    username: str
    auth_type: int
    auth_data: bytes

    @classmethod
    def with_password(cls, username: str, password: str) -> "Credentials":
        """Credentials for a plain username/password login."""
        return cls(username, AUTHENTICATION_USER_PASS, password.encode("utf-8"))

    @classmethod
    def with_blob(
        cls, username: str, encrypted_blob: str, device_id: str
    ) -> "Credentials":
        """Decrypt a base64 credentials blob bound to ``device_id``."""
        try:
            data = base64.b64decode(encrypted_blob, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"invalid base64 in credentials blob: {exc}") from exc
        if not data or len(data) % _BLOCK_SIZE:
            raise ValueError("credentials blob length is not a positive multiple of 16")

        decryptor = Cipher(
            algorithms.AES(_blob_key(username, device_id)), modes.ECB()
        ).decryptor()
        decrypted = decryptor.update(data) + decryptor.finalize()
        blob = decrypted[:_BLOCK_SIZE] + bytes(
            a ^ b for a, b in zip(decrypted[_BLOCK_SIZE:], decrypted)
        )

        reader = _BlobReader(blob)
        reader.u8()
        reader.chunk()
        reader.u8()
        auth_type = reader.varint()
        reader.u8()
        auth_data = reader.chunk()
        return cls(username, auth_type, auth_data)

    def to_json(self) -> str:
        """Serialise to the JSON form used by the cache."""
        return json.dumps(
            {
                "username": self.username,
                "auth_type": self.auth_type,
                "auth_data": base64.b64encode(self.auth_data).decode("ascii"),
            }
        )

    @classmethod
    def from_json(cls, data: str | bytes) -> "Credentials":
        """Parse the JSON form; ``encoded_auth_blob`` is accepted for ``auth_data``."""
        obj: Any = json.loads(data)
        if not isinstance(obj, dict):
            raise ValueError("credentials must be a JSON object")
        username = obj.get("username")
        auth_type = obj.get("auth_type")
        encoded = obj.get("auth_data", obj.get("encoded_auth_blob"))
        if not isinstance(username, str):
            raise ValueError("missing or invalid username")
        if not isinstance(auth_type, int) or isinstance(auth_type, bool):
            raise ValueError("Invalid enum value")
        if not isinstance(encoded, str):
            raise ValueError("missing or invalid auth_data")
        try:
            auth_data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError(str(exc)) from exc
        return cls(username, auth_type, auth_data)


def get_credentials(
    username: str | None,
    password: str | None,
    cached_credentials: Credentials | None,
    prompt: Callable[[str], str],
) -> Credentials | None:
    """Pick the credentials to log in with, prompting for a password if needed."""
    if username is not None and password is not None:
        return Credentials.with_password(username, password)
    if (
        username is not None
        and cached_credentials is not None
        and username == cached_credentials.username
    ):
        return cached_credentials
    if username is not None:
        return Credentials.with_password(username, prompt(username))
    return cached_credentials