import base64
import json

import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
import hashlib
import struct

from respotcore.authentication import (
    AUTHENTICATION_USER_PASS,
    AuthenticationError,
    BadCredentials,
    Credentials,
    PremiumAccountRequired,
    get_credentials,
    login_failed_error,
)


def _varint(value):
    if value < 0x80:
        return bytes([value])
    return bytes([(value & 0x7F) | 0x80, value >> 7])


def _make_blob(username, device_id, auth_type, auth_data):
    plain = (
        b"\x01"
        + _varint(len(username))
        + username.encode()
        + b"\x02"
        + _varint(auth_type)
        + b"\x03"
        + _varint(len(auth_data))
        + auth_data
    )
    plain += b"\x00" * (-len(plain) % 16)
    blocks = [plain[i : i + 16] for i in range(0, len(plain), 16)]
    chained = [blocks[0]]
    for block in blocks[1:]:
        chained.append(bytes(a ^ b for a, b in zip(block, chained[-1])))
    secret = hashlib.sha1(device_id.encode()).digest()
    derived = hashlib.pbkdf2_hmac("sha1", secret, username.encode(), 0x100, 20)
    key = hashlib.sha1(derived).digest() + struct.pack(">I", 20)
    encryptor = Cipher(algorithms.AES(key), modes.ECB()).encryptor()
    encrypted = encryptor.update(b"".join(chained)) + encryptor.finalize()
    return base64.b64encode(encrypted).decode()


def test_with_password():
    password = "password"
    creds = Credentials.with_password("alice", password)
    assert creds.username == "alice"
    assert creds.auth_type == AUTHENTICATION_USER_PASS
    assert creds.auth_data == b"password"


def test_json_round_trip():
    creds = Credentials("alice", 1, b"\x00\x01token")
    assert Credentials.from_json(creds.to_json()) == creds


def test_json_field_names():
    creds = Credentials("alice", 1, b"token")
    obj = json.loads(creds.to_json())
    assert set(obj) == {"username", "auth_type", "auth_data"}
    assert base64.b64decode(obj["auth_data"]) == b"token"


def test_from_json_alias():
    encoded = base64.b64encode(b"token").decode()
    data = json.dumps({"username": "alice", "auth_type": 1, "encoded_auth_blob": encoded})
    assert Credentials.from_json(data).auth_data == b"token"


def test_from_json_invalid_base64():
    data = json.dumps({"username": "alice", "auth_type": 1, "auth_data": "!!!"})
    with pytest.raises(ValueError):
        Credentials.from_json(data)


def test_from_json_invalid_auth_type():
    data = json.dumps({"username": "alice", "auth_type": "x", "auth_data": ""})
    with pytest.raises(ValueError):
        Credentials.from_json(data)


def test_with_blob_decrypts():
    auth_data = b"token" * 30
    blob = _make_blob("alice", "test-device", 1, auth_data)
    creds = Credentials.with_blob("alice", blob, "test-device")
    assert creds.username == "alice"
    assert creds.auth_type == 1
    assert creds.auth_data == auth_data


def test_with_blob_bad_length():
    blob = base64.b64encode(b"x" * 10).decode()
    with pytest.raises(ValueError):
        Credentials.with_blob("alice", blob, "test-device")


def test_with_blob_bad_base64():
    with pytest.raises(ValueError):
        Credentials.with_blob("alice", "not base64!", "test-device")


def test_get_credentials_username_and_password():
    password = "password"
    creds = get_credentials("alice", password, None, lambda name: "unused")
    assert creds == Credentials.with_password("alice", "password")


def test_get_credentials_uses_matching_cache():
    cached = Credentials("alice", 1, b"token")
    assert get_credentials("alice", None, cached, lambda name: "unused") is cached


def test_get_credentials_prompts_on_mismatch():
    cached = Credentials("bob", 1, b"token")
    asked = []

    def prompt(name):
        asked.append(name)
        return "secret"

    creds = get_credentials("alice", None, cached, prompt)
    assert asked == ["alice"]
    assert creds.auth_data == b"secret"


def test_get_credentials_cache_only():
    cached = Credentials("bob", 1, b"token")
    assert get_credentials(None, None, cached, lambda name: "unused") is cached
    assert get_credentials(None, None, None, lambda name: "unused") is None


def test_login_failed_errors():
    assert isinstance(login_failed_error("BadCredentials"), BadCredentials)
    assert str(login_failed_error("BadCredentials")) == (
        "Authentication failed with error: Bad credentials"
    )
    assert isinstance(login_failed_error("PremiumAccountRequired"), PremiumAccountRequired)
    other = login_failed_error("TryAnotherAP")
    assert type(other) is AuthenticationError
    assert str(other) == "Authentication failed with error: TryAnotherAP"