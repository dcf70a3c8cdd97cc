"""Key derivation for the access point handshake."""

from __future__ import annotations

import hashlib
import hmac

_ROUNDS = range(1, 6)
_MAC_KEY_SIZE = 0x14
_SEND_KEY = slice(0x14, 0x34)
_RECV_KEY = slice(0x34, 0x54)


def _hmac_sha1(key: bytes, *parts: bytes) -> bytes:
    mac = hmac.new(key, digestmod=hashlib.sha1)
    for part in parts:
        mac.update(part)
    return mac.digest()


def compute_keys(shared_secret: bytes, packets: bytes) -> tuple[bytes, bytes, bytes]:
    """Derive ``(challenge, send_key, recv_key)`` from the DH secret and the exchanged packets.

    ``packets`` is every byte sent and received so far in the handshake.
    """
    data = b"".join(
        _hmac_sha1(shared_secret, packets, bytes([round_no])) for round_no in _ROUNDS
    )
    challenge = _hmac_sha1(data[:_MAC_KEY_SIZE], packets)
    return challenge, data[_SEND_KEY], data[_RECV_KEY]