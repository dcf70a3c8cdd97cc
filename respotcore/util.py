"""Small helpers shared across the package."""

from __future__ import annotations

import secrets

_UNRESERVED = frozenset(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_.~:/"
)


def rand_bytes(size: int) -> bytes:
    """Return ``size`` random bytes."""
    return secrets.token_bytes(size)


def url_encode(inp: str) -> str:
    """Percent-encode every byte of ``inp`` outside the unreserved set (plus ':' and '/')."""
    return "".join(
        chr(byte) if byte in _UNRESERVED else f"%{byte:02X}"
        for byte in inp.encode("utf-8")
    )


def powm(base: int, exp: int, modulus: int) -> int:
    """Modular exponentiation; a zero exponent always yields 1."""
    if exp < 0:
        raise ValueError("exponent must not be negative")
    if exp == 0:
        return 1
    return pow(base, exp, modulus)


class SeqGenerator:
    """A wrapping sequence counter of a fixed bit width."""

    def __init__(self, value: int = 0, bits: int = 32) -> None:
        if bits <= 0:
            raise ValueError("bits must be positive")
        self._mask = (1 << bits) - 1
        self._value = value & self._mask

    def get(self) -> int:
        """Return the current value and advance, wrapping at the bit width."""
        value = self._value
        self._value = (value + 1) & self._mask
        return value