"""Identifiers for tracks, episodes and files."""

from __future__ import annotations

import enum
from dataclasses import dataclass

_BASE62_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
_BASE62_VALUES = {c: i for i, c in enumerate(_BASE62_DIGITS)}
_BASE16_VALUES = {c: i for i, c in enumerate("0123456789abcdef")}

_SIZE = 16
_SIZE_BASE62 = 22
_MAX_ID = (1 << 128) - 1
_URI_PREFIX_LEN = len("spotify:")


class SpotifyAudioType(enum.Enum):
    TRACK = "track"
    PODCAST = "episode"
    NON_PLAYABLE = "unknown"

    @classmethod
    def from_name(cls, name: str) -> "SpotifyAudioType":
        """Map a URI type name to an audio type; unknown names are non-playable."""
        if name == "track":
            return cls.TRACK
        if name == "episode":
            return cls.PODCAST
        return cls.NON_PLAYABLE


class SpotifyIdError(ValueError):
    """Raised when an identifier cannot be parsed."""


def _parse_digits(src: str, table: dict[str, int], radix: int) -> int:
    value = 0
    for char in src:
        digit = table.get(char)
        if digit is None:
            raise SpotifyIdError(f"invalid character {char!r} in id")
        value = value * radix + digit
        if value > _MAX_ID:
            raise SpotifyIdError("id does not fit in 128 bits")
    return value


@dataclass(frozen=True)
class SpotifyId:
    id: int
    audio_type: SpotifyAudioType = SpotifyAudioType.TRACK

    @classmethod
    def from_base16(cls, src: str) -> "SpotifyId":
        """Parse a hex encoded id."""
        return cls(_parse_digits(src, _BASE16_VALUES, 16))

    @classmethod
    def from_base62(cls, src: str) -> "SpotifyId":
        """Parse a base62 encoded id."""
        return cls(_parse_digits(src, _BASE62_VALUES, 62))

    @classmethod
    def from_raw(cls, src: bytes) -> "SpotifyId":
        """Build an id from 16 big-endian bytes."""
        if len(src) != _SIZE:
            raise SpotifyIdError(f"raw id must be {_SIZE} bytes, got {len(src)}")
        return cls(int.from_bytes(src, "big"))

    @classmethod
    def from_uri(cls, src: str) -> "SpotifyId":
        """Parse a URI of the form ``spotify:{type}:{id}``."""
        raw = src.encode("utf-8")
        id_start = len(raw) - _SIZE_BASE62
        if id_start < _URI_PREFIX_LEN + 1 or raw[id_start - 1] != ord(":"):
            raise SpotifyIdError(f"malformed uri {src!r}")
        try:
            id_part = raw[id_start:].decode("ascii")
            type_part = raw[_URI_PREFIX_LEN : id_start - 1].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SpotifyIdError(f"malformed uri {src!r}") from exc
        parsed = cls.from_base62(id_part)
        return cls(parsed.id, SpotifyAudioType.from_name(type_part))

    def to_base16(self) -> str:
        return f"{self.id:032x}"

    def to_base62(self) -> str:
        digits = []
        value = self.id
        for _ in range(_SIZE_BASE62):
            value, rem = divmod(value, 62)
            digits.append(_BASE62_DIGITS[rem])
        return "".join(reversed(digits))

    def to_raw(self) -> bytes:
        return self.id.to_bytes(_SIZE, "big")

    def to_uri(self) -> str:
        return f"spotify:{self.audio_type.value}:{self.to_base62()}"


@dataclass(frozen=True, order=True)
class FileId:
    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != 20:
            raise ValueError(f"file id must be 20 bytes, got {len(self.raw)}")

    def to_base16(self) -> str:
        return self.raw.hex()

    def __str__(self) -> str:
        return self.to_base16()

    def __repr__(self) -> str:
        return f"FileId({self.to_base16()!r})"