"""Session and Connect device configuration."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field

DEFAULT_USER_AGENT = "respotcore"


@dataclass
class SessionConfig:
    user_agent: str = DEFAULT_USER_AGENT
    device_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    proxy: str | None = None
    ap_port: int | None = None


class DeviceType(enum.IntEnum):
    UNKNOWN = 0
    COMPUTER = 1
    TABLET = 2
    SMARTPHONE = 3
    SPEAKER = 4
    TV = 5
    AVR = 6
    STB = 7
    AUDIO_DONGLE = 8
    GAME_CONSOLE = 9
    CAST_AUDIO = 10
    CAST_VIDEO = 11
    AUTOMOBILE = 12
    SMARTWATCH = 13
    CHROMEBOOK = 14
    UNKNOWN_SPOTIFY = 100
    CAR_THING = 101
    OBSERVER = 102
    HOME_THING = 103

    @classmethod
    def parse(cls, text: str) -> "DeviceType":
        """Parse a device type name, case-insensitively."""
        try:
            return _PARSEABLE_DEVICE_TYPES[text.lower()]
        except KeyError:
            raise ValueError(f"unknown device type {text!r}") from None

    def __str__(self) -> str:
        return _DEVICE_TYPE_NAMES[self]


_DEVICE_TYPE_NAMES = {
    DeviceType.UNKNOWN: "Unknown",
    DeviceType.COMPUTER: "Computer",
    DeviceType.TABLET: "Tablet",
    DeviceType.SMARTPHONE: "Smartphone",
    DeviceType.SPEAKER: "Speaker",
    DeviceType.TV: "TV",
    DeviceType.AVR: "AVR",
    DeviceType.STB: "STB",
    DeviceType.AUDIO_DONGLE: "AudioDongle",
    DeviceType.GAME_CONSOLE: "GameConsole",
    DeviceType.CAST_AUDIO: "CastAudio",
    DeviceType.CAST_VIDEO: "CastVideo",
    DeviceType.AUTOMOBILE: "Automobile",
    DeviceType.SMARTWATCH: "Smartwatch",
    DeviceType.CHROMEBOOK: "Chromebook",
    DeviceType.UNKNOWN_SPOTIFY: "UnknownSpotify",
    DeviceType.CAR_THING: "CarThing",
    DeviceType.OBSERVER: "Observer",
    DeviceType.HOME_THING: "HomeThing",
}

_PARSEABLE_DEVICE_TYPES = {
    name.lower(): member
    for member, name in _DEVICE_TYPE_NAMES.items()
    if member
    not in (DeviceType.UNKNOWN, DeviceType.UNKNOWN_SPOTIFY, DeviceType.OBSERVER)
}


class VolumeCtrl(enum.Enum):
    LINEAR = "linear"
    LOG = "log"
    FIXED = "fixed"

    @classmethod
    def parse(cls, text: str) -> "VolumeCtrl":
        """Parse a volume control name, case-insensitively."""
        try:
            return cls(text.lower())
        except ValueError:
            raise ValueError(f"unknown volume control {text!r}") from None


@dataclass(kw_only=True)
class ConnectConfig:
    name: str
    device_type: DeviceType = DeviceType.SPEAKER
    volume: int
    volume_ctrl: VolumeCtrl = VolumeCtrl.LOG
    autoplay: bool