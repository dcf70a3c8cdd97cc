"""Requesting decryption keys for audio files."""

from __future__ import annotations

import logging
import struct
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable

from .spotify_id import FileId, SpotifyId
from .util import SeqGenerator

log = logging.getLogger(__name__)

CMD_REQUEST_KEY = 0xC
CMD_AES_KEY = 0xD
CMD_AES_KEY_ERROR = 0xE

_KEY_SIZE = 16


@dataclass(frozen=True)
class AudioKey:
    key: bytes


class AudioKeyError(Exception):
    """Raised when the server refuses or fails to deliver an audio key."""


class AudioKeyManager:
    """Sends key requests and matches the replies to their futures."""

    def __init__(self, send_packet: Callable[[int, bytes], None]) -> None:
        self._send_packet = send_packet
        self._lock = threading.Lock()
        self._sequence = SeqGenerator(0, 32)
        self._pending: dict[int, Future[AudioKey]] = {}

    def request(self, track: SpotifyId, file: FileId) -> Future[AudioKey]:
        """Ask for the key of ``file`` belonging to ``track``."""
        future: Future[AudioKey] = Future()
        with self._lock:
            seq = self._sequence.get()
            self._pending[seq] = future
        data = file.raw + track.to_raw() + struct.pack(">IH", seq, 0)
        self._send_packet(CMD_REQUEST_KEY, data)
        return future

    def dispatch(self, cmd: int, data: bytes) -> None:
        """Handle a key reply whose first four bytes are the request sequence."""
        if len(data) < 4:
            raise AudioKeyError("audio key reply too short")
        (seq,) = struct.unpack(">I", data[:4])
        body = bytes(data[4:])
        with self._lock:
            future = self._pending.pop(seq, None)
        if future is None:
            return
        if cmd == CMD_AES_KEY:
            if len(body) != _KEY_SIZE:
                future.set_exception(AudioKeyError(f"audio key has {len(body)} bytes"))
            else:
                future.set_result(AudioKey(body))
        elif cmd == CMD_AES_KEY_ERROR:
            log.warning("error audio key %s", " ".join(f"{b:x}" for b in body[:2]))
            future.set_exception(AudioKeyError("server refused the audio key"))
        else:
            future.set_exception(AudioKeyError(f"unexpected reply command {cmd:#x}"))