"""Reassembly of multi-part Mercury request/response messages."""

from __future__ import annotations

import enum
import logging
import struct
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Callable

from .util import url_encode

log = logging.getLogger(__name__)

CMD_EVENT = 0xB5

FLAG_FINAL = 0x1
FLAG_PARTIAL = 0x2


class MercuryMethod(enum.Enum):
    GET = "GET"
    SUB = "SUB"
    UNSUB = "UNSUB"
    SEND = "SEND"

    def command(self) -> int:
        """The packet command used to send a request with this method."""
        return _COMMANDS[self]

    def __str__(self) -> str:
        return self.value


_COMMANDS = {
    MercuryMethod.GET: 0xB2,
    MercuryMethod.SEND: 0xB2,
    MercuryMethod.SUB: 0xB3,
    MercuryMethod.UNSUB: 0xB4,
}


@dataclass
class MercuryResponse:
    uri: str
    status_code: int
    payload: list[bytes]


class MercuryError(Exception):
    """Raised when a Mercury request fails or a packet is malformed."""


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def take(self, size: int) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise MercuryError("truncated mercury packet")
        chunk = self._data[self._pos : end]
        self._pos = end
        return chunk

    def u8(self) -> int:
        return self.take(1)[0]

    def u16(self) -> int:
        return struct.unpack(">H", self.take(2))[0]


def parse_packet(data: bytes) -> tuple[bytes, int, list[bytes]]:
    """Split a packet into its sequence, flags and length-prefixed parts."""
    reader = _Reader(data)
    seq = reader.take(reader.u16())
    flags = reader.u8()
    count = reader.u16()
    parts = [reader.take(reader.u16()) for _ in range(count)]
    return seq, flags, parts


@dataclass
class _Pending:
    future: Future[MercuryResponse] | None
    parts: list[bytes] = field(default_factory=list)
    partial: bytes | None = None


class MercuryReassembler:
    """Collects the parts of Mercury replies and completes their requests.

    ``header_decoder`` turns the encoded header part into ``(uri, status_code)``.
    """

    def __init__(self, header_decoder: Callable[[bytes], tuple[str, int]]) -> None:
        self._decode_header = header_decoder
        self._lock = threading.Lock()
        self._pending: dict[bytes, _Pending] = {}
        self._invalid = False

    def register(self, seq: bytes) -> Future[MercuryResponse]:
        """Expect a reply with sequence ``seq`` and return its future."""
        future: Future[MercuryResponse] = Future()
        with self._lock:
            if self._invalid:
                future.set_exception(MercuryError("mercury has been shut down"))
            else:
                self._pending[bytes(seq)] = _Pending(future)
        return future

    def feed(self, cmd: int, data: bytes) -> MercuryResponse | None:
        """Take in one packet; return the response once a message completes successfully.

        Event pushes (command 0xb5) need no registration and are only returned.
        """
        seq, flags, parts = parse_packet(data)
        with self._lock:
            pending = self._pending.pop(seq, None)
        if pending is None:
            if cmd != CMD_EVENT:
                log.warning("Ignore seq %r cmd %x", seq, cmd)
                return None
            pending = _Pending(None)

        last = len(parts) - 1
        for index, part in enumerate(parts):
            if pending.partial is not None:
                part = pending.partial + part
                pending.partial = None
            if index == last and flags == FLAG_PARTIAL:
                pending.partial = part
            else:
                pending.parts.append(part)

        if flags == FLAG_FINAL:
            return self._complete(cmd, pending)
        with self._lock:
            self._pending[seq] = pending
        return None

    def _complete(self, cmd: int, pending: _Pending) -> MercuryResponse | None:
        if not pending.parts:
            error = MercuryError("mercury reply without header")
            if pending.future is not None:
                pending.future.set_exception(error)
            raise error
        uri, status_code = self._decode_header(pending.parts[0])
        response = MercuryResponse(url_encode(uri), status_code, pending.parts[1:])

        if response.status_code >= 500:
            error = MercuryError(f"server error {response.status_code} for {response.uri}")
            if pending.future is not None:
                pending.future.set_exception(error)
            raise error
        if response.status_code >= 400:
            log.warning("error %d for uri %s", response.status_code, response.uri)
            if pending.future is not None:
                pending.future.set_exception(
                    MercuryError(f"error {response.status_code} for {response.uri}")
                )
            return None
        if cmd != CMD_EVENT and pending.future is not None:
            pending.future.set_result(response)
        return response

    def shutdown(self) -> None:
        """Fail every outstanding request and refuse new ones."""
        with self._lock:
            self._invalid = True
            pending = list(self._pending.values())
            self._pending.clear()
        for entry in pending:
            if entry.future is not None:
                entry.future.set_exception(MercuryError("mercury has been shut down"))