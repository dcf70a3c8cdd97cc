"""Multiplexed data channels carried over the access point connection."""

from __future__ import annotations

import enum
import logging
import queue
import struct
import threading
from collections import deque
from time import monotonic
from typing import Iterator

from .util import SeqGenerator

log = logging.getLogger(__name__)

CMD_CHANNEL_ERROR = 0xA

_DISCONNECTED = object()
_MEASUREMENT_WINDOW_MS = 1000


class ChannelError(Exception):
    """Raised when a channel is closed by the server or the session."""


class _State(enum.Enum):
    HEADER = enum.auto()
    DATA = enum.auto()
    FINISHED = enum.auto()
    CLOSED = enum.auto()


class Channel:
    """The receiving end of one channel: a run of headers followed by data packets."""

    def __init__(self, receiver: queue.Queue) -> None:
        self._receiver = receiver
        self._state = _State.HEADER
        self._header_buf = b""
        self._disconnected = False
        self._stashed: deque[bytes] = deque()

    def _recv(self, timeout: float | None) -> bytes:
        if self._disconnected:
            raise ChannelError("channel has been closed")
        try:
            item = self._receiver.get(timeout=timeout)
        except queue.Empty:
            raise TimeoutError("no packet received in time") from None
        if item is _DISCONNECTED:
            self._disconnected = True
            raise ChannelError("channel has been closed")
        cmd, packet = item
        if cmd == CMD_CHANNEL_ERROR:
            code = struct.unpack(">H", packet[:2])[0] if len(packet) >= 2 else None
            log.error("channel error: %d %s", len(packet), code)
            self._state = _State.CLOSED
            raise ChannelError(f"channel error {code}")
        return packet

    def _next_event(self, timeout: float | None) -> tuple[int | None, bytes] | None:
        while True:
            if self._state is _State.CLOSED:
                raise ChannelError("channel already terminated")
            if self._state is _State.FINISHED:
                return None
            if self._state is _State.HEADER:
                if not self._header_buf:
                    self._header_buf = self._recv(timeout)
                buf = self._header_buf
                if len(buf) < 2:
                    raise ChannelError("truncated channel header")
                (length,) = struct.unpack(">H", buf[:2])
                buf = buf[2:]
                if length == 0:
                    if buf:
                        raise ChannelError("trailing bytes after channel headers")
                    self._header_buf = b""
                    self._state = _State.DATA
                    continue
                if len(buf) < length:
                    raise ChannelError("truncated channel header")
                self._header_buf = buf[length:]
                return buf[0], buf[1:length]
            packet = self._recv(timeout)
            if not packet:
                self._state = _State.FINISHED
                return None
            return None, packet

    def events(self, timeout: float | None = None) -> Iterator[tuple[int | None, bytes]]:
        """Yield ``(header_id, data)`` for headers, then ``(None, data)`` for data packets."""
        while self._stashed:
            yield None, self._stashed.popleft()
        while (event := self._next_event(timeout)) is not None:
            yield event

    def headers(self, timeout: float | None = None) -> Iterator[tuple[int, bytes]]:
        """Yield ``(header_id, data)`` until the headers end."""
        while (event := self._next_event(timeout)) is not None:
            header_id, payload = event
            if header_id is None:
                # Keep the data packet for a later call to data().
                self._stashed.append(payload)
                return
            yield header_id, payload

    def data(self, timeout: float | None = None) -> Iterator[bytes]:
        """Yield the data packets, skipping any headers, until the channel ends."""
        for header_id, payload in self.events(timeout):
            if header_id is None:
                yield payload


class ChannelManager:
    """Allocates channel ids and routes incoming packets to their channels."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sequence = SeqGenerator(0, 16)
        self._channels: dict[int, queue.Queue] = {}
        self._rate_estimate = 0
        self._measurement_start: float | None = None
        self._measurement_bytes = 0
        self._invalid = False

    def allocate(self) -> tuple[int, Channel]:
        """Reserve a channel id and return it with its receiving channel."""
        receiver: queue.Queue = queue.Queue()
        with self._lock:
            seq = self._sequence.get()
            if self._invalid:
                receiver.put(_DISCONNECTED)
            else:
                self._channels[seq] = receiver
        return seq, Channel(receiver)

    def dispatch(self, cmd: int, data: bytes) -> None:
        """Route a packet whose first two bytes name the channel."""
        if len(data) < 2:
            raise ChannelError("packet too short for a channel id")
        (channel_id,) = struct.unpack(">H", data[:2])
        payload = bytes(data[2:])
        with self._lock:
            now = monotonic()
            if self._measurement_start is None:
                self._measurement_start = now
            else:
                elapsed_ms = int((now - self._measurement_start) * 1000)
                if elapsed_ms > _MEASUREMENT_WINDOW_MS:
                    self._rate_estimate = 1000 * self._measurement_bytes // elapsed_ms
                    self._measurement_start = now
                    self._measurement_bytes = 0
            self._measurement_bytes += len(payload)
            receiver = self._channels.get(channel_id)
            if receiver is not None:
                receiver.put((cmd, payload))

    def download_rate_estimate(self) -> int:
        """Estimated download rate in bytes per second."""
        with self._lock:
            return self._rate_estimate

    def shutdown(self) -> None:
        """Close every open channel and refuse new ones."""
        with self._lock:
            self._invalid = True
            for receiver in self._channels.values():
                receiver.put(_DISCONNECTED)
            self._channels.clear()