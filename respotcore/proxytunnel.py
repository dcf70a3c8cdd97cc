"""Open a tunnel through an HTTP proxy with CONNECT."""

from __future__ import annotations

import re
import socket
import urllib.parse

_STATUS_RE = re.compile(rb"HTTP/1\.[01] ([0-9]{3})(?: (.*))?")
_MAX_HEADERS = 16
_CHUNK = 4096
_HTTP_PREFIX = b"HTTP/"


class ProxyError(OSError):
    """Raised when the proxy refuses or garbles the tunnel request."""


def connect_request(connect_url: str) -> bytes:
    """The CONNECT request for a ``host:port`` target."""
    target = connect_url if "://" in connect_url else f"//{connect_url}"
    parts = urllib.parse.urlsplit(target)
    host = parts.hostname
    if not host:
        raise ValueError(f"No host in {connect_url}")
    port = parts.port
    if port is None:
        raise ValueError(f"No port in {connect_url}")
    if ":" in host:
        host = f"[{host}]"
    return f"CONNECT {host}:{port} HTTP/1.1\r\n\r\n".encode("ascii")


def parse_proxy_response(data: bytes) -> int | None:
    """Check a proxy's reply to CONNECT.

    Returns None while the header is incomplete, the length of the header once
    a 200 reply is complete, and raises ProxyError otherwise.
    """
    prefix = data[: len(_HTTP_PREFIX)]
    if not _HTTP_PREFIX.startswith(prefix):
        raise ProxyError("invalid HTTP version")

    end = data.find(b"\r\n\r\n")
    if end < 0:
        return None

    status_line, *header_lines = data[:end].split(b"\r\n")
    match = _STATUS_RE.fullmatch(status_line)
    if match is None:
        raise ProxyError("Malformed response from proxy")
    if len(header_lines) > _MAX_HEADERS:
        raise ProxyError("too many headers")
    if any(b":" not in line for line in header_lines):
        raise ProxyError("invalid header name")

    code = int(match.group(1))
    if code != 200:
        raw_reason = match.group(2)
        reason = raw_reason.decode("latin-1") if raw_reason is not None else "no reason"
        raise ProxyError(f"Proxy responded with {code}: {reason}")
    return end + 4


def connect(sock: socket.socket, connect_url: str) -> socket.socket:
    """Ask the proxy on ``sock`` for a tunnel to ``connect_url`` and return the socket."""
    sock.sendall(connect_request(connect_url))
    buffer = bytearray()
    while True:
        chunk = sock.recv(_CHUNK)
        if not chunk:
            raise ProxyError("Early EOF from proxy")
        buffer += chunk
        if parse_proxy_response(bytes(buffer)) is not None:
            return sock