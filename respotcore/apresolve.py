"""Resolve the access point to connect to."""

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

log = logging.getLogger(__name__)

AP_FALLBACK = "ap.spotify.com:443"
APRESOLVE_ENDPOINT = "http://apresolve.spotify.com/"

_TIMEOUT = 10.0


def _port_of(ap: str) -> int | None:
    target = ap if "://" in ap else f"//{ap}"
    try:
        return urllib.parse.urlsplit(target).port
    except ValueError:
        return None


def select_access_point(
    body: str | bytes, ap_port: int | None = None, use_proxy: bool = False
) -> str:
    """Pick the first usable access point from an apresolve JSON response."""
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    try:
        data: Any = json.loads(body)
        ap_list = data["ap_list"]
    except (ValueError, KeyError, TypeError) as exc:
        raise ValueError("invalid JSON") from exc
    if not isinstance(ap_list, list) or not all(isinstance(ap, str) for ap in ap_list):
        raise ValueError("invalid JSON")

    if ap_port is not None:
        wanted: int | None = ap_port
    elif use_proxy:
        # A proxy is unlikely to accept CONNECT on anything but 443.
        wanted = 443
    else:
        wanted = None

    for ap in ap_list:
        if wanted is None or _port_of(ap) == wanted:
            return ap
    raise ValueError("empty AP List")


def apresolve(proxy: str | None = None, ap_port: int | None = None) -> str:
    """Query the resolve endpoint, optionally through an HTTP proxy."""
    proxies = {"http": proxy, "https": proxy} if proxy is not None else {}
    opener = urllib.request.build_opener(urllib.request.ProxyHandler(proxies))
    try:
        with opener.open(APRESOLVE_ENDPOINT, timeout=_TIMEOUT) as response:
            body = response.read()
    except (OSError, http.client.HTTPException) as exc:
        raise OSError(f"HTTP error: {exc}") from exc
    return select_access_point(body, ap_port, proxy is not None)


def apresolve_or_fallback(proxy: str | None = None, ap_port: int | None = None) -> str:
    """Resolve an access point, falling back to the default one on failure."""
    try:
        return apresolve(proxy, ap_port)
    except (OSError, ValueError) as exc:
        log.warning("Failed to resolve Access Point: %s", exc)
        log.warning('Using fallback "%s"', AP_FALLBACK)
        return AP_FALLBACK