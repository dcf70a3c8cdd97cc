"""Metadata helpers: availability restrictions, request URIs and playable items."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable

from .spotify_id import FileId, SpotifyId


def countrylist_contains(countries: str, country: str) -> bool:
    """Whether ``country`` is one of the two-letter codes concatenated in ``countries``."""
    if len(countries) % 2:
        raise ValueError(f"country list {countries!r} has an odd length")
    chunks = (countries[start : start + 2] for start in range(0, len(countries), 2))
    return any(chunk == country for chunk in chunks)


@dataclass(frozen=True)
class Restriction:
    """Countries in which an item is forbidden or allowed, per catalogue."""

    catalogues: tuple[str, ...] = ()
    countries_forbidden: str | None = None
    countries_allowed: str | None = None


def parse_restrictions(
    restrictions: Iterable[Restriction], country: str, catalogue: str
) -> bool:
    """Whether an item with these restrictions is available in ``country``."""
    forbidden = ""
    allowed = ""
    has_forbidden = False
    has_allowed = False

    for restriction in restrictions:
        if catalogue not in restriction.catalogues:
            continue
        if restriction.countries_forbidden is not None:
            forbidden += restriction.countries_forbidden
            has_forbidden = True
        if restriction.countries_allowed is not None:
            allowed += restriction.countries_allowed
            has_allowed = True

    return (
        (has_forbidden or has_allowed)
        and (not has_forbidden or not countrylist_contains(forbidden, country))
        and (not has_allowed or countrylist_contains(allowed, country))
    )


class MetadataKind(enum.Enum):
    TRACK = "track"
    ALBUM = "album"
    PLAYLIST = "playlist"
    ARTIST = "artist"
    EPISODE = "episode"
    SHOW = "show"


def request_url(kind: MetadataKind, id: SpotifyId) -> str:
    """The Mercury URI that fetches metadata of ``kind`` for ``id``."""
    if kind is MetadataKind.PLAYLIST:
        return f"hm://playlist/v2/playlist/{id.to_base62()}"
    return f"hm://metadata/3/{kind.value}/{id.to_base16()}"


@dataclass
class AudioItem:
    """The fields of a track or episode that a player needs."""

    id: SpotifyId
    uri: str
    files: dict[int, FileId]
    name: str
    duration: int
    available: bool
    alternatives: list[SpotifyId] | None = field(default=None)