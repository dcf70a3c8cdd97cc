import pytest

from respotcore.metadata import (
    AudioItem,
    MetadataKind,
    Restriction,
    countrylist_contains,
    parse_restrictions,
    request_url,
)
from respotcore.spotify_id import FileId, SpotifyAudioType, SpotifyId

TRACK_ID = SpotifyId.from_base62("5sWHDYs0csV6RS48xBl0tH")


@pytest.mark.parametrize(
    "countries, country, expected",
    [
        ("SEDEUS", "DE", True),
        ("SEDEUS", "SE", True),
        ("SEDEUS", "ED", False),
        ("", "DE", False),
    ],
)
def test_countrylist_contains(countries, country, expected):
    assert countrylist_contains(countries, country) is expected


def test_countrylist_odd_length_rejected():
    with pytest.raises(ValueError):
        countrylist_contains("SED", "SE")


def test_no_restrictions_means_unavailable():
    assert parse_restrictions([], "DE", "premium") is False


def test_allowed_country():
    rs = [Restriction(("premium",), countries_allowed="SEDE")]
    assert parse_restrictions(rs, "DE", "premium") is True
    assert parse_restrictions(rs, "US", "premium") is False


def test_forbidden_country():
    rs = [Restriction(("premium",), countries_forbidden="USGB")]
    assert parse_restrictions(rs, "US", "premium") is False
    assert parse_restrictions(rs, "DE", "premium") is True


def test_other_catalogue_ignored():
    rs = [Restriction(("free",), countries_allowed="DE")]
    assert parse_restrictions(rs, "DE", "premium") is False


def test_restrictions_combine():
    rs = [
        Restriction(("premium",), countries_allowed="DE"),
        Restriction(("premium",), countries_allowed="SE"),
        Restriction(("premium",), countries_forbidden="DE"),
    ]
    assert parse_restrictions(rs, "SE", "premium") is True
    assert parse_restrictions(rs, "DE", "premium") is False


def test_request_url_track_uses_base16():
    assert (
        request_url(MetadataKind.TRACK, TRACK_ID)
        == "hm://metadata/3/track/b39fe8081e1f4c54be38e8d6f9f12bb9"
    )


def test_request_url_playlist_uses_base62():
    assert (
        request_url(MetadataKind.PLAYLIST, TRACK_ID)
        == "hm://playlist/v2/playlist/5sWHDYs0csV6RS48xBl0tH"
    )


@pytest.mark.parametrize(
    "kind", [MetadataKind.ALBUM, MetadataKind.ARTIST, MetadataKind.EPISODE, MetadataKind.SHOW]
)
def test_request_url_metadata_kinds(kind):
    url = request_url(kind, TRACK_ID)
    assert url.startswith("hm://metadata/3/")
    assert url.endswith(f"/{kind.value}/{TRACK_ID.to_base16()}")


def test_audio_item_defaults():
    episode = SpotifyId(TRACK_ID.id, SpotifyAudioType.PODCAST)
    files = {0: FileId(bytes(20))}
    item = AudioItem(episode, episode.to_uri(), files, "name", 1000, True)
    assert item.alternatives is None
    assert item.uri == "spotify:episode:5sWHDYs0csV6RS48xBl0tH"
    assert item.files[0].to_base16() == "00" * 20