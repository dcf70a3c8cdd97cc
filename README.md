# respotcore

Building blocks for a streaming music client, in plain Python.

## Modules

- `respotcore.spotify_id`: `SpotifyId` (with `SpotifyAudioType`) and `FileId`.
  `SpotifyId` converts between base16, base62, 16 raw bytes and URIs of the form
  `spotify:{type}:{id}`. Bad input raises `SpotifyIdError`, a `ValueError`.
- `respotcore.config`: the `SessionConfig` and `ConnectConfig` dataclasses, and the
  `DeviceType` and `VolumeCtrl` enums. Each enum has a case-insensitive `parse`.
- `respotcore.authentication`: `Credentials`. It builds credentials from a password
  (`with_password`) or decrypts an encrypted blob (`with_blob`), and converts to and
  from JSON (`to_json`, `from_json`). Also here are `get_credentials`, the error types
  `AuthenticationError`, `BadCredentials` and `PremiumAccountRequired`, and
  `login_failed_error`.
- `respotcore.cache`: `Cache`, which stores credentials, volume and audio files on disk.
- `respotcore.diffie_hellman`: `DHLocalKeys` for the key exchange.
- `respotcore.handshake`: `compute_keys`, which derives the challenge and the send and
  receive keys.
- `respotcore.apresolve`: `select_access_point`, `apresolve` and
  `apresolve_or_fallback`. The last one returns `ap.spotify.com:443` when resolving
  fails.
- `respotcore.proxytunnel`: `connect_request`, `parse_proxy_response` and `connect`, for
  tunnelling through an HTTP proxy with `CONNECT`. Refusals raise `ProxyError`.
- `respotcore.channel`: `ChannelManager` and `Channel`. The manager routes incoming
  packets to channels. A channel yields its headers, then its data, through `events`,
  `headers` and `data`.
- `respotcore.audio_key`: `AudioKeyManager`. It sends key requests through a callable
  you supply and resolves each request's `concurrent.futures.Future` with an `AudioKey`.
- `respotcore.mercury`: `MercuryMethod`, `MercuryResponse`, `MercuryError`,
  `parse_packet` and `MercuryReassembler`. The reassembler collects multi-part replies
  and completes the futures of registered requests.
- `respotcore.metadata`: `countrylist_contains`, `Restriction`, `parse_restrictions`,
  `MetadataKind`, `request_url` and `AudioItem`.
- `respotcore.keymaster`: `Token.from_json` and `token_url`.
- `respotcore.cover`: `cover_request`, which builds the body of an image request packet.

## Installation

```
pip install .
```

## Examples

Convert between identifier forms:

```python
from respotcore.spotify_id import SpotifyId

track = SpotifyId.from_uri("spotify:track:5sWHDYs0csV6RS48xBl0tH")
print(track.to_base16())   # b39fe8081e1f4c54be38e8d6f9f12bb9
print(track.to_uri())      # spotify:track:5sWHDYs0csV6RS48xBl0tH
```

Store credentials and volume between runs:

```python
from respotcore.authentication import Credentials
from respotcore.cache import Cache

cache = Cache("state", "audio")
password = "password"
cache.save_credentials(Credentials.with_password("someone", password))
cache.save_volume(32768)
print(cache.volume())                 # 32768
print(cache.credentials().username)   # someone
```

Parse device types the way command-line options give them:

```python
from respotcore.config import DeviceType

print(DeviceType.parse("speaker"))  # Speaker
```

Choose an access point and build a proxy request:

```python
from respotcore.apresolve import select_access_point
from respotcore.proxytunnel import connect_request

body = '{"ap_list": ["a.example.com:4070", "b.example.com:443"]}'
print(select_access_point(body, use_proxy=True))  # b.example.com:443
print(connect_request("b.example.com:443"))       # b'CONNECT b.example.com:443 HTTP/1.1\r\n\r\n'
```

Build metadata request URIs:

```python
from respotcore.metadata import MetadataKind, request_url
from respotcore.spotify_id import SpotifyId

track = SpotifyId.from_base62("5sWHDYs0csV6RS48xBl0tH")
print(request_url(MetadataKind.TRACK, track))
# hm://metadata/3/track/b39fe8081e1f4c54be38e8d6f9f12bb9
```

## What the package does not do

This package has no session object. It does not open a connection to an access point,
and it has no packet cipher or framing for the encrypted connection. It does not encode
or decode protobuf messages. `MercuryReassembler` expects a decoder for the header part
from the caller, and no module parses track, album or playlist messages. It does not
decode or play audio, and it installs no command-line program.

## Running the tests

```
pip install ".[test]"
pytest
```