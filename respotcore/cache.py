"""On-disk cache for volume, credentials and audio files."""

from __future__ import annotations

import errno
import logging
import os
import re
import shutil
from pathlib import Path
from typing import BinaryIO

from .authentication import Credentials
from .spotify_id import FileId

log = logging.getLogger(__name__)

_VOLUME_RE = re.compile(r"\+?[0-9]+")
_MAX_VOLUME = 0xFFFF


class Cache:
    """A cache for volume, credentials and audio files."""

    def __init__(
        self,
        system_location: str | os.PathLike[str] | None = None,
        audio_location: str | os.PathLike[str] | None = None,
    ) -> None:
        system = Path(system_location) if system_location is not None else None
        audio = Path(audio_location) if audio_location is not None else None
        if system is not None:
            system.mkdir(parents=True, exist_ok=True)
        if audio is not None:
            audio.mkdir(parents=True, exist_ok=True)
        self._audio_location = audio
        self._volume_location = system / "volume" if system is not None else None
        self._credentials_location = (
            system / "credentials.json" if system is not None else None
        )

    def credentials(self) -> Credentials | None:
        """Return the cached credentials, or None if absent or unreadable."""
        if self._credentials_location is None:
            return None
        try:
            return Credentials.from_json(self._credentials_location.read_text("utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            log.warning("Error reading credentials from cache: %s", exc)
            return None

    def save_credentials(self, cred: Credentials) -> None:
        if self._credentials_location is None:
            return
        try:
            self._credentials_location.write_text(cred.to_json(), "utf-8")
        except OSError as exc:
            log.warning("Cannot save credentials to cache: %s", exc)

    def volume(self) -> int | None:
        """Return the cached volume, or None if absent or unreadable."""
        if self._volume_location is None:
            return None
        try:
            contents = self._volume_location.read_text("utf-8")
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            log.warning("Error reading volume from cache: %s", exc)
            return None
        if not _VOLUME_RE.fullmatch(contents) or int(contents) > _MAX_VOLUME:
            log.warning("Error reading volume from cache: invalid value %r", contents)
            return None
        return int(contents)

    def save_volume(self, volume: int) -> None:
        if self._volume_location is None:
            return
        try:
            self._volume_location.write_text(str(volume), "utf-8")
        except OSError as exc:
            log.warning("Cannot save volume to cache: %s", exc)

    def file_path(self, file: FileId) -> Path | None:
        """Location of an audio file: two hex digits of directory, then the rest."""
        if self._audio_location is None:
            return None
        name = file.to_base16()
        return self._audio_location / name[:2] / name[2:]

    def file(self, file: FileId) -> BinaryIO | None:
        """Open a cached audio file for reading, or return None."""
        path = self.file_path(file)
        if path is None:
            return None
        try:
            return path.open("rb")
        except FileNotFoundError:
            return None
        except OSError as exc:
            log.warning("Error reading file from cache: %s", exc)
            return None

    @staticmethod
    def _write(path: Path, contents: BinaryIO) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as out:
            shutil.copyfileobj(contents, out)

    def save_file(self, file: FileId, contents: BinaryIO) -> None:
        """Copy ``contents`` into the cache; on a full disk, flush and retry once."""
        path = self.file_path(file)
        if path is None or self._audio_location is None:
            return
        try:
            self._write(path, contents)
        except OSError as exc:
            if exc.errno == errno.ENOSPC:
                log.info("An error occured while writing to cache, trying to flush the cache")
                try:
                    shutil.rmtree(self._audio_location)
                    self._write(path, contents)
                    return
                except OSError:
                    pass
            log.warning("Cannot save file to cache: %s", exc)

    def remove_file(self, file: FileId) -> bool:
        """Remove a cached audio file; return whether it was removed."""
        path = self.file_path(file)
        if path is None:
            return False
        try:
            path.unlink()
        except OSError as exc:
            log.warning("Unable to remove file from cache: %s", exc)
            return False
        return True