import io

from respotcore.authentication import Credentials
from respotcore.cache import Cache
from respotcore.spotify_id import FileId

FILE_ID = FileId(bytes(range(20)))


def test_credentials_round_trip(tmp_path):
    cache = Cache(tmp_path / "system", None)
    password = "password"
    creds = Credentials.with_password("alice", password)
    cache.save_credentials(creds)
    assert cache.credentials() == creds
    assert (tmp_path / "system" / "credentials.json").exists()


def test_credentials_missing_and_corrupt(tmp_path):
    cache = Cache(tmp_path, None)
    assert cache.credentials() is None
    (tmp_path / "credentials.json").write_text("{not json")
    assert cache.credentials() is None


def test_no_system_location(tmp_path):
    cache = Cache(None, None)
    cache.save_volume(10)
    assert cache.volume() is None
    assert cache.credentials() is None


def test_volume_round_trip(tmp_path):
    cache = Cache(tmp_path, None)
    assert cache.volume() is None
    cache.save_volume(50)
    assert cache.volume() == 50
    assert (tmp_path / "volume").read_text() == "50"


def test_volume_invalid(tmp_path):
    cache = Cache(tmp_path, None)
    (tmp_path / "volume").write_text("abc")
    assert cache.volume() is None
    (tmp_path / "volume").write_text("70000")
    assert cache.volume() is None


def test_file_path_layout(tmp_path):
    cache = Cache(None, tmp_path / "audio")
    name = FILE_ID.to_base16()
    assert cache.file_path(FILE_ID) == tmp_path / "audio" / name[:2] / name[2:]


def test_save_and_read_file(tmp_path):
    cache = Cache(None, tmp_path / "audio")
    assert cache.file(FILE_ID) is None
    cache.save_file(FILE_ID, io.BytesIO(b"audio data"))
    with cache.file(FILE_ID) as fh:
        assert fh.read() == b"audio data"


def test_remove_file(tmp_path):
    cache = Cache(None, tmp_path / "audio")
    assert cache.remove_file(FILE_ID) is False
    cache.save_file(FILE_ID, io.BytesIO(b"x"))
    assert cache.remove_file(FILE_ID) is True
    assert cache.file(FILE_ID) is None


def test_no_audio_location():
    cache = Cache(None, None)
    assert cache.file_path(FILE_ID) is None
    assert cache.file(FILE_ID) is None
    assert cache.remove_file(FILE_ID) is False