import pytest

from faceswap.errors import FaceSwapError
from faceswap.storage import LocalBlobStore, processed_key


def test_put_then_get(tmp_path):
    store = LocalBlobStore(str(tmp_path))
    url = store.put("processed/a.jpg", b"data")
    assert url == "/image_library/processed/a.jpg"
    assert (tmp_path / "processed" / "a.jpg").read_bytes() == b"data"
    assert store.get("processed/a.jpg") == b"data"


def test_get_missing_key(tmp_path):
    with pytest.raises(FileNotFoundError):
        LocalBlobStore(str(tmp_path)).get("nope.jpg")


def test_keys_cannot_escape_the_base_dir(tmp_path):
    store = LocalBlobStore(str(tmp_path / "root"))
    with pytest.raises(FaceSwapError):
        store.put("../outside.jpg", b"x")


def test_processed_key_uses_basename():
    assert processed_key("uploads/2024/party.jpg", "processed") == "processed/party.jpg"
    assert processed_key("party.jpg", "done/") == "done/party.jpg"
