import logging
import os

import pytest

from faceswap.errors import CleanupWarning
from faceswap.temp_resources import TempResourceTracker


def _touch(path):
    path.write_bytes(b"x")
    return str(path)


def test_release_all_deletes_every_tracked_file(tmp_path):
    scope = TempResourceTracker().begin()
    paths = [scope.track(_touch(tmp_path / f"{i}.png")) for i in range(3)]
    assert scope.remaining == paths

    assert scope.release_all() == []
    assert scope.remaining == []
    assert not any(os.path.exists(p) for p in paths)


def test_one_failing_delete_does_not_stop_the_others(tmp_path, caplog):
    paths = [_touch(tmp_path / f"{i}.png") for i in range(3)]
    attempted = []

    def remover(path):
        attempted.append(path)
        if path == paths[1]:
            raise PermissionError("locked")
        os.remove(path)

    scope = TempResourceTracker(remover=remover).begin()
    for p in paths:
        scope.track(p)

    with caplog.at_level(logging.WARNING, logger="faceswap.temp_resources"):
        warnings = scope.release_all()

    assert attempted == paths
    assert not os.path.exists(paths[0])
    assert os.path.exists(paths[1])
    assert not os.path.exists(paths[2])
    assert len(warnings) == 1
    assert isinstance(warnings[0], CleanupWarning)
    assert warnings[0].handle == paths[1]
    assert isinstance(warnings[0].cause, PermissionError)
    assert scope.remaining == []
    assert any(paths[1] in r.getMessage() for r in caplog.records)


def test_already_removed_file_is_not_a_warning(tmp_path):
    scope = TempResourceTracker().begin()
    scope.track(str(tmp_path / "never-written.png"))
    assert scope.release_all() == []
    assert scope.remaining == []


def test_release_happens_once(tmp_path):
    calls = []
    scope = TempResourceTracker(remover=calls.append).begin()
    scope.track(str(tmp_path / "a.png"))
    scope.release_all()
    scope.release_all()
    assert calls == [str(tmp_path / "a.png")]
    assert scope.released


def test_context_manager_releases_on_error(tmp_path):
    path = _touch(tmp_path / "a.png")
    with pytest.raises(ValueError):
        with TempResourceTracker().begin() as scope:
            scope.track(path)
            raise ValueError("boom")
    assert not os.path.exists(path)
    assert scope.remaining == []


def test_scopes_do_not_share_handles(tmp_path):
    tracker = TempResourceTracker()
    first, second = tracker.begin(), tracker.begin()
    a = first.track(_touch(tmp_path / "a.png"))
    b = second.track(_touch(tmp_path / "b.png"))

    first.release_all()
    assert not os.path.exists(a)
    assert os.path.exists(b)
    assert second.remaining == [b]


def test_cannot_track_after_release(tmp_path):
    scope = TempResourceTracker().begin()
    scope.release_all()
    with pytest.raises(RuntimeError):
        scope.track(str(tmp_path / "late.png"))


def test_unexpected_delete_error_neither_stops_cleanup_nor_masks_the_run_error(caplog):
    attempted = []

    def remover(path):
        attempted.append(path)
        if path == "b":
            raise RuntimeError("boom")

    with caplog.at_level(logging.WARNING, logger="faceswap.temp_resources"):
        with pytest.raises(ValueError, match="original failure"):
            with TempResourceTracker(remover=remover).begin() as scope:
                for handle in ("a", "b", "c"):
                    scope.track(handle)
                raise ValueError("original failure")

    assert attempted == ["a", "b", "c"]
    assert scope.remaining == []
    assert any("boom" in r.getMessage() for r in caplog.records)


def test_unexpected_delete_error_becomes_a_cleanup_warning():
    def remover(path):
        raise RuntimeError("boom")

    scope = TempResourceTracker(remover=remover).begin()
    scope.track("a")
    (warning,) = scope.release_all()
    assert isinstance(warning.cause, RuntimeError)
    assert warning.handle == "a"
