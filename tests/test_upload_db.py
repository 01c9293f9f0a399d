import json
import os

import pytest

from panshell.upload_db import LocalFileMeta, UploadingDatabase


def _real_file(tmp_path, name, content=b"hello"):
    path = tmp_path / name
    path.write_bytes(content)
    return LocalFileMeta(
        path=str(path),
        length=len(content),
        mod_time=int(os.stat(path).st_mtime),
    )


def test_equal_length_md5():
    a = LocalFileMeta(path="/x", length=5, md5=b"\x01\x02")
    b = LocalFileMeta(path="/y", length=5, md5=b"\x01\x02")
    c = LocalFileMeta(path="/x", length=6, md5=b"\x01\x02")
    d = LocalFileMeta(path="/x", length=5, md5=b"\x03")
    assert a.equal_length_md5(b)
    assert not a.equal_length_md5(c)
    assert not a.equal_length_md5(d)


def test_complete_abs_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    meta = LocalFileMeta(path="file.bin")
    meta.complete_abs_path()
    assert meta.path == os.path.join(str(tmp_path), "file.bin")
    assert os.path.isabs(meta.path)


def test_save_and_reload_round_trip(tmp_path):
    db_path = str(tmp_path / "db.json")
    meta = _real_file(tmp_path, "a.bin")
    meta.md5 = b"\x00\xff\x10"
    meta.slice_md5 = b"\xaa\xbb"
    state = {"blocks": [1, 2, 3]}
    with UploadingDatabase(db_path) as db:
        db.update_uploading(meta, state)
        db.save()
        assert db.timestamp > 0
    with UploadingDatabase(db_path) as db:
        assert len(db.uploading_list) == 1
        entry = db.uploading_list[0]
        assert entry.meta == meta
        assert entry.state == state


def test_saved_file_keys(tmp_path):
    db_path = tmp_path / "db.json"
    with UploadingDatabase(str(db_path)) as db:
        db.update_uploading(_real_file(tmp_path, "a.bin"), None)
        db.save()
    data = json.loads(db_path.read_text(encoding="utf-8"))
    assert set(data) == {"upload_state", "timestamp"}
    assert data["upload_state"][0]["path"] == str(tmp_path / "a.bin")


def test_update_replaces_state_for_same_path(tmp_path):
    with UploadingDatabase(str(tmp_path / "db.json")) as db:
        meta = _real_file(tmp_path, "a.bin")
        db.update_uploading(meta, {"n": 1})
        db.update_uploading(LocalFileMeta(path=meta.path, length=99), {"n": 2})
        assert len(db.uploading_list) == 1
        assert db.uploading_list[0].state == {"n": 2}


def test_update_none_meta_is_ignored(tmp_path):
    with UploadingDatabase(str(tmp_path / "db.json")) as db:
        db.update_uploading(None, {"n": 1})
        assert db.uploading_list == []


def test_delete(tmp_path):
    with UploadingDatabase(str(tmp_path / "db.json")) as db:
        meta = _real_file(tmp_path, "a.bin")
        db.update_uploading(meta, None)
        assert db.delete(LocalFileMeta(path=meta.path, length=meta.length)) is True
        assert db.uploading_list == []
        assert db.delete(meta) is False
        assert db.delete(None) is False


def test_search_by_path_copies_checksums(tmp_path):
    with UploadingDatabase(str(tmp_path / "db.json")) as db:
        stored = _real_file(tmp_path, "a.bin")
        stored.md5 = b"\x01" * 16
        stored.slice_md5 = b"\x02" * 16
        db.update_uploading(stored, {"part": 7})
        query = LocalFileMeta(path=stored.path, length=stored.length, mod_time=stored.mod_time)
        assert db.search(query) == {"part": 7}
        assert query.md5 == stored.md5
        assert query.slice_md5 == stored.slice_md5


def test_search_by_length_md5(tmp_path):
    with UploadingDatabase(str(tmp_path / "db.json")) as db:
        stored = _real_file(tmp_path, "a.bin")
        stored.md5 = b"\x05" * 16
        db.update_uploading(stored, {"part": 1})
        query = LocalFileMeta(path=str(tmp_path / "other.bin"), length=stored.length, md5=stored.md5)
        assert db.search(query) == {"part": 1}


def test_search_drops_entry_with_different_length(tmp_path):
    with UploadingDatabase(str(tmp_path / "db.json")) as db:
        stored = _real_file(tmp_path, "a.bin")
        stored.md5 = b"\x05" * 16
        db.update_uploading(stored, {"part": 1})
        query = LocalFileMeta(path=stored.path, length=stored.length + 1)
        assert db.search(query) is None
        assert db.uploading_list == []


def test_search_clears_missing_and_modified_files(tmp_path):
    with UploadingDatabase(str(tmp_path / "db.json")) as db:
        missing = LocalFileMeta(path=str(tmp_path / "gone.bin"), length=3, mod_time=5)
        modified = _real_file(tmp_path, "b.bin")
        modified.mod_time += 1000
        kept = LocalFileMeta(path=str(tmp_path / "ignored.bin"), length=4, mod_time=-1)
        for meta in (missing, modified, kept):
            db.update_uploading(meta, {"p": meta.path})
        assert db.search(LocalFileMeta(path=str(tmp_path / "none"), length=123)) is None
        assert [entry.meta.path for entry in db.uploading_list] == [kept.path]


def test_search_none_meta(tmp_path):
    with UploadingDatabase(str(tmp_path / "db.json")) as db:
        assert db.search(None) is None


def test_invalid_contents_raise(tmp_path):
    db_path = tmp_path / "db.json"
    db_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        UploadingDatabase(str(db_path))


def test_save_after_close_raises(tmp_path):
    db = UploadingDatabase(str(tmp_path / "db.json"))
    db.close()
    with pytest.raises(ValueError):
        db.save()


def test_new_database_is_empty_and_file_created(tmp_path):
    db_path = tmp_path / "db.json"
    with UploadingDatabase(str(db_path)) as db:
        assert db.uploading_list == []
        assert db.timestamp == 0
    assert db_path.exists()