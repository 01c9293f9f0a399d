"""Persistent record of unfinished uploads, used to resume them."""

from __future__ import annotations

import base64
import json
import logging
import os
import time
from dataclasses import dataclass, field
from typing import Any

UPLOADING_FILE_NAME = "pcs_uploading.json"

_log = logging.getLogger(__name__)


def _encode_bytes(value: bytes | None) -> str | None:
    return None if value is None else base64.b64encode(value).decode("ascii")


def _decode_bytes(value: Any) -> bytes | None:
    if value is None:
        return None
    return base64.b64decode(value)


@dataclass
class LocalFileMeta:
    """Identity and checksums of a local file being uploaded."""

    path: str = ""
    length: int = 0
    md5: bytes | None = None
    slice_md5: bytes | None = None
    crc32: int = 0
    mod_time: int = 0

    def complete_abs_path(self) -> None:
        """Make ``path`` absolute."""
        if not os.path.isabs(self.path):
            self.path = os.path.abspath(self.path)

    def equal_length_md5(self, other: LocalFileMeta) -> bool:
        """Tell whether both files have the same length and md5."""
        return self.length == other.length and (self.md5 or b"") == (other.md5 or b"")


def _meta_to_dict(meta: LocalFileMeta) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if meta.path:
        data["path"] = meta.path
    if meta.length:
        data["length"] = meta.length
    if meta.slice_md5:
        data["slicemd5"] = _encode_bytes(meta.slice_md5)
    if meta.md5:
        data["md5"] = _encode_bytes(meta.md5)
    if meta.crc32:
        data["crc32"] = meta.crc32
    data["modtime"] = meta.mod_time
    return data


def _meta_from_dict(data: dict[str, Any]) -> LocalFileMeta:
    return LocalFileMeta(
        path=str(data.get("path", "")),
        length=int(data.get("length", 0)),
        md5=_decode_bytes(data.get("md5")),
        slice_md5=_decode_bytes(data.get("slicemd5")),
        crc32=int(data.get("crc32", 0)),
        mod_time=int(data.get("modtime", 0)),
    )


@dataclass
class Uploading:
    """An unfinished upload: the file and the uploader's saved state."""

    meta: LocalFileMeta
    state: Any = None

    def _matches(self, meta: LocalFileMeta) -> bool:
        return self.meta.equal_length_md5(meta) or self.meta.path == meta.path


@dataclass
class _Contents:
    uploading_list: list[Uploading] = field(default_factory=list)
    timestamp: int = 0


class UploadingDatabase:
    """JSON file listing unfinished uploads."""

    def __init__(self, path: str) -> None:
        self.path = path
        self.uploading_list: list[Uploading] = []
        self.timestamp = 0
        fd = os.open(path, os.O_CREAT | os.O_RDWR, 0o600)
        self._file = os.fdopen(fd, "r+b")
        try:
            raw = self._file.read()
            if raw:
                self._load(json.loads(raw.decode("utf-8")))
        except Exception:
            self._file.close()
            raise

    def _load(self, data: Any) -> None:
        if not isinstance(data, dict):
            raise ValueError("uploading database must be a JSON object")
        entries = data.get("upload_state") or []
        if not isinstance(entries, list):
            raise ValueError("upload_state must be a list")
        self.uploading_list = [
            Uploading(meta=_meta_from_dict(item), state=item.get("state"))
            for item in entries
            if isinstance(item, dict)
        ]
        self.timestamp = int(data.get("timestamp", 0))

    def save(self) -> None:
        """Write the database to its file."""
        if self._file.closed:
            raise ValueError("data file is closed")
        self.timestamp = int(time.time())
        payload = {
            "upload_state": [
                {**_meta_to_dict(entry.meta), "state": entry.state}
                for entry in self.uploading_list
            ],
            "timestamp": self.timestamp,
        }
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        self._file.seek(0)
        self._file.write(data)
        self._file.truncate()
        self._file.flush()

    def update_uploading(self, meta: LocalFileMeta | None, state: Any) -> None:
        """Record ``state`` for the file, adding an entry if it is new."""
        if meta is None:
            return
        meta.complete_abs_path()
        for entry in self.uploading_list:
            if entry._matches(meta):
                entry.state = state
                return
        self.uploading_list.append(Uploading(meta=meta, state=state))

    def delete(self, meta: LocalFileMeta | None) -> bool:
        """Remove the entry for the file; return whether one was removed."""
        if meta is None:
            return False
        meta.complete_abs_path()
        for index, entry in enumerate(self.uploading_list):
            if entry._matches(meta):
                del self.uploading_list[index]
                return True
        return False

    def search(self, meta: LocalFileMeta | None) -> Any:
        """Return the saved state for the file, or None.

        A path match copies the stored checksums into ``meta``; a path match
        with a different length drops the stale entry.
        """
        if meta is None:
            return None
        meta.complete_abs_path()
        self._clear_mod_time_change()
        for entry in self.uploading_list:
            if entry.meta.equal_length_md5(meta):
                return entry.state
            if entry.meta.path == meta.path:
                if meta.length != entry.meta.length:
                    self.delete(meta)
                    return None
                meta.md5 = entry.meta.md5
                meta.slice_md5 = entry.meta.slice_md5
                return entry.state
        return None

    def _clear_mod_time_change(self) -> None:
        kept: list[Uploading] = []
        for entry in self.uploading_list:
            if entry.meta.mod_time == -1:
                kept.append(entry)
                continue
            try:
                mtime = int(os.stat(entry.meta.path).st_mtime)
            except OSError as exc:
                _log.warning("clear invalid file path: %s, err: %s", entry.meta.path, exc)
                continue
            if mtime != entry.meta.mod_time:
                _log.info("clear modified file path: %s", entry.meta.path)
                continue
            kept.append(entry)
        self.uploading_list = kept

    def close(self) -> None:
        """Close the database file."""
        if not self._file.closed:
            self._file.close()

    def __enter__(self) -> UploadingDatabase:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()