"""Lines written by the export command, which the shell can later replay."""

from __future__ import annotations

import datetime as _dt
import posixpath

COMMAND_NAME = "panshell"
EXPORT_PREFIX = "panshell_export_"
EXPORT_SUFFIX = ".txt"

_BEIJING = _dt.timezone(_dt.timedelta(hours=8))
_TIME_LAYOUT = "%Y%m%d%H%M%S"


def _clean(path: str) -> str:
    if not path:
        return ""
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _join(*parts: str) -> str:
    present = [part for part in parts if part]
    if not present:
        return ""
    return _clean("/".join(present))


def change_root_path(dst_root_path: str, dst_path: str, src_root_path: str) -> str:
    """Move ``dst_path`` from under ``dst_root_path`` to under ``src_root_path``.

    An empty ``src_root_path`` leaves the path unchanged.
    """
    if not src_root_path:
        return dst_path
    relative = dst_path[len(dst_root_path):] if dst_path.startswith(dst_root_path) else dst_path
    return _join(src_root_path, relative)


def export_filename(now: _dt.datetime | None = None) -> str:
    """Return the default export file name, stamped with Beijing time."""
    stamp = _dt.datetime.now(_BEIJING) if now is None else now.astimezone(_BEIJING)
    return f"{EXPORT_PREFIX}{stamp.strftime(_TIME_LAYOUT)}{EXPORT_SUFFIX}"


def mkdir_line(path: str) -> str:
    """Return the command line that recreates the empty directory ``path``."""
    return f'{COMMAND_NAME} mkdir "{path}"\n'


def rapidupload_line(length: int, md5: str, slice_md5: str, crc32: str, path: str) -> str:
    """Return the command line that restores a file by its checksums."""
    return (
        f"{COMMAND_NAME} rapidupload -length={length} -md5={md5} "
        f'-slicemd5={slice_md5} -crc32={crc32} "{path}"\n'
    )