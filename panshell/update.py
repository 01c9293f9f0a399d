"""Release lookup and in-place replacement of the installed program files."""

from __future__ import annotations

import logging
import os
import re
import shutil
import zipfile
from dataclasses import dataclass, field
from typing import IO, Any

PROGRAM_NAME = "panshell"

_log = logging.getLogger(__name__)

_ARCH_PATTERNS = {
    "amd64": "(amd64|x86_64|x64)",
    "386": "(386|x86)",
    "arm": "(armv5|armv7|arm)",
    "arm64": "arm64",
    "mips": "mips",
    "mips64": "mips64",
    "mipsle": "(mipsle|mipsel)",
    "mips64le": "(mips64le|mips64el)",
}


@dataclass
class AssetInfo:
    """A downloadable file attached to a release."""

    name: str = ""
    content_type: str = ""
    state: str = ""
    size: int = 0
    browser_download_url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AssetInfo:
        return cls(
            name=str(data.get("name", "")),
            content_type=str(data.get("content_type", "")),
            state=str(data.get("state", "")),
            size=int(data.get("size", 0)),
            browser_download_url=str(data.get("browser_download_url", "")),
        )


@dataclass
class ReleaseInfo:
    """A published release and its assets."""

    tag_name: str = ""
    assets: list[AssetInfo] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReleaseInfo:
        """Build a release from its decoded JSON description."""
        if not isinstance(data, dict):
            raise ValueError("release info must be a JSON object")
        assets = data.get("assets") or []
        if not isinstance(assets, list):
            raise ValueError("assets must be a list")
        return cls(
            tag_name=str(data.get("tag_name", "")),
            assets=[AssetInfo.from_dict(item) for item in assets if item is not None],
        )


def is_newer_release(version: str, tag_name: str) -> bool:
    """Tell whether ``tag_name`` is a stable release newer than ``version``.

    Beta tags and tags not starting with "v" are ignored; versions are
    compared as strings.
    """
    if "Beta" in tag_name or not tag_name.startswith("v"):
        return False
    return version < tag_name


def asset_pattern(tag_name: str, goos: str, goarch: str) -> re.Pattern[str]:
    """Return the pattern matching the archive name for a platform."""
    parts = [f"{PROGRAM_NAME}-{tag_name}-{goos}-.*?"]
    if goos == "darwin" and goarch in ("arm", "arm64"):
        parts.append("arm")
    else:
        parts.append(_ARCH_PATTERNS.get(goarch, goarch))
    parts.append(r"\.zip")
    return re.compile("".join(parts))


def select_assets(release: ReleaseInfo, goos: str, goarch: str) -> list[AssetInfo]:
    """Return the uploaded assets of ``release`` built for the platform."""
    pattern = asset_pattern(release.tag_name, goos, goarch)
    return [
        asset
        for asset in release.assets
        if asset is not None and asset.state == "uploaded" and pattern.search(asset.name)
    ]


def replace_file(target_path: str, src: IO[bytes]) -> bool:
    """Replace the file at ``target_path`` with the contents of ``src``.

    The file keeps its permissions. Returns False, leaving everything
    untouched, when the target does not exist.
    """
    try:
        mode = os.stat(target_path).st_mode & 0o7777
    except OSError as exc:
        _log.warning("Warning: %s", exc)
        return False

    old_path = os.path.join(os.path.dirname(target_path), "old" + os.path.basename(target_path))
    os.rename(target_path, old_path)

    fd = os.open(target_path, os.O_CREAT | os.O_WRONLY, mode)
    new_file = os.fdopen(fd, "wb")
    try:
        shutil.copyfileobj(src, new_file)
    finally:
        try:
            new_file.close()
        except OSError as exc:
            _log.warning("Warning: 关闭文件发生错误: %s", exc)

    try:
        os.remove(old_path)
    except OSError as exc:
        _log.warning("Warning: 移除旧文件发生错误: %s", exc)
    return True


def install_from_zip(data: bytes, exec_dir: str, executable: str) -> int:
    """Install the files of a release archive over the current installation.

    The first path component of each entry is dropped; the entry named after
    the program replaces ``executable``, the others go into ``exec_dir``.
    Returns the number of entries handled without error and raises
    RuntimeError when none were.
    """
    import io

    file_count = 0
    error_count = 0
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        for entry in archive.infolist():
            if entry.is_dir():
                continue
            try:
                handle = archive.open(entry)
            except (zipfile.BadZipFile, OSError, RuntimeError, NotImplementedError) as exc:
                _log.error("解析 zip 文件错误: %s", exc)
                continue

            file_count += 1
            name = entry.filename[entry.filename.find("/") + 1:]
            target = executable if name == PROGRAM_NAME else os.path.join(exec_dir, name)
            try:
                with handle:
                    replace_file(target, handle)
            except (OSError, zipfile.BadZipFile) as exc:
                error_count += 1
                _log.error("发生错误, zip 路径: %s, 错误: %s", entry.filename, exc)

    if error_count == file_count:
        raise RuntimeError("更新失败")
    return file_count - error_count