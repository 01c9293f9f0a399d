"""Checks on downloaded files: checksum verification and resume detection."""

from __future__ import annotations

import hashlib
import os

DOWNLOAD_SUFFIX = ".panshell-downloading"
_READ_SIZE = 256 * 1024

# (size, md5) of placeholder files served instead of banned content.
_SKIP_MD5 = frozenset({
    (1749504, "48bb9b0361dc9c672f3dc7b3ffcfde97"),
    (120, "6c1b84914588d09a6e5ec43605557457"),
})


class ChecksumError(Exception):
    """Base class for download verification failures."""

    default_message = "checksum error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class ChecksumNotSupportedError(ChecksumError):
    """The file cannot be verified."""

    default_message = "该文件不支持校验"


class ChecksumMismatchError(ChecksumError):
    """The local file's md5 differs from the server's record."""

    default_message = "该文件校验失败, 文件md5值与服务器记录的不匹配"


class FileBannedError(ChecksumError):
    """The server replaced the file with a placeholder."""

    default_message = "该文件可能是违规文件, 不支持校验"


def is_skip_md5_checksum(size: int, md5: str) -> bool:
    """Tell whether ``size`` and ``md5`` identify a known placeholder file."""
    return (size, md5) in _SKIP_MD5


def check_file_valid(file_path: str, expected_md5: str, block_count: int) -> None:
    """Verify the file at ``file_path`` against ``expected_md5``.

    Only files stored as a single block can be verified.
    """
    if block_count != 1:
        raise ChecksumNotSupportedError()

    digest = hashlib.md5()
    length = 0
    with open(file_path, "rb") as handle:
        while chunk := handle.read(_READ_SIZE):
            digest.update(chunk)
            length += len(chunk)

    actual = digest.hexdigest()
    if actual != expected_md5:
        if is_skip_md5_checksum(length, actual):
            raise FileBannedError()
        raise ChecksumMismatchError()


def file_exist(path: str) -> bool:
    """Tell whether a finished download exists at ``path``.

    The file must be non-empty and have no resume-state file beside it.
    """
    try:
        size = os.stat(path).st_size
    except OSError:
        return False
    if size == 0:
        return False
    return not os.path.exists(path + DOWNLOAD_SUFFIX)


def download_print_format(load: int) -> str:
    """Return the progress line template for ``load`` concurrent downloads.

    Fields: id, downloaded, total, speed, elapsed, left.
    """
    if load <= 1:
        return "\r[{id}] ↓ {downloaded}/{total} {speed}/s in {elapsed}, left {left} ............"
    return "[{id}] ↓ {downloaded}/{total} {speed}/s in {elapsed}, left {left} ...\n"